"""Recipe generation, modification and the per-user recipe library."""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .claude_service import CompletionClient
from .config import Settings
from .errors import NotFound, RecipeValidationError, UpstreamUnavailable
from .history import (
    add_recent_recipe,
    load_recent_history,
    prune_recent_recipes,
    summarize_history,
)
from .models import (
    PantryItem,
    Recipe,
    RecentRecipe,
    RecipeModification,
    SavedRecipe,
    User,
    UserPreferences,
)
from .prompt_builder import (
    PreferenceSnapshot,
    build_prompt,
    build_regeneration_prompt,
    build_suggestion_prompt,
    load_prompt,
)
from .rate_limiter import RateLimiter, today
from .schemas import GeneratedRecipe, GenerationRequest, GenerationType
from .vocabulary import DEFAULT_VOCABULARY, PromptVocabulary

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    recipe: Recipe
    preferences_applied: bool = False
    preferences_overridden: list[str] = field(default_factory=list)


# =============================================================================
# Serialization
# =============================================================================


def serialize_recipe(recipe: Recipe, **extra) -> dict:
    """Recipe row as the camelCase JSON the frontend expects."""
    data = {
        "id": recipe.id,
        "title": recipe.title,
        "description": recipe.description,
        "prepTime": recipe.prep_time,
        "cookTime": recipe.cook_time,
        "totalTime": recipe.total_time,
        "servings": recipe.servings,
        "difficulty": recipe.difficulty,
        "cuisine": recipe.cuisine,
        "ingredients": recipe.ingredients or [],
        "instructions": recipe.instructions or [],
        "tips": recipe.tips,
        "customColor": recipe.custom_color,
        "customLabel": recipe.custom_label,
        "createdAt": recipe.created_at.isoformat() if recipe.created_at else None,
        "updatedAt": recipe.updated_at.isoformat() if recipe.updated_at else None,
    }
    data.update(extra)
    return data


def serialize_modification(entry: RecipeModification) -> dict:
    return {
        "id": entry.id,
        "recipeId": entry.recipe_id,
        "userQuery": entry.user_query,
        "aiResponse": entry.ai_response,
        "applied": entry.applied,
        "createdAt": entry.created_at.isoformat() if entry.created_at else None,
    }


# =============================================================================
# Lookups
# =============================================================================


def get_preferences(db: Session, user_id: str) -> UserPreferences | None:
    return db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()


def get_visible_recipe(db: Session, user_id: str, recipe_id: int) -> Recipe:
    """Load a recipe that is in the user's recent or saved list.

    Raises:
        NotFound: If the recipe does not exist or is not linked to the user.
    """
    recipe = db.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFound("Recipe not found")

    linked = (
        db.query(RecentRecipe.id)
        .filter(RecentRecipe.user_id == user_id, RecentRecipe.recipe_id == recipe_id)
        .first()
        or db.query(SavedRecipe.id)
        .filter(SavedRecipe.user_id == user_id, SavedRecipe.recipe_id == recipe_id)
        .first()
    )
    if not linked:
        raise NotFound("Recipe not found")
    return recipe


def _validate_payload(payload: dict) -> GeneratedRecipe:
    try:
        return GeneratedRecipe.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Completion payload failed validation: {e.error_count()} errors")
        raise RecipeValidationError(
            "Generated recipe was missing required fields", payload=payload
        ) from e


# =============================================================================
# Generation
# =============================================================================


def generate_recipe(
    db: Session,
    user: User,
    request: GenerationRequest,
    client: CompletionClient,
    limiter: RateLimiter,
    settings: Settings,
    vocabulary: PromptVocabulary = DEFAULT_VOCABULARY,
    rng=random,
) -> GenerationResult:
    """Generate, validate and store a new recipe for the user.

    Order matters: the cap is checked before the completion call, the
    counter is charged once the completion call has succeeded, and the
    recipe is persisted only after its payload validates.

    Raises:
        RateLimitExceeded: Daily cap already reached.
        UpstreamUnavailable: Completion API or datastore failure.
        RecipeValidationError: Completion payload unusable.
    """
    day = today(settings.user_timezone)
    limiter.ensure_allowed(user.id, day)

    stored = get_preferences(db, user.id)
    max_recent = stored.max_recent_recipes if stored else settings.default_max_recent_recipes

    snapshot = None
    if request.use_preferences:
        if stored:
            snapshot = PreferenceSnapshot.from_models(stored, user)
        else:
            logger.info(f"User {user.id} asked for preferences but has none saved")

    if request.type == GenerationType.PANTRY and not request.pantry_items:
        names = [
            name
            for (name,) in db.query(PantryItem.name)
            .filter(PantryItem.user_id == user.id)
            .order_by(PantryItem.created_at.desc())
        ]
        request = request.model_copy(update={"pantry_items": names})

    history = summarize_history(
        load_recent_history(db, user.id, settings.recent_history_window), vocabulary
    )
    built = build_prompt(request, snapshot, history, vocabulary, rng)
    logger.debug(f"Generation prompt for {user.id}:\n{built.prompt}")

    payload = client.complete_json(
        load_prompt("generation_system"),
        built.prompt,
        temperature=settings.generation_temperature,
    )
    limiter.record_generation(user.id, day)

    generated = _validate_payload(payload)

    try:
        recipe = Recipe(**generated.to_columns())
        db.add(recipe)
        db.flush()
        add_recent_recipe(db, user.id, recipe)
        prune_recent_recipes(db, user.id, max_recent)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Failed to store generated recipe: {e}")
        raise UpstreamUnavailable("Failed to save recipe") from e

    db.refresh(recipe)
    logger.info(
        f"Generated recipe {recipe.id} ('{recipe.title}') for {user.id}, "
        f"type={request.type.value}, preferences={snapshot is not None}"
    )
    return GenerationResult(
        recipe=recipe,
        preferences_applied=snapshot is not None,
        preferences_overridden=built.overrides,
    )


# =============================================================================
# Modification
# =============================================================================


def suggest_modification(
    db: Session,
    user: User,
    recipe_id: int,
    query: str,
    client: CompletionClient,
    settings: Settings,
) -> str:
    """Ask for a free-text modification suggestion and log it.

    The recipe itself is not changed.
    """
    recipe = get_visible_recipe(db, user.id, recipe_id)

    suggestion = client.complete_text(
        load_prompt("suggestion_system"),
        build_suggestion_prompt(recipe, query),
        temperature=settings.suggestion_temperature,
        max_tokens=settings.suggestion_max_tokens,
    )

    try:
        db.add(
            RecipeModification(
                recipe_id=recipe.id,
                user_id=user.id,
                user_query=query,
                ai_response=suggestion,
                applied=False,
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Failed to log modification for recipe {recipe_id}: {e}")
        raise UpstreamUnavailable("Failed to save modification") from e
    return suggestion


def regenerate_recipe(
    db: Session,
    user: User,
    recipe_id: int,
    modifications: str,
    client: CompletionClient,
    settings: Settings,
) -> Recipe:
    """Rewrite a recipe in place with the requested modifications applied.

    The recipe keeps its id; every content column is replaced.
    """
    recipe = get_visible_recipe(db, user.id, recipe_id)

    payload = client.complete_json(
        load_prompt("regeneration_system"),
        build_regeneration_prompt(recipe, modifications),
        temperature=settings.regeneration_temperature,
    )
    generated = _validate_payload(payload)

    try:
        for column, value in generated.to_columns().items():
            setattr(recipe, column, value)
        recipe.updated_at = datetime.utcnow()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Failed to store regenerated recipe {recipe_id}: {e}")
        raise UpstreamUnavailable("Failed to save recipe") from e
    db.refresh(recipe)

    logger.info(f"Regenerated recipe {recipe.id} for {user.id}")
    return recipe


def list_modifications(db: Session, user_id: str, recipe_id: int) -> list[RecipeModification]:
    """The user's modification history for a recipe, newest first."""
    get_visible_recipe(db, user_id, recipe_id)
    return (
        db.query(RecipeModification)
        .filter(RecipeModification.user_id == user_id, RecipeModification.recipe_id == recipe_id)
        .order_by(RecipeModification.created_at.desc(), RecipeModification.id.desc())
        .all()
    )


# =============================================================================
# Saved recipes
# =============================================================================


def save_recipe(db: Session, user_id: str, recipe_id: int) -> None:
    """Add a recipe to the user's saved list. Saving twice is a no-op."""
    get_visible_recipe(db, user_id, recipe_id)
    exists = (
        db.query(SavedRecipe.id)
        .filter(SavedRecipe.user_id == user_id, SavedRecipe.recipe_id == recipe_id)
        .first()
    )
    if not exists:
        db.add(SavedRecipe(user_id=user_id, recipe_id=recipe_id))
    db.commit()


def unsave_recipe(db: Session, user_id: str, recipe_id: int) -> None:
    db.query(SavedRecipe).filter(
        SavedRecipe.user_id == user_id, SavedRecipe.recipe_id == recipe_id
    ).delete()
    db.commit()


def list_saved_recipes(db: Session, user_id: str) -> list[Recipe]:
    links = (
        db.query(SavedRecipe)
        .filter(SavedRecipe.user_id == user_id)
        .order_by(SavedRecipe.created_at.desc(), SavedRecipe.id.desc())
        .all()
    )
    return [link.recipe for link in links]


def customize_recipe(
    db: Session, user_id: str, recipe_id: int, changes: dict
) -> Recipe:
    """Set display color/label on a recipe the user has saved.

    Args:
        changes: Only the keys present are applied ("custom_color",
            "custom_label"); None clears a value.

    Raises:
        NotFound: If the user has not saved this recipe.
    """
    saved = (
        db.query(SavedRecipe)
        .filter(SavedRecipe.user_id == user_id, SavedRecipe.recipe_id == recipe_id)
        .first()
    )
    if not saved:
        raise NotFound("Recipe not found in saved")

    recipe = saved.recipe
    for column in ("custom_color", "custom_label"):
        if column in changes:
            setattr(recipe, column, changes[column])
    db.commit()
    db.refresh(recipe)
    return recipe
