"""Recipe endpoints: generation, usage, modification and the recipe library."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..claude_service import CompletionClient, get_completion_client
from ..config import Settings, get_settings
from ..database import get_db
from ..history import list_recent_recipes, remove_recent_recipe
from ..models import User
from ..rate_limiter import RateLimiter, get_rate_limiter, today
from ..recipe_service import (
    customize_recipe,
    generate_recipe,
    get_preferences,
    get_visible_recipe,
    list_modifications,
    list_saved_recipes,
    regenerate_recipe,
    save_recipe,
    serialize_modification,
    serialize_recipe,
    suggest_modification,
    unsave_recipe,
)
from ..schemas import CustomizeRequest, GenerationRequest, ModifyRequest, RegenerateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.post("/generate")
def generate(
    body: GenerationRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
    limiter: RateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_settings),
):
    """Generate a new recipe and add it to the caller's recent list."""
    result = generate_recipe(db, user, body, client, limiter, settings)

    extra = {"preferencesApplied": result.preferences_applied}
    if result.preferences_overridden:
        extra["preferencesOverridden"] = result.preferences_overridden
    return {"recipe": serialize_recipe(result.recipe, **extra)}


@router.get("/usage")
def usage(
    user: User = Depends(get_current_user),
    limiter: RateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_settings),
):
    """Today's generation usage."""
    return limiter.get_usage(user.id, today(settings.user_timezone))


@router.post("/modify")
def modify(
    body: ModifyRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
):
    """Suggest a modification without changing the recipe."""
    modification = suggest_modification(db, user, body.recipe_id, body.query, client, settings)
    return {"modification": modification}


@router.post("/regenerate")
def regenerate(
    body: RegenerateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
):
    """Rewrite a recipe in place with modifications applied."""
    recipe = regenerate_recipe(db, user, body.recipe_id, body.modifications, client, settings)
    return {"recipe": serialize_recipe(recipe)}


@router.get("/recent")
def recent(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """The caller's most recent recipes, flagged with whether each is saved."""
    preferences = get_preferences(db, user.id)
    limit = preferences.max_recent_recipes if preferences else settings.default_max_recent_recipes
    return {
        "recipes": [
            serialize_recipe(recipe, isSaved=is_saved)
            for recipe, is_saved in list_recent_recipes(db, user.id, limit)
        ]
    }


@router.get("/saved")
def saved(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"recipes": [serialize_recipe(r, isSaved=True) for r in list_saved_recipes(db, user.id)]}


@router.get("/{recipe_id}")
def get_recipe(
    recipe_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return {"recipe": serialize_recipe(get_visible_recipe(db, user.id, recipe_id))}


@router.get("/{recipe_id}/modifications")
def modifications(
    recipe_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    entries = list_modifications(db, user.id, recipe_id)
    return {"modifications": [serialize_modification(entry) for entry in entries]}


@router.post("/{recipe_id}/save")
def save(recipe_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    save_recipe(db, user.id, recipe_id)
    return {"success": True}


@router.delete("/{recipe_id}/save")
def unsave(recipe_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    unsave_recipe(db, user.id, recipe_id)
    return {"success": True}


@router.delete("/{recipe_id}/remove-recent")
def remove_recent(
    recipe_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    remove_recent_recipe(db, user.id, recipe_id)
    db.commit()
    return {"success": True}


@router.patch("/{recipe_id}/customize")
def customize(
    recipe_id: int,
    body: CustomizeRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Set the display color/label of a saved recipe."""
    changes = body.model_dump(include=body.model_fields_set)
    recipe = customize_recipe(db, user.id, recipe_id, changes)
    return {"recipe": serialize_recipe(recipe)}
