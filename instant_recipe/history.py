"""Recent-recipe history: the per-user log used to keep generations varied."""

import logging
from dataclasses import dataclass, field

from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import Recipe, RecentRecipe, SavedRecipe
from .vocabulary import DEFAULT_VOCABULARY, PromptVocabulary

logger = logging.getLogger(__name__)

# How many titles/cuisines are echoed back into the variety directive
VARIETY_SAMPLE_SIZE = 5


@dataclass(frozen=True)
class RecentRecipeSummary:
    """The parts of a recent recipe the prompt builder looks at."""

    title: str
    cuisine: str | None = None
    ingredients: list = field(default_factory=list)


@dataclass(frozen=True)
class HistorySummary:
    """What to steer away from when generating the next recipe."""

    recent_titles: list[str] = field(default_factory=list)
    recent_proteins: list[str] = field(default_factory=list)
    recent_cuisines: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.recent_titles


# =============================================================================
# Summarization
# =============================================================================


def _detect_protein(item: str, keywords: tuple[str, ...]) -> str | None:
    """Return the protein an ingredient item mentions, if any.

    Prefers the exact word from the item ("chicken" in "chicken thighs"),
    falling back to the whole item when the keyword is embedded in another
    word ("ground beef" works, "beefsteak tomatoes" reports the full item).
    """
    item = item.lower()
    if not any(keyword in item for keyword in keywords):
        return None
    for word in item.split(" "):
        if word in keywords:
            return word
    return item


def summarize_history(
    entries: list[RecentRecipeSummary],
    vocabulary: PromptVocabulary = DEFAULT_VOCABULARY,
) -> HistorySummary:
    """Reduce recent recipes to titles, proteins and cuisines.

    Args:
        entries: Recent recipes, newest first.
        vocabulary: Supplies the protein keywords to look for.

    Returns:
        HistorySummary with at most VARIETY_SAMPLE_SIZE titles and cuisines
        and every protein seen across all entries.
    """
    titles = [entry.title.lower() for entry in entries if entry.title]

    proteins: dict[str, None] = {}
    for entry in entries:
        for ingredient in entry.ingredients or []:
            if not isinstance(ingredient, dict):
                continue
            item = ingredient.get("item") or ""
            protein = _detect_protein(item, vocabulary.recent_protein_keywords)
            if protein:
                proteins[protein] = None

    cuisines = [entry.cuisine for entry in entries if entry.cuisine]
    distinct_cuisines = list(dict.fromkeys(cuisines[:VARIETY_SAMPLE_SIZE]))

    return HistorySummary(
        recent_titles=titles[:VARIETY_SAMPLE_SIZE],
        recent_proteins=list(proteins),
        recent_cuisines=distinct_cuisines,
    )


# =============================================================================
# Persistence
# =============================================================================


def _recent_links_query(db: Session, user_id: str):
    return (
        db.query(RecentRecipe)
        .filter(RecentRecipe.user_id == user_id)
        .order_by(RecentRecipe.created_at.desc(), RecentRecipe.id.desc())
    )


def load_recent_history(db: Session, user_id: str, limit: int = 20) -> list[RecentRecipeSummary]:
    """Load the user's most recent generated recipes, newest first."""
    links = _recent_links_query(db, user_id).limit(limit).all()
    return [
        RecentRecipeSummary(
            title=link.recipe.title or "",
            cuisine=link.recipe.cuisine,
            ingredients=list(link.recipe.ingredients or []),
        )
        for link in links
    ]


def add_recent_recipe(db: Session, user_id: str, recipe: Recipe) -> RecentRecipe:
    """Link a recipe into the user's recent list."""
    link = RecentRecipe(user_id=user_id, recipe=recipe)
    db.add(link)
    db.flush()
    return link


def prune_recent_recipes(db: Session, user_id: str, keep: int) -> int:
    """Delete recent links beyond the newest `keep`.

    The recipes themselves stay; they may still be saved by the user.

    Returns:
        Number of links removed.
    """
    stale_ids = [
        link.id for link in _recent_links_query(db, user_id).offset(max(keep, 0)).all()
    ]
    if not stale_ids:
        return 0
    db.execute(delete(RecentRecipe).where(RecentRecipe.id.in_(stale_ids)))
    logger.info(f"Pruned {len(stale_ids)} recent recipe links for user {user_id}")
    return len(stale_ids)


def remove_recent_recipe(db: Session, user_id: str, recipe_id: int) -> bool:
    """Unlink a recipe from the user's recent list.

    Returns:
        True if a link was removed.
    """
    result = db.execute(
        delete(RecentRecipe).where(
            RecentRecipe.user_id == user_id, RecentRecipe.recipe_id == recipe_id
        )
    )
    return result.rowcount > 0


def list_recent_recipes(db: Session, user_id: str, limit: int) -> list[tuple[Recipe, bool]]:
    """Return the newest `limit` recent recipes with their saved flag."""
    links = _recent_links_query(db, user_id).limit(limit).all()
    saved_ids = {
        recipe_id
        for (recipe_id,) in db.query(SavedRecipe.recipe_id).filter(SavedRecipe.user_id == user_id)
    }
    return [(link.recipe, link.recipe_id in saved_ids) for link in links]
