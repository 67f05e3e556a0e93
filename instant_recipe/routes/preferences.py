"""Preference record, liked/disliked ingredients and settings options."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User, UserPreferences, clean_string_list
from ..recipe_service import get_preferences
from ..schemas import IngredientRef, LikeDislikeVote, LikesDislikesIn, PreferencesIn
from ..vocabulary import DEFAULT_VOCABULARY

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["preferences"])

LIST_FIELDS = ("allergies", "dietary_restrictions", "preferred_proteins", "preferred_cuisines")


def serialize_preferences(preferences: UserPreferences | None) -> dict | None:
    if preferences is None:
        return None
    return {
        "id": preferences.id,
        "userId": preferences.user_id,
        "minCookTime": preferences.min_cook_time,
        "maxCookTime": preferences.max_cook_time,
        "isVegan": preferences.is_vegan,
        "isVegetarian": preferences.is_vegetarian,
        "allergies": preferences.allergies or [],
        "dietaryRestrictions": preferences.dietary_restrictions or [],
        "preferredProteins": preferences.preferred_proteins or [],
        "preferredCuisines": preferences.preferred_cuisines or [],
        "maxRecentRecipes": preferences.max_recent_recipes,
    }


def _likes_body(user: User) -> dict:
    return {
        "likedIngredients": user.liked_ingredients or [],
        "dislikedIngredients": user.disliked_ingredients or [],
    }


# =============================================================================
# Preference record
# =============================================================================


@router.get("/preferences")
def read_preferences(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"preferences": serialize_preferences(get_preferences(db, user.id))}


@router.put("/preferences")
def update_preferences(
    body: PreferencesIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create or replace the caller's preference record."""
    preferences = get_preferences(db, user.id)
    if preferences is None:
        preferences = UserPreferences(user_id=user.id)
        db.add(preferences)

    values = body.model_dump()
    for name in LIST_FIELDS:
        values[name] = clean_string_list(values[name])
    for name, value in values.items():
        setattr(preferences, name, value)

    db.commit()
    db.refresh(preferences)
    logger.info(f"Saved preferences for {user.id}")
    return {"preferences": serialize_preferences(preferences)}


# =============================================================================
# Likes and dislikes
# =============================================================================


@router.get("/likes-dislikes")
def read_likes(user: User = Depends(get_current_user)):
    return _likes_body(user)


@router.post("/likes-dislikes")
def vote(
    body: LikeDislikeVote,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add or remove one ingredient; adding to one list removes it from the other."""
    ingredient = body.ingredient.strip()
    liked = list(user.liked_ingredients or [])
    disliked = list(user.disliked_ingredients or [])

    target, other = (liked, disliked) if body.type == "like" else (disliked, liked)
    if body.action == "add":
        if ingredient not in target:
            target.append(ingredient)
        other[:] = [i for i in other if i != ingredient]
    else:
        target[:] = [i for i in target if i != ingredient]

    # Reassign so the JSON columns register as changed
    user.liked_ingredients = liked
    user.disliked_ingredients = disliked
    db.commit()
    return _likes_body(user)


@router.put("/likes-dislikes")
def replace_likes(
    body: LikesDislikesIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user.liked_ingredients = clean_string_list(body.liked_ingredients)
    user.disliked_ingredients = clean_string_list(body.disliked_ingredients)
    db.commit()
    return _likes_body(user)


@router.delete("/likes-dislikes")
def forget_ingredient(
    body: IngredientRef,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove an ingredient from both lists."""
    ingredient = body.ingredient.strip()
    user.liked_ingredients = [i for i in user.liked_ingredients or [] if i != ingredient]
    user.disliked_ingredients = [i for i in user.disliked_ingredients or [] if i != ingredient]
    db.commit()
    return _likes_body(user)


@router.get("/options")
def options(user: User = Depends(get_current_user)):
    """Choices shown on the preferences and pantry pages."""
    return DEFAULT_VOCABULARY.as_options()
