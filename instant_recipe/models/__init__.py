"""Database models for the recipe generator."""

from .base import Base, TimestampMixin, clean_string_list
from .user import User
from .preferences import UserPreferences
from .recipe import Recipe, RecentRecipe, SavedRecipe
from .daily_generation import DailyRecipeGeneration
from .recipe_modification import RecipeModification
from .pantry import PantryItem

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "clean_string_list",
    # Models
    "User",
    "UserPreferences",
    "Recipe",
    "RecentRecipe",
    "SavedRecipe",
    "DailyRecipeGeneration",
    "RecipeModification",
    "PantryItem",
]
