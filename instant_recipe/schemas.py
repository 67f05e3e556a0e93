"""Request bodies and completion payload validation.

Wire format is camelCase; Python attributes are snake_case.
"""

import enum
import re
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Generation
# =============================================================================


class GenerationType(str, enum.Enum):
    """How the user asked for a recipe."""

    RANDOM = "random"
    TIMELINE = "timeline"
    PROTEIN = "protein"
    CUISINE = "cuisine"
    PANTRY = "pantry"


class GenerationRequest(CamelModel):
    """Body of POST /api/recipes/generate."""

    type: GenerationType
    time_limit: int | None = Field(default=None, gt=0)
    protein: str | None = None
    cuisine: str | None = None
    use_preferences: bool = False
    pantry_items: list[str] | None = None

    @field_validator("protein", "cuisine", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_type_parameters(self):
        """Each targeted generation type needs its parameter."""
        if self.type == GenerationType.TIMELINE and self.time_limit is None:
            raise ValueError("timeLimit is required for timeline generation")
        if self.type == GenerationType.PROTEIN and not self.protein:
            raise ValueError("protein is required for protein generation")
        if self.type == GenerationType.CUISINE and not self.cuisine:
            raise ValueError("cuisine is required for cuisine generation")
        return self


# =============================================================================
# Completion payload
# =============================================================================


_LEADING_INT = re.compile(r"\d+")


class GeneratedIngredient(BaseModel):
    """One {"amount", "item"} pair from the model."""

    model_config = ConfigDict(extra="ignore")

    amount: str = ""
    item: str = Field(min_length=1)

    @field_validator("amount", "item", mode="before")
    @classmethod
    def stringify(cls, v):
        if v is None:
            return ""
        return str(v).strip()


class GeneratedRecipe(BaseModel):
    """Recipe JSON as returned by the completion API.

    Validated before anything is persisted; field names follow the JSON
    schema given to the model in the prompt.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str = Field(min_length=1)
    description: str | None = None
    prep_time: int = Field(default=0, ge=0, alias="prepTime")
    cook_time: int = Field(default=0, ge=0, alias="cookTime")
    total_time: int | None = Field(default=None, ge=0, alias="totalTime")
    servings: int = Field(default=4, ge=1)
    difficulty: str | None = None
    cuisine: str | None = None
    ingredients: list[GeneratedIngredient] = Field(min_length=1)
    instructions: list[str] = Field(min_length=1)
    tips: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("prep_time", "cook_time", "total_time", "servings", mode="before")
    @classmethod
    def parse_leading_int(cls, v):
        """Accept "15", "15 minutes" and 15.0 as 15."""
        if isinstance(v, float):
            return int(v)
        if isinstance(v, str):
            match = _LEADING_INT.search(v)
            return int(match.group()) if match else None
        return v

    @field_validator("instructions", mode="before")
    @classmethod
    def stringify_steps(cls, v):
        if isinstance(v, list):
            return [str(step).strip() for step in v if str(step).strip()]
        return v

    @field_validator("tips", mode="before")
    @classmethod
    def join_tips(cls, v):
        if isinstance(v, list):
            return "\n".join(str(tip) for tip in v)
        return v

    @model_validator(mode="after")
    def fill_total_time(self):
        if self.total_time is None:
            self.total_time = self.prep_time + self.cook_time
        return self

    def to_columns(self) -> dict:
        """Column values for a Recipe row."""
        return {
            "title": self.title,
            "description": self.description,
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "total_time": self.total_time,
            "servings": self.servings,
            "difficulty": self.difficulty,
            "cuisine": self.cuisine,
            "ingredients": [ingredient.model_dump() for ingredient in self.ingredients],
            "instructions": list(self.instructions),
            "tips": self.tips,
        }


# =============================================================================
# Modification
# =============================================================================


class ModifyRequest(CamelModel):
    recipe_id: int
    query: str = Field(min_length=1)


class RegenerateRequest(CamelModel):
    recipe_id: int
    modifications: str = Field(min_length=1)


class CustomizeRequest(CamelModel):
    custom_color: str | None = None
    custom_label: str | None = None


# =============================================================================
# Preferences, likes/dislikes, pantry
# =============================================================================


class PreferencesIn(CamelModel):
    """Body of PUT /api/preferences. Replaces the whole record."""

    min_cook_time: int | None = Field(default=None, ge=0)
    max_cook_time: int | None = Field(default=None, ge=0)
    is_vegan: bool = False
    is_vegetarian: bool = False
    allergies: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)
    preferred_proteins: list[str] = Field(default_factory=list)
    preferred_cuisines: list[str] = Field(default_factory=list)
    max_recent_recipes: int = Field(default=5, ge=1, le=50)

    @model_validator(mode="after")
    def check_cook_window(self):
        if (
            self.min_cook_time is not None
            and self.max_cook_time is not None
            and self.min_cook_time > self.max_cook_time
        ):
            raise ValueError("minCookTime must not be greater than maxCookTime")
        return self


class LikeDislikeVote(CamelModel):
    """Body of POST /api/likes-dislikes."""

    ingredient: str = Field(min_length=1)
    action: Literal["add", "remove"]
    type: Literal["like", "dislike"]


class LikesDislikesIn(CamelModel):
    liked_ingredients: list[str] | None = None
    disliked_ingredients: list[str] | None = None


class IngredientRef(CamelModel):
    ingredient: str = Field(min_length=1)


class PantryItemIn(CamelModel):
    name: str = Field(min_length=1)
    category: str = "Other"
    quantity: str | None = None
    unit: str | None = None
    expiry_date: date | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def stringify_quantity(cls, v):
        if v in (None, ""):
            return None
        return str(v)

    @field_validator("unit", mode="before")
    @classmethod
    def blank_unit(cls, v):
        return v or None
