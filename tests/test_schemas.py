"""Tests for request bodies and completion payload validation."""

import pytest
from pydantic import ValidationError

from conftest import SAMPLE_RECIPE
from instant_recipe.schemas import (
    GeneratedRecipe,
    GenerationRequest,
    GenerationType,
    PantryItemIn,
    PreferencesIn,
)


# =============================================================================
# GenerationRequest
# =============================================================================


def test_generation_request_accepts_camel_case():
    body = GenerationRequest.model_validate(
        {"type": "timeline", "timeLimit": 30, "usePreferences": True}
    )

    assert body.type == GenerationType.TIMELINE
    assert body.time_limit == 30
    assert body.use_preferences is True


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "timeline"},
        {"type": "timeline", "timeLimit": 0},
        {"type": "protein"},
        {"type": "protein", "protein": "   "},
        {"type": "cuisine"},
        {"type": "breakfast"},
    ],
)
def test_generation_request_rejects_missing_parameters(payload):
    with pytest.raises(ValidationError):
        GenerationRequest.model_validate(payload)


def test_pantry_request_allows_missing_items():
    body = GenerationRequest.model_validate({"type": "pantry"})
    assert body.pantry_items is None


# =============================================================================
# GeneratedRecipe
# =============================================================================


def test_generated_recipe_columns():
    recipe = GeneratedRecipe.model_validate(SAMPLE_RECIPE)
    columns = recipe.to_columns()

    assert columns["title"] == SAMPLE_RECIPE["title"]
    assert columns["prep_time"] == 15
    assert columns["total_time"] == 25
    assert columns["ingredients"][0] == {"amount": "2 lbs", "item": "chicken thighs"}
    assert len(columns["instructions"]) == 3


def test_numeric_strings_are_coerced_and_total_filled():
    payload = dict(SAMPLE_RECIPE, prepTime="10 minutes", cookTime="20", servings="6")
    payload.pop("totalTime")

    recipe = GeneratedRecipe.model_validate(payload)

    assert recipe.prep_time == 10
    assert recipe.cook_time == 20
    assert recipe.total_time == 30
    assert recipe.servings == 6


def test_list_tips_are_joined():
    recipe = GeneratedRecipe.model_validate(dict(SAMPLE_RECIPE, tips=["Use ghee", "Add lime"]))
    assert recipe.tips == "Use ghee\nAdd lime"


def test_extra_keys_ignored():
    recipe = GeneratedRecipe.model_validate(dict(SAMPLE_RECIPE, calories=500))
    assert "calories" not in recipe.to_columns()


@pytest.mark.parametrize(
    "change",
    [
        {"title": ""},
        {"title": None},
        {"ingredients": []},
        {"instructions": []},
        {"servings": 0},
        {"prepTime": -5},
        {"ingredients": [{"amount": "1 cup"}]},
    ],
)
def test_invalid_payloads_rejected(change):
    with pytest.raises(ValidationError):
        GeneratedRecipe.model_validate(dict(SAMPLE_RECIPE, **change))


def test_missing_title_rejected():
    payload = dict(SAMPLE_RECIPE)
    payload.pop("title")
    with pytest.raises(ValidationError):
        GeneratedRecipe.model_validate(payload)


# =============================================================================
# Preferences and pantry
# =============================================================================


def test_preferences_reject_inverted_window():
    with pytest.raises(ValidationError):
        PreferencesIn.model_validate({"minCookTime": 60, "maxCookTime": 30})


def test_preferences_reject_negative_times():
    with pytest.raises(ValidationError):
        PreferencesIn.model_validate({"minCookTime": -1})


def test_preferences_defaults():
    prefs = PreferencesIn.model_validate({})

    assert prefs.max_recent_recipes == 5
    assert prefs.allergies == []
    assert prefs.is_vegan is False


def test_pantry_quantity_stringified():
    item = PantryItemIn.model_validate({"name": "Rice", "quantity": 2, "unit": ""})

    assert item.quantity == "2"
    assert item.unit is None
    assert item.category == "Other"
