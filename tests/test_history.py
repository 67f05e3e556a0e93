"""Tests for recent-recipe history and its summary."""

from datetime import datetime, timedelta

from conftest import TEST_USER_ID
from instant_recipe.history import (
    RecentRecipeSummary,
    add_recent_recipe,
    list_recent_recipes,
    load_recent_history,
    prune_recent_recipes,
    remove_recent_recipe,
    summarize_history,
)
from instant_recipe.models import Recipe, RecentRecipe, SavedRecipe


def make_recipe(db, title, cuisine=None, items=()):
    recipe = Recipe(
        title=title,
        cuisine=cuisine,
        ingredients=[{"amount": "1", "item": item} for item in items],
        instructions=["Cook it"],
    )
    db.add(recipe)
    db.flush()
    return recipe


def link_recent(db, recipe, minutes_ago):
    db.add(
        RecentRecipe(
            user_id=TEST_USER_ID,
            recipe_id=recipe.id,
            created_at=datetime.utcnow() - timedelta(minutes=minutes_ago),
        )
    )
    db.flush()


# =============================================================================
# Summary
# =============================================================================


def test_summary_of_empty_history():
    summary = summarize_history([])

    assert summary.is_empty
    assert summary.recent_proteins == []


def test_titles_lowercased_and_capped_at_five():
    entries = [RecentRecipeSummary(title=f"Dish {i}") for i in range(8)]

    summary = summarize_history(entries)

    assert summary.recent_titles == ["dish 0", "dish 1", "dish 2", "dish 3", "dish 4"]


def test_proteins_detected_across_all_entries_in_order():
    entries = [
        RecentRecipeSummary(title="a", ingredients=[{"item": "Chicken thighs"}]),
        RecentRecipeSummary(title="b", ingredients=[{"item": "ground beef"}, {"item": "onion"}]),
        RecentRecipeSummary(title="c", ingredients=[{"item": "chicken stock"}]),
        RecentRecipeSummary(title="d", ingredients=[{"item": "porkbelly"}]),
    ]

    summary = summarize_history(entries)

    assert summary.recent_proteins == ["chicken", "beef", "porkbelly"]


def test_cuisines_distinct_from_first_five():
    entries = [
        RecentRecipeSummary(title="a", cuisine="Thai"),
        RecentRecipeSummary(title="b", cuisine="Thai"),
        RecentRecipeSummary(title="c", cuisine=None),
        RecentRecipeSummary(title="d", cuisine="Mexican"),
        RecentRecipeSummary(title="e", cuisine="Greek"),
        RecentRecipeSummary(title="f", cuisine="Cajun"),
        RecentRecipeSummary(title="g", cuisine="Indian"),
    ]

    summary = summarize_history(entries)

    assert summary.recent_cuisines == ["Thai", "Mexican", "Greek"]


# =============================================================================
# Persistence
# =============================================================================


def test_load_recent_history_newest_first(db, user):
    old = make_recipe(db, "Old Stew", "French", ["beef chuck"])
    new = make_recipe(db, "New Curry", "Thai", ["tofu"])
    link_recent(db, old, minutes_ago=10)
    link_recent(db, new, minutes_ago=1)
    db.commit()

    history = load_recent_history(db, TEST_USER_ID, limit=20)

    assert [entry.title for entry in history] == ["New Curry", "Old Stew"]
    assert history[0].ingredients == [{"amount": "1", "item": "tofu"}]


def test_prune_keeps_newest_links_and_recipes(db, user):
    recipes = [make_recipe(db, f"Recipe {i}") for i in range(4)]
    for minutes, recipe in zip((40, 30, 20, 10), recipes):
        link_recent(db, recipe, minutes_ago=minutes)

    removed = prune_recent_recipes(db, TEST_USER_ID, keep=2)
    db.commit()

    assert removed == 2
    titles = [recipe.title for recipe, _ in list_recent_recipes(db, TEST_USER_ID, limit=10)]
    assert titles == ["Recipe 3", "Recipe 2"]
    assert db.query(Recipe).count() == 4


def test_add_and_remove_recent(db, user):
    recipe = make_recipe(db, "Risotto")
    add_recent_recipe(db, TEST_USER_ID, recipe)
    db.commit()

    assert remove_recent_recipe(db, TEST_USER_ID, recipe.id) is True
    assert remove_recent_recipe(db, TEST_USER_ID, recipe.id) is False


def test_list_recent_flags_saved(db, user):
    saved = make_recipe(db, "Saved One")
    unsaved = make_recipe(db, "Unsaved One")
    link_recent(db, saved, minutes_ago=2)
    link_recent(db, unsaved, minutes_ago=1)
    db.add(SavedRecipe(user_id=TEST_USER_ID, recipe_id=saved.id))
    db.commit()

    result = list_recent_recipes(db, TEST_USER_ID, limit=5)

    assert [(recipe.title, is_saved) for recipe, is_saved in result] == [
        ("Unsaved One", False),
        ("Saved One", True),
    ]
