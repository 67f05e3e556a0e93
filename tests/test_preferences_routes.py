"""Tests for /api/preferences, /api/likes-dislikes, /api/options and /api/account."""

from conftest import TEST_USER_ID
from instant_recipe.models import DailyRecipeGeneration, User, UserPreferences


def test_preferences_empty_by_default(client, auth_headers):
    response = client.get("/api/preferences", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"preferences": None}


def test_put_preferences_upserts(client, auth_headers):
    body = {
        "minCookTime": 20,
        "maxCookTime": 45,
        "isVegetarian": True,
        "allergies": [" Peanuts ", "Peanuts", "", "Shellfish"],
        "preferredProteins": ["Tofu", "Eggs"],
        "preferredCuisines": ["Thai"],
        "maxRecentRecipes": 8,
    }

    first = client.put("/api/preferences", json=body, headers=auth_headers).json()["preferences"]
    second = client.put(
        "/api/preferences", json=dict(body, maxRecentRecipes=3), headers=auth_headers
    ).json()["preferences"]

    assert first["allergies"] == ["Peanuts", "Shellfish"]
    assert first["isVegetarian"] is True
    assert second["id"] == first["id"]
    assert second["maxRecentRecipes"] == 3
    fetched = client.get("/api/preferences", headers=auth_headers).json()["preferences"]
    assert fetched == second


def test_put_preferences_replaces_wholesale(client, auth_headers):
    client.put("/api/preferences", json={"isVegan": True, "allergies": ["Soy"]}, headers=auth_headers)
    prefs = client.put("/api/preferences", json={}, headers=auth_headers).json()["preferences"]

    assert prefs["isVegan"] is False
    assert prefs["allergies"] == []


def test_inverted_cook_window_rejected(client, auth_headers):
    response = client.put(
        "/api/preferences", json={"minCookTime": 50, "maxCookTime": 10}, headers=auth_headers
    )
    assert response.status_code == 422


def test_preferences_are_per_user(client, auth_headers, other_auth_headers):
    client.put("/api/preferences", json={"isVegan": True}, headers=auth_headers)

    response = client.get("/api/preferences", headers=other_auth_headers)

    assert response.json() == {"preferences": None}


# =============================================================================
# Likes and dislikes
# =============================================================================


def vote(client, headers, ingredient, action, type_):
    return client.post(
        "/api/likes-dislikes",
        json={"ingredient": ingredient, "action": action, "type": type_},
        headers=headers,
    ).json()


def test_vote_keeps_lists_disjoint(client, auth_headers):
    vote(client, auth_headers, "mushrooms", "add", "like")
    body = vote(client, auth_headers, "mushrooms", "add", "dislike")

    assert body == {"likedIngredients": [], "dislikedIngredients": ["mushrooms"]}

    body = vote(client, auth_headers, "mushrooms", "add", "like")
    assert body == {"likedIngredients": ["mushrooms"], "dislikedIngredients": []}


def test_vote_add_is_idempotent_and_remove_works(client, auth_headers):
    vote(client, auth_headers, "basil", "add", "like")
    vote(client, auth_headers, "basil", "add", "like")
    assert vote(client, auth_headers, "olives", "add", "dislike")["likedIngredients"] == ["basil"]

    body = vote(client, auth_headers, "basil", "remove", "like")

    assert body == {"likedIngredients": [], "dislikedIngredients": ["olives"]}


def test_vote_rejects_unknown_action(client, auth_headers):
    response = client.post(
        "/api/likes-dislikes",
        json={"ingredient": "basil", "action": "toggle", "type": "like"},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_replace_and_delete_likes(client, auth_headers):
    client.put(
        "/api/likes-dislikes",
        json={"likedIngredients": ["garlic", "lemon"], "dislikedIngredients": ["cilantro"]},
        headers=auth_headers,
    )

    response = client.request(
        "DELETE", "/api/likes-dislikes", json={"ingredient": "garlic"}, headers=auth_headers
    )

    assert response.json() == {"likedIngredients": ["lemon"], "dislikedIngredients": ["cilantro"]}
    assert client.get("/api/likes-dislikes", headers=auth_headers).json() == response.json()


def test_likes_persisted_on_user(client, auth_headers, db):
    vote(client, auth_headers, "ginger", "add", "like")

    user = db.get(User, TEST_USER_ID)
    assert user.liked_ingredients == ["ginger"]


# =============================================================================
# Options and account
# =============================================================================


def test_options_lists(client, auth_headers):
    body = client.get("/api/options", headers=auth_headers).json()

    assert set(body) == {"allergies", "proteins", "cuisines", "pantryCategories"}
    assert "Tofu" in body["proteins"]
    assert "Other" in body["pantryCategories"]


def test_delete_account_removes_owned_rows(client, auth_headers, db):
    client.put("/api/preferences", json={"isVegan": True}, headers=auth_headers)
    client.post("/api/pantry", json={"name": "rice"}, headers=auth_headers)
    client.post("/api/recipes/generate", json={"type": "random"}, headers=auth_headers)

    response = client.delete("/api/account", headers=auth_headers)

    assert response.json() == {"success": True}
    assert db.get(User, TEST_USER_ID) is None
    assert db.query(UserPreferences).count() == 0


def test_delete_account_without_counter_table(client, auth_headers, engine, db):
    DailyRecipeGeneration.__table__.drop(bind=engine)
    generated = client.post("/api/recipes/generate", json={"type": "random"}, headers=auth_headers)
    assert generated.status_code == 200

    response = client.delete("/api/account", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert db.get(User, TEST_USER_ID) is None
