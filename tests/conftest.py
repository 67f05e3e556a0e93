"""Shared fixtures: per-test SQLite database, stub completion client, authed TestClient."""

import copy
import os
from contextlib import contextmanager

# Settings are read at import time, so the environment must be set first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ANTHROPIC_API_KEY"] = "test-anthropic-key"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from instant_recipe.claude_service import get_completion_client
from instant_recipe.database import get_db
from instant_recipe.main import app
from instant_recipe.models import Base, User
from instant_recipe.rate_limiter import RateLimiter, get_rate_limiter

TEST_USER_ID = "user-123"
OTHER_USER_ID = "user-456"

SAMPLE_RECIPE = {
    "title": "Instant Pot Chicken Tikka Masala",
    "description": "Creamy, spiced tomato curry with tender chicken.",
    "prepTime": 15,
    "cookTime": 10,
    "totalTime": 25,
    "servings": 4,
    "difficulty": "Easy",
    "cuisine": "Indian",
    "ingredients": [
        {"amount": "2 lbs", "item": "chicken thighs"},
        {"amount": "1 can", "item": "crushed tomatoes"},
        {"amount": "1 cup", "item": "heavy cream"},
    ],
    "instructions": [
        "Set the Instant Pot to saute and brown the chicken.",
        "Add tomatoes and spices, pressure cook on high for 10 minutes.",
        "Stir in the cream and serve.",
    ],
    "tips": "Serve with basmati rice.",
}


class FakeCompletionClient:
    """Stands in for CompletionClient; records every call."""

    def __init__(self):
        self.json_responses: list = []
        self.text_response = "Swap the heavy cream for coconut milk."
        self.error: Exception | None = None
        self.calls: list[dict] = []

    def complete_json(self, system, prompt, temperature, model=None):
        self.calls.append(
            {"kind": "json", "system": system, "prompt": prompt, "temperature": temperature}
        )
        if self.error:
            raise self.error
        if self.json_responses:
            return self.json_responses.pop(0)
        return copy.deepcopy(SAMPLE_RECIPE)

    def complete_text(self, system, prompt, temperature, max_tokens=None, model=None):
        self.calls.append(
            {
                "kind": "text",
                "system": system,
                "prompt": prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.error:
            raise self.error
        return self.text_response


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def limiter(session_factory):
    """RateLimiter writing through its own sessions on the test database."""

    @contextmanager
    def scoped_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return RateLimiter(limit=50, session_factory=scoped_session)


@pytest.fixture
def user(db):
    user = User(
        id=TEST_USER_ID,
        email="cook@example.com",
        name="Test Cook",
        liked_ingredients=[],
        disliked_ingredients=[],
    )
    db.add(user)
    db.commit()
    return user


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def client(session_factory, limiter, fake_client):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_completion_client] = lambda: fake_client
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_token(user_id: str = TEST_USER_ID, **claims) -> str:
    payload = {"sub": user_id, "email": "cook@example.com", "name": "Test Cook", **claims}
    return jwt.encode(payload, os.environ["JWT_SECRET_KEY"], algorithm="HS256")


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID)}"}
