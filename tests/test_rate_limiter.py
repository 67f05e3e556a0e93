"""Tests for the daily generation counter."""

from datetime import date, timedelta

import pytest

from conftest import TEST_USER_ID
from instant_recipe.errors import RateLimitExceeded
from instant_recipe.models import DailyRecipeGeneration
from instant_recipe.rate_limiter import RateLimiter, today

DAY = date(2026, 3, 14)


def stored_count(db, user_id=TEST_USER_ID, day=DAY):
    db.expire_all()
    row = (
        db.query(DailyRecipeGeneration)
        .filter(DailyRecipeGeneration.user_id == user_id, DailyRecipeGeneration.date == day)
        .first()
    )
    return row.count if row else None


def test_usage_defaults_without_row(limiter, user):
    assert limiter.get_usage(TEST_USER_ID, DAY) == {"used": 0, "remaining": 50, "limit": 50}


def test_first_increment_creates_row(limiter, user, db):
    status = limiter.check_and_increment(TEST_USER_ID, DAY)

    assert status.allowed is True
    assert status.used == 1
    assert status.remaining == 49
    assert stored_count(db) == 1


def test_fifty_allowed_then_rejected(limiter, user, db):
    for i in range(50):
        status = limiter.check_and_increment(TEST_USER_ID, DAY)
        assert status.allowed, f"generation {i + 1} should be allowed"

    status = limiter.check_and_increment(TEST_USER_ID, DAY)

    assert status.allowed is False
    assert status.remaining == 0
    assert stored_count(db) == 50
    assert limiter.get_usage(TEST_USER_ID, DAY) == {"used": 50, "remaining": 0, "limit": 50}


def test_ensure_allowed_raises_at_limit_without_mutation(user, db, limiter):
    limiter.limit = 3
    for _ in range(3):
        limiter.record_generation(TEST_USER_ID, DAY)

    with pytest.raises(RateLimitExceeded) as exc_info:
        limiter.ensure_allowed(TEST_USER_ID, DAY)

    assert exc_info.value.status_code == 429
    assert exc_info.value.to_response_body()["remaining"] == 0
    assert stored_count(db) == 3


def test_record_generation_never_exceeds_limit(user, db, limiter):
    limiter.limit = 2
    limiter.record_generation(TEST_USER_ID, DAY)
    limiter.record_generation(TEST_USER_ID, DAY)

    status = limiter.record_generation(TEST_USER_ID, DAY)

    assert status.used == 2
    assert status.remaining == 0
    assert stored_count(db) == 2


def test_usage_query_is_idempotent(limiter, user):
    limiter.record_generation(TEST_USER_ID, DAY)

    first = limiter.get_usage(TEST_USER_ID, DAY)
    second = limiter.get_usage(TEST_USER_ID, DAY)

    assert first == second == {"used": 1, "remaining": 49, "limit": 50}


def test_counters_are_per_day_and_per_user(limiter, user, db):
    limiter.record_generation(TEST_USER_ID, DAY)
    limiter.record_generation(TEST_USER_ID, DAY)
    limiter.record_generation(TEST_USER_ID, DAY + timedelta(days=1))
    limiter.record_generation("someone-else", DAY)

    assert limiter.get_usage(TEST_USER_ID, DAY)["used"] == 2
    assert limiter.get_usage(TEST_USER_ID, DAY + timedelta(days=1))["used"] == 1
    assert limiter.get_usage("someone-else", DAY)["used"] == 1


def test_missing_table_degrades_to_unmetered(limiter, user, engine, caplog):
    DailyRecipeGeneration.__table__.drop(bind=engine)

    check = limiter.check(TEST_USER_ID, DAY)
    recorded = limiter.record_generation(TEST_USER_ID, DAY)

    assert check.allowed is True
    assert check.metered is False
    assert recorded.metered is False
    assert limiter.get_usage(TEST_USER_ID, DAY) == {"used": 0, "remaining": 50, "limit": 50}
    limiter.ensure_allowed(TEST_USER_ID, DAY)
    assert "Run migrations to enable rate limiting" in caplog.text


def test_custom_limit_reported_in_usage(session_factory, limiter, user):
    small = RateLimiter(limit=5, session_factory=limiter.session_factory)
    assert small.get_usage(TEST_USER_ID, DAY) == {"used": 0, "remaining": 5, "limit": 5}


def test_today_uses_timezone():
    assert isinstance(today("America/Denver"), date)
    assert isinstance(today("Pacific/Auckland"), date)
