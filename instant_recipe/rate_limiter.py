"""Per-user daily cap on recipe generations.

Counters live in the daily_recipe_generations table, one row per
(user, calendar day). Every operation runs in its own short transaction so
a counter failure never rolls back the caller's recipe work.
"""

import logging
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from sqlalchemy import update
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from .config import get_settings
from .database import get_db_session
from .errors import RateLimitExceeded, SchemaDegraded
from .models import DailyRecipeGeneration

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 50

# PostgreSQL SQLSTATE for "relation does not exist"
UNDEFINED_TABLE_SQLSTATE = "42P01"


@dataclass(frozen=True)
class RateLimitStatus:
    """Result of a counter check or increment."""

    allowed: bool
    used: int
    remaining: int
    limit: int
    metered: bool = True

    def as_usage(self) -> dict:
        return {"used": self.used, "remaining": self.remaining, "limit": self.limit}


def today(timezone: str) -> date:
    """Current calendar date in the given IANA timezone."""
    return datetime.now(ZoneInfo(timezone)).date()


def _is_missing_table(exc: DBAPIError) -> bool:
    """Detect "table does not exist" across the supported drivers."""
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == UNDEFINED_TABLE_SQLSTATE:
        return True
    if getattr(getattr(orig, "diag", None), "sqlstate", None) == UNDEFINED_TABLE_SQLSTATE:
        return True
    message = str(orig if orig is not None else exc).lower()
    return "no such table" in message or (
        "does not exist" in message and DailyRecipeGeneration.__tablename__ in message
    )


class RateLimiter:
    """Daily generation counter with a fixed cap.

    Args:
        limit: Maximum generations per user per calendar day.
        session_factory: Context manager yielding a session that commits on
            exit. Defaults to the application's get_db_session.
    """

    def __init__(
        self,
        limit: int = DEFAULT_DAILY_LIMIT,
        session_factory: Callable[[], AbstractContextManager[Session]] = get_db_session,
    ):
        self.limit = limit
        self.session_factory = session_factory

    # =========================================================================
    # Internals
    # =========================================================================

    def _run(self, operation: Callable[[Session], int | None]) -> int | None:
        """Run a counter operation in its own transaction.

        Raises:
            SchemaDegraded: If the counter table has not been migrated yet.
        """
        try:
            with self.session_factory() as db:
                return operation(db)
        except (ProgrammingError, OperationalError) as e:
            if _is_missing_table(e):
                raise SchemaDegraded(str(e)) from e
            raise

    def _degraded(self, action: str) -> RateLimitStatus:
        logger.warning(
            f"{DailyRecipeGeneration.__tablename__} table not found during {action}. "
            "Run migrations to enable rate limiting."
        )
        return RateLimitStatus(
            allowed=True, used=0, remaining=self.limit, limit=self.limit, metered=False
        )

    def _status(self, used: int) -> RateLimitStatus:
        return RateLimitStatus(
            allowed=used < self.limit,
            used=used,
            remaining=max(0, self.limit - used),
            limit=self.limit,
        )

    @staticmethod
    def _read_count(db: Session, user_id: str, day: date) -> int:
        count = (
            db.query(DailyRecipeGeneration.count)
            .filter(DailyRecipeGeneration.user_id == user_id, DailyRecipeGeneration.date == day)
            .scalar()
        )
        return count or 0

    def _increment(self, db: Session, user_id: str, day: date) -> int | None:
        """Conditionally add one to today's counter.

        Returns:
            The new count, or None if the counter is already at the limit.
        """
        result = db.execute(
            update(DailyRecipeGeneration)
            .where(
                DailyRecipeGeneration.user_id == user_id,
                DailyRecipeGeneration.date == day,
                DailyRecipeGeneration.count < self.limit,
            )
            .values(count=DailyRecipeGeneration.count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            return self._read_count(db, user_id, day)

        exists = (
            db.query(DailyRecipeGeneration.id)
            .filter(DailyRecipeGeneration.user_id == user_id, DailyRecipeGeneration.date == day)
            .first()
        )
        if exists:
            return None

        db.add(DailyRecipeGeneration(user_id=user_id, date=day, count=1))
        db.flush()
        return 1

    def _increment_with_retry(self, user_id: str, day: date) -> int | None:
        try:
            return self._run(lambda db: self._increment(db, user_id, day))
        except IntegrityError:
            # A concurrent request created the row first; the update path wins now
            logger.info(f"Counter row for {user_id} on {day} created concurrently, retrying")
            return self._run(lambda db: self._increment(db, user_id, day))

    # =========================================================================
    # Public API
    # =========================================================================

    def check(self, user_id: str, day: date) -> RateLimitStatus:
        """Report whether another generation is allowed, without counting it."""
        try:
            used = self._run(lambda db: self._read_count(db, user_id, day))
        except SchemaDegraded:
            return self._degraded("check")
        return self._status(used or 0)

    def ensure_allowed(self, user_id: str, day: date) -> RateLimitStatus:
        """Check the cap before calling the completion API.

        Raises:
            RateLimitExceeded: If the user already used today's allowance.
        """
        status = self.check(user_id, day)
        if not status.allowed:
            logger.info(f"User {user_id} hit the daily generation limit ({status.used}/{self.limit})")
            raise RateLimitExceeded(limit=self.limit, used=status.used)
        return status

    def record_generation(self, user_id: str, day: date) -> RateLimitStatus:
        """Count one successful generation.

        Never pushes the counter past the limit; a request admitted by an
        earlier check that lost the race is served but not counted.
        """
        try:
            count = self._increment_with_retry(user_id, day)
        except SchemaDegraded:
            return self._degraded("increment")
        if count is None:
            logger.warning(f"User {user_id} reached the limit between check and increment")
            return self._status(self.limit)
        return self._status(count)

    def check_and_increment(self, user_id: str, day: date) -> RateLimitStatus:
        """Atomically count a generation if the cap allows it.

        Returns:
            Status with allowed=False and no mutation when the cap is reached.
        """
        try:
            count = self._increment_with_retry(user_id, day)
        except SchemaDegraded:
            return self._degraded("check_and_increment")
        if count is None:
            return RateLimitStatus(allowed=False, used=self.limit, remaining=0, limit=self.limit)
        return RateLimitStatus(
            allowed=True, used=count, remaining=max(0, self.limit - count), limit=self.limit
        )

    def get_usage(self, user_id: str, day: date) -> dict:
        """Today's usage as {"used", "remaining", "limit"}."""
        return self.check(user_id, day).as_usage()


def get_rate_limiter() -> RateLimiter:
    """FastAPI dependency returning a limiter with the configured cap."""
    return RateLimiter(limit=get_settings().daily_generation_limit)
