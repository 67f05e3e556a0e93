"""SQLAlchemy base and helper utilities."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


def clean_string_list(values: list[str] | None) -> list[str]:
    """Strip entries, drop blanks and exact duplicates, keep order.

    Args:
        values: Raw list of strings from a request body or JSON column.

    Returns:
        Cleaned list suitable for storing in a JSON column.
    """
    cleaned: list[str] = []
    for value in values or []:
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned
