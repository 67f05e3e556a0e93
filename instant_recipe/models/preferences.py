"""Preferences model for storing user dietary preferences."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class UserPreferences(Base, TimestampMixin):
    """Model for storing a user's recipe generation preferences.

    One row per user, created on first save and replaced wholesale by the
    settings page. Allergies are strict; preferred proteins and cuisines
    are ordered lists the generator picks from.
    """

    __tablename__ = "user_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    min_cook_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_cook_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_vegan: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    allergies: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    dietary_restrictions: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    preferred_proteins: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    preferred_cuisines: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    max_recent_recipes: Mapped[int] = mapped_column(Integer, default=5, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="preferences")

    def __repr__(self) -> str:
        return f"<UserPreferences(id={self.id}, user_id='{self.user_id}')>"
