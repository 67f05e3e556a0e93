"""User model for accounts issued by the identity provider."""

from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Model for an authenticated user.

    The primary key is the subject claim issued by the identity provider.
    Liked and disliked ingredients live here rather than on the preference
    record so the likes/dislikes page can edit them independently.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    liked_ingredients: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    disliked_ingredients: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    preferences: Mapped["UserPreferences | None"] = relationship(
        "UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    pantry_items: Mapped[list["PantryItem"]] = relationship(
        "PantryItem", back_populates="user", cascade="all, delete-orphan"
    )
    recent_links: Mapped[list["RecentRecipe"]] = relationship(
        "RecentRecipe", back_populates="user", cascade="all, delete-orphan"
    )
    saved_links: Mapped[list["SavedRecipe"]] = relationship(
        "SavedRecipe", back_populates="user", cascade="all, delete-orphan"
    )
    modifications: Mapped[list["RecipeModification"]] = relationship(
        "RecipeModification", back_populates="user", cascade="all, delete-orphan"
    )
    # Daily counter rows go with the FK's ON DELETE CASCADE; the counter table
    # may be absent on unmigrated databases, so the ORM never loads it here.

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', email='{self.email}')>"
