"""Recipe model and the per-user recent/saved links."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Recipe(Base, TimestampMixin):
    """Model for storing generated recipes.

    Ingredients are stored as a JSON list of {"amount", "item"} pairs and
    instructions as a JSON list of step strings, in the order the model
    returned them.
    """

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    prep_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cook_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_time: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    servings: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    difficulty: Mapped[str | None] = mapped_column(String(50), nullable=True)
    cuisine: Mapped[str | None] = mapped_column(String(100), nullable=True)
    ingredients: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    instructions: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    tips: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    custom_label: Mapped[str | None] = mapped_column(String(100), nullable=True)

    modifications: Mapped[list["RecipeModification"]] = relationship(
        "RecipeModification", back_populates="recipe", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Recipe(id={self.id}, title='{self.title}')>"


class RecentRecipe(Base):
    """Link between a user and a recipe generated for them."""

    __tablename__ = "recent_recipes"
    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_recent_recipes_user_recipe"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="recent_links")
    recipe: Mapped["Recipe"] = relationship("Recipe")

    def __repr__(self) -> str:
        return f"<RecentRecipe(user_id='{self.user_id}', recipe_id={self.recipe_id})>"


class SavedRecipe(Base):
    """Link between a user and a recipe they bookmarked."""

    __tablename__ = "saved_recipes"
    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_saved_recipes_user_recipe"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="saved_links")
    recipe: Mapped["Recipe"] = relationship("Recipe")

    def __repr__(self) -> str:
        return f"<SavedRecipe(user_id='{self.user_id}', recipe_id={self.recipe_id})>"
