"""Recipe modification log for suggestion history."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class RecipeModification(Base):
    """Write-once record of a modification suggestion for a recipe."""

    __tablename__ = "recipe_modifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    recipe_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    user_query: Mapped[str] = mapped_column(Text, nullable=False)
    ai_response: Mapped[str] = mapped_column(Text, nullable=False)
    applied: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="modifications")
    user: Mapped["User"] = relationship("User", back_populates="modifications")

    def __repr__(self) -> str:
        return f"<RecipeModification(id={self.id}, recipe_id={self.recipe_id}, applied={self.applied})>"
