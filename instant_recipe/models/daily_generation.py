"""Per-user daily recipe generation counter."""

from datetime import date as date_type

from sqlalchemy import Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class DailyRecipeGeneration(Base):
    """Count of recipes generated by a user on one calendar day.

    There is no reset job: a new day simply means a new (user_id, date) row.
    """

    __tablename__ = "daily_recipe_generations"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_generation_user_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<DailyRecipeGeneration(user_id='{self.user_id}', date={self.date}, count={self.count})>"
