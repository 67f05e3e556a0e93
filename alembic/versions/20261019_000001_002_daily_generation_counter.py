"""Add daily_recipe_generations counter table.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 00:00:01.000000

Until this runs, generation works but is not rate limited.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers
revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "daily_recipe_generations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_daily_generation_user_date"),
    )


def downgrade():
    op.drop_table("daily_recipe_generations")
