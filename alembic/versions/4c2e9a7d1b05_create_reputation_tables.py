"""Create businesses, reviews, moderation log and badge tables

Revision ID: 4c2e9a7d1b05
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c2e9a7d1b05"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the reputation schema."""
    op.create_table(
        "businesses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("business_type", sa.String(100), nullable=True),
        sa.Column("owner_id", sa.String(64), nullable=True),
        sa.Column("approved_review_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("recommendation_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("recommendation_badge", sa.String(32), nullable=True),
        sa.Column("badge_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_businesses_review_count", "businesses", ["approved_review_count"])
    op.create_index("ix_businesses_badge", "businesses", ["recommendation_badge"])

    op.create_table(
        "business_reviews",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "business_id", sa.Integer(),
            sa.ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("recommendation", sa.Boolean(), nullable=False),
        sa.Column("review_text", sa.Text(), nullable=True),
        sa.Column("moderation_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("moderated_by", sa.String(64), nullable=True),
        sa.Column("moderated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("business_id", "user_id", name="uq_business_reviews_business_user"),
    )
    op.create_index(
        "ix_business_reviews_status", "business_reviews", ["moderation_status", "created_at"],
    )
    op.create_index(
        "ix_business_reviews_business_status",
        "business_reviews",
        ["business_id", "moderation_status"],
    )

    op.create_table(
        "review_moderation_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "review_id", sa.Integer(),
            sa.ForeignKey("business_reviews.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column("performed_by", sa.String(64), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_moderation_log_review", "review_moderation_log", ["review_id", "created_at"],
    )

    op.create_table(
        "badge_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "business_id", sa.Integer(),
            sa.ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("old_tier", sa.String(32), nullable=True),
        sa.Column("new_tier", sa.String(32), nullable=True),
        sa.Column("review_count", sa.Integer(), nullable=False),
        sa.Column("percentage", sa.Float(), nullable=False),
        sa.Column(
            "changed_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_badge_history_business_time", "badge_history", ["business_id", "changed_at"],
    )

    op.create_table(
        "badge_acknowledgements",
        sa.Column(
            "business_id", sa.Integer(),
            sa.ForeignKey("businesses.id", ondelete="CASCADE"), primary_key=True,
        ),
        sa.Column("viewer_id", sa.String(64), primary_key=True),
        sa.Column("tier", sa.String(32), nullable=True),
        sa.Column(
            "seen_at", sa.DateTime(timezone=True), nullable=False,
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    """Drop the reputation schema."""
    op.drop_table("badge_acknowledgements")
    op.drop_index("ix_badge_history_business_time", table_name="badge_history")
    op.drop_table("badge_history")
    op.drop_index("ix_moderation_log_review", table_name="review_moderation_log")
    op.drop_table("review_moderation_log")
    op.drop_index("ix_business_reviews_business_status", table_name="business_reviews")
    op.drop_index("ix_business_reviews_status", table_name="business_reviews")
    op.drop_table("business_reviews")
    op.drop_index("ix_businesses_badge", table_name="businesses")
    op.drop_index("ix_businesses_review_count", table_name="businesses")
    op.drop_table("businesses")
