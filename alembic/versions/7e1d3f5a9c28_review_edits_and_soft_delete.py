"""Add review edit timestamp and soft-delete columns

Revision ID: 7e1d3f5a9c28
Revises: 4c2e9a7d1b05
Create Date: 2026-10-20 10:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7e1d3f5a9c28"
down_revision: str | Sequence[str] | None = "4c2e9a7d1b05"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Authors can edit and soft-delete their reviews.

    - updated_at → set when the author edits text or recommendation
    - deleted_at / deleted_by → soft delete; such rows drop out of the badge math
    """
    with op.batch_alter_table("business_reviews") as batch_op:
        batch_op.add_column(sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True))
        batch_op.add_column(sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True))
        batch_op.add_column(sa.Column("deleted_by", sa.String(64), nullable=True))


def downgrade() -> None:
    """Remove the edit and soft-delete columns."""
    with op.batch_alter_table("business_reviews") as batch_op:
        batch_op.drop_column("deleted_by")
        batch_op.drop_column("deleted_at")
        batch_op.drop_column("updated_at")
