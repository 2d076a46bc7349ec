"""visitor counter

Revision ID: 5b1c0e7a9d42
Revises:
Create Date: 2025-11-03 09:14:51.402113

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1c0e7a9d42"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the single-row visitor counter table and seed it at zero."""
    visitor_counter = op.create_table(
        "visitor_counter",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("guest_count", sa.BigInteger(), nullable=False, server_default="0"),
        sa.CheckConstraint("guest_count >= 0", name="ck_visitor_counter_nonnegative"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.bulk_insert(visitor_counter, [{"id": 1, "guest_count": 0}])


def downgrade() -> None:
    """Drop the visitor counter table."""
    op.drop_table("visitor_counter")
