"""create unique_numbers

Revision ID: 5b2c1e7d9a40
Revises:
Create Date: 2026-10-17 09:12:44.318201

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b2c1e7d9a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the claimed number table and its lookup indexes."""
    op.create_table(
        "unique_numbers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("number", sa.BigInteger(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("bubble_id", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_unique_numbers_number"), "unique_numbers", ["number"], unique=True
    )
    op.create_index(
        op.f("ix_unique_numbers_created_at"), "unique_numbers", ["created_at"], unique=False
    )


def downgrade() -> None:
    """Drop the claimed number table."""
    op.drop_index(op.f("ix_unique_numbers_created_at"), table_name="unique_numbers")
    op.drop_index(op.f("ix_unique_numbers_number"), table_name="unique_numbers")
    op.drop_table("unique_numbers")
