"""Create thoughts table

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates the `thoughts` table.
How:   UUID primary key, unique message, non-negative hearts counter,
       timezone-aware created_at with a descending index for the list query.

Rollback: downgrade() drops the table (all thoughts are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Column rationale is documented in happy_thoughts/models/thought.py."""
    op.create_table(
        "thoughts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("message", sa.String(140), nullable=False),
        sa.Column(
            "hearts",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("message", name="uq_thoughts_message"),
        sa.CheckConstraint("hearts >= 0", name="ck_thoughts_hearts_non_negative"),
    )

    # The list endpoint is always ORDER BY created_at DESC LIMIT 20
    op.create_index(
        "idx_thoughts_created_at",
        "thoughts",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_thoughts_created_at", table_name="thoughts")
    op.drop_table("thoughts")
