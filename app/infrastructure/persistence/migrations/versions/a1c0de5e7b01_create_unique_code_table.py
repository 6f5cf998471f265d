"""Create unique_code table.

Revision ID: a1c0de5e7b01
Revises:
Create Date: 2026-10-18

One row per issued redemption code. The unique index on code is what
guarantees at most one record per code under concurrent inserts.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

revision: str = "a1c0de5e7b01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "unique_code",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("code", sa.String(64), nullable=False),
        sa.Column("prize_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_used", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("used_by", sa.String(255), nullable=True),
        sa.CheckConstraint(
            "(used_at IS NULL) = (used_by IS NULL)",
            name="ck_unique_code_used_fields_together",
        ),
        sa.CheckConstraint(
            "is_used = (used_at IS NOT NULL)",
            name="ck_unique_code_is_used_matches_used_at",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_unique_code_code"), "unique_code", ["code"], unique=True)
    op.create_index(op.f("ix_unique_code_prize_id"), "unique_code", ["prize_id"], unique=False)
    op.create_index(op.f("ix_unique_code_expires_at"), "unique_code", ["expires_at"], unique=False)
    op.create_index(op.f("ix_unique_code_is_used"), "unique_code", ["is_used"], unique=False)
    op.create_index(
        "ix_unique_code_prize_created",
        "unique_code",
        ["prize_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_unique_code_prize_created", table_name="unique_code")
    op.drop_index(op.f("ix_unique_code_is_used"), table_name="unique_code")
    op.drop_index(op.f("ix_unique_code_expires_at"), table_name="unique_code")
    op.drop_index(op.f("ix_unique_code_prize_id"), table_name="unique_code")
    op.drop_index(op.f("ix_unique_code_code"), table_name="unique_code")
    op.drop_table("unique_code")
