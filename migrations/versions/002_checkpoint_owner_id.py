"""Checkpoint ownership (owner_id)

Rows created before ownership tracking keep owner_id NULL and are visible to
admins only.

Revision ID: 002
Revises: 001
Create Date: 2025-09-14
"""

from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("gameplay_checkpoints") as batch_op:
        batch_op.add_column(sa.Column("owner_id", sa.String(255), nullable=True))
        batch_op.create_index("ix_gameplay_checkpoints_owner_id", ["owner_id"])


def downgrade() -> None:
    with op.batch_alter_table("gameplay_checkpoints") as batch_op:
        batch_op.drop_index("ix_gameplay_checkpoints_owner_id")
        batch_op.drop_column("owner_id")
