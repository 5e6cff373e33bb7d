"""Add session_tokens table (one row per issued bearer token).

Revision ID: 20261001200000
Revises: 20261001100000
Create Date: 2026-10-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261001200000"
down_revision: Union[str, None] = "20261001100000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "session_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("token", sa.Text(), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("expired", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )
    # Reaper sweeps scan by created_at; revoke-all scans by owner.
    op.create_index(
        op.f("ix_session_tokens_created_at"), "session_tokens", ["created_at"], unique=False
    )
    op.create_index(
        op.f("ix_session_tokens_owner_id"), "session_tokens", ["owner_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_session_tokens_owner_id"), table_name="session_tokens")
    op.drop_index(op.f("ix_session_tokens_created_at"), table_name="session_tokens")
    op.drop_table("session_tokens")
