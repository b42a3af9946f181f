"""create sync_status table and seed one row per syncable type

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-12

The sync engine upserts on `endpoint`, so the seed rows only make the
registry complete (every type visible as 'pending') before the first run.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0003"
down_revision: Union[str, None] = "0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Frozen copy of the sync order at the time of this revision.
_SYNCABLE = [
    "continents",
    "countries",
    "leagues",
    "seasons",
    "fixtures",
    "livescores",
    "teams",
    "players",
    "officials",
    "venues",
    "stages",
    "positions",
]


def upgrade() -> None:
    sync_status = op.create_table(
        "sync_status",
        sa.Column("id", sa.UUID(), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("endpoint", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), server_default="pending", nullable=False),
        sa.Column("last_sync_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("last_success_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column("records_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("endpoint"),
        sa.CheckConstraint(
            "status IN ('pending', 'syncing', 'success', 'error')",
            name="ck_sync_status_valid",
        ),
    )

    op.bulk_insert(sync_status, [{"endpoint": name} for name in _SYNCABLE])


def downgrade() -> None:
    op.drop_table("sync_status")
