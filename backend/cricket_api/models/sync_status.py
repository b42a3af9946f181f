"""
Sync health registry — one row per syncable resource type.

State machine (driven only by the sync engine):
  pending → syncing → success
  pending | success | error → syncing → error

`last_success_at` and `records_count` describe the last *successful* run;
a failed attempt only touches `last_sync_at` and `last_error`.

Rows are keyed by `endpoint` (unique) so status writes are
INSERT … ON CONFLICT (endpoint) DO UPDATE — no separate seeding race.
"""

import uuid
import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from cricket_api.core.database import Base

STATUS_PENDING = "pending"
STATUS_SYNCING = "syncing"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


class SyncStatus(Base):
    """Health of the most recent sync attempts for one resource type."""

    __tablename__ = "sync_status"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    endpoint: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=STATUS_PENDING,
        server_default=STATUS_PENDING,
    )
    last_sync_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    last_success_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    records_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0",
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'syncing', 'success', 'error')",
            name="ck_sync_status_valid",
        ),
    )

    def __repr__(self) -> str:
        return f"<SyncStatus {self.endpoint} status={self.status}>"
