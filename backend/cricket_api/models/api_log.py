"""
SQLAlchemy model for the `api_logs` table (the usage ledger).

Each row is one request served by the gateway after authentication.
Rows are append-only — never updated, never deleted except by the
cascade from their API key.

Design notes:
  • The (api_key_id, created_at) index backs the sliding-window
    rate-limit count, which runs on every request.
  • created_at is written by the gateway's clock, not the DB default,
    so the window arithmetic and the stored value share one time source.
"""

import uuid
import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from cricket_api.core.database import Base


class ApiLog(Base):
    """One gateway request: which key, which resource, how it went."""

    __tablename__ = "api_logs"

    # ── Primary key ─────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    api_key_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("api_keys.id", ondelete="CASCADE"),
        nullable=False,
    )

    # ── Request ─────────────────────────────────────────────
    endpoint: Mapped[str] = mapped_column(String(50), nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False)

    # ── Outcome ─────────────────────────────────────────────
    status_code: Mapped[int] = mapped_column(Integer, nullable=False)
    response_time_ms: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # ── Table-level constraints ─────────────────────────────
    __table_args__ = (
        CheckConstraint("response_time_ms >= 0", name="ck_api_logs_latency_non_neg"),
        Index("ix_api_logs_key_created", "api_key_id", "created_at"),
        Index("ix_api_logs_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<ApiLog key={self.api_key_id!s:.8} endpoint={self.endpoint} "
            f"status={self.status_code}>"
        )
