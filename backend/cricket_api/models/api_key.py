"""
API key model — authentication credential for a data consumer.

Security notes:
  • Raw API keys are NEVER stored. Only a SHA-256 hash is persisted.
  • The `key_prefix` column stores the first 12 characters
    (e.g., "ck_live_3fa9") for identification in logs/UI without
    exposing the full key.
  • `is_active` allows key revocation without deletion (audit trail).
  • Deleting the key cascades to its api_logs rows.
"""

import uuid
import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    true,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from cricket_api.core.database import Base


class ApiKey(Base):
    """Hashed API key belonging to an API user."""

    __tablename__ = "api_keys"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("api_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(
        Text, nullable=False, default="default",
    )
    key_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
    )
    key_prefix: Mapped[str] = mapped_column(
        String(12),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
    rate_limit_per_minute: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=60,
        server_default="60",
    )
    expires_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_used_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint(
            "rate_limit_per_minute > 0",
            name="ck_api_keys_rate_limit_positive",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<ApiKey id={self.id!s:.8} prefix={self.key_prefix!r} "
            f"active={self.is_active}>"
        )
