"""
API user model — the owner of one or more API keys.

Deleting a user cascades to its keys (and through them to usage rows).
"""

import uuid
import datetime

from sqlalchemy import Boolean, DateTime, String, Text, Uuid, true
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from cricket_api.core.database import Base


class ApiUser(Base):
    """A third-party consumer of the data API."""

    __tablename__ = "api_users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        Text, nullable=False,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
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
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<ApiUser id={self.id!s:.8} email={self.email!r}>"
