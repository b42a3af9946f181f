"""
Version history for resource records.

One row per overwrite of a resource record (never for the first insert).
For a given (table_name, record_id) the `version` values form a gapless
ascending run 2, 3, 4, … matching the record's own version counter.
Append-only.
"""

import uuid
import datetime
from typing import Any

from sqlalchemy import DateTime, Index, Integer, String, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from cricket_api.core.database import Base, JSONPayload


class DataVersion(Base):
    """Snapshot of an upstream payload at one version of a record."""

    __tablename__ = "data_versions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    table_name: Mapped[str] = mapped_column(String(50), nullable=False)
    # String so the table stays agnostic of each resource's id type.
    record_id: Mapped[str] = mapped_column(String(64), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    data_snapshot: Mapped[dict[str, Any]] = mapped_column(
        JSONPayload, nullable=False,
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_data_versions_record", "table_name", "record_id", "version"),
    )

    def __repr__(self) -> str:
        return (
            f"<DataVersion {self.table_name}:{self.record_id} "
            f"v{self.version}>"
        )
