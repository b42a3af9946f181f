"""
Pydantic v2 schemas for the sync trigger and sync health views.

SyncStatusOut uses from_attributes=True so SyncStatus ORM rows map
directly without manual conversion.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class SyncResultOut(BaseModel):
    """One resource type's outcome in a sync run."""

    model_config = ConfigDict(extra="forbid")

    resource: str
    status: Literal["success", "error"]
    count: int | None = None
    error: str | None = None


class SyncRunOut(BaseModel):
    """Body of POST /sync."""

    success: bool = True
    results: list[SyncResultOut]


class SyncStatusOut(BaseModel):
    """One row of the sync health registry."""

    model_config = ConfigDict(from_attributes=True)

    endpoint: str
    status: str
    last_sync_at: datetime.datetime | None
    last_success_at: datetime.datetime | None
    last_error: str | None
    records_count: int
    updated_at: datetime.datetime
