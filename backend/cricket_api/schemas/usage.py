"""
Pydantic v2 schemas for usage reporting.

Key material never appears here — ledger rows carry the key id only.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ApiLogOut(BaseModel):
    """One usage ledger row."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    api_key_id: uuid.UUID
    endpoint: str
    method: str
    status_code: int
    response_time_ms: int
    created_at: datetime


class UsageSummaryOut(BaseModel):
    """Ledger totals plus the most recent calls."""

    total_requests: int = Field(..., ge=0)
    success_rate: float = Field(
        ..., ge=0, le=100, description="Percentage of 2xx responses.",
    )
    avg_response_time_ms: float = Field(..., ge=0)
    recent: list[ApiLogOut]
