"""
Pydantic v2 response schemas for the data gateway.

Rows are returned as plain column dicts (typed columns + raw_payload);
the shape differs per resource type, so `data` is deliberately loose.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ResourceMeta(BaseModel):
    count: int = Field(..., ge=0, description="Number of rows in `data`.")


class ResourceListOut(BaseModel):
    """Body of a successful GET /{resource}."""

    data: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Every row of the resource table, ordered by upstream id.",
    )
    meta: ResourceMeta


class ErrorOut(BaseModel):
    """Error body shared by every gateway failure."""

    error: str
    valid_endpoints: list[str] | None = Field(
        default=None, description="Present on 400 Invalid endpoint.",
    )
    limit: int | None = Field(
        default=None, description="Present on 429 — the key's per-minute limit.",
    )
