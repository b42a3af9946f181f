"""
Operator router — the data behind the dashboard, without the dashboard.

Endpoints (all require `Authorization: Bearer <ADMIN_TOKEN>`):
  GET /admin/sync-status  — sync health per resource type
  GET /admin/data-counts  — row count of every resource table
  GET /admin/usage        — ledger totals and recent calls
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.auth.admin import require_admin
from cricket_api.core.database import get_db_session
from cricket_api.schemas.sync import SyncStatusOut
from cricket_api.schemas.usage import ApiLogOut, UsageSummaryOut
from cricket_api.services.reports import list_sync_status, resource_counts
from cricket_api.services.usage import usage_summary

router = APIRouter(tags=["Admin"], dependencies=[Depends(require_admin)])

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.get(
    "/sync-status",
    response_model=list[SyncStatusOut],
    summary="Sync health per resource type",
)
async def get_sync_status(session: DbSession) -> list[SyncStatusOut]:
    rows = await list_sync_status(session)
    return [SyncStatusOut.model_validate(row) for row in rows]


@router.get(
    "/data-counts",
    response_model=dict[str, int],
    summary="Row count of every resource table",
)
async def get_data_counts(session: DbSession) -> dict[str, int]:
    return await resource_counts(session)


@router.get(
    "/usage",
    response_model=UsageSummaryOut,
    summary="Usage ledger summary",
    description="Totals across all keys plus the most recent calls.",
)
async def get_usage(
    session: DbSession,
    limit: int = Query(default=100, ge=1, le=1000, description="Recent rows to include"),
) -> UsageSummaryOut:
    summary = await usage_summary(session, limit=limit)
    return UsageSummaryOut(
        total_requests=summary["total_requests"],
        success_rate=summary["success_rate"],
        avg_response_time_ms=summary["avg_response_time_ms"],
        recent=[ApiLogOut.model_validate(row) for row in summary["recent"]],
    )
