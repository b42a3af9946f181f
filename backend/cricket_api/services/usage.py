"""
Usage ledger service — writes and reads the api_logs table.

The ledger has two readers:
  • the rate limiter (count of a key's rows in the trailing window)
  • operator reporting (totals, success rate, recent calls)
"""

from __future__ import annotations

import datetime
import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.models.api_log import ApiLog


async def record_usage(
    session: AsyncSession,
    api_key_id: uuid.UUID,
    endpoint: str,
    method: str,
    status_code: int,
    response_time_ms: int,
    created_at: datetime.datetime,
) -> None:
    """
    Append one ledger row. The caller commits.

    Args:
        session:          Async DB session (caller manages lifecycle).
        api_key_id:       Key that made the request.
        endpoint:         Resource name served.
        method:           HTTP method.
        status_code:      Status returned to the caller.
        response_time_ms: Measured storage read latency.
        created_at:       Request time — the rate limiter windows on this.
    """
    session.add(
        ApiLog(
            api_key_id=api_key_id,
            endpoint=endpoint,
            method=method,
            status_code=status_code,
            response_time_ms=max(response_time_ms, 0),
            created_at=created_at,
        )
    )


async def count_requests_since(
    session: AsyncSession,
    api_key_id: uuid.UUID,
    since: datetime.datetime,
) -> int:
    """Number of ledger rows for a key created at or after `since`."""
    stmt = (
        select(func.count())
        .select_from(ApiLog)
        .where(
            ApiLog.api_key_id == api_key_id,
            ApiLog.created_at >= since,
        )
    )
    result = await session.execute(stmt)
    return int(result.scalar_one())


async def usage_summary(
    session: AsyncSession,
    limit: int = 100,
) -> dict[str, Any]:
    """
    Aggregate view of the ledger for operators.

    Returns total requests, share of 2xx responses (percent, 0 when empty),
    mean response time, and the `limit` most recent rows.
    """
    totals_stmt = select(
        func.count().label("total"),
        func.count()
        .filter(ApiLog.status_code >= 200, ApiLog.status_code < 300)
        .label("ok"),
        func.avg(ApiLog.response_time_ms).label("avg_ms"),
    )
    totals = (await session.execute(totals_stmt)).one()

    recent_stmt = (
        select(ApiLog)
        .order_by(ApiLog.created_at.desc())
        .limit(limit)
    )
    recent = (await session.execute(recent_stmt)).scalars().all()

    total = int(totals.total or 0)
    return {
        "total_requests": total,
        "success_rate": round(100.0 * int(totals.ok or 0) / total, 2) if total else 0.0,
        "avg_response_time_ms": round(float(totals.avg_ms), 2) if totals.avg_ms is not None else 0.0,
        "recent": recent,
    }
