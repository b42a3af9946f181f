"""
Read-only operator views: sync health and local row counts.

All aggregation happens in SQL — one COUNT per resource table.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.models.sync_status import SyncStatus
from cricket_api.resources import SYNC_ORDER, ResourceType


async def list_sync_status(session: AsyncSession) -> list[SyncStatus]:
    """All sync_status rows, in sync order (unknown endpoints last)."""
    rows = (await session.execute(select(SyncStatus))).scalars().all()
    order = {resource.value: index for index, resource in enumerate(SYNC_ORDER)}
    return sorted(rows, key=lambda row: order.get(row.endpoint, len(order)))


async def resource_counts(session: AsyncSession) -> dict[str, int]:
    """Row count of every resource table, keyed by resource name."""
    counts: dict[str, int] = {}
    for resource in ResourceType:
        stmt = select(func.count()).select_from(resource.model)
        counts[resource.value] = int((await session.execute(stmt)).scalar_one())
    return counts
