"""
Sync trigger router — manual or cron-driven pulls from upstream.

POST /sync                 — sync every type in the fixed order
POST /sync?resource=teams  — sync one type

Always 200 once the run starts: per-type failures are reported in
`results` (and in sync_status), never as an HTTP error.
"""

import logging
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.auth.admin import require_sync_trigger
from cricket_api.core.database import get_db_session
from cricket_api.resources import parse_syncable
from cricket_api.schemas.sync import SyncRunOut
from cricket_api.services.sync_engine import sync_all, sync_resource
from cricket_api.services.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sync"], dependencies=[Depends(require_sync_trigger)])


async def get_upstream_client() -> AsyncIterator[UpstreamClient]:
    """Request-scoped upstream client; overridden in tests."""
    async with UpstreamClient.from_settings() as client:
        yield client


DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Upstream = Annotated[UpstreamClient, Depends(get_upstream_client)]


@router.post(
    "",
    response_model=SyncRunOut,
    response_model_exclude_none=True,
    summary="Pull upstream collections into local storage",
    description=(
        "Without `resource` (or with an empty one), syncs every type one after another. "
        "A failing type is reported in the results and does not stop the run."
    ),
)
async def trigger_sync(
    session: DbSession,
    client: Upstream,
    resource: str | None = Query(
        default=None,
        description="Restrict the run to one resource type",
        examples=["teams"],
    ),
) -> SyncRunOut:
    if resource:
        results = [await sync_resource(session, parse_syncable(resource), client)]
    else:
        results = await sync_all(session, client)

    logger.info("Manual sync finished for %d resource type(s)", len(results))
    return SyncRunOut(success=True, results=[r.as_dict() for r in results])
