"""
Sync engine — pulls upstream collections into the local resource tables.

Per resource type (sync_resource):
  1. sync_status → 'syncing' (unconditional), committed on its own
  2. Fetch the whole collection from upstream
  3. Merge every record, set sync_status → 'success', one commit
  On any failure: roll back the merge, sync_status → 'error' with the
  message; last_success_at and records_count keep the last good run.

Merge (merge_record):
  • New upstream id   → INSERT with version = 1, no snapshot
  • Known upstream id → UPSERT with version = existing + 1 and one
    data_versions row at the new version (payload as written)
  Versions track sync attempts, not content changes — identical payloads
  still bump the version.

sync_all runs the types in SYNC_ORDER one at a time. One type failing
never stops the loop; every type yields exactly one result.

No lock guards a type against a concurrent sync of the same type:
last writer wins on sync_status and on version counters.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.core.clock import Clock, utc_now
from cricket_api.core.database import async_session_factory, dialect_insert
from cricket_api.models.data_version import DataVersion
from cricket_api.models.sync_status import (
    STATUS_ERROR,
    STATUS_PENDING,
    STATUS_SUCCESS,
    STATUS_SYNCING,
    SyncStatus,
)
from cricket_api.resources import SYNC_ORDER, ResourceType
from cricket_api.services.upstream_client import UpstreamClient, UpstreamFetchFailure

logger = logging.getLogger(__name__)


class MalformedRecord(ValueError):
    """An upstream record cannot be merged (e.g. it has no id)."""


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of one sync attempt for one resource type."""

    resource: str
    status: str
    count: int | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"resource": self.resource, "status": self.status}
        if self.status == STATUS_SUCCESS:
            body["count"] = self.count
        else:
            body["error"] = self.error
        return body


# ── Health registry ─────────────────────────────────────────
async def _set_status(
    session: AsyncSession,
    resource: ResourceType,
    now: datetime.datetime,
    **fields: Any,
) -> None:
    """Upsert the sync_status row for `resource` with the given fields."""
    values = {"endpoint": resource.value, "updated_at": now, **fields}
    stmt = dialect_insert(session, SyncStatus).values(
        id=uuid.uuid4(), **values,
    ).on_conflict_do_update(
        index_elements=["endpoint"],
        set_={k: v for k, v in values.items() if k != "endpoint"},
    )
    await session.execute(stmt)


async def seed_sync_status(session: AsyncSession) -> None:
    """Create a 'pending' row for every syncable type that has none yet."""
    for resource in SYNC_ORDER:
        stmt = dialect_insert(session, SyncStatus).values(
            id=uuid.uuid4(),
            endpoint=resource.value,
            status=STATUS_PENDING,
            records_count=0,
        ).on_conflict_do_nothing(index_elements=["endpoint"])
        await session.execute(stmt)
    await session.commit()


# ── Merge ───────────────────────────────────────────────────
async def merge_record(
    session: AsyncSession,
    resource: ResourceType,
    record: dict[str, Any],
    now: datetime.datetime,
) -> int:
    """
    Insert or overwrite one upstream record. The caller commits.

    Returns the version the record now carries.
    """
    if not isinstance(record, dict) or record.get("id") is None:
        raise MalformedRecord(f"{resource.value} record without an id")

    model = resource.model
    record_id = record["id"]

    existing_version = await session.scalar(
        select(model.version).where(model.id == record_id)
    )
    version = 1 if existing_version is None else existing_version + 1

    values = {
        "id": record_id,
        **resource.project(record),
        "raw_payload": record,
        "version": version,
        "updated_at": now,
    }
    upsert = dialect_insert(session, model).values(**values).on_conflict_do_update(
        index_elements=["id"],
        set_={k: v for k, v in values.items() if k != "id"},
    )
    await session.execute(upsert)

    if existing_version is not None:
        session.add(
            DataVersion(
                table_name=resource.value,
                record_id=str(record_id),
                version=version,
                data_snapshot=record,
                created_at=now,
            )
        )

    return version


# ── Sync ────────────────────────────────────────────────────
async def sync_resource(
    session: AsyncSession,
    resource: ResourceType,
    client: UpstreamClient,
    clock: Clock = utc_now,
) -> SyncResult:
    """
    Fetch and merge one resource type, driving its sync_status row.

    Never raises for fetch/merge failures — they come back as an
    error SyncResult and are recorded in sync_status.last_error.
    """
    logger.info("Syncing %s", resource.value)

    try:
        await _set_status(session, resource, clock(), status=STATUS_SYNCING)
        await session.commit()

        records = await client.fetch_collection(resource)

        merge_time = clock()
        for record in records:
            await merge_record(session, resource, record, merge_time)

        finished = clock()
        await _set_status(
            session,
            resource,
            finished,
            status=STATUS_SUCCESS,
            last_sync_at=finished,
            last_success_at=finished,
            records_count=len(records),
            last_error=None,
        )
        await session.commit()
    except UpstreamFetchFailure as exc:
        message = exc.message
    except MalformedRecord as exc:
        message = str(exc)
    except SQLAlchemyError as exc:
        logger.exception("Storage error while syncing %s", resource.value)
        message = f"Database error: {type(exc).__name__}"
    except Exception as exc:
        logger.exception("Unexpected error while syncing %s", resource.value)
        message = str(exc) or type(exc).__name__
    else:
        logger.info("Synced %d %s ✓", len(records), resource.value)
        return SyncResult(resource=resource.value, status=STATUS_SUCCESS, count=len(records))

    # ── Failure path: drop the partial merge, record the error ──
    logger.warning("Sync of %s failed: %s", resource.value, message)
    await session.rollback()
    try:
        failed_at = clock()
        await _set_status(
            session,
            resource,
            failed_at,
            status=STATUS_ERROR,
            last_sync_at=failed_at,
            last_error=message,
        )
        await session.commit()
    except SQLAlchemyError:
        logger.exception("Could not record sync failure for %s", resource.value)
        await session.rollback()

    return SyncResult(resource=resource.value, status=STATUS_ERROR, error=message)


async def sync_all(
    session: AsyncSession,
    client: UpstreamClient,
    clock: Clock = utc_now,
    resources: Sequence[ResourceType] = SYNC_ORDER,
) -> list[SyncResult]:
    """Sync every type in order; always returns one result per type."""
    results = [
        await sync_resource(session, resource, client, clock)
        for resource in resources
    ]

    failed = [r.resource for r in results if r.status != STATUS_SUCCESS]
    logger.info(
        "Sync run complete: %d ok, %d failed%s",
        len(results) - len(failed),
        len(failed),
        f" ({', '.join(failed)})" if failed else "",
    )
    return results


async def run_scheduled_sync() -> list[SyncResult]:
    """Scheduler entrypoint — own session and upstream client per run."""
    async with async_session_factory() as session:
        async with UpstreamClient.from_settings() as client:
            return await sync_all(session, client)
