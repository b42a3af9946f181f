"""
Data gateway — the single read path for third-party callers.

serve() order of operations:
  1. Validate the resource name (closed ResourceType set)
  2. Authenticate the key (hash lookup, active, expiry)
  3. Sliding-window rate-limit check against the usage ledger
  4. Read every row of the resource table
  5. Touch api_keys.last_used_at, append a 200 ledger row, commit

If step 4 or 5 fails, a 500 ledger row is appended before StorageFailure
propagates, so failed requests still show up in usage history.
Rejections in steps 1–3 are never written to the ledger; a storage error
while checking the key surfaces as StorageFailure without one.
"""

from __future__ import annotations

import datetime
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.auth.dependencies import AuthContext, authenticate_api_key
from cricket_api.core.clock import Clock, utc_now
from cricket_api.core.errors import StorageFailure
from cricket_api.models.api_key import ApiKey
from cricket_api.resources import ResourceType, parse_resource
from cricket_api.services.rate_limiter import check_rate_limit
from cricket_api.services.usage import record_usage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServeResult:
    """Rows of one resource table plus their count."""

    records: list[dict[str, Any]] = field(default_factory=list)
    count: int = 0


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _row_to_dict(row: Any) -> dict[str, Any]:
    return {column.key: getattr(row, column.key) for column in row.__table__.columns}


async def serve(
    session: AsyncSession,
    resource_name: str,
    presented_key: str | None,
    *,
    method: str = "GET",
    clock: Clock = utc_now,
) -> ServeResult:
    """
    Authenticate, rate-limit, read one resource table, and log usage.

    Args:
        session:       Async DB session (request-scoped).
        resource_name: Path segment, e.g. "teams".
        presented_key: Raw API key from header/query (None if absent).
        method:        HTTP method, recorded in the ledger.
        clock:         Time source — injected by tests.

    Raises:
        InvalidResource, MissingCredential, InvalidCredential,
        CredentialInactive, CredentialExpired, RateLimited, StorageFailure.
    """
    resource = parse_resource(resource_name)
    now = clock()

    try:
        auth = await authenticate_api_key(session, presented_key, now)
        await check_rate_limit(session, auth, now)
    except SQLAlchemyError as exc:
        # Nothing served yet: no ledger row.
        logger.exception("Credential check for %s failed", resource.value)
        await session.rollback()
        raise StorageFailure(type(exc).__name__) from exc

    model = resource.model
    started = time.perf_counter()
    try:
        result = await session.execute(select(model).order_by(model.id))
        records = [_row_to_dict(row) for row in result.scalars().all()]
        latency_ms = _elapsed_ms(started)

        await session.execute(
            update(ApiKey)
            .where(ApiKey.id == auth.api_key_id)
            .values(last_used_at=now)
        )
        await record_usage(
            session, auth.api_key_id, resource.value, method, 200, latency_ms, now,
        )
        await session.commit()
    except SQLAlchemyError as exc:
        latency_ms = _elapsed_ms(started)
        logger.exception("Serving %s failed for key %s", resource.value, auth.key_prefix)
        await _log_failed_read(session, auth, resource, method, latency_ms, now)
        raise StorageFailure(type(exc).__name__) from exc

    logger.debug(
        "Served %d %s to key %s in %d ms",
        len(records), resource.value, auth.key_prefix, latency_ms,
    )
    return ServeResult(records=records, count=len(records))


async def _log_failed_read(
    session: AsyncSession,
    auth: AuthContext,
    resource: ResourceType,
    method: str,
    latency_ms: int,
    now: datetime.datetime,
) -> None:
    """Best-effort 500 ledger row after a failed read or write."""
    try:
        await session.rollback()
        await record_usage(
            session, auth.api_key_id, resource.value, method, 500, latency_ms, now,
        )
        await session.commit()
    except SQLAlchemyError:
        # The original StorageFailure is what the caller needs to see.
        logger.exception("Could not record failed read for key %s", auth.key_prefix)
        await session.rollback()
