"""
Ledger-backed sliding-window rate limiter.

Enforces each API key's `rate_limit_per_minute` by counting that key's
api_logs rows created in the trailing window (60 s by default).

Design decisions:
  • Sliding, not bucketed — the window is "the last 60 seconds from now",
    so requests age out continuously instead of resetting on the minute.
  • Check only — the ledger row written after the read IS the increment,
    so rejected (429) requests never count against the key.
  • Best-effort under concurrency — two requests landing in the same
    instant may both pass the boundary check. No locks, no Redis.
"""

from __future__ import annotations

import datetime
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.auth.dependencies import AuthContext
from cricket_api.auth.errors import RateLimited
from cricket_api.core.config import settings
from cricket_api.services.usage import count_requests_since

logger = logging.getLogger(__name__)


def window_start(
    now: datetime.datetime,
    window_seconds: int | None = None,
) -> datetime.datetime:
    """Start of the trailing window ending at `now`."""
    seconds = window_seconds if window_seconds is not None else settings.RATE_LIMIT_WINDOW_SECONDS
    return now - datetime.timedelta(seconds=seconds)


async def check_rate_limit(
    session: AsyncSession,
    auth: AuthContext,
    now: datetime.datetime,
) -> int:
    """
    Raise RateLimited if the key has used its allowance in the window.

    Returns the number of requests already counted in the window.
    """
    used = await count_requests_since(session, auth.api_key_id, window_start(now))

    if used >= auth.rate_limit_per_minute:
        logger.info(
            "Rate limit hit for key %s (%d/%d)",
            auth.key_prefix,
            used,
            auth.rate_limit_per_minute,
        )
        raise RateLimited(auth.rate_limit_per_minute)

    return used
