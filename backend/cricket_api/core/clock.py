"""
UTC time helpers.

Services take a `clock` callable instead of calling datetime.now() directly,
so tests can move time forward (rate-limit windows, key expiry).
"""

from __future__ import annotations

import datetime
from collections.abc import Callable

Clock = Callable[[], datetime.datetime]


def utc_now() -> datetime.datetime:
    """Current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """
    Normalize a stored timestamp to aware UTC.

    SQLite hands back naive datetimes for TIMESTAMP WITH TIME ZONE columns;
    everything we write is UTC, so a naive value is treated as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)
