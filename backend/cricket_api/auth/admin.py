"""
FastAPI dependencies guarding operator surfaces.

Two dependencies:
  • require_admin        — /admin/* views (ADMIN_TOKEN)
  • require_sync_trigger — POST /sync (SYNC_TRIGGER_TOKEN, optional)

Both expect `Authorization: Bearer <token>`. Tokens come from settings
only; comparison is constant-time.
"""

from __future__ import annotations

import secrets

from fastapi import Header, HTTPException, status

from cricket_api.core.config import settings

_OPERATOR_AUTH_FAILED = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or missing operator token.",
    headers={"WWW-Authenticate": "Bearer"},
)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", maxsplit=1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _check(expected: str, authorization: str | None) -> None:
    presented = _bearer_token(authorization)
    if presented is None or not secrets.compare_digest(presented, expected):
        raise _OPERATOR_AUTH_FAILED


async def require_admin(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> None:
    """Admin views are disabled (503) until ADMIN_TOKEN is configured."""
    if not settings.ADMIN_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured.",
        )
    _check(settings.ADMIN_TOKEN, authorization)


async def require_sync_trigger(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> None:
    """POST /sync is open unless SYNC_TRIGGER_TOKEN is set."""
    if settings.SYNC_TRIGGER_TOKEN:
        _check(settings.SYNC_TRIGGER_TOKEN, authorization)
