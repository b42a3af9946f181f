"""
API key authentication for the data gateway.

Flow:
  1. Extract the key from the X-API-Key header (fallback: ?api_key=)
  2. Hash the key (SHA-256)
  3. Look up api_keys by hash — one indexed query, nothing else folded in
  4. Check is_active, then expires_at, in Python after the lookup
  5. Return AuthContext (key id + limit) for the rate limiter and ledger

Security:
  • Raw keys are NEVER logged — only the stored prefix and key id
  • Hash lookup means the DB never sees the raw key
  • Inactive/expired keys are distinguished (403) only after the same
    lookup a valid key takes, so latency does not reveal which hashes exist
"""

from __future__ import annotations

import datetime
import logging
import uuid
from dataclasses import dataclass

from fastapi import Header, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.auth.errors import (
    CredentialExpired,
    CredentialInactive,
    InvalidCredential,
    MissingCredential,
)
from cricket_api.auth.hashing import hash_api_key
from cricket_api.core.clock import as_utc
from cricket_api.models.api_key import ApiKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Authenticated caller, as seen by the rest of the gateway.

    Attributes:
        api_key_id:            The key used for this request.
        user_id:               Owner of the key.
        key_prefix:            Display prefix — safe to log.
        rate_limit_per_minute: Sliding-window allowance for this key.
    """

    api_key_id: uuid.UUID
    user_id: uuid.UUID
    key_prefix: str
    rate_limit_per_minute: int


async def get_presented_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    api_key: str | None = Query(default=None),
) -> str | None:
    """
    FastAPI dependency — the raw key from the header, else the query string.

    Returns None when neither is present; the gateway turns that into
    MissingCredential so the resource name is validated first.
    """
    return x_api_key or api_key


async def authenticate_api_key(
    session: AsyncSession,
    raw_key: str | None,
    now: datetime.datetime,
) -> AuthContext:
    """
    Resolve a raw key to an AuthContext.

    Raises:
      MissingCredential   — no key presented
      InvalidCredential   — unknown key hash
      CredentialInactive  — key revoked
      CredentialExpired   — expires_at in the past
    """

    # ── 1. Presence ─────────────────────────────────────────
    if not raw_key:
        raise MissingCredential()

    # ── 2. Hash and look up ─────────────────────────────────
    key_hash = hash_api_key(raw_key)

    stmt = (
        select(ApiKey)
        .where(ApiKey.key_hash == key_hash)
    )
    result = await session.execute(stmt)
    api_key = result.scalar_one_or_none()

    if api_key is None:
        raise InvalidCredential()

    # ── 3. Check active ─────────────────────────────────────
    if not api_key.is_active:
        logger.info("Rejected inactive key %s", api_key.key_prefix)
        raise CredentialInactive()

    # ── 4. Check expiry ─────────────────────────────────────
    if api_key.expires_at is not None and as_utc(api_key.expires_at) < now:
        logger.info("Rejected expired key %s", api_key.key_prefix)
        raise CredentialExpired()

    return AuthContext(
        api_key_id=api_key.id,
        user_id=api_key.user_id,
        key_prefix=api_key.key_prefix,
        rate_limit_per_minute=api_key.rate_limit_per_minute,
    )
