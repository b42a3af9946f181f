"""
API user and key management.

Keys are issued with a fresh random secret that is returned exactly once;
only its SHA-256 digest and a 12-character display prefix are stored.
Used by scripts/issue_key.py and by tests; the admin web UI that would
call these is outside this service.
"""

from __future__ import annotations

import datetime
import logging
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_api.auth.hashing import generate_api_key, key_display_prefix
from cricket_api.core.config import settings
from cricket_api.models.api_key import ApiKey
from cricket_api.models.api_user import ApiUser

logger = logging.getLogger(__name__)


async def create_api_user(
    session: AsyncSession,
    name: str,
    email: str,
) -> ApiUser:
    """Create a user, or return the existing one with this email."""
    existing = await session.scalar(select(ApiUser).where(ApiUser.email == email))
    if existing is not None:
        return existing

    user = ApiUser(name=name, email=email)
    session.add(user)
    await session.commit()
    logger.info("Created API user %s", user.id)
    return user


async def issue_api_key(
    session: AsyncSession,
    user_id: uuid.UUID,
    name: str = "default",
    rate_limit_per_minute: int | None = None,
    expires_at: datetime.datetime | None = None,
) -> tuple[ApiKey, str]:
    """
    Generate and persist a new key for `user_id`.

    Returns:
        (api_key, raw_key) — raw_key must be shown to the user now;
        it cannot be recovered later.
    """
    limit = (
        settings.DEFAULT_RATE_LIMIT_PER_MINUTE
        if rate_limit_per_minute is None
        else rate_limit_per_minute
    )
    if limit <= 0:
        raise ValueError("rate_limit_per_minute must be positive")

    raw_key, key_hash = generate_api_key()
    api_key = ApiKey(
        user_id=user_id,
        name=name,
        key_hash=key_hash,
        key_prefix=key_display_prefix(raw_key),
        rate_limit_per_minute=limit,
        expires_at=expires_at,
    )
    session.add(api_key)
    await session.commit()

    logger.info("Issued API key %s for user %s", api_key.key_prefix, user_id)
    return api_key, raw_key


async def set_api_key_active(
    session: AsyncSession,
    key_id: uuid.UUID,
    active: bool,
) -> bool:
    """Toggle a key's active flag. Returns False if the key does not exist."""
    result = await session.execute(
        update(ApiKey).where(ApiKey.id == key_id).values(is_active=active)
    )
    await session.commit()
    return result.rowcount > 0


async def delete_api_key(session: AsyncSession, key_id: uuid.UUID) -> bool:
    """
    Delete a key; its usage rows go with it (ON DELETE CASCADE).

    Any later request with the deleted key fails the hash lookup.
    """
    result = await session.execute(delete(ApiKey).where(ApiKey.id == key_id))
    await session.commit()
    return result.rowcount > 0
