"""Key hashing and the credential store."""

import uuid

import pytest
from sqlalchemy import select

from cricket_api.auth.hashing import (
    DISPLAY_PREFIX_LENGTH,
    generate_api_key,
    hash_api_key,
    key_display_prefix,
)
from cricket_api.models.api_key import ApiKey
from cricket_api.models.api_user import ApiUser
from cricket_api.services.credentials import (
    create_api_user,
    delete_api_key,
    issue_api_key,
    set_api_key_active,
)


def test_hash_is_sha256_hex():
    digest = hash_api_key("ck_live_abc")
    assert len(digest) == 64
    assert digest == hash_api_key("ck_live_abc")
    assert digest != hash_api_key("ck_live_abd")


def test_generated_keys_are_unique_and_prefixed():
    raw_a, hash_a = generate_api_key()
    raw_b, _ = generate_api_key()

    assert raw_a.startswith("ck_live_")
    assert len(raw_a) == len("ck_live_") + 64
    assert raw_a != raw_b
    assert hash_a == hash_api_key(raw_a)
    assert len(key_display_prefix(raw_a)) == DISPLAY_PREFIX_LENGTH


@pytest.mark.asyncio
async def test_issue_stores_digest_not_raw_key(db_session):
    user = await create_api_user(db_session, "Data Team", "data@example.com")
    api_key, raw_key = await issue_api_key(db_session, user.id, name="dashboard")

    stored = await db_session.scalar(select(ApiKey).where(ApiKey.id == api_key.id))
    assert stored.key_hash == hash_api_key(raw_key)
    assert stored.key_hash != raw_key
    assert stored.key_prefix == raw_key[:12]
    assert stored.name == "dashboard"
    assert stored.is_active is True
    assert stored.rate_limit_per_minute == 60


@pytest.mark.asyncio
async def test_issue_rejects_non_positive_limit(db_session):
    user = await create_api_user(db_session, "Data Team", "data@example.com")
    with pytest.raises(ValueError):
        await issue_api_key(db_session, user.id, rate_limit_per_minute=0)


@pytest.mark.asyncio
async def test_create_user_reuses_email(db_session):
    first = await create_api_user(db_session, "A", "same@example.com")
    second = await create_api_user(db_session, "B", "same@example.com")

    assert first.id == second.id
    users = (await db_session.execute(select(ApiUser))).scalars().all()
    assert len(users) == 1


@pytest.mark.asyncio
async def test_toggle_and_delete_report_missing_keys(db_session, make_key):
    api_key, _ = await make_key()

    assert await set_api_key_active(db_session, api_key.id, False) is True
    assert await set_api_key_active(db_session, uuid.uuid4(), False) is False
    assert await delete_api_key(db_session, api_key.id) is True
    assert await delete_api_key(db_session, api_key.id) is False
