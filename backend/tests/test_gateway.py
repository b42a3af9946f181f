"""Gateway read path: validation, credentials, rate limiting, usage ledger."""

import datetime

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from cricket_api.auth.errors import (
    CredentialExpired,
    CredentialInactive,
    InvalidCredential,
    MissingCredential,
    RateLimited,
)
from cricket_api.core.clock import as_utc
from cricket_api.core.errors import StorageFailure
from cricket_api.models.api_key import ApiKey
from cricket_api.models.api_log import ApiLog
from cricket_api.models.cricket import Team
from cricket_api.resources import InvalidResource, ResourceType
from cricket_api.services import gateway
from cricket_api.services.credentials import delete_api_key, set_api_key_active
from cricket_api.services.gateway import serve
from cricket_api.services.sync_engine import merge_record


async def _ledger(session, api_key_id):
    stmt = (
        select(ApiLog)
        .where(ApiLog.api_key_id == api_key_id)
        .order_by(ApiLog.created_at)
        .execution_options(populate_existing=True)
    )
    return (await session.execute(stmt)).scalars().all()


async def _seed_teams(session, clock, *records):
    for record in records:
        await merge_record(session, ResourceType.TEAMS, record, clock())
    await session.commit()


# ── Happy path ──────────────────────────────────────────────
@pytest.mark.asyncio
async def test_serves_every_row_with_count(db_session, make_key, clock):
    _, raw_key = await make_key()
    await _seed_teams(
        db_session,
        clock,
        {"id": 2, "name": "England", "national_team": True},
        {"id": 1, "name": "Australia", "national_team": True},
    )

    result = await serve(db_session, "teams", raw_key, clock=clock)

    assert result.count == 2
    assert [row["id"] for row in result.records] == [1, 2]
    assert result.records[0]["name"] == "Australia"
    assert result.records[0]["raw_payload"] == {"id": 1, "name": "Australia", "national_team": True}
    assert result.records[0]["version"] == 1


@pytest.mark.asyncio
async def test_empty_table_serves_zero_rows(db_session, make_key, clock):
    _, raw_key = await make_key()

    result = await serve(db_session, "scores", raw_key, clock=clock)

    assert result.count == 0
    assert result.records == []


@pytest.mark.asyncio
async def test_success_touches_last_used_and_appends_ledger_row(db_session, make_key, clock):
    api_key, raw_key = await make_key()

    await serve(db_session, "venues", raw_key, method="GET", clock=clock)

    stored = await db_session.scalar(
        select(ApiKey)
        .where(ApiKey.id == api_key.id)
        .execution_options(populate_existing=True)
    )
    assert as_utc(stored.last_used_at) == clock()

    rows = await _ledger(db_session, api_key.id)
    assert len(rows) == 1
    assert rows[0].endpoint == "venues"
    assert rows[0].method == "GET"
    assert rows[0].status_code == 200
    assert rows[0].response_time_ms >= 0
    assert as_utc(rows[0].created_at) == clock()


# ── Rejections ──────────────────────────────────────────────
@pytest.mark.asyncio
async def test_unknown_resource_is_rejected_before_auth(db_session):
    with pytest.raises(InvalidResource) as exc_info:
        await serve(db_session, "umpires", None)

    body = exc_info.value.payload()
    assert exc_info.value.status_code == 400
    assert body["error"] == "Invalid endpoint"
    assert body["valid_endpoints"][0] == "continents"
    assert "scores" in body["valid_endpoints"]
    assert len(body["valid_endpoints"]) == 13


@pytest.mark.asyncio
async def test_missing_key(db_session):
    with pytest.raises(MissingCredential) as exc_info:
        await serve(db_session, "teams", None)
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_unknown_key(db_session, make_key):
    await make_key()
    with pytest.raises(InvalidCredential):
        await serve(db_session, "teams", "ck_live_not-a-real-key")


@pytest.mark.asyncio
async def test_inactive_key_is_forbidden(db_session, make_key, clock):
    api_key, raw_key = await make_key()
    assert await set_api_key_active(db_session, api_key.id, False)

    with pytest.raises(CredentialInactive) as exc_info:
        await serve(db_session, "teams", raw_key, clock=clock)
    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_inactive_wins_over_expired(db_session, make_key, clock):
    api_key, raw_key = await make_key(expires_at=clock() - datetime.timedelta(days=1))
    await set_api_key_active(db_session, api_key.id, False)

    with pytest.raises(CredentialInactive):
        await serve(db_session, "teams", raw_key, clock=clock)


@pytest.mark.asyncio
async def test_expired_key_is_forbidden(db_session, make_key, clock):
    _, raw_key = await make_key(expires_at=clock() + datetime.timedelta(seconds=30))

    await serve(db_session, "teams", raw_key, clock=clock)

    clock.advance(31)
    with pytest.raises(CredentialExpired) as exc_info:
        await serve(db_session, "teams", raw_key, clock=clock)
    assert exc_info.value.message == "API key has expired"


@pytest.mark.asyncio
async def test_deleted_key_is_unknown(db_session, make_key, clock):
    api_key, raw_key = await make_key()
    await serve(db_session, "teams", raw_key, clock=clock)

    assert await delete_api_key(db_session, api_key.id)

    with pytest.raises(InvalidCredential):
        await serve(db_session, "teams", raw_key, clock=clock)


@pytest.mark.asyncio
async def test_rejections_are_not_logged(db_session, make_key, clock):
    api_key, raw_key = await make_key()
    await set_api_key_active(db_session, api_key.id, False)

    with pytest.raises(CredentialInactive):
        await serve(db_session, "teams", raw_key, clock=clock)

    assert await _ledger(db_session, api_key.id) == []


# ── Rate limiting ───────────────────────────────────────────
@pytest.mark.asyncio
async def test_rate_limit_sliding_window(db_session, make_key, clock):
    api_key, raw_key = await make_key(rate_limit_per_minute=2)
    start = clock()

    await serve(db_session, "teams", raw_key, clock=clock)        # t+0
    clock.advance(10)
    await serve(db_session, "teams", raw_key, clock=clock)        # t+10

    clock.advance(10)                                             # t+20
    with pytest.raises(RateLimited) as exc_info:
        await serve(db_session, "teams", raw_key, clock=clock)
    assert exc_info.value.status_code == 429
    assert exc_info.value.payload() == {"error": "Rate limit exceeded", "limit": 2}

    # t+61: the t+0 request has aged out, the t+10 one has not
    clock.now = start + datetime.timedelta(seconds=61)
    await serve(db_session, "teams", raw_key, clock=clock)

    clock.advance(4)                                              # t+65
    with pytest.raises(RateLimited):
        await serve(db_session, "teams", raw_key, clock=clock)

    # Only the three served requests hit the ledger
    rows = await _ledger(db_session, api_key.id)
    assert [row.status_code for row in rows] == [200, 200, 200]


@pytest.mark.asyncio
async def test_rate_limit_is_per_key(db_session, make_key, clock):
    _, first = await make_key(rate_limit_per_minute=1)
    _, second = await make_key(rate_limit_per_minute=1)

    await serve(db_session, "teams", first, clock=clock)
    with pytest.raises(RateLimited):
        await serve(db_session, "teams", first, clock=clock)

    result = await serve(db_session, "teams", second, clock=clock)
    assert result.count == 0


# ── Storage failure ─────────────────────────────────────────
@pytest.mark.asyncio
async def test_failed_read_logs_500_and_raises(db_session, engine, make_key, clock):
    api_key, raw_key = await make_key()

    async with engine.begin() as conn:
        await conn.run_sync(lambda sync_conn: Team.__table__.drop(sync_conn))

    with pytest.raises(StorageFailure) as exc_info:
        await serve(db_session, "teams", raw_key, clock=clock)

    assert exc_info.value.status_code == 500
    assert exc_info.value.payload()["error"] == "Database error"
    assert exc_info.value.payload()["details"] == "OperationalError"

    rows = await _ledger(db_session, api_key.id)
    assert len(rows) == 1
    assert rows[0].status_code == 500
    assert rows[0].endpoint == "teams"

    total = await db_session.scalar(select(func.count()).select_from(ApiLog))
    assert total == 1


@pytest.mark.asyncio
async def test_failed_ledger_write_logs_500_and_raises(db_session, make_key, clock, monkeypatch):
    api_key, raw_key = await make_key()
    original = gateway.record_usage

    async def failing_success_write(session, api_key_id, endpoint, method, status_code, *args):
        if status_code == 200:
            raise OperationalError("INSERT INTO api_logs", {}, Exception("disk I/O error"))
        await original(session, api_key_id, endpoint, method, status_code, *args)

    monkeypatch.setattr(gateway, "record_usage", failing_success_write)

    with pytest.raises(StorageFailure) as exc_info:
        await serve(db_session, "teams", raw_key, clock=clock)
    assert exc_info.value.payload()["details"] == "OperationalError"

    rows = await _ledger(db_session, api_key.id)
    assert [row.status_code for row in rows] == [500]

    stored = await db_session.scalar(
        select(ApiKey)
        .where(ApiKey.id == api_key.id)
        .execution_options(populate_existing=True)
    )
    assert stored.last_used_at is None


@pytest.mark.asyncio
async def test_storage_error_during_key_check_is_storage_failure(db_session, engine, make_key, clock):
    _, raw_key = await make_key()

    async with engine.begin() as conn:
        await conn.run_sync(lambda sync_conn: ApiLog.__table__.drop(sync_conn))

    with pytest.raises(StorageFailure) as exc_info:
        await serve(db_session, "teams", raw_key, clock=clock)

    assert exc_info.value.payload() == {"error": "Database error", "details": "OperationalError"}
