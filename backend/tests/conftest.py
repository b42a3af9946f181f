"""Shared pytest fixtures: in-memory database, fake clock, keys, upstream."""

from __future__ import annotations

import datetime
import os
from collections.abc import AsyncIterator, Callable
from typing import Any

# Settings are read at import time, so point them at SQLite before anything
# from cricket_api is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("UPSTREAM_API_TOKEN", "test-upstream-token")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cricket_api.core.database import Base
from cricket_api.models.api_key import ApiKey
from cricket_api.services.credentials import create_api_user, issue_api_key
from cricket_api.services.upstream_client import UpstreamClient

# Register every table on Base.metadata
import cricket_api.models.api_log  # noqa: F401
import cricket_api.models.data_version  # noqa: F401
import cricket_api.models.sync_status  # noqa: F401
import cricket_api.resources  # noqa: F401

UPSTREAM_BASE = "https://upstream.test/api/v2.0"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime.datetime | None = None) -> None:
        self.now = start or datetime.datetime(2026, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, seconds: float) -> datetime.datetime:
        self.now += datetime.timedelta(seconds=seconds)
        return self.now


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_key(db_session: AsyncSession):
    """Factory: issue a key for a fresh user, returning (ApiKey, raw_key)."""
    counter = {"n": 0}

    async def _make(
        rate_limit_per_minute: int = 60,
        expires_at: datetime.datetime | None = None,
    ) -> tuple[ApiKey, str]:
        counter["n"] += 1
        user = await create_api_user(
            db_session, f"User {counter['n']}", f"user{counter['n']}@example.com",
        )
        return await issue_api_key(
            db_session,
            user.id,
            rate_limit_per_minute=rate_limit_per_minute,
            expires_at=expires_at,
        )

    return _make


# ── Fake upstream ───────────────────────────────────────────
class FakeUpstream:
    """
    Programmable SportMonks stand-in for httpx.MockTransport.

    `collections[name]` is served as {"data": [...]}; `failures[name]` is
    returned as an error status instead.
    """

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.failures: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        name = request.url.path.rsplit("/", 1)[-1]
        if name in self.failures:
            return httpx.Response(self.failures[name], json={"message": "boom"})
        return httpx.Response(200, json={"data": self.collections.get(name, [])})

    def client(self) -> UpstreamClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return UpstreamClient(http, UPSTREAM_BASE, "test-upstream-token")


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
async def upstream_client(upstream: FakeUpstream) -> AsyncIterator[UpstreamClient]:
    async with upstream.client() as client:
        yield client


@pytest.fixture
def mock_upstream_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], UpstreamClient]:
    """Factory for an UpstreamClient backed by an arbitrary handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> UpstreamClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return UpstreamClient(http, UPSTREAM_BASE, "test-upstream-token")

    return _make
