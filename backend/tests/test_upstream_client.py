"""UpstreamClient: request shape and failure mapping."""

import httpx
import pytest

from cricket_api.resources import ResourceType
from cricket_api.services.upstream_client import UpstreamFetchFailure


@pytest.mark.asyncio
async def test_returns_data_list(mock_upstream_client):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": [{"id": 1}, {"id": 2}]})

    async with mock_upstream_client(handler) as client:
        records = await client.fetch_collection(ResourceType.COUNTRIES)

    assert records == [{"id": 1}, {"id": 2}]
    assert str(seen[0].url) == (
        "https://upstream.test/api/v2.0/countries?api_token=test-upstream-token"
    )


@pytest.mark.asyncio
async def test_missing_data_is_empty(mock_upstream_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"meta": {}})

    async with mock_upstream_client(handler) as client:
        assert await client.fetch_collection(ResourceType.LEAGUES) == []


@pytest.mark.asyncio
async def test_single_object_is_wrapped(mock_upstream_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"id": 9}})

    async with mock_upstream_client(handler) as client:
        assert await client.fetch_collection(ResourceType.SEASONS) == [{"id": 9}]


@pytest.mark.asyncio
async def test_non_success_status(mock_upstream_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "unauthenticated"})

    async with mock_upstream_client(handler) as client:
        with pytest.raises(UpstreamFetchFailure) as exc_info:
            await client.fetch_collection(ResourceType.FIXTURES)

    assert exc_info.value.message == "HTTP error! status: 401"


@pytest.mark.asyncio
async def test_network_error_hides_url(mock_upstream_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_upstream_client(handler) as client:
        with pytest.raises(UpstreamFetchFailure) as exc_info:
            await client.fetch_collection(ResourceType.LIVESCORES)

    assert exc_info.value.message == "Request error: ConnectError"
    assert "test-upstream-token" not in exc_info.value.message


@pytest.mark.asyncio
async def test_non_json_body(mock_upstream_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    async with mock_upstream_client(handler) as client:
        with pytest.raises(UpstreamFetchFailure):
            await client.fetch_collection(ResourceType.TEAMS)


@pytest.mark.asyncio
async def test_non_object_body(mock_upstream_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": 1}])

    async with mock_upstream_client(handler) as client:
        with pytest.raises(UpstreamFetchFailure) as exc_info:
            await client.fetch_collection(ResourceType.TEAMS)

    assert exc_info.value.message == "Upstream returned an unexpected payload"
