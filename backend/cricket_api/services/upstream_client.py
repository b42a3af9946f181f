"""
SportMonks Cricket API client for the sync engine.

Fetches whole resource collections via httpx:
    GET {UPSTREAM_BASE_URL}/{resource}?api_token=…

Configuration:
  UPSTREAM_API_TOKEN       — server-side only (never logged, never returned)
  UPSTREAM_BASE_URL        — defaults to the v2.0 cricket API
  UPSTREAM_TIMEOUT_SECONDS — bounds a stalled fetch so sync_all moves on

Every failure mode (network, timeout, non-2xx, body that is not a JSON
object) surfaces as UpstreamFetchFailure with a message fit for
sync_status.last_error.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cricket_api.core.config import settings
from cricket_api.core.errors import ApiError
from cricket_api.resources import ResourceType

logger = logging.getLogger(__name__)


class UpstreamFetchFailure(ApiError):
    """The upstream provider could not deliver a collection."""

    message = "Upstream fetch failed"


class UpstreamClient:
    """
    Thin async client over one httpx.AsyncClient.

    Usage:
        async with UpstreamClient.from_settings() as client:
            records = await client.fetch_collection(ResourceType.TEAMS)

    Tests pass their own httpx.AsyncClient (e.g. with MockTransport).
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        api_token: str,
    ) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token

    @classmethod
    def from_settings(cls) -> "UpstreamClient":
        http = httpx.AsyncClient(
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
        )
        return cls(http, settings.UPSTREAM_BASE_URL, settings.UPSTREAM_API_TOKEN)

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch_collection(self, resource: ResourceType) -> list[dict[str, Any]]:
        """
        Fetch the full collection for one resource type.

        Returns:
            The `data` list of the response (empty when absent).

        Raises:
            UpstreamFetchFailure: on any transport or protocol failure.
        """
        url = f"{self._base_url}/{resource.value}"

        try:
            response = await self._http.get(url, params={"api_token": self._api_token})
        except httpx.HTTPError as exc:
            # str(exc) may echo the URL; the token lives in params, so keep
            # only the exception type in anything we persist.
            logger.error("Upstream %s request failed: %s", resource.value, type(exc).__name__)
            raise UpstreamFetchFailure(
                f"Request error: {type(exc).__name__}"
            ) from exc

        if not response.is_success:
            logger.error(
                "Upstream %s error: status=%d body=%s",
                resource.value,
                response.status_code,
                response.text[:500],
            )
            raise UpstreamFetchFailure(f"HTTP error! status: {response.status_code}")

        # ── Parse the collection ────────────────────────────
        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamFetchFailure("Upstream returned a non-JSON body") from exc

        if not isinstance(body, dict):
            raise UpstreamFetchFailure("Upstream returned an unexpected payload")

        records = body.get("data") or []
        if not isinstance(records, list):
            # Single-object responses are wrapped so callers always get a list.
            records = [records]

        logger.debug("Fetched %d %s from upstream", len(records), resource.value)
        return records
