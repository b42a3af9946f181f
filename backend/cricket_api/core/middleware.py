"""
Permissive CORS for a public, key-authenticated read API.

Every response carries the same Access-Control-* headers, and any OPTIONS
request is answered 200 with an empty body before routing — the gateway
has no cookies or sessions, so there is nothing for CORS to protect.
"""

from __future__ import annotations

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey, X-API-Key",
}


class PermissiveCORSMiddleware(BaseHTTPMiddleware):
    """Stamps CORS headers on every response; short-circuits OPTIONS."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response
