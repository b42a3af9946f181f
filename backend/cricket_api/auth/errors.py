"""Credential and rate-limit errors raised by the gateway."""

from __future__ import annotations

from typing import Any

from fastapi import status

from cricket_api.core.errors import ApiError


class AuthenticationError(ApiError):
    """Raised when API key authentication fails.

    The message is returned to the caller as-is, so it must never
    contain the presented key or its digest.
    """

    status_code = status.HTTP_401_UNAUTHORIZED


class MissingCredential(AuthenticationError):
    message = "API key required. Provide X-API-Key header or api_key query parameter"


class InvalidCredential(AuthenticationError):
    message = "Invalid API key"


class CredentialInactive(AuthenticationError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "API key is inactive"


class CredentialExpired(AuthenticationError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "API key has expired"


class RateLimited(ApiError):
    """Raised when a key has used up its per-minute allowance."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Rate limit exceeded"

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit

    def payload(self) -> dict[str, Any]:
        return {"error": self.message, "limit": self.limit}
