"""
Error taxonomy shared by the gateway and the sync engine.

Every error knows its HTTP status and renders its own JSON body, so the
exception handler in main.py is a single function. Messages are safe to
show to callers — they never include key material.
"""

from __future__ import annotations

from typing import Any

from fastapi import status


class ApiError(Exception):
    """Base class for errors surfaced to HTTP callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message

    def payload(self) -> dict[str, Any]:
        return {"error": self.message}


class StorageFailure(ApiError):
    """A storage read or write failed."""

    message = "Database error"

    def __init__(self, details: str | None = None) -> None:
        super().__init__()
        self.details = details

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        if self.details:
            body["details"] = self.details
        return body


class UnexpectedFailure(ApiError):
    """Catch-all for anything not covered by a more specific error."""

    message = "Unknown error"
