"""
Error types for the Task List API.

Request-level errors carry the HTTP status they map to; the app registers a
single handler that turns them into empty-body responses.
"""

from typing import Any


class TodoServiceError(Exception):
    """Base exception for all Task List API errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }


class AuthError(TodoServiceError):
    """Missing, malformed or unknown Basic credentials."""

    status_code = 401


class DecodeError(TodoServiceError):
    """Request body is not a valid task."""

    status_code = 400


class EncodeError(TodoServiceError):
    """Response body could not be serialized."""

    status_code = 500


class CacheError(TodoServiceError):
    """
    Redis read or write failure.

    Never leaves the cache facade: reads degrade to a miss and writes are
    reported as unsuccessful.
    """

    status_code = 503
