"""
Error taxonomy for the API.

Every error that reaches a client is an ApiError. The exception handlers
in emporium.api.errors render them as {key: message} bodies.
"""

from __future__ import annotations


class ApiError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    message: str = "Server error"
    key: str = "error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> dict[str, str]:
        return {self.key: self.message}


class BadRequest(ApiError):
    """Malformed write or identifier."""
    status_code = 400
    message = "Invalid request"


class ConflictError(ApiError):
    """Duplicate value for a unique field."""
    status_code = 400
    key = "err"


class InvalidCredentials(ApiError):
    """Unknown username or wrong password on login."""
    status_code = 400
    key = "err"


class Unauthorized(ApiError):
    """Missing, invalid or expired token."""
    status_code = 401
    message = "Unauthorized"


class Forbidden(ApiError):
    """Role or ownership mismatch."""
    status_code = 403
    message = "Forbidden"


class NotFound(ApiError):
    status_code = 404
    message = "Not Found 404"


class ServerError(ApiError):
    status_code = 500
    message = "Server error"
