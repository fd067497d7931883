"""
Failure taxonomy for calls against the LMS API.

Every failure an operation can hit is an ApiFailure subclass, so controllers
catch one type at the operation boundary and let the SessionGuard decide what
the user sees.
"""

from __future__ import annotations

AUTH_STATUSES = frozenset({401, 403})

LOGIN_REQUIRED_MESSAGE = "Authentication required. Please log in."


class ApiFailure(Exception):
    """Base class for classified API failures."""

    retryable = False

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status!r}, message={self.message!r})"


class AuthenticationFailure(ApiFailure):
    """401/403 from the server. Forces logout and a login redirect."""


class ValidationOrBusinessFailure(ApiFailure):
    """Other 4xx, or a 2xx envelope reporting success=false."""


class TransportFailure(ApiFailure):
    """Network error, timeout or 5xx. The user may retry."""

    retryable = True


class LocalPreconditionFailure(ApiFailure):
    """No credential present before an authenticated action. No request was sent."""


def classify_status(status: int, message: str) -> ApiFailure:
    """Map a non-2xx HTTP status to its failure class."""
    if status in AUTH_STATUSES:
        return AuthenticationFailure(message, status)
    if 400 <= status < 500:
        return ValidationOrBusinessFailure(message, status)
    return TransportFailure(message, status)
