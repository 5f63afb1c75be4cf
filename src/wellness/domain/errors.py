"""
Domain Errors

Exceptions raised by services and translated to JSON error
responses by the API layer. Each carries a stable machine-readable
code and the HTTP status it maps to.
"""

from typing import Any, Optional


class WellnessError(Exception):
    """Base exception for all expected application errors."""

    status_code: int = 400
    code: str = "BAD_REQUEST"

    def __init__(self, message: str, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationFailedError(WellnessError):
    """Request passed schema validation but violates a business rule."""

    status_code = 400
    code = "VALIDATION_ERROR"


class ConflictError(WellnessError):
    """Resource already exists (e.g. duplicate email)."""

    status_code = 400
    code = "CONFLICT"


class AuthenticationError(WellnessError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    code = "AUTHENTICATION_FAILED"


class NotFoundError(WellnessError):
    """Resource does not exist or is not owned by the caller."""

    status_code = 404
    code = "NOT_FOUND"


class AccountLockedError(WellnessError):
    """Too many failed login attempts."""

    status_code = 423
    code = "ACCOUNT_LOCKED"

    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__(
            "Account temporarily locked due to too many failed login attempts",
            details={"retry_after_seconds": retry_after_seconds},
        )
        self.retry_after_seconds = retry_after_seconds
