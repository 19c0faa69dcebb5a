"""Custom exception classes for the expense tracker.

Every error a request can be refused with is a subclass of
``ExpenseTrackerError``. Each exception maps to a code in the error
catalog (errors.py) and carries the HTTP status it is rendered with.
"""

from collections.abc import Mapping, Sequence
from typing import Any

_REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")
_PYDANTIC_VALUE_ERROR_PREFIX = "Value error, "


class ExpenseTrackerError(Exception):
    """Base exception for all expense tracker errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "TXN_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    error_code: str = "SYS_001"
    http_status: int = 500

    def __init__(
        self,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py (defaults to the class code)
            details: Additional error context (not shown to users)
            http_status: HTTP status code (defaults to the class status)
        """
        if error_code is not None:
            self.error_code = error_code
        if http_status is not None:
            self.http_status = http_status
        self.details = details or {}
        super().__init__(self.error_code)


class Unauthorized(ExpenseTrackerError):
    """Raised when no credential is supplied or it cannot be resolved.

    The core refuses to run any Store operation once this is raised.
    """

    error_code = "AUTH_001"
    http_status = 401


class AccountDisabled(Unauthorized):
    """Raised when the credential is valid but the account is deactivated."""

    error_code = "AUTH_002"
    http_status = 403


class InvalidCredentials(Unauthorized):
    """Raised on login with an unknown email or wrong password."""

    error_code = "AUTH_004"
    http_status = 401


class EmailAlreadyRegistered(ExpenseTrackerError):
    error_code = "AUTH_003"
    http_status = 400


class ValidationError(ExpenseTrackerError):
    """Raised when input fields are malformed or out of policy.

    Attributes:
        errors: List of ``{"field": ..., "message": ...}`` violations
    """

    error_code = "VAL_001"
    http_status = 400

    def __init__(self, errors: list[dict[str, str]], details: dict[str, Any] | None = None):
        self.errors = errors
        super().__init__(details=details)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])

    @classmethod
    def from_pydantic(cls, errors: Sequence[Mapping[str, Any]]) -> "ValidationError":
        """Build from ``pydantic.ValidationError.errors()`` output.

        Request locations ("body", "query", "path") are dropped from the
        field path so service-level and request-level errors look the same.
        """
        violations = []
        for error in errors:
            loc = [str(part) for part in error.get("loc", ())]
            if loc and loc[0] in _REQUEST_LOCATIONS:
                loc = loc[1:]
            message = str(error.get("msg", "Invalid value"))
            if message.startswith(_PYDANTIC_VALUE_ERROR_PREFIX):
                message = message[len(_PYDANTIC_VALUE_ERROR_PREFIX):]
            violations.append({"field": ".".join(loc) or "__root__", "message": message})
        return cls(violations)


class NotFound(ExpenseTrackerError):
    """Raised when a record is absent or owned by a different user.

    Both cases produce the same error so existence never leaks across owners.
    """

    error_code = "TXN_001"
    http_status = 404


class StoreUnavailable(ExpenseTrackerError):
    """Raised when the underlying record store cannot be reached."""

    error_code = "DB_003"
    http_status = 503
