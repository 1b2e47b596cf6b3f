from __future__ import annotations

"""Centralized, structured exception hierarchy for Bubble's Cafe.

Each exception carries a machine-readable `code` for programmatic error
handling (the CSRF codes are what the HTTP client keys its refresh-and-retry
on) and a human-readable `message` for logging and API responses.

The hierarchy maps cleanly to HTTP status codes in the API layer:

- `CafeError` -> 500
- `DatabaseError` / `SessionStoreError` -> 500
- `AuthenticationError` / `SessionRequiredError` -> 401
- `PermissionError` / `CsrfError` and its subclasses -> 403
- `NotFoundError` -> 404
- `ValidationError` -> 400
"""

from typing import Final

__all__: Final = [
    "CafeError",
    "DatabaseError",
    "SessionStoreError",
    "AuthenticationError",
    "SessionRequiredError",
    "PermissionError",
    "CsrfError",
    "CsrfSessionMissingError",
    "CsrfTokenMissingError",
    "CsrfTokenMismatchError",
    "NotFoundError",
    "ValidationError",
]


class CafeError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Persistence errors (500 Internal Server Error)
# ---------------------------------------------------------------------------


class DatabaseError(CafeError):
    """Raised for low-level database interaction errors.

    Wraps underlying driver errors so callers never depend on SQLAlchemy
    exception types.
    """

    def __init__(self, message: str, code: str = "database_error"):
        super().__init__(message, code)


class SessionStoreError(DatabaseError):
    """Raised when the session store cannot read or write a session row.

    Attributes:
        operation (str): The store operation that failed (get, set, touch...).
    """

    def __init__(self, message: str, operation: str = "", code: str = "session_store_error"):
        self.operation = operation
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Authentication errors (401 Unauthorized)
# ---------------------------------------------------------------------------


class AuthenticationError(CafeError):
    """Raised when a request lacks a recognized identity."""

    def __init__(self, message: str, code: str = "authentication_error"):
        super().__init__(message, code)


class SessionRequiredError(AuthenticationError):
    """Raised when a request needs a live session and has none."""

    def __init__(self, message: str = "No valid session found", code: str = "session_required"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Authorization errors (403 Forbidden)
# ---------------------------------------------------------------------------


class PermissionError(CafeError):
    """Raised when the caller is identified but not allowed to proceed."""

    def __init__(self, message: str, code: str = "permission_denied"):
        super().__init__(message, code)


class CsrfError(PermissionError):
    """Base class for anti-forgery token failures.

    All CSRF codes start with ``csrf_`` so clients can tell a stale token
    apart from any other 403.
    """

    def __init__(self, message: str, code: str = "csrf_error"):
        super().__init__(message, code)


class CsrfSessionMissingError(CsrfError):
    """Raised when the caller's session has no CSRF token to compare against."""

    def __init__(self, message: str = "CSRF token is missing from session", code: str = "csrf_session_missing"):
        super().__init__(message, code)


class CsrfTokenMissingError(CsrfError):
    """Raised when a mutating request carries no CSRF token."""

    def __init__(self, message: str = "CSRF token is missing from request", code: str = "csrf_token_missing"):
        super().__init__(message, code)


class CsrfTokenMismatchError(CsrfError):
    """Raised when the presented CSRF token differs from the session's token."""

    def __init__(self, message: str = "CSRF token validation failed", code: str = "csrf_token_mismatch"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Request errors
# ---------------------------------------------------------------------------


class NotFoundError(CafeError):
    """Raised when a requested resource does not exist (404)."""

    def __init__(self, message: str = "Not found", code: str = "not_found"):
        super().__init__(message, code)


class ValidationError(CafeError):
    """Raised for malformed request input (400)."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)
