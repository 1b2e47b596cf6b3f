from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into ``{"detail": ..., "code": ...}`` JSON responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.exceptions import (
    AuthenticationError,
    CafeError,
    DatabaseError,
    NotFoundError,
    PermissionError,
    ValidationError,
)

__all__ = [
    "authentication_error_handler",
    "permission_error_handler",
    "not_found_error_handler",
    "validation_error_handler",
    "database_error_handler",
    "cafe_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


def _error_response(status_code: int, exc: CafeError, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail or exc.message, "code": exc.code},
    )


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `401 Unauthorized`.

    Raised when an endpoint needs a live session or a signed-in user and the
    request has neither.

    Args:
        request: The incoming `Request` object.
        exc: The `AuthenticationError` instance.

    Returns:
        A `JSONResponse` with a 401 status code and error detail.
    """
    logger.warning(
        "Authentication failure",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return _error_response(status.HTTP_401_UNAUTHORIZED, exc)


async def permission_error_handler(request: Request, exc: PermissionError) -> JSONResponse:
    """Handles `PermissionError` and CSRF failures, returning a `403 Forbidden`.

    Args:
        request: The incoming `Request` object.
        exc: The `PermissionError` instance.

    Returns:
        A `JSONResponse` with a 403 status code and error detail.
    """
    logger.warning(
        "Permission denied",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return _error_response(status.HTTP_403_FORBIDDEN, exc)


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handles `NotFoundError`, returning a `404 Not Found`."""
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError`, returning a `400 Bad Request`."""
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handles `DatabaseError`, returning a `500 Internal Server Error`.

    The underlying driver error is only exposed when ``DEBUG`` is enabled.

    Args:
        request: The incoming `Request` object.
        exc: The `DatabaseError` instance.

    Returns:
        A `JSONResponse` with a 500 status code.
    """
    logger.critical(
        "A critical database error occurred",
        error_code=exc.code,
        error_message=str(exc),
        path=request.url.path,
    )
    detail = str(exc.__cause__ or exc) if settings.DEBUG else "A database error occurred."
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, detail)


async def cafe_error_handler(request: Request, exc: CafeError) -> JSONResponse:
    """Handles the base `CafeError`, returning a `500 Internal Server Error`.

    This serves as a fallback for any custom application errors that do not
    have a more specific handler.
    """
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "An unexpected error occurred.")


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so the CSRF errors
    reach `permission_error_handler` and `SessionStoreError` reaches
    `database_error_handler`.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(PermissionError, permission_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(CafeError, cafe_error_handler)
