"""Middleware configuration for the FastAPI application.

This module registers CORS, the session middleware and the request guard.
Starlette runs the most recently added middleware first, so they are added
innermost first: the guard, then sessions, then CORS.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bubbles_cafe.adapters.middleware import RequestGuardMiddleware, SessionMiddleware
from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.domain.interfaces.session_store import SessionStore


def configure_middleware(app: FastAPI, store: SessionStore) -> None:
    """Configure all middleware for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance
        store (SessionStore): Store backing the session middleware
    """
    # Needs request.state.session, so it sits inside the session middleware
    app.middleware("http")(RequestGuardMiddleware())

    app.middleware("http")(SessionMiddleware(store))

    # CORS middleware configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.CSRF_HEADER_NAME],
    )
