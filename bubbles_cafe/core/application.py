"""Application factory for creating and configuring the FastAPI application.

This module provides a factory function to create a properly configured FastAPI application
with the session store, middleware, exception handlers, and routers registered.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from bubbles_cafe.adapters.api.health import router as health_router
from bubbles_cafe.adapters.api.v1 import api_router
from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.handlers import register_exception_handlers
from bubbles_cafe.core.lifecycle import create_lifespan_manager
from bubbles_cafe.core.middleware import configure_middleware
from bubbles_cafe.domain.interfaces.session_store import SessionStore
from bubbles_cafe.infrastructure.database import AsyncSessionFactory
from bubbles_cafe.infrastructure.repositories import DatabaseSessionStore


def create_application(session_store: Optional[SessionStore] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session_store: Store for the session middleware and endpoints.
            Defaults to a `DatabaseSessionStore` on the application engine.

    Returns:
        FastAPI: The configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Session and CSRF protection service for Bubble's Cafe.",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=create_lifespan_manager(),
        default_response_class=JSONResponse,
    )

    # Available before startup so requests served without a lifespan still work
    store = session_store or DatabaseSessionStore(AsyncSessionFactory)
    app.state.session_store = store

    # Configure middleware
    configure_middleware(app, store)

    # Register exception handlers
    register_exception_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api")
    app.include_router(health_router, prefix="/health", tags=["health"])

    return app
