"""Application lifecycle management.

This module handles application startup and shutdown events: the database
check, table creation, and the background sweep that marks lapsed sessions
as expired.
"""

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.exceptions import DatabaseError
from bubbles_cafe.core.logging import logger
from bubbles_cafe.domain.interfaces.session_store import SessionStore
from bubbles_cafe.infrastructure.database import check_database_health, create_db_and_tables


async def sweep_expired_sessions(store: SessionStore, interval: float) -> None:
    """Calls `SessionStore.cleanup_expired` every `interval` seconds until cancelled.

    Store failures are logged and the loop carries on with the next round.
    """
    while True:
        await asyncio.sleep(interval)
        try:
            await store.cleanup_expired()
        except DatabaseError as e:
            logger.error("session_sweep_failed", error_code=e.code, error=str(e))


def create_lifespan_manager():
    """Create the application lifespan manager.

    Returns:
        AsyncContextManager: The lifespan manager for the FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager that handles startup and shutdown events.

        Args:
            app (FastAPI): The FastAPI application instance

        Raises:
            RuntimeError: If database is unavailable during startup
        """
        # Startup
        if not await check_database_health():
            logger.error("database_unavailable_on_startup")
            raise RuntimeError("Database unavailable")
        await create_db_and_tables()

        sweeper = asyncio.create_task(
            sweep_expired_sessions(app.state.session_store, settings.SESSION_CLEANUP_INTERVAL_SECONDS)
        )
        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        # Shutdown
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
        logger.info("application_shutdown", env=settings.APP_ENV)

    return lifespan
