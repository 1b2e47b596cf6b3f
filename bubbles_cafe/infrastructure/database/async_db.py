from __future__ import annotations

"""
Asynchronous Database Module

This module manages the asynchronous database connection used by the session
store. It provides the engine, a session factory, a
health check with retry logic, and table creation for startup.

**Security Note**: Avoid logging connection strings or credentials. Use an
account restricted to the `sessions` table where possible.

Key Components:
    - build_engine: Creates an async engine with pool settings suited to the URL.
    - engine: The application-wide async engine.
    - AsyncSessionFactory: A factory for creating asynchronous database sessions.
    - check_database_health: Verifies connectivity, retrying transient failures.
    - create_db_and_tables: Creates tables on startup.
"""

import time
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.domain.entities.session import SessionRecord  # noqa: F401 - registers the table

logger = get_logger(__name__)


def build_engine(url: Optional[str] = None, **overrides: Any) -> AsyncEngine:
    """
    Build an async engine for `url` (defaults to settings.DATABASE_URL).

    Pool sizing only applies to PostgreSQL; SQLite drivers manage their own pool.

    Args:
        url: SQLAlchemy async database URL.
        **overrides: Extra keyword arguments for `create_async_engine`.

    Returns:
        AsyncEngine: The configured engine.
    """
    url = url or settings.DATABASE_URL
    options: Dict[str, Any] = {"echo": False, "future": True}
    if url.startswith("postgresql"):
        options.update(
            pool_size=settings.POSTGRES_POOL_SIZE,
            max_overflow=settings.POSTGRES_MAX_OVERFLOW,
            pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
            pool_pre_ping=True,
        )
    options.update(overrides)
    return create_async_engine(url, **options)


engine = build_engine()

AsyncSessionFactory: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
async def _ping(target: AsyncEngine) -> None:
    async with target.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def check_database_health(target: Optional[AsyncEngine] = None) -> bool:
    """
    Performs a health check on the database connection.

    Transient `OperationalError`s are retried with exponential backoff before
    the database is reported unhealthy.

    Returns:
        bool: True if database is healthy and responsive, False otherwise.
    """
    target = target or engine
    start_time = time.time()
    try:
        await _ping(target)
    except Exception as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            execution_time=time.time() - start_time,
        )
        return False
    logger.debug("database_health_check_success", execution_time=time.time() - start_time)
    return True


async def create_db_and_tables(target: Optional[AsyncEngine] = None) -> None:
    """
    Creates database tables with logging.
    """
    target = target or engine
    start_time = time.time()
    async with target.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info(
        "database_tables_created",
        execution_time=time.time() - start_time,
        tables=list(SQLModel.metadata.tables.keys()),
    )
