"""
Alembic environment configuration for Bubble's Cafe database migrations.

This script sets up the migration context, connects to the database using settings.DATABASE_URL,
and defines the target metadata for SQLModel models. The URL uses an async driver
(asyncpg, aiosqlite), so online migrations run through an async engine.
"""
import asyncio  # For running the async engine
from logging.config import fileConfig  # For configuring logging

from alembic import context  # For migration context
from sqlalchemy import pool  # For disabling pooling
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from sqlmodel import SQLModel  # For metadata

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.domain.entities.session import SessionRecord  # noqa: F401 - sessions model

# Alembic Config object, provides access to alembic.ini
config = context.config

# Set database URL from settings for consistency with FastAPI
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

# Configure logging from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Target metadata for SQLModel models, includes all defined tables
target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode, generating SQL scripts without a database connection.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,  # Use literal SQL values
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """
    Run migrations in 'online' mode against settings.DATABASE_URL.

    Uses a non-pooled connection to avoid conflicts during migrations.
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # Disable pooling for migrations
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
