from .async_db import (
    AsyncSessionFactory,
    build_engine,
    check_database_health,
    create_db_and_tables,
    engine,
)

__all__ = [
    "AsyncSessionFactory",
    "build_engine",
    "check_database_health",
    "create_db_and_tables",
    "engine",
]
