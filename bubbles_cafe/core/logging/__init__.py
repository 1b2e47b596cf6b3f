"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging with JSON formatting for production and
human-readable console output for development.
"""

import logging

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Sets up structlog with ISO timestamps, the log level, and either a JSON
    renderer (``LOG_JSON=True``) or the console renderer, routed through the
    standard library logger factory.
    """
    logging.getLogger().setLevel(log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def mask_session_id(session_id: str) -> str:
    """Shortens a session id for log output."""
    return f"{session_id[:8]}..." if session_id else ""


# Create a singleton logger instance for the application
logger = structlog.get_logger()
