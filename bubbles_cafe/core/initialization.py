"""Process-level setup run once before the session service is built."""

from dotenv import load_dotenv

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.logging import configure_logging


def initialize_application() -> None:
    """Reads ``.env`` into the environment and switches structlog to the configured format."""
    load_dotenv(override=True)
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
