"""Export session domain entities for use across the application."""

from .session import SessionRecord, SessionStatus, utcnow

__all__ = ["SessionRecord", "SessionStatus", "utcnow"]
