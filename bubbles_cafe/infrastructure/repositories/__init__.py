"""Repository implementations for the infrastructure layer."""

from .session_store import DatabaseSessionStore
from bubbles_cafe.domain.interfaces.session_store import SessionStore

__all__ = ["DatabaseSessionStore", "SessionStore"]
