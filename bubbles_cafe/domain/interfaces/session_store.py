"""Session store interface.

This module defines the pluggable "session store" contract the session
middleware relies on. It acts as a port: the middleware and the HTTP routes
talk to `SessionStore` only, and the concrete persistence lives in the
infrastructure layer.

Payloads exchanged through the contract are plain dictionaries. The reserved
``__meta`` key carries security metadata (``userId``, ``ipAddress``,
``userAgent``, ``csrfToken``) between the caller and the store.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bubbles_cafe.domain.entities.session import SessionRecord

META_KEY = "__meta"


class SessionStore(ABC):
    """Contract for server-side session persistence.

    Absent and expired sessions are not errors: `get` simply returns ``None``.
    Storage failures raise `SessionStoreError`.
    """

    @abstractmethod
    async def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Returns the live session payload with its ``__meta`` envelope, or ``None``.

        An expired session is marked expired as a side effect.
        """
        raise NotImplementedError

    @abstractmethod
    async def set(self, session_id: str, data: Dict[str, Any]) -> None:
        """Creates or replaces a session and restarts its expiry window."""
        raise NotImplementedError

    @abstractmethod
    async def touch(self, session_id: str, data: Optional[Dict[str, Any]] = None) -> None:
        """Restarts the expiry window of a live session without changing its payload."""
        raise NotImplementedError

    @abstractmethod
    async def destroy(self, session_id: str) -> None:
        """Revokes a session. Destroying an unknown or dead session is a no-op."""
        raise NotImplementedError

    @abstractmethod
    async def all(self) -> List[Dict[str, Any]]:
        """Audit summaries of every live session."""
        raise NotImplementedError

    @abstractmethod
    async def length(self) -> int:
        """Number of live sessions."""
        raise NotImplementedError

    @abstractmethod
    async def clear(self) -> None:
        """Revokes every live session."""
        raise NotImplementedError

    @abstractmethod
    async def invalidate_user_sessions(self, user_id: int) -> int:
        """Revokes every live session owned by `user_id` and returns how many were revoked."""
        raise NotImplementedError

    @abstractmethod
    async def get_sessions_by_user_id(self, user_id: int) -> List[SessionRecord]:
        """Live session records owned by `user_id`."""
        raise NotImplementedError

    @abstractmethod
    async def get_record(self, session_id: str) -> Optional[SessionRecord]:
        """The raw row for `session_id` regardless of status, or ``None``."""
        raise NotImplementedError

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Marks every overdue live session as expired and returns how many were swept."""
        raise NotImplementedError
