"""Per-request view of the caller's session.

`SessionContext` is what route handlers see as ``request.state.session``. It
behaves like a dictionary over the application payload, tracks whether the
handler changed anything so the middleware knows whether to `set` or merely
`touch` the row, and exposes the ``__meta`` envelope through properties.
"""

from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Optional

from bubbles_cafe.domain.interfaces.session_store import META_KEY


class SessionContext(MutableMapping):
    """Mutable mapping over one session's payload.

    Attributes:
        session_id: Id carried in the session cookie.
        is_new: True when the session was created during this request.
        modified: True once the payload or its metadata changed.
        invalidated: True once the session was destroyed during this request.

    Only top-level assignment and deletion flag the session modified. Code that
    mutates a nested value in place must call `mark_modified` or the change is
    not saved.
    """

    def __init__(self, session_id: str, data: Optional[Dict[str, Any]] = None, is_new: bool = False):
        payload = dict(data or {})
        self._meta: Dict[str, Any] = dict(payload.pop(META_KEY, None) or {})
        self._data: Dict[str, Any] = payload
        self.session_id = session_id
        self.is_new = is_new
        self.modified = False
        self.invalidated = False

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.modified = True

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self.modified = True

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def csrf_token(self) -> Optional[str]:
        return self._meta.get("csrfToken")

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        user = self._data.get("user")
        return user if isinstance(user, dict) else None

    @property
    def user_id(self) -> Optional[int]:
        user = self.user
        if user and user.get("id") is not None:
            try:
                return int(user["id"])
            except (TypeError, ValueError):
                pass
        return self._meta.get("userId")

    @property
    def is_admin(self) -> bool:
        user = self.user
        return bool(user and user.get("isAdmin"))

    @property
    def meta(self) -> Dict[str, Any]:
        return dict(self._meta)

    def update_meta(self, **values: Any) -> None:
        """Sets metadata fields, flagging the session modified only on real changes."""
        for key, value in values.items():
            if self._meta.get(key) != value:
                self._meta[key] = value
                self.modified = True

    def mark_modified(self) -> None:
        self.modified = True

    def invalidate(self) -> None:
        self.invalidated = True

    def to_payload(self) -> Dict[str, Any]:
        """Payload for `SessionStore.set`, with ``__meta`` re-attached."""
        payload = dict(self._data)
        payload[META_KEY] = {
            key: value
            for key, value in self._meta.items()
            if key in ("userId", "ipAddress", "userAgent", "csrfToken")
        }
        return payload
