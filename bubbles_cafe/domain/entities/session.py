from datetime import datetime, timezone  # For timestamp fields
from enum import Enum  # For the session status state machine
from typing import Any, Dict, Optional  # For optional and JSON fields

from sqlalchemy import JSON, DateTime, String  # For explicit column types
from sqlmodel import Column, Field, Index, SQLModel  # For ORM and table definition


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionStatus(str, Enum):
    """Lifecycle state of a session row.

    ``active`` rows are live. ``expired`` rows passed their `expires_at`
    (detected lazily on read or by the periodic sweep). ``revoked`` rows were
    destroyed explicitly: logout, sign-out-everywhere or an admin action.
    Neither terminal state is ever deleted.
    """

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"


class SessionRecord(SQLModel, table=True):
    """Represents one authenticated or anonymous browsing session.

    The row is keyed by the opaque `session_id` carried in the session cookie.
    Application state lives in `session_data`; the security metadata the
    application hands over in the ``__meta`` envelope (owning user, client IP,
    user agent, CSRF token) is kept in dedicated columns instead.

    Attributes:
        id: Surrogate primary key.
        session_id: Unique id from the session cookie.
        token: Secondary random credential issued when the row is created.
        session_data: JSON payload owned by the application layer.
        user_id: Owning user, None for anonymous sessions.
        ip_address: Client address seen on the last write (informational).
        user_agent: Client user agent seen on the last write (informational).
        csrf_token: Anti-forgery secret bound to this session.
        status: Lifecycle state, see `SessionStatus`.
        expires_at: Absolute expiry instant, pushed forward on every write.
        last_accessed_at: Sliding-window refresh marker.
        created_at: When the session was first persisted.
        updated_at: When the row was last modified.
    """

    __tablename__ = "sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False),
        description="Opaque session id from the session cookie.",
    )
    token: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False),
        description="Secondary credential generated on insert.",
    )
    session_data: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False, default=dict),
        description="Application session payload without the __meta envelope.",
    )
    user_id: Optional[int] = Field(default=None, index=True, nullable=True)
    ip_address: Optional[str] = Field(default=None, max_length=255)
    user_agent: Optional[str] = Field(default=None)
    csrf_token: Optional[str] = Field(default=None, max_length=255)
    status: SessionStatus = Field(default=SessionStatus.ACTIVE, index=True)
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    last_accessed_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False)
    )

    __table_args__ = (
        Index("ix_sessions_expires_at", "expires_at"),
        Index("ix_sessions_ip_address", "ip_address"),
        {"extend_existing": True},
    )

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether `expires_at` has passed at `now` (defaults to the current time)."""
        return (now or utcnow()) > self.expires_at

    def to_summary(self) -> Dict[str, Any]:
        """Audit view of the session, without payload or secrets."""
        return {
            "sessionId": self.session_id,
            "userId": self.user_id,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "expiresAt": self.expires_at,
            "lastAccessedAt": self.last_accessed_at,
            "createdAt": self.created_at,
        }
