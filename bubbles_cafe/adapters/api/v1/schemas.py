"""Request and response models for the session API."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CsrfTokenResponse(BaseModel):
    csrfToken: str
    timestamp: datetime


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class LogoutAllResponse(MessageResponse):
    revoked: int = Field(description="Number of sessions signed out")


class SessionSyncRequest(BaseModel):
    """Either ``data`` to merge into the session or ``keys`` to read back."""

    keys: Optional[List[str]] = None
    data: Optional[Dict[str, Any]] = None


class StoreOptions(BaseModel):
    """Extra fields saved next to a stored value. ``expiresAt`` is epoch milliseconds."""

    model_config = ConfigDict(extra="allow")

    expiresAt: Optional[int] = None


class SessionStoreRequest(BaseModel):
    key: Optional[str] = None
    value: Any = None
    options: StoreOptions = Field(default_factory=StoreOptions)


class SessionSummary(BaseModel):
    """One live session as listed to administrators."""

    model_config = ConfigDict(from_attributes=True)

    sessionId: str
    userId: Optional[int] = None
    ipAddress: Optional[str] = None
    userAgent: Optional[str] = None
    expiresAt: datetime
    lastAccessedAt: datetime
    createdAt: datetime


class SessionListResponse(BaseModel):
    sessions: List[SessionSummary]
    count: int


class SessionCountResponse(BaseModel):
    count: int
