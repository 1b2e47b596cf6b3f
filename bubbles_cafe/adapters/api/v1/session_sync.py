"""Endpoints that let the browser keep data in its server-side session.

Handlers only change ``request.state.session``; the session middleware writes
the result back to the store after the response is produced.
"""

import json
import time
from typing import Any, Dict, Iterable, Optional

from fastapi import APIRouter

from bubbles_cafe.core.dependencies.session import SessionDep, StoreDep
from bubbles_cafe.core.exceptions import NotFoundError, ValidationError
from bubbles_cafe.core.logging import logger, mask_session_id
from bubbles_cafe.domain.interfaces.session_store import META_KEY

from .schemas import MessageResponse, SessionStoreRequest, SessionSyncRequest

router = APIRouter()

# Login identity is written by the auth flow only, never by the browser.
RESERVED_KEYS = frozenset({"user", META_KEY})


def _now_ms() -> int:
    return int(time.time() * 1000)


def _is_expired(item: Any, now_ms: int) -> bool:
    """Stored items may carry an ``expiresAt`` in epoch milliseconds. Anything else never expires."""
    if not isinstance(item, dict):
        return False
    expires_at = item.get("expiresAt")
    if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
        return False
    return bool(expires_at) and now_ms > expires_at


def _reject_reserved(keys: Iterable[str]) -> None:
    for key in keys:
        if key in RESERVED_KEYS:
            raise ValidationError(f"Key is reserved: {key}", "reserved_key")


@router.post("/sync")
async def sync_session(payload: SessionSyncRequest, session: SessionDep, store: StoreDep):
    """Merges ``data`` into the session, or returns the requested ``keys``.

    Without ``keys`` the whole payload is returned.
    """
    if payload.data is not None:
        _reject_reserved(payload.data)
        session.update(payload.data)
        logger.debug("session_data_synced", session_id=mask_session_id(session.session_id), keys=list(payload.data))
        return MessageResponse(message="Session data synced to server")

    data: Dict[str, Any] = dict(session)
    if payload.keys is not None:
        data = {key: data[key] for key in payload.keys if key in data}

    record = await store.get_record(session.session_id)
    return {
        "success": True,
        "data": data,
        "metadata": {
            "sessionId": session.session_id,
            "userId": session.user_id,
            "lastAccessed": record.last_accessed_at if record else None,
            "expiresAt": record.expires_at if record else None,
        },
    }


@router.post("/store", response_model=MessageResponse)
async def store_item(payload: SessionStoreRequest, session: SessionDep):
    if not payload.key:
        raise ValidationError("Key is required", "key_required")
    _reject_reserved([payload.key])

    options = payload.options.model_dump(exclude_none=True)
    session[payload.key] = {"value": payload.value, "timestamp": _now_ms(), **options}
    return MessageResponse(message=f"Data stored for key: {payload.key}")


@router.get("/retrieve/{key}")
async def retrieve_item(key: str, session: SessionDep):
    """Returns a stored item. Items past their ``expiresAt`` are dropped and reported missing."""
    item = session.get(key)
    if not item:
        raise NotFoundError("Key not found", "key_not_found")

    if _is_expired(item, _now_ms()):
        del session[key]
        raise NotFoundError("Data expired", "data_expired")

    if isinstance(item, dict):
        return {"success": True, "data": item.get("value"), "metadata": item}
    return {"success": True, "data": item, "metadata": None}


@router.delete("/remove/{key}", response_model=MessageResponse)
async def remove_item(key: str, session: SessionDep):
    _reject_reserved([key])
    if key not in session:
        raise NotFoundError("Key not found", "key_not_found")

    del session[key]
    return MessageResponse(message=f"Data removed for key: {key}")


@router.get("/health")
async def session_health(session: SessionDep, store: StoreDep):
    """Storage and security summary of the caller's session."""
    record = await store.get_record(session.session_id)
    data = dict(session)
    now_ms = _now_ms()
    meta = session.meta

    def _from_record(attribute: str) -> Optional[Any]:
        return getattr(record, attribute) if record is not None else None

    return {
        "success": True,
        "health": {
            "sessionId": session.session_id,
            "userId": session.user_id,
            "isActive": record.is_active if record is not None else False,
            "isNew": session.is_new,
            "createdAt": _from_record("created_at"),
            "lastAccessedAt": _from_record("last_accessed_at"),
            "expiresAt": _from_record("expires_at"),
            "storage": {
                "keyCount": len(data),
                "dataSize": len(json.dumps(data, default=str)),
                "expiredCount": sum(1 for item in data.values() if _is_expired(item, now_ms)),
            },
            "security": {
                "ipAddress": meta.get("ipAddress"),
                "userAgent": meta.get("userAgent"),
                "csrfToken": bool(session.csrf_token),
            },
        },
    }
