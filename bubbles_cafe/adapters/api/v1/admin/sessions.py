"""Admin endpoints for auditing and revoking sessions.

Every route requires a signed-in user whose session payload marks them as
``isAdmin``.
"""

from fastapi import APIRouter

from bubbles_cafe.core.dependencies.session import AdminDep, StoreDep
from bubbles_cafe.core.logging import logger, mask_session_id

from ..schemas import (
    LogoutAllResponse,
    MessageResponse,
    SessionCountResponse,
    SessionListResponse,
    SessionSummary,
)

router = APIRouter()


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(admin: AdminDep, store: StoreDep):
    sessions = await store.all()
    return SessionListResponse(sessions=sessions, count=len(sessions))


@router.get("/sessions/count", response_model=SessionCountResponse)
async def count_sessions(admin: AdminDep, store: StoreDep):
    return SessionCountResponse(count=await store.length())


@router.get("/users/{user_id}/sessions", response_model=SessionListResponse)
async def list_user_sessions(user_id: int, admin: AdminDep, store: StoreDep):
    records = await store.get_sessions_by_user_id(user_id)
    sessions = [SessionSummary(**record.to_summary()) for record in records]
    return SessionListResponse(sessions=sessions, count=len(sessions))


@router.post("/users/{user_id}/sessions/invalidate", response_model=LogoutAllResponse)
async def invalidate_user_sessions(user_id: int, admin: AdminDep, store: StoreDep):
    """Signs a user out everywhere."""
    revoked = await store.invalidate_user_sessions(user_id)
    logger.warning("admin_invalidated_user_sessions", admin_id=admin.get("id"), user_id=user_id, revoked=revoked)
    return LogoutAllResponse(message=f"Signed user {user_id} out of all sessions", revoked=revoked)


@router.delete("/sessions/{session_id}", response_model=MessageResponse)
async def destroy_session(session_id: str, admin: AdminDep, store: StoreDep):
    await store.destroy(session_id)
    logger.warning("admin_destroyed_session", admin_id=admin.get("id"), session_id=mask_session_id(session_id))
    return MessageResponse(message="Session destroyed")
