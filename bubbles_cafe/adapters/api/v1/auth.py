from fastapi import APIRouter

from bubbles_cafe.core.dependencies.session import SessionDep, StoreDep, UserDep
from bubbles_cafe.core.logging import logger, mask_session_id

from .schemas import LogoutAllResponse, MessageResponse

router = APIRouter()


@router.post("/logout", response_model=MessageResponse)
async def logout(session: SessionDep):
    """
    Ends the current session. The session middleware revokes the row and
    clears the cookie on the way out.
    """
    session.invalidate()
    logger.info("user_logged_out", session_id=mask_session_id(session.session_id), user_id=session.user_id)
    return MessageResponse(message="Logged out successfully")


@router.post("/logout-all", response_model=LogoutAllResponse)
async def logout_all(session: SessionDep, user: UserDep, store: StoreDep):
    """
    Signs the current user out of every session, this one included.
    """
    revoked = await store.invalidate_user_sessions(session.user_id)
    session.invalidate()
    logger.info("user_logged_out_everywhere", user_id=session.user_id, revoked=revoked)
    return LogoutAllResponse(message="Signed out of all sessions", revoked=revoked)
