from datetime import datetime, timezone

from fastapi import APIRouter

from bubbles_cafe.core.dependencies.session import SessionDep

from .schemas import CsrfTokenResponse

router = APIRouter()


@router.get("/csrf-token", response_model=CsrfTokenResponse)
async def get_csrf_token(session: SessionDep):
    """Hands out the CSRF token bound to the caller's session.

    A caller without a session gets a fresh one here; the session middleware
    persists it and sets the cookie on this response.
    """
    return CsrfTokenResponse(csrfToken=session.csrf_token, timestamp=datetime.now(timezone.utc))
