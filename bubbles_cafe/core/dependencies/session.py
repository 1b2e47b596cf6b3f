from __future__ import annotations

from typing import Annotated, Any, Dict

from fastapi import Depends, Request

from bubbles_cafe.core.exceptions import AuthenticationError, PermissionError, SessionRequiredError
from bubbles_cafe.domain.interfaces.session_store import SessionStore
from bubbles_cafe.domain.value_objects import SessionContext

__all__ = [
    "get_session_store",
    "get_current_session",
    "get_current_user",
    "get_current_admin_user",
    "SessionDep",
    "StoreDep",
    "UserDep",
    "AdminDep",
]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


def get_session_store(request: Request) -> SessionStore:
    """Return the store the application was built with."""
    return request.app.state.session_store


def get_current_session(request: Request) -> SessionContext:
    """Return the session the session middleware attached to the request."""
    session = getattr(request.state, "session", None)
    if session is None:
        raise SessionRequiredError()
    return session


def get_current_user(session: Annotated[SessionContext, Depends(get_current_session)]) -> Dict[str, Any]:
    """Return the ``user`` payload written into the session at sign-in.

    Performs **no** role checks; use :pyfunc:`get_current_admin_user` for that.
    """
    user = session.user
    if user is None or session.user_id is None:
        raise AuthenticationError("Authentication required", "authentication_required")
    return user


def get_current_admin_user(user: Annotated[Dict[str, Any], Depends(get_current_user)]) -> Dict[str, Any]:
    """Return the signed-in user if they are flagged ``isAdmin``."""
    if not user.get("isAdmin"):
        raise PermissionError("Admin access required", "admin_required")
    return user


# ---------------------------------------------------------------------------
# Type-annotated dependency shortcuts
# ---------------------------------------------------------------------------


SessionDep = Annotated[SessionContext, Depends(get_current_session)]
StoreDep = Annotated[SessionStore, Depends(get_session_store)]
UserDep = Annotated[Dict[str, Any], Depends(get_current_user)]
AdminDep = Annotated[Dict[str, Any], Depends(get_current_admin_user)]
