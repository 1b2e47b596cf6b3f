"""Session middleware.

Binds each request to a server-side session. The session id travels in a
signed cookie; the session payload lives in the `SessionStore`. Handlers read
and write the payload through ``request.state.session``.

After the handler returns, new or modified sessions are written back with
`SessionStore.set`; untouched sessions are only `touch`ed so their expiry
slides forward. Requests rejected by the request guard leave the store alone.
"""

import secrets
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from itsdangerous import BadSignature, Signer
from structlog import get_logger

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.exceptions import DatabaseError
from bubbles_cafe.core.logging import mask_session_id
from bubbles_cafe.domain.interfaces.session_store import SessionStore
from bubbles_cafe.domain.services.csrf import generate_token
from bubbles_cafe.domain.value_objects import SessionContext

logger = get_logger(__name__)

COOKIE_SALT = "bubbles.session"


class SessionMiddleware:
    """Loads the caller's session before the handler and persists it after.

    Args:
        store: Backing session store.
        secret_key: Key used to sign the session cookie. Defaults to
            ``SECRET_KEY``.
    """

    def __init__(self, store: SessionStore, secret_key: Optional[str] = None):
        self.store = store
        self.signer = Signer(secret_key or settings.SECRET_KEY, salt=COOKIE_SALT)
        self.cookie_name = settings.SESSION_COOKIE_NAME
        self.max_age = settings.SESSION_TTL_HOURS * 3600

    async def __call__(self, request: Request, call_next) -> Response:
        try:
            session = await self._load(request)
        except DatabaseError as exc:
            return self._store_failure(request, exc)

        request.state.session = session
        response = await call_next(request)

        if getattr(request.state, "guard_rejected", False):
            return response

        try:
            await self._save(session, response)
        except DatabaseError as exc:
            return self._store_failure(request, exc)
        return response

    def _unsign(self, cookie: str) -> Optional[str]:
        try:
            return self.signer.unsign(cookie).decode("utf-8")
        except BadSignature:
            logger.warning("session_cookie_rejected", reason="bad_signature")
            return None

    async def _load(self, request: Request) -> SessionContext:
        session: Optional[SessionContext] = None

        cookie = request.cookies.get(self.cookie_name)
        session_id = self._unsign(cookie) if cookie else None
        if session_id:
            data = await self.store.get(session_id)
            if data is not None:
                session = SessionContext(session_id, data)

        if session is None:
            session = SessionContext(secrets.token_hex(32), is_new=True)
            session.update_meta(csrfToken=generate_token())
            logger.debug("session_started", session_id=mask_session_id(session.session_id))

        session.update_meta(
            ipAddress=request.client.host if request.client else None,
            userAgent=request.headers.get("user-agent"),
        )
        if session.user_id is not None:
            session.update_meta(userId=session.user_id)
        return session

    async def _save(self, session: SessionContext, response: Response) -> None:
        if session.invalidated:
            if not session.is_new:
                await self.store.destroy(session.session_id)
            response.delete_cookie(self.cookie_name, path="/")
            return

        # A login or logout inside the handler changes the owning user.
        if session.user_id != session.meta.get("userId"):
            session.update_meta(userId=session.user_id)

        if session.is_new or session.modified:
            await self.store.set(session.session_id, session.to_payload())
        else:
            await self.store.touch(session.session_id)

        response.set_cookie(
            self.cookie_name,
            self.signer.sign(session.session_id).decode("utf-8"),
            max_age=self.max_age,
            path="/",
            httponly=True,
            secure=settings.SESSION_COOKIE_SECURE,
            samesite=settings.SESSION_COOKIE_SAMESITE,
        )

    @staticmethod
    def _store_failure(request: Request, exc: DatabaseError) -> JSONResponse:
        logger.error(
            "session_store_unavailable",
            error_code=exc.code,
            error_message=exc.message,
            path=request.url.path,
        )
        detail = str(exc.__cause__ or exc) if settings.DEBUG else "Session storage is unavailable"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": detail, "code": exc.code},
        )
