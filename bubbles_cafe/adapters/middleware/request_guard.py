"""Request guard for state-changing requests.

Every POST, PUT, PATCH and DELETE outside the exempt paths must come from a
live session (else ``401``) and carry that session's CSRF token in the CSRF
header (else ``403``). Rejected requests never reach their handler.
"""

from typing import FrozenSet, Iterable, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from structlog import get_logger

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.exceptions import CafeError, CsrfError, SessionRequiredError
from bubbles_cafe.core.logging import mask_session_id
from bubbles_cafe.domain.services.csrf import extract_request_token, verify_request_token

logger = get_logger(__name__)

MUTATING_METHODS: FrozenSet[str] = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class RequestGuardMiddleware:
    """Rejects mutating requests without a live session or a matching CSRF token.

    Must run inside `SessionMiddleware`, which provides ``request.state.session``.
    """

    def __init__(self, exempt_paths: Optional[Iterable[str]] = None):
        paths = settings.CSRF_EXEMPT_PATHS if exempt_paths is None else exempt_paths
        self.exempt_paths: FrozenSet[str] = frozenset(paths)

    def is_protected(self, request: Request) -> bool:
        return request.method in MUTATING_METHODS and request.url.path not in self.exempt_paths

    async def __call__(self, request: Request, call_next) -> Response:
        if not self.is_protected(request):
            return await call_next(request)

        session = getattr(request.state, "session", None)
        if session is None or session.is_new:
            return self._reject(request, SessionRequiredError(), status.HTTP_401_UNAUTHORIZED)

        try:
            verify_request_token(session.csrf_token, extract_request_token(request))
        except CsrfError as exc:
            logger.warning(
                "csrf_validation_failed",
                error=exc.code,
                method=request.method,
                path=request.url.path,
                session_id=mask_session_id(session.session_id),
            )
            return self._reject(request, exc, status.HTTP_403_FORBIDDEN)

        return await call_next(request)

    @staticmethod
    def _reject(request: Request, exc: CafeError, status_code: int) -> JSONResponse:
        request.state.guard_rejected = True
        if status_code == status.HTTP_401_UNAUTHORIZED:
            logger.warning("session_required", method=request.method, path=request.url.path)
        return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})
