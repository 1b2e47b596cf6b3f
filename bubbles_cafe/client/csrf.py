"""Client-side CSRF token handling.

The token is fetched once from the server, cached in a `CsrfTokenHolder` and
attached to every state-changing request. The holder is an explicit object so
callers decide how widely a token is shared; one holder per signed-in browser
session is the usual choice.
"""

import asyncio
from typing import Mapping, Optional

import httpx
from structlog import get_logger

logger = get_logger(__name__)

CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_TOKEN_PATH = "/api/csrf-token"


class CsrfTokenHolder:
    """Cache for a single CSRF token."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class CsrfTokenService:
    """Obtains, caches and applies the CSRF token for one HTTP client.

    Args:
        http: Client that carries the session cookie. Its ``base_url`` must
            point at the API server.
        holder: Token cache. A private holder is created when omitted.
        header_name: Header the server reads the token from.
        token_path: Endpoint issuing tokens.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        holder: Optional[CsrfTokenHolder] = None,
        header_name: str = CSRF_HEADER_NAME,
        token_path: str = CSRF_TOKEN_PATH,
    ):
        self.http = http
        self.holder = holder if holder is not None else CsrfTokenHolder()
        self.header_name = header_name
        self.token_path = token_path
        self._fetch_lock = asyncio.Lock()

    def get_token(self) -> Optional[str]:
        """Returns the cached token without touching the network."""
        return self.holder.get()

    async def fetch_token_if_needed(self) -> Optional[str]:
        """Returns the cached token, fetching one first when nothing is cached.

        Network and server failures are logged and reported as ``None``.
        """
        token = self.holder.get()
        if token:
            return token

        # Concurrent callers share one fetch.
        async with self._fetch_lock:
            token = self.holder.get()
            if token:
                return token

            try:
                response = await self.http.get(self.token_path)
                response.raise_for_status()
                token = response.json().get("csrfToken")
            except (httpx.HTTPError, ValueError) as e:
                logger.error("csrf_token_fetch_failed", error=str(e), error_type=type(e).__name__)
                return None

            if not token:
                logger.error("csrf_token_fetch_failed", error="response carried no csrfToken")
                return None

            self.holder.set(token)
            logger.debug("csrf_token_fetched")
            return token

    def apply_token(self, headers: Optional[Mapping[str, str]] = None) -> dict:
        """Returns a copy of `headers` with the CSRF header set.

        Without a cached token the headers are returned unchanged and the
        server will reject the request.
        """
        result = dict(headers or {})
        token = self.holder.get()
        if not token:
            logger.warning("csrf_token_unavailable", header=self.header_name)
            return result
        result[self.header_name] = token
        return result
