"""Async HTTP client that applies CSRF tokens to state-changing requests."""

from typing import Any, Mapping, Optional

import httpx
from structlog import get_logger

from .csrf import CsrfTokenHolder, CsrfTokenService

logger = get_logger(__name__)

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def is_csrf_rejection(response: httpx.Response) -> bool:
    """True for a ``403`` whose error code marks a CSRF failure."""
    if response.status_code != httpx.codes.FORBIDDEN:
        return False
    try:
        body = response.json()
    except ValueError:
        return False
    if not isinstance(body, dict):
        return False
    return str(body.get("code", "")).startswith("csrf_")


class CafeApiClient:
    """Client for the Bubble's Cafe API.

    GET, HEAD and OPTIONS requests pass straight through. POST, PUT, PATCH and
    DELETE get the CSRF token attached; if the server rejects the token, the
    cached token is dropped, a fresh one is fetched and the request is retried
    once. A second rejection is returned to the caller as is.

    Args:
        base_url: API server root, used when no `http` client is given.
        http: Existing client to send requests with. It is not closed by
            `aclose`.
        holder: Shared token cache.
        **client_kwargs: Extra arguments for the `httpx.AsyncClient` created
            when `http` is omitted.

    Usage::

        async with CafeApiClient("https://bubbles.cafe") as client:
            await client.post("/api/session/store", json={"key": "theme", "value": "dark"})
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        http: Optional[httpx.AsyncClient] = None,
        holder: Optional[CsrfTokenHolder] = None,
        **client_kwargs: Any,
    ):
        self._owns_http = http is None
        self.http = http if http is not None else httpx.AsyncClient(base_url=base_url, **client_kwargs)
        self.csrf = CsrfTokenService(self.http, holder)

    async def __aenter__(self) -> "CafeApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        method = method.upper()
        if method not in MUTATING_METHODS:
            return await self.http.request(method, url, headers=headers, **kwargs)

        await self.csrf.fetch_token_if_needed()
        response = await self.http.request(method, url, headers=self.csrf.apply_token(headers), **kwargs)
        if not is_csrf_rejection(response):
            return response

        logger.info("csrf_token_rejected", method=method, url=url, code=response.json().get("code"))
        self.csrf.holder.clear()
        if await self.csrf.fetch_token_if_needed() is None:
            return response
        return await self.http.request(method, url, headers=self.csrf.apply_token(headers), **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
