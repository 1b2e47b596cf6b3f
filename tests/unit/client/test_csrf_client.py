import httpx
import pytest

from bubbles_cafe.client import CafeApiClient, CsrfTokenHolder, CsrfTokenService


def _token_server(tokens, calls):
    """Mock API handing out `tokens` in order and accepting only the latest one."""
    issued = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path, request.headers.get("X-CSRF-Token")))
        if request.url.path == "/api/csrf-token":
            issued.append(tokens[len(issued)])
            return httpx.Response(200, json={"csrfToken": issued[-1], "timestamp": "2025-01-01T00:00:00Z"})
        if request.method == "GET":
            return httpx.Response(200, json={"ok": True})
        if issued and request.headers.get("X-CSRF-Token") == issued[-1]:
            return httpx.Response(200, json={"success": True})
        return httpx.Response(403, json={"detail": "CSRF token validation failed", "code": "csrf_token_mismatch"})

    return handler


@pytest.fixture
def calls():
    return []


def test_holder_get_set_clear():
    holder = CsrfTokenHolder()
    assert holder.get() is None

    holder.set("abc")
    assert holder.get() == "abc"

    holder.clear()
    assert holder.get() is None


@pytest.mark.asyncio
async def test_get_token_is_cache_only(calls):
    transport = httpx.MockTransport(_token_server(["t1"], calls))
    async with httpx.AsyncClient(transport=transport, base_url="http://cafe") as http:
        service = CsrfTokenService(http)

        assert service.get_token() is None
        assert calls == []


@pytest.mark.asyncio
async def test_fetch_token_if_needed_fetches_once(calls):
    transport = httpx.MockTransport(_token_server(["t1", "t2"], calls))
    async with httpx.AsyncClient(transport=transport, base_url="http://cafe") as http:
        service = CsrfTokenService(http)

        first = await service.fetch_token_if_needed()
        second = await service.fetch_token_if_needed()

    assert first == second == "t1"
    assert service.get_token() == "t1"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_fetch_token_if_needed_returns_none_on_server_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"detail": "boom"}))
    async with httpx.AsyncClient(transport=transport, base_url="http://cafe") as http:
        service = CsrfTokenService(http)

        assert await service.fetch_token_if_needed() is None
        assert service.get_token() is None


@pytest.mark.asyncio
async def test_fetch_token_if_needed_returns_none_on_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://cafe") as http:
        service = CsrfTokenService(http)

        assert await service.fetch_token_if_needed() is None


def test_apply_token_sets_header_on_a_copy():
    service = CsrfTokenService(httpx.AsyncClient(), CsrfTokenHolder("tok"))
    headers = {"Accept": "application/json"}

    applied = service.apply_token(headers)

    assert applied == {"Accept": "application/json", "X-CSRF-Token": "tok"}
    assert headers == {"Accept": "application/json"}


def test_apply_token_without_token_leaves_headers_alone():
    service = CsrfTokenService(httpx.AsyncClient())

    assert service.apply_token({"Accept": "application/json"}) == {"Accept": "application/json"}


@pytest.mark.asyncio
async def test_client_get_does_not_fetch_token(calls):
    transport = httpx.MockTransport(_token_server(["t1"], calls))
    async with CafeApiClient("http://cafe", transport=transport) as client:
        response = await client.get("/api/session/health")

    assert response.status_code == 200
    assert calls == [("GET", "/api/session/health", None)]


@pytest.mark.asyncio
async def test_client_post_fetches_and_applies_token(calls):
    transport = httpx.MockTransport(_token_server(["t1"], calls))
    async with CafeApiClient("http://cafe", transport=transport) as client:
        response = await client.post("/api/session/store", json={"key": "k", "value": 1})

    assert response.status_code == 200
    assert calls == [
        ("GET", "/api/csrf-token", None),
        ("POST", "/api/session/store", "t1"),
    ]


@pytest.mark.asyncio
async def test_client_refreshes_stale_token_and_retries_once(calls):
    # Arrange
    holder = CsrfTokenHolder("stale")
    transport = httpx.MockTransport(_token_server(["fresh"], calls))

    # Act
    async with CafeApiClient("http://cafe", transport=transport, holder=holder) as client:
        response = await client.put("/api/items/1", json={})

    # Assert
    assert response.status_code == 200
    assert holder.get() == "fresh"
    assert calls == [
        ("PUT", "/api/items/1", "stale"),
        ("GET", "/api/csrf-token", None),
        ("PUT", "/api/items/1", "fresh"),
    ]


@pytest.mark.asyncio
async def test_client_gives_up_after_one_retry(calls):
    def handler(request):
        calls.append(request.url.path)
        if request.url.path == "/api/csrf-token":
            return httpx.Response(200, json={"csrfToken": "never-accepted"})
        return httpx.Response(403, json={"detail": "CSRF token validation failed", "code": "csrf_token_mismatch"})

    async with CafeApiClient("http://cafe", transport=httpx.MockTransport(handler)) as client:
        response = await client.delete("/api/session/remove/k")

    assert response.status_code == 403
    assert calls == ["/api/csrf-token", "/api/session/remove/k", "/api/csrf-token", "/api/session/remove/k"]


@pytest.mark.asyncio
async def test_client_does_not_retry_other_forbidden_responses(calls):
    def handler(request):
        calls.append(request.url.path)
        if request.url.path == "/api/csrf-token":
            return httpx.Response(200, json={"csrfToken": "t1"})
        return httpx.Response(403, json={"detail": "Admin access required", "code": "admin_required"})

    async with CafeApiClient("http://cafe", transport=httpx.MockTransport(handler)) as client:
        response = await client.post("/api/admin/users/1/sessions/invalidate")

    assert response.status_code == 403
    assert calls == ["/api/csrf-token", "/api/admin/users/1/sessions/invalidate"]
