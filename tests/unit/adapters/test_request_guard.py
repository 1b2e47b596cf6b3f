import pytest
from starlette.requests import Request

from bubbles_cafe.adapters.middleware import RequestGuardMiddleware
from bubbles_cafe.domain.value_objects import SessionContext


def _request(method, path, headers=None, session=None):
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "state": {},
    }
    request = Request(scope)
    if session is not None:
        request.state.session = session
    return request


def _live_session(token="t" * 64):
    return SessionContext("sid", {"__meta": {"csrfToken": token}})


@pytest.fixture
def guard():
    return RequestGuardMiddleware(exempt_paths=["/api/auth/login"])


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE"])
def test_mutating_methods_are_protected(guard, method):
    assert guard.is_protected(_request(method, "/api/session/store"))


@pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS"])
def test_safe_methods_are_not_protected(guard, method):
    assert not guard.is_protected(_request(method, "/api/session/store"))


def test_exempt_path_is_not_protected(guard):
    assert not guard.is_protected(_request("POST", "/api/auth/login"))


def test_default_exempt_paths_come_from_settings():
    guard = RequestGuardMiddleware()

    assert "/api/auth/register" in guard.exempt_paths


@pytest.mark.asyncio
async def test_passes_valid_request_through(guard, mocker):
    call_next = mocker.AsyncMock(return_value="downstream")
    request = _request("POST", "/api/x", {"X-CSRF-Token": "t" * 64}, _live_session())

    response = await guard(request, call_next)

    assert response == "downstream"
    call_next.assert_awaited_once_with(request)


@pytest.mark.asyncio
async def test_new_session_is_rejected_with_401(guard, mocker):
    call_next = mocker.AsyncMock()
    request = _request("POST", "/api/x", session=SessionContext("sid", is_new=True))

    response = await guard(request, call_next)

    assert response.status_code == 401
    assert request.state.guard_rejected is True
    call_next.assert_not_awaited()


@pytest.mark.asyncio
async def test_session_without_token_is_rejected_with_403(guard, mocker):
    call_next = mocker.AsyncMock()
    request = _request("DELETE", "/api/x", {"X-CSRF-Token": "abc"}, SessionContext("sid", {}))

    response = await guard(request, call_next)

    assert response.status_code == 403
    assert b"csrf_session_missing" in response.body
    call_next.assert_not_awaited()
