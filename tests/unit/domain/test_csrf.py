import pytest
from starlette.requests import Request

from bubbles_cafe.core.exceptions import (
    CsrfSessionMissingError,
    CsrfTokenMismatchError,
    CsrfTokenMissingError,
)
from bubbles_cafe.domain.services.csrf import (
    extract_request_token,
    generate_token,
    tokens_match,
    verify_request_token,
)


def _request(headers=None):
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/session/store",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    return Request(scope)


def test_generate_token_is_64_hex_chars():
    token = generate_token()

    assert len(token) == 64
    assert all(c in "0123456789abcdef" for c in token)


def test_generate_token_is_unique():
    assert len({generate_token() for _ in range(50)}) == 50


def test_extract_request_token_reads_header():
    request = _request({"X-CSRF-Token": "abc123"})

    assert extract_request_token(request) == "abc123"


def test_extract_request_token_missing_header():
    assert extract_request_token(_request()) is None


@pytest.mark.parametrize(
    "expected, presented, result",
    [
        ("abc", "abc", True),
        ("abc", "abd", False),
        ("abc", "abcd", False),
        ("abc", "", False),
        ("abc", None, False),
        (None, "abc", False),
        ("", "", False),
    ],
)
def test_tokens_match(expected, presented, result):
    assert tokens_match(expected, presented) is result


def test_verify_request_token_accepts_match():
    token = generate_token()

    verify_request_token(token, token)


def test_verify_request_token_session_missing():
    with pytest.raises(CsrfSessionMissingError) as exc_info:
        verify_request_token(None, "abc")

    assert exc_info.value.code == "csrf_session_missing"


def test_verify_request_token_request_missing():
    with pytest.raises(CsrfTokenMissingError) as exc_info:
        verify_request_token("abc", None)

    assert exc_info.value.code == "csrf_token_missing"


def test_verify_request_token_mismatch():
    with pytest.raises(CsrfTokenMismatchError) as exc_info:
        verify_request_token(generate_token(), generate_token())

    assert exc_info.value.code == "csrf_token_mismatch"
    assert str(exc_info.value) == "CSRF token validation failed"
