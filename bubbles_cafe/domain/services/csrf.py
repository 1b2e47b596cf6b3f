"""Server-side CSRF token handling.

Tokens follow the double-submit pattern: the server keeps one random secret
per session, hands it to the client through `GET /api/csrf-token`, and every
mutating request must echo it back in the CSRF header.
"""

import secrets
from typing import Optional

from fastapi import Request

from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.exceptions import (
    CsrfSessionMissingError,
    CsrfTokenMismatchError,
    CsrfTokenMissingError,
)

TOKEN_BYTES = 32


def generate_token() -> str:
    """Returns a fresh 32-byte token, hex encoded."""
    return secrets.token_hex(TOKEN_BYTES)


def extract_request_token(request: Request) -> Optional[str]:
    """Returns the token presented in the CSRF header, if any."""
    token = request.headers.get(settings.CSRF_HEADER_NAME)
    return token or None


def tokens_match(expected: Optional[str], presented: Optional[str]) -> bool:
    """Constant-time comparison; empty values never match."""
    if not expected or not presented:
        return False
    return secrets.compare_digest(expected.encode("utf-8"), presented.encode("utf-8"))


def verify_request_token(expected: Optional[str], presented: Optional[str]) -> None:
    """Raises the matching `CsrfError` unless `presented` equals `expected`.

    Raises:
        CsrfSessionMissingError: The session holds no token.
        CsrfTokenMissingError: The request carried no token.
        CsrfTokenMismatchError: The tokens differ.
    """
    if not expected:
        raise CsrfSessionMissingError()
    if not presented:
        raise CsrfTokenMissingError()
    if not tokens_match(expected, presented):
        raise CsrfTokenMismatchError()
