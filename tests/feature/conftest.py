import secrets

import pytest
from itsdangerous import Signer

from bubbles_cafe.adapters.middleware.session import COOKIE_SALT
from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.domain.services.csrf import generate_token

# httpx files cookies for dotless hosts such as "test" under "<host>.local".
COOKIE_DOMAIN = "test.local"


def signed_cookie(session_id: str) -> str:
    return Signer(settings.SECRET_KEY, salt=COOKIE_SALT).sign(session_id).decode("utf-8")


@pytest.fixture
def attach_session_cookie(async_client):
    """Sets the raw session cookie value on the test client."""

    def _attach(value: str) -> None:
        async_client.cookies.set(settings.SESSION_COOKIE_NAME, value, domain=COOKIE_DOMAIN, path="/")

    return _attach


@pytest.fixture
def sign_in(store, attach_session_cookie):
    """Seeds a live session and points the test client's cookie at it.

    Returns ``(session_id, csrf_token)``.
    """

    async def _sign_in(user=None, session_id=None, attach=True):
        session_id = session_id or secrets.token_hex(32)
        csrf_token = generate_token()
        data = {"__meta": {"userId": user["id"] if user else None, "csrfToken": csrf_token}}
        if user is not None:
            data["user"] = user
        await store.set(session_id, data)
        if attach:
            attach_session_cookie(signed_cookie(session_id))
        return session_id, csrf_token

    return _sign_in


@pytest.fixture
def regular_user():
    return {"id": 1, "username": "reader", "isAdmin": False}


@pytest.fixture
def admin_user():
    return {"id": 99, "username": "editor", "isAdmin": True}
