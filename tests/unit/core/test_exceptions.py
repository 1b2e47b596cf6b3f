import pytest

from bubbles_cafe.core.exceptions import (
    AuthenticationError,
    CafeError,
    CsrfError,
    CsrfSessionMissingError,
    CsrfTokenMismatchError,
    CsrfTokenMissingError,
    DatabaseError,
    PermissionError,
    SessionRequiredError,
    SessionStoreError,
)


@pytest.mark.parametrize(
    "exc_class, parent, code",
    [
        (CsrfSessionMissingError, CsrfError, "csrf_session_missing"),
        (CsrfTokenMissingError, CsrfError, "csrf_token_missing"),
        (CsrfTokenMismatchError, CsrfError, "csrf_token_mismatch"),
        (SessionRequiredError, AuthenticationError, "session_required"),
    ],
)
def test_default_codes(exc_class, parent, code):
    exc = exc_class()

    assert isinstance(exc, parent)
    assert isinstance(exc, CafeError)
    assert exc.code == code


def test_csrf_errors_are_permission_errors():
    assert issubclass(CsrfError, PermissionError)


def test_session_store_error_carries_operation():
    exc = SessionStoreError("Session store set failed", operation="set")

    assert isinstance(exc, DatabaseError)
    assert exc.operation == "set"
    assert exc.code == "session_store_error"
    assert str(exc) == "Session store set failed"
