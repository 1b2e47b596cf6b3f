from bubbles_cafe.domain.value_objects import SessionContext


def _loaded(**data):
    meta = {
        "userId": None,
        "ipAddress": "127.0.0.1",
        "userAgent": "pytest",
        "csrfToken": "t" * 64,
        "createdAt": "2025-01-01T00:00:00",
        "lastAccessedAt": "2025-01-01T00:00:00",
    }
    return SessionContext("sid", {**data, "__meta": meta})


def test_meta_is_split_from_payload():
    session = _loaded(theme="dark")

    assert dict(session) == {"theme": "dark"}
    assert session.csrf_token == "t" * 64
    assert not session.modified


def test_writes_mark_session_modified():
    session = _loaded()

    session["theme"] = "light"

    assert session.modified
    assert session["theme"] == "light"


def test_delete_marks_session_modified():
    session = _loaded(theme="dark")

    del session["theme"]

    assert session.modified
    assert "theme" not in session


def test_update_meta_only_flags_real_changes():
    session = _loaded()

    session.update_meta(ipAddress="127.0.0.1", userAgent="pytest")
    assert not session.modified

    session.update_meta(ipAddress="10.0.0.1")
    assert session.modified
    assert session.meta["ipAddress"] == "10.0.0.1"


def test_user_properties():
    session = _loaded(user={"id": "12", "isAdmin": True})

    assert session.user == {"id": "12", "isAdmin": True}
    assert session.user_id == 12
    assert session.is_admin


def test_anonymous_session():
    session = SessionContext("sid", is_new=True)

    assert session.user is None
    assert session.user_id is None
    assert not session.is_admin
    assert session.csrf_token is None


def test_user_id_falls_back_to_metadata():
    session = SessionContext("sid", {"__meta": {"userId": 4}})

    assert session.user_id == 4


def test_to_payload_keeps_only_writable_metadata():
    session = _loaded(theme="dark")

    payload = session.to_payload()

    assert payload["theme"] == "dark"
    assert payload["__meta"] == {
        "userId": None,
        "ipAddress": "127.0.0.1",
        "userAgent": "pytest",
        "csrfToken": "t" * 64,
    }


def test_invalidate():
    session = _loaded()

    session.invalidate()

    assert session.invalidated


def test_user_id_falls_back_to_meta_for_non_numeric_id():
    session = SessionContext("sid", {"user": {"id": "reader"}, "__meta": {"userId": 7}})

    assert session.user_id == 7


def test_nested_change_needs_mark_modified():
    session = _loaded(cart={"items": []})

    session["cart"]["items"].append("latte")
    assert not session.modified

    session.mark_modified()
    assert session.modified
    assert session.to_payload()["cart"] == {"items": ["latte"]}
