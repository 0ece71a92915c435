"""Tests for the persisted client session"""

from __future__ import annotations

from quotely.client.session import CURRENT_USER_KEY, SessionContext
from quotely.infrastructure.kvstore import KeyValueStore
from quotely.quotes.models import AuthResult, User


def _result() -> AuthResult:
    return AuthResult(
        token="token-abc",
        user=User(id="u1", username="reader", email="reader@example.com", liked_quotes=["q1"]),
    )


def test_new_session_is_anonymous():
    assert SessionContext().is_authenticated is False


def test_start_and_clear():
    session = SessionContext()

    session.start(_result())
    assert session.is_authenticated
    assert session.user.username == "reader"

    session.clear()
    assert not session.is_authenticated


def test_save_and_load(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    session = SessionContext()
    session.start(_result())

    session.save(store)
    restored = SessionContext.load(store)

    assert restored.token == "token-abc"
    assert restored.user == session.user


def test_saving_signed_out_session_removes_entry(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    session = SessionContext()
    session.start(_result())
    session.save(store)

    session.clear()
    session.save(store)

    assert store.get(CURRENT_USER_KEY) is None


def test_unreadable_entry_gives_empty_session(tmp_path):
    store = KeyValueStore(tmp_path / "store.json")
    store.set(CURRENT_USER_KEY, {"token": "t", "user": {"id": "u1"}})

    assert SessionContext.load(store).is_authenticated is False

    store.set(CURRENT_USER_KEY, "not-a-dict")
    assert SessionContext.load(store).is_authenticated is False
