"""
API startup: backend selection, schema validation and fail-fast configuration
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from quotely.api.app import create_app
from quotely.infrastructure import security
from quotely.infrastructure.security import clear_token_issuer
from quotely.quotes import backends
from quotely.quotes.backends import MemoryBackend, create_backend


def test_default_sqlite_backend(sqlite_db, monkeypatch):
    """Test the API starts on SQLite, seeds, and reports pool health"""
    monkeypatch.setattr(backends, "QUOTELY_BACKEND", "sqlite")

    client = TestClient(create_app(seed=True))

    assert client.get("/").json()["backend"] == "sqlite"
    assert len(client.get("/api/quotes").json()) == 10

    data = client.get("/health/db").json()
    assert data["status"] in ["healthy", "degraded"]
    assert data["pool"]["pool_size"] == 5
    assert data["pool"]["available"] + data["pool"]["in_use"] == 5


def test_sqlite_like_flow(sqlite_db, monkeypatch):
    monkeypatch.setattr(backends, "QUOTELY_BACKEND", "sqlite")
    client = TestClient(create_app(seed=True))

    token = client.post(
        "/api/auth/signup",
        json={"username": "reader", "email": "reader@example.com", "password": "pw"},
    ).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert client.post("/api/quotes/q7/like", headers=headers).json() == {
        "likes": 131,
        "is_liked": True,
    }
    assert client.get("/api/quotes/q7").json()["likes"] == 131


def test_seed_on_restart_is_noop(sqlite_db, monkeypatch):
    monkeypatch.setattr(backends, "QUOTELY_BACKEND", "sqlite")
    first = TestClient(create_app(seed=True))
    first.post(
        "/api/auth/signup",
        json={"username": "reader", "email": "reader@example.com", "password": "pw"},
    )

    second = TestClient(create_app(seed=True))

    assert len(second.get("/api/quotes", params={"limit": 100}).json()) == 10
    login = second.post("/api/auth/login", json={"username": "reader", "password": "pw"})
    assert login.status_code == 200


def test_unknown_backend_fails_startup(monkeypatch):
    monkeypatch.setattr(backends, "QUOTELY_BACKEND", "postgres")

    with pytest.raises(RuntimeError, match="Storage initialization failed"):
        create_app(seed=False)


def test_create_backend_by_name(tmp_path):
    assert create_backend("memory").name == "memory"
    assert create_backend("keyvalue", kv_path=tmp_path / "kv.json").name == "keyvalue"

    with pytest.raises(ValueError, match="Unknown backend"):
        create_backend("redis")


def test_production_without_secret_key_fails(monkeypatch):
    monkeypatch.delenv("QUOTELY_SECRET_KEY", raising=False)
    monkeypatch.setattr(security, "IS_PRODUCTION", True)
    clear_token_issuer()

    with pytest.raises(RuntimeError, match="QUOTELY_SECRET_KEY"):
        create_app(backend=MemoryBackend(), seed=False)


def test_keyvalue_backend_app(tmp_path, monkeypatch):
    monkeypatch.setattr(backends, "QUOTELY_BACKEND", "keyvalue")
    monkeypatch.setattr(backends, "QUOTELY_KV_PATH", str(tmp_path / "api_store.json"))

    client = TestClient(create_app(seed=True))

    assert client.get("/health").json()["backend"] == "keyvalue"
    assert (tmp_path / "api_store.json").exists()


def test_sqlite_page_far_past_the_end(sqlite_db, monkeypatch):
    monkeypatch.setattr(backends, "QUOTELY_BACKEND", "sqlite")
    client = TestClient(create_app(seed=True))

    response = client.get("/api/quotes", params={"page": 10**18, "limit": 100})

    assert response.status_code == 200
    assert response.json() == []
