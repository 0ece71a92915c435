"""
Pytest configuration for Quotely tests

Provides a per-test Fernet key, a temporary SQLite database, backend
fixtures parametrized over memory / key-value / SQLite, and services wired
with a fixed date and a fake quote generator (no test reaches Gemini).
"""

from __future__ import annotations

import os

# Read at import by quotely.infrastructure.settings; keep hashing cheap in tests
os.environ.setdefault("QUOTELY_PASSWORD_ITERATIONS", "1000")
os.environ.setdefault("QUOTELY_SEED_ON_STARTUP", "false")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from cryptography.fernet import Fernet  # noqa: E402

from quotely.api.middleware.user_auth import clear_token_cache  # noqa: E402
from quotely.infrastructure.database import init_database, reset_pool  # noqa: E402
from quotely.infrastructure.security import clear_token_issuer  # noqa: E402
from quotely.observability.telemetry import reset_telemetry  # noqa: E402
from quotely.quotes.accounts import AccountService  # noqa: E402
from quotely.quotes.backends import KeyValueBackend, MemoryBackend, SqliteBackend  # noqa: E402
from quotely.quotes.daily import DailyQuoteSelector  # noqa: E402
from quotely.quotes.models import Quote  # noqa: E402
from quotely.quotes.service import QuoteService  # noqa: E402

# 2024-03-01 is day 61 of the year; 61 % 10 == 1, the second seeded quote (q9)
FIXED_DAY = date(2024, 3, 1)
TEST_PASSWORD_ITERATIONS = 1000


class FakeGenerator:
    """Stands in for the Gemini quote generator; records the categories asked for."""

    def __init__(self, quote: Quote | None = None):
        self.quote = quote
        self.calls: list[str] = []

    def __call__(self, category: str) -> Quote | None:
        self.calls.append(category)
        if self.quote is None:
            return None
        return self.quote.model_copy(update={"category": category})


@pytest.fixture(autouse=True)
def secret_key(monkeypatch):
    """Fresh token key per test"""
    key = Fernet.generate_key().decode()
    monkeypatch.setenv("QUOTELY_SECRET_KEY", key)
    clear_token_issuer()
    clear_token_cache()
    yield key
    clear_token_issuer()
    clear_token_cache()


@pytest.fixture(autouse=True)
def clean_telemetry():
    reset_telemetry()
    yield
    reset_telemetry()


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Point the connection pool at an initialized temporary database"""
    db_path = tmp_path / "quotely.db"
    monkeypatch.setenv("QUOTELY_DB_PATH", str(db_path))
    reset_pool()
    init_database()
    yield db_path
    reset_pool()


@pytest.fixture(params=["memory", "keyvalue", "sqlite"])
def backend(request, tmp_path, monkeypatch):
    """Each backend in turn; tests using this run three times"""
    if request.param == "memory":
        yield MemoryBackend()
    elif request.param == "keyvalue":
        yield KeyValueBackend(tmp_path / "store.json")
    else:
        monkeypatch.setenv("QUOTELY_DB_PATH", str(tmp_path / "quotely.db"))
        reset_pool()
        yield SqliteBackend()
        reset_pool()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def quote_service(backend, generator):
    selector = DailyQuoteSelector(backend, generator=generator, today=lambda: FIXED_DAY)
    return QuoteService(backend, daily_selector=selector)


@pytest.fixture
def account_service(backend):
    return AccountService(backend, password_iterations=TEST_PASSWORD_ITERATIONS)


@pytest.fixture
def seeded(quote_service):
    quote_service.seed()
    return quote_service


@pytest.fixture
def user_id(account_service):
    return account_service.signup("reader", "reader@example.com", "s3cret-pass").user.id
