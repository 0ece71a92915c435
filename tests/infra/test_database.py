"""
Tests for the SQLite connection pool, retry decorator and schema helpers
"""

import sqlite3

import pytest

from quotely.infrastructure.database import (
    db_transaction,
    get_db_connection,
    get_pool,
    get_pool_stats,
    reset_pool,
    retry_on_db_lock,
    validate_schema,
)
from quotely.infrastructure.database_schema import init_database
from quotely.infrastructure.database_schema import validate_schema as validate_connection


def test_retry_decorator_success():
    """Test retry decorator with successful operation"""
    call_count = [0]

    @retry_on_db_lock(max_retries=3, base_delay=0.01)
    def successful_operation():
        call_count[0] += 1
        return "success"

    assert successful_operation() == "success"
    assert call_count[0] == 1, "Should succeed on first try"


def test_retry_decorator_recovers_from_lock():
    """Test retry decorator recovers from database lock errors"""
    call_count = [0]

    @retry_on_db_lock(max_retries=3, base_delay=0.01, max_delay=0.05)
    def flaky_operation():
        call_count[0] += 1
        if call_count[0] < 3:
            raise sqlite3.OperationalError("database is locked")
        return "success"

    assert flaky_operation() == "success"
    assert call_count[0] == 3, "Should retry twice before success"


def test_retry_decorator_fails_after_max_retries():
    """Test retry decorator gives up after max retries"""
    call_count = [0]

    @retry_on_db_lock(max_retries=2, base_delay=0.01)
    def always_fails():
        call_count[0] += 1
        raise sqlite3.OperationalError("database is locked")

    with pytest.raises(sqlite3.OperationalError, match="database is locked"):
        always_fails()

    assert call_count[0] == 3, "Should try 3 times (initial + 2 retries)"


def test_retry_decorator_ignores_non_lock_errors():
    """Test retry decorator doesn't retry non-lock errors"""
    call_count = [0]

    @retry_on_db_lock(max_retries=3, base_delay=0.01)
    def schema_error():
        call_count[0] += 1
        raise sqlite3.OperationalError("no such table: foo")

    with pytest.raises(sqlite3.OperationalError, match="no such table"):
        schema_error()

    assert call_count[0] == 1, "Should not retry non-lock errors"


def test_pool_singleton(sqlite_db):
    """Test that get_pool returns same instance"""
    assert get_pool() is get_pool()


def test_reset_pool_reopens_against_new_path(sqlite_db, tmp_path, monkeypatch):
    first = get_pool()
    assert first.db_path == sqlite_db

    other = tmp_path / "other.db"
    monkeypatch.setenv("QUOTELY_DB_PATH", str(other))
    reset_pool()

    assert first.closed
    assert get_pool().db_path == other


def test_pool_stats(sqlite_db):
    """Test pool stats returns expected format"""
    stats = get_pool_stats()

    assert stats["pool_size"] == 5, "Default pool size should be 5"
    assert stats["available"] + stats["in_use"] == stats["pool_size"]
    assert isinstance(stats["usage_percent"], (int, float))
    assert stats["closed"] is False


def test_connection_pool_lifecycle(sqlite_db):
    """Test connection pool get/return lifecycle"""
    initial_available = get_pool_stats()["available"]

    with get_db_connection():
        during = get_pool_stats()
        assert during["available"] == initial_available - 1, "Available should decrease"

    assert get_pool_stats()["available"] == initial_available, "Available should be restored"


def test_missing_database_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("QUOTELY_DB_PATH", str(tmp_path / "absent.db"))
    reset_pool()

    with pytest.raises(FileNotFoundError, match="Database not found"):
        with get_db_connection():
            pass


def test_db_transaction_commits(sqlite_db):
    """Test db_transaction context manager commits on success"""
    with db_transaction() as conn:
        conn.execute(
            "INSERT INTO proverbs (id, text, theme, origin) VALUES ('p-test', 'Test.', 'Wisdom', NULL)"
        )

    with get_db_connection() as conn:
        row = conn.execute("SELECT text FROM proverbs WHERE id = 'p-test'").fetchone()
    assert row is not None
    assert row[0] == "Test."


def test_db_transaction_rolls_back_on_error(sqlite_db):
    """Test db_transaction rolls back on error"""
    with pytest.raises(ValueError, match="Intentional error"):
        with db_transaction() as conn:
            conn.execute(
                "INSERT INTO proverbs (id, text, theme) VALUES ('p-rollback', 'Gone.', 'Wisdom')"
            )
            raise ValueError("Intentional error")

    with get_db_connection() as conn:
        count = conn.execute("SELECT COUNT(*) FROM proverbs WHERE id = 'p-rollback'").fetchone()[0]
    assert count == 0, "Transaction should have rolled back"


def test_immediate_transaction_holds_write_lock_before_first_write(sqlite_db):
    """Test db_transaction(immediate=True) locks out other writers from the start"""
    other = sqlite3.connect(str(sqlite_db), timeout=0)
    try:
        with db_transaction(immediate=True) as conn:
            assert conn.in_transaction
            conn.execute("SELECT COUNT(*) FROM users").fetchone()

            with pytest.raises(sqlite3.OperationalError, match="database is locked"):
                other.execute("BEGIN IMMEDIATE")

        other.execute("BEGIN IMMEDIATE")
        other.rollback()
    finally:
        other.close()


def test_lower_folds_non_ascii(sqlite_db):
    with get_db_connection() as conn:
        row = conn.execute("SELECT lower('ÉCOLE Zoë'), lower(NULL)").fetchone()

    assert row[0] == "école zoë"
    assert row[1] is None


def test_like_counter_cannot_go_negative(sqlite_db):
    with pytest.raises(sqlite3.IntegrityError, match="CHECK constraint"):
        with db_transaction() as conn:
            conn.execute(
                """
                INSERT INTO quotes (id, text, author, category, likes, created_at)
                VALUES ('neg', 'Text', 'Author', 'Life', -1, '2024-01-01T00:00:00+00:00')
                """
            )


def test_validate_schema_on_fresh_database(sqlite_db):
    assert validate_schema() is True


def test_init_database_is_idempotent(sqlite_db):
    init_database(sqlite_db)
    init_database(sqlite_db)

    assert validate_schema() is True


def test_validate_schema_reports_missing_tables():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE users (id TEXT PRIMARY KEY)")

    with pytest.raises(ValueError, match="missing tables"):
        validate_connection(conn)

    conn.close()


def test_validate_schema_reports_missing_columns(tmp_path):
    db_path = tmp_path / "partial.db"
    init_database(db_path)

    conn = sqlite3.connect(db_path)
    conn.execute("DROP TABLE daily_quotes")
    conn.execute("CREATE TABLE daily_quotes (day TEXT PRIMARY KEY)")

    with pytest.raises(ValueError, match="daily_quotes"):
        validate_connection(conn)

    conn.close()
