"""
Database schema for Quotely.

Users carry their liked/favorited quote ids as JSON arrays (a document-style
column, queried with SQLite's JSON1 functions). Quote like counters are
constrained to stay non-negative.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from quotely.observability.logging import get_logger

logger = get_logger(__name__)


def init_database(db_path: Path) -> None:
    """
    Initialize database with schema (idempotent)

    Args:
        db_path: Path to the database file

    Side Effects:
        - Creates parent directory, tables and indexes if they don't exist
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)

    conn.executescript("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL UNIQUE,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            avatar_url TEXT DEFAULT '',
            liked_quotes TEXT NOT NULL DEFAULT '[]',
            favorited_quotes TEXT NOT NULL DEFAULT '[]',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS quotes (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            text TEXT NOT NULL,
            author TEXT NOT NULL,
            category TEXT NOT NULL,
            image_url TEXT,
            likes INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0),
            submitted_by TEXT,
            created_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_quotes_category ON quotes(category);
        CREATE INDEX IF NOT EXISTS idx_quotes_author ON quotes(author);

        CREATE TABLE IF NOT EXISTS proverbs (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            text TEXT NOT NULL,
            theme TEXT NOT NULL,
            origin TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_proverbs_theme ON proverbs(theme);

        -- One row per calendar day (YYYY-MM-DD)
        CREATE TABLE IF NOT EXISTS daily_quotes (
            day TEXT PRIMARY KEY,
            quote_json TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
    """)

    conn.commit()
    conn.close()

    logger.info("Database initialized: %s", db_path)


def validate_schema(conn: sqlite3.Connection) -> bool:
    """
    Validate database has expected schema

    Raises:
        ValueError: If tables or columns are missing
    """
    required_tables = {
        "users": ["id", "username", "email", "password_hash", "liked_quotes", "favorited_quotes"],
        "quotes": ["seq", "id", "text", "author", "category", "likes"],
        "proverbs": ["id", "text", "theme", "origin"],
        "daily_quotes": ["day", "quote_json"],
    }

    cursor = conn.cursor()

    cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")
    existing_tables = {row[0] for row in cursor.fetchall()}

    missing_tables = set(required_tables) - existing_tables
    if missing_tables:
        raise ValueError(f"Database missing tables: {missing_tables}")

    for table, required_cols in required_tables.items():
        # Identifiers come from the dict above; PRAGMA cannot take parameters
        cursor.execute(f"PRAGMA table_info({table})")
        existing_cols = {row[1] for row in cursor.fetchall()}

        missing_cols = set(required_cols) - existing_cols
        if missing_cols:
            raise ValueError(f"Table '{table}' missing columns: {missing_cols}")

    return True
