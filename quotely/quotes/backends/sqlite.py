"""
SQLite backend on the pooled connections in quotely.infrastructure.database.

Listing order is seq DESC (newest first); quote_at walks seq ASC. Text
matching uses instr(lower(..)) so search terms are never interpreted as
patterns; the pool registers lower() as str.lower, so non-ASCII text folds
the same way as in the other backends.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import date
from typing import Any

from quotely.infrastructure.database import (
    db_transaction,
    get_db_connection,
    init_database,
    retry_on_db_lock,
)
from quotely.observability.logging import get_logger
from quotely.quotes.backends.base import QuoteBackend
from quotely.quotes.errors import UserExistsError
from quotely.quotes.filters import ProverbQuery, QuoteQuery, is_active
from quotely.quotes.models import Proverb, Quote, UserRecord, utcnow
from quotely.quotes.toggles import toggle_membership

logger = get_logger(__name__)

_INSERT_QUOTE = """
    INSERT INTO quotes (
        id, text, author, category, image_url, likes, submitted_by, created_at
    ) VALUES (
        :id, :text, :author, :category, :image_url, :likes, :submitted_by, :created_at
    )
"""

_INSERT_PROVERB = """
    INSERT INTO proverbs (id, text, theme, origin)
    VALUES (:id, :text, :theme, :origin)
"""


def _quote_where(query: QuoteQuery | None) -> tuple[str, list[Any]]:
    """Translate a QuoteQuery into a WHERE clause with the same semantics as QuoteQuery.matches."""
    if query is None:
        return "", []

    clauses: list[str] = []
    params: list[Any] = []

    if is_active(query.category):
        clauses.append("category = ?")
        params.append(query.category)
    if is_active(query.author):
        clauses.append("author = ?")
        params.append(query.author)
    if is_active(query.theme):
        clauses.append("instr(lower(category), lower(?)) > 0")
        params.append(query.theme)
    if query.search:
        clauses.append("(instr(lower(text), lower(?)) > 0 OR instr(lower(author), lower(?)) > 0)")
        params.extend([query.search, query.search])

    if not clauses:
        return "", []
    return "WHERE " + " AND ".join(clauses), params


def _proverb_where(query: ProverbQuery) -> tuple[str, list[Any]]:
    clauses: list[str] = []
    params: list[Any] = []

    if is_active(query.theme):
        clauses.append("theme = ?")
        params.append(query.theme)
    if query.search:
        clauses.append(
            "(instr(lower(text), lower(?)) > 0 OR instr(lower(coalesce(origin, '')), lower(?)) > 0)"
        )
        params.extend([query.search, query.search])

    if not clauses:
        return "", []
    return "WHERE " + " AND ".join(clauses), params


class SqliteBackend(QuoteBackend):
    """
    Server-variant storage.

    Args:
        initialize: create the schema on construction (idempotent)
    """

    name = "sqlite"

    def __init__(self, initialize: bool = True):
        if initialize:
            init_database()

    # -- quotes ------------------------------------------------------------

    def list_quotes(self, query: QuoteQuery, offset: int, limit: int) -> list[Quote]:
        where, params = _quote_where(query)
        with get_db_connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM quotes {where} ORDER BY seq DESC LIMIT ? OFFSET ?",
                (*params, limit, offset),
            ).fetchall()
        return [Quote.from_db_row(dict(row)) for row in rows]

    def count_quotes(self, query: QuoteQuery | None = None) -> int:
        where, params = _quote_where(query)
        with get_db_connection() as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM quotes {where}", params).fetchone()
        return row[0]

    def get_quote(self, quote_id: str) -> Quote | None:
        with get_db_connection() as conn:
            row = conn.execute("SELECT * FROM quotes WHERE id = ?", (quote_id,)).fetchone()
        if not row:
            return None
        return Quote.from_db_row(dict(row))

    def quotes_by_ids(self, quote_ids: list[str]) -> list[Quote]:
        if not quote_ids:
            return []
        placeholders = ",".join("?" * len(quote_ids))
        with get_db_connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM quotes WHERE id IN ({placeholders}) ORDER BY seq DESC",
                quote_ids,
            ).fetchall()
        return [Quote.from_db_row(dict(row)) for row in rows]

    def quote_at(self, index: int) -> Quote | None:
        if index < 0:
            return None
        with get_db_connection() as conn:
            row = conn.execute(
                "SELECT * FROM quotes ORDER BY seq ASC LIMIT 1 OFFSET ?", (index,)
            ).fetchone()
        if not row:
            return None
        return Quote.from_db_row(dict(row))

    @retry_on_db_lock()
    def add_quote(self, quote: Quote) -> Quote:
        with db_transaction() as conn:
            conn.execute(_INSERT_QUOTE, quote.to_db_dict())
        logger.info("Added quote %s (%s)", quote.id, quote.category)
        return quote

    # -- users -------------------------------------------------------------

    def _find_user(self, column: str, value: str) -> UserRecord | None:
        # column is one of a fixed set chosen by the callers below
        with get_db_connection() as conn:
            row = conn.execute(f"SELECT * FROM users WHERE {column} = ?", (value,)).fetchone()
        if not row:
            return None
        return UserRecord.from_db_row(dict(row))

    def get_user(self, user_id: str) -> UserRecord | None:
        return self._find_user("id", user_id)

    def find_user_by_username(self, username: str) -> UserRecord | None:
        return self._find_user("username", username)

    def find_user_by_email(self, email: str) -> UserRecord | None:
        return self._find_user("email", email)

    @retry_on_db_lock()
    def add_user(self, user: UserRecord) -> UserRecord:
        try:
            with db_transaction() as conn:
                conn.execute(
                    """
                    INSERT INTO users (
                        id, username, email, password_hash, avatar_url,
                        liked_quotes, favorited_quotes, created_at, updated_at
                    ) VALUES (
                        :id, :username, :email, :password_hash, :avatar_url,
                        :liked_quotes, :favorited_quotes, :created_at, :updated_at
                    )
                    """,
                    user.to_db_dict(),
                )
        except sqlite3.IntegrityError as e:
            logger.info("User insert rejected by unique constraint: %s", e)
            raise UserExistsError() from None
        return user

    @staticmethod
    def _update_user(conn: sqlite3.Connection, user: UserRecord) -> None:
        conn.execute(
            """
            UPDATE users SET
                username = :username,
                email = :email,
                password_hash = :password_hash,
                avatar_url = :avatar_url,
                liked_quotes = :liked_quotes,
                favorited_quotes = :favorited_quotes,
                updated_at = :updated_at
            WHERE id = :id
            """,
            user.to_db_dict(),
        )

    @retry_on_db_lock()
    def save_user(self, user: UserRecord) -> UserRecord:
        try:
            with db_transaction() as conn:
                self._update_user(conn, user)
        except sqlite3.IntegrityError as e:
            logger.info("User update rejected by unique constraint: %s", e)
            raise UserExistsError() from None
        return user

    @retry_on_db_lock()
    def update_user(self, user_id: str, changes: dict[str, str]) -> UserRecord | None:
        try:
            with db_transaction(immediate=True) as conn:
                user = self._user_in(conn, user_id)
                if user is None:
                    return None
                updated = user.model_copy(update={**changes, "updated_at": utcnow()})
                self._update_user(conn, updated)
        except sqlite3.IntegrityError as e:
            logger.info("User update rejected by unique constraint: %s", e)
            raise UserExistsError() from None
        return updated

    @staticmethod
    def _user_in(conn: sqlite3.Connection, user_id: str) -> UserRecord | None:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return UserRecord.from_db_row(dict(row)) if row else None

    @retry_on_db_lock()
    def toggle_like(self, user_id: str, quote_id: str) -> tuple[Quote, bool] | None:
        with db_transaction(immediate=True) as conn:
            user = self._user_in(conn, user_id)
            if user is None:
                return None

            liked, now_liked = toggle_membership(user.liked_quotes, quote_id)
            cursor = conn.execute(
                """
                UPDATE quotes
                SET likes = CASE WHEN ? THEN likes + 1 ELSE MAX(likes - 1, 0) END
                WHERE id = ?
                """,
                (1 if now_liked else 0, quote_id),
            )
            if cursor.rowcount == 0:
                return None
            self._update_user(
                conn, user.model_copy(update={"liked_quotes": liked, "updated_at": utcnow()})
            )
            row = conn.execute("SELECT * FROM quotes WHERE id = ?", (quote_id,)).fetchone()
        return Quote.from_db_row(dict(row)), now_liked

    @retry_on_db_lock()
    def toggle_favorite(self, user_id: str, quote_id: str) -> bool | None:
        with db_transaction(immediate=True) as conn:
            user = self._user_in(conn, user_id)
            exists = conn.execute("SELECT 1 FROM quotes WHERE id = ?", (quote_id,)).fetchone()
            if user is None or exists is None:
                return None

            favorited, now_favorited = toggle_membership(user.favorited_quotes, quote_id)
            self._update_user(
                conn,
                user.model_copy(update={"favorited_quotes": favorited, "updated_at": utcnow()}),
            )
        return now_favorited

    # -- proverbs ----------------------------------------------------------

    def list_proverbs(self, query: ProverbQuery) -> list[Proverb]:
        where, params = _proverb_where(query)
        with get_db_connection() as conn:
            rows = conn.execute(
                f"SELECT id, text, theme, origin FROM proverbs {where} ORDER BY seq ASC",
                params,
            ).fetchall()
        return [Proverb(**dict(row)) for row in rows]

    # -- daily quote cache -------------------------------------------------

    def get_daily(self, day: date) -> Quote | None:
        with get_db_connection() as conn:
            row = conn.execute(
                "SELECT quote_json FROM daily_quotes WHERE day = ?", (day.isoformat(),)
            ).fetchone()
        if not row:
            return None
        return Quote.model_validate(json.loads(row["quote_json"]))

    @retry_on_db_lock()
    def set_daily(self, day: date, quote: Quote) -> None:
        with db_transaction() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO daily_quotes (day, quote_json, created_at)
                VALUES (?, ?, ?)
                """,
                (day.isoformat(), quote.model_dump_json(), utcnow().isoformat()),
            )

    # -- seeding -----------------------------------------------------------

    @retry_on_db_lock()
    def seed(self, quotes: list[Quote], proverbs: list[Proverb]) -> bool:
        with db_transaction() as conn:
            if conn.execute("SELECT COUNT(*) FROM proverbs").fetchone()[0] == 0:
                conn.executemany(_INSERT_PROVERB, [p.model_dump() for p in proverbs])
            if conn.execute("SELECT COUNT(*) FROM quotes").fetchone()[0] > 0:
                return False
            conn.executemany(_INSERT_QUOTE, [q.to_db_dict() for q in quotes])
        logger.info("Seeded %d quotes and %d proverbs", len(quotes), len(proverbs))
        return True
