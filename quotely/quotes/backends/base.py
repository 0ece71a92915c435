"""
Storage interface shared by the memory, key-value and SQLite backends.

Backends store and fetch; the services decide what to store. Filter semantics
are defined by QuoteQuery / ProverbQuery. Quotes have two orders:

- listing order: newest first (what list_quotes / quotes_by_ids return)
- insertion order: oldest first (what quote_at indexes, used by the daily pick)
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import date

from quotely.quotes.errors import UserExistsError
from quotely.quotes.filters import (
    ProverbQuery,
    QuoteQuery,
    filter_proverbs,
    filter_quotes,
    paginate,
)
from quotely.quotes.models import Proverb, Quote, UserRecord, utcnow
from quotely.quotes.toggles import next_like_count, toggle_membership


class QuoteBackend(ABC):
    """Storage for quotes, proverbs, users and the daily-quote cache."""

    name: str = "abstract"

    # -- quotes ------------------------------------------------------------

    @abstractmethod
    def list_quotes(self, query: QuoteQuery, offset: int, limit: int) -> list[Quote]:
        """Filtered quotes in listing order, sliced by offset/limit."""

    @abstractmethod
    def count_quotes(self, query: QuoteQuery | None = None) -> int: ...

    @abstractmethod
    def get_quote(self, quote_id: str) -> Quote | None: ...

    @abstractmethod
    def quotes_by_ids(self, quote_ids: list[str]) -> list[Quote]:
        """Existing quotes among quote_ids, in listing order."""

    @abstractmethod
    def quote_at(self, index: int) -> Quote | None:
        """Quote at position index in insertion order."""

    @abstractmethod
    def add_quote(self, quote: Quote) -> Quote: ...

    # -- users -------------------------------------------------------------

    @abstractmethod
    def get_user(self, user_id: str) -> UserRecord | None: ...

    @abstractmethod
    def find_user_by_username(self, username: str) -> UserRecord | None: ...

    @abstractmethod
    def find_user_by_email(self, email: str) -> UserRecord | None: ...

    @abstractmethod
    def add_user(self, user: UserRecord) -> UserRecord:
        """
        Raises:
            UserExistsError: username or email already taken
        """

    @abstractmethod
    def save_user(self, user: UserRecord) -> UserRecord:
        """
        Overwrite an existing user.

        Raises:
            UserExistsError: new username or email belongs to another user
        """

    @abstractmethod
    def update_user(self, user_id: str, changes: dict[str, str]) -> UserRecord | None:
        """
        Set the given profile fields (username, email, avatar_url) on the
        current stored record and bump updated_at.

        Returns:
            The updated user, or None if user_id does not exist

        Raises:
            UserExistsError: new username or email belongs to another user
        """

    @abstractmethod
    def toggle_like(self, user_id: str, quote_id: str) -> tuple[Quote, bool] | None:
        """
        Flip user_id's like on quote_id as one unit: re-read the user, toggle
        the liked set, bump updated_at and step the quote's counter up or down,
        never below zero.

        Returns:
            (updated quote, True if now liked), or None if the user or quote
            does not exist (nothing saved)
        """

    @abstractmethod
    def toggle_favorite(self, user_id: str, quote_id: str) -> bool | None:
        """
        Flip user_id's favorite on quote_id as one unit.

        Returns:
            True if now favorited, or None if the user or quote does not exist
        """

    # -- proverbs ----------------------------------------------------------

    @abstractmethod
    def list_proverbs(self, query: ProverbQuery) -> list[Proverb]: ...

    # -- daily quote cache -------------------------------------------------

    @abstractmethod
    def get_daily(self, day: date) -> Quote | None: ...

    @abstractmethod
    def set_daily(self, day: date, quote: Quote) -> None: ...

    # -- seeding -----------------------------------------------------------

    @abstractmethod
    def seed(self, quotes: list[Quote], proverbs: list[Proverb]) -> bool:
        """
        Insert the catalog into empty collections.

        Returns:
            True if quotes were inserted, False if quotes already existed
        """


def daily_key(day: date) -> str:
    return f"dailyQuote-{day.isoformat()}"


class CollectionBackend(QuoteBackend):
    """
    Backend over whole-collection load/store primitives.

    Subclasses only say how to read and write each collection; filtering,
    ordering and uniqueness checks are done here on plain lists. Stored lists
    are in insertion order. Read-modify-write sequences hold _mutex.
    """

    def __init__(self) -> None:
        self._mutex = threading.RLock()

    @abstractmethod
    def _load_quotes(self) -> list[Quote]: ...

    @abstractmethod
    def _store_quotes(self, quotes: list[Quote]) -> None: ...

    @abstractmethod
    def _load_users(self) -> list[UserRecord]: ...

    @abstractmethod
    def _store_users(self, users: list[UserRecord]) -> None: ...

    @abstractmethod
    def _load_proverbs(self) -> list[Proverb]: ...

    @abstractmethod
    def _store_proverbs(self, proverbs: list[Proverb]) -> None: ...

    @abstractmethod
    def _load_daily(self, key: str) -> Quote | None: ...

    @abstractmethod
    def _store_daily(self, key: str, quote: Quote) -> None: ...

    # -- quotes ------------------------------------------------------------

    def _listing(self) -> list[Quote]:
        return list(reversed(self._load_quotes()))

    def list_quotes(self, query: QuoteQuery, offset: int, limit: int) -> list[Quote]:
        return paginate(filter_quotes(self._listing(), query), offset, limit)

    def count_quotes(self, query: QuoteQuery | None = None) -> int:
        quotes = self._load_quotes()
        if query is None:
            return len(quotes)
        return len(filter_quotes(quotes, query))

    def get_quote(self, quote_id: str) -> Quote | None:
        return next((q for q in self._load_quotes() if q.id == quote_id), None)

    def quotes_by_ids(self, quote_ids: list[str]) -> list[Quote]:
        wanted = set(quote_ids)
        return [q for q in self._listing() if q.id in wanted]

    def quote_at(self, index: int) -> Quote | None:
        quotes = self._load_quotes()
        if 0 <= index < len(quotes):
            return quotes[index]
        return None

    def add_quote(self, quote: Quote) -> Quote:
        with self._mutex:
            quotes = self._load_quotes()
            quotes.append(quote)
            self._store_quotes(quotes)
        return quote

    # -- users -------------------------------------------------------------

    def get_user(self, user_id: str) -> UserRecord | None:
        return next((u for u in self._load_users() if u.id == user_id), None)

    def find_user_by_username(self, username: str) -> UserRecord | None:
        return next((u for u in self._load_users() if u.username == username), None)

    def find_user_by_email(self, email: str) -> UserRecord | None:
        return next((u for u in self._load_users() if u.email == email), None)

    @staticmethod
    def _check_unique(users: list[UserRecord], candidate: UserRecord) -> None:
        for existing in users:
            if existing.id == candidate.id:
                continue
            if existing.username == candidate.username or existing.email == candidate.email:
                raise UserExistsError()

    def add_user(self, user: UserRecord) -> UserRecord:
        with self._mutex:
            users = self._load_users()
            self._check_unique(users, user)
            users.append(user)
            self._store_users(users)
        return user

    def save_user(self, user: UserRecord) -> UserRecord:
        with self._mutex:
            users = self._load_users()
            self._check_unique(users, user)
            self._store_users([user if u.id == user.id else u for u in users])
        return user

    def update_user(self, user_id: str, changes: dict[str, str]) -> UserRecord | None:
        with self._mutex:
            user = self.get_user(user_id)
            if user is None:
                return None
            return self.save_user(user.model_copy(update={**changes, "updated_at": utcnow()}))

    def toggle_like(self, user_id: str, quote_id: str) -> tuple[Quote, bool] | None:
        with self._mutex:
            user = self.get_user(user_id)
            quotes = self._load_quotes()
            index = next((i for i, q in enumerate(quotes) if q.id == quote_id), None)
            if user is None or index is None:
                return None

            liked, now_liked = toggle_membership(user.liked_quotes, quote_id)
            quote = quotes[index]
            quotes[index] = quote.model_copy(
                update={"likes": next_like_count(quote.likes, now_liked)}
            )
            self.save_user(user.model_copy(update={"liked_quotes": liked, "updated_at": utcnow()}))
            self._store_quotes(quotes)
        return quotes[index], now_liked

    def toggle_favorite(self, user_id: str, quote_id: str) -> bool | None:
        with self._mutex:
            user = self.get_user(user_id)
            if user is None or self.get_quote(quote_id) is None:
                return None

            favorited, now_favorited = toggle_membership(user.favorited_quotes, quote_id)
            self.save_user(
                user.model_copy(update={"favorited_quotes": favorited, "updated_at": utcnow()})
            )
        return now_favorited

    # -- proverbs ----------------------------------------------------------

    def list_proverbs(self, query: ProverbQuery) -> list[Proverb]:
        return filter_proverbs(self._load_proverbs(), query)

    # -- daily quote cache -------------------------------------------------

    def get_daily(self, day: date) -> Quote | None:
        return self._load_daily(daily_key(day))

    def set_daily(self, day: date, quote: Quote) -> None:
        self._store_daily(daily_key(day), quote)

    # -- seeding -----------------------------------------------------------

    def seed(self, quotes: list[Quote], proverbs: list[Proverb]) -> bool:
        with self._mutex:
            if not self._load_proverbs():
                self._store_proverbs(list(proverbs))
            if self._load_quotes():
                return False
            self._store_quotes(list(quotes))
        return True
