"""In-process backend. State lives for the lifetime of the object."""

from __future__ import annotations

from quotely.quotes.backends.base import CollectionBackend
from quotely.quotes.models import Proverb, Quote, UserRecord


class MemoryBackend(CollectionBackend):
    name = "memory"

    def __init__(self) -> None:
        super().__init__()
        self._quotes: list[Quote] = []
        self._users: list[UserRecord] = []
        self._proverbs: list[Proverb] = []
        self._daily: dict[str, Quote] = {}

    def _load_quotes(self) -> list[Quote]:
        return list(self._quotes)

    def _store_quotes(self, quotes: list[Quote]) -> None:
        self._quotes = list(quotes)

    # UserRecord is mutable; copy on both sides so callers never alias stored state
    def _load_users(self) -> list[UserRecord]:
        return [user.model_copy(deep=True) for user in self._users]

    def _store_users(self, users: list[UserRecord]) -> None:
        self._users = [user.model_copy(deep=True) for user in users]

    def _load_proverbs(self) -> list[Proverb]:
        return list(self._proverbs)

    def _store_proverbs(self, proverbs: list[Proverb]) -> None:
        self._proverbs = list(proverbs)

    def _load_daily(self, key: str) -> Quote | None:
        return self._daily.get(key)

    def _store_daily(self, key: str, quote: Quote) -> None:
        self._daily[key] = quote
