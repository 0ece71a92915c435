"""
Backend over a KeyValueStore, one JSON value per collection.

Keys:
    quotely_quotes           list of quotes, insertion order
    quotely_users            list of user records (with password hashes)
    quotely_proverbs         list of proverbs
    dailyQuote-YYYY-MM-DD    snapshot of that day's quote
"""

from __future__ import annotations

from pathlib import Path

from quotely.infrastructure.kvstore import KeyValueStore
from quotely.quotes.backends.base import CollectionBackend
from quotely.quotes.models import Proverb, Quote, UserRecord

QUOTES_KEY = "quotely_quotes"
USERS_KEY = "quotely_users"
PROVERBS_KEY = "quotely_proverbs"


class KeyValueBackend(CollectionBackend):
    name = "keyvalue"

    def __init__(self, store: KeyValueStore | str | Path):
        super().__init__()
        self.store = store if isinstance(store, KeyValueStore) else KeyValueStore(store)

    def _load_quotes(self) -> list[Quote]:
        return [Quote.model_validate(item) for item in self.store.get(QUOTES_KEY, [])]

    def _store_quotes(self, quotes: list[Quote]) -> None:
        self.store.set(QUOTES_KEY, [q.model_dump(mode="json") for q in quotes])

    def _load_users(self) -> list[UserRecord]:
        return [UserRecord.model_validate(item) for item in self.store.get(USERS_KEY, [])]

    def _store_users(self, users: list[UserRecord]) -> None:
        self.store.set(USERS_KEY, [u.model_dump(mode="json") for u in users])

    def _load_proverbs(self) -> list[Proverb]:
        return [Proverb.model_validate(item) for item in self.store.get(PROVERBS_KEY, [])]

    def _store_proverbs(self, proverbs: list[Proverb]) -> None:
        self.store.set(PROVERBS_KEY, [p.model_dump(mode="json") for p in proverbs])

    def _load_daily(self, key: str) -> Quote | None:
        raw = self.store.get(key)
        return Quote.model_validate(raw) if raw else None

    def _store_daily(self, key: str, quote: Quote) -> None:
        self.store.set(key, quote.model_dump(mode="json"))
