"""
In-process client over the memory or key-value backend.

The key-value variant keeps the session in the same store as the data, so a
new LocalClient on the same file starts signed in as the last user.
"""

from __future__ import annotations

from pathlib import Path

from quotely.client.base import QuotelyClient
from quotely.config import API_LIST_LIMIT_DEFAULT
from quotely.infrastructure.kvstore import KeyValueStore
from quotely.quotes.accounts import AccountService
from quotely.quotes.backends import KeyValueBackend, MemoryBackend, QuoteBackend
from quotely.quotes.filters import ProverbQuery, QuoteQuery
from quotely.quotes.models import FavoriteResult, LikeResult, ProfileUpdate, Proverb, QuoteView, User
from quotely.quotes.service import QuoteService


class LocalClient(QuotelyClient):
    def __init__(
        self,
        backend: QuoteBackend | None = None,
        quote_service: QuoteService | None = None,
        account_service: AccountService | None = None,
        session_store: KeyValueStore | None = None,
        seed: bool = True,
    ):
        if quote_service is not None:
            backend = quote_service.backend
        backend = backend or MemoryBackend()
        if session_store is None and isinstance(backend, KeyValueBackend):
            session_store = backend.store
        super().__init__(session_store)

        self.quotes = quote_service or QuoteService(backend)
        self.accounts = account_service or AccountService(backend)
        if seed:
            self.quotes.seed()

    @classmethod
    def in_memory(cls, seed: bool = True) -> LocalClient:
        return cls(MemoryBackend(), seed=seed)

    @classmethod
    def persistent(cls, path: str | Path, seed: bool = True) -> LocalClient:
        """Client over a JSON key-value file (created on first write)."""
        return cls(KeyValueBackend(KeyValueStore(path)), seed=seed)

    def _reader_id(self) -> str | None:
        return self.session.user.id if self.session.user else None

    def _refresh_user(self) -> None:
        user = self._require_auth()
        self._set_user(self.accounts.get_user(user.id))

    # -- accounts ----------------------------------------------------------

    def signup(self, username: str, email: str, password: str) -> User:
        return self._start_session(self.accounts.signup(username, email, password))

    def login(self, username: str, password: str) -> User:
        return self._start_session(self.accounts.login(username, password))

    def social_login(self, provider: str) -> User:
        return self._start_session(self.accounts.social_login(provider))

    def update_profile(
        self,
        username: str | None = None,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        user = self._require_auth()
        update = ProfileUpdate(username=username, email=email, avatar_url=avatar_url)
        return self._set_user(self.accounts.update_profile(user.id, update))

    # -- quotes ------------------------------------------------------------

    def fetch_quotes(
        self,
        category: str | None = None,
        author: str | None = None,
        theme: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = API_LIST_LIMIT_DEFAULT,
    ) -> list[QuoteView]:
        query = QuoteQuery(category=category, author=author, theme=theme, search=search)
        return self.quotes.list_quotes(query, page=page, limit=limit, user_id=self._reader_id())

    def fetch_quote(self, quote_id: str) -> QuoteView:
        return self.quotes.get_quote(quote_id, self._reader_id())

    def fetch_daily_quote(self) -> QuoteView | None:
        return self.quotes.daily_quote(self._reader_id())

    def fetch_liked_quotes(self) -> list[QuoteView]:
        return self.quotes.liked_quotes(self._require_auth().id)

    def fetch_favorited_quotes(self) -> list[QuoteView]:
        return self.quotes.favorited_quotes(self._require_auth().id)

    def submit_quote(self, text: str, author: str, category: str) -> QuoteView:
        return self.quotes.submit_quote(self._require_auth().id, text, author, category)

    def toggle_like(self, quote_id: str) -> LikeResult:
        result = self.quotes.toggle_like(self._require_auth().id, quote_id)
        self._refresh_user()
        return result

    def toggle_favorite(self, quote_id: str) -> FavoriteResult:
        result = self.quotes.toggle_favorite(self._require_auth().id, quote_id)
        self._refresh_user()
        return result

    # -- proverbs ----------------------------------------------------------

    def fetch_proverbs(self, theme: str | None = None, search: str | None = None) -> list[Proverb]:
        return self.quotes.list_proverbs(ProverbQuery(theme=theme, search=search))
