"""
Shared surface of the Quotely clients.

LocalClient runs the services in-process; HttpClient talks to the REST API.
Both keep a SessionContext and raise NotAuthenticatedError for user actions
while signed out.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from quotely.client.session import SessionContext
from quotely.config import API_LIST_LIMIT_DEFAULT
from quotely.infrastructure.kvstore import KeyValueStore
from quotely.quotes.errors import NotAuthenticatedError
from quotely.quotes.models import AuthResult, FavoriteResult, LikeResult, Proverb, QuoteView, User


class QuotelyClient(ABC):
    def __init__(self, session_store: KeyValueStore | None = None):
        self.session_store = session_store
        self.session = SessionContext.load(session_store) if session_store else SessionContext()

    # -- session -----------------------------------------------------------

    @property
    def current_user(self) -> User | None:
        return self.session.user

    @property
    def is_authenticated(self) -> bool:
        return self.session.is_authenticated

    def _persist_session(self) -> None:
        if self.session_store is not None:
            self.session.save(self.session_store)

    def _start_session(self, result: AuthResult) -> User:
        self.session.start(result)
        self._persist_session()
        return result.user

    def _set_user(self, user: User) -> User:
        self.session.user = user
        self._persist_session()
        return user

    def _require_auth(self) -> User:
        if not self.session.is_authenticated:
            raise NotAuthenticatedError()
        return self.session.user

    def logout(self) -> None:
        self.session.clear()
        self._persist_session()

    # -- accounts ----------------------------------------------------------

    @abstractmethod
    def signup(self, username: str, email: str, password: str) -> User: ...

    @abstractmethod
    def login(self, username: str, password: str) -> User: ...

    @abstractmethod
    def social_login(self, provider: str) -> User: ...

    @abstractmethod
    def update_profile(
        self,
        username: str | None = None,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> User: ...

    # -- quotes ------------------------------------------------------------

    @abstractmethod
    def fetch_quotes(
        self,
        category: str | None = None,
        author: str | None = None,
        theme: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = API_LIST_LIMIT_DEFAULT,
    ) -> list[QuoteView]: ...

    @abstractmethod
    def fetch_quote(self, quote_id: str) -> QuoteView: ...

    @abstractmethod
    def fetch_daily_quote(self) -> QuoteView | None: ...

    @abstractmethod
    def fetch_liked_quotes(self) -> list[QuoteView]: ...

    @abstractmethod
    def fetch_favorited_quotes(self) -> list[QuoteView]: ...

    @abstractmethod
    def submit_quote(self, text: str, author: str, category: str) -> QuoteView: ...

    @abstractmethod
    def toggle_like(self, quote_id: str) -> LikeResult: ...

    @abstractmethod
    def toggle_favorite(self, quote_id: str) -> FavoriteResult: ...

    # -- proverbs ----------------------------------------------------------

    @abstractmethod
    def fetch_proverbs(self, theme: str | None = None, search: str | None = None) -> list[Proverb]: ...
