"""
Quote service: the one place quote/proverb rules live.

Every client variant (local memory, local key-value file, REST API) calls
these methods; backends only persist. Readers are identified by user id;
an unknown or missing id reads as anonymous (both flags false).
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable

from quotely.config import API_LIST_LIMIT_DEFAULT
from quotely.observability.logging import get_logger
from quotely.observability.telemetry import counter, log_event
from quotely.quotes.backends.base import QuoteBackend
from quotely.quotes.catalog import QUOTE_CATEGORIES, quote_image_url, seed_proverbs, seed_quotes
from quotely.quotes.daily import DailyQuoteSelector
from quotely.quotes.errors import NotFoundError
from quotely.quotes.filters import ProverbQuery, QuoteQuery, page_window
from quotely.quotes.models import (
    FavoriteResult,
    LikeResult,
    Proverb,
    Quote,
    QuoteView,
    UserRecord,
)
from quotely.utils.validators import validate_author, validate_category, validate_quote_text

logger = get_logger(__name__)


class QuoteService:
    def __init__(
        self,
        backend: QuoteBackend,
        daily_selector: DailyQuoteSelector | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend
        self.daily_selector = daily_selector or DailyQuoteSelector(backend)
        self.clock = clock

    # -- helpers -----------------------------------------------------------

    def _reader(self, user_id: str | None) -> UserRecord | None:
        if not user_id:
            return None
        return self.backend.get_user(user_id)

    def _require_user(self, user_id: str) -> UserRecord:
        user = self.backend.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _require_quote(self, quote_id: str) -> Quote:
        quote = self.backend.get_quote(quote_id)
        if quote is None:
            raise NotFoundError("Quote not found")
        return quote

    @staticmethod
    def _views(quotes: list[Quote], reader: UserRecord | None) -> list[QuoteView]:
        return [QuoteView.for_user(quote, reader) for quote in quotes]

    # -- catalog -----------------------------------------------------------

    def seed(self) -> bool:
        """
        Load the built-in catalog into empty collections.

        Returns:
            True if quotes were inserted, False if quotes already existed
        """
        seeded = self.backend.seed(seed_quotes(), seed_proverbs())
        log_event("quotes.seed", backend=self.backend.name, seeded=seeded)
        return seeded

    # -- reading -----------------------------------------------------------

    def list_quotes(
        self,
        query: QuoteQuery | None = None,
        page: int = 1,
        limit: int = API_LIST_LIMIT_DEFAULT,
        user_id: str | None = None,
    ) -> list[QuoteView]:
        """
        One page of filtered quotes, newest first.

        Raises:
            InvalidInputError: page < 1 or limit out of range
        """
        offset, limit = page_window(page, limit)
        quotes = self.backend.list_quotes(query or QuoteQuery(), offset, limit)
        return self._views(quotes, self._reader(user_id))

    def count_quotes(self, query: QuoteQuery | None = None) -> int:
        return self.backend.count_quotes(query)

    def get_quote(self, quote_id: str, user_id: str | None = None) -> QuoteView:
        return QuoteView.for_user(self._require_quote(quote_id), self._reader(user_id))

    def liked_quotes(self, user_id: str) -> list[QuoteView]:
        user = self._require_user(user_id)
        return self._views(self.backend.quotes_by_ids(user.liked_quotes), user)

    def favorited_quotes(self, user_id: str) -> list[QuoteView]:
        user = self._require_user(user_id)
        return self._views(self.backend.quotes_by_ids(user.favorited_quotes), user)

    def daily_quote(self, user_id: str | None = None) -> QuoteView | None:
        quote = self.daily_selector.select()
        if quote is None:
            return None
        return QuoteView.for_user(quote, self._reader(user_id))

    def list_proverbs(self, query: ProverbQuery | None = None) -> list[Proverb]:
        return self.backend.list_proverbs(query or ProverbQuery())

    # -- writing -----------------------------------------------------------

    def submit_quote(self, user_id: str, text: str, author: str, category: str) -> QuoteView:
        """
        Add a user-submitted quote.

        Raises:
            NotFoundError: unknown user
            ValidationError: empty text/author or unknown category
        """
        user = self._require_user(user_id)
        category = validate_category(category, QUOTE_CATEGORIES)
        quote = Quote(
            id=str(uuid.uuid4()),
            text=validate_quote_text(text),
            author=validate_author(author),
            category=category,
            image_url=quote_image_url(f"{category}-{int(self.clock() * 1000)}"),
            likes=0,
            submitted_by=user.id,
        )
        self.backend.add_quote(quote)

        counter("quotes.submitted")
        log_event("quotes.submitted", quote_id=quote.id, user_id=user.id, category=category)
        return QuoteView.for_user(quote, user)

    def toggle_like(self, user_id: str, quote_id: str) -> LikeResult:
        """
        Flip the user's like on a quote and move the counter with it.

        Raises:
            NotFoundError: unknown user or quote
        """
        self._require_user(user_id)
        self._require_quote(quote_id)

        toggled = self.backend.toggle_like(user_id, quote_id)
        if toggled is None:
            raise NotFoundError("Quote not found")
        updated_quote, now_liked = toggled

        counter("quotes.liked" if now_liked else "quotes.unliked")
        log_event("quotes.like_toggled", quote_id=quote_id, user_id=user_id, is_liked=now_liked)
        return LikeResult(likes=updated_quote.likes, is_liked=now_liked)

    def toggle_favorite(self, user_id: str, quote_id: str) -> FavoriteResult:
        """
        Flip the user's favorite on a quote. No counter is involved.

        Raises:
            NotFoundError: unknown user or quote
        """
        self._require_user(user_id)
        self._require_quote(quote_id)

        now_favorited = self.backend.toggle_favorite(user_id, quote_id)
        if now_favorited is None:
            raise NotFoundError("Quote not found")

        counter("quotes.favorited" if now_favorited else "quotes.unfavorited")
        log_event(
            "quotes.favorite_toggled",
            quote_id=quote_id,
            user_id=user_id,
            is_favorited=now_favorited,
        )
        return FavoriteResult(is_favorited=now_favorited)
