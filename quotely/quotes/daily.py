"""
Quote of the day.

The first request of a calendar day picks a quote and caches it under that
day; later requests the same day get the same quote back. The pick is
collection[day_of_year % size] over insertion order, so it is reproducible
from the date alone. An empty collection asks the generator for one quote in
a random category; that quote is cached for the day like any other.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from datetime import date

from quotely.llm.quote_generator import generate_quote
from quotely.observability.logging import get_logger
from quotely.observability.telemetry import counter, log_event
from quotely.quotes.backends.base import QuoteBackend
from quotely.quotes.catalog import QUOTE_CATEGORIES
from quotely.quotes.models import Quote

logger = get_logger(__name__)


def daily_index(day: date, size: int) -> int:
    """Index of the day's quote in a collection of the given size (size > 0)."""
    return day.timetuple().tm_yday % size


class DailyQuoteSelector:
    def __init__(
        self,
        backend: QuoteBackend,
        generator: Callable[[str], Quote | None] = generate_quote,
        today: Callable[[], date] = date.today,
        rng: random.Random | None = None,
    ):
        self.backend = backend
        self.generator = generator
        self.today = today
        self.rng = rng or random.Random()

    def select(self) -> Quote | None:
        """
        Today's quote, or None when the collection is empty and generation fails.

        Side Effects:
            - Caches the first pick of the day in the backend
            - May call the generator (network) when no quotes exist
        """
        day = self.today()

        cached = self.backend.get_daily(day)
        if cached is not None:
            counter("daily_quote.cache_hit")
            # Prefer the stored record so the like counter is current
            return self.backend.get_quote(cached.id) or cached

        size = self.backend.count_quotes()
        if size:
            quote = self.backend.quote_at(daily_index(day, size))
            source = "collection"
        else:
            category = self.rng.choice(QUOTE_CATEGORIES)
            logger.info("No quotes stored, generating a %s quote for %s", category, day)
            quote = self.generator(category)
            source = "generated"

        if quote is None:
            counter("daily_quote.unavailable")
            logger.warning("No daily quote available for %s", day)
            return None

        self.backend.set_daily(day, quote)
        counter(f"daily_quote.selected.{source}")
        log_event("daily_quote.selected", day=day.isoformat(), quote_id=quote.id, source=source)
        return quote
