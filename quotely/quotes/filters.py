"""
Filtering and offset/limit pagination for quotes and proverbs.

The in-memory and key-value backends filter with these functions; the SQLite
backend translates the same QuoteQuery into SQL. Both must agree:

- category / author: exact match, ignored when empty or "All"
- theme: case-insensitive substring of the category, ignored when empty or "All"
- search: case-insensitive substring of text or author
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from quotely.config import API_LIST_LIMIT_MAX
from quotely.quotes.catalog import ALL
from quotely.quotes.errors import InvalidInputError
from quotely.quotes.models import Proverb, Quote

T = TypeVar("T")

# Largest OFFSET SQLite accepts; any page starting past it is empty everywhere
MAX_OFFSET = 2**63 - 1


def is_active(value: str | None) -> bool:
    """A filter value is active unless empty or the "All" sentinel."""
    return bool(value) and value != ALL


@dataclass(frozen=True)
class QuoteQuery:
    category: str | None = None
    author: str | None = None
    theme: str | None = None
    search: str | None = None

    def matches(self, quote: Quote) -> bool:
        if is_active(self.category) and quote.category != self.category:
            return False
        if is_active(self.author) and quote.author != self.author:
            return False
        if is_active(self.theme) and self.theme.lower() not in quote.category.lower():
            return False
        if self.search:
            needle = self.search.lower()
            if needle not in quote.text.lower() and needle not in quote.author.lower():
                return False
        return True


@dataclass(frozen=True)
class ProverbQuery:
    theme: str | None = None
    search: str | None = None

    def matches(self, proverb: Proverb) -> bool:
        if is_active(self.theme) and proverb.theme != self.theme:
            return False
        if self.search:
            needle = self.search.lower()
            in_text = needle in proverb.text.lower()
            in_origin = proverb.origin is not None and needle in proverb.origin.lower()
            if not (in_text or in_origin):
                return False
        return True


def page_window(page: int, limit: int) -> tuple[int, int]:
    """
    Convert a 1-based page and page size to (offset, limit).

    The offset is capped at MAX_OFFSET, past the end of any real collection.

    Raises:
        InvalidInputError: page < 1, or limit outside 1..API_LIST_LIMIT_MAX
    """
    if page < 1:
        raise InvalidInputError("page must be at least 1")
    if limit < 1 or limit > API_LIST_LIMIT_MAX:
        raise InvalidInputError(f"limit must be between 1 and {API_LIST_LIMIT_MAX}")
    return min((page - 1) * limit, MAX_OFFSET), limit


def paginate(items: Sequence[T], offset: int, limit: int) -> list[T]:
    return list(items[offset : offset + limit])


def filter_quotes(quotes: Iterable[Quote], query: QuoteQuery) -> list[Quote]:
    return [quote for quote in quotes if query.matches(quote)]


def filter_proverbs(proverbs: Iterable[Proverb], query: ProverbQuery) -> list[Proverb]:
    return [proverb for proverb in proverbs if query.matches(proverb)]
