"""Tests for quote/proverb filters and pagination"""

from __future__ import annotations

import pytest

from quotely.quotes.catalog import seed_proverbs, seed_quotes
from quotely.quotes.errors import InvalidInputError
from quotely.quotes.filters import (
    ProverbQuery,
    QuoteQuery,
    filter_proverbs,
    filter_quotes,
    is_active,
    page_window,
    paginate,
)


def _ids(items):
    return sorted(item.id for item in items)


class TestQuoteQuery:
    def test_empty_query_matches_everything(self):
        assert len(filter_quotes(seed_quotes(), QuoteQuery())) == 10

    def test_all_sentinel_disables_filters(self):
        query = QuoteQuery(category="All", author="All", theme="All")
        assert len(filter_quotes(seed_quotes(), query)) == 10

    def test_category_is_exact(self):
        assert _ids(filter_quotes(seed_quotes(), QuoteQuery(category="Life"))) == ["q10", "q5", "q8"]
        assert filter_quotes(seed_quotes(), QuoteQuery(category="life")) == []

    def test_author_is_exact(self):
        assert _ids(filter_quotes(seed_quotes(), QuoteQuery(author="Oscar Wilde"))) == ["q10", "q9"]
        assert filter_quotes(seed_quotes(), QuoteQuery(author="Oscar")) == []

    def test_theme_is_case_insensitive_substring_of_category(self):
        assert _ids(filter_quotes(seed_quotes(), QuoteQuery(theme="life"))) == ["q10", "q5", "q8"]
        assert _ids(filter_quotes(seed_quotes(), QuoteQuery(theme="MOTIV"))) == ["q1", "q7"]

    def test_search_matches_text_or_author(self):
        assert _ids(filter_quotes(seed_quotes(), QuoteQuery(search="future"))) == ["q3", "q7"]
        assert _ids(filter_quotes(seed_quotes(), QuoteQuery(search="WILDE"))) == ["q10", "q9"]

    def test_search_is_literal(self):
        assert _ids(filter_quotes(seed_quotes(), QuoteQuery(search="10%"))) == ["q8"]
        assert filter_quotes(seed_quotes(), QuoteQuery(search=".*")) == []

    def test_filters_combine(self):
        query = QuoteQuery(category="Life", search="wilde")
        assert _ids(filter_quotes(seed_quotes(), query)) == ["q10"]


class TestProverbQuery:
    def test_theme_is_exact(self):
        assert _ids(filter_proverbs(seed_proverbs(), ProverbQuery(theme="Wisdom"))) == [
            "p12",
            "p6",
            "p7",
            "p8",
        ]

    def test_search_matches_origin(self):
        assert _ids(filter_proverbs(seed_proverbs(), ProverbQuery(search="chinese"))) == ["p10"]

    def test_search_matches_text(self):
        assert _ids(filter_proverbs(seed_proverbs(), ProverbQuery(search="rome"))) == ["p2"]

    def test_all_theme(self):
        assert len(filter_proverbs(seed_proverbs(), ProverbQuery(theme="All"))) == 12


def test_is_active():
    assert is_active("Life")
    assert not is_active("All")
    assert not is_active("")
    assert not is_active(None)


def test_page_window():
    assert page_window(1, 10) == (0, 10)
    assert page_window(3, 4) == (8, 4)


@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (1, 101), (-1, 5)])
def test_page_window_rejects_out_of_range(page, limit):
    with pytest.raises(InvalidInputError):
        page_window(page, limit)


def test_paginate_past_end_is_empty():
    items = list(range(10))

    assert paginate(items, 9, 3) == [9]
    assert paginate(items, 12, 3) == []
