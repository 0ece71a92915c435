"""Tests for input validators"""

from __future__ import annotations

import pytest

from quotely.quotes.catalog import QUOTE_CATEGORIES
from quotely.quotes.errors import InvalidInputError
from quotely.utils.validators import (
    ValidationError,
    validate_author,
    validate_avatar_url,
    validate_category,
    validate_email,
    validate_password,
    validate_provider,
    validate_quote_text,
    validate_username,
)


def test_validation_error_is_client_error():
    assert issubclass(ValidationError, InvalidInputError)
    assert ValidationError("x").status_code == 400


class TestUsername:
    def test_valid_username_is_stripped(self):
        assert validate_username("  ada.lovelace_1  ") == "ada.lovelace_1"

    @pytest.mark.parametrize("username", ["", "ab", "a" * 31, "has space", "semi;colon", None])
    def test_invalid_usernames(self, username):
        with pytest.raises(ValidationError):
            validate_username(username)


class TestEmail:
    def test_email_is_normalized(self):
        assert validate_email("  Ada@Example.COM ") == "ada@example.com"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "two@@example.com", "a@b", "a b@c.com"])
    def test_invalid_emails(self, email):
        with pytest.raises(ValidationError):
            validate_email(email)


class TestPassword:
    def test_whitespace_is_kept(self):
        assert validate_password(" pw ") == " pw "

    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="Password is required"):
            validate_password("")

    def test_too_long_rejected(self):
        with pytest.raises(ValidationError):
            validate_password("x" * 257)


class TestProvider:
    def test_provider_is_lowercased(self):
        assert validate_provider("Google") == "google"

    @pytest.mark.parametrize("provider", ["", "goo gle", "../etc", "x" * 31])
    def test_invalid_providers(self, provider):
        with pytest.raises(ValidationError):
            validate_provider(provider)


class TestQuoteFields:
    def test_text_and_author_are_stripped(self):
        assert validate_quote_text("  Stay hungry.  ") == "Stay hungry."
        assert validate_author(" Anon ") == "Anon"

    def test_empty_text_rejected(self):
        with pytest.raises(ValidationError, match="Quote text is required"):
            validate_quote_text("   ")

    def test_long_author_rejected(self):
        with pytest.raises(ValidationError, match="Author exceeds maximum length"):
            validate_author("x" * 101)

    def test_known_category(self):
        assert validate_category("Humor", QUOTE_CATEGORIES) == "Humor"

    def test_unknown_category(self):
        with pytest.raises(ValidationError, match="Unknown category: Cooking"):
            validate_category("Cooking", QUOTE_CATEGORIES)

    def test_all_is_not_a_category(self):
        with pytest.raises(ValidationError):
            validate_category("All", QUOTE_CATEGORIES)


class TestAvatarUrl:
    def test_empty_clears_avatar(self):
        assert validate_avatar_url("") == ""

    def test_https_url_accepted(self):
        url = "https://picsum.photos/seed/ada/150/150"
        assert validate_avatar_url(url) == url

    @pytest.mark.parametrize("url", ["javascript:alert(1)", "ftp://host/a.png", "https://a b.com"])
    def test_non_http_rejected(self, url):
        with pytest.raises(ValidationError):
            validate_avatar_url(url)
