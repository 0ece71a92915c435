"""
Input validation utilities.

Normalizes and checks user-supplied account and quote fields before they
reach a backend. Failures raise ValidationError, which the API reports as a
400 with the message below.
"""

from __future__ import annotations

import re

from quotely.quotes.errors import InvalidInputError

# Letters, digits, underscore, dot, hyphen
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 30

# Deliberately loose: one @, no whitespace, a dot in the domain
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_EMAIL_LENGTH = 254

MAX_PASSWORD_LENGTH = 256

PROVIDER_PATTERN = re.compile(r"^[a-z0-9-]+$")
MAX_PROVIDER_LENGTH = 30

MAX_QUOTE_TEXT_LENGTH = 1000
MAX_AUTHOR_LENGTH = 100
MAX_URL_LENGTH = 2048


class ValidationError(InvalidInputError):
    """Raised when input validation fails."""

    pass


def validate_username(username: str | None) -> str:
    username = (username or "").strip()

    if not username:
        raise ValidationError("Username is required")

    if len(username) < MIN_USERNAME_LENGTH or len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(
            f"Username must be {MIN_USERNAME_LENGTH}-{MAX_USERNAME_LENGTH} characters"
        )

    if not USERNAME_PATTERN.match(username):
        raise ValidationError(
            "Username may only contain letters, numbers, dots, hyphens and underscores"
        )

    return username


def validate_email(email: str | None) -> str:
    """
    Validate an email address.

    Returns:
        The address, stripped and lowercased

    Raises:
        ValidationError: If missing, too long or malformed
    """
    email = (email or "").strip().lower()

    if not email:
        raise ValidationError("Email is required")

    if len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(f"Email exceeds maximum length of {MAX_EMAIL_LENGTH}")

    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")

    return email


def validate_password(password: str | None) -> str:
    # Not stripped: whitespace is part of the secret
    if not password:
        raise ValidationError("Password is required")

    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationError(f"Password exceeds maximum length of {MAX_PASSWORD_LENGTH}")

    return password


def validate_provider(provider: str | None) -> str:
    """
    Validate a social-login provider name (e.g. "google", "github").

    Returns:
        The lowercased provider name
    """
    provider = (provider or "").strip().lower()

    if not provider:
        raise ValidationError("Provider is required")

    if len(provider) > MAX_PROVIDER_LENGTH or not PROVIDER_PATTERN.match(provider):
        raise ValidationError("Invalid provider")

    return provider


def validate_text_field(value: str | None, field: str, max_length: int) -> str:
    value = (value or "").strip()

    if not value:
        raise ValidationError(f"{field} is required")

    if len(value) > max_length:
        raise ValidationError(f"{field} exceeds maximum length of {max_length}")

    return value


def validate_quote_text(text: str | None) -> str:
    return validate_text_field(text, "Quote text", MAX_QUOTE_TEXT_LENGTH)


def validate_author(author: str | None) -> str:
    return validate_text_field(author, "Author", MAX_AUTHOR_LENGTH)


def validate_category(category: str | None, allowed: list[str]) -> str:
    category = (category or "").strip()

    if category not in allowed:
        raise ValidationError(f"Unknown category: {category or '(empty)'}")

    return category


def validate_avatar_url(url: str | None) -> str:
    """Empty string clears the avatar; anything else must be an http(s) URL."""
    url = (url or "").strip()

    if not url:
        return ""

    if len(url) > MAX_URL_LENGTH:
        raise ValidationError("Avatar URL is too long")

    if not url.startswith(("http://", "https://")) or any(c.isspace() for c in url):
        raise ValidationError("Avatar URL must be an http(s) URL")

    return url
