"""
Error message sanitization utility.

Keeps internals (file paths, SQL errors, module names, tokens) out of
responses. Short plain client-error messages ("User already exists",
"Quote not found") pass through; everything else is replaced by a generic
message for the status code.
"""

from __future__ import annotations

import re

from quotely.config import API_SERVER_ERROR_MESSAGE
from quotely.observability.logging import get_logger

logger = get_logger(__name__)

# Patterns that might leak sensitive information
SENSITIVE_PATTERNS = [
    # File paths
    r"/[^\s]+\.py",
    r"[A-Za-z]:\\[^\s]+",
    # Stack trace indicators
    r"Traceback \(most recent call last\)",
    r"File \".*\"",
    r"line \d+",
    # Database errors
    r"sqlite3?\.",
    r"UNIQUE constraint",
    r"CHECK constraint",
    r"no such table",
    r"no such column",
    # Secrets: long opaque strings, bearer tokens, password hashes
    r"[A-Za-z0-9_-]{20,}",
    r"Bearer [A-Za-z0-9._=-]+",
    r"pbkdf2_sha256\$",
    # Internal module names
    r"quotely\.[a-z_.]+",
]

GENERIC_MESSAGES = {
    400: "Invalid request. Please check your input and try again.",
    401: "Authentication required.",
    403: "Access denied.",
    404: "Resource not found.",
    422: "Invalid data format.",
    429: "Too many requests. Please try again later.",
    500: API_SERVER_ERROR_MESSAGE,
    503: "Service temporarily unavailable.",
}

MAX_PASSTHROUGH_LENGTH = 100


def sanitize_error_message(
    message: str,
    status_code: int = 500,
    allow_client_messages: bool = True,
) -> str:
    """
    Sanitize an error message to prevent information leakage.

    Args:
        message: The original error message
        status_code: HTTP status code (used to select generic fallback)
        allow_client_messages: Whether short 4xx messages may pass through

    Returns:
        Sanitized error message safe for client consumption
    """
    if not message:
        return GENERIC_MESSAGES.get(status_code, "An error occurred.")

    for pattern in SENSITIVE_PATTERNS:
        if re.search(pattern, message, re.IGNORECASE):
            logger.warning("Sanitized sensitive error pattern: %s", pattern)
            return GENERIC_MESSAGES.get(status_code, "An error occurred.")

    if (
        400 <= status_code < 500
        and allow_client_messages
        and len(message) < MAX_PASSTHROUGH_LENGTH
        and not any(c in message for c in ["{", "}", "[", "]", "\n"])
    ):
        return message

    return GENERIC_MESSAGES.get(status_code, "An error occurred.")
