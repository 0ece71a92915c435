"""Translation of domain errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from quotely.config import API_SERVER_ERROR_MESSAGE
from quotely.quotes.errors import NotAuthenticatedError, QuotelyError
from quotely.utils.error_sanitizer import sanitize_error_message


def to_http_exception(error: QuotelyError) -> HTTPException:
    """HTTPException with the error's status and a sanitized message."""
    headers = None
    if isinstance(error, NotAuthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=error.status_code,
        detail=sanitize_error_message(error.message, error.status_code),
        headers=headers,
    )


def server_error() -> HTTPException:
    """The one response every unexpected failure collapses to."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=API_SERVER_ERROR_MESSAGE,
    )
