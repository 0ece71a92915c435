"""Domain errors raised by the quote and account services.

API routes translate these into HTTP responses; local clients let them
propagate to the caller.
"""

from __future__ import annotations


class QuotelyError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(QuotelyError):
    status_code = 404


class UserExistsError(QuotelyError):
    status_code = 400

    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class InvalidCredentialsError(QuotelyError):
    status_code = 400

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class InvalidInputError(QuotelyError):
    status_code = 400


class NotAuthenticatedError(QuotelyError):
    status_code = 401

    def __init__(self, message: str = "User not authenticated."):
        super().__init__(message)
