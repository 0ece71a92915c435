"""Quotely - share, like and collect quotes and proverbs"""

from __future__ import annotations

__version__ = "1.0.0"


# Lazy imports so lightweight modules load without FastAPI or the SDKs
def __getattr__(name: str):
    if name in ("QuoteService", "AccountService"):
        from quotely.quotes import accounts, service

        if name == "QuoteService":
            return service.QuoteService
        return accounts.AccountService

    if name == "create_backend":
        from quotely.quotes.backends import create_backend

        return create_backend

    if name == "create_app":
        from quotely.api.app import create_app

        return create_app

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "AccountService",
    "QuoteService",
    "__version__",
    "create_app",
    "create_backend",
]
