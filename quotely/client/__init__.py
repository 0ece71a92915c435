"""Quotely clients: in-process (memory or key-value file) and REST over httpx."""

from quotely.client.base import QuotelyClient
from quotely.client.http import HttpClient, QuotelyAPIError
from quotely.client.local import LocalClient
from quotely.client.session import SessionContext

__all__ = ["HttpClient", "LocalClient", "QuotelyAPIError", "QuotelyClient", "SessionContext"]
