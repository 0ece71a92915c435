"""Storage backends and the factory that picks one from QUOTELY_BACKEND."""

from __future__ import annotations

from pathlib import Path

from quotely.config import QUOTELY_BACKEND, QUOTELY_KV_PATH
from quotely.quotes.backends.base import CollectionBackend, QuoteBackend
from quotely.quotes.backends.keyvalue import KeyValueBackend
from quotely.quotes.backends.memory import MemoryBackend
from quotely.quotes.backends.sqlite import SqliteBackend

__all__ = [
    "CollectionBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "QuoteBackend",
    "SqliteBackend",
    "create_backend",
]


def create_backend(kind: str | None = None, kv_path: str | Path | None = None) -> QuoteBackend:
    """
    Build a backend by name.

    Args:
        kind: "sqlite", "memory" or "keyvalue" (default: QUOTELY_BACKEND)
        kv_path: file for the keyvalue backend (default: QUOTELY_KV_PATH)

    Raises:
        ValueError: unknown backend name
    """
    kind = (kind or QUOTELY_BACKEND).lower()
    if kind == "sqlite":
        return SqliteBackend()
    if kind == "memory":
        return MemoryBackend()
    if kind == "keyvalue":
        return KeyValueBackend(kv_path or QUOTELY_KV_PATH)
    raise ValueError(f"Unknown backend: {kind!r} (expected sqlite, memory or keyvalue)")
