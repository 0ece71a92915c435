"""Logging setup for Quotely.

Every module gets its logger from get_logger(); the first call attaches one
stream handler to the root logger so uvicorn, the API and the clients all share
one format.
"""

from __future__ import annotations

import logging
import os
from typing import Final

_HANDLER_ATTACHED: bool = False
_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty third-party loggers that only matter at DEBUG
_NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "google", "urllib3")


def _resolve_level() -> int:
    level_name = os.getenv("QUOTELY_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _quiet_third_party(level: int) -> None:
    third_party_level = level if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; attaches the shared stream handler once."""
    global _HANDLER_ATTACHED

    level = _resolve_level()
    root = logging.getLogger()

    if not _HANDLER_ATTACHED:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
        _quiet_third_party(level)
        _HANDLER_ATTACHED = True

    root.setLevel(level)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    return logger
