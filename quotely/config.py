"""Centralized configuration for the Quotely backend.

Re-exports everything from quotely.infrastructure.settings so callers have one
import point, then adds typed constants for database, API, LLM and domain
settings. Environment variable overrides use safe defaults so the app starts
without extra env configuration.
"""

from __future__ import annotations

import os

from quotely.infrastructure.settings import *  # noqa: F401, F403

# --- App ---
APP_NAME: str = "Quotely"
APP_TAGLINE: str = "Inspire, Motivate, and Reflect with Quotely"
APP_VERSION: str = "1.0.0"

# --- Database ---
DB_POOL_SIZE: int = int(os.getenv("QUOTELY_DB_POOL_SIZE", "5"))
DB_POOL_TIMEOUT: float = float(os.getenv("QUOTELY_DB_POOL_TIMEOUT", "5.0"))
DB_CONNECT_TIMEOUT: float = float(os.getenv("QUOTELY_DB_CONNECT_TIMEOUT", "30.0"))
DB_TEMP_CONN_MAX: int = int(os.getenv("QUOTELY_DB_TEMP_CONN_MAX", "10"))
DB_RETRY_MAX: int = int(os.getenv("QUOTELY_DB_RETRY_MAX", "5"))
DB_RETRY_BASE_DELAY: float = float(os.getenv("QUOTELY_DB_RETRY_BASE_DELAY", "0.1"))
DB_RETRY_MAX_DELAY: float = float(os.getenv("QUOTELY_DB_RETRY_MAX_DELAY", "2.0"))
DB_RETRY_JITTER: float = float(os.getenv("QUOTELY_DB_RETRY_JITTER", "0.1"))

# --- API ---
API_LIST_LIMIT_DEFAULT: int = 10
API_LIST_LIMIT_MAX: int = 100
API_SERVER_ERROR_MESSAGE: str = "Server error"

# --- LLM ---
LLM_TEMPERATURE: float = 0.9
LLM_MAX_OUTPUT_TOKENS: int = 100
LLM_SYSTEM_INSTRUCTION: str = (
    "You are a poetic assistant specializing in generating concise, meaningful quotes."
)
GENERATED_QUOTE_AUTHOR: str = "Gemini AI"

# --- Images ---
QUOTE_IMAGE_URL: str = "https://picsum.photos/seed/{seed}/1600/900"
AVATAR_IMAGE_URL: str = "https://picsum.photos/seed/{seed}/150/150"
