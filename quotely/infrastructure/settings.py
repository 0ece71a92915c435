"""Environment-driven settings for Quotely.

Values are read once at import. Tests that need different values set the
environment before importing, or pass explicit arguments to the functions that
accept overrides (database path, secret key, backend).
"""

from __future__ import annotations

import os

# --- Environment ---
QUOTELY_ENV: str = os.getenv("QUOTELY_ENV", "development")
IS_PRODUCTION: bool = QUOTELY_ENV == "production"

# --- Storage ---
# sqlite | memory | keyvalue
QUOTELY_BACKEND: str = os.getenv("QUOTELY_BACKEND", "sqlite").lower()
QUOTELY_KV_PATH: str = os.getenv("QUOTELY_KV_PATH", "quotely_store.json")
QUOTELY_SEED_ON_STARTUP: bool = os.getenv("QUOTELY_SEED_ON_STARTUP", "true").lower() in (
    "true",
    "1",
    "yes",
)

# --- Auth ---
# Fernet key (urlsafe base64, 32 bytes). Generated per process in development.
QUOTELY_SECRET_KEY: str | None = os.getenv("QUOTELY_SECRET_KEY") or None
TOKEN_TTL_DAYS: int = int(os.getenv("QUOTELY_TOKEN_TTL_DAYS", "30"))
PASSWORD_HASH_ITERATIONS: int = int(os.getenv("QUOTELY_PASSWORD_ITERATIONS", "260000"))

# --- Gemini ---
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_LOCATION: str = os.getenv("GEMINI_LOCATION", "us-central1")
GOOGLE_CLOUD_PROJECT: str | None = os.getenv("GOOGLE_CLOUD_PROJECT") or None

# --- HTTP ---
CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv("QUOTELY_CORS_ORIGINS", "").split(",")
    if origin.strip()
]
