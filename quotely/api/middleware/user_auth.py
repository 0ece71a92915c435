"""
User authentication dependencies for the Quotely API.

Verifies the bearer tokens issued at signup/login and extracts the user id.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from cachetools import TTLCache
from fastapi import HTTPException, Request, status

from quotely.infrastructure.security import InvalidTokenError, get_token_issuer
from quotely.observability.logging import get_logger
from quotely.observability.telemetry import counter

logger = get_logger(__name__)

_CACHE_MAX_SIZE = 1000
_CACHE_TTL_SECONDS = 600


@dataclass
class AuthenticatedUser:
    """The user a request's bearer token belongs to."""

    id: str

    def __str__(self) -> str:
        return f"User({self.id})"


@dataclass
class _CachedToken:
    user: AuthenticatedUser
    expires_at: float


# Verified tokens, so repeat requests skip the Fernet decrypt. Entries are
# only served until the token's own expiry.
_token_cache: TTLCache[str, _CachedToken] = TTLCache(
    maxsize=_CACHE_MAX_SIZE, ttl=_CACHE_TTL_SECONDS
)


def verify_token(token: str) -> AuthenticatedUser:
    """
    Verify a Quotely bearer token and return its user.

    Raises:
        HTTPException: 401 if the token is malformed, tampered with or expired
    """
    cached = _token_cache.get(token)
    if cached is not None:
        if time.time() < cached.expires_at:
            return cached.user
        _token_cache.pop(token, None)

    issuer = get_token_issuer()
    try:
        user_id = issuer.verify(token)
        expires_at = issuer.expires_at(token)
    except InvalidTokenError:
        counter("auth.token_rejected")
        logger.warning("Rejected invalid or expired bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None

    user = AuthenticatedUser(id=user_id)
    _token_cache[token] = _CachedToken(user=user, expires_at=expires_at)
    logger.debug("Authenticated %s (cache size: %d)", user, len(_token_cache))
    return user


def _extract_bearer_token(authorization: str | None) -> str:
    """Extract token from Authorization header."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return parts[1]


async def get_current_user(request: Request) -> AuthenticatedUser:
    """
    FastAPI dependency to get the current authenticated user.

    Usage:
        @router.post("/{quote_id}/like")
        async def like(quote_id: str, user: AuthenticatedUser = Depends(get_current_user)):
            ...
    """
    token = _extract_bearer_token(request.headers.get("Authorization"))
    return verify_token(token)


async def get_optional_user(request: Request) -> AuthenticatedUser | None:
    """
    FastAPI dependency for optional authentication.

    Returns None when the header is missing or the token does not verify;
    used by read endpoints that add per-user flags when they can.
    """
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None

    try:
        return verify_token(_extract_bearer_token(authorization))
    except HTTPException:
        return None


def clear_token_cache() -> None:
    """Clear the token cache. Useful for testing."""
    _token_cache.clear()
