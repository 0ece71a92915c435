"""
Password hashing and bearer-token issuance.

- Passwords: PBKDF2-HMAC-SHA256 with a random per-user salt, stored as
  ``pbkdf2_sha256$<iterations>$<salt>$<hash>`` so the iteration count can be
  raised later without invalidating existing hashes.
- Tokens: Fernet tokens (AES + HMAC, timestamped) wrapping the user id.
  Expiry is enforced on decrypt via the Fernet TTL.
"""

from __future__ import annotations

import base64
import hmac
import json
import os
import secrets
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from quotely.config import IS_PRODUCTION, PASSWORD_HASH_ITERATIONS, TOKEN_TTL_DAYS
from quotely.observability.logging import get_logger

logger = get_logger(__name__)

_HASH_SCHEME = "pbkdf2_sha256"


class InvalidTokenError(Exception):
    """Raised when a bearer token is malformed, tampered with, or expired."""


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def hash_password(password: str, iterations: int = PASSWORD_HASH_ITERATIONS) -> str:
    """Hash a password with a fresh random salt."""
    salt = secrets.token_bytes(16)
    derived = _derive(password, salt, iterations)
    return "$".join(
        [
            _HASH_SCHEME,
            str(iterations),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(derived).decode("ascii"),
        ]
    )


def verify_password(password: str, stored_hash: str) -> bool:
    """
    Check a password against a stored hash.

    Returns False (never raises) for malformed or foreign hash strings.
    """
    try:
        scheme, iterations, salt_b64, hash_b64 = stored_hash.split("$")
        if scheme != _HASH_SCHEME:
            return False
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(hash_b64)
        computed = _derive(password, salt, int(iterations))
    except (ValueError, TypeError):
        return False
    return hmac.compare_digest(expected, computed)


def unusable_password_hash() -> str:
    """A hash no password will ever match (accounts created by social login)."""
    return f"!{secrets.token_urlsafe(32)}"


class TokenIssuer:
    """Issues and verifies bearer tokens for user ids."""

    def __init__(self, key: str | bytes, ttl_days: int = TOKEN_TTL_DAYS):
        if isinstance(key, str):
            key = key.encode("ascii")
        try:
            self._fernet = Fernet(key)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid token secret key: {e}") from e
        self.ttl_seconds = ttl_days * 24 * 60 * 60

    def issue(self, user_id: str) -> str:
        payload = json.dumps({"sub": user_id}).encode("utf-8")
        return self._fernet.encrypt(payload).decode("ascii")

    def verify(self, token: str) -> str:
        """
        Return the user id inside a token.

        Raises:
            InvalidTokenError: bad signature, bad payload, or older than the TTL
        """
        try:
            payload = self._fernet.decrypt(token.encode("ascii"), ttl=self.ttl_seconds)
            user_id = json.loads(payload)["sub"]
        except (InvalidToken, UnicodeEncodeError, ValueError, KeyError, TypeError) as e:
            raise InvalidTokenError("Invalid or expired token") from e

        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Invalid or expired token")
        return user_id

    def expires_at(self, token: str) -> float:
        """
        Unix time at which a token stops verifying.

        Raises:
            InvalidTokenError: bad signature or malformed token
        """
        try:
            issued_at = self._fernet.extract_timestamp(token.encode("ascii"))
        except (InvalidToken, UnicodeEncodeError) as e:
            raise InvalidTokenError("Invalid or expired token") from e
        return issued_at + self.ttl_seconds


@lru_cache(maxsize=1)
def get_token_issuer() -> TokenIssuer:
    """
    Shared TokenIssuer built from QUOTELY_SECRET_KEY.

    Development without a key gets a per-process key (tokens die on restart);
    production refuses to run without one.

    Raises:
        RuntimeError: production without QUOTELY_SECRET_KEY
    """
    key = os.getenv("QUOTELY_SECRET_KEY")
    if key:
        return TokenIssuer(key)

    if IS_PRODUCTION:
        raise RuntimeError(
            "Security misconfiguration: QUOTELY_SECRET_KEY not set in production. "
            "Generate with: python -c 'from cryptography.fernet import Fernet; "
            "print(Fernet.generate_key().decode())'"
        )

    logger.warning(
        "QUOTELY_SECRET_KEY not set; using an ephemeral key. "
        "Issued tokens will not survive a restart (development only)."
    )
    return TokenIssuer(Fernet.generate_key())


def clear_token_issuer() -> None:
    """Forget the cached TokenIssuer (tests, key rotation)."""
    get_token_issuer.cache_clear()
