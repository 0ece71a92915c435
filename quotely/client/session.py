"""
Client-side session: who is signed in and with which bearer token.

A session can be persisted to a KeyValueStore under quotely_current_user so a
restarted client picks up where it left off.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from quotely.infrastructure.kvstore import KeyValueStore
from quotely.observability.logging import get_logger
from quotely.quotes.models import AuthResult, User

logger = get_logger(__name__)

CURRENT_USER_KEY = "quotely_current_user"


@dataclass
class SessionContext:
    user: User | None = None
    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.token)

    def start(self, result: AuthResult) -> None:
        self.user = result.user
        self.token = result.token

    def clear(self) -> None:
        self.user = None
        self.token = None

    def save(self, store: KeyValueStore) -> None:
        if not self.is_authenticated:
            store.remove(CURRENT_USER_KEY)
            return
        store.set(CURRENT_USER_KEY, {"token": self.token, "user": self.user.model_dump(mode="json")})

    @classmethod
    def load(cls, store: KeyValueStore) -> SessionContext:
        """Restore a saved session; a missing or unreadable entry gives an empty one."""
        raw = store.get(CURRENT_USER_KEY)
        if not raw:
            return cls()
        try:
            return cls(user=User.model_validate(raw["user"]), token=raw["token"])
        except (KeyError, TypeError, ValidationError) as e:
            logger.warning("Discarding unreadable saved session: %s", e)
            return cls()
