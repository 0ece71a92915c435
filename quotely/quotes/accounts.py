"""
Account service: signup, login, mock social login and profile updates.

Passwords are hashed before they reach any backend. Successful sign-ins
return an AuthResult carrying a bearer token for the user id.
"""

from __future__ import annotations

import uuid

from quotely.config import PASSWORD_HASH_ITERATIONS
from quotely.infrastructure.security import (
    TokenIssuer,
    get_token_issuer,
    hash_password,
    unusable_password_hash,
    verify_password,
)
from quotely.observability.logging import get_logger
from quotely.observability.telemetry import counter, log_event
from quotely.quotes.backends.base import QuoteBackend
from quotely.quotes.catalog import avatar_image_url
from quotely.quotes.errors import InvalidCredentialsError, NotFoundError, UserExistsError
from quotely.quotes.models import AuthResult, ProfileUpdate, User, UserRecord
from quotely.utils.validators import (
    validate_avatar_url,
    validate_email,
    validate_password,
    validate_provider,
    validate_username,
)

logger = get_logger(__name__)


class AccountService:
    def __init__(
        self,
        backend: QuoteBackend,
        token_issuer: TokenIssuer | None = None,
        password_iterations: int = PASSWORD_HASH_ITERATIONS,
    ):
        self.backend = backend
        self._token_issuer = token_issuer
        self.password_iterations = password_iterations

    @property
    def token_issuer(self) -> TokenIssuer:
        return self._token_issuer or get_token_issuer()

    def _session(self, user: UserRecord) -> AuthResult:
        return AuthResult(token=self.token_issuer.issue(user.id), user=user.public())

    def signup(self, username: str, email: str, password: str) -> AuthResult:
        """
        Create an account and sign it in.

        Raises:
            ValidationError: malformed username, email or password
            UserExistsError: username or email already taken
        """
        username = validate_username(username)
        email = validate_email(email)
        password = validate_password(password)

        if self.backend.find_user_by_username(username) or self.backend.find_user_by_email(email):
            counter("auth.signup.conflict")
            raise UserExistsError()

        user = UserRecord(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=hash_password(password, self.password_iterations),
            avatar_url=avatar_image_url(username),
        )
        self.backend.add_user(user)

        counter("auth.signup")
        log_event("auth.signup", user_id=user.id)
        return self._session(user)

    def login(self, username: str, password: str) -> AuthResult:
        """
        Raises:
            InvalidCredentialsError: unknown username or wrong password
        """
        user = self.backend.find_user_by_username((username or "").strip())
        if user is None or not verify_password(password or "", user.password_hash):
            counter("auth.login.failed")
            raise InvalidCredentialsError()

        counter("auth.login")
        log_event("auth.login", user_id=user.id)
        return self._session(user)

    def social_login(self, provider: str) -> AuthResult:
        """
        Mock provider sign-in: one account per provider, created on first use.

        The account gets email user@<provider>.com, username <Provider>User and
        a password hash nothing can match, so it can only sign in this way.
        """
        provider = validate_provider(provider)
        email = f"user@{provider}.com"

        user = self.backend.find_user_by_email(email)
        if user is None:
            user = UserRecord(
                id=str(uuid.uuid4()),
                username=f"{provider.capitalize()}User",
                email=email,
                password_hash=unusable_password_hash(),
                avatar_url=avatar_image_url(provider),
            )
            self.backend.add_user(user)
            counter("auth.social_signup")
            logger.info("Created %s social account %s", provider, user.id)

        counter("auth.social_login")
        log_event("auth.social_login", user_id=user.id, provider=provider)
        return self._session(user)

    def get_user(self, user_id: str) -> User:
        user = self.backend.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user.public()

    def update_profile(self, user_id: str, update: ProfileUpdate) -> User:
        """
        Change username, email or avatar. Fields left as None are kept.

        Raises:
            NotFoundError: unknown user
            ValidationError: malformed new value
            UserExistsError: new username or email belongs to someone else
        """
        user = self.backend.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")

        changes: dict[str, str] = {}
        if update.username is not None:
            changes["username"] = validate_username(update.username)
        if update.email is not None:
            changes["email"] = validate_email(update.email)
        if update.avatar_url is not None:
            changes["avatar_url"] = validate_avatar_url(update.avatar_url)

        if not changes:
            return user.public()

        updated = self.backend.update_user(user_id, changes)
        if updated is None:
            raise NotFoundError("User not found")

        log_event("auth.profile_updated", user_id=user.id, fields=sorted(changes))
        return updated.public()
