"""
Client for the Quotely REST API over httpx.

Any httpx.Client can be passed in (tests pass fastapi.testclient.TestClient);
otherwise one is created for base_url. Non-2xx responses raise QuotelyAPIError
with the status code and the server's detail message.
"""

from __future__ import annotations

from typing import Any

import httpx

from quotely.client.base import QuotelyClient
from quotely.config import API_LIST_LIMIT_DEFAULT
from quotely.infrastructure.kvstore import KeyValueStore
from quotely.observability.logging import get_logger
from quotely.quotes.errors import QuotelyError
from quotely.quotes.models import AuthResult, FavoriteResult, LikeResult, Proverb, QuoteView, User

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class QuotelyAPIError(QuotelyError):
    """Non-2xx response from the API, or the API could not be reached."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


class HttpClient(QuotelyClient):
    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        http: httpx.Client | None = None,
        session_store: KeyValueStore | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        super().__init__(session_store)
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- transport ---------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self.http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            logger.error("Request %s %s failed: %s", method, path, e)
            raise QuotelyAPIError(503, "Quotely API unreachable") from e

        if response.is_success:
            return response.json()

        try:
            detail = response.json().get("detail")
        except (ValueError, AttributeError):
            detail = None
        message = detail if isinstance(detail, str) and detail else response.reason_phrase
        logger.warning("API %s %s returned %d: %s", method, path, response.status_code, message)
        raise QuotelyAPIError(response.status_code, message)

    @staticmethod
    def _params(**params: Any) -> dict[str, Any]:
        return {key: value for key, value in params.items() if value is not None}

    # -- accounts ----------------------------------------------------------

    def signup(self, username: str, email: str, password: str) -> User:
        data = self._request(
            "POST",
            "/api/auth/signup",
            json={"username": username, "email": email, "password": password},
        )
        return self._start_session(AuthResult.model_validate(data))

    def login(self, username: str, password: str) -> User:
        data = self._request(
            "POST", "/api/auth/login", json={"username": username, "password": password}
        )
        return self._start_session(AuthResult.model_validate(data))

    def social_login(self, provider: str) -> User:
        data = self._request("POST", "/api/auth/social-login", json={"provider": provider})
        return self._start_session(AuthResult.model_validate(data))

    def fetch_me(self) -> User:
        self._require_auth()
        return self._set_user(User.model_validate(self._request("GET", "/api/auth/me")))

    def update_profile(
        self,
        username: str | None = None,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        self._require_auth()
        body = self._params(username=username, email=email, avatar_url=avatar_url)
        return self._set_user(User.model_validate(self._request("PUT", "/api/auth/me", json=body)))

    # -- quotes ------------------------------------------------------------

    def seed(self) -> str:
        return self._request("POST", "/api/quotes/seed")["message"]

    def fetch_quotes(
        self,
        category: str | None = None,
        author: str | None = None,
        theme: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = API_LIST_LIMIT_DEFAULT,
    ) -> list[QuoteView]:
        params = self._params(
            category=category, author=author, theme=theme, search=search, page=page, limit=limit
        )
        data = self._request("GET", "/api/quotes", params=params)
        return [QuoteView.model_validate(item) for item in data]

    def fetch_quote(self, quote_id: str) -> QuoteView:
        return QuoteView.model_validate(self._request("GET", f"/api/quotes/{quote_id}"))

    def fetch_daily_quote(self) -> QuoteView | None:
        try:
            return QuoteView.model_validate(self._request("GET", "/api/quotes/daily"))
        except QuotelyAPIError as e:
            if e.status_code == 404:
                return None
            raise

    def fetch_liked_quotes(self) -> list[QuoteView]:
        self._require_auth()
        return [QuoteView.model_validate(q) for q in self._request("GET", "/api/quotes/liked")]

    def fetch_favorited_quotes(self) -> list[QuoteView]:
        self._require_auth()
        return [QuoteView.model_validate(q) for q in self._request("GET", "/api/quotes/favorited")]

    def submit_quote(self, text: str, author: str, category: str) -> QuoteView:
        self._require_auth()
        data = self._request(
            "POST", "/api/quotes", json={"text": text, "author": author, "category": category}
        )
        return QuoteView.model_validate(data)

    def toggle_like(self, quote_id: str) -> LikeResult:
        self._require_auth()
        result = LikeResult.model_validate(self._request("POST", f"/api/quotes/{quote_id}/like"))
        self.fetch_me()
        return result

    def toggle_favorite(self, quote_id: str) -> FavoriteResult:
        self._require_auth()
        result = FavoriteResult.model_validate(
            self._request("POST", f"/api/quotes/{quote_id}/favorite")
        )
        self.fetch_me()
        return result

    # -- proverbs ----------------------------------------------------------

    def fetch_proverbs(self, theme: str | None = None, search: str | None = None) -> list[Proverb]:
        data = self._request("GET", "/api/proverbs", params=self._params(theme=theme, search=search))
        return [Proverb.model_validate(item) for item in data]
