"""
LocalClient and HttpClient against the same services

HttpClient runs over FastAPI's TestClient (an httpx.Client), so requests go
through the real routes without a server process.
"""

from __future__ import annotations

from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient

from quotely.api.app import create_app
from quotely.client import HttpClient, LocalClient, QuotelyAPIError
from quotely.infrastructure.kvstore import KeyValueStore
from quotely.quotes.accounts import AccountService
from quotely.quotes.backends import MemoryBackend
from quotely.quotes.daily import DailyQuoteSelector
from quotely.quotes.errors import InvalidCredentialsError, NotAuthenticatedError, NotFoundError
from quotely.quotes.service import QuoteService


@pytest.fixture
def api(generator):
    backend = MemoryBackend()
    selector = DailyQuoteSelector(backend, generator=generator, today=lambda: date(2024, 3, 1))
    app = create_app(
        quote_service=QuoteService(backend, daily_selector=selector),
        account_service=AccountService(backend, password_iterations=1000),
        seed=True,
    )
    return TestClient(app)


class TestHttpClient:
    def test_browse_anonymously(self, api):
        client = HttpClient(http=api)

        quotes = client.fetch_quotes(category="Life")

        assert [q.id for q in quotes] == ["q5", "q8", "q10"]
        assert client.fetch_quote("q3").author == "Eleanor Roosevelt"
        assert client.fetch_daily_quote().id == "q9"
        assert [p.id for p in client.fetch_proverbs(theme="Perseverance")] == ["p5", "p10"]

    def test_signup_like_favorite(self, api):
        client = HttpClient(http=api)
        client.signup("reader", "reader@example.com", "s3cret-pass")

        result = client.toggle_like("q1")
        client.toggle_favorite("q2")

        assert result.likes == 121
        assert client.current_user.liked_quotes == ["q1"]
        assert client.current_user.favorited_quotes == ["q2"]
        assert [q.id for q in client.fetch_liked_quotes()] == ["q1"]
        assert client.fetch_quote("q1").is_liked is True

    def test_submit_and_update_profile(self, api):
        client = HttpClient(http=api)
        client.social_login("github")

        created = client.submit_quote("Ship it.", "Octocat", "Motivation")
        updated = client.update_profile(username="octo")

        assert client.fetch_quotes()[0].id == created.id
        assert updated.username == "octo"
        assert client.current_user.username == "octo"

    def test_signed_out_actions_raise(self, api):
        client = HttpClient(http=api)

        with pytest.raises(NotAuthenticatedError):
            client.toggle_like("q1")

    def test_logout(self, api):
        client = HttpClient(http=api)
        client.signup("reader", "reader@example.com", "pw")

        client.logout()

        assert client.current_user is None
        with pytest.raises(NotAuthenticatedError):
            client.fetch_favorited_quotes()

    def test_api_errors_carry_status_and_detail(self, api):
        client = HttpClient(http=api)

        with pytest.raises(QuotelyAPIError) as exc_info:
            client.login("nobody", "pw")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid credentials"

    def test_unknown_quote(self, api):
        with pytest.raises(QuotelyAPIError) as exc_info:
            HttpClient(http=api).fetch_quote("nope")

        assert exc_info.value.status_code == 404

    def test_seed_message(self, api):
        assert HttpClient(http=api).seed() == "Database already has quotes"

    def test_session_survives_restart(self, api, tmp_path):
        store = KeyValueStore(tmp_path / "session.json")
        HttpClient(http=api, session_store=store).signup("reader", "reader@example.com", "pw")

        restored = HttpClient(http=api, session_store=store)

        assert restored.is_authenticated
        assert restored.fetch_me().username == "reader"

    def test_unreachable_server(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.Client(base_url="http://quotely.invalid", transport=httpx.MockTransport(refuse))

        with pytest.raises(QuotelyAPIError) as exc_info:
            HttpClient(http=http).fetch_quotes()

        assert exc_info.value.status_code == 503


class TestLocalClient:
    def test_in_memory_flow(self):
        client = LocalClient.in_memory()

        assert len(client.fetch_quotes()) == 10
        assert client.fetch_quote("q1").is_liked is False

        client.signup("reader", "reader@example.com", "pw")
        client.toggle_like("q1")

        assert client.current_user.liked_quotes == ["q1"]
        assert client.fetch_quote("q1").is_liked is True
        assert client.fetch_quote("q1").likes == 121

    def test_signed_out_actions_raise(self):
        client = LocalClient.in_memory()

        with pytest.raises(NotAuthenticatedError):
            client.submit_quote("Text", "Me", "Life")

    def test_errors_propagate(self):
        client = LocalClient.in_memory()
        client.signup("reader", "reader@example.com", "pw")

        with pytest.raises(InvalidCredentialsError):
            client.login("reader", "wrong")
        with pytest.raises(NotFoundError):
            client.toggle_favorite("nope")

    def test_unseeded_client_is_empty(self):
        client = LocalClient.in_memory(seed=False)

        assert client.fetch_quotes() == []
        assert client.fetch_proverbs() == []

    def test_persistent_state_and_session(self, tmp_path):
        path = tmp_path / "quotely_store.json"
        first = LocalClient.persistent(path)
        first.signup("reader", "reader@example.com", "pw")
        first.toggle_like("q4")
        first.toggle_favorite("q4")
        created = first.submit_quote("Saved.", "Me", "Happiness")

        second = LocalClient.persistent(path)

        assert second.is_authenticated
        assert second.current_user.username == "reader"
        assert second.quotes.count_quotes() == 11
        assert second.fetch_quotes()[0].id == created.id
        assert second.fetch_quote("q4").is_liked is True
        assert second.fetch_quote("q4").likes == 81
        assert [q.id for q in second.fetch_favorited_quotes()] == ["q4"]

    def test_persistent_logout(self, tmp_path):
        path = tmp_path / "quotely_store.json"
        first = LocalClient.persistent(path)
        first.social_login("google")
        first.logout()

        assert LocalClient.persistent(path).is_authenticated is False
