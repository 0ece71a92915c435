"""Quote endpoints for Quotely API.

Reads accept an optional bearer token; with one, each quote carries the
reader's is_liked / is_favorited flags. Writes require a token.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Query

from quotely.api.errors import server_error, to_http_exception
from quotely.api.middleware.user_auth import (
    AuthenticatedUser,
    get_current_user,
    get_optional_user,
)
from quotely.api.models import CategoriesResponse, MessageResponse, SubmitQuoteRequest
from quotely.config import API_LIST_LIMIT_DEFAULT, API_LIST_LIMIT_MAX
from quotely.observability.logging import get_logger
from quotely.observability.telemetry import log_event
from quotely.quotes.catalog import PROVERB_THEMES, QUOTE_CATEGORIES
from quotely.quotes.errors import QuotelyError
from quotely.quotes.filters import QuoteQuery
from quotely.quotes.models import FavoriteResult, LikeResult, QuoteView

if TYPE_CHECKING:
    from quotely.quotes.service import QuoteService

router = APIRouter(prefix="/api/quotes", tags=["quotes"])
logger = get_logger(__name__)

# Module-level storage for the dependency injected at startup
_quote_service: QuoteService | None = None


def set_quote_service(service: QuoteService) -> None:
    """Inject the quote service dependency.

    Side Effects:
        - Sets module-level _quote_service variable
    """
    global _quote_service
    _quote_service = service


def get_quote_service() -> QuoteService:
    if _quote_service is None:
        logger.error("Quote service not initialized")
        raise server_error()
    return _quote_service


def _user_id(user: AuthenticatedUser | None) -> str | None:
    return user.id if user else None


@router.post("/seed", response_model=MessageResponse)
def seed_quotes() -> MessageResponse:
    """Load the built-in catalog when no quotes exist yet (idempotent)."""
    try:
        seeded = get_quote_service().seed()
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Seeding failed: %s", e)
        raise server_error() from None

    return MessageResponse(message="Database seeded" if seeded else "Database already has quotes")


@router.get("", response_model=list[QuoteView])
def list_quotes(
    category: str | None = Query(None, max_length=50),
    author: str | None = Query(None, max_length=200),
    theme: str | None = Query(None, max_length=50),
    search: str | None = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: int = Query(API_LIST_LIMIT_DEFAULT, ge=1, le=API_LIST_LIMIT_MAX),
    user: AuthenticatedUser | None = Depends(get_optional_user),
) -> list[QuoteView]:
    """
    One page of quotes, newest first.

    category/author match exactly, theme matches inside the category, search
    matches inside text or author (case-insensitive). "All" disables a filter.
    """
    query = QuoteQuery(category=category, author=author, theme=theme, search=search)
    try:
        return get_quote_service().list_quotes(query, page=page, limit=limit, user_id=_user_id(user))
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to list quotes: %s", e)
        raise server_error() from None


@router.post("", response_model=QuoteView, status_code=201)
def submit_quote(
    request: SubmitQuoteRequest,
    user: AuthenticatedUser = Depends(get_current_user),
) -> QuoteView:
    try:
        return get_quote_service().submit_quote(
            user.id, request.text, request.author, request.category
        )
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to submit quote for %s: %s", user.id, e)
        raise server_error() from None


@router.get("/daily", response_model=QuoteView)
def daily_quote(user: AuthenticatedUser | None = Depends(get_optional_user)) -> QuoteView:
    """Quote of the day; 404 when there are no quotes and none could be generated."""
    try:
        quote = get_quote_service().daily_quote(_user_id(user))
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to select daily quote: %s", e)
        raise server_error() from None

    if quote is None:
        raise HTTPException(status_code=404, detail="No quotes available")

    log_event("api.daily_quote.served", quote_id=quote.id)
    return quote


@router.get("/liked", response_model=list[QuoteView])
def liked_quotes(user: AuthenticatedUser = Depends(get_current_user)) -> list[QuoteView]:
    try:
        return get_quote_service().liked_quotes(user.id)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to list liked quotes for %s: %s", user.id, e)
        raise server_error() from None


@router.get("/favorited", response_model=list[QuoteView])
def favorited_quotes(user: AuthenticatedUser = Depends(get_current_user)) -> list[QuoteView]:
    try:
        return get_quote_service().favorited_quotes(user.id)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to list favorited quotes for %s: %s", user.id, e)
        raise server_error() from None


@router.get("/categories", response_model=CategoriesResponse)
async def categories() -> CategoriesResponse:
    return CategoriesResponse(quote_categories=QUOTE_CATEGORIES, proverb_themes=PROVERB_THEMES)


@router.get("/{quote_id}", response_model=QuoteView)
def get_quote(
    quote_id: str,
    user: AuthenticatedUser | None = Depends(get_optional_user),
) -> QuoteView:
    try:
        return get_quote_service().get_quote(quote_id, _user_id(user))
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to load quote %s: %s", quote_id, e)
        raise server_error() from None


@router.post("/{quote_id}/like", response_model=LikeResult)
def toggle_like(
    quote_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> LikeResult:
    """Like if not yet liked, unlike otherwise. Returns the new counter and state."""
    try:
        return get_quote_service().toggle_like(user.id, quote_id)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to toggle like on %s: %s", quote_id, e)
        raise server_error() from None


@router.post("/{quote_id}/favorite", response_model=FavoriteResult)
def toggle_favorite(
    quote_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> FavoriteResult:
    try:
        return get_quote_service().toggle_favorite(user.id, quote_id)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to toggle favorite on %s: %s", quote_id, e)
        raise server_error() from None
