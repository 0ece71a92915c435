"""Proverb endpoints for Quotely API.

- GET /api/proverbs - Proverbs filtered by theme and search text
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from quotely.api.errors import server_error
from quotely.api.routes.quotes import get_quote_service
from quotely.observability.logging import get_logger
from quotely.quotes.filters import ProverbQuery
from quotely.quotes.models import Proverb

router = APIRouter(prefix="/api/proverbs", tags=["proverbs"])
logger = get_logger(__name__)


@router.get("", response_model=list[Proverb])
def list_proverbs(
    theme: str | None = Query(None, max_length=50),
    search: str | None = Query(None, max_length=200),
) -> list[Proverb]:
    try:
        return get_quote_service().list_proverbs(ProverbQuery(theme=theme, search=search))
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to list proverbs: %s", e)
        raise server_error() from None
