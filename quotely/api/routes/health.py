"""Health check and debug endpoints for Quotely API.

- /health - Service health including LLM credential presence
- /health/db - Database connection pool health (SQLite backend only)
- /debug/stats - Counters and collection sizes (no PII)
"""

from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from quotely.api.routes.quotes import get_quote_service
from quotely.config import APP_NAME, APP_VERSION
from quotely.observability.telemetry import get_counters, get_latency_stats

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint.

    Returns service status, version, storage backend and credential readiness
    for Gemini (does not make an API call, only checks presence).
    """
    has_api_key = bool(os.getenv("GOOGLE_API_KEY"))
    has_project = bool(os.getenv("GOOGLE_CLOUD_PROJECT"))

    return {
        "status": "healthy",
        "service": f"{APP_NAME} API",
        "version": APP_VERSION,
        "backend": get_quote_service().backend.name,
        "timestamp": datetime.now(UTC).isoformat(),
        "llm": {
            "ready": has_api_key or has_project,
            "google_api_key": has_api_key,
            "google_cloud_project": has_project,
        },
    }


@router.get("/health/db")
async def database_health() -> dict[str, Any]:
    """
    Database health check endpoint.

    Returns connection pool health metrics for monitoring.
    Reports degraded if pool usage exceeds 80%.
    """
    backend = get_quote_service().backend.name
    if backend != "sqlite":
        return {"status": "healthy", "backend": backend, "pool": None, "warning": None}

    from quotely.infrastructure.database import get_pool_stats

    stats = get_pool_stats()
    usage_percent = stats["usage_percent"]

    return {
        "status": "degraded" if usage_percent > 80 else "healthy",
        "backend": backend,
        "pool": stats,
        "warning": "Pool usage high" if usage_percent > 80 else None,
    }


@router.get("/debug/stats")
async def debug_stats() -> dict[str, Any]:
    """Aggregate statistics for debugging. Contains no PII."""
    service = get_quote_service()

    return {
        "quotes": {"total": service.count_quotes()},
        "counters": get_counters(),
        "latency": {"llm.quote_generation": get_latency_stats("llm.quote_generation")},
        "timestamp": datetime.now(UTC).isoformat(),
    }
