"""FastAPI server for Quotely"""

from __future__ import annotations

import os
import sqlite3
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quotely.api.errors import to_http_exception
from quotely.api.routes.auth import router as auth_router
from quotely.api.routes.auth import set_account_service
from quotely.api.routes.health import router as health_router
from quotely.api.routes.proverbs import router as proverbs_router
from quotely.api.routes.quotes import router as quotes_router
from quotely.api.routes.quotes import set_quote_service
from quotely.config import (
    API_SERVER_ERROR_MESSAGE,
    APP_NAME,
    APP_TAGLINE,
    APP_VERSION,
    CORS_ORIGINS,
    IS_PRODUCTION,
    QUOTELY_SEED_ON_STARTUP,
)
from quotely.infrastructure.security import get_token_issuer
from quotely.observability.logging import get_logger
from quotely.observability.telemetry import counter, log_event
from quotely.quotes.accounts import AccountService
from quotely.quotes.backends import QuoteBackend, create_backend
from quotely.quotes.errors import QuotelyError
from quotely.quotes.service import QuoteService

logger = get_logger(__name__)

_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def _init_backend(backend: QuoteBackend | None) -> QuoteBackend:
    """Build the configured backend, failing fast if storage is unusable."""
    if backend is not None:
        return backend

    try:
        logger.info("Initializing storage backend...")
        backend = create_backend()
        if backend.name == "sqlite":
            from quotely.infrastructure.database import validate_schema

            validate_schema()
        logger.info("Storage backend ready: %s", backend.name)
        return backend
    except ValueError as e:
        logger.critical("Storage configuration invalid: %s", e)
        raise RuntimeError(f"Storage initialization failed: {e}") from e
    except sqlite3.OperationalError as e:
        logger.critical("Database schema error: %s", e)
        logger.critical("Database may be corrupted or locked by another process")
        raise RuntimeError(f"Database initialization failed: {e}") from e


def create_app(
    backend: QuoteBackend | None = None,
    quote_service: QuoteService | None = None,
    account_service: AccountService | None = None,
    seed: bool | None = None,
) -> FastAPI:
    """
    Build the Quotely API.

    Args:
        backend: storage to use (default: from QUOTELY_BACKEND)
        quote_service: prebuilt service (tests inject one with a fake generator)
        account_service: prebuilt account service
        seed: load the seed catalog into empty collections (default: QUOTELY_SEED_ON_STARTUP)

    Raises:
        RuntimeError: unusable storage, or production without QUOTELY_SECRET_KEY
    """
    load_dotenv()

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_TAGLINE)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report which fields were invalid, not the validation rules."""
        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
        counter("api.validation_errors")

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Invalid request format. Please check your request and try again.",
                "error_count": len(exc.errors()),
                "invalid_fields": [str(err["loc"][-1]) for err in exc.errors()],
            },
        )

    @app.exception_handler(QuotelyError)
    async def domain_exception_handler(request: Request, exc: QuotelyError) -> JSONResponse:
        http_exc = to_http_exception(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content={"detail": http_exc.detail},
            headers=http_exc.headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        counter("api.server_errors")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": API_SERVER_ERROR_MESSAGE},
        )

    allowed_origins = list(CORS_ORIGINS)
    if not IS_PRODUCTION:
        allowed_origins.extend(o for o in _DEV_ORIGINS if o not in allowed_origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Fail at startup rather than on the first login
    get_token_issuer()

    if quote_service is None or account_service is None:
        backend = _init_backend(backend)
    quote_service = quote_service or QuoteService(backend)
    account_service = account_service or AccountService(quote_service.backend)

    should_seed = QUOTELY_SEED_ON_STARTUP if seed is None else seed
    if should_seed:
        quote_service.seed()

    # Inject dependencies into routers
    set_quote_service(quote_service)
    set_account_service(account_service)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(quotes_router)
    app.include_router(proverbs_router)

    @app.get("/")
    def root() -> dict[str, Any]:
        return {
            "service": f"{APP_NAME} API",
            "version": APP_VERSION,
            "status": "running",
            "backend": quote_service.backend.name,
            "endpoints": {
                "auth": "/api/auth",
                "quotes": "/api/quotes",
                "daily": "/api/quotes/daily",
                "proverbs": "/api/proverbs",
                "health": "/health",
            },
        }

    log_event("api.startup", service="quotely", version=APP_VERSION, backend=quote_service.backend.name)
    return app


def main() -> None:
    """Run the API with uvicorn (console script: quotely-api)."""
    import uvicorn

    uvicorn.run(
        "quotely.api.app:create_app",
        factory=True,
        host=os.getenv("QUOTELY_HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
