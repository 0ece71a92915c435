"""Account endpoints for Quotely API.

- POST /api/auth/signup - Create account, returns token + user
- POST /api/auth/login - Username/password sign-in
- POST /api/auth/social-login - Mock provider sign-in
- GET  /api/auth/me - Current user
- PUT  /api/auth/me - Update username, email or avatar
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException

from quotely.api.errors import server_error, to_http_exception
from quotely.api.middleware.user_auth import AuthenticatedUser, get_current_user
from quotely.api.models import LoginRequest, ProfileUpdateRequest, SignupRequest, SocialLoginRequest
from quotely.observability.logging import get_logger
from quotely.quotes.errors import QuotelyError
from quotely.quotes.models import AuthResult, ProfileUpdate, User

if TYPE_CHECKING:
    from quotely.quotes.accounts import AccountService

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = get_logger(__name__)

# Module-level storage for the dependency injected at startup
_account_service: AccountService | None = None


def set_account_service(service: AccountService) -> None:
    """Inject the account service dependency.

    Side Effects:
        - Sets module-level _account_service variable
    """
    global _account_service
    _account_service = service


def _service() -> AccountService:
    if _account_service is None:
        logger.error("Account service not initialized")
        raise server_error()
    return _account_service


@router.post("/signup", response_model=AuthResult)
def signup(request: SignupRequest) -> AuthResult:
    try:
        return _service().signup(request.username, request.email, request.password)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Signup failed: %s", e)
        raise server_error() from None


@router.post("/login", response_model=AuthResult)
def login(request: LoginRequest) -> AuthResult:
    try:
        return _service().login(request.username, request.password)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Login failed: %s", e)
        raise server_error() from None


@router.post("/social-login", response_model=AuthResult)
def social_login(request: SocialLoginRequest) -> AuthResult:
    """Sign in as the mock account for a provider, creating it on first use."""
    try:
        return _service().social_login(request.provider)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Social login failed: %s", e)
        raise server_error() from None


@router.get("/me", response_model=User)
def get_me(user: AuthenticatedUser = Depends(get_current_user)) -> User:
    try:
        return _service().get_user(user.id)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to load user %s: %s", user.id, e)
        raise server_error() from None


@router.put("/me", response_model=User)
def update_me(
    request: ProfileUpdateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
) -> User:
    try:
        update = ProfileUpdate(**request.model_dump())
        return _service().update_profile(user.id, update)
    except QuotelyError as e:
        raise to_http_exception(e) from None
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Failed to update user %s: %s", user.id, e)
        raise server_error() from None
