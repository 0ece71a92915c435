"""Request and response bodies for the Quotely API (snake_case JSON)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from quotely.quotes.models import ProfileUpdate


class SignupRequest(BaseModel):
    username: str = Field(..., max_length=100)
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=1024)


class LoginRequest(BaseModel):
    username: str = Field(..., max_length=100)
    password: str = Field(..., max_length=1024)


class SocialLoginRequest(BaseModel):
    provider: str = Field(..., max_length=50)


class ProfileUpdateRequest(ProfileUpdate):
    """Profile fields only; password, id and the liked/favorited sets are rejected."""

    model_config = ConfigDict(extra="forbid")


class SubmitQuoteRequest(BaseModel):
    text: str = Field(..., max_length=2000)
    author: str = Field(..., max_length=200)
    category: str = Field(..., max_length=50)


class MessageResponse(BaseModel):
    message: str


class CategoriesResponse(BaseModel):
    quote_categories: list[str]
    proverb_themes: list[str]
