"""
Domain models (Pydantic v2) for quotes, proverbs and users.

Stored records (Quote, Proverb, UserRecord) are what backends persist.
QuoteView adds the per-reader is_liked/is_favorited flags; those are computed
at read time and never written back. User is the public projection of a
UserRecord (no password hash).
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(UTC)


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    author: str
    category: str
    image_url: str | None = None
    likes: int = Field(default=0, ge=0)
    submitted_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow)

    def to_db_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "author": self.author,
            "category": self.category,
            "image_url": self.image_url,
            "likes": self.likes,
            "submitted_by": self.submitted_by,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> Quote:
        return cls(
            id=row["id"],
            text=row["text"],
            author=row["author"],
            category=row["category"],
            image_url=row.get("image_url"),
            likes=row.get("likes") or 0,
            submitted_by=row.get("submitted_by"),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class QuoteView(Quote):
    """A quote as seen by one reader."""

    is_liked: bool = False
    is_favorited: bool = False

    @classmethod
    def for_user(cls, quote: Quote, user: UserRecord | None) -> QuoteView:
        data = quote.model_dump(exclude={"is_liked", "is_favorited"})
        if user is None:
            return cls(**data, is_liked=False, is_favorited=False)
        return cls(
            **data,
            is_liked=quote.id in user.liked_quotes,
            is_favorited=quote.id in user.favorited_quotes,
        )

    def as_quote(self) -> Quote:
        """Drop the reader-specific flags."""
        return Quote(**self.model_dump(exclude={"is_liked", "is_favorited"}))


class Proverb(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    theme: str
    origin: str | None = None


class User(BaseModel):
    """Public user profile."""

    id: str
    username: str
    email: str
    avatar_url: str = ""
    liked_quotes: list[str] = Field(default_factory=list)
    favorited_quotes: list[str] = Field(default_factory=list)


class UserRecord(BaseModel):
    """Stored user, including the password hash."""

    id: str
    username: str
    email: str
    password_hash: str
    avatar_url: str = ""
    liked_quotes: list[str] = Field(default_factory=list)
    favorited_quotes: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def public(self) -> User:
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            avatar_url=self.avatar_url,
            liked_quotes=list(self.liked_quotes),
            favorited_quotes=list(self.favorited_quotes),
        )

    def to_db_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "password_hash": self.password_hash,
            "avatar_url": self.avatar_url,
            "liked_quotes": json.dumps(self.liked_quotes),
            "favorited_quotes": json.dumps(self.favorited_quotes),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> UserRecord:
        return cls(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            avatar_url=row.get("avatar_url") or "",
            liked_quotes=json.loads(row.get("liked_quotes") or "[]"),
            favorited_quotes=json.loads(row.get("favorited_quotes") or "[]"),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    username: str | None = None
    email: str | None = None
    avatar_url: str | None = None


class AuthResult(BaseModel):
    """A signed-in user and the bearer token for their session."""

    token: str
    user: User


class LikeResult(BaseModel):
    likes: int
    is_liked: bool


class FavoriteResult(BaseModel):
    is_favorited: bool
