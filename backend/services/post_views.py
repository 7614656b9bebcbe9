"""Shared post and profile view models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Self

from pydantic import BaseModel, ConfigDict

from models import Post, User


class PublicProfile(BaseModel):
    """Every user field except the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "PublicProfile":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthorSummary(BaseModel):
    id: str
    username: str


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    author_id: str
    likes: list[str] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_post(cls, post: Post, **extra: Any) -> Self:
        return cls(
            id=post.id,
            title=post.title,
            description=post.description,
            author_id=post.author_id,
            likes=list(post.likes or []),
            created_at=post.created_at,
            updated_at=post.updated_at,
            **extra,
        )


class PostWithAuthorResponse(PostResponse):
    author: PublicProfile | None = None


class PostListItemResponse(PostResponse):
    author: AuthorSummary | None = None


class PostDetailResponse(PostResponse):
    author: PublicProfile | None = None
    liked_by: list[str | None] = []


class CondensedPostResponse(BaseModel):
    author: AuthorSummary | None = None
    title: str
    description: str
    likes: list[str] = []


class UpdateSummary(BaseModel):
    acknowledged: bool = True
    matched_count: int
    modified_count: int


class LikeToggleResult(BaseModel):
    action: Literal["liked", "unliked"]
    post: PostResponse

    @property
    def liked(self) -> bool:
        return self.action == "liked"


__all__ = [
    "PublicProfile",
    "AuthorSummary",
    "PostResponse",
    "PostWithAuthorResponse",
    "PostListItemResponse",
    "PostDetailResponse",
    "CondensedPostResponse",
    "UpdateSummary",
    "LikeToggleResult",
]
