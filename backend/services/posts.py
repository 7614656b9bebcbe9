"""Post lifecycle: creation, owner-scoped mutation, likes and read projections."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from functools import wraps
from typing import Any, Concatenate, ParamSpec, TypeVar, cast
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Post
from .errors import Forbidden, InvalidIdentifier, NotFound, PersistenceError, PostServiceError
from .identity import IdentityStore, SocialGraph
from .post_views import (
    AuthorSummary,
    CondensedPostResponse,
    LikeToggleResult,
    PostDetailResponse,
    PostListItemResponse,
    PostResponse,
    PostWithAuthorResponse,
    UpdateSummary,
)

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found"

P = ParamSpec("P")
R = TypeVar("R")


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def is_valid_post_id(value: str) -> bool:
    try:
        UUID(value)
    except (AttributeError, TypeError, ValueError):
        return False
    return True


def apply_like_toggle(post: Post, user_id: str) -> bool:
    """Flip ``user_id`` in ``post.likes`` and return True when it is now liked.

    The list is replaced rather than mutated so the JSON column is flagged
    dirty and written back whole.
    """
    likes = list(post.likes or [])
    if user_id in likes:
        post.likes = [liker_id for liker_id in likes if liker_id != user_id]
        return False
    post.likes = [*likes, user_id]
    return True


def _translate_failures(
    message: str,
) -> Callable[
    [Callable[Concatenate["PostService", P], Awaitable[R]]],
    Callable[Concatenate["PostService", P], Awaitable[R]],
]:
    """Re-raise anything that is not a PostServiceError as PersistenceError."""

    def decorator(
        method: Callable[Concatenate["PostService", P], Awaitable[R]],
    ) -> Callable[Concatenate["PostService", P], Awaitable[R]]:
        @wraps(method)
        async def wrapper(self: "PostService", *args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await method(self, *args, **kwargs)
            except PostServiceError:
                raise
            except Exception as exc:
                await self.session.rollback()
                logger.exception(message)
                raise PersistenceError(message, error=str(exc)) from exc

        return wrapper

    return decorator


class PostService:
    """Post data access and business rules.

    Authorization here is limited to ownership; the privileged role is
    enforced by callers before ``delete_post_privileged`` is reached.

    ``toggle_like`` reads the post and writes the whole ``likes`` list back
    without locking, so overlapping toggles on one post can lose an update.
    """

    def __init__(
        self,
        session: AsyncSession,
        identity_store: IdentityStore,
        social_graph: SocialGraph,
    ) -> None:
        self.session = session
        self.identity_store = identity_store
        self.social_graph = social_graph

    async def _find_post(self, post_id: str) -> Post | None:
        post_entity = cast(Any, Post)
        result = await self.session.execute(
            select(post_entity).where(_eq(Post.id, post_id)).limit(1)
        )
        return result.scalar_one_or_none()

    async def _require_post(self, post_id: str) -> Post:
        post = await self._find_post(post_id)
        if post is None:
            raise NotFound(POST_NOT_FOUND)
        return post

    async def _author_summaries(
        self,
        author_ids: Iterable[str],
    ) -> dict[str, AuthorSummary | None]:
        summaries: dict[str, AuthorSummary | None] = {}
        for author_id in author_ids:
            if author_id in summaries:
                continue
            username = await self.identity_store.find_username(author_id)
            summaries[author_id] = (
                AuthorSummary(id=author_id, username=username) if username is not None else None
            )
        return summaries

    @_translate_failures("Error trying to create new post")
    async def create_post(
        self,
        author_id: str,
        title: str,
        description: str,
    ) -> PostWithAuthorResponse:
        # Resolved before the commit so a failed lookup leaves nothing written.
        author = await self.identity_store.find_by_id(author_id)

        post = Post(author_id=author_id, title=title, description=description)
        self.session.add(post)
        await self.session.commit()
        await self.session.refresh(post)
        logger.info("Post %s created by user %s", post.id, author_id)
        return PostWithAuthorResponse.from_post(post, author=author)

    @_translate_failures("Error trying to delete post")
    async def delete_own_post(self, requester_id: str, post_id: str) -> None:
        if not is_valid_post_id(post_id):
            raise InvalidIdentifier("Post id not valid")

        post = await self._require_post(post_id)
        if post.author_id != requester_id:
            logger.warning(
                "User %s tried to delete post %s owned by %s",
                requester_id,
                post_id,
                post.author_id,
            )
            raise Forbidden("You can only delete your own posts")

        await self.session.delete(post)
        await self.session.commit()
        logger.info("Post %s deleted by its author", post_id)

    @_translate_failures("Error trying to delete post")
    async def delete_post_privileged(self, post_id: str) -> None:
        if not is_valid_post_id(post_id):
            raise InvalidIdentifier("Post id not valid")

        await self.session.execute(delete(Post).where(_eq(Post.id, post_id)))
        await self.session.commit()
        logger.info("Post %s deleted by privileged actor", post_id)

    @_translate_failures("Error trying to update post")
    async def update_own_post(
        self,
        requester_id: str,
        post_id: str,
        title: str,
        description: str,
    ) -> UpdateSummary:
        post = await self._require_post(post_id)
        if post.author_id != requester_id:
            logger.warning(
                "User %s tried to update post %s owned by %s",
                requester_id,
                post_id,
                post.author_id,
            )
            raise Forbidden("You can only update your own posts")

        modified = post.title != title or post.description != description
        post.title = title
        post.description = description
        self.session.add(post)
        await self.session.commit()
        return UpdateSummary(matched_count=1, modified_count=1 if modified else 0)

    @_translate_failures("Error trying to retrieve your posts")
    async def list_own_posts(self, requester_id: str) -> list[PostResponse]:
        post_entity = cast(Any, Post)
        result = await self.session.execute(
            select(post_entity).where(_eq(Post.author_id, requester_id))
        )
        return [PostResponse.from_post(post) for post in result.scalars().all()]

    @_translate_failures("Error trying to retrieve all posts")
    async def list_all_posts(self) -> list[PostListItemResponse]:
        post_entity = cast(Any, Post)
        result = await self.session.execute(select(post_entity))
        posts = result.scalars().all()
        if not posts:
            raise NotFound("No posts found")

        authors = await self._author_summaries(post.author_id for post in posts)
        return [
            PostListItemResponse.from_post(post, author=authors[post.author_id])
            for post in posts
        ]

    @_translate_failures("Error trying to retrieve post")
    async def get_post_by_id(self, post_id: str) -> PostDetailResponse:
        post = await self._require_post(post_id)
        author = await self.identity_store.find_by_id(post.author_id)
        # Unknown likers stay in place as None so liked_by lines up with likes.
        liked_by = [
            await self.identity_store.find_username(user_id)
            for user_id in post.likes or []
        ]
        return PostDetailResponse.from_post(post, author=author, liked_by=liked_by)

    @_translate_failures("Error trying to find post by id")
    async def list_posts_by_author(self, author_id: str) -> list[PostResponse]:
        post_entity = cast(Any, Post)
        result = await self.session.execute(
            select(post_entity).where(_eq(Post.author_id, author_id))
        )
        posts = result.scalars().all()
        if not posts:
            raise NotFound("No posts by this user")
        return [PostResponse.from_post(post) for post in posts]

    @_translate_failures("Error trying to retrieve following profiles")
    async def list_following_feed(self, requester_id: str) -> list[CondensedPostResponse]:
        following = await self.social_graph.following_of(requester_id)
        if following is None:
            raise NotFound("User not found")
        if not following:
            return []

        post_entity = cast(Any, Post)
        post_author_column = cast(ColumnElement[str], Post.author_id)
        result = await self.session.execute(
            select(post_entity).where(post_author_column.in_(sorted(following)))
        )
        posts = result.scalars().all()
        authors = await self._author_summaries(post.author_id for post in posts)
        return [
            CondensedPostResponse(
                author=authors[post.author_id],
                title=post.title,
                description=post.description,
                likes=list(post.likes or []),
            )
            for post in posts
        ]

    @_translate_failures("Error liking/unliking post")
    async def toggle_like(self, requester_id: str, post_id: str) -> LikeToggleResult:
        post = await self._require_post(post_id)
        liked = apply_like_toggle(post, requester_id)
        self.session.add(post)
        await self.session.commit()
        await self.session.refresh(post)
        logger.info(
            "User %s %s post %s",
            requester_id,
            "liked" if liked else "unliked",
            post_id,
        )
        return LikeToggleResult(
            action="liked" if liked else "unliked",
            post=PostResponse.from_post(post),
        )


__all__ = [
    "POST_NOT_FOUND",
    "PostService",
    "apply_like_toggle",
    "is_valid_post_id",
]
