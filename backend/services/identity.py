"""Identity and social-graph lookups used by the post service."""

from __future__ import annotations

from typing import Any, Protocol, cast, runtime_checkable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Follow, User
from .post_views import PublicProfile


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


@runtime_checkable
class IdentityStore(Protocol):
    async def find_by_id(self, user_id: str) -> PublicProfile | None: ...

    async def find_username(self, user_id: str) -> str | None: ...


@runtime_checkable
class SocialGraph(Protocol):
    async def following_of(self, user_id: str) -> set[str] | None: ...


class SqlIdentityStore:
    """Resolve users from the ``users`` table, never exposing the password hash."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_by_id(self, user_id: str) -> PublicProfile | None:
        result = await self._session.execute(
            select(User).where(_eq(User.id, user_id)).limit(1)
        )
        user = result.scalar_one_or_none()
        if user is None:
            return None
        return PublicProfile.from_user(user)

    async def find_username(self, user_id: str) -> str | None:
        username_column = cast(ColumnElement[str], User.username)
        result = await self._session.execute(
            select(username_column).where(_eq(User.id, user_id)).limit(1)
        )
        return result.scalar_one_or_none()


class SqlSocialGraph:
    """Resolve following sets from the ``follows`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def following_of(self, user_id: str) -> set[str] | None:
        user_id_column = cast(ColumnElement[str], User.id)
        user_result = await self._session.execute(
            select(user_id_column).where(_eq(user_id_column, user_id)).limit(1)
        )
        if user_result.scalar_one_or_none() is None:
            return None

        followee_column = cast(ColumnElement[str], Follow.followee_id)
        result = await self._session.execute(
            select(followee_column).where(_eq(Follow.follower_id, user_id))
        )
        return set(result.scalars().all())


__all__ = [
    "IdentityStore",
    "SocialGraph",
    "SqlIdentityStore",
    "SqlSocialGraph",
]
