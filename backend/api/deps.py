"""Shared FastAPI dependencies: database session, caller identity and services."""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from core import ACCESS_TOKEN_TYPE, DEFAULT_ROLE, decode_token
from db.session import get_session
from models import SUPER_ADMIN_ROLE
from services import PostService, SqlIdentityStore, SqlSocialGraph

ACCESS_COOKIE = "access_token"


class CurrentUser(BaseModel):
    """Identity carried by a verified access token."""

    id: str
    role: str = DEFAULT_ROLE


async def get_db() -> AsyncIterator[AsyncSession]:
    async for session in get_session():
        yield session


def _extract_bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("authorization")
    if not authorization:
        return None

    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = value.strip()
    return token or None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(request: Request) -> CurrentUser:
    token = _extract_bearer_token(request) or request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise _unauthorized("Authentication required")

    try:
        payload = decode_token(token)
    except ValueError as exc:
        raise _unauthorized("Invalid authentication token") from exc

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _unauthorized("Invalid authentication token")

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise _unauthorized("Token payload missing user identifier")

    role = payload.get("role")
    return CurrentUser(
        id=subject.strip(),
        role=role if isinstance(role, str) and role else DEFAULT_ROLE,
    )


async def require_super_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    if current_user.role != SUPER_ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin role required",
        )
    return current_user


async def get_post_service(session: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(
        session,
        identity_store=SqlIdentityStore(session),
        social_graph=SqlSocialGraph(session),
    )
