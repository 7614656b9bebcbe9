"""Database helpers."""

from .session import AsyncSessionMaker, async_engine, get_session

__all__ = ["AsyncSessionMaker", "async_engine", "get_session"]
