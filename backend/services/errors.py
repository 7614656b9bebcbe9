"""Typed failures raised by the post service."""

from __future__ import annotations

from fastapi import status


class PostServiceError(Exception):
    """Base error carrying the HTTP status and message surfaced to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error


class InvalidIdentifier(PostServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(PostServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(PostServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class PersistenceError(PostServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "PostServiceError",
    "InvalidIdentifier",
    "NotFound",
    "Forbidden",
    "PersistenceError",
]
