"""Business logic services."""

from .errors import (
    Forbidden,
    InvalidIdentifier,
    NotFound,
    PersistenceError,
    PostServiceError,
)
from .identity import IdentityStore, SocialGraph, SqlIdentityStore, SqlSocialGraph
from .posts import PostService, apply_like_toggle, is_valid_post_id

__all__ = [
    "PostService",
    "apply_like_toggle",
    "is_valid_post_id",
    "IdentityStore",
    "SocialGraph",
    "SqlIdentityStore",
    "SqlSocialGraph",
    "PostServiceError",
    "InvalidIdentifier",
    "NotFound",
    "Forbidden",
    "PersistenceError",
]
