"""SQLModel models package."""

from .follow import Follow
from .post import Post
from .user import SUPER_ADMIN_ROLE, USER_ROLE, User

__all__ = [
    "User",
    "Follow",
    "Post",
    "USER_ROLE",
    "SUPER_ADMIN_ROLE",
]
