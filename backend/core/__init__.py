"""Core configuration and security helpers."""

from .config import Settings, settings
from .security import ACCESS_TOKEN_TYPE, DEFAULT_ROLE, create_access_token, decode_token

__all__ = [
    "Settings",
    "settings",
    "ACCESS_TOKEN_TYPE",
    "DEFAULT_ROLE",
    "create_access_token",
    "decode_token",
]
