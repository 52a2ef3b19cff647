"""Authentication module for the taskboard API."""

from app.auth.config import auth_settings
from app.auth.dependencies import get_current_user, AuthUser

__all__ = [
    "auth_settings",
    "get_current_user",
    "AuthUser",
]
