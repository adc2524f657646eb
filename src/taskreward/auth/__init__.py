"""Authentication for the task reward service."""

from taskreward.auth.local import LocalAuthService
from taskreward.auth.middleware import get_current_user, require_auth

__all__ = [
    "LocalAuthService",
    "get_current_user",
    "require_auth",
]
