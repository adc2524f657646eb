"""Rate limiting for the public auth endpoints."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from taskreward.settings import settings

REGISTER_LIMIT = settings.register_rate_limit
LOGIN_LIMIT = settings.login_rate_limit

# Shared across routers; only enforced in production
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.default_rate_limit],
    storage_uri="memory://",
    enabled=settings.env == "production",
)
