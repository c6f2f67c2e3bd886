"""Inbound rate limiting shared by the app and its routers."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings

settings = get_settings()

# Default applies to every route; upstream-facing routes add stricter
# limits via @limiter.limit(...)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)
