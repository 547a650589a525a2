from __future__ import annotations

from slowapi import Limiter

from app.core.config import settings
from app.core.security import client_key

limiter = Limiter(key_func=client_key, enabled=settings.rate_limit_enabled)


def rate_limit(limit: str | None = None):
    """Per-client request limit; defaults to RATE_LIMIT. A no-op when rate limiting is disabled."""
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def decorator(func):
        return func

    return decorator
