"""Rate limiter factory: picks the backend named by RATE_LIMIT_BACKEND."""

from __future__ import annotations

import logging

from tracker_backend.app.config.settings import Settings

from .base import Clock, RateLimiter
from .durable import RedisRateLimiter, SupabaseRateLimiter
from .memory import InMemoryRateLimiter

logger = logging.getLogger(__name__)


def create_rate_limiter(settings: Settings, clock: Clock | None = None) -> RateLimiter:
    """
    Create the configured rate limiter.

    "memory" (default), "redis" or "supabase". The supabase backend needs the
    identity/storage URL and service key; without them the in-process backend
    is used and a warning is logged.
    """
    backend = settings.rate_limit_backend or "memory"
    if backend == "redis":
        return RedisRateLimiter.from_url(settings.redis_url, clock=clock)
    if backend == "supabase":
        if settings.supabase_url and settings.supabase_service_role_key:
            return SupabaseRateLimiter(
                settings.supabase_url,
                settings.supabase_service_role_key,
                clock=clock,
            )
        logger.warning("[RATE] supabase backend requested without credentials; using memory backend")
        return InMemoryRateLimiter(clock=clock)
    if backend != "memory":
        logger.warning("[RATE] unknown backend; using memory backend", extra={"backend": backend})
    return InMemoryRateLimiter(clock=clock)


__all__ = ["create_rate_limiter"]
