from .base import (
    RateLimitConfig,
    RateLimitResult,
    RateLimiter,
    fail_open_result,
    rate_limit_headers,
)
from .memory import InMemoryRateLimiter, RateLimitRecord, check_and_consume
from .durable import RedisRateLimiter, SupabaseRateLimiter
from .factory import create_rate_limiter

__all__ = [
    "RateLimitConfig",
    "RateLimitResult",
    "RateLimiter",
    "fail_open_result",
    "rate_limit_headers",
    "InMemoryRateLimiter",
    "RateLimitRecord",
    "check_and_consume",
    "RedisRateLimiter",
    "SupabaseRateLimiter",
    "create_rate_limiter",
]
