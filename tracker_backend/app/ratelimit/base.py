"""
Rate limiter contract.

Fixed-window limiting per (user_id, endpoint). Every backend implements
``RateLimiter.check`` and shares the same fail-open rule: if the check itself
cannot be performed, the request is allowed and the error is logged. The LLM
provider's own quotas are the backstop in that case.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict

Clock = Callable[[], float]


@dataclass(frozen=True)
class RateLimitConfig:
    """
    Rate limit configuration.

    Attributes:
        max_requests: Maximum requests allowed per window
        window_seconds: Window duration in seconds
    """
    max_requests: int
    window_seconds: int = 3600


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: datetime
    current_count: int


def validate_config(config: RateLimitConfig) -> bool:
    return config.max_requests > 0 and config.window_seconds > 0


def to_datetime(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def fail_open_result(config: RateLimitConfig, now: float) -> RateLimitResult:
    return RateLimitResult(
        allowed=True,
        remaining=max(0, config.max_requests),
        reset_at=to_datetime(now + max(1, config.window_seconds)),
        current_count=0,
    )


def rate_limit_headers(result: RateLimitResult, config: RateLimitConfig) -> Dict[str, str]:
    return {
        "X-RateLimit-Limit": str(config.max_requests),
        "X-RateLimit-Remaining": str(max(0, result.remaining)),
        "X-RateLimit-Reset": result.reset_at.isoformat(),
    }


class RateLimiter(ABC):
    """Per-user, per-endpoint fixed-window limiter."""

    backend_name = "abstract"

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or time.time

    def now(self) -> float:
        return self._clock()

    @abstractmethod
    async def check(self, user_id: str, endpoint: str, config: RateLimitConfig) -> RateLimitResult:
        """
        Count one request and report whether it is within the limit.

        Never raises: internal failures produce an allowed result.
        """

    async def aclose(self) -> None:
        return None


__all__ = [
    "Clock",
    "RateLimitConfig",
    "RateLimitResult",
    "RateLimiter",
    "fail_open_result",
    "rate_limit_headers",
    "to_datetime",
    "validate_config",
]
