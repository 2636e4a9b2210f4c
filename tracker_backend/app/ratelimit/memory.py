"""
In-process fixed-window rate limiter.

Only correct for a single-instance deployment: counters live in this
process, are not shared between replicas and are lost on restart.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Tuple

from .base import (
    Clock,
    RateLimitConfig,
    RateLimitResult,
    RateLimiter,
    fail_open_result,
    to_datetime,
    validate_config,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitRecord:
    """
    Counter state for one (user, endpoint) key.

    Attributes:
        count: Requests counted in the current window
        reset_at: Epoch seconds at which the window ends
    """
    count: int
    reset_at: float


def check_and_consume(
    record: RateLimitRecord | None,
    config: RateLimitConfig,
    now: float,
) -> Tuple[RateLimitRecord, bool]:
    """
    Check if a request is allowed and consume a slot if so.

    1. No record, or now >= reset_at: start a new window with count 1
    2. count < max_requests: allow and increment
    3. Otherwise deny (record unchanged)
    """
    if record is None or now >= record.reset_at:
        return RateLimitRecord(count=1, reset_at=now + config.window_seconds), True
    if record.count < config.max_requests:
        return RateLimitRecord(count=record.count + 1, reset_at=record.reset_at), True
    return record, False


class InMemoryRateLimiter(RateLimiter):
    backend_name = "memory"

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self._records: Dict[Tuple[str, str], RateLimitRecord] = {}
        self._lock = threading.Lock()

    async def check(self, user_id: str, endpoint: str, config: RateLimitConfig) -> RateLimitResult:
        now = self.now()
        try:
            if not validate_config(config):
                raise ValueError(f"invalid rate limit config: {config}")
            key = (user_id, endpoint)
            with self._lock:
                record, allowed = check_and_consume(self._records.get(key), config, now)
                self._records[key] = record
        except Exception:  # noqa: BLE001
            logger.exception("[RATE] memory limiter failed; allowing request")
            return fail_open_result(config, now)

        return RateLimitResult(
            allowed=allowed,
            remaining=max(0, config.max_requests - record.count) if allowed else 0,
            reset_at=to_datetime(record.reset_at),
            current_count=record.count,
        )

    def prune(self) -> int:
        """Drop records whose window has elapsed. Returns the number removed."""
        now = self.now()
        with self._lock:
            expired = [key for key, record in self._records.items() if now >= record.reset_at]
            for key in expired:
                del self._records[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._records)

    async def run_cleanup(self, interval_seconds: float) -> None:
        """Prune expired counters forever; meant to run as a background task."""
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                removed = self.prune()
                if removed:
                    logger.info("[RATE] pruned expired counters", extra={"removed": removed})
            except Exception:  # noqa: BLE001
                logger.exception("[RATE] counter cleanup failed")


__all__ = ["RateLimitRecord", "check_and_consume", "InMemoryRateLimiter"]
