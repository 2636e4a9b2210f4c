"""
Durable rate limiters.

Both backends make increment-and-check a single atomic operation on the
storage side (a Lua script in redis, a row-locking SQL function behind the
Supabase RPC), so concurrent requests from one user across many instances
cannot exceed the limit by more than one in-flight race. Neither takes an
in-process lock.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx
import redis.asyncio as aioredis

from tracker_backend.app.config.redaction import redact_secrets

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

# KEYS[1] = counter key, ARGV[1] = window seconds. Returns {count, ttl}.
FIXED_WINDOW_SCRIPT = """
local current = redis.call('INCR', KEYS[1])
if current == 1 then
  redis.call('EXPIRE', KEYS[1], ARGV[1])
end
local ttl = redis.call('TTL', KEYS[1])
if ttl < 0 then
  redis.call('EXPIRE', KEYS[1], ARGV[1])
  ttl = tonumber(ARGV[1])
end
return {current, ttl}
"""


def _counter_key(user_id: str, endpoint: str) -> str:
    return f"ratelimit:{endpoint}:{user_id}"


class RedisRateLimiter(RateLimiter):
    backend_name = "redis"

    def __init__(self, client: Any, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self._redis = client

    @classmethod
    def from_url(cls, url: str, clock: Clock | None = None) -> "RedisRateLimiter":
        return cls(aioredis.Redis.from_url(url, decode_responses=True), clock=clock)

    async def check(self, user_id: str, endpoint: str, config: RateLimitConfig) -> RateLimitResult:
        now = self.now()
        if not validate_config(config):
            logger.error("[RATE] invalid config; allowing request", extra={"endpoint": endpoint})
            return fail_open_result(config, now)
        try:
            raw = await self._redis.eval(
                FIXED_WINDOW_SCRIPT,
                1,
                _counter_key(user_id, endpoint),
                config.window_seconds,
            )
            count, ttl = int(raw[0]), int(raw[1])
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "[RATE] redis check failed; allowing request",
                extra={"endpoint": endpoint, "error": redact_secrets(str(exc))[:200]},
            )
            return fail_open_result(config, now)

        allowed = count <= config.max_requests
        return RateLimitResult(
            allowed=allowed,
            remaining=max(0, config.max_requests - count),
            reset_at=to_datetime(now + max(0, ttl)),
            current_count=count,
        )

    async def aclose(self) -> None:
        close = getattr(self._redis, "aclose", None) or getattr(self._redis, "close", None)
        if close is not None:
            await close()


class SupabaseRateLimiter(RateLimiter):
    """Calls the ``check_rate_limit`` database function through PostgREST."""

    backend_name = "supabase"

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(clock)
        self.rpc_url = base_url.rstrip("/") + "/rest/v1/rpc/check_rate_limit"
        self.service_key = service_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _post(self, payload: dict) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
        }
        if self._client is not None:
            return await self._client.post(self.rpc_url, headers=headers, json=payload)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.post(self.rpc_url, headers=headers, json=payload)

    async def check(self, user_id: str, endpoint: str, config: RateLimitConfig) -> RateLimitResult:
        now = self.now()
        payload = {
            "p_user_id": user_id,
            "p_endpoint": endpoint,
            "p_max_requests": config.max_requests,
            "p_window_seconds": config.window_seconds,
        }
        try:
            resp = await self._post(payload)
            if resp.status_code >= 400:
                logger.error(
                    "[RATE] rate limit rpc failed; allowing request",
                    extra={"status": resp.status_code, "endpoint": endpoint},
                )
                return fail_open_result(config, now)
            data = resp.json()
            # PostgREST returns a one-row array for set-returning functions
            row = data[0] if isinstance(data, list) and data else data
            if not isinstance(row, dict) or not row:
                logger.error("[RATE] empty rate limit response; allowing request", extra={"endpoint": endpoint})
                return fail_open_result(config, now)
            return RateLimitResult(
                allowed=bool(row["allowed"]),
                remaining=max(0, int(row["remaining"])),
                reset_at=datetime.fromisoformat(str(row["reset_at"]).replace("Z", "+00:00")),
                current_count=int(row["current_count"]),
            )
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "[RATE] rate limit check errored; allowing request",
                extra={"endpoint": endpoint, "error": redact_secrets(str(exc))[:200]},
            )
            return fail_open_result(config, now)


__all__ = ["FIXED_WINDOW_SCRIPT", "RedisRateLimiter", "SupabaseRateLimiter"]
