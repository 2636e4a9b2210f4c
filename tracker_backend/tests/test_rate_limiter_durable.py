"""Redis and Supabase-backed limiters, driven through in-process fakes."""

import asyncio
import json
from datetime import datetime, timezone

import httpx

from tracker_backend.app.ratelimit.base import RateLimitConfig
from tracker_backend.app.ratelimit.durable import FIXED_WINDOW_SCRIPT, RedisRateLimiter, SupabaseRateLimiter
from tracker_backend.app.ratelimit.factory import create_rate_limiter
from tracker_backend.app.ratelimit.memory import InMemoryRateLimiter
from tracker_backend.tests._fakes import FakeRedis, make_settings

CONFIG = RateLimitConfig(max_requests=2, window_seconds=60)


def _check(limiter, user="u1", endpoint="check-ambiguity"):
    return asyncio.run(limiter.check(user, endpoint, CONFIG))


class TestRedisLimiter:
    def test_counts_and_denies(self, clock):
        redis = FakeRedis(clock)
        limiter = RedisRateLimiter(redis, clock=clock)
        results = [_check(limiter) for _ in range(3)]
        assert [r.allowed for r in results] == [True, True, False]
        assert [r.remaining for r in results] == [1, 0, 0]
        assert results[0].reset_at == datetime.fromtimestamp(clock() + 60, tz=timezone.utc)
        assert "ratelimit:check-ambiguity:u1" in redis.counters

    def test_window_expiry(self, clock):
        limiter = RedisRateLimiter(FakeRedis(clock), clock=clock)
        for _ in range(3):
            _check(limiter)
        clock.advance(61)
        assert _check(limiter).allowed

    def test_redis_failure_fails_open(self, clock):
        limiter = RedisRateLimiter(FakeRedis(clock, fail=True), clock=clock)
        result = _check(limiter)
        assert result.allowed
        assert result.current_count == 0

    def test_aclose_closes_client(self, clock):
        redis = FakeRedis(clock)
        asyncio.run(RedisRateLimiter(redis, clock=clock).aclose())
        assert redis.closed

    def test_script_sets_expiry_once(self):
        assert "INCR" in FIXED_WINDOW_SCRIPT
        assert FIXED_WINDOW_SCRIPT.count("EXPIRE") == 2


def _supabase(handler, clock):
    seen = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(record)) as client:
            limiter = SupabaseRateLimiter(
                "https://project.supabase.test/", "service-key", client=client, clock=clock
            )
            return await limiter.check("u1", "generate-tracker-config", CONFIG)

    return asyncio.run(run()), seen


class TestSupabaseLimiter:
    def test_reads_single_row_array(self, clock):
        row = {"allowed": False, "remaining": 0, "reset_at": "2026-10-18T12:00:00Z", "current_count": 3}
        result, seen = _supabase(lambda r: httpx.Response(200, json=[row]), clock)
        assert result.allowed is False
        assert result.current_count == 3
        assert result.reset_at == datetime(2026, 10, 18, 12, tzinfo=timezone.utc)
        request = seen[0]
        assert str(request.url) == "https://project.supabase.test/rest/v1/rpc/check_rate_limit"
        assert request.headers["apikey"] == "service-key"
        assert json.loads(request.content) == {
            "p_user_id": "u1",
            "p_endpoint": "generate-tracker-config",
            "p_max_requests": 2,
            "p_window_seconds": 60,
        }

    def test_reads_plain_object(self, clock):
        row = {"allowed": True, "remaining": 1, "reset_at": "2026-10-18T12:00:00+00:00", "current_count": 1}
        result, _ = _supabase(lambda r: httpx.Response(200, json=row), clock)
        assert result.allowed and result.remaining == 1

    def test_error_status_fails_open(self, clock):
        result, _ = _supabase(lambda r: httpx.Response(500, json={"message": "down"}), clock)
        assert result.allowed

    def test_empty_answer_fails_open(self, clock):
        result, _ = _supabase(lambda r: httpx.Response(200, json=[]), clock)
        assert result.allowed

    def test_transport_error_fails_open(self, clock):
        def boom(request):
            raise httpx.ConnectError("refused", request=request)

        result, _ = _supabase(boom, clock)
        assert result.allowed


class TestFactory:
    def test_memory_is_default(self):
        assert isinstance(create_rate_limiter(make_settings()), InMemoryRateLimiter)

    def test_supabase_backend(self):
        limiter = create_rate_limiter(make_settings(rate_limit_backend="supabase"))
        assert isinstance(limiter, SupabaseRateLimiter)

    def test_supabase_without_credentials_falls_back(self):
        limiter = create_rate_limiter(make_settings(rate_limit_backend="supabase", supabase_url=None))
        assert isinstance(limiter, InMemoryRateLimiter)

    def test_unknown_backend_falls_back(self):
        assert isinstance(create_rate_limiter(make_settings(rate_limit_backend="carrier-pigeon")), InMemoryRateLimiter)

    def test_redis_backend(self):
        limiter = create_rate_limiter(make_settings(rate_limit_backend="redis", redis_url="redis://localhost:6399/0"))
        assert isinstance(limiter, RedisRateLimiter)
