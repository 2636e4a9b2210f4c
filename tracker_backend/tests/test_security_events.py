import asyncio
import json

import httpx

from tracker_backend.app.security.events import (
    LoggingEventSink,
    RequestSecurityLog,
    SecurityEventLogger,
    SecurityEventType,
    SecuritySeverity,
    SupabaseEventSink,
)
from tracker_backend.app.security.headers import security_headers
from tracker_backend.tests._fakes import RecordingSink


def _request_log(sink):
    return RequestSecurityLog(
        SecurityEventLogger(sink),
        endpoint="check-ambiguity",
        ip_address="203.0.113.9",
        user_agent="pytest",
    )


def test_events_are_buffered_until_flush():
    sink = RecordingSink()
    log = _request_log(sink)
    log.auth_failure("Missing or invalid Authorization header")
    log.rate_limit_warning("u1", limit=30, remaining=5)
    assert sink.events == []
    assert len(log.pending) == 2

    asyncio.run(log.flush())
    assert sink.types() == ["auth_failure", "rate_limit_warning"]
    assert log.pending == []
    event = sink.events[1]
    assert event.ip_address == "203.0.113.9"
    assert event.endpoint == "check-ambiguity"
    assert event.severity is SecuritySeverity.LOW
    assert event.details == {"limit": 30, "remaining": 5}


def test_injection_event_keeps_short_excerpt():
    log = _request_log(RecordingSink())
    event = log.injection_detected("u1", "trackerName", "ignore previous " + "x" * 500, ["OVERRIDE_INSTRUCTIONS"])
    assert event.type is SecurityEventType.INJECTION_DETECTED
    assert event.severity is SecuritySeverity.HIGH
    assert len(event.details["input"]) == 100
    assert event.details["pattern"] == "OVERRIDE_INSTRUCTIONS"


def test_log_fields_hide_raw_identity_and_input():
    log = _request_log(RecordingSink())
    fields = log.injection_detected("user-123", "trackerName", "system: hi", ["ROLE_MARKER"]).to_log_fields()
    assert fields["user_id"] != "user-123"
    assert "ip_address" not in fields
    assert "input" not in fields["details"]
    assert fields["type"] == "injection_detected"


def test_sink_failure_is_swallowed():
    sink = RecordingSink(fail=True)
    log = _request_log(sink)
    log.config_error(["LLM_API_KEY"])
    asyncio.run(log.flush())
    assert log.pending == []


def test_logging_sink_is_default():
    assert isinstance(SecurityEventLogger().sink, LoggingEventSink)


def test_supabase_sink_posts_rpc_payload():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            sink = SupabaseEventSink("https://project.supabase.test", "service-key", client=client)
            log = RequestSecurityLog(SecurityEventLogger(sink), endpoint="generate-tracker-config")
            log.rate_limit_exceeded("u1", 20)
            await log.flush()

    asyncio.run(run())
    assert len(seen) == 1
    request = seen[0]
    assert request.url.path == "/rest/v1/rpc/log_security_event"
    assert request.headers["authorization"] == "Bearer service-key"
    body = json.loads(request.content)
    assert body["p_event_type"] == "rate_limit_exceeded"
    assert body["p_severity"] == "high"
    assert body["p_endpoint"] == "generate-tracker-config"
    assert json.loads(body["p_details"]) == {"limit": 20}


def test_supabase_sink_rejection_does_not_raise():
    async def run():
        transport = httpx.MockTransport(lambda r: httpx.Response(500))
        async with httpx.AsyncClient(transport=transport) as client:
            sink = SupabaseEventSink("https://project.supabase.test", "service-key", client=client)
            await SecurityEventLogger(sink).log(
                _request_log(sink).cors_violation("https://evil.example")
            )

    asyncio.run(run())


def test_security_headers():
    plain = security_headers(is_https=False)
    assert plain["X-Content-Type-Options"] == "nosniff"
    assert plain["X-Frame-Options"] == "DENY"
    assert "Strict-Transport-Security" not in plain
    assert security_headers(is_https=True)["Strict-Transport-Security"].startswith("max-age=")
