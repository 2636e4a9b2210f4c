"""
Security event logging.

Events (auth failures, rate-limit hits, injection detections, CORS and
configuration problems) are written to an external sink on a best-effort
basis. Writing is fail-open: a sink failure is logged locally and swallowed,
never surfaced to the request.

Per request, a ``RequestSecurityLog`` collects events bound to the caller's
IP, user agent and endpoint. Handlers attach ``flush`` as a background task
so the response is sent before any sink I/O happens.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from tracker_backend.app.config.redaction import redact_secrets
from tracker_backend.app.observability.logging import hash_subject, structured_log

logger = logging.getLogger(__name__)

INPUT_EXCERPT_CHARS = 100


class SecurityEventType(str, Enum):
    AUTH_FAILURE = "auth_failure"
    AUTH_INVALID_TOKEN = "auth_invalid_token"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    RATE_LIMIT_WARNING = "rate_limit_warning"
    INJECTION_DETECTED = "injection_detected"
    SUSPICIOUS_INPUT = "suspicious_input"
    CORS_VIOLATION = "cors_violation"
    CONFIG_ERROR = "config_error"
    INTERNAL_ERROR = "internal_error"


class SecuritySeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class SecurityEvent:
    type: SecurityEventType
    severity: SecuritySeverity
    user_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    endpoint: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_log_fields(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        data["severity"] = self.severity.value
        data["user_id"] = hash_subject(self.user_id) if self.user_id else None
        data.pop("ip_address", None)
        data.pop("user_agent", None)
        data["details"] = {k: v for k, v in self.details.items() if k != "input"}
        return data


class SecurityEventSink(ABC):
    """Destination for security events."""

    @abstractmethod
    async def write(self, event: SecurityEvent) -> None:
        pass


class LoggingEventSink(SecurityEventSink):
    """Sink used when no external store is configured: structured log line only."""

    async def write(self, event: SecurityEvent) -> None:
        structured_log({"event": "security.event", **event.to_log_fields()}, level=logging.WARNING)


class SupabaseEventSink(SecurityEventSink):
    """Writes events through the ``log_security_event`` RPC."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.rpc_url = base_url.rstrip("/") + "/rest/v1/rpc/log_security_event"
        self.service_key = service_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _payload(self, event: SecurityEvent) -> Dict[str, Any]:
        return {
            "p_event_type": event.type.value,
            "p_severity": event.severity.value,
            "p_user_id": event.user_id,
            "p_ip_address": event.ip_address,
            "p_user_agent": event.user_agent,
            "p_endpoint": event.endpoint,
            "p_details": json.dumps(event.details) if event.details else None,
        }

    async def write(self, event: SecurityEvent) -> None:
        headers = {
            "Content-Type": "application/json",
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
        }
        if self._client is not None:
            resp = await self._client.post(self.rpc_url, headers=headers, json=self._payload(event))
        else:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                resp = await client.post(self.rpc_url, headers=headers, json=self._payload(event))
        if resp.status_code >= 400:
            logger.error(
                "[SEC] event sink rejected write",
                extra={"status": resp.status_code, "event_type": event.type.value},
            )


class SecurityEventLogger:
    """Fans an event out to the local log and the configured sink, swallowing sink errors."""

    def __init__(self, sink: SecurityEventSink | None = None) -> None:
        self.sink = sink or LoggingEventSink()

    async def log(self, event: SecurityEvent) -> None:
        structured_log({"event": "security.event", **event.to_log_fields()}, level=logging.WARNING)
        if isinstance(self.sink, LoggingEventSink):
            return
        try:
            await self.sink.write(event)
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "[SEC] security logging failed",
                extra={"event_type": event.type.value, "error": redact_secrets(str(exc))[:200]},
            )


class RequestSecurityLog:
    """Security events bound to one request; written when ``flush`` runs."""

    def __init__(
        self,
        logger_: SecurityEventLogger,
        *,
        endpoint: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._logger = logger_
        self.endpoint = endpoint
        self.ip_address = ip_address
        self.user_agent = user_agent
        self.pending: List[SecurityEvent] = []

    def record(
        self,
        event_type: SecurityEventType,
        severity: SecuritySeverity,
        user_id: str | None = None,
        details: Dict[str, Any] | None = None,
    ) -> SecurityEvent:
        event = SecurityEvent(
            type=event_type,
            severity=severity,
            user_id=user_id,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
            endpoint=self.endpoint,
            details=dict(details or {}),
        )
        self.pending.append(event)
        return event

    def auth_failure(self, message: str) -> SecurityEvent:
        return self.record(SecurityEventType.AUTH_FAILURE, SecuritySeverity.MEDIUM, details={"message": message})

    def invalid_token(self, reason: str, user_id: str | None = None) -> SecurityEvent:
        return self.record(
            SecurityEventType.AUTH_INVALID_TOKEN,
            SecuritySeverity.MEDIUM,
            user_id=user_id,
            details={"message": reason},
        )

    def rate_limit_exceeded(self, user_id: str, limit: int) -> SecurityEvent:
        return self.record(SecurityEventType.RATE_LIMIT_EXCEEDED, SecuritySeverity.HIGH, user_id, {"limit": limit})

    def rate_limit_warning(self, user_id: str, limit: int, remaining: int) -> SecurityEvent:
        return self.record(
            SecurityEventType.RATE_LIMIT_WARNING,
            SecuritySeverity.LOW,
            user_id,
            {"limit": limit, "remaining": remaining},
        )

    def injection_detected(self, user_id: str, field_name: str, raw_input: str, kinds: List[str]) -> SecurityEvent:
        return self.record(
            SecurityEventType.INJECTION_DETECTED,
            SecuritySeverity.HIGH,
            user_id,
            {"field": field_name, "input": raw_input[:INPUT_EXCERPT_CHARS], "pattern": ",".join(kinds)},
        )

    def cors_violation(self, origin: str) -> SecurityEvent:
        return self.record(SecurityEventType.CORS_VIOLATION, SecuritySeverity.LOW, details={"origin": origin[:200]})

    def config_error(self, missing: List[str]) -> SecurityEvent:
        return self.record(SecurityEventType.CONFIG_ERROR, SecuritySeverity.CRITICAL, details={"missing": missing})

    def internal_failure(self, user_id: str | None, cause: str) -> SecurityEvent:
        return self.record(
            SecurityEventType.INTERNAL_ERROR,
            SecuritySeverity.MEDIUM,
            user_id,
            {"message": redact_secrets(cause)[:200]},
        )

    async def flush(self) -> None:
        events, self.pending = self.pending, []
        for event in events:
            await self._logger.log(event)


__all__ = [
    "SecurityEventType",
    "SecuritySeverity",
    "SecurityEvent",
    "SecurityEventSink",
    "LoggingEventSink",
    "SupabaseEventSink",
    "SecurityEventLogger",
    "RequestSecurityLog",
]
