from .sanitizer import (
    BLOCKED_PLACEHOLDER,
    SanitizeResult,
    quick_sanitize,
    sanitize_array_for_prompt,
    sanitize_external_response,
    sanitize_for_prompt,
)
from .events import (
    LoggingEventSink,
    RequestSecurityLog,
    SecurityEvent,
    SecurityEventLogger,
    SecurityEventSink,
    SecurityEventType,
    SecuritySeverity,
    SupabaseEventSink,
)
from .headers import apply_security_headers, security_headers

__all__ = [
    "BLOCKED_PLACEHOLDER",
    "SanitizeResult",
    "quick_sanitize",
    "sanitize_array_for_prompt",
    "sanitize_external_response",
    "sanitize_for_prompt",
    "LoggingEventSink",
    "RequestSecurityLog",
    "SecurityEvent",
    "SecurityEventLogger",
    "SecurityEventSink",
    "SecurityEventType",
    "SecuritySeverity",
    "SupabaseEventSink",
    "apply_security_headers",
    "security_headers",
]
