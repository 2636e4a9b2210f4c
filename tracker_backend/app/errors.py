"""Error taxonomy for the tracker endpoints.

Every error carries the HTTP status and the public message that is safe to
return. The internal cause travels separately (``detail``) and only ever
reaches logs and the security event sink.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional


class ServiceError(Exception):
    status_code = 500
    error_code = "internal_error"
    public_message = "An unexpected error occurred."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.error_code
        super().__init__(self.detail)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.public_message}

    def to_headers(self) -> Dict[str, str]:
        return {}


class ConfigurationError(ServiceError):
    status_code = 500
    error_code = "config_error"
    public_message = "Server configuration error"


class AuthError(ServiceError):
    status_code = 401
    error_code = "auth_error"
    public_message = "Invalid or expired token"

    def __init__(self, detail: str | None = None, *, missing_header: bool = False) -> None:
        super().__init__(detail)
        self.missing_header = missing_header
        if missing_header:
            self.public_message = "Missing or invalid Authorization header"


class RateLimitExceeded(ServiceError):
    status_code = 429
    error_code = "rate_limited"
    public_message = "Rate limit exceeded. Please try again later."

    def __init__(self, reset_at: datetime, headers: Optional[Dict[str, str]] = None) -> None:
        super().__init__("rate limit exceeded")
        self.reset_at = reset_at
        self.headers = dict(headers or {})

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.public_message, "resetAt": self.reset_at.isoformat()}

    def to_headers(self) -> Dict[str, str]:
        return dict(self.headers)


class InvalidRequest(ServiceError):
    status_code = 400
    error_code = "invalid_request"

    def __init__(self, public_message: str) -> None:
        super().__init__(public_message)
        self.public_message = public_message


class UpstreamUnavailable(ServiceError):
    status_code = 503
    error_code = "upstream_unavailable"
    public_message = "Service temporarily unavailable. Please try again."


class MalformedUpstreamOutput(ServiceError):
    status_code = 500
    error_code = "malformed_upstream_output"
    public_message = "Failed to generate tracker configuration."


__all__ = [
    "ServiceError",
    "ConfigurationError",
    "AuthError",
    "RateLimitExceeded",
    "InvalidRequest",
    "UpstreamUnavailable",
    "MalformedUpstreamOutput",
]
