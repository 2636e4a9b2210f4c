"""
Request correlation for the tracker endpoints.

Every HTTP response carries a request id (reused from the caller when it
looks safe, otherwise a fresh uuid4) and every request produces exactly one
access log line. Bodies and query strings are never logged.
"""

import logging
import re
import time
import uuid
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

_SAFE_INCOMING_ID = re.compile(r"^[A-Za-z0-9\-]{8,64}$")


def _header_value(headers: List[Tuple[bytes, bytes]], name: bytes) -> Optional[str]:
    for key, value in headers:
        if key.lower() == name:
            return value.decode("latin-1").strip()
    return None


class RequestIdMiddleware:
    def __init__(self, app, header_name: str = "x-request-id"):
        self.app = app
        self.header_name = header_name.lower().encode("latin-1")

    def resolve_request_id(self, headers: List[Tuple[bytes, bytes]]) -> str:
        incoming = _header_value(headers, self.header_name)
        if incoming and _SAFE_INCOMING_ID.match(incoming):
            return incoming
        return str(uuid.uuid4())

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.monotonic()
        request_id = self.resolve_request_id(list(scope.get("headers", [])))
        scope.setdefault("state", {})["request_id"] = request_id
        status: Optional[int] = None

        async def send_with_id(message):
            nonlocal status
            if message["type"] == "http.response.start":
                status = message.get("status", 0)
                headers = [h for h in message.get("headers", []) if h[0].lower() != self.header_name]
                headers.append((self.header_name, request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_id)
        finally:
            logger.info(
                "[HTTP] request",
                extra={
                    "method": scope.get("method", "?"),
                    "path": scope.get("path", "?"),
                    "status": status,
                    "duration_ms": int((time.monotonic() - started) * 1000),
                    "request_id": request_id,
                },
            )
