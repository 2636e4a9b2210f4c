from __future__ import annotations

import re

_API_KEY_PATTERNS = [
    re.compile(r"(sk-[A-Za-z0-9]{8,})"),
    re.compile(r"(AIza[0-9A-Za-z_\-]{20,})"),
    re.compile(r"(eyJ[A-Za-z0-9_\-]{10,}\.[A-Za-z0-9_\-]{10,}\.[A-Za-z0-9_\-]+)"),
]


def redact_secrets(s: str) -> str:
    if not s:
        return s
    redacted = s
    for pattern in _API_KEY_PATTERNS:
        redacted = pattern.sub("[redacted]", redacted)
    redacted = re.sub(r"(Authorization:\s*Bearer\s+)[^\s]+", r"\1[redacted]", redacted, flags=re.IGNORECASE)
    redacted = re.sub(r"([?&]key=)[^&\s]+", r"\1[redacted]", redacted)
    return redacted


def safe_error_detail(exc: Exception) -> str:
    text = f"{type(exc).__name__}: {exc}"
    return redact_secrets(text)[:200]


__all__ = ["redact_secrets", "safe_error_detail"]
