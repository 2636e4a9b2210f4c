from __future__ import annotations

from typing import Dict


def security_headers(*, is_https: bool) -> Dict[str, str]:
    """Headers attached to every tracker API response."""
    headers: Dict[str, str] = {
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "no-referrer",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-store",
    }
    if is_https:
        headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"
    return headers


def apply_security_headers(response, *, is_https: bool) -> None:
    for key, value in security_headers(is_https=is_https).items():
        response.headers[key] = value


__all__ = ["security_headers", "apply_security_headers"]
