"""Request helper utilities for proxy headers, client address and scheme detection."""

from __future__ import annotations

import ipaddress
from typing import Optional

from fastapi import Request

_TRUSTED_PROXY_NETS = (
    ipaddress.ip_network("100.64.0.0/10"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("127.0.0.0/8"),
)


def _is_trusted_proxy(ip_str: str | None) -> bool:
    if not ip_str:
        return False
    try:
        ip_obj = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    return any(ip_obj in net for net in _TRUSTED_PROXY_NETS)


def get_request_scheme(request: Request) -> str:
    """
    Get the actual request scheme, respecting proxy headers.

    Behind a reverse proxy the backend sees http while the client used https,
    so X-Forwarded-Proto wins when present.
    """
    forwarded_proto = request.headers.get("x-forwarded-proto")
    if forwarded_proto:
        return forwarded_proto.split(",")[0].lower().strip()
    return request.url.scheme


def is_https_request(request: Request) -> bool:
    return get_request_scheme(request) == "https"


def get_client_ip(request: Request) -> Optional[str]:
    """
    Determine the client IP.

    Forwarding headers (X-Forwarded-For, X-Real-IP, CF-Connecting-IP) are only
    trusted when the immediate peer is a private/loopback proxy address.
    """
    peer_ip = request.client.host if request.client else None
    if _is_trusted_proxy(peer_ip) or peer_ip is None:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first
        for header in ("x-real-ip", "cf-connecting-ip"):
            value = request.headers.get(header)
            if value and value.strip():
                return value.strip()
    return peer_ip


def get_user_agent(request: Request) -> Optional[str]:
    ua = request.headers.get("user-agent")
    return ua[:300] if ua else None


__all__ = ["get_request_scheme", "is_https_request", "get_client_ip", "get_user_agent"]
