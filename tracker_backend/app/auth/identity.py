from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx
from jose import jwt
from jose.exceptions import JWTError

from tracker_backend.app.config.redaction import safe_error_detail
from tracker_backend.app.errors import AuthError


@dataclass
class VerifiedUser:
    user_id: str
    email: Optional[str] = None


def parse_authorization(header: str | None) -> Optional[str]:
    if not header:
        return None
    parts = header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
        return parts[1]
    return None


def precheck_jwt(token: str, now: float | None = None) -> Optional[str]:
    """
    Structural check before the network round trip.

    Signature is not verified here; the identity provider does that. Returns a
    short rejection reason, or None when the token may be sent on.
    """
    try:
        jwt.get_unverified_header(token)
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return "malformed_token"
    exp = claims.get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        if exp < (now if now is not None else time.time()):
            return "token_expired"
    return None


class IdentityVerifier:
    """
    Bearer token verification against the identity provider's user endpoint.

    ``GET {base_url}/auth/v1/user`` with the caller's token and the service
    key. Any non-2xx answer or transport failure rejects the token.
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout_seconds: float = 5.0,
        jwt_precheck: bool = True,
        client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.user_url = base_url.rstrip("/") + "/auth/v1/user"
        self.service_key = service_key
        self.timeout_seconds = timeout_seconds
        self.jwt_precheck = jwt_precheck
        self._client = client
        self._clock = clock or time.time

    async def _get(self, token: str) -> httpx.Response:
        headers = {"Authorization": f"Bearer {token}", "apikey": self.service_key}
        if self._client is not None:
            return await self._client.get(self.user_url, headers=headers)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.get(self.user_url, headers=headers)

    async def verify(self, token: str) -> VerifiedUser:
        if self.jwt_precheck:
            reason = precheck_jwt(token, now=self._clock())
            if reason:
                raise AuthError(reason)
        try:
            resp = await self._get(token)
        except httpx.HTTPError as exc:
            raise AuthError(f"identity_unreachable: {safe_error_detail(exc)}") from exc
        if not resp.is_success:
            raise AuthError(f"identity_rejected:{resp.status_code}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise AuthError("identity_bad_response") from exc
        user_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(user_id, str) or not user_id:
            raise AuthError("identity_missing_user")
        email = data.get("email")
        return VerifiedUser(user_id=user_id, email=email if isinstance(email, str) else None)


__all__ = ["VerifiedUser", "IdentityVerifier", "parse_authorization", "precheck_jwt"]
