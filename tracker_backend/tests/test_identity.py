import asyncio

import httpx
import pytest
from jose import jwt

from tracker_backend.app.auth.identity import IdentityVerifier, parse_authorization, precheck_jwt
from tracker_backend.app.errors import AuthError

NOW = 1_700_000_000


def _token(**claims):
    return jwt.encode({"sub": "user-1", **claims}, "not-the-real-secret", algorithm="HS256")


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer tok", "tok"),
        ("Basic abc", None),
        ("Bearer", None),
        ("Bearer a b", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_authorization(header, expected):
    assert parse_authorization(header) == expected


def test_precheck():
    assert precheck_jwt(_token(exp=NOW + 60), now=NOW) is None
    assert precheck_jwt(_token(exp=NOW - 1), now=NOW) == "token_expired"
    assert precheck_jwt("not-a-jwt", now=NOW) == "malformed_token"
    assert precheck_jwt(_token(), now=NOW) is None


def _verify(token, handler, *, jwt_precheck=True):
    seen = []

    def record(request):
        seen.append(request)
        return handler(request)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(record)) as client:
            verifier = IdentityVerifier(
                "https://project.supabase.test",
                "service-key",
                jwt_precheck=jwt_precheck,
                client=client,
                clock=lambda: NOW,
            )
            return await verifier.verify(token)

    return asyncio.run(run()), seen


def test_valid_token_resolves_user():
    token = _token(exp=NOW + 3600)
    user, seen = _verify(token, lambda r: httpx.Response(200, json={"id": "user-1", "email": "a@example.com"}))
    assert user.user_id == "user-1"
    assert user.email == "a@example.com"
    request = seen[0]
    assert request.url.path == "/auth/v1/user"
    assert request.headers["authorization"] == f"Bearer {token}"
    assert request.headers["apikey"] == "service-key"


def test_expired_token_is_rejected_without_network():
    with pytest.raises(AuthError) as exc_info:
        _verify(_token(exp=NOW - 10), lambda r: httpx.Response(200, json={"id": "user-1"}))
    assert exc_info.value.detail == "token_expired"
    assert exc_info.value.status_code == 401


def test_precheck_can_be_disabled():
    user, _ = _verify("opaque-token", lambda r: httpx.Response(200, json={"id": "user-9"}), jwt_precheck=False)
    assert user.user_id == "user-9"


@pytest.mark.parametrize(
    "response,detail",
    [
        (httpx.Response(401, json={"msg": "invalid"}), "identity_rejected:401"),
        (httpx.Response(200, content=b"<html>"), "identity_bad_response"),
        (httpx.Response(200, json={"email": "a@example.com"}), "identity_missing_user"),
    ],
)
def test_identity_provider_rejections(response, detail):
    with pytest.raises(AuthError) as exc_info:
        _verify(_token(exp=NOW + 60), lambda r: response)
    assert exc_info.value.detail == detail


def test_unreachable_identity_provider_fails_closed():
    def boom(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(AuthError) as exc_info:
        _verify(_token(exp=NOW + 60), boom)
    assert exc_info.value.detail.startswith("identity_unreachable")
