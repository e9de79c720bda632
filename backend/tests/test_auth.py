from types import SimpleNamespace

import jwt
import pytest
from starlette.requests import Request

from superfocus.core import auth
from superfocus.core.errors import AuthenticationError, UpstreamError
from superfocus.core.rate_limit import get_identifier, user_id_from_authorization


def fake_supabase(get_user):
    return SimpleNamespace(auth=SimpleNamespace(get_user=get_user))


def test_verify_token_returns_user(monkeypatch):
    user = SimpleNamespace(id="abc", email="kid@example.com")
    monkeypatch.setattr(auth, "get_supabase_anon_client", lambda: fake_supabase(lambda token: SimpleNamespace(user=user)))

    assert auth.verify_token("token") == auth.AuthenticatedUser(id="abc", email="kid@example.com")


def test_rejected_token_is_authentication_error(monkeypatch):
    def reject(token):
        raise RuntimeError("invalid JWT")

    monkeypatch.setattr(auth, "get_supabase_anon_client", lambda: fake_supabase(reject))

    with pytest.raises(AuthenticationError):
        auth.verify_token("token")


def test_missing_user_is_authentication_error(monkeypatch):
    monkeypatch.setattr(auth, "get_supabase_anon_client", lambda: fake_supabase(lambda token: SimpleNamespace(user=None)))

    with pytest.raises(AuthenticationError):
        auth.verify_token("token")


def test_unconfigured_supabase_is_upstream_error():
    with pytest.raises(UpstreamError):
        auth.verify_token("token")


def make_request(headers=None, client=("198.51.100.4", 1234)):
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(key.encode(), value.encode()) for key, value in (headers or {}).items()],
        "client": client,
    })


SIGNING_SECRET = "a-test-signing-secret-that-is-long-enough"


def test_identifier_prefers_token_subject(monkeypatch):
    monkeypatch.setenv("SUPABASE_JWT_SECRET", SIGNING_SECRET)
    token = jwt.encode({"sub": "user-9"}, SIGNING_SECRET, algorithm="HS256")

    assert user_id_from_authorization(f"Bearer {token}") == "user-9"
    assert get_identifier(make_request({"authorization": f"Bearer {token}"})) == "user:user-9"


def test_identifier_ignores_unverified_tokens(monkeypatch):
    monkeypatch.setenv("SUPABASE_JWT_SECRET", SIGNING_SECRET)
    unsigned = jwt.encode({"sub": "user-9"}, None, algorithm="none")
    wrong_key = jwt.encode({"sub": "user-9"}, "some-other-secret-that-is-also-long-enough", algorithm="HS256")

    for token in (unsigned, wrong_key):
        headers = {"authorization": f"Bearer {token}", "x-real-ip": "192.0.2.1"}
        assert user_id_from_authorization(f"Bearer {token}") is None
        assert get_identifier(make_request(headers)) == "ip:192.0.2.1"


def test_identifier_uses_ip_when_no_jwt_secret_is_configured():
    token = jwt.encode({"sub": "user-9"}, SIGNING_SECRET, algorithm="HS256")

    assert get_identifier(make_request({"authorization": f"Bearer {token}"})) == "ip:198.51.100.4"


def test_identifier_falls_back_to_ip():
    assert get_identifier(make_request({"x-real-ip": "192.0.2.1"})) == "ip:192.0.2.1"
    assert get_identifier(make_request()) == "ip:198.51.100.4"
    assert user_id_from_authorization("Bearer not-a-jwt") is None
