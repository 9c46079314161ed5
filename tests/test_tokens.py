"""Tests for session token issuing and verification."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from jose import jwt

from jobtrack.auth.tokens import SessionIssuer
from jobtrack.config import AuthSettings
from jobtrack.errors import AuthenticationError

AUTH = AuthSettings(secret_key="unit-test-secret", algorithm="HS256", token_lifetime_minutes=60)
USER = SimpleNamespace(id=42, name="Alice")


def _mutate_signature(token: str) -> str:
    header, payload, signature = token.split(".")
    # Middle characters carry six full bits, so any change alters the signature bytes.
    index = len(signature) // 2
    replacement = "A" if signature[index] != "A" else "B"
    return ".".join([header, payload, signature[:index] + replacement + signature[index + 1:]])


def test_issue_then_verify_returns_claims():
    issuer = SessionIssuer(AUTH)

    claims = issuer.verify(issuer.issue(USER))

    assert claims.user_id == 42
    assert claims.name == "Alice"
    assert claims.exp > claims.iat


def test_token_embeds_user_id_name_and_expiry():
    token = SessionIssuer(AUTH).issue(USER)

    payload = jwt.get_unverified_claims(token)

    assert payload["userId"] == 42
    assert payload["name"] == "Alice"
    assert payload["exp"] - payload["iat"] == 3600


def test_expired_token_is_rejected():
    issuer = SessionIssuer(AUTH, lifetime=timedelta(seconds=-10))

    with pytest.raises(AuthenticationError):
        issuer.verify(issuer.issue(USER))


def test_mutated_signature_is_rejected():
    issuer = SessionIssuer(AUTH)
    token = issuer.issue(USER)

    with pytest.raises(AuthenticationError):
        issuer.verify(_mutate_signature(token))


def test_token_signed_with_other_secret_is_rejected():
    other = SessionIssuer(AuthSettings(secret_key="someone-else"))

    with pytest.raises(AuthenticationError):
        SessionIssuer(AUTH).verify(other.issue(USER))


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(AuthenticationError):
        SessionIssuer(AUTH).verify(token)


def test_token_without_identity_claims_is_rejected():
    token = jwt.encode({"sub": "42"}, AUTH.secret_key, algorithm=AUTH.algorithm)

    with pytest.raises(AuthenticationError):
        SessionIssuer(AUTH).verify(token)


def test_verified_times_are_utc():
    before = datetime.now(timezone.utc)
    claims = SessionIssuer(AUTH).verify(SessionIssuer(AUTH).issue(USER))

    assert claims.iat.tzinfo is not None
    assert abs(claims.iat - before) < timedelta(seconds=2)
    assert claims.exp - claims.iat == timedelta(hours=1)
