"""
Unit tests for the session token codec.

These tests verify signing and verification of compact HS256 tokens and the
three distinct verification failures: malformed, bad signature and expired.
"""

import json

import pytest
from jose.utils import base64url_decode, base64url_encode

from brenda.errors import AuthFailure
from brenda.models.claims import SessionClaims
from brenda.services import token_codec
from brenda.services.token_codec import BadSignature, MalformedToken, TokenExpired

NOW = 1_700_000_000


@pytest.fixture
def claims():
    return SessionClaims(user_id="user-42", issued_at=NOW, expires_at=NOW + 600)


def _flip(ch: str) -> str:
    return "A" if ch != "A" else "B"


def test_sign_then_verify_returns_claims(claims, secret):
    token = token_codec.sign(claims, secret)
    assert token_codec.verify(token, secret, now=NOW) == claims


def test_claims_without_expiry_round_trip(secret):
    claims = SessionClaims(user_id="anon", issued_at=NOW)
    token = token_codec.sign(claims, secret)

    verified = token_codec.verify(token, secret, now=NOW + 10 ** 6)
    assert verified == claims
    assert verified.expires_at is None


def test_token_wire_format(claims, secret):
    token = token_codec.sign(claims, secret)
    header, payload, signature = token.split(".")

    assert json.loads(base64url_decode(header.encode())) == {"alg": "HS256", "typ": "JWT"}
    assert json.loads(base64url_decode(payload.encode())) == {"uid": "user-42", "iat": NOW, "exp": NOW + 600}
    assert "=" not in signature


def test_flipping_any_signature_character_fails(claims, secret):
    token = token_codec.sign(claims, secret)
    header, payload, signature = token.split(".")

    for i, ch in enumerate(signature):
        tampered = signature[:i] + _flip(ch) + signature[i + 1:]
        with pytest.raises(BadSignature):
            token_codec.verify(f"{header}.{payload}.{tampered}", secret, now=NOW)


def test_tampered_payload_fails_signature(claims, secret):
    token = token_codec.sign(claims, secret)
    header, _, signature = token.split(".")
    forged = base64url_encode(json.dumps({"uid": "admin", "iat": NOW, "exp": NOW + 600}).encode()).decode()

    with pytest.raises(BadSignature):
        token_codec.verify(f"{header}.{forged}.{signature}", secret, now=NOW)


def test_wrong_secret_fails_signature(claims, secret):
    token = token_codec.sign(claims, secret)
    with pytest.raises(BadSignature):
        token_codec.verify(token, "another-secret", now=NOW)


def test_non_ascii_signature_fails_signature(claims, secret):
    header, payload, _ = token_codec.sign(claims, secret).split(".")
    with pytest.raises(BadSignature):
        token_codec.verify(f"{header}.{payload}.sïgnature", secret, now=NOW)


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "...."])
def test_wrong_segment_count_is_malformed(token, secret):
    with pytest.raises(MalformedToken):
        token_codec.verify(token, secret, now=NOW)


def test_signed_garbage_payload_is_malformed(secret):
    header = base64url_encode(b'{"alg":"HS256","typ":"JWT"}').decode()
    payload = base64url_encode(b"not json").decode()
    signature = token_codec._signature(f"{header}.{payload}", secret)

    with pytest.raises(MalformedToken):
        token_codec.verify(f"{header}.{payload}.{signature}", secret, now=NOW)


def test_signed_payload_missing_user_is_malformed(secret):
    header = base64url_encode(b'{"alg":"HS256","typ":"JWT"}').decode()
    payload = base64url_encode(json.dumps({"iat": NOW}).encode()).decode()
    signature = token_codec._signature(f"{header}.{payload}", secret)

    with pytest.raises(MalformedToken):
        token_codec.verify(f"{header}.{payload}.{signature}", secret, now=NOW)


def test_expired_token_fails_even_with_valid_signature(secret):
    claims = SessionClaims(user_id="user-42", issued_at=NOW - 1200, expires_at=NOW - 600)
    token = token_codec.sign(claims, secret)

    with pytest.raises(TokenExpired):
        token_codec.verify(token, secret, now=NOW)


def test_token_is_valid_at_exact_expiry(claims, secret):
    token = token_codec.sign(claims, secret)
    assert token_codec.verify(token, secret, now=NOW + 600) == claims
    with pytest.raises(TokenExpired):
        token_codec.verify(token, secret, now=NOW + 601)


def test_token_errors_are_tagged_auth_failures():
    errors = [MalformedToken(), BadSignature(), TokenExpired()]

    assert [e.reason for e in errors] == ["malformed", "bad_signature", "expired"]
    assert [e.message for e in errors] == ["Bad token", "Bad signature", "Expired token"]
    for error in errors:
        assert isinstance(error, AuthFailure)
        assert error.status_code == 401
        assert error.to_response() == {"error": error.message}


def test_claims_without_issued_at_verify(secret):
    header = base64url_encode(b'{"alg":"HS256","typ":"JWT"}').decode()
    payload = base64url_encode(json.dumps({"uid": "user-42", "exp": NOW + 60}).encode()).decode()
    signature = token_codec._signature(f"{header}.{payload}", secret)

    claims = token_codec.verify(f"{header}.{payload}.{signature}", secret, now=NOW)

    assert claims.user_id == "user-42"
    assert claims.issued_at is None
    assert claims.to_wire() == {"uid": "user-42", "exp": NOW + 60}
