"""
Compact signed session tokens.

Tokens are HS256 JSON Web Tokens: three dot-separated base64url segments
(header, claims, signature). Nothing is stored server-side; a token is valid
as long as its signature matches and its expiry has not passed.
"""

import hmac
import json
import logging
import time
from typing import Optional

from jose import jwk, jwt
from jose.utils import base64url_decode, base64url_encode
from pydantic import ValidationError

from brenda.config.constants import LOGGER_NAME, TOKEN_ALGORITHM
from brenda.errors import AuthFailure
from brenda.models.claims import SessionClaims

logger = logging.getLogger(LOGGER_NAME)


class TokenError(AuthFailure):
    """Base class for token verification failures."""

    reason = "invalid"

    def __init__(self, message: str):
        super().__init__(message)


class MalformedToken(TokenError):
    reason = "malformed"

    def __init__(self):
        super().__init__("Bad token")


class BadSignature(TokenError):
    reason = "bad_signature"

    def __init__(self):
        super().__init__("Bad signature")


class TokenExpired(TokenError):
    reason = "expired"

    def __init__(self):
        super().__init__("Expired token")


def _signature(signing_input: str, secret: str) -> str:
    key = jwk.construct(secret, TOKEN_ALGORITHM)
    return base64url_encode(key.sign(signing_input.encode("utf-8"))).decode("ascii")


def sign(claims: SessionClaims, secret: str) -> str:
    """
    Sign a claims payload.

    Args:
        claims: The claims to embed
        secret: Symmetric signing secret

    Returns:
        str: The compact token
    """
    return jwt.encode(claims.to_wire(), secret, algorithm=TOKEN_ALGORITHM)


def verify(token: str, secret: str, now: Optional[int] = None) -> SessionClaims:
    """
    Verify a token and return its claims.

    Args:
        token: Compact token produced by ``sign``
        secret: Symmetric signing secret
        now: Current epoch seconds (defaults to the system clock)

    Returns:
        SessionClaims: The decoded claims

    Raises:
        MalformedToken: The token is not three segments or its claims cannot be decoded
        BadSignature: The signature segment does not match the recomputed one
        TokenExpired: The token carries an expiry that is in the past
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedToken()

    header, payload, signature = parts
    # Compare the encoded segments, not the decoded bytes, so that every
    # altered character is rejected.
    expected = _signature(f"{header}.{payload}", secret)
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
        raise BadSignature()

    try:
        data = json.loads(base64url_decode(payload.encode("ascii")))
        claims = SessionClaims.model_validate(data)
    except (ValueError, UnicodeError, ValidationError) as e:
        logger.debug(f"Undecodable token payload: {e}")
        raise MalformedToken() from e

    if now is None:
        now = int(time.time())
    if claims.expires_at and now > claims.expires_at:
        raise TokenExpired()

    return claims
