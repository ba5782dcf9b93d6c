"""Issue short-lived voice session tokens."""

import logging
import time
from typing import Optional, Tuple

from brenda.config.constants import ANONYMOUS_USER_ID, LOGGER_NAME, SESSION_TOKEN_TTL_SECONDS
from brenda.models.claims import SessionClaims
from brenda.services import token_codec

logger = logging.getLogger(LOGGER_NAME)


def mint_session_token(
    user_id: Optional[str],
    secret: str,
    ttl_seconds: int = SESSION_TOKEN_TTL_SECONDS,
    now: Optional[int] = None,
) -> Tuple[str, int]:
    """
    Mint a session token bound to a user.

    Args:
        user_id: Requesting user, anonymous when empty
        secret: Symmetric signing secret
        ttl_seconds: Token lifetime
        now: Current epoch seconds (defaults to the system clock)

    Returns:
        Tuple of the signed token and its lifetime in seconds
    """
    if now is None:
        now = int(time.time())
    claims = SessionClaims(
        user_id=user_id or ANONYMOUS_USER_ID,
        issued_at=now,
        expires_at=now + ttl_seconds,
    )
    logger.info(f"Minted session token for user {claims.user_id} (ttl {ttl_seconds}s)")
    return token_codec.sign(claims, secret), ttl_seconds
