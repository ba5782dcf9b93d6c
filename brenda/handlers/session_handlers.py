"""
Handlers for the voice session endpoints.

POST /session mints a session token; POST /realtime-key exchanges that token
for a provider-issued ephemeral key. Both check the server configuration
before looking at the request.
"""

import logging
from typing import Optional

from brenda.config.constants import LOGGER_NAME
from brenda.config.settings import Settings
from brenda.errors import ConfigurationError
from brenda.models.api_schemas import (
    RealtimeKeyRequest,
    RealtimeKeyResponse,
    SessionRequest,
    SessionResponse,
)
from brenda.services.ephemeral_keys import issue_ephemeral_key
from brenda.services.session_minting import mint_session_token

logger = logging.getLogger(LOGGER_NAME)


def require_session_secret(settings: Settings) -> str:
    if not settings.session_secret:
        logger.error("VOICE_SESSION_SECRET environment variable not set")
        raise ConfigurationError("VOICE_SESSION_SECRET not set")
    return settings.session_secret


def require_api_key(settings: Settings) -> str:
    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY environment variable not set")
        raise ConfigurationError("OPENAI_API_KEY not set")
    return settings.openai_api_key


async def handle_create_session(request: Optional[SessionRequest], settings: Settings) -> SessionResponse:
    """
    Mint a session token for the caller.

    Args:
        request: Optional body carrying the user id
        settings: Application settings

    Returns:
        SessionResponse: The token and its lifetime in seconds
    """
    secret = require_session_secret(settings)
    user_id = request.userId if request else None
    token, ttl = mint_session_token(user_id, secret)
    return SessionResponse(sessionToken=token, expiresIn=ttl)


async def handle_realtime_key(request: RealtimeKeyRequest, settings: Settings) -> RealtimeKeyResponse:
    """
    Exchange a session token for an ephemeral realtime key.

    Raises:
        ConfigurationError: A provider key or signing secret is missing
        ValidationFailure: No session token in the request
        AuthFailure: The token is malformed, badly signed or expired
        UpstreamError: The provider did not issue a key
    """
    api_key = require_api_key(settings)
    secret = require_session_secret(settings)
    return await issue_ephemeral_key(request, api_key=api_key, secret=secret, settings=settings)
