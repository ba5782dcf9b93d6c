"""
Exchange a session token for a single-use realtime key.

The long-lived provider key never leaves the server: the caller only ever
receives the ephemeral client secret the provider issues for one session.
"""

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from brenda.config.constants import (
    LOGGER_NAME,
    REALTIME_AUDIO_FORMAT,
    REALTIME_MODALITIES,
    UPSTREAM_DETAIL_LIMIT,
)
from brenda.config.settings import Settings
from brenda.errors import UpstreamError, ValidationFailure
from brenda.models.api_schemas import RealtimeKeyRequest, RealtimeKeyResponse
from brenda.services import openai_client, token_codec

logger = logging.getLogger(LOGGER_NAME)


def build_session_payload(model: str, voice: str, instructions: str, settings: Settings) -> Dict[str, Any]:
    """Session configuration sent to the provider. Turn detection is fixed policy."""
    return {
        "model": model,
        "modalities": list(REALTIME_MODALITIES),
        "voice": voice,
        "input_audio_format": REALTIME_AUDIO_FORMAT,
        "output_audio_format": REALTIME_AUDIO_FORMAT,
        "instructions": instructions,
        "turn_detection": settings.turn_detection.to_payload(),
    }


async def issue_ephemeral_key(
    request: RealtimeKeyRequest,
    api_key: str,
    secret: str,
    settings: Settings,
    now: Optional[int] = None,
) -> RealtimeKeyResponse:
    """
    Verify a session token and obtain a realtime key for its holder.

    Args:
        request: Token plus optional model/voice/instructions overrides
        api_key: Provider API key used for the session request
        secret: Signing secret the token was minted with
        settings: Defaults for model, voice, instructions and the turn-detection policy
        now: Current epoch seconds used for the expiry check

    Returns:
        RealtimeKeyResponse: The ephemeral key, session id, its expiry and the verified user id

    Raises:
        ValidationFailure: No token was supplied
        TokenError: The token failed verification
        UpstreamError: The provider could not be reached or did not issue a key
    """
    if not request.sessionToken:
        raise ValidationFailure("sessionToken is required")

    claims = token_codec.verify(request.sessionToken, secret, now=now)

    payload = build_session_payload(
        model=request.model or settings.realtime_model,
        voice=request.voice or settings.voice,
        instructions=request.instructions or settings.realtime_instructions,
        settings=settings,
    )
    logger.info(f"Requesting realtime session for user {claims.user_id} (model: {payload['model']})")

    try:
        response = await openai_client.create_realtime_session(api_key, payload)
    except requests.RequestException as e:
        logger.error(f"Realtime session request failed: {e}")
        raise UpstreamError("OpenAI request failed", detail=str(e)[:UPSTREAM_DETAIL_LIMIT]) from e

    text = response.text
    if not response.ok:
        logger.warning(f"OpenAI rejected realtime session request: {response.status_code}")
        raise UpstreamError("OpenAI error", status=response.status_code, detail=text[:UPSTREAM_DETAIL_LIMIT])

    try:
        data = response.json()
    except ValueError:
        data = None

    client_secret = data.get("client_secret") if isinstance(data, dict) else None
    ephemeral_key = client_secret.get("value") if isinstance(client_secret, dict) else None
    if not ephemeral_key:
        logger.warning("OpenAI response did not include a client secret")
        raise UpstreamError("No client_secret", detail=text[:UPSTREAM_DETAIL_LIMIT])

    try:
        result = RealtimeKeyResponse(
            ephemeralKey=ephemeral_key,
            sessionId=data.get("id"),
            expiresAt=client_secret.get("expires_at") or None,
            userId=claims.user_id,
        )
    except ValidationError as e:
        logger.warning(f"Unexpected realtime session response: {e}")
        raise UpstreamError("Invalid session response", detail=text[:UPSTREAM_DETAIL_LIMIT]) from e

    logger.info(f"Issued ephemeral key for session {result.sessionId}")
    return result
