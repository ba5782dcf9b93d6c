"""
Thin HTTP client for the OpenAI endpoints used by Brenda.

Calls are made with ``requests`` on a worker thread so the event loop stays
responsive while a request is in flight. Responses are returned as-is; the
calling service decides what counts as a failure.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from brenda.config.constants import (
    LOGGER_NAME,
    OPENAI_BETA_HEADER,
    OPENAI_REALTIME_HTTP_URL,
    OPENAI_REALTIME_SESSIONS_URL,
    OPENAI_RESPONSES_URL,
)

logger = logging.getLogger(LOGGER_NAME)


def _headers(api_key: str, content_type: str = "application/json", beta: bool = True) -> Dict[str, str]:
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": content_type,
    }
    if beta:
        headers["OpenAI-Beta"] = OPENAI_BETA_HEADER
    return headers


async def create_realtime_session(api_key: str, payload: Dict[str, Any]) -> requests.Response:
    """
    Create a realtime session and its single-use client secret.

    Args:
        api_key: Long-lived provider API key
        payload: Session configuration (model, voice, instructions, audio formats, turn detection)

    Returns:
        requests.Response: The provider response
    """
    logger.debug(f"POST {OPENAI_REALTIME_SESSIONS_URL} (Authorization: Bearer [API_KEY_HIDDEN])")
    return await asyncio.to_thread(
        requests.post,
        OPENAI_REALTIME_SESSIONS_URL,
        headers=_headers(api_key),
        json=payload,
    )


async def create_response(
    api_key: str, payload: Dict[str, Any], timeout: Optional[float] = None
) -> requests.Response:
    """Request a text response from the Responses endpoint."""
    logger.debug(f"POST {OPENAI_RESPONSES_URL} (model: {payload.get('model')})")
    return await asyncio.to_thread(
        requests.post,
        OPENAI_RESPONSES_URL,
        headers=_headers(api_key, beta=False),
        json=payload,
        timeout=timeout,
    )


async def exchange_sdp(ephemeral_key: str, model: str, offer_sdp: str) -> requests.Response:
    """
    Send a local SDP offer to the realtime endpoint.

    Args:
        ephemeral_key: Single-use key minted by the backend
        model: Realtime model name
        offer_sdp: Local session description

    Returns:
        requests.Response: The provider response; its body is the SDP answer on success
    """
    logger.debug(f"POST {OPENAI_REALTIME_HTTP_URL}?model={model} ({len(offer_sdp)} bytes of SDP)")
    return await asyncio.to_thread(
        requests.post,
        OPENAI_REALTIME_HTTP_URL,
        params={"model": model},
        headers=_headers(ephemeral_key, content_type="application/sdp"),
        data=offer_sdp,
    )
