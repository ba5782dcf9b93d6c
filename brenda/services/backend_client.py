"""
Client for the Brenda backend endpoints.

Used by the voice transport client to mint ephemeral keys and by the text
chat front-end to relay messages. The browser-facing surface never sees the
provider API key; it only holds session tokens and ephemeral keys.
"""

import asyncio
import logging
from typing import Optional, Sequence

import requests

from brenda.config.constants import (
    ANONYMOUS_USER_ID,
    CHAT_TIMEOUT_SECONDS,
    DEFAULT_REALTIME_MODEL,
    DEFAULT_VOICE,
    LOGGER_NAME,
)
from brenda.errors import BackendRequestError
from brenda.locales import voice_instructions
from brenda.models.api_schemas import ChatTurn

logger = logging.getLogger(LOGGER_NAME)


class BrendaBackendClient:
    """
    HTTP client for /session, /realtime-key and /chat.
    """

    def __init__(self, base_url: str, chat_timeout: float = CHAT_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.chat_timeout = chat_timeout

    async def _post(self, path: str, payload: dict, timeout: Optional[float] = None) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = await asyncio.to_thread(requests.post, url, json=payload, timeout=timeout)
        except requests.Timeout as e:
            raise BackendRequestError(f"Request to {path} timed out") from e
        except requests.RequestException as e:
            raise BackendRequestError(f"Request to {path} failed: {e}") from e

        if not response.ok:
            raise BackendRequestError(
                f"Request to {path} failed ({response.status_code})",
                status=response.status_code,
                detail=response.text,
            )
        try:
            return response.json()
        except ValueError as e:
            raise BackendRequestError(f"Invalid JSON from {path}") from e

    async def create_session(self, user_id: str = ANONYMOUS_USER_ID) -> str:
        """Mint a session token for ``user_id``."""
        data = await self._post("/session", {"userId": user_id})
        token = data.get("sessionToken")
        if not token:
            raise BackendRequestError("Voice session did not return sessionToken")
        return token

    async def request_realtime_key(
        self,
        session_token: str,
        model: Optional[str] = None,
        voice: Optional[str] = None,
        instructions: Optional[str] = None,
    ) -> str:
        """Exchange a session token for an ephemeral realtime key."""
        data = await self._post(
            "/realtime-key",
            {
                "sessionToken": session_token,
                "model": model,
                "voice": voice,
                "instructions": instructions,
            },
        )
        ephemeral_key = data.get("ephemeralKey")
        if not ephemeral_key:
            raise BackendRequestError("No ephemeralKey returned from server")
        return ephemeral_key

    async def mint_ephemeral_key(
        self,
        user_id: str = ANONYMOUS_USER_ID,
        locale_variant: str = "en-US",
        model: str = DEFAULT_REALTIME_MODEL,
        voice: str = DEFAULT_VOICE,
    ) -> str:
        """
        Run the full token handshake: mint a session token, then exchange it.

        Args:
            user_id: Identifier bound into the session token
            locale_variant: Locale whose voice instructions configure the session
            model: Realtime model name
            voice: Provider voice name

        Returns:
            str: The ephemeral key to use as bearer credential for the SDP exchange
        """
        token = await self.create_session(user_id)
        logger.debug("Session token minted, requesting ephemeral key")
        return await self.request_realtime_key(
            token,
            model=model,
            voice=voice,
            instructions=voice_instructions(locale_variant),
        )

    async def chat(self, locale_variant: str, messages: Sequence[ChatTurn]) -> str:
        """
        Send a conversation to /chat and return the reply.

        Raises:
            BackendRequestError: The request failed, timed out or returned no reply
        """
        data = await self._post(
            "/chat",
            {
                "localeVariant": locale_variant,
                "messages": [turn.model_dump() for turn in messages],
            },
            timeout=self.chat_timeout,
        )
        reply = data.get("reply")
        if not reply:
            raise BackendRequestError("No reply returned")
        return reply
