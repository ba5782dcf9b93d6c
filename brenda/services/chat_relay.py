"""
Relay text conversations to the OpenAI Responses endpoint.

The locale persona is prepended as a system instruction; the provider's
answer is returned as plain text. Failures are reported once and never retried.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from brenda.config.constants import (
    CHAT_MAX_OUTPUT_TOKENS,
    CHAT_TIMEOUT_SECONDS,
    LOGGER_NAME,
    UPSTREAM_DETAIL_LIMIT,
)
from brenda.errors import RelayError, ValidationFailure
from brenda.locales import chat_persona
from brenda.models.api_schemas import ChatTurn
from brenda.services import openai_client

logger = logging.getLogger(LOGGER_NAME)


def build_input(locale_variant: Optional[str], turns: Sequence[ChatTurn]) -> List[Dict[str, str]]:
    """Persona instruction followed by the conversation turns."""
    messages = [{"role": "system", "content": chat_persona(locale_variant)}]
    messages.extend({"role": turn.role, "content": turn.content} for turn in turns)
    return messages


def extract_output_text(data: Any) -> str:
    """
    Pull the generated text out of a Responses API body.

    Uses the ``output_text`` shortcut when present, otherwise joins the
    ``output_text`` parts of every message item. Returns an empty string
    when the body holds no text.
    """
    if not isinstance(data, dict):
        return ""
    if isinstance(data.get("output_text"), str):
        return data["output_text"]

    parts = []
    for item in data.get("output") or []:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        for content in item.get("content") or []:
            if isinstance(content, dict) and content.get("type") == "output_text":
                parts.append(content.get("text") or "")
    return "".join(parts)


async def relay_chat(
    locale_variant: Optional[str],
    turns: Sequence[ChatTurn],
    api_key: str,
    model: str,
    timeout: float = CHAT_TIMEOUT_SECONDS,
) -> str:
    """
    Forward a conversation to the provider and return the reply text.

    Args:
        locale_variant: Locale tag selecting the persona (unknown tags use en-US)
        turns: Non-empty ordered conversation turns
        api_key: Provider API key
        model: Text model name
        timeout: Seconds to wait for the provider

    Returns:
        str: The generated reply, or an empty string when the provider returned no text

    Raises:
        ValidationFailure: ``turns`` is empty
        RelayError: The provider call failed
    """
    if not turns:
        raise ValidationFailure("messages[] required")

    payload = {
        "model": model,
        "input": build_input(locale_variant, turns),
        "max_output_tokens": CHAT_MAX_OUTPUT_TOKENS,
    }
    logger.info(f"Relaying {len(turns)} turn(s) to {model} (locale: {locale_variant})")

    try:
        response = await openai_client.create_response(api_key, payload, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Chat relay request failed: {e}")
        raise RelayError("Chat failed", detail=str(e)[:UPSTREAM_DETAIL_LIMIT]) from e

    if not response.ok:
        logger.error(f"Chat relay rejected by provider: {response.status_code}")
        raise RelayError(
            "Chat failed",
            detail=f"{response.status_code}: {response.text[:UPSTREAM_DETAIL_LIMIT]}",
        )

    try:
        data = response.json()
    except ValueError as e:
        raise RelayError("Chat failed", detail="Provider returned invalid JSON") from e

    return extract_output_text(data)
