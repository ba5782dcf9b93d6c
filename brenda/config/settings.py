"""
Environment-backed settings for the backend and the transport client.

Secrets are optional at load time: the request handlers decide which ones
they need and report the missing ones per request.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field

from brenda.config.constants import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_REALTIME_INSTRUCTIONS,
    DEFAULT_REALTIME_MODEL,
    DEFAULT_RESPONSE_COOLDOWN_MS,
    DEFAULT_VAD_PREFIX_PADDING_MS,
    DEFAULT_VAD_SILENCE_DURATION_MS,
    DEFAULT_VAD_THRESHOLD,
    DEFAULT_VOICE,
)


class TurnDetectionPolicy(BaseModel):
    """Server-side voice activity detection settings sent to the provider."""

    threshold: float = Field(DEFAULT_VAD_THRESHOLD, ge=0.0, le=1.0)
    prefix_padding_ms: int = Field(DEFAULT_VAD_PREFIX_PADDING_MS, ge=0)
    silence_duration_ms: int = Field(DEFAULT_VAD_SILENCE_DURATION_MS, ge=0)

    def to_payload(self) -> dict:
        return {
            "type": "server_vad",
            "threshold": self.threshold,
            "prefix_padding_ms": self.prefix_padding_ms,
            "silence_duration_ms": self.silence_duration_ms,
            "create_response": True,
            "interrupt_response": True,
        }


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    openai_api_key: Optional[str] = None
    session_secret: Optional[str] = None

    realtime_model: str = DEFAULT_REALTIME_MODEL
    voice: str = DEFAULT_VOICE
    realtime_instructions: str = DEFAULT_REALTIME_INSTRUCTIONS
    chat_model: str = DEFAULT_CHAT_MODEL

    turn_detection: TurnDetectionPolicy = Field(default_factory=TurnDetectionPolicy)
    response_cooldown_ms: int = Field(DEFAULT_RESPONSE_COOLDOWN_MS, ge=0)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def load_settings() -> Settings:
    """Build settings from the current process environment."""
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        session_secret=os.getenv("VOICE_SESSION_SECRET") or None,
        realtime_model=os.getenv("OPENAI_REALTIME_MODEL") or DEFAULT_REALTIME_MODEL,
        voice=os.getenv("OPENAI_VOICE") or DEFAULT_VOICE,
        realtime_instructions=os.getenv("OPENAI_REALTIME_INSTRUCTIONS") or DEFAULT_REALTIME_INSTRUCTIONS,
        chat_model=os.getenv("OPENAI_CHAT_MODEL") or DEFAULT_CHAT_MODEL,
        turn_detection=TurnDetectionPolicy(
            threshold=_env_float("BRENDA_VAD_THRESHOLD", DEFAULT_VAD_THRESHOLD),
            prefix_padding_ms=_env_int("BRENDA_VAD_PREFIX_PADDING_MS", DEFAULT_VAD_PREFIX_PADDING_MS),
            silence_duration_ms=_env_int("BRENDA_VAD_SILENCE_DURATION_MS", DEFAULT_VAD_SILENCE_DURATION_MS),
        ),
        response_cooldown_ms=_env_int("BRENDA_RESPONSE_COOLDOWN_MS", DEFAULT_RESPONSE_COOLDOWN_MS),
    )
