import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from brenda.config.settings import Settings, TurnDetectionPolicy, load_settings


def test_defaults_from_empty_environment():
    with patch.dict(os.environ, {}, clear=True):
        settings = load_settings()

    assert settings.openai_api_key is None
    assert settings.session_secret is None
    assert settings.realtime_model == "gpt-4o-mini-realtime-preview"
    assert settings.chat_model == "gpt-4o-mini"
    assert settings.voice == "alloy"
    assert settings.response_cooldown_ms == 1200
    assert settings.turn_detection == TurnDetectionPolicy(
        threshold=0.9, prefix_padding_ms=200, silence_duration_ms=900
    )


def test_environment_overrides():
    env = {
        "OPENAI_API_KEY": "sk-env",
        "VOICE_SESSION_SECRET": "s3cret",
        "OPENAI_REALTIME_MODEL": "gpt-realtime",
        "OPENAI_VOICE": "verse",
        "OPENAI_CHAT_MODEL": "gpt-4.1-mini",
        "BRENDA_RESPONSE_COOLDOWN_MS": "500",
        "BRENDA_VAD_THRESHOLD": "0.6",
        "BRENDA_VAD_SILENCE_DURATION_MS": "700",
    }
    with patch.dict(os.environ, env, clear=True):
        settings = load_settings()

    assert settings.openai_api_key == "sk-env"
    assert settings.session_secret == "s3cret"
    assert settings.realtime_model == "gpt-realtime"
    assert settings.voice == "verse"
    assert settings.chat_model == "gpt-4.1-mini"
    assert settings.response_cooldown_ms == 500
    assert settings.turn_detection.threshold == 0.6
    assert settings.turn_detection.silence_duration_ms == 700
    assert settings.turn_detection.prefix_padding_ms == 200


def test_empty_secret_is_unset():
    with patch.dict(os.environ, {"VOICE_SESSION_SECRET": ""}, clear=True):
        assert load_settings().session_secret is None


def test_threshold_out_of_range():
    with pytest.raises(ValidationError):
        TurnDetectionPolicy(threshold=1.5)


def test_negative_cooldown_rejected():
    with pytest.raises(ValidationError):
        Settings(response_cooldown_ms=-1)
