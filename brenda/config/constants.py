"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for configuration values and making it easier to
maintain consistent naming throughout the codebase.
"""

# Logger name used throughout the application
LOGGER_NAME = "brenda"

APP_NAME = "Brenda Voice Assistant"
APP_VERSION = "1.0.0"

# OpenAI endpoints
OPENAI_API_BASE = "https://api.openai.com/v1"
OPENAI_REALTIME_SESSIONS_URL = f"{OPENAI_API_BASE}/realtime/sessions"
OPENAI_REALTIME_HTTP_URL = f"{OPENAI_API_BASE}/realtime"
OPENAI_RESPONSES_URL = f"{OPENAI_API_BASE}/responses"
OPENAI_BETA_HEADER = "realtime=v1"

# Provider defaults
DEFAULT_REALTIME_MODEL = "gpt-4o-mini-realtime-preview"
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_VOICE = "alloy"
DEFAULT_REALTIME_INSTRUCTIONS = (
    "You are a helpful voice assistant. Be conversational, friendly, and concise."
)
REALTIME_MODALITIES = ["audio", "text"]
REALTIME_AUDIO_FORMAT = "pcm16"
INPUT_TRANSCRIPTION_MODEL = "whisper-1"

# Session tokens
SESSION_TOKEN_TTL_SECONDS = 10 * 60
ANONYMOUS_USER_ID = "anon"
TOKEN_ALGORITHM = "HS256"

# Upstream error bodies are cut to this many characters
UPSTREAM_DETAIL_LIMIT = 1500

# Chat relay
CHAT_MAX_OUTPUT_TOKENS = 400
CHAT_HISTORY_LIMIT = 12
CHAT_TIMEOUT_SECONDS = 25

# Turn detection policy defaults
DEFAULT_VAD_THRESHOLD = 0.9
DEFAULT_VAD_PREFIX_PADDING_MS = 200
DEFAULT_VAD_SILENCE_DURATION_MS = 900
DEFAULT_RESPONSE_COOLDOWN_MS = 1200

# WebRTC transport
ICE_GATHERING_TIMEOUT = 1.5  # seconds
ICE_SERVERS = ["stun:stun.l.google.com:19302"]
DATA_CHANNEL_LABEL = "oai-events"
ANALYSER_WINDOW = 2048  # samples

# Realtime event types (client -> provider)
EVENT_SESSION_UPDATE = "session.update"
EVENT_RESPONSE_CANCEL = "response.cancel"

# Realtime event types (provider -> client)
EVENT_INPUT_TRANSCRIPTION_COMPLETED = "conversation.item.input_audio_transcription.completed"
EVENT_RESPONSE_CREATED = "response.created"
EVENT_RESPONSE_AUDIO_TRANSCRIPT_DELTA = "response.audio_transcript.delta"
EVENT_RESPONSE_DONE = "response.done"
EVENT_ERROR = "error"
