"""
Events delivered by the voice transport client to its listeners.

The client reports everything through a single dispatch function; listeners
receive one of the event variants below and branch on ``kind``.
"""

from enum import Enum
from typing import Literal, Union

import numpy as np
from pydantic import BaseModel, ConfigDict


class ConnectionStatus(str, Enum):
    """Lifecycle states of a voice session."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    SPEAKING = "speaking"
    ERROR = "error"


class TranscriptRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class StatusEvent(BaseModel):
    """The session moved to a new status."""
    kind: Literal["status"] = "status"
    status: ConnectionStatus


class TranscriptEvent(BaseModel):
    """
    Transcript text as received from the provider.

    User entries are complete utterances; assistant entries are incremental
    deltas to be appended by the listener.
    """
    kind: Literal["transcript"] = "transcript"
    role: TranscriptRole
    text: str


class AudioLevelEvent(BaseModel):
    """A window of microphone samples in the range -1..1."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["audio"] = "audio"
    samples: np.ndarray


class ErrorEvent(BaseModel):
    """A failure surfaced to the UI layer."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: Literal["error"] = "error"
    message: str
    error: Exception


VoiceEvent = Union[StatusEvent, TranscriptEvent, AudioLevelEvent, ErrorEvent]
