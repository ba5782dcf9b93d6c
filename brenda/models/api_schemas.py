"""
Pydantic models for the Brenda HTTP API.

Field names follow the JSON bodies exchanged with the browser/client, which
use camelCase keys.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


class SessionRequest(BaseModel):
    """Body of POST /session."""
    userId: Optional[str] = Field(None, description="Caller identifier, anonymous when absent")


class SessionResponse(BaseModel):
    """Minted session token and its lifetime in seconds."""
    sessionToken: str
    expiresIn: int


class RealtimeKeyRequest(BaseModel):
    """Body of POST /realtime-key."""
    sessionToken: Optional[str] = Field(None, description="Token obtained from /session")
    model: Optional[str] = None
    voice: Optional[str] = None
    instructions: Optional[str] = None


class RealtimeKeyResponse(BaseModel):
    """Single-use provider key issued for a realtime session."""
    ephemeralKey: str
    sessionId: Optional[str] = None
    expiresAt: Optional[Union[int, float]] = None
    userId: str


class ChatTurn(BaseModel):
    """One turn of a text conversation."""
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Body of POST /chat."""
    localeVariant: Optional[str] = "en-US"
    messages: List[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    reply: str
