"""
Models module for data structures and state management in the Brenda assistant.

Key components:
- api_schemas: Pydantic models for the JSON bodies of /session, /realtime-key
  and /chat.
- claims: The claims payload carried by signed voice session tokens.
- realtime_events: Connection status values and the closed set of events the
  voice transport client delivers to its listeners.
- conversation: Append-only text chat history with a bounded request window.

Usage examples:
```python
from brenda.models.conversation import ConversationHistory

history = ConversationHistory()
history.add_user("Hola")
payload = [turn.model_dump() for turn in history.window()]
```
"""

from brenda.models.api_schemas import (
    ChatRequest,
    ChatResponse,
    ChatTurn,
    RealtimeKeyRequest,
    RealtimeKeyResponse,
    SessionRequest,
    SessionResponse,
)
from brenda.models.claims import SessionClaims
from brenda.models.conversation import ConversationHistory
from brenda.models.realtime_events import (
    AudioLevelEvent,
    ConnectionStatus,
    ErrorEvent,
    StatusEvent,
    TranscriptEvent,
    TranscriptRole,
    VoiceEvent,
)
