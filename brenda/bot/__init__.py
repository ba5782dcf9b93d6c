"""
Bot module for the browser-side half of the Brenda assistant.

This module holds the client that talks to the provider directly once the
backend has issued an ephemeral key, plus the text chat front-end.

Key components:
- VoiceAgent: WebRTC transport client. Captures the microphone, negotiates a
  peer connection with the provider using the ephemeral key, exchanges control
  events over a data channel and reports status, transcript, audio level and
  error events to its listeners.
- ResponseGate: Keeps at most one provider response in flight and enforces a
  cooldown between responses; overlapping responses are cancelled.
- media: Microphone capture, waveform sampling and remote audio sinks.
- TextChat: Text conversation with bounded history sent to the chat relay.

Usage examples:
```python
import asyncio

from brenda.bot import VoiceAgent
from brenda.services.backend_client import BrendaBackendClient

async def talk():
    agent = VoiceAgent(BrendaBackendClient("http://localhost:8000"))
    agent.subscribe(lambda event: print(event.kind, event))
    await agent.connect(locale_variant="en-GB")
    await asyncio.sleep(60)
    await agent.disconnect()

asyncio.run(talk())
```
"""

from brenda.bot.response_gate import ResponseGate
from brenda.bot.text_chat import TextChat
from brenda.bot.voice_agent import VoiceAgent

__all__ = ["VoiceAgent", "ResponseGate", "TextChat"]
