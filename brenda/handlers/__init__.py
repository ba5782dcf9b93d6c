"""
Request handlers for the Brenda HTTP API.

Each handler takes a validated request model plus the application settings,
checks the server configuration it needs and delegates to the services layer.
Failures are raised as ``BrendaError`` subclasses and rendered by the
application's exception handlers.

Key components:
- session_handlers: POST /session and POST /realtime-key.
- chat_handlers: POST /chat.
"""

from brenda.handlers.chat_handlers import handle_chat
from brenda.handlers.session_handlers import handle_create_session, handle_realtime_key

__all__ = ["handle_chat", "handle_create_session", "handle_realtime_key"]
