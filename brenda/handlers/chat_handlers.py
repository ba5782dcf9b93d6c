"""Handler for the text chat relay endpoint."""

from brenda.config.settings import Settings
from brenda.errors import ValidationFailure
from brenda.handlers.session_handlers import require_api_key
from brenda.models.api_schemas import ChatRequest, ChatResponse
from brenda.services.chat_relay import relay_chat


async def handle_chat(request: ChatRequest, settings: Settings) -> ChatResponse:
    """
    Relay a conversation to the provider and wrap the reply.

    Empty conversations are rejected before the configuration is checked.
    """
    if not request.messages:
        raise ValidationFailure("messages[] required")

    api_key = require_api_key(settings)
    reply = await relay_chat(
        request.localeVariant,
        request.messages,
        api_key=api_key,
        model=settings.chat_model,
    )
    return ChatResponse(reply=reply)
