"""
Text chat front-end logic.

Keeps the conversation history and sends each new user message, together
with the recent turns, to the backend chat relay.
"""

import logging
from typing import Optional

from brenda.config.constants import LOGGER_NAME
from brenda.errors import BrendaError, ValidationFailure
from brenda.models.api_schemas import ChatTurn
from brenda.models.conversation import ConversationHistory
from brenda.services.backend_client import BrendaBackendClient

logger = logging.getLogger(LOGGER_NAME)


class TextChat:
    """A text conversation with Brenda in one locale."""

    def __init__(
        self,
        backend: BrendaBackendClient,
        locale_variant: str = "en-US",
        history: Optional[ConversationHistory] = None,
    ):
        self.backend = backend
        self.locale_variant = locale_variant
        self.history = history if history is not None else ConversationHistory()

    async def send(self, text: str) -> ChatTurn:
        """
        Send a user message and record the assistant's answer.

        A failed request is recorded as an assistant turn holding the error
        text in parentheses, so the conversation shows what went wrong.

        Returns:
            ChatTurn: The assistant turn appended to the history

        Raises:
            ValidationFailure: The message is blank
        """
        text = (text or "").strip()
        if not text:
            raise ValidationFailure("Message is empty")

        self.history.add_user(text)
        try:
            reply = await self.backend.chat(self.locale_variant, self.history.window())
        except BrendaError as e:
            logger.warning(f"Chat request failed: {e.message}")
            return self.history.add_assistant(f"({e.message})")
        return self.history.add_assistant(reply)
