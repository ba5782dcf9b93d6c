"""
Text conversation state kept on the client side.

The history is append-only; each chat request carries only the most recent
turns so the context sent upstream stays bounded.
"""

from typing import List

from brenda.config.constants import CHAT_HISTORY_LIMIT
from brenda.models.api_schemas import ChatTurn


class ConversationHistory:
    """
    Ordered record of the user and assistant turns of a text chat.

    Turns are only ever appended. ``window`` returns the slice that accompanies
    the next request.
    """

    def __init__(self, limit: int = CHAT_HISTORY_LIMIT):
        """Initialize an empty history keeping ``limit`` turns per request."""
        self.limit = limit
        self.turns: List[ChatTurn] = []

    def add_user(self, content: str) -> ChatTurn:
        return self._append("user", content)

    def add_assistant(self, content: str) -> ChatTurn:
        return self._append("assistant", content)

    def window(self) -> List[ChatTurn]:
        """
        Get the most recent turns to send with the next request.

        Returns:
            At most ``limit`` turns, oldest first
        """
        if self.limit <= 0:
            return []
        return list(self.turns[-self.limit:])

    def __len__(self) -> int:
        return len(self.turns)

    def _append(self, role: str, content: str) -> ChatTurn:
        turn = ChatTurn(role=role, content=content)
        self.turns.append(turn)
        return turn
