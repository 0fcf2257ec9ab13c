"""In-memory conversation store.

Simple list-based storage for session-only use.
Data is lost when the application exits.
"""

from .base import ConversationStore
from .models import SavedConversation


class InMemoryConversationStore(ConversationStore):
    """In-memory conversation store (session-only).

    Suitable for single-session use or testing.
    """

    def __init__(self) -> None:
        self._conversations: list[SavedConversation] = []

    async def connect(self) -> None:
        """Initialize store (no-op for in-memory)."""
        pass

    async def disconnect(self) -> None:
        """Close store (no-op for in-memory)."""
        pass

    async def list_all(self) -> list[SavedConversation]:
        return [c.model_copy(deep=True) for c in self._conversations]

    async def get(self, conversation_id: str) -> SavedConversation | None:
        for conversation in self._conversations:
            if conversation.id == conversation_id:
                return conversation.model_copy(deep=True)
        return None

    async def upsert(self, conversation: SavedConversation) -> None:
        """Drop any record with the same id, then prepend."""
        self._conversations = [
            c for c in self._conversations if c.id != conversation.id
        ]
        self._conversations.insert(0, conversation.model_copy(deep=True))

    async def delete(self, conversation_id: str) -> bool:
        before = len(self._conversations)
        self._conversations = [
            c for c in self._conversations if c.id != conversation_id
        ]
        return len(self._conversations) != before

    @property
    def backend_type(self) -> str:
        return "memory"
