"""Abstract base class for conversation stores.

This module defines the interface for saved-conversation storage.
The abstraction hides:
- Storage format (JSON columns, in-memory objects)
- Persistence mechanism (file, database, in-memory)
- Connection management
"""

from abc import ABC, abstractmethod

from .models import SavedConversation


class ConversationStore(ABC):
    """Abstract conversation store.

    Holds at most one record per conversation id. ``list_all`` returns
    conversations most-recently-saved first.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store gracefully."""

    @abstractmethod
    async def list_all(self) -> list[SavedConversation]:
        """All saved conversations, most recent first."""

    @abstractmethod
    async def get(self, conversation_id: str) -> SavedConversation | None:
        """Look up one conversation."""

    @abstractmethod
    async def upsert(self, conversation: SavedConversation) -> None:
        """Insert, or replace the record with the same id."""

    @abstractmethod
    async def delete(self, conversation_id: str) -> bool:
        """Remove a conversation. Returns False if it did not exist."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
