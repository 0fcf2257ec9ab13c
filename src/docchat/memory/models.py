"""Data models for saved conversations.

These models define the structure of a persisted conversation,
independent of the storage backend used.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ..documents import DocumentItem
from ..llm import ChatMessage


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SavedConversation(BaseModel):
    """A completed (or attempted) single-turn conversation.

    Identity is ``id``; saving a conversation whose id already exists
    replaces the stored record.
    """

    id: str = Field(description="Stable identifier minted on first save")
    title: str = Field(description="Display title")
    messages: list[ChatMessage] = Field(default_factory=list)
    documents: list[DocumentItem] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utcnow, description="Time of the last save")

    def preview(self, limit: int = 60) -> str:
        """Short one-line preview of the first message."""
        if not self.messages:
            return ""
        text = " ".join(self.messages[0].content.split())
        return text[:limit] + "..." if len(text) > limit else text
