"""Conversation store module for docchat.

Provides persistent storage of saved conversations.
"""

from .base import ConversationStore
from .factory import create_conversation_store
from .models import SavedConversation

__all__ = [
    "ConversationStore",
    "SavedConversation",
    "create_conversation_store",
]
