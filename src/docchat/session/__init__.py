"""Session state and conversation lifecycle."""

from .controller import ConversationController
from .state import DEFAULT_TITLE, NEW_CONVERSATION_ID, SessionState

__all__ = [
    "ConversationController",
    "DEFAULT_TITLE",
    "NEW_CONVERSATION_ID",
    "SessionState",
]
