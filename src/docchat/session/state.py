"""Transient state of the active conversation."""

from dataclasses import dataclass, field

from ..documents import DocumentCollector
from ..llm import ChatMessage

NEW_CONVERSATION_ID = "new"
DEFAULT_TITLE = "New Chat"


@dataclass
class SessionState:
    """Everything the controller knows about the conversation on screen.

    ``message_sent`` gates re-entry: once set, no further send is made
    until a new session is created or a saved one is loaded.
    """

    conversation_id: str = NEW_CONVERSATION_ID
    title: str = DEFAULT_TITLE
    draft: str = ""
    messages: list[ChatMessage] = field(default_factory=list)
    documents: DocumentCollector = field(default_factory=DocumentCollector)
    message_sent: bool = False

    @property
    def is_new(self) -> bool:
        return self.conversation_id == NEW_CONVERSATION_ID
