"""
Docchat: a single-question chat client that grounds an LLM in your documents.

Each module hides one design decision: the retry state machine
(completion), the provider wire calls (llm), persistence (memory,
settings), document intake (documents) and the session lifecycle
(session).
"""

__version__ = "0.1.0"

from .completion import CompletionClient, CompletionOutcome, RetryPhase, StatusTracker
from .config import AppConfig
from .documents import DocumentCollector, DocumentItem
from .llm import ChatMessage, LLMProvider, create_llm_provider
from .memory import SavedConversation, create_conversation_store
from .session import ConversationController, SessionState

__all__ = [
    "AppConfig",
    "ChatMessage",
    "CompletionClient",
    "CompletionOutcome",
    "ConversationController",
    "DocumentCollector",
    "DocumentItem",
    "LLMProvider",
    "RetryPhase",
    "SavedConversation",
    "SessionState",
    "StatusTracker",
    "create_conversation_store",
    "create_llm_provider",
]
