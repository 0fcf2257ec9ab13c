"""Document collection for conversation context.

Holds the short text documents a user attaches to a conversation.
"""

from .collector import DocumentCollector, build_context
from .models import MAX_DOCUMENT_CHARS, DocumentItem

__all__ = [
    "MAX_DOCUMENT_CHARS",
    "DocumentCollector",
    "DocumentItem",
    "build_context",
]
