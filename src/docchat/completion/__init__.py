"""Retry-driven completion core.

- machine.py: pure retry/backoff state machine
- errors.py: error taxonomy surfaced to callers
- status.py: loading / retrying / error indicators
- client.py: drives the machine against an LLM provider
"""

from .client import CompletionClient, CompletionOutcome, build_request_messages
from .errors import (
    CompletionError,
    ConnectivityError,
    FatalServerError,
    NoAssistantContentError,
    RetriesExhaustedError,
    RetryableServerError,
    ValidationError,
)
from .machine import RetryPhase, RetryState, backoff_delay, is_retryable_status, next_state
from .status import CompletionStatus, StatusTracker

__all__ = [
    "CompletionClient",
    "CompletionError",
    "CompletionOutcome",
    "CompletionStatus",
    "ConnectivityError",
    "FatalServerError",
    "NoAssistantContentError",
    "RetriesExhaustedError",
    "RetryPhase",
    "RetryState",
    "RetryableServerError",
    "StatusTracker",
    "ValidationError",
    "backoff_delay",
    "build_request_messages",
    "is_retryable_status",
    "next_state",
]
