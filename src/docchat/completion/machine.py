"""Pure retry state machine for a single completion request.

States::

    IDLE -> ATTEMPTING -> SUCCESS
                       -> FATAL_ERROR
                       -> RETRY_WAIT -> ATTEMPTING (loop)
                       -> EXHAUSTED

``next_state`` performs no I/O. It returns the new state together with
the effects the driver must carry out (perform a request, sleep, report),
so the whole retry policy can be exercised without a network.
"""

from dataclasses import dataclass, replace
from enum import Enum

from .errors import (
    CompletionError,
    FatalServerError,
    NoAssistantContentError,
    RetriesExhaustedError,
    RetryableServerError,
)

DEFAULT_MAX_RETRIES = 5
DEFAULT_BASE_DELAY = 1.0


class RetryPhase(str, Enum):
    """Phase of a completion request."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRY_WAIT = "retry_wait"
    SUCCESS = "success"
    FATAL_ERROR = "fatal_error"
    EXHAUSTED = "exhausted"

    @property
    def is_terminal(self) -> bool:
        return self in (RetryPhase.SUCCESS, RetryPhase.FATAL_ERROR, RetryPhase.EXHAUSTED)


def backoff_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Seconds to wait before retrying after failed attempt ``attempt`` (0-based)."""
    if attempt < 0:
        raise ValueError("attempt must be >= 0")
    return base_delay * 2 ** attempt


def is_retryable_status(status: int) -> bool:
    """Rate limiting and server-side failures are worth retrying."""
    return status == 429 or 500 <= status <= 599


@dataclass(frozen=True)
class RetryState:
    """Immutable snapshot of one request's progress through the retry phases."""

    phase: RetryPhase = RetryPhase.IDLE
    attempt: int = 0
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY
    delay: float | None = None
    error: CompletionError | None = None

    @property
    def attempts_made(self) -> int:
        """Network attempts started so far."""
        if self.phase is RetryPhase.IDLE:
            return 0
        return self.attempt + 1


# Events

@dataclass(frozen=True)
class Start:
    """A validated request is ready to go out."""


@dataclass(frozen=True)
class AttemptSucceeded:
    """The endpoint returned assistant content."""

    content: str


@dataclass(frozen=True)
class AttemptEmpty:
    """2xx with a parseable body but no usable assistant message."""


@dataclass(frozen=True)
class AttemptFailed:
    """``status`` is None for transport failures (no HTTP response)."""

    status: int | None
    message: str | None = None


@dataclass(frozen=True)
class AttemptAborted:
    """The attempt could not be made, or raised something that is neither an HTTP nor a transport failure."""

    message: str


@dataclass(frozen=True)
class WaitElapsed:
    """The backoff delay is over."""


Event = Start | AttemptSucceeded | AttemptEmpty | AttemptFailed | AttemptAborted | WaitElapsed


# Effects

@dataclass(frozen=True)
class PerformAttempt:
    """Issue network attempt ``attempt`` (0-based)."""

    attempt: int


@dataclass(frozen=True)
class Wait:
    """Sleep before the next attempt."""

    seconds: float


@dataclass(frozen=True)
class ReportRetry:
    """Surface a retry notice."""

    error: RetryableServerError


@dataclass(frozen=True)
class AppendAssistant:
    """Add the assistant reply to the transcript."""

    content: str


@dataclass(frozen=True)
class ReportError:
    """Surface a terminal error."""

    error: CompletionError


@dataclass(frozen=True)
class Finish:
    """Clear loading and retrying indicators."""


Effect = PerformAttempt | Wait | ReportRetry | AppendAssistant | ReportError | Finish


class InvalidTransition(ValueError):
    """An event arrived in a phase that cannot accept it."""

    def __init__(self, phase: RetryPhase, event: object):
        super().__init__(f"Event {type(event).__name__} is not valid in phase {phase.value}")


def _fail(state: RetryState, event: AttemptFailed) -> tuple[RetryState, list[Effect]]:
    retryable = event.status is None or is_retryable_status(event.status)

    if not retryable:
        error = FatalServerError(event.status, event.message)
        return (
            replace(state, phase=RetryPhase.FATAL_ERROR, delay=None, error=error),
            [ReportError(error), Finish()],
        )

    if state.attempt >= state.max_retries:
        last = (
            FatalServerError(event.status, event.message).message
            if event.status is not None
            else f"Network error: {event.message or 'Unknown error'}"
        )
        error = RetriesExhaustedError(state.attempt + 1, last)
        return (
            replace(state, phase=RetryPhase.EXHAUSTED, delay=None, error=error),
            [ReportError(error), Finish()],
        )

    delay = backoff_delay(state.attempt, state.base_delay)
    error = RetryableServerError(
        event.status, event.message, state.attempt, delay, state.max_retries
    )
    return (
        replace(state, phase=RetryPhase.RETRY_WAIT, delay=delay, error=error),
        [ReportRetry(error), Wait(delay)],
    )


def next_state(state: RetryState, event: Event) -> tuple[RetryState, list[Effect]]:
    """Advance the machine by one event.

    Raises:
        InvalidTransition: If the event is not accepted in the current phase
    """
    phase = state.phase

    if phase is RetryPhase.IDLE and isinstance(event, Start):
        return replace(state, phase=RetryPhase.ATTEMPTING, attempt=0), [PerformAttempt(0)]

    if phase is RetryPhase.ATTEMPTING:
        if isinstance(event, AttemptSucceeded):
            return (
                replace(state, phase=RetryPhase.SUCCESS, error=None),
                [AppendAssistant(event.content), Finish()],
            )
        if isinstance(event, AttemptEmpty):
            # Still the success path for loading purposes: no retry
            error = NoAssistantContentError()
            return (
                replace(state, phase=RetryPhase.SUCCESS, error=error),
                [ReportError(error), Finish()],
            )
        if isinstance(event, AttemptFailed):
            return _fail(state, event)
        if isinstance(event, AttemptAborted):
            error = FatalServerError(None, event.message)
            return (
                replace(state, phase=RetryPhase.FATAL_ERROR, error=error),
                [ReportError(error), Finish()],
            )

    if phase is RetryPhase.RETRY_WAIT and isinstance(event, WaitElapsed):
        attempt = state.attempt + 1
        return (
            replace(state, phase=RetryPhase.ATTEMPTING, attempt=attempt, delay=None),
            [PerformAttempt(attempt)],
        )

    raise InvalidTransition(phase, event)
