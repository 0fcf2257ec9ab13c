"""Retry-driven completion client.

Turns one validated question plus its conversation context into exactly
one terminal outcome, retrying transient failures with exponential
backoff. The retry policy itself lives in ``machine``; this module only
carries out the effects the machine asks for.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from ..connectivity import ConnectivityMonitor
from ..documents import DocumentItem, build_context
from ..llm import ChatMessage, LLMProvider, ProviderStatusError, ProviderTransportError, Role
from .errors import CompletionError, ConnectivityError, ValidationError
from .machine import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_RETRIES,
    AppendAssistant,
    AttemptAborted,
    AttemptEmpty,
    AttemptFailed,
    AttemptSucceeded,
    Effect,
    Event,
    Finish,
    PerformAttempt,
    ReportError,
    ReportRetry,
    RetryPhase,
    RetryState,
    Start,
    Wait,
    WaitElapsed,
    next_state,
)
from .status import StatusTracker

if TYPE_CHECKING:
    from ..session.state import SessionState

ProviderFactory = Callable[[str], LLMProvider]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of one ``CompletionClient.send`` call.

    ``phase`` is IDLE when nothing was sent (no-op or failed precondition).
    """

    phase: RetryPhase
    message: ChatMessage | None = None
    error: CompletionError | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.phase is RetryPhase.SUCCESS and self.message is not None

    @property
    def reached_network(self) -> bool:
        return self.phase is not RetryPhase.IDLE


def build_request_messages(
    transcript: Sequence[ChatMessage],
    documents: Iterable[DocumentItem],
    prompt: str,
) -> list[ChatMessage]:
    """Assemble the message list sent to the endpoint.

    Prior transcript, then one system message carrying the document
    context (only when some document has content), then the new user
    message. The context message is never persisted.
    """
    messages = list(transcript)
    context = build_context(documents)
    if context is not None:
        messages.append(ChatMessage(role=Role.SYSTEM, content=f"Context:\n{context}"))
    messages.append(ChatMessage(role=Role.USER, content=prompt))
    return messages


class CompletionClient:
    """Sends a session's single question and retries transient failures.

    Hidden design decisions:
    - Precondition order and messages
    - Request assembly (context message placement)
    - Mapping provider failures onto state machine events
    - Per-attempt timeout and connectivity re-check between attempts
    """

    def __init__(
        self,
        provider_factory: ProviderFactory,
        connectivity: ConnectivityMonitor | None = None,
        status: StatusTracker | None = None,
        model: str | None = None,
        temperature: float = 1.0,
        max_tokens: int = 1000,
        top_p: float = 1.0,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        attempt_timeout: float | None = 60.0,
        recheck_connectivity: bool = True,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._provider_factory = provider_factory
        self._connectivity = connectivity or ConnectivityMonitor()
        self._status = status or StatusTracker()
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._top_p = top_p
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._attempt_timeout = attempt_timeout
        self._recheck_connectivity = recheck_connectivity
        self._sleep = sleep

    @property
    def status(self) -> StatusTracker:
        return self._status

    @property
    def connectivity(self) -> ConnectivityMonitor:
        return self._connectivity

    def _check_preconditions(
        self, session: "SessionState", prompt: str, api_key: str | None
    ) -> CompletionError | None:
        if not prompt.strip():
            return ValidationError(ValidationError.EMPTY_PROMPT)
        if len(session.documents) == 0:
            return ValidationError(ValidationError.NO_DOCUMENTS)
        if not api_key or not api_key.strip():
            return ValidationError(ValidationError.NO_API_KEY)
        if not self._connectivity.online:
            return ConnectivityError()
        return None

    async def send(
        self, session: "SessionState", prompt: str, api_key: str | None
    ) -> CompletionOutcome:
        """Send ``prompt`` for ``session``.

        A session that already sent its message makes this a no-op.
        Failures are reported through the status tracker and returned in
        the outcome; they are not raised.
        """
        if session.message_sent:
            logger.debug("Session {} already sent its message", session.conversation_id)
            return CompletionOutcome(phase=RetryPhase.IDLE)

        error = self._check_preconditions(session, prompt, api_key)
        if error is not None:
            logger.info("Send rejected: {}", error.message)
            self._status.report(error)
            return CompletionOutcome(phase=RetryPhase.IDLE, error=error)

        request = build_request_messages(session.messages, session.documents.list(), prompt)
        session.messages.append(ChatMessage(role=Role.USER, content=prompt))
        session.draft = ""
        session.message_sent = True
        self._status.begin()

        state = RetryState(max_retries=self._max_retries, base_delay=self._base_delay)
        assistant: ChatMessage | None = None

        try:
            state, pending = next_state(state, Start())
            try:
                provider = self._provider_factory(api_key.strip())
            except Exception as e:
                logger.exception("Could not create the LLM provider")
                state, pending = next_state(
                    state, AttemptAborted(message=str(e) or type(e).__name__)
                )
                for effect in pending:
                    await self._perform(effect, None, request)
            else:
                async with provider:
                    while pending:
                        effect = pending.pop(0)
                        event = await self._perform(effect, provider, request)
                        if isinstance(effect, AppendAssistant):
                            assistant = ChatMessage(role=Role.ASSISTANT, content=effect.content)
                            session.messages.append(assistant)
                        if event is not None:
                            state, effects = next_state(state, event)
                            pending.extend(effects)
        finally:
            if not state.phase.is_terminal:
                # Cancelled mid-sequence; never leave the spinner running
                self._status.finish()

        return CompletionOutcome(
            phase=state.phase,
            message=assistant,
            error=state.error,
            attempts=state.attempts_made,
        )

    async def _perform(
        self, effect: Effect, provider: LLMProvider | None, request: list[ChatMessage]
    ) -> Event | None:
        if isinstance(effect, PerformAttempt):
            return await self._attempt(provider, request, effect.attempt)
        if isinstance(effect, Wait):
            await self._sleep(effect.seconds)
            return WaitElapsed()
        if isinstance(effect, ReportRetry):
            logger.warning(effect.error.message)
            self._status.report(effect.error)
        elif isinstance(effect, ReportError):
            logger.error(effect.error.message)
            self._status.report(effect.error)
        elif isinstance(effect, Finish):
            self._status.finish()
        return None

    async def _attempt(
        self, provider: LLMProvider, request: list[ChatMessage], attempt: int
    ) -> Event:
        if attempt > 0 and self._recheck_connectivity and not self._connectivity.online:
            return AttemptFailed(status=None, message="No internet connection")

        logger.debug("Completion attempt {} of {}", attempt + 1, self._max_retries + 1)
        call = provider.chat_completion(
            request,
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            top_p=self._top_p,
        )
        try:
            if self._attempt_timeout is None:
                response = await call
            else:
                response = await asyncio.wait_for(call, timeout=self._attempt_timeout)
        except ProviderStatusError as e:
            return AttemptFailed(status=e.status_code, message=e.message)
        except ProviderTransportError as e:
            return AttemptFailed(status=None, message=e.message)
        except asyncio.TimeoutError:
            return AttemptFailed(
                status=None, message=f"Request timed out after {self._attempt_timeout:g}s"
            )
        except Exception as e:
            logger.exception("Unexpected failure during completion attempt")
            return AttemptAborted(message=str(e) or type(e).__name__)

        if not response.content:
            return AttemptEmpty()
        return AttemptSucceeded(content=response.content)
