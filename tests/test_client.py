"""Unit tests for the completion client."""
import asyncio

import pytest

from docchat.completion import (
    CompletionClient,
    ConnectivityError,
    FatalServerError,
    NoAssistantContentError,
    RetriesExhaustedError,
    RetryPhase,
    ValidationError,
    build_request_messages,
)
from docchat.documents import DocumentItem
from docchat.llm import ChatMessage, ProviderTransportError, Role
from docchat.session import SessionState


class TestBuildRequestMessages:
    """Tests for request assembly."""

    def test_context_precedes_user_message(self):
        """Test that the system context sits between transcript and question."""
        transcript = [ChatMessage(role=Role.USER, content="earlier")]
        docs = [DocumentItem(name="a", content="alpha"), DocumentItem(name="b", content="beta")]

        messages = build_request_messages(transcript, docs, "question")

        assert [m.role for m in messages] == ["user", "system", "user"]
        assert messages[1].content == "Context:\nalpha\n\nbeta"
        assert messages[2].content == "question"

    def test_empty_documents_add_no_system_message(self):
        """Test that documents without content produce no context message."""
        messages = build_request_messages([], [DocumentItem(name="empty", content="")], "q")

        assert [m.role for m in messages] == ["user"]


class TestSendSuccess:
    """Tests for the success path."""

    async def test_first_attempt_succeeds(self, make_client, session_with_document, status, fake_sleep):
        """Test one request, one assistant message, loading cleared."""
        client, factory = make_client(["Hello!"])
        seen = []
        status.subscribe(lambda s: seen.append((s.loading, s.error)))

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.ok
        assert outcome.phase is RetryPhase.SUCCESS
        assert outcome.attempts == 1
        assert [m.role for m in session_with_document.messages] == ["user", "assistant"]
        assert session_with_document.messages[1].content == "Hello!"
        assert session_with_document.message_sent
        assert fake_sleep.delays == []
        assert status.status.loading is False
        assert seen[0] == (True, None)
        assert factory.provider.closed

    async def test_request_carries_context(self, make_client, session_with_document):
        """Test the exact request sent to the provider."""
        client, factory = make_client(["ok"])

        await client.send(session_with_document, "When is the meeting?", "sk-1")

        request = factory.provider.requests[0]
        assert request[0].role == "system"
        assert request[0].content == "Context:\nThe meeting is on Tuesday."
        assert request[-1].content == "When is the meeting?"

    async def test_api_key_is_trimmed(self, make_client, session_with_document):
        client, factory = make_client(["ok"])

        await client.send(session_with_document, "Hi", "  sk-1  ")

        assert factory.keys == ["sk-1"]

    async def test_draft_cleared(self, make_client, session_with_document):
        client, _ = make_client(["ok"])
        session_with_document.draft = "Hi"

        await client.send(session_with_document, "Hi", "sk-1")

        assert session_with_document.draft == ""


class TestSendRetries:
    """Tests for retry behaviour."""

    async def test_rate_limited_then_success(self, make_client, session_with_document, status, fake_sleep):
        """Test five 429s followed by a 200."""
        client, factory = make_client([429, 429, 429, 429, 429, "Finally"])
        retrying_seen = []
        status.subscribe(lambda s: retrying_seen.append(s.retrying))

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.ok
        assert outcome.attempts == 6
        assert len(factory.provider.requests) == 6
        assert fake_sleep.delays == [1.0, 2.0, 4.0, 8.0, 16.0]
        assert sum(fake_sleep.delays) == 31.0
        assert any(retrying_seen)
        assert status.status.retrying is False
        assert status.status.loading is False
        assert session_with_document.messages[-1].content == "Finally"

    async def test_server_errors_exhaust(self, make_client, session_with_document, status, fake_sleep):
        """Test six 500s end in a max-retries error and no assistant message."""
        client, factory = make_client([500] * 6)

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.phase is RetryPhase.EXHAUSTED
        assert isinstance(outcome.error, RetriesExhaustedError)
        assert len(factory.provider.requests) == 6
        assert "max retries" in status.status.error
        assert status.status.loading is False
        assert [m.role for m in session_with_document.messages] == ["user"]
        assert session_with_document.message_sent

    async def test_transport_errors_are_retried(self, make_client, session_with_document, fake_sleep):
        client, _ = make_client([ProviderTransportError("connection reset"), "ok"])

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.ok
        assert fake_sleep.delays == [1.0]

    async def test_custom_retry_budget(self, make_client, session_with_document, fake_sleep):
        client, factory = make_client([503, 503, 503], max_retries=2, base_delay=0.5)

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.phase is RetryPhase.EXHAUSTED
        assert fake_sleep.delays == [0.5, 1.0]
        assert len(factory.provider.requests) == 3

    async def test_offline_between_attempts_counts_as_failure(
        self, make_client, session_with_document, connectivity, fake_sleep
    ):
        """Test that going offline mid-sequence fails the retry without a request."""
        client, factory = make_client([500, "never"], max_retries=1)

        async def _sleep_then_drop(seconds: float) -> None:
            fake_sleep.delays.append(seconds)
            connectivity.set_online(False)

        client._sleep = _sleep_then_drop
        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.phase is RetryPhase.EXHAUSTED
        assert len(factory.provider.requests) == 1

    async def test_attempt_timeout_is_retried(self, make_client, session_with_document):
        """Test that a hanging attempt times out and is retried."""
        client, factory = make_client(["ok"], attempt_timeout=0.01)
        original = factory.provider.chat_completion
        calls = []

        async def _hang_once(*args, **kwargs):
            calls.append(1)
            if len(calls) == 1:
                await asyncio.sleep(1)
            return await original(*args, **kwargs)

        factory.provider.chat_completion = _hang_once
        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.ok
        assert len(calls) == 2


class TestSendFatal:
    """Tests for non-retryable outcomes."""

    async def test_unauthorized_is_fatal(self, make_client, session_with_document, status, fake_sleep):
        client, factory = make_client([401])

        outcome = await client.send(session_with_document, "Hi", "sk-bad")

        assert outcome.phase is RetryPhase.FATAL_ERROR
        assert isinstance(outcome.error, FatalServerError)
        assert status.status.error == "API error 401: status 401"
        assert fake_sleep.delays == []
        assert len(factory.provider.requests) == 1

    async def test_no_assistant_content(self, make_client, session_with_document, status):
        client, _ = make_client([None])

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.phase is RetryPhase.SUCCESS
        assert not outcome.ok
        assert isinstance(outcome.error, NoAssistantContentError)
        assert status.status.error == "No response from assistant."
        assert [m.role for m in session_with_document.messages] == ["user"]

    async def test_unexpected_exception_is_fatal(self, make_client, session_with_document):
        client, _ = make_client([KeyError("choices")])

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.phase is RetryPhase.FATAL_ERROR
        assert outcome.error.message.startswith("Error: ")

    async def test_provider_construction_failure_is_fatal(
        self, session_with_document, status, connectivity, fake_sleep
    ):
        """Test that a factory that cannot build a provider ends the send cleanly."""

        def broken_factory(api_key: str):
            raise ValueError("Unsupported provider: anthropic")

        client = CompletionClient(
            provider_factory=broken_factory,
            connectivity=connectivity,
            status=status,
            sleep=fake_sleep,
        )

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert outcome.phase is RetryPhase.FATAL_ERROR
        assert isinstance(outcome.error, FatalServerError)
        assert outcome.reached_network
        assert status.status.error == "Error: Unsupported provider: anthropic"
        assert status.status.loading is False
        assert status.status.retrying is False
        assert session_with_document.message_sent
        assert [m.role for m in session_with_document.messages] == ["user"]
        assert fake_sleep.delays == []


class TestSendPreconditions:
    """Tests for requests that never reach the network."""

    async def test_no_documents(self, make_client, status):
        """Test that an empty document set blocks the request."""
        client, factory = make_client(["unused"])
        session = SessionState()

        outcome = await client.send(session, "Hi", "sk-1")

        assert outcome.phase is RetryPhase.IDLE
        assert not outcome.reached_network
        assert outcome.error.message == ValidationError.NO_DOCUMENTS
        assert status.status.error == ValidationError.NO_DOCUMENTS
        assert status.status.error_clear_after == 3.0
        assert factory.provider.requests == []
        assert session.messages == []
        assert not session.message_sent

    @pytest.mark.parametrize("prompt", ["", "   ", "\n\t"])
    async def test_blank_prompt(self, make_client, session_with_document, prompt: str):
        client, factory = make_client(["unused"])

        outcome = await client.send(session_with_document, prompt, "sk-1")

        assert outcome.error.message == ValidationError.EMPTY_PROMPT
        assert factory.keys == []

    @pytest.mark.parametrize("api_key", [None, "", "   "])
    async def test_missing_api_key(self, make_client, session_with_document, api_key):
        client, factory = make_client(["unused"])

        outcome = await client.send(session_with_document, "Hi", api_key)

        assert outcome.error.message == ValidationError.NO_API_KEY
        assert factory.keys == []

    async def test_offline(self, make_client, session_with_document, connectivity, status):
        client, factory = make_client(["unused"])
        connectivity.set_online(False)

        outcome = await client.send(session_with_document, "Hi", "sk-1")

        assert isinstance(outcome.error, ConnectivityError)
        assert status.status.error_clear_after == 5.0
        assert factory.keys == []

    async def test_second_send_is_noop(self, make_client, session_with_document, status):
        """Test that a session sends at most one message."""
        client, factory = make_client(["first", "second"])

        await client.send(session_with_document, "Hi", "sk-1")
        outcome = await client.send(session_with_document, "Again", "sk-1")

        assert outcome.phase is RetryPhase.IDLE
        assert outcome.error is None
        assert len(factory.provider.requests) == 1
        assert len(session_with_document.messages) == 2
