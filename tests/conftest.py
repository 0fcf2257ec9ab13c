"""Pytest configuration and shared fixtures."""
import os
from collections.abc import Callable

import pytest

from docchat.completion import CompletionClient, StatusTracker
from docchat.connectivity import ConnectivityMonitor
from docchat.documents import DocumentItem
from docchat.llm import (
    ChatMessage,
    LLMProvider,
    LLMResponse,
    ProviderStatusError,
)
from docchat.memory.in_memory import InMemoryConversationStore
from docchat.session import ConversationController, SessionState
from docchat.settings import API_KEY_SETTING
from docchat.settings.in_memory import InMemorySettingsStore


class ScriptedProvider(LLMProvider):
    """Provider that replays a scripted list of outcomes.

    Each script entry is either a string (assistant content), None (a 2xx
    with no assistant content), an int (an HTTP status error) or an
    exception instance to raise.
    """

    def __init__(self, script: list) -> None:
        self.script = list(script)
        self.requests: list[list[ChatMessage]] = []
        self.closed = False

    async def chat_completion(self, messages, model=None, temperature=1.0,
                              max_tokens=None, top_p=None, **kwargs) -> LLMResponse:
        self.requests.append(list(messages))
        if not self.script:
            raise AssertionError("Provider called more times than scripted")
        outcome = self.script.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int):
            raise ProviderStatusError(outcome, f"status {outcome}")
        return LLMResponse(content=outcome, model=model or "test-model")

    async def close(self) -> None:
        self.closed = True


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class ProviderFactoryStub:
    """Provider factory that hands out one ScriptedProvider and records keys."""

    def __init__(self, provider: ScriptedProvider) -> None:
        self.provider = provider
        self.keys: list[str] = []

    def __call__(self, api_key: str) -> ScriptedProvider:
        self.keys.append(api_key)
        return self.provider


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "deepseek": os.getenv("DEEPSEEK_API_KEY")
    }


@pytest.fixture
def make_provider() -> Callable[[list], ScriptedProvider]:
    """Build a ScriptedProvider from a script."""
    return ScriptedProvider


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def status() -> StatusTracker:
    return StatusTracker()


@pytest.fixture
def connectivity() -> ConnectivityMonitor:
    return ConnectivityMonitor(online=True)


@pytest.fixture
def make_client(fake_sleep, status, connectivity):
    """Build a CompletionClient around a scripted provider."""

    def _make(script: list, **kwargs) -> tuple[CompletionClient, ProviderFactoryStub]:
        factory = ProviderFactoryStub(ScriptedProvider(script))
        kwargs.setdefault("attempt_timeout", None)
        client = CompletionClient(
            provider_factory=factory,
            connectivity=connectivity,
            status=status,
            model="test-model",
            sleep=fake_sleep,
            **kwargs
        )
        return client, factory

    return _make


@pytest.fixture
def sample_document() -> DocumentItem:
    return DocumentItem(name="notes.txt", content="The meeting is on Tuesday.")


@pytest.fixture
def session_with_document(sample_document) -> SessionState:
    state = SessionState()
    state.documents.add(sample_document)
    return state


@pytest.fixture
def conversation_store() -> InMemoryConversationStore:
    return InMemoryConversationStore()


@pytest.fixture
def settings_store() -> InMemorySettingsStore:
    return InMemorySettingsStore({API_KEY_SETTING: "sk-test"})


@pytest.fixture
def make_controller(make_client, conversation_store, settings_store):
    """Build a ConversationController with in-memory stores and a scripted provider."""

    def _make(script: list, clock: Callable[[], int] | None = None, **client_kwargs):
        client, factory = make_client(script, **client_kwargs)
        ticks = iter(range(1_700_000_000_000, 1_800_000_000_000))
        controller = ConversationController(
            store=conversation_store,
            settings=settings_store,
            client=client,
            clock=clock or (lambda: next(ticks)),
        )
        return controller, factory

    return _make
