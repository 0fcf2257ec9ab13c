"""Provider factory functions for CLI and TUI.

Centralizes creation of stores, LLM providers and the conversation
controller from configuration. Hides wiring details from command
implementations.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from ..completion import CompletionClient, StatusTracker
from ..config import AppConfig
from ..connectivity import ConnectivityMonitor
from ..llm import LLMProvider, create_llm_provider
from ..memory import ConversationStore, create_conversation_store
from ..session import ConversationController
from ..settings import SettingsStore, create_settings_store


def get_conversation_store(config: AppConfig) -> ConversationStore:
    """Create the conversation store named by ``config.store``."""
    if config.store == "sqlite":
        return create_conversation_store("sqlite", path=config.database_path)
    return create_conversation_store(config.store)


def get_settings_store(config: AppConfig) -> SettingsStore:
    """Create the settings store; shares the conversation database file."""
    if config.store == "sqlite":
        return create_settings_store("sqlite", path=config.database_path)
    return create_settings_store(config.store)


def get_provider_factory(config: AppConfig) -> Callable[[str], LLMProvider]:
    """Return a callable that builds an LLM provider for a given API key."""

    def _factory(api_key: str) -> LLMProvider:
        return create_llm_provider(
            config.provider,
            api_key=api_key,
            model=config.model,
            base_url=config.base_url,
            timeout=config.attempt_timeout,
        )

    return _factory


def get_connectivity(config: AppConfig) -> ConnectivityMonitor:
    return ConnectivityMonitor(online=True, host=config.connectivity_host)


def get_client(
    config: AppConfig,
    connectivity: ConnectivityMonitor | None = None,
    status: StatusTracker | None = None,
) -> CompletionClient:
    return CompletionClient(
        provider_factory=get_provider_factory(config),
        connectivity=connectivity or get_connectivity(config),
        status=status or StatusTracker(),
        model=config.model,
        max_retries=config.max_retries,
        base_delay=config.base_delay,
        attempt_timeout=config.attempt_timeout,
        sleep=asyncio.sleep,
    )


@asynccontextmanager
async def open_controller(
    config: AppConfig,
    connectivity: ConnectivityMonitor | None = None,
    status: StatusTracker | None = None,
) -> AsyncIterator[ConversationController]:
    """Connect the stores, yield a controller, and disconnect afterwards."""
    store = get_conversation_store(config)
    settings = get_settings_store(config)
    await store.connect()
    await settings.connect()
    try:
        yield ConversationController(
            store=store,
            settings=settings,
            client=get_client(config, connectivity, status),
        )
    finally:
        await settings.disconnect()
        await store.disconnect()
