"""Factory for creating settings stores."""

from typing import Any

from .base import SettingsStore


def create_settings_store(
    backend: str = "memory",
    **kwargs: Any
) -> SettingsStore:
    """Create a settings store.

    Args:
        backend: Backend type ("memory" or "sqlite")
        **kwargs: Backend-specific configuration

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemorySettingsStore
        return InMemorySettingsStore(**kwargs)

    elif backend == "sqlite":
        from .sqlite import SQLiteSettingsStore
        return SQLiteSettingsStore(**kwargs)

    raise ValueError(
        f"Unsupported settings store: {backend}. "
        f"Supported backends: memory, sqlite"
    )
