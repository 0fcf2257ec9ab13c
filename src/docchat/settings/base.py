"""Abstract base class for settings stores.

A settings store is a tiny key/value map that survives restarts.
The application uses a single key: the API credential.
"""

from abc import ABC, abstractmethod

API_KEY_SETTING = "api_key"


class SettingsStore(ABC):
    """Abstract key/value settings store."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the store."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the store gracefully."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Value for ``key``, or None when absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
