"""In-memory settings store (session-only)."""

from .base import SettingsStore


class InMemorySettingsStore(SettingsStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    @property
    def backend_type(self) -> str:
        return "memory"
