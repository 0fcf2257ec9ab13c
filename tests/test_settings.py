"""Unit tests for the settings stores."""
import pytest

from docchat.settings import API_KEY_SETTING, SettingsStore, create_settings_store
from docchat.settings.in_memory import InMemorySettingsStore
from docchat.settings.sqlite import SQLiteSettingsStore


class TestSettingsStoreInterface:
    def test_store_is_abstract(self):
        with pytest.raises(TypeError):
            SettingsStore()  # type: ignore


class TestInMemorySettingsStore:
    """Tests for InMemorySettingsStore."""

    async def test_get_missing(self):
        assert await InMemorySettingsStore().get(API_KEY_SETTING) is None

    async def test_initial_values(self):
        store = InMemorySettingsStore({API_KEY_SETTING: "sk-1"})

        assert await store.get(API_KEY_SETTING) == "sk-1"

    @pytest.mark.parametrize("value", ["sk-1", "", "  padded  ", "ключ"])
    async def test_set_then_get(self, value: str):
        """Test that values are stored verbatim."""
        store = InMemorySettingsStore()
        await store.set(API_KEY_SETTING, value)

        assert await store.get(API_KEY_SETTING) == value


class TestSQLiteSettingsStore:
    """Tests for SQLiteSettingsStore."""

    async def test_overwrite_and_persist(self, tmp_path):
        path = tmp_path / "settings.db"
        store = SQLiteSettingsStore(path)
        await store.connect()
        await store.set(API_KEY_SETTING, "sk-old")
        await store.set(API_KEY_SETTING, "sk-new")
        await store.disconnect()

        reopened = SQLiteSettingsStore(path)
        await reopened.connect()
        try:
            assert await reopened.get(API_KEY_SETTING) == "sk-new"
            assert await reopened.get("other") is None
        finally:
            await reopened.disconnect()

    async def test_requires_connection(self, tmp_path):
        with pytest.raises(RuntimeError):
            await SQLiteSettingsStore(tmp_path / "s.db").get(API_KEY_SETTING)


class TestSettingsFactory:
    def test_create_backends(self, tmp_path):
        assert create_settings_store("memory").backend_type == "memory"
        assert create_settings_store("sqlite", path=tmp_path / "s.db").backend_type == "sqlite"

    def test_unsupported_backend(self):
        with pytest.raises(ValueError):
            create_settings_store("redis")
