"""Persistent key/value settings (API credential)."""

from .base import API_KEY_SETTING, SettingsStore
from .factory import create_settings_store

__all__ = [
    "API_KEY_SETTING",
    "SettingsStore",
    "create_settings_store",
]
