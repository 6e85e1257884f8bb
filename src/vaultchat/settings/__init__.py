"""Settings module for vaultchat.

Holds the API key and model name and persists them wholesale.
"""

from .base import SettingsError, SettingsStore
from .factory import create_settings_store
from .in_memory import InMemorySettingsStore
from .json_file import JsonFileSettingsStore, default_settings_path
from .models import DEFAULT_MODEL_NAME, DEFAULT_SETTINGS, Settings

__all__ = [
    "DEFAULT_MODEL_NAME",
    "DEFAULT_SETTINGS",
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "Settings",
    "SettingsError",
    "SettingsStore",
    "create_settings_store",
    "default_settings_path",
]
