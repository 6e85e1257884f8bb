"""JSON file settings store.

Mirrors the host plugin's ``data.json``: one JSON object per vault,
stored at ``<vault>/.vaultchat/data.json`` by default.
"""

import json
from pathlib import Path
from typing import Any

from .base import SettingsError, SettingsStore

SETTINGS_DIR_NAME = ".vaultchat"
SETTINGS_FILE_NAME = "data.json"


def default_settings_path(vault_root: str | Path) -> Path:
    """Location of the settings file for a vault."""
    return Path(vault_root) / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME


class JsonFileSettingsStore(SettingsStore):
    """Settings persisted as a JSON object on disk."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def backend_type(self) -> str:
        return "json"

    def read_data(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SettingsError(f"Cannot read settings from {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self._path} does not contain a JSON object")
        return data

    def write_data(self, data: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise SettingsError(f"Cannot write settings to {self._path}: {e}") from e
