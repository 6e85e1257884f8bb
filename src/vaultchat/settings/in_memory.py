"""In-memory settings store.

Data is lost when the application exits. Suitable for testing.
"""

from typing import Any

from .base import SettingsStore


class InMemorySettingsStore(SettingsStore):
    """Settings kept in a dict."""

    def __init__(self, data: dict[str, Any] | None = None):
        self._data = dict(data) if data is not None else None
        self.save_count = 0

    @property
    def backend_type(self) -> str:
        return "memory"

    def read_data(self) -> dict[str, Any] | None:
        return dict(self._data) if self._data is not None else None

    def write_data(self, data: dict[str, Any]) -> None:
        self._data = dict(data)
        self.save_count += 1
