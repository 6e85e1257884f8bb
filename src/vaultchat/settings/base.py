"""Abstract base class for settings stores.

The abstraction hides where the two-field settings object lives
(a JSON file in the vault, memory, ...). Stores always read and
write the whole object.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..errors import VaultChatError
from .models import DEFAULT_SETTINGS, Settings


class SettingsError(VaultChatError):
    """Stored settings could not be read or written."""


class SettingsStore(ABC):
    """Key-value persistence for ``Settings``."""

    @abstractmethod
    def read_data(self) -> dict[str, Any] | None:
        """Return the raw stored object, or None if nothing is stored."""

    @abstractmethod
    def write_data(self, data: dict[str, Any]) -> None:
        """Replace the stored object."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    def load(self) -> Settings:
        """Load settings, filling missing fields from the defaults."""
        merged = DEFAULT_SETTINGS.to_storage()
        merged.update(self.read_data() or {})
        return Settings.model_validate(merged)

    def save(self, settings: Settings) -> None:
        """Persist the whole settings object."""
        self.write_data(settings.to_storage())
