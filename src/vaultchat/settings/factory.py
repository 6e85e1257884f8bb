"""Factory for creating settings stores."""

from typing import Any

from .base import SettingsStore


def create_settings_store(
    backend: str = "json",
    **kwargs: Any
) -> SettingsStore:
    """Create a settings store.

    Args:
        backend: Backend type ("json" or "memory")
        **kwargs: Backend-specific configuration
            For json:
                - path: str | Path (required)
            For memory:
                - data: dict | None

    Returns:
        SettingsStore instance

    Raises:
        ValueError: If backend type is not supported
        TypeError: If required configuration is missing
    """
    if backend == "json":
        from .json_file import JsonFileSettingsStore
        if "path" not in kwargs:
            raise TypeError("JSON settings store requires 'path' in config")
        return JsonFileSettingsStore(**kwargs)

    elif backend == "memory":
        from .in_memory import InMemorySettingsStore
        return InMemorySettingsStore(**kwargs)

    raise ValueError(
        f"Unsupported settings backend: {backend}. "
        f"Supported backends: json, memory"
    )
