"""Provider factory functions for CLI.

Centralizes creation of the vault, settings, client and chat session
from command-line arguments and environment variables.
Hides configuration details from command implementations.
"""

import os
from pathlib import Path

import typer
from rich.console import Console

from ..chat import ChatSession
from ..llm import GeminiClient
from ..settings import Settings, SettingsError, SettingsStore, create_settings_store, default_settings_path
from ..vault import NoteFile, Vault

# Default console for output
_console = Console()


def get_vault(root: Path) -> Vault:
    return Vault(root)


def get_settings_store(vault: Vault) -> SettingsStore:
    """Create the JSON settings store that lives inside the vault."""
    return create_settings_store("json", path=default_settings_path(vault.root))


def load_settings(store: SettingsStore, console: Console | None = None) -> Settings:
    """Load stored settings, filling empty fields from the environment.

    Args:
        store: Settings store to read
        console: Optional Rich console for output

    Returns:
        Settings instance

    Raises:
        SystemExit: If the stored settings cannot be read

    Environment variables:
        GEMINI_API_KEY: Used when no API key is stored
        GEMINI_MODEL: Used when the stored model name is empty

    Environment values apply to this run only; saving the settings
    keeps the stored values for fields that still hold them.
    """
    con = console or _console
    try:
        settings = store.load()
    except SettingsError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    env_api_key = os.getenv("GEMINI_API_KEY")
    if not settings.api_key and env_api_key:
        settings.use_env_fallback("api_key", env_api_key)
    env_model = os.getenv("GEMINI_MODEL")
    if not settings.model_name and env_model:
        settings.use_env_fallback("model_name", env_model)
    return settings


def get_client(settings: Settings, timeout: float | None = None) -> GeminiClient:
    """Create the Gemini client.

    Environment variables:
        GEMINI_BASE_URL: Override the API root (proxies)
    """
    base_url = os.getenv("GEMINI_BASE_URL")
    if base_url:
        return GeminiClient(settings, base_url=base_url, timeout=timeout)
    return GeminiClient(settings, timeout=timeout)


def require_api_key(settings: Settings, console: Console | None = None) -> None:
    """Exit with an error if no API key is configured."""
    con = console or _console
    if not settings.api_key:
        con.print(
            "[red]Error: no API key. Run 'vaultchat config VAULT --api-key ...' "
            "or set GEMINI_API_KEY[/red]"
        )
        raise typer.Exit(code=1)


def resolve_note(vault: Vault, name: str, console: Console | None = None) -> NoteFile:
    """Resolve a note by path or basename, exiting if it does not exist."""
    con = console or _console
    note = vault.get_note(name)
    if note is None:
        con.print(f"[red]Error: note not found: {name}[/red]")
        raise typer.Exit(code=1)
    return note


def create_session(vault: Vault, settings: Settings, client: GeminiClient) -> ChatSession:
    return ChatSession(settings=settings, client=client, vault=vault)
