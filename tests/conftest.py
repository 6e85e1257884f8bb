"""Pytest configuration and shared fixtures."""
import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from vaultchat.llm import GeminiClient
from vaultchat.settings import Settings
from vaultchat.vault import Vault


def gemini_reply(text: str, finish_reason: str = "STOP") -> dict[str, Any]:
    """A successful generateContent payload."""
    return {
        "candidates": [
            {
                "content": {"parts": [{"text": text}], "role": "model"},
                "finishReason": finish_reason,
            }
        ]
    }


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {"gemini": os.getenv("GEMINI_API_KEY")}


@pytest.fixture
def vault_dir(tmp_path):
    """Create a small vault with nested and hidden notes."""
    (tmp_path / "projects").mkdir()
    (tmp_path / ".obsidian").mkdir()
    (tmp_path / "Daily Log.md").write_text("Walked the dog.", encoding="utf-8")
    (tmp_path / "ideas.md").write_text("Build a chat panel for notes.", encoding="utf-8")
    (tmp_path / "projects" / "roadmap.md").write_text("Q1: ship it.", encoding="utf-8")
    (tmp_path / "projects" / "notes.txt").write_text("not a note", encoding="utf-8")
    (tmp_path / ".obsidian" / "workspace.md").write_text("hidden", encoding="utf-8")
    return tmp_path


@pytest.fixture
def vault(vault_dir):
    return Vault(vault_dir)


@pytest.fixture
def settings():
    return Settings(api_key="test-key", model_name="gemini-test")


@pytest.fixture
def make_client(settings) -> Callable[..., GeminiClient]:
    """Build a GeminiClient whose HTTP traffic goes to ``handler``.

    Usage:
        client = make_client(lambda request: httpx.Response(200, json=...))
    """
    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        client_settings: Settings | None = None,
    ) -> GeminiClient:
        return GeminiClient(
            client_settings or settings,
            transport=httpx.MockTransport(handler),
        )

    return _make
