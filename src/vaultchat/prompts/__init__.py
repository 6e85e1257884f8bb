"""Prompt templates.

The chat template wraps the assembled vault context and the user's
question. A vault owner can reword it without touching the package by
dropping a ``prompts/chat.txt`` into the directory vaultchat runs from.
"""

from functools import lru_cache
from pathlib import Path

CHAT_TEMPLATE = "chat"

_PACKAGE_DIR = Path(__file__).parent


def _candidates(name: str) -> list[Path]:
    """Template locations, highest priority first."""
    filename = f"{name}.txt"
    return [Path.cwd() / "prompts" / filename, _PACKAGE_DIR / filename]


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Read a template by name.

    The working-directory copy wins over the bundled one. Templates are
    cached after the first read; call ``clear_cache`` to pick up edits.

    Raises:
        FileNotFoundError: If no location has the template
    """
    paths = _candidates(name)
    for path in paths:
        if path.is_file():
            # Editors add a final newline; the template must end at {question}
            return path.read_text(encoding="utf-8").rstrip("\n")

    searched = "\n".join(f"  - {path}" for path in paths)
    raise FileNotFoundError(f"No '{name}' template. Looked in:\n{searched}")


def get_chat_prompt() -> str:
    """Template with ``{label}``, ``{context}`` and ``{question}`` slots."""
    return load_prompt(CHAT_TEMPLATE)


def clear_cache() -> None:
    load_prompt.cache_clear()


__all__ = [
    "CHAT_TEMPLATE",
    "clear_cache",
    "get_chat_prompt",
    "load_prompt",
]
