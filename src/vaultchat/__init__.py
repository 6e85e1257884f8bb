"""
vaultchat: chat with a folder of markdown notes through Google Gemini.

The question is sent together with one context source (a text selection,
explicitly referenced notes, the whole vault, or the current note).
"""

__version__ = "0.1.0"

from .chat import ChatMessage, ChatRole, ChatSession
from .context import ContextAssembler, ContextSource, ContextState, format_prompt
from .errors import VaultChatError
from .llm import GeminiClient
from .settings import Settings, create_settings_store
from .vault import NoteFile, Vault

__all__ = [
    "ChatMessage",
    "ChatRole",
    "ChatSession",
    "ContextAssembler",
    "ContextSource",
    "ContextState",
    "GeminiClient",
    "NoteFile",
    "Settings",
    "Vault",
    "VaultChatError",
    "create_settings_store",
    "format_prompt",
]
