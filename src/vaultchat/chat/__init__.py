"""Chat module: the send cycle and its transcript."""

from .errors import (
    ChatBusyError,
    ChatInputError,
    EmptyQuestionError,
    EmptySelectionError,
    MissingApiKeyError,
)
from .models import ChatMessage, ChatRole, ChatState
from .session import ChatSession, preview

__all__ = [
    "ChatBusyError",
    "ChatInputError",
    "ChatMessage",
    "ChatRole",
    "ChatSession",
    "ChatState",
    "EmptyQuestionError",
    "EmptySelectionError",
    "MissingApiKeyError",
    "preview",
]
