"""Data models for the chat transcript."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    ERROR = "error"
    CONTEXT = "context"


class ChatState(str, Enum):
    """Per-request state of the chat panel."""

    IDLE = "idle"
    SENDING = "sending"


@dataclass
class ChatMessage:
    """A transcript entry. Render-only, never persisted."""

    role: ChatRole
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
