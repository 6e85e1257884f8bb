"""Terminal UI module for vaultchat.

Provides a Textual-based chat panel over a vault of notes.

Module structure (each module hides a design decision):
- config.py: Constants, labels and log levels
- formatting.py: Transcript labels and reply cleanup
- widgets.py: Custom widgets (input bar, transcript, context list, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (note picker, settings)
- app.py: Application orchestration (user interaction flow)
"""

from .app import VaultChatApp, run_textual_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, ContextDisplay, DebugPanel, NoteViewer

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ContextDisplay",
    "DebugPanel",
    "LogLevel",
    "NoteViewer",
    "VaultChatApp",
    "run_textual_tui",
]
