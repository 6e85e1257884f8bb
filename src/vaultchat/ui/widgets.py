"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history and '@' mention detection
- Busy state of the send controls
- Transcript rendering (markdown replies, styled context/error entries)
- Pending-context list with per-item removal
- Log rendering with level filtering
"""

from datetime import datetime

from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from ..chat import ChatMessage, ChatRole, preview
from ..context import ContextState
from ..vault import NoteFile
from .config import (
    CONTEXT_PREVIEW_LENGTH,
    INPUT_HISTORY_MAX_SIZE,
    LOG_TIMESTAMP_FORMAT,
    MODE_ALL_LABEL,
    MODE_CURRENT_LABEL,
    SEND_LABEL,
    SENDING_LABEL,
    LogLevel,
)
from .formatting import clean_latex, role_style


def location_to_index(text: str, location: tuple[int, int]) -> int:
    """Convert a TextArea (row, column) location to a string index."""
    row, column = location
    lines = text.split("\n")
    return sum(len(line) + 1 for line in lines[:row]) + column


def index_to_location(text: str, index: int) -> tuple[int, int]:
    """Convert a string index to a TextArea (row, column) location."""
    before = text[:index]
    row = before.count("\n")
    column = len(before) - (before.rfind("\n") + 1)
    return row, column


class ClickableMessage(Vertical):
    """A chat message container that copies its raw content when clicked."""

    def __init__(self, content: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = content

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self._content)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class MentionTyped(Message):
        """Message sent when the user types '@' to reference a note."""

        def __init__(self, at_index: int) -> None:
            super().__init__()
            self.at_index = at_index

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._last_text = ""
        self._busy = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False, soft_wrap=True)
        text_area.cursor_blink = False
        yield text_area
        yield Button(SEND_LABEL, id="send-btn", variant="success").with_tooltip(
            "Send message (Ctrl+J). Type @ to reference a note."
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False
        text_area.focus()

    @property
    def text_area(self) -> TextArea:
        return self.query_one("#chat-input", TextArea)

    @property
    def is_busy(self) -> bool:
        return self._busy

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        """Detect a freshly typed '@'."""
        text = event.text_area.text
        previous, self._last_text = self._last_text, text
        if len(text) != len(previous) + 1:
            return
        cursor = location_to_index(text, event.text_area.cursor_location)
        if cursor > 0 and text[cursor - 1] == "@":
            self.post_message(self.MentionTyped(cursor - 1))

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self.text_area.cursor_location == (0, 0):
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                self.set_text("")
                return
        self.set_text(self._history[self._history_index])

    def _submit(self) -> None:
        if self._busy:
            return
        value = self.text_area.text.strip()
        if value:
            self.post_message(self.Submitted(value))

    def accept_submission(self, value: str) -> None:
        """Record a sent question in the history and clear the input."""
        if not self._history or self._history[-1] != value:
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        self.set_text("")

    def set_text(self, text: str, cursor_index: int | None = None) -> None:
        """Replace the input text without triggering mention detection."""
        self._last_text = text
        text_area = self.text_area
        text_area.text = text
        index = len(text) if cursor_index is None else cursor_index
        text_area.cursor_location = index_to_location(text, index)

    def remove_mention(self, at_index: int) -> None:
        """Remove the '@' that opened the note picker."""
        text = self.text_area.text
        if 0 <= at_index < len(text) and text[at_index] == "@":
            self.set_text(text[:at_index] + text[at_index + 1:], cursor_index=at_index)

    def set_busy(self, busy: bool) -> None:
        """Disable the controls while a request is in flight."""
        self._busy = busy
        text_area = self.text_area
        button = self.query_one("#send-btn", Button)
        text_area.disabled = busy
        button.disabled = busy
        button.label = SENDING_LABEL if busy else SEND_LABEL

    def set_placeholder(self, text: str) -> None:
        self.text_area.placeholder = text

    def focus_input(self) -> None:
        """Focus the text input."""
        self.text_area.focus()


class ModeToggle(Button):
    """Button switching between current-note and all-notes context."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(MODE_CURRENT_LABEL, *args, **kwargs)

    def show_mode(self, use_all_notes: bool) -> None:
        self.label = MODE_ALL_LABEL if use_all_notes else MODE_CURRENT_LABEL
        self.set_class(use_all_notes, "mode-all")


class RemoveContextButton(Button):
    """Small button removing one pending context item."""

    def __init__(self, reference_name: str | None, **kwargs) -> None:
        super().__init__("x", classes="context-remove", **kwargs)
        # None means "the text selection"
        self.reference_name = reference_name


class ContextDisplay(Vertical):
    """List of pending context items (selection and referenced notes)."""

    BORDER_TITLE = "Context"

    class RemoveRequested(Message):
        """Message sent when the user removes a context item."""

        def __init__(self, reference_name: str | None) -> None:
            super().__init__()
            self.reference_name = reference_name

    def show_context(self, state: ContextState) -> None:
        """Rebuild the list from the pending context."""
        self.remove_children()
        total = state.reference_count
        self.set_class(total > 0, "-visible")
        if total == 0:
            return

        self.border_title = f"Context ({total})"
        rows = []
        if state.selection:
            label = Static(
                f"Selected text ({preview(state.selection, CONTEXT_PREVIEW_LENGTH)})",
                classes="context-item-label selection",
                markup=False,
            )
            rows.append(Horizontal(label, RemoveContextButton(None), classes="context-item"))
        for name in state.referenced:
            label = Static(name, classes="context-item-label", markup=False)
            rows.append(Horizontal(label, RemoveContextButton(name), classes="context-item"))
        self.mount_all(rows)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, RemoveContextButton):
            event.stop()
            self.post_message(self.RemoveRequested(event.button.reference_name))


class NoteViewer(TextArea):
    """Read-only view of the active note; its selection feeds the chat."""

    BORDER_TITLE = "Note"
    BORDER_SUBTITLE = "Ctrl+O to open"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(
            *args,
            read_only=True,
            soft_wrap=True,
            show_line_numbers=False,
            **kwargs
        )

    def show_note(self, note: NoteFile, content: str) -> None:
        self.load_text(content)
        self.border_title = note.path
        self.border_subtitle = f"{len(content):,} chars"


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat transcript."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "No messages"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._messages: list[ChatMessage] = []

    @property
    def message_count(self) -> int:
        return len(self._messages)

    def add_message(self, msg: ChatMessage) -> None:
        """Append and render a transcript entry."""
        self._messages.append(msg)
        self._render_message(msg)
        self.border_subtitle = f"{len(self._messages)} messages"
        self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for msg in reversed(self._messages):
            if msg.role is ChatRole.ASSISTANT:
                return msg.content
        return None

    def clear_history(self) -> None:
        self._messages.clear()
        self.remove_children()
        self.border_subtitle = "No messages"

    def _render_message(self, msg: ChatMessage) -> None:
        label, icon, css_class = role_style(msg.role)
        timestamp = msg.timestamp.strftime("%H:%M:%S")

        container = ClickableMessage(content=msg.content, classes=f"chat-message {css_class}")
        container.compose_add_child(
            Static(f"{icon} {label} [{timestamp}]", classes="message-header", markup=False)
        )
        if msg.role is ChatRole.ASSISTANT:
            container.compose_add_child(Markdown(clean_latex(msg.content), classes="message-content"))
        else:
            container.compose_add_child(Static(msg.content, classes="message-content", markup=False))
        self.mount(container)


class DebugPanel(RichLog):
    """Log panel for request tracing with level filtering.

    Hidden by default, shown with --log-level or toggled with F3.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Hidden"

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Chat": "green",
        "LLM": "magenta",
        "Vault": "blue",
        "Context": "yellow",
        "Settings": "bright_cyan",
    }

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def log_message(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        from rich.markup import escape

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")
        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )

    def handle_debug(self, level: str, component: str, message: str) -> None:
        """Debug callback entry point: Callable(level, component, message)."""
        self.log_message(component, message, LogLevel.from_string(level))

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self._update_subtitle()

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
