"""Main Textual TUI application.

Orchestrates the UI components and drives a ChatSession from user input.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Static

from ..chat import ChatInputError, ChatMessage, ChatSession
from ..settings import SettingsStore
from ..vault import NoteFile
from .config import APP_TITLE, NOTICE_SHORT, LogLevel
from .screens import NoteSuggestScreen, SettingsScreen
from .styles import APP_CSS
from .themes import VAULT_NIGHT
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    ContextDisplay,
    DebugPanel,
    ModeToggle,
    NoteViewer,
)

DEFAULT_PLACEHOLDER = "Ask a question... (@ to reference a note)"
SELECTION_PLACEHOLDER = "Ask about the selected text..."


class VaultChatApp(App):
    """Textual chat panel over a vault of markdown notes."""

    CSS = APP_CSS
    TITLE = APP_TITLE

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+o", "open_note", "Open Note"),
        Binding("ctrl+t", "toggle_mode", "All/Current"),
        Binding("ctrl+s", "chat_with_selection", "Ask Selection"),
        Binding("f2", "open_settings", "Settings"),
        Binding("ctrl+l", "clear_chat", "Clear Chat"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("f3", "toggle_debug", "Log"),
    ]

    def __init__(
        self,
        session: ChatSession,
        settings_store: SettingsStore,
        log_level: str | None = None,
        initial_selection: str | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._settings_store = settings_store
        self._log_level = log_level
        self._initial_selection = initial_selection

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="main"):
            yield NoteViewer(id="note-viewer")

            with Vertical(id="chat-panel"):
                with Horizontal(id="chat-header"):
                    yield Static("Vault Chat", id="chat-title")
                    yield ModeToggle(id="mode-toggle")
                yield ChatHistoryWidget(id="chat-history")
                yield ContextDisplay(id="context-display")
                yield ChatInputBar(id="chat-input-bar")

        yield DebugPanel(id="debug-panel")
        yield Footer()

    def on_mount(self) -> None:
        self.register_theme(VAULT_NIGHT)
        self.theme = "vault-night"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.log_message("TUI", f"Log panel enabled with level: {self._log_level.upper()}", LogLevel.INFO)

        self._session.set_debug_callback(log_panel.handle_debug)
        self._session.set_message_callback(self._on_session_message)

        self._update_subtitle()
        self.query_one("#mode-toggle", ModeToggle).show_mode(self._session.use_all_notes)
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_placeholder(DEFAULT_PLACEHOLDER)

        if self._session.active_note is not None:
            self._open_note(self._session.active_note)

        if self._initial_selection:
            self._use_selection(self._initial_selection)

        input_bar.focus_input()

    def _update_subtitle(self) -> None:
        settings = self._session.settings
        self.sub_title = f"{self._session.vault.name} | {settings.model_name}"

    def _on_session_message(self, message: ChatMessage) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).add_message(message)

    def _refresh_context_display(self) -> None:
        self.query_one("#context-display", ContextDisplay).show_context(self._session.context)

    # Sending

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Validate, lock the input and send in the background."""
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        try:
            self._session.check_can_send(event.value.strip())
        except ChatInputError as e:
            self.notify(str(e), severity="warning", timeout=NOTICE_SHORT)
            return

        input_bar.accept_submission(event.value)
        input_bar.set_busy(True)
        self._send(event.value)

    @work(exclusive=True, group="send")
    async def _send(self, question: str) -> None:
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        try:
            await self._session.send(question)
        except ChatInputError as e:
            self.notify(str(e), severity="warning", timeout=NOTICE_SHORT)
        finally:
            input_bar.set_busy(False)
            input_bar.set_placeholder(DEFAULT_PLACEHOLDER)
            input_bar.focus_input()
            self._refresh_context_display()

    # Context sources

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "mode-toggle":
            self.action_toggle_mode()

    def action_toggle_mode(self) -> None:
        """Switch between current-note and all-notes context."""
        use_all = self._session.toggle_all_notes()
        self.query_one("#mode-toggle", ModeToggle).show_mode(use_all)
        self.notify("All-notes mode" if use_all else "Current-note mode", timeout=2)

    def on_chat_input_bar_mention_typed(self, event: ChatInputBar.MentionTyped) -> None:
        at_index = event.at_index

        def _chosen(note: NoteFile | None) -> None:
            if note is None:
                return
            self.query_one("#chat-input-bar", ChatInputBar).remove_mention(at_index)
            self._add_reference(note)

        self.push_screen(NoteSuggestScreen(self._session.vault), _chosen)

    @work(group="references")
    async def _add_reference(self, note: NoteFile) -> None:
        try:
            await self._session.add_reference(note)
        except (OSError, UnicodeDecodeError) as e:
            self.notify(f"Cannot read {note.path}: {e}", severity="error")
            return
        self._refresh_context_display()
        self.notify(f"Referenced {note.basename}", timeout=2)
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_context_display_remove_requested(self, event: ContextDisplay.RemoveRequested) -> None:
        if event.reference_name is None:
            self._session.clear_selection()
            self.notify("Selected text removed", timeout=2)
        else:
            self._session.remove_reference(event.reference_name)
            self.notify(f"{event.reference_name} removed", timeout=2)
        self._refresh_context_display()

    def action_chat_with_selection(self) -> None:
        """Use the note viewer's selection as context for the next question."""
        selected = self.query_one("#note-viewer", NoteViewer).selected_text
        if not selected:
            self.notify("Select some text first.", severity="warning", timeout=NOTICE_SHORT)
            return
        self._use_selection(selected)

    def _use_selection(self, text: str) -> None:
        self._session.start_chat_with_selection(text)
        self._refresh_context_display()
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_placeholder(SELECTION_PLACEHOLDER)
        input_bar.focus_input()
        self.notify("Selected text added as context", timeout=2)

    def action_open_note(self) -> None:
        def _chosen(note: NoteFile | None) -> None:
            if note is not None:
                self._open_note(note)

        self.push_screen(NoteSuggestScreen(self._session.vault, title="Open a note"), _chosen)

    @work(exclusive=True, group="open-note")
    async def _open_note(self, note: NoteFile) -> None:
        try:
            content = await self._session.vault.read_note(note)
        except (OSError, UnicodeDecodeError) as e:
            self.notify(f"Cannot read {note.path}: {e}", severity="error")
            return
        self.query_one("#note-viewer", NoteViewer).show_note(note, content)
        self._session.set_active_note(note)

    # Settings and housekeeping

    def action_open_settings(self) -> None:
        screen = SettingsScreen(self._session.settings, self._settings_store, self._session.client)
        self.push_screen(screen, lambda _: self._update_subtitle())

    def action_clear_chat(self) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).clear_history()
        self.notify("Chat cleared", timeout=2)

    def action_copy_last_response(self) -> None:
        response = self.query_one("#chat-history", ChatHistoryWidget).get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied", timeout=2)
        else:
            self.notify("No response to copy", severity="warning", timeout=2)

    def action_toggle_debug(self) -> None:
        is_visible = self.query_one("#debug-panel", DebugPanel).toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_textual_tui(
    session: ChatSession,
    settings_store: SettingsStore,
    log_level: str | None = None,
    initial_selection: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        session: Chat session bound to a vault and a Gemini client
        settings_store: Where settings edits are persisted
        log_level: Log level for panel (debug/info/warning/error), None to hide
        initial_selection: Text to use as context for the first question
    """
    app = VaultChatApp(
        session=session,
        settings_store=settings_store,
        log_level=log_level,
        initial_selection=initial_selection,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await session.client.close()
