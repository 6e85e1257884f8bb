"""Modal screens for the TUI.

This module hides the design decisions about:
- How notes are picked (for '@' references and for opening a note)
- The settings form: immediate persistence, connection test, model browsing
"""

from rich.markup import escape
from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from ..chat import preview
from ..llm import GeminiClient, GeminiModel
from ..settings import Settings, SettingsError, SettingsStore
from ..vault import NoteFile, Vault
from .config import (
    API_KEY_URL,
    MODEL_DESCRIPTION_PREVIEW_LENGTH,
    NOTE_SUGGESTION_LIMIT,
    NOTICE_LONG,
    NOTICE_SHORT,
)
from .styles import DIALOG_CSS


class NoteSuggestScreen(ModalScreen[NoteFile | None]):
    """Fuzzy-less note picker: basename substring match, top ten results."""

    CSS = DIALOG_CSS + """
    NoteSuggestScreen {
        align: center middle;
        background: $background 70%;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def __init__(self, vault: Vault, title: str = "Reference a note") -> None:
        super().__init__()
        self._vault = vault
        self._title = title
        self._matches: list[NoteFile] = []

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static(self._title, id="dialog-title")
            yield Input(placeholder="Type to filter notes...", id="note-query")
            yield OptionList(id="note-list")

    def on_mount(self) -> None:
        self._refresh_matches("")
        self.query_one("#note-query", Input).focus()

    def _refresh_matches(self, query: str) -> None:
        self._matches = self._vault.find_notes(query, limit=NOTE_SUGGESTION_LIMIT)
        option_list = self.query_one("#note-list", OptionList)
        option_list.clear_options()
        option_list.add_options([
            Option(f"{escape(note.basename)}\n[dim]{escape(note.path)}[/dim]", id=str(i))
            for i, note in enumerate(self._matches)
        ])
        if self._matches:
            option_list.highlighted = 0

    def on_input_changed(self, event: Input.Changed) -> None:
        self._refresh_matches(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        option_list = self.query_one("#note-list", OptionList)
        if self._matches:
            index = option_list.highlighted or 0
            self.dismiss(self._matches[index])

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(self._matches[int(event.option.id)])

    def action_cancel(self) -> None:
        self.dismiss(None)


class SettingsScreen(ModalScreen[None]):
    """API key and model name form.

    Every edit is saved immediately. The model list is fetched on demand
    and discarded whenever the API key changes.
    """

    CSS = DIALOG_CSS + """
    SettingsScreen {
        align: center middle;
        background: $background 70%;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close", show=False),
    ]

    def __init__(self, settings: Settings, store: SettingsStore, client: GeminiClient) -> None:
        super().__init__()
        self._settings = settings
        self._store = store
        self._client = client
        self._models: list[GeminiModel] = []

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static("Vault Chat - Gemini settings", id="dialog-title")
            yield Label("API Key (from Google AI Studio)", classes="field-label")
            yield Input(
                value=self._settings.api_key,
                placeholder="AIza...",
                password=True,
                id="api-key-input",
            )
            yield Label("Model Name", classes="field-label")
            yield Input(value=self._settings.model_name, id="model-name-input")
            with Horizontal(id="dialog-buttons"):
                yield Button("Test connection", id="test-btn", variant="primary")
                yield Button("Browse models", id="models-btn")
                yield Button("Close", id="close-btn")
            yield Static("", id="model-list-status", markup=False)
            yield OptionList(id="model-list")
            yield Static(f"[dim]Get an API key: {API_KEY_URL}[/dim]")

    def on_mount(self) -> None:
        self.query_one("#model-list", OptionList).display = False

    def _save(self) -> None:
        try:
            self._store.save(self._settings)
        except SettingsError as e:
            self.notify(str(e), severity="error", timeout=NOTICE_LONG)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "api-key-input":
            if event.value == self._settings.api_key:
                return
            self._settings.api_key = event.value
            self._save()
            self._models = []
            if self.query_one("#model-list", OptionList).display:
                self._show_model_status("Enter the API key and browse again.")
                self.query_one("#model-list", OptionList).clear_options()
        elif event.input.id == "model-name-input":
            if event.value == self._settings.model_name:
                return
            self._settings.model_name = event.value
            self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "test-btn":
            self._test_connection()
        elif event.button.id == "models-btn":
            self._load_models()
        elif event.button.id == "close-btn":
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)

    @work(exclusive=True, group="connection-test")
    async def _test_connection(self) -> None:
        button = self.query_one("#test-btn", Button)
        button.disabled = True
        button.label = "Testing..."
        try:
            result = await self._client.test_connection()
            self.notify(
                result.message,
                severity="information" if result.success else "error",
                timeout=NOTICE_SHORT if result.success else NOTICE_LONG,
            )
        finally:
            button.disabled = False
            button.label = "Test connection"

    def _show_model_status(self, text: str) -> None:
        self.query_one("#model-list-status", Static).update(text)

    @work(exclusive=True, group="models")
    async def _load_models(self) -> None:
        if not self._settings.api_key:
            self.notify("Enter your API key first.", severity="warning", timeout=NOTICE_SHORT)
            return

        option_list = self.query_one("#model-list", OptionList)
        option_list.display = True
        option_list.clear_options()
        self._show_model_status("Loading models...")

        self._models = await self._client.list_models()
        if not self._models:
            self._show_model_status("Could not load models. Check your API key.")
            return
        self._render_models()

    def _render_models(self) -> None:
        option_list = self.query_one("#model-list", OptionList)
        option_list.clear_options()
        self._show_model_status(f"{len(self._models)} models available")
        options = []
        for model in self._models:
            marker = "* " if model.name == self._settings.model_name else "  "
            prompt = f"{marker}[b]{escape(model.display_name)}[/b]\n  [dim]{escape(model.name)}[/dim]"
            if model.description:
                description = escape(preview(model.description, MODEL_DESCRIPTION_PREVIEW_LENGTH))
                prompt += f"\n  [i]{description}[/i]"
            options.append(Option(prompt, id=model.name))
        option_list.add_options(options)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        model = next((m for m in self._models if m.name == event.option.id), None)
        if model is None:
            return
        self._settings.model_name = model.name
        self._save()
        self.query_one("#model-name-input", Input).value = model.name
        self.notify(f"Model selected: {model.display_name}", timeout=NOTICE_SHORT)
        self._render_models()
