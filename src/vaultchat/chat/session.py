"""Chat session.

Owns everything the chat panel mutates between sends: the pending
context, the active note, the transcript and the idle/sending state.
The UI and the CLI both drive a session; neither talks to the client
or the assembler directly.
"""

from typing import Any

from ..context import ContextAssembler, ContextSource, ContextState, format_prompt
from ..llm import GeminiClient
from ..settings import Settings
from ..vault import NoteFile, Vault
from .errors import ChatBusyError, EmptyQuestionError, EmptySelectionError, MissingApiKeyError
from .models import ChatMessage, ChatRole, ChatState

SELECTION_PREVIEW_LENGTH = 100


def preview(text: str, length: int) -> str:
    """First ``length`` characters of text, with an ellipsis if cut."""
    return text[:length] + ("..." if len(text) > length else "")


class ChatSession:
    """One chat panel's worth of state."""

    def __init__(
        self,
        settings: Settings,
        client: GeminiClient,
        vault: Vault,
        assembler: ContextAssembler | None = None,
    ):
        self._settings = settings
        self._client = client
        self._vault = vault
        self._assembler = assembler or ContextAssembler(vault)
        self._context = ContextState()
        self._active_note: NoteFile | None = None
        self._transcript: list[ChatMessage] = []
        self._state = ChatState.IDLE
        self._message_callback: Any | None = None
        self._debug_callback: Any | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def client(self) -> GeminiClient:
        return self._client

    @property
    def vault(self) -> Vault:
        return self._vault

    @property
    def context(self) -> ContextState:
        return self._context

    @property
    def active_note(self) -> NoteFile | None:
        return self._active_note

    @property
    def transcript(self) -> list[ChatMessage]:
        return list(self._transcript)

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def is_sending(self) -> bool:
        return self._state is ChatState.SENDING

    @property
    def use_all_notes(self) -> bool:
        return self._context.use_all_notes

    def set_message_callback(self, callback: Any) -> None:
        """Set the callback that receives every appended transcript entry.

        Args:
            callback: Callable(message: ChatMessage)
        """
        self._message_callback = callback

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback and propagate it to collaborators.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback
        self._client.set_debug_callback(callback)
        self._vault.set_debug_callback(callback)
        self._assembler.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Chat", message)

    def _append(self, role: ChatRole, content: str) -> ChatMessage:
        message = ChatMessage(role=role, content=content)
        self._transcript.append(message)
        if self._message_callback:
            self._message_callback(message)
        return message

    def toggle_all_notes(self) -> bool:
        """Flip between current-note and all-notes mode. Returns the new mode."""
        self._context.use_all_notes = not self._context.use_all_notes
        self._debug("info", f"All-notes mode {'on' if self.use_all_notes else 'off'}")
        return self._context.use_all_notes

    def set_active_note(self, note: NoteFile | None) -> None:
        self._active_note = note
        self._debug("info", f"Active note: {note.path if note else 'none'}")

    async def add_reference(self, note: NoteFile) -> None:
        """Tag a note; its content is read now and sent with the next question."""
        content = await self._vault.read_note(note)
        self._context.add_reference(note, content)
        self._debug("info", f"Referenced {note.basename} ({len(content):,} chars)")

    def remove_reference(self, name: str) -> bool:
        return self._context.remove_reference(name)

    def start_chat_with_selection(self, text: str) -> ChatMessage:
        """Use a text selection as the context of the next question.

        Raises:
            EmptySelectionError: If the selection is empty
        """
        if not text:
            raise EmptySelectionError()
        self._context.selection = text
        return self._append(
            ChatRole.CONTEXT,
            "Selected text added as context.\n\n"
            f"\"{preview(text, SELECTION_PREVIEW_LENGTH)}\"",
        )

    def clear_selection(self) -> None:
        self._context.clear_selection()

    async def build_prompt(self, question: str) -> tuple[ContextSource, str]:
        """Assemble the context and wrap it with the question."""
        source = await self._assembler.assemble(self._context, self._active_note)
        return source, format_prompt(source, question)

    def check_can_send(self, question: str) -> None:
        """Raise a ChatInputError if a send of this question would be rejected."""
        if not question:
            raise EmptyQuestionError()
        if not self._settings.api_key:
            raise MissingApiKeyError()
        if self.is_sending:
            raise ChatBusyError()

    async def send(self, question: str) -> ChatMessage:
        """Send a question with the pending context.

        Provider and transport failures do not raise: they are appended to
        the transcript as an ``error`` entry. The pending selection and
        references are cleared only when a reply arrives.

        Args:
            question: The user's question

        Returns:
            The appended assistant or error entry

        Raises:
            EmptyQuestionError: Blank question
            MissingApiKeyError: No API key configured
            ChatBusyError: Another send is in progress
        """
        question = question.strip()
        self.check_can_send(question)

        self._append(ChatRole.USER, question)
        self._state = ChatState.SENDING
        try:
            source, prompt = await self.build_prompt(question)
            self._debug("info", f"Sending with context: {source.label}")
            reply = await self._client.generate(prompt)
        except Exception as e:
            self._debug("error", f"Send failed: {e}")
            return self._append(ChatRole.ERROR, f"Error: {e}")
        finally:
            self._state = ChatState.IDLE

        self._context.reset()
        return self._append(ChatRole.ASSISTANT, reply)
