"""Context assembly.

Picks exactly one context source per send, first match wins:
selection > referenced notes > all notes > current note.
"""

from typing import Any

from ..prompts import get_chat_prompt
from ..vault import NoteFile, Vault
from .models import ContextKind, ContextSource, ContextState

MAX_ALL_NOTES_CHARS = 50_000
SECTION_SEPARATOR = "\n---\n"


def format_prompt(source: ContextSource, question: str) -> str:
    """Wrap the assembled context and the user's question into one prompt."""
    return get_chat_prompt().format(
        label=source.label,
        context=source.text,
        question=question,
    )


class ContextAssembler:
    """Builds the context blob for a send."""

    def __init__(self, vault: Vault, max_chars: int = MAX_ALL_NOTES_CHARS):
        self._vault = vault
        self._max_chars = max_chars
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Context", message)

    async def assemble(
        self,
        state: ContextState,
        active_note: NoteFile | None = None
    ) -> ContextSource:
        """Assemble the context for the next prompt.

        Args:
            state: Pending selection, references and the all-notes flag
            active_note: Note currently open, used as the fallback source

        Returns:
            ContextSource with the prompt label and context text
        """
        if state.selection:
            source = ContextSource("Selected text", state.selection, ContextKind.SELECTION)

        elif state.referenced:
            sections = [
                f"[Referenced Note: {name}]\n{ref.content}\n"
                for name, ref in state.referenced.items()
            ]
            source = ContextSource(
                f"Referenced notes ({len(state.referenced)})",
                SECTION_SEPARATOR.join(sections),
                ContextKind.REFERENCED,
            )

        elif state.use_all_notes:
            source = await self._assemble_all_notes()

        elif active_note is not None:
            source = ContextSource(
                active_note.path,
                await self._vault.read_note(active_note),
                ContextKind.CURRENT_NOTE,
            )

        else:
            source = ContextSource("None", "", ContextKind.NONE)

        self._debug("debug", f"Context: {source.kind.value}, {len(source.text):,} chars")
        return source

    async def _assemble_all_notes(self) -> ContextSource:
        notes = self._vault.list_notes()
        pairs = await self._vault.read_all_notes(notes)
        sections = [f"[File: {note.path}]\n{content}\n" for note, content in pairs]
        text = SECTION_SEPARATOR.join(sections)
        if len(text) > self._max_chars:
            self._debug("info", f"All-notes context truncated from {len(text):,} chars")
            text = text[: self._max_chars]
        return ContextSource(f"Entire vault ({len(notes)} files)", text, ContextKind.ALL_NOTES)
