"""Data models for prompt context.

Hides how the pending context (selection, referenced notes, mode flag)
is represented between sends.
"""

from dataclasses import dataclass, field
from enum import Enum

from ..vault import NoteFile


class ContextKind(str, Enum):
    """Which source produced the context blob."""

    SELECTION = "selection"
    REFERENCED = "referenced"
    ALL_NOTES = "all_notes"
    CURRENT_NOTE = "current_note"
    NONE = "none"


@dataclass(frozen=True)
class ReferencedNote:
    """A note the user explicitly tagged, with the content read at tag time."""

    note: NoteFile
    content: str


@dataclass(frozen=True)
class ContextSource:
    """The assembled context: a label for the prompt header and the text."""

    label: str
    text: str
    kind: ContextKind


@dataclass
class ContextState:
    """Pending context for the next send.

    ``referenced`` is keyed by note basename; insertion order is the
    order the notes appear in the prompt.
    """

    selection: str = ""
    referenced: dict[str, ReferencedNote] = field(default_factory=dict)
    use_all_notes: bool = False

    @property
    def reference_count(self) -> int:
        """Number of pending context items (selection counts as one)."""
        return len(self.referenced) + (1 if self.selection else 0)

    def add_reference(self, note: NoteFile, content: str) -> None:
        self.referenced[note.basename] = ReferencedNote(note=note, content=content)

    def remove_reference(self, name: str) -> bool:
        return self.referenced.pop(name, None) is not None

    def clear_references(self) -> None:
        self.referenced.clear()

    def clear_selection(self) -> None:
        self.selection = ""

    def reset(self) -> None:
        """Drop selection and references; the all-notes flag is kept."""
        self.clear_selection()
        self.clear_references()
