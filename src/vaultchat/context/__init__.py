"""Context module: what gets sent alongside the user's question."""

from .assembler import MAX_ALL_NOTES_CHARS, ContextAssembler, format_prompt
from .models import ContextKind, ContextSource, ContextState, ReferencedNote

__all__ = [
    "MAX_ALL_NOTES_CHARS",
    "ContextAssembler",
    "ContextKind",
    "ContextSource",
    "ContextState",
    "ReferencedNote",
    "format_prompt",
]
