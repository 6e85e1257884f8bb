"""Vault access.

Hides how notes are discovered and read from disk:
- Which files count as notes (markdown only, hidden directories skipped)
- Path normalisation (vault-relative POSIX paths)
- Off-loop file reads, with per-file failures reported as empty content
"""

import asyncio
from pathlib import Path
from typing import Any

from .models import NoteFile

NOTE_SUFFIX = ".md"


class Vault:
    """A directory of markdown notes."""

    def __init__(self, root: str | Path):
        self._root = Path(root).expanduser().resolve()
        self._debug_callback: Any | None = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def name(self) -> str:
        return self._root.name

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Vault", message)

    def _to_note(self, path: Path) -> NoteFile:
        return NoteFile(
            path=path.relative_to(self._root).as_posix(),
            absolute_path=path,
        )

    def list_notes(self) -> list[NoteFile]:
        """List every markdown note in the vault, sorted by path."""
        notes = []
        for path in self._root.rglob(f"*{NOTE_SUFFIX}"):
            relative = path.relative_to(self._root)
            # Skip .git, .obsidian, our own settings dir, ...
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file():
                notes.append(self._to_note(path))
        notes.sort(key=lambda n: n.path)
        return notes

    def get_note(self, path_or_name: str) -> NoteFile | None:
        """Resolve a vault-relative path or a note basename.

        Args:
            path_or_name: 'folder/note.md', 'folder/note' or 'note'

        Returns:
            Matching note, or None
        """
        wanted = path_or_name.strip().replace("\\", "/")
        if not wanted:
            return None
        if not wanted.endswith(NOTE_SUFFIX):
            with_suffix = wanted + NOTE_SUFFIX
        else:
            with_suffix = wanted

        notes = self.list_notes()
        for note in notes:
            if note.path == with_suffix:
                return note
        for note in notes:
            if note.basename == wanted:
                return note
        return None

    def find_notes(self, query: str, limit: int = 10) -> list[NoteFile]:
        """Notes whose basename contains the query (case-insensitive)."""
        needle = query.lower()
        matches = [n for n in self.list_notes() if needle in n.basename.lower()]
        return matches[:limit]

    async def read_note(self, note: NoteFile) -> str:
        """Read a note's text without blocking the event loop."""
        return await asyncio.to_thread(note.absolute_path.read_text, encoding="utf-8")

    async def _read_or_empty(self, note: NoteFile) -> str:
        try:
            return await self.read_note(note)
        except (OSError, UnicodeDecodeError) as e:
            self._debug("warning", f"Could not read {note.path}: {e}")
            return ""

    async def read_all_notes(
        self,
        notes: list[NoteFile] | None = None
    ) -> list[tuple[NoteFile, str]]:
        """Read notes concurrently and wait for all of them.

        A note that cannot be read contributes an empty string.

        Args:
            notes: Notes to read (default: every note in the vault)

        Returns:
            (note, content) pairs in the same order as ``notes``
        """
        if notes is None:
            notes = self.list_notes()
        contents = await asyncio.gather(*(self._read_or_empty(n) for n in notes))
        self._debug("debug", f"Read {len(notes)} notes")
        return list(zip(notes, contents))
