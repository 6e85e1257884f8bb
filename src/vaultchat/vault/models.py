"""Data models for vault notes."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class NoteFile(BaseModel):
    """A markdown note inside a vault."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Vault-relative POSIX path, e.g. 'projects/plan.md'")
    absolute_path: Path = Field(description="Location on disk")

    @property
    def basename(self) -> str:
        """File name without directory or extension."""
        return Path(self.path).stem
