"""Vault module: markdown notes on disk."""

from .models import NoteFile
from .vault import Vault

__all__ = [
    "NoteFile",
    "Vault",
]
