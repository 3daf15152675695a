"""Storage backends for storadapt."""

from .base import StorageBackend
from .memory import MemoryBackend
from .sqlite import SQLiteBackend
from .file import FileBackend

__all__ = [
    "StorageBackend",
    "MemoryBackend",
    "SQLiteBackend",
    "FileBackend",
]
