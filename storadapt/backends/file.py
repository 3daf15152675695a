"""Filesystem storage backend."""

from pathlib import Path
from typing import List, Optional
from urllib.parse import quote, unquote

from .base import StorageBackend

SUFFIX = ".item"


class FileBackend(StorageBackend):
    """One file per key inside a directory.

    File names are the percent-encoded keys plus ".item", so any key,
    the empty key included, is a valid file name. Other files in the
    directory are ignored. Keys enumerate in sorted order. An empty file reads as a missing
    key.

    Example:
        backend = FileBackend()
        backend.connect(path=".cache/storage")

        backend.set_item("user:1", '{"name": "Alice"}')
    """

    def __init__(self):
        self._root: Optional[Path] = None

    def connect(self, path: str = ".storadapt", **kwargs) -> None:
        """Use path as the storage directory, creating it if needed.

        Args:
            path: Directory that holds one file per key
        """
        self._root = Path(path)
        self._root.mkdir(parents=True, exist_ok=True)

    def close(self) -> None:
        """Forget the storage directory. Files are left in place."""
        self._root = None

    def _file(self, key: str) -> Path:
        if self._root is None:
            raise RuntimeError("FileBackend is not connected")
        return self._root / (quote(key, safe="") + SUFFIX)

    def _keys(self) -> List[str]:
        if self._root is None:
            raise RuntimeError("FileBackend is not connected")
        return sorted(
            unquote(entry.name[: -len(SUFFIX)])
            for entry in self._root.iterdir()
            if entry.is_file() and entry.name.endswith(SUFFIX)
        )

    def get_item(self, key: str) -> Optional[str]:
        """Read the file for key."""
        file = self._file(key)
        if not file.is_file():
            return None
        content = file.read_text(encoding="utf-8")
        return content or None

    def set_item(self, key: str, value: str) -> None:
        """Write value to the file for key."""
        if not isinstance(value, str):
            raise TypeError(f"Value must be a string, got {type(value).__name__}")
        self._file(key).write_text(value, encoding="utf-8")

    def remove_item(self, key: str) -> None:
        """Delete the file for key if it exists."""
        self._file(key).unlink(missing_ok=True)

    def clear(self) -> None:
        """Delete every key file."""
        for key in self._keys():
            self._file(key).unlink(missing_ok=True)

    def length(self) -> int:
        """Number of stored keys."""
        return len(self._keys())

    def key(self, index: int) -> Optional[str]:
        """Key at index in sorted order."""
        keys = self._keys()
        if index < 0 or index >= len(keys):
            return None
        return keys[index]
