"""In-memory storage backend for testing."""

from typing import Dict, Mapping, Optional

from .base import StorageBackend


class MemoryBackend(StorageBackend):
    """In-memory storage backend.

    Useful for testing and temporary storage. Data is lost when the
    backend is closed or the process ends. Keys enumerate in insertion
    order.

    Example:
        backend = MemoryBackend()
        backend.connect()

        backend.set_item("greeting", "hello")
        backend.get_item("greeting")  # 'hello'
    """

    def __init__(self, data: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = dict(data or {})
        self._connected = False

    def connect(self, **kwargs) -> None:
        """Mark the in-memory store as ready."""
        self._connected = True

    def close(self) -> None:
        """Clear the in-memory store."""
        self._data.clear()
        self._connected = False

    def get_item(self, key: str) -> Optional[str]:
        """Retrieve value by key."""
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store or update value."""
        if not isinstance(value, str):
            raise TypeError(f"Value must be a string, got {type(value).__name__}")
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        """Remove key if present."""
        self._data.pop(key, None)

    def clear(self) -> None:
        """Remove every key."""
        self._data.clear()

    def length(self) -> int:
        """Number of stored keys."""
        return len(self._data)

    def key(self, index: int) -> Optional[str]:
        """Key at index in insertion order."""
        if index < 0 or index >= len(self._data):
            return None
        return list(self._data)[index]
