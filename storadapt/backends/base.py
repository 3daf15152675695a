"""Abstract base class for storage backends."""

from abc import ABC, abstractmethod
from typing import Optional


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    Backends store opaque strings under string keys, in the manner of the
    browser's localStorage. The Store class handles encoding, deep paths
    and the public API.

    Any method may raise; the Store logs the failure and falls back to a
    safe default.
    """

    @abstractmethod
    def connect(self, **kwargs) -> None:
        """Establish connection to storage.

        Args:
            **kwargs: Backend-specific connection parameters
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close connection and release resources."""
        pass

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Retrieve the string stored under key.

        Returns:
            The stored string, or None if the key does not exist
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key. Removing a missing key does nothing."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every key."""
        pass

    @abstractmethod
    def length(self) -> int:
        """Number of stored keys."""
        pass

    @abstractmethod
    def key(self, index: int) -> Optional[str]:
        """Key at position index in the backend's enumeration order.

        Returns:
            The key, or None if index is out of range
        """
        pass
