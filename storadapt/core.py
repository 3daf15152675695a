"""Core Store class: encoded values and dot-path access over a backend."""

import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union
from urllib.parse import urlparse

from .backends.base import StorageBackend
from .backends.memory import MemoryBackend
from .exceptions import BackendError, PathError, ShapeMismatchError
from .path import (
    EMPTY,
    MAX_EXTEND,
    delete_at,
    is_index_segment,
    matches_root_shape,
    parse_path,
    traverse,
    write_at,
)
from .serialization import Serializer

_NO_DEFAULT = object()


class Store:
    """Key-value storage with transparent encoding and deep paths.

    An address is a storage key, optionally followed by a dotted path into
    the value stored there: "user", "user.prefs.theme", "users.0.name".
    Deep reads and writes load the whole value, work on it in memory and
    (for writes) store it back.

    The Store never raises from its public operations. Failures are logged
    and turned into None, False, 0 or a no-op, so storage problems cannot
    take the host application down.

    Example:
        from storadapt import connect

        db = connect("memory://")

        db.set("user", {"name": "Alice", "prefs": {"theme": "dark"}})
        db.get("user.name")                    # 'Alice'
        db.set("user.prefs.theme", "light")
        db.set("items.3", "x", create_path=True)
        db.get("items")                        # [EMPTY, EMPTY, EMPTY, 'x']
        db.get("user.missing", default="n/a")  # 'n/a'
    """

    def __init__(
        self,
        backend: Union[StorageBackend, Callable[[], StorageBackend]],
        serializer: Optional[Serializer] = None,
        logger: Optional[logging.Logger] = None,
        max_extend: int = MAX_EXTEND,
    ):
        """Create a Store over a connected backend.

        Use connect() for convenient URL-based connection.

        Args:
            backend: Storage backend instance, or a factory returning one
            serializer: Codec for stored values (default Serializer())
            logger: Where diagnostics go (default the "storadapt" logger)
            max_extend: Most slots a create_path write may add to one list
        """
        if not isinstance(backend, StorageBackend) and callable(backend):
            backend = backend()
        self._backend = backend
        self._serializer = serializer or Serializer()
        self._logger = logger or logging.getLogger("storadapt")
        self._max_extend = max_extend

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    # Enumeration

    @property
    def length(self) -> int:
        """Number of stored keys, or 0 if the backend fails."""
        try:
            return self._call("length")
        except Exception:
            self._logger.error("Store.length error", exc_info=True)
            return 0

    def key(self, index: int) -> Optional[str]:
        """Storage key at position index, or None."""
        try:
            return self._call("key", index)
        except Exception:
            self._logger.error("Store.key error for index %r", index, exc_info=True)
            return None

    def keys(self) -> List[str]:
        """All storage keys in backend enumeration order."""
        result = []
        for i in range(self.length):
            k = self.key(i)
            if k is not None:
                result.append(k)
        return result

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return self.length

    def __contains__(self, address: str) -> bool:
        return self.has(address)

    # Public operations

    def get(self, address: str, default: Any = _NO_DEFAULT) -> Any:
        """Get the value at address.

        Args:
            address: Storage key, optionally followed by a dotted path
            default: Returned when nothing is stored at address. When given,
                path errors are suppressed and the default returned instead.

        Returns:
            The decoded value, the default, or None
        """
        has_default = default is not _NO_DEFAULT
        fallback = default if has_default else None
        try:
            storage_key, path = self._split(address)

            if not path:
                raw = self._call("get_item", storage_key)
                if raw is None:
                    return fallback
                return self._serializer.decode(raw)

            root = self._load_root(storage_key, path)
            if root is None:
                return fallback

            def on_error(error: PathError) -> bool:
                if has_default:
                    self._logger.debug("Store.get fell back to default for %r: %s", address, error)
                return not has_default

            value = traverse(root, path, on_error=on_error)
            if value is None or value is EMPTY:
                return fallback
            return value
        except Exception:
            self._logger.error("Store.get error for key %r", address, exc_info=True)
            return fallback

    def set(self, address: str, value: Any, create_path: bool = False) -> None:
        """Store value at address.

        Args:
            address: Storage key, optionally followed by a dotted path
            value: Value to store
            create_path: Create missing containers along a deep path and
                extend lists as needed, up to max_extend new slots per list

        Strings are stored verbatim and decoded as JSON when read, so a
        string that is itself valid JSON reads back as that JSON value:
        set("k", "123") then get("k") gives 123, and "null" gives None.
        """
        try:
            storage_key, path = self._split(address)

            if not path:
                self._call("set_item", storage_key, self._serializer.encode(value))
                return

            root = self._load_root(storage_key, path, seed=True)
            if root is None:
                return

            write_at(root, path, value, create_path=create_path, max_extend=self._max_extend)
            self._call("set_item", storage_key, self._serializer.encode(root))
        except Exception:
            self._logger.error("Store.set error for key %r", address, exc_info=True)

    def remove(self, address: str) -> None:
        """Remove a storage key, or one property or list slot inside its value.

        Removing a list element leaves EMPTY in its slot; the list keeps its
        length. Removing something that is not there does nothing.
        """
        try:
            storage_key, path = self._split(address)

            if not path:
                self._call("remove_item", storage_key)
                return

            root = self._load_root(storage_key, path, warn_missing=True)
            if root is None:
                return

            if delete_at(root, path):
                self._call("set_item", storage_key, self._serializer.encode(root))
        except Exception:
            self._logger.error("Store.remove error for key %r", address, exc_info=True)

    def has(self, address: str) -> bool:
        """Check whether a value exists at address.

        For deep paths this is get(address) is not None, so a stored None
        counts as absent.
        """
        try:
            storage_key, path = self._split(address)
            if not path:
                return self._call("get_item", storage_key) is not None
            return self.get(address, default=None) is not None
        except Exception:
            self._logger.error("Store.has error for key %r", address, exc_info=True)
            return False

    def clear(self) -> None:
        """Remove every key from the backend."""
        try:
            self._call("clear")
        except Exception:
            self._logger.error("Store.clear error", exc_info=True)

    # Helpers

    def _call(self, method: str, *args) -> Any:
        """Invoke a backend method, wrapping any failure in BackendError."""
        try:
            return getattr(self._backend, method)(*args)
        except Exception as e:
            raise BackendError(f"Backend {method} failed: {e}") from e

    def _split(self, address: str) -> Tuple[str, List[str]]:
        """Split an address into its storage key and deep path."""
        storage_key, dot, rest = address.partition(".")
        return storage_key, parse_path(rest) if dot else []

    def _load_root(
        self,
        storage_key: str,
        path: List[str],
        seed: bool = False,
        warn_missing: bool = False,
    ) -> Any:
        """Load and shape-check the root value for a deep operation.

        Args:
            storage_key: Key holding the root value
            path: Deep path that will be applied to the root
            seed: If the key is missing, start from [] or {} (by the first
                segment) instead of giving up
            warn_missing: Log a warning when the key is missing

        Returns:
            The root value (a list or dict), or None if the operation
            should not go on
        """
        raw = self._call("get_item", storage_key)

        if raw is None:
            if seed:
                return [] if is_index_segment(path[0]) else {}
            if warn_missing:
                self._logger.warning("Key %r does not exist", storage_key)
            return None

        root = self._serializer.decode(raw)
        if not matches_root_shape(root, path[0]):
            expected = "array" if is_index_segment(path[0]) else "object"
            self._logger.warning("%s", ShapeMismatchError(storage_key, expected, type(root)))
            return None

        return root

    # Lifecycle

    def close(self) -> None:
        """Close the backend and release resources."""
        try:
            self._call("close")
        except Exception:
            self._logger.error("Store.close error", exc_info=True)

    def __enter__(self) -> "Store":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()


def connect(url: str, **kwargs) -> Store:
    """Connect to a store using a URL.

    Supported URL schemes:
        - memory://          In-memory storage (testing)
        - sqlite:///path.db  SQLite file storage
        - sqlite:///:memory: SQLite in-memory
        - file:///path/dir   One file per key in a directory

    Args:
        url: Connection URL
        **kwargs: Passed to Store (serializer, logger, max_extend)

    Returns:
        Connected Store instance

    Example:
        db = connect("sqlite:///settings.db")
        db = connect("memory://")
    """
    parsed = urlparse(url)
    scheme = parsed.scheme

    if scheme == "memory":
        backend = MemoryBackend()
        backend.connect()
        return Store(backend, **kwargs)

    elif scheme == "sqlite":
        from .backends.sqlite import SQLiteBackend

        # Handle sqlite:///path and sqlite:///:memory:
        path = parsed.path
        if path.startswith("/"):
            path = path[1:]  # Remove leading slash from file path

        backend = SQLiteBackend()
        backend.connect(path=path if path else ":memory:")
        return Store(backend, **kwargs)

    elif scheme == "file":
        from .backends.file import FileBackend

        path = parsed.netloc + parsed.path
        if not path:
            raise ValueError(f"No directory in storage URL: {url}")

        backend = FileBackend()
        backend.connect(path=path)
        return Store(backend, **kwargs)

    else:
        raise ValueError(f"Unknown storage scheme: {scheme}")
