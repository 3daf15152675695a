"""Structured values and dot-path access over key-value storage.

This package wraps a simple string key-value backend (in-memory, SQLite,
a directory of files, or your own) so you can store any JSON-like value
under a key and read or change a single field inside it by address,
like "user.prefs.theme" or "users.0.name".

Quick Start:
    from storadapt import connect

    db = connect("sqlite:///settings.db")

    db.set("user", {"name": "Alice", "prefs": {"theme": "dark"}})
    db.get("user.prefs.theme")              # 'dark'

    db.set("user.prefs.theme", "light")
    db.set("recent.0", "report.pdf", create_path=True)
    db.get("user.nickname", default="anon") # 'anon'

    db.remove("user.prefs")
    "user.prefs" in db                      # False

Supported backends:
    - memory://           In-memory storage (testing)
    - sqlite:///path.db   SQLite file storage
    - sqlite:///:memory:  SQLite in-memory
    - file:///path/dir    One file per key

Key Classes:
    - Store: Facade with get/set/remove/has/clear/key/length
    - connect(): Create a Store from a URL

Path helpers:
    - parse_path, classify_segment, traverse, resolve
    - read_at, write_at, delete_at
    - EMPTY: marker for list slots that hold no value

Behaviour:
    - Store operations never raise; failures are logged to the
      "storadapt" logger (or the logger you pass in)
    - Deleting a list element leaves EMPTY in its slot
"""

from .core import Store, connect
from .backends import StorageBackend, MemoryBackend, SQLiteBackend, FileBackend
from .serialization import Serializer
from .path import (
    EMPTY,
    MAX_INDEX,
    MAX_EXTEND,
    Index,
    Key,
    Traversal,
    parse_path,
    classify_segment,
    is_index_segment,
    matches_root_shape,
    resolve,
    traverse,
    read_at,
    write_at,
    delete_at,
)
from .exceptions import (
    StoreError,
    PathError,
    NotAnArrayError,
    NotAnObjectError,
    NegativeIndexError,
    IndexOutOfBoundsError,
    PathNotFoundError,
    PropertyMissingError,
    NullInPathError,
    ShapeMismatchError,
    BackendError,
    SerializationError,
)

__all__ = [
    # Main API
    "Store",
    "connect",
    # Backends
    "StorageBackend",
    "MemoryBackend",
    "SQLiteBackend",
    "FileBackend",
    # Serialization
    "Serializer",
    # Paths
    "EMPTY",
    "MAX_INDEX",
    "MAX_EXTEND",
    "Index",
    "Key",
    "Traversal",
    "parse_path",
    "classify_segment",
    "is_index_segment",
    "matches_root_shape",
    "resolve",
    "traverse",
    "read_at",
    "write_at",
    "delete_at",
    # Exceptions
    "StoreError",
    "PathError",
    "NotAnArrayError",
    "NotAnObjectError",
    "NegativeIndexError",
    "IndexOutOfBoundsError",
    "PathNotFoundError",
    "PropertyMissingError",
    "NullInPathError",
    "ShapeMismatchError",
    "BackendError",
    "SerializationError",
]

__version__ = "0.1.0"
