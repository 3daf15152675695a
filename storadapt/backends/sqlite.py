"""SQLite storage backend."""

import sqlite3
from typing import Optional

from .base import StorageBackend


class SQLiteBackend(StorageBackend):
    """SQLite storage backend.

    Stores items in a SQLite database file. Zero configuration required.
    Good for development and single-user production scenarios.

    Example:
        backend = SQLiteBackend()
        backend.connect(path="settings.db")

        # Or in-memory
        backend.connect(path=":memory:")
    """

    def __init__(self):
        self._conn: Optional[sqlite3.Connection] = None
        self._path: Optional[str] = None

    def connect(self, path: str = ":memory:", **kwargs) -> None:
        """Connect to SQLite database.

        Args:
            path: Database file path, or ":memory:" for in-memory database
        """
        self._path = path
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._create_tables()

    def _create_tables(self) -> None:
        """Create the items table if it doesn't exist."""
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS items (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def get_item(self, key: str) -> Optional[str]:
        """Retrieve value by key."""
        cursor = self._conn.execute("SELECT value FROM items WHERE key = ?", (key,))
        row = cursor.fetchone()
        if row is None:
            return None
        return row["value"]

    def set_item(self, key: str, value: str) -> None:
        """Store or update value.

        Upserts in place so the row keeps its rowid, and with it its
        position in key() enumeration.
        """
        self._conn.execute(
            """
            INSERT INTO items (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, value),
        )
        self._conn.commit()

    def remove_item(self, key: str) -> None:
        """Remove key if present."""
        self._conn.execute("DELETE FROM items WHERE key = ?", (key,))
        self._conn.commit()

    def clear(self) -> None:
        """Remove every key."""
        self._conn.execute("DELETE FROM items")
        self._conn.commit()

    def length(self) -> int:
        """Number of stored keys."""
        cursor = self._conn.execute("SELECT COUNT(*) AS n FROM items")
        return cursor.fetchone()["n"]

    def key(self, index: int) -> Optional[str]:
        """Key at index in insertion order."""
        if index < 0:
            return None
        cursor = self._conn.execute(
            "SELECT key FROM items ORDER BY rowid LIMIT 1 OFFSET ?", (index,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return row["key"]
