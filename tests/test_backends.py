"""Tests for storadapt storage backends."""

import pytest

from storadapt import MemoryBackend, SQLiteBackend, FileBackend


@pytest.fixture(params=["memory", "sqlite", "file"])
def backend(request, tmp_path):
    """Each backend, connected and empty."""
    if request.param == "memory":
        backend = MemoryBackend()
        backend.connect()
    elif request.param == "sqlite":
        backend = SQLiteBackend()
        backend.connect(path=":memory:")
    else:
        backend = FileBackend()
        backend.connect(path=str(tmp_path / "store"))
    yield backend
    backend.close()


class TestBackendContract:
    """Behaviour every backend shares."""

    def test_crud_operations(self, backend):
        """Basic get/set/remove work."""
        assert backend.get_item("a") is None

        backend.set_item("a", "1")
        assert backend.get_item("a") == "1"

        backend.set_item("a", "2")
        assert backend.get_item("a") == "2"

        backend.remove_item("a")
        assert backend.get_item("a") is None

        # Already removed
        backend.remove_item("a")

    def test_length_and_clear(self, backend):
        backend.set_item("a", "1")
        backend.set_item("b", "2")
        assert backend.length() == 2

        backend.clear()
        assert backend.length() == 0
        assert backend.get_item("a") is None

    def test_key_enumeration(self, backend):
        backend.set_item("a", "1")
        backend.set_item("b", "2")

        assert {backend.key(0), backend.key(1)} == {"a", "b"}
        assert backend.key(2) is None
        assert backend.key(-1) is None

    def test_awkward_keys(self, backend):
        """Keys with separators, unicode or no characters at all are stored verbatim."""
        keys = ["user:1", "a/b", "配置", "with space", "", ".", ".."]
        for key in keys:
            backend.set_item(key, "v:" + key)
        for key in keys:
            assert backend.get_item(key) == "v:" + key
        assert backend.length() == len(keys)


class TestMemoryBackend:
    """Tests for MemoryBackend."""

    def test_insertion_order(self):
        backend = MemoryBackend()
        backend.connect()
        backend.set_item("b", "1")
        backend.set_item("a", "2")
        assert [backend.key(0), backend.key(1)] == ["b", "a"]

    def test_seed_data(self):
        backend = MemoryBackend({"x": "1"})
        backend.connect()
        assert backend.get_item("x") == "1"

    def test_rejects_non_strings(self):
        backend = MemoryBackend()
        backend.connect()
        with pytest.raises(TypeError):
            backend.set_item("x", 1)


class TestSQLiteBackend:
    """Tests for SQLiteBackend."""

    def test_update_keeps_position(self):
        """Overwriting a key does not move it in key() order."""
        backend = SQLiteBackend()
        backend.connect(path=":memory:")
        backend.set_item("first", "1")
        backend.set_item("second", "2")
        backend.set_item("first", "3")

        assert backend.key(0) == "first"
        assert backend.key(1) == "second"
        backend.close()

    def test_table_columns(self):
        backend = SQLiteBackend()
        backend.connect(path=":memory:")
        rows = backend._conn.execute("PRAGMA table_info(items)").fetchall()
        assert [row["name"] for row in rows] == ["key", "value"]
        backend.close()

    def test_persistence_to_file(self, tmp_path):
        """Data persists to file."""
        db_path = str(tmp_path / "items.db")

        backend1 = SQLiteBackend()
        backend1.connect(path=db_path)
        backend1.set_item("test", '{"x": 123}')
        backend1.close()

        # Read in new connection
        backend2 = SQLiteBackend()
        backend2.connect(path=db_path)
        assert backend2.get_item("test") == '{"x": 123}'
        backend2.close()


class TestFileBackend:
    """Tests for FileBackend."""

    def test_creates_directory(self, tmp_path):
        target = tmp_path / "nested" / "dir"
        backend = FileBackend()
        backend.connect(path=str(target))
        assert target.is_dir()

    def test_one_file_per_key(self, tmp_path):
        backend = FileBackend()
        backend.connect(path=str(tmp_path))
        backend.set_item("user:1", "Alice")
        backend.set_item("a/b", "x")

        names = sorted(p.name for p in tmp_path.iterdir())
        assert names == ["a%2Fb.item", "user%3A1.item"]
        assert (tmp_path / "user%3A1.item").read_text(encoding="utf-8") == "Alice"

    def test_sorted_keys(self, tmp_path):
        backend = FileBackend()
        backend.connect(path=str(tmp_path))
        backend.set_item("b", "1")
        backend.set_item("a", "2")
        assert [backend.key(0), backend.key(1)] == ["a", "b"]

    def test_empty_file_reads_as_missing(self, tmp_path):
        backend = FileBackend()
        backend.connect(path=str(tmp_path))
        (tmp_path / "blank.item").write_text("", encoding="utf-8")
        assert backend.get_item("blank") is None

    def test_survives_reconnect(self, tmp_path):
        backend = FileBackend()
        backend.connect(path=str(tmp_path))
        backend.set_item("k", "v")
        backend.close()

        again = FileBackend()
        again.connect(path=str(tmp_path))
        assert again.get_item("k") == "v"

    def test_not_connected(self):
        with pytest.raises(RuntimeError):
            FileBackend().get_item("k")
