# tests/test_storage.py
import os
import sqlite3
import pytest
from pathlib import Path

from easybook.core.errors import StorageError
from easybook.storage import KV, MemoryStore, RecordStore, SQLiteStore, StateIterator, create_storage


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    return tmp_path / "state.db"


@pytest.fixture(params=["memory", "sqlite"])
def store(request, temp_db_path: Path) -> RecordStore:
    if request.param == "memory":
        yield MemoryStore()
    else:
        with SQLiteStore(temp_db_path, namespace="test") as s:
            yield s


def test_create_storage_dynamic_routing(temp_db_path: Path):
    storage = create_storage(f"sqlite://{temp_db_path}", namespace="easybook")
    assert isinstance(storage, SQLiteStore)
    assert str(storage.db_path.resolve()) == str(temp_db_path.resolve())
    assert storage.namespace == "easybook"
    storage.close()

    assert isinstance(create_storage("memory://"), MemoryStore)


def test_create_storage_rejects_unknown_scheme():
    with pytest.raises(ValueError, match="Unsupported"):
        create_storage("postgres://nope")


def test_sqlite_init_env(temp_db_path: Path, monkeypatch):
    monkeypatch.setenv("EASYBOOK_DB_PATH", str(temp_db_path))
    with SQLiteStore() as env_storage:
        assert env_storage.db_path == temp_db_path.resolve()


def test_sqlite_init_default(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("EASYBOOK_DB_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    with SQLiteStore() as default_storage:
        assert default_storage.db_path.name == "easybook-state.db"


def test_sqlite_schema_creation(temp_db_path: Path):
    with SQLiteStore(temp_db_path) as storage:
        cursor = storage.conn.execute("PRAGMA table_info(state)")
        columns = {row[1] for row in cursor.fetchall()}
    assert columns == {"namespace", "key", "value"}


def test_get_put_delete(store: RecordStore):
    assert store.get("hotel1") is None
    store.put("hotel1", b"one")
    assert store.get("hotel1") == b"one"
    store.put("hotel1", b"uno")
    assert store.get("hotel1") == b"uno"
    store.delete("hotel1")
    assert store.get("hotel1") is None


def test_delete_absent_key_is_silent(store: RecordStore):
    store.delete("never-written")
    assert store.get("never-written") is None


def test_empty_key_rejected(store: RecordStore):
    with pytest.raises(StorageError):
        store.put("", b"x")


def test_range_scan_ascending_order(store: RecordStore):
    for key in ["hotel3", "10", "hotel1", "2", "hotel2", "Zed", "éa"]:
        store.put(key, key.encode())

    with store.range_scan() as it:
        keys = [kv.key for kv in it]
    assert keys == ["10", "2", "Zed", "hotel1", "hotel2", "hotel3", "éa"]


def test_range_scan_bounds(store: RecordStore):
    for key in ["a", "b", "c", "d"]:
        store.put(key, b"v")

    with store.range_scan("b", "d") as it:
        assert [kv.key for kv in it] == ["b", "c"]
    with store.range_scan("c", "") as it:
        assert [kv.key for kv in it] == ["c", "d"]
    with store.range_scan("", "b") as it:
        assert list(it) == [KV("a", b"v")]


def test_range_scan_empty(store: RecordStore):
    with store.range_scan() as it:
        assert list(it) == []
    assert it.closed


def test_transaction_commit(store: RecordStore):
    with store.transaction():
        store.put("k", b"v")
    assert store.get("k") == b"v"


def test_transaction_rollback_on_error(store: RecordStore):
    store.put("keep", b"1")
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.put("k", b"v")
            store.delete("keep")
            assert store.get("k") == b"v"  # read-your-writes
            raise RuntimeError("boom")
    assert store.get("k") is None
    assert store.get("keep") == b"1"


def test_transaction_without_commit_discards(store: RecordStore):
    with store.transaction(commit=False):
        store.put("k", b"v")
    assert store.get("k") is None


def test_state_iterator_close_is_idempotent():
    calls = []
    it = StateIterator([KV("a", b"1"), KV("b", b"2")], on_close=lambda: calls.append(1))
    assert next(it) == KV("a", b"1")
    it.close()
    it.close()
    assert calls == [1]
    assert list(it) == []


def test_memory_store_counts_scans():
    store = MemoryStore({"a": b"1"})
    with store.range_scan():
        pass
    assert store.scans_opened == store.scans_closed == 1


def test_memory_store_nested_begin_rejected():
    store = MemoryStore()
    store.begin()
    with pytest.raises(StorageError):
        store.begin()
    store.rollback()
    assert not store.in_transaction


def test_sqlite_namespaces_are_independent(temp_db_path: Path):
    with SQLiteStore(temp_db_path, namespace="easybook") as sla, \
            SQLiteStore(temp_db_path, namespace="hotel-rating") as flat:
        sla.put("1", b"sla")
        flat.put("1", b"flat")
        assert sla.get("1") == b"sla"
        assert flat.get("1") == b"flat"
        with sla.range_scan() as it:
            assert list(it) == [KV("1", b"sla")]


def test_sqlite_persists_across_connections(temp_db_path: Path):
    with SQLiteStore(temp_db_path, namespace="ns") as storage:
        with storage.transaction():
            storage.put("hotel1", b'{"id":"hotel1"}')

    with SQLiteStore(temp_db_path, namespace="ns") as reopened:
        assert reopened.get("hotel1") == b'{"id":"hotel1"}'


def test_sqlite_reads_text_values(temp_db_path: Path):
    SQLiteStore(temp_db_path, namespace="ns").close()
    conn = sqlite3.connect(temp_db_path)
    conn.execute("INSERT INTO state (namespace, key, value) VALUES ('ns', 'k', 'plain text')")
    conn.commit()
    conn.close()

    with SQLiteStore(temp_db_path, namespace="ns") as storage:
        assert storage.get("k") == b"plain text"


def test_close_releases_resources(temp_db_path: Path):
    storage = SQLiteStore(temp_db_path)
    assert storage._conn is not None
    storage.close()

    with pytest.raises(RuntimeError, match="closed"):
        storage.put("k", b"v")


def test_context_manager(temp_db_path: Path):
    with SQLiteStore(temp_db_path) as storage:
        assert storage._conn is not None
    with pytest.raises(RuntimeError, match="closed"):
        storage.get("k")


def test_sqlite_scan_closes_cursor(temp_db_path: Path):
    with SQLiteStore(temp_db_path) as storage:
        storage.put("a", b"1")
        storage.put("b", b"2")
        it = storage.range_scan()
        assert next(it) == KV("a", b"1")
        it.close()
        assert it.closed
        assert list(it) == []


class CommitFailingStore(MemoryStore):
    def commit(self) -> None:
        raise StorageError("commit refused")


def test_failed_commit_rolls_back():
    store = CommitFailingStore({"keep": b"1"})
    with pytest.raises(StorageError, match="commit refused"):
        with store.transaction():
            store.put("k", b"v")

    assert not store.in_transaction
    assert store.get("k") is None
    assert store.get("keep") == b"1"

    # the store accepts a new transaction afterwards
    store.begin()
    store.rollback()


def test_sqlite_failed_commit_rolls_back(temp_db_path: Path, monkeypatch):
    with SQLiteStore(temp_db_path, namespace="ns") as storage:
        def refuse():
            raise StorageError("commit refused")

        monkeypatch.setattr(storage, "commit", refuse)
        with pytest.raises(StorageError):
            with storage.transaction():
                storage.put("k", b"v")

        assert not storage.conn.in_transaction
        assert storage.get("k") is None
        storage.begin()
        storage.rollback()
