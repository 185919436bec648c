# easybook/storage/sqlite.py
import logging
import os
import sqlite3
from pathlib import Path
from typing import Optional

from easybook.core.errors import StorageError
from . import KV, RecordStore, StateIterator

logger = logging.getLogger(__name__)


def _as_bytes(value) -> bytes:
    # Rows written by other tools may hold TEXT instead of BLOB
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


class SQLiteStore(RecordStore):
    """SQLite persistent world state. Each namespace is an independent keyspace."""

    def __init__(self, db_path: str | Path | None = None, namespace: str = ""):
        if db_path is None:
            env_path = os.environ.get("EASYBOOK_DB_PATH")
            db_path = env_path if env_path else Path.cwd() / "easybook-state.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = self.db_path.resolve()
        self.namespace = namespace

        self._conn: Optional[sqlite3.Connection] = None
        self._connect()

    def _connect(self):
        try:
            # Autocommit mode; transactions are issued explicitly by begin/commit
            self._conn = sqlite3.connect(str(self.db_path), isolation_level=None)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._create_schema()
        except sqlite3.Error as e:
            raise StorageError(f"failed to open world state at {self.db_path}: {e}") from e

    def _create_schema(self):
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS state (
                namespace   TEXT    NOT NULL,
                key         TEXT    NOT NULL,
                value       BLOB    NOT NULL,
                PRIMARY KEY (namespace, key)
            )
        """)

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Storage connection is closed")
        return self._conn

    def get(self, key: str) -> Optional[bytes]:
        try:
            row = self.conn.execute(
                "SELECT value FROM state WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"failed to read from world state: {e}") from e
        return _as_bytes(row[0]) if row else None

    def put(self, key: str, value: bytes) -> None:
        if not key:
            raise StorageError("key must not be empty")
        try:
            self.conn.execute(
                "INSERT OR REPLACE INTO state (namespace, key, value) VALUES (?, ?, ?)",
                (self.namespace, key, sqlite3.Binary(value)),
            )
        except sqlite3.Error as e:
            raise StorageError(f"failed to put to world state: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.conn.execute(
                "DELETE FROM state WHERE namespace = ? AND key = ?",
                (self.namespace, key),
            )
        except sqlite3.Error as e:
            raise StorageError(f"failed to delete from world state: {e}") from e

    def range_scan(self, start: str = "", end: str = "") -> StateIterator:
        query = "SELECT key, value FROM state WHERE namespace = ?"
        params: list = [self.namespace]
        if start:
            query += " AND key >= ?"
            params.append(start)
        if end:
            query += " AND key < ?"
            params.append(end)
        # TEXT columns use BINARY collation: byte order of UTF-8 == code point order
        query += " ORDER BY key ASC"

        try:
            cursor = self.conn.execute(query, params)
        except sqlite3.Error as e:
            raise StorageError(f"failed to read from world state: {e}") from e

        rows = (KV(key, _as_bytes(value)) for key, value in cursor)
        return StateIterator(rows, on_close=cursor.close)

    def begin(self) -> None:
        try:
            self.conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise StorageError(f"failed to begin transaction: {e}") from e

    def commit(self) -> None:
        try:
            self.conn.execute("COMMIT")
        except sqlite3.Error as e:
            raise StorageError(f"failed to commit transaction: {e}") from e
        logger.debug("committed transaction on %s [%s]", self.db_path, self.namespace)

    def rollback(self) -> None:
        if self.conn.in_transaction:
            self.conn.execute("ROLLBACK")

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
