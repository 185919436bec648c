# easybook/storage/memory.py
from typing import Dict, Optional

from easybook.core.errors import StorageError
from . import KV, RecordStore, StateIterator, in_range


class MemoryStore(RecordStore):
    """
    Dict-backed world state for tests and throwaway sessions.
    Transactions snapshot the map on begin and restore it on rollback.
    """

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})
        self._snapshot: Optional[Dict[str, bytes]] = None
        self.scans_opened = 0
        self.scans_closed = 0

    @property
    def in_transaction(self) -> bool:
        return self._snapshot is not None

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def put(self, key: str, value: bytes) -> None:
        if not key:
            raise StorageError("key must not be empty")
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def range_scan(self, start: str = "", end: str = "") -> StateIterator:
        rows = [KV(k, self._data[k]) for k in sorted(self._data) if in_range(k, start, end)]
        self.scans_opened += 1
        return StateIterator(rows, on_close=self._scan_closed)

    def _scan_closed(self) -> None:
        self.scans_closed += 1

    def begin(self) -> None:
        if self._snapshot is not None:
            raise StorageError("transaction already in progress")
        self._snapshot = dict(self._data)

    def commit(self) -> None:
        self._snapshot = None

    def rollback(self) -> None:
        if self._snapshot is not None:
            self._data = self._snapshot
            self._snapshot = None

    def close(self) -> None:
        pass

    def dump(self) -> Dict[str, bytes]:
        """Copy of the current state (including uncommitted writes)."""
        return dict(self._data)
