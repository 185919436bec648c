# easybook/storage/__init__.py
"""
Record stores holding the world state: an ordered key → bytes map with transactions.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterable, Iterator, NamedTuple, Optional


class KV(NamedTuple):
    key: str
    value: bytes


class StateIterator:
    """
    Result of a range scan. Must be closed after use, on every exit path.
    Closing twice is a no-op.
    """

    def __init__(self, rows: Iterable[KV], on_close: Optional[Callable[[], None]] = None):
        self._rows = iter(rows)
        self._on_close = on_close
        self.closed = False

    def __iter__(self) -> Iterator[KV]:
        return self

    def __next__(self) -> KV:
        if self.closed:
            raise StopIteration
        return next(self._rows)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close:
            self._on_close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class RecordStore(ABC):
    """Abstract base for all world-state implementations."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Value stored at key, or None when absent."""

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Absent keys are not guaranteed to fail; callers check first."""

    @abstractmethod
    def range_scan(self, start: str = "", end: str = "") -> StateIterator:
        """
        Ascending key order, start inclusive, end exclusive.
        An empty bound leaves that side of the range open.
        """

    @abstractmethod
    def begin(self) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @contextmanager
    def transaction(self, commit: bool = True):
        """
        Scope one invocation. Commits on success when `commit` is set,
        rolls back otherwise and on any exception.
        """
        self.begin()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        if not commit:
            self.rollback()
            return
        try:
            self.commit()
        except BaseException:
            self.rollback()
            raise


def in_range(key: str, start: str, end: str) -> bool:
    if start and key < start:
        return False
    if end and key >= end:
        return False
    return True


def create_storage(uri: str, namespace: str = "") -> RecordStore:
    if uri.startswith("memory://"):
        from .memory import MemoryStore
        return MemoryStore()

    elif uri.startswith("sqlite://"):
        from .sqlite import SQLiteStore
        # Extract everything after sqlite://
        raw_path = uri[len("sqlite://"):].lstrip("/")
        if not raw_path.startswith('/'):
            raw_path = '/' + raw_path

        absolute_path = Path(raw_path).resolve()
        return SQLiteStore(absolute_path, namespace=namespace)

    else:
        raise ValueError(f"Unsupported storage URI: {uri}")


from .memory import MemoryStore
from .sqlite import SQLiteStore

__all__ = ["KV", "StateIterator", "RecordStore", "create_storage", "in_range", "MemoryStore", "SQLiteStore"]
