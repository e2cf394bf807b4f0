import threading
from contextlib import contextmanager
from typing import Iterator, Optional
from cultivo.knowledge import KnowledgeStore


class ReadWriteLock:
    """
    Many concurrent readers or one writer. Waiting writers block new readers
    so a steady stream of status polls cannot starve a turn.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()


class SharedStore:
    """The single process-wide knowledge store, handed explicitly to every component."""

    def __init__(self, store: Optional[KnowledgeStore] = None):
        self._store = store if store is not None else KnowledgeStore()
        self.lock = ReadWriteLock()

    @contextmanager
    def read(self) -> Iterator[KnowledgeStore]:
        self.lock.acquire_read()
        try:
            yield self._store
        finally:
            self.lock.release_read()

    @contextmanager
    def write(self) -> Iterator[KnowledgeStore]:
        self.lock.acquire_write()
        try:
            yield self._store
        finally:
            self.lock.release_write()

    def replace(self, store: KnowledgeStore) -> None:
        """Swaps in a freshly loaded store (index already rebuilt by the loader)."""
        self.lock.acquire_write()
        try:
            self._store = store
        finally:
            self.lock.release_write()
