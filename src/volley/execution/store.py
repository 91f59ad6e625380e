"""Result store: the shared name -> ExecutionResult mapping for a run.

The orchestrator owns the store and is its only writer. Everything
else (templating lookups, root-cause tracing) receives a read-only
ResultReader view. Access is guarded by a reader/writer lock so the
store stays safe if results are produced from worker threads.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from volley.models.result import ExecutionResult


class ReadWriteLock:
    """Many concurrent readers or one exclusive writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class ResultReader:
    """Read-only view over a ResultStore."""

    def __init__(self, store: ResultStore) -> None:
        self._store = store

    def get(self, name: str) -> ExecutionResult | None:
        return self._store.get(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._store.get(name) is not None


class ResultStore:
    """Lock-guarded mapping from test name to its latest result."""

    def __init__(self) -> None:
        self._results: dict[str, ExecutionResult] = {}
        self._lock = ReadWriteLock()

    def put(self, result: ExecutionResult) -> None:
        """Store a result under its test name, replacing any earlier one."""
        with self._lock.write():
            self._results[result.name] = result

    def get(self, name: str) -> ExecutionResult | None:
        with self._lock.read():
            return self._results.get(name)

    def names(self) -> list[str]:
        with self._lock.read():
            return list(self._results)

    def clear(self) -> None:
        with self._lock.write():
            self._results.clear()

    def reader(self) -> ResultReader:
        """Return a view that can look results up but never write them."""
        return ResultReader(self)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._results)
