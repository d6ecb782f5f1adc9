"""Fair reader/writer lock

Python's standard library ships no reader/writer lock, so this module builds
one on top of threading.Condition.

Admission is strictly first-come, first-served: every acquire() draws a
ticket and waits until its ticket is served. A served reader immediately
serves the next ticket, so consecutive readers share the lock, while a
waiting writer blocks every reader queued behind it. Neither side can be
starved by a continuous stream of the other.

The lock is NOT reentrant. Acquiring it twice from the same thread (in any
mode) while a writer is queued deadlocks.
"""

import threading
from contextlib import contextmanager
from collections.abc import Callable, Iterator


class ReadWriteLock:
    """FIFO-fair reader/writer lock

    Attributes:
        readers (int):
            Number of threads currently holding the shared mode.
        writing (bool):
            True while a thread holds the exclusive mode.

    Example:
        >>> lock = ReadWriteLock()
        >>> with lock.read_locked():
        ...     pass
        >>> with lock.write_locked():
        ...     pass
    """

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._next_ticket = 0
        self._serving = 0
        self._abandoned: set[int] = set()
        self.readers = 0
        self.writing = False

    def _take_ticket(self) -> int:
        ticket = self._next_ticket
        self._next_ticket += 1
        return ticket

    def _serve_next(self) -> None:
        self._serving += 1
        while self._serving in self._abandoned:
            self._abandoned.remove(self._serving)
            self._serving += 1

    def _wait_turn(self, ticket: int, predicate: Callable[[], bool]) -> None:
        try:
            self._condition.wait_for(predicate)
        except BaseException:
            # e.g. KeyboardInterrupt: give the ticket up so later tickets get served
            if ticket == self._serving:
                self._serve_next()
            else:
                self._abandoned.add(ticket)
            self._condition.notify_all()
            raise

    def acquire_read(self) -> None:
        with self._condition:
            ticket = self._take_ticket()
            self._wait_turn(ticket, lambda: self._serving == ticket and not self.writing)
            self.readers += 1
            self._serve_next()
            self._condition.notify_all()

    def release_read(self) -> None:
        with self._condition:
            if self.readers <= 0:
                raise RuntimeError('release_read() called without holding the read lock.')
            self.readers -= 1
            if self.readers == 0:
                self._condition.notify_all()

    def acquire_write(self) -> None:
        with self._condition:
            ticket = self._take_ticket()
            self._wait_turn(ticket, lambda: self._serving == ticket and not self.writing and self.readers == 0)
            self.writing = True
            self._serve_next()

    def release_write(self) -> None:
        with self._condition:
            if not self.writing:
                raise RuntimeError('release_write() called without holding the write lock.')
            self.writing = False
            self._condition.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def waiting(self) -> int:
        """Number of threads queued for either mode."""
        with self._condition:
            return self._next_ticket - self._serving - len(self._abandoned)
