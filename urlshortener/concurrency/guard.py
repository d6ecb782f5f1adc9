from contextlib import contextmanager
from collections.abc import Iterator

from urlshortener.concurrency.rwlock import ReadWriteLock


class ConcurrencyGuard:
    """Process-wide reader/writer coordination around the short URL store

    Every read (resolve, history, list) runs inside shared(); every append runs
    inside exclusive(). There is a single lock for all shortcodes, so writes to
    different shortcodes are serialized as well.

    Example:
        >>> guard = ConcurrencyGuard()
        >>> with guard.shared():
        ...     dao.get('abc')
        >>> with guard.exclusive():
        ...     dao.insert(short_url)
    """

    def __init__(self, lock: ReadWriteLock | None = None):
        self.lock = lock or ReadWriteLock()

    @contextmanager
    def shared(self) -> Iterator[None]:
        with self.lock.read_locked():
            yield

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        with self.lock.write_locked():
            yield
