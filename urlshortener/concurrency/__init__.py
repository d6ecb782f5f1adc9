from urlshortener.concurrency.rwlock import ReadWriteLock
from urlshortener.concurrency.guard import ConcurrencyGuard


__all__ = [
    'ReadWriteLock',
    'ConcurrencyGuard',
]
