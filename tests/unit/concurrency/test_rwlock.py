"""Unit tests for the fair ReadWriteLock and the ConcurrencyGuard.

Test coverage includes:

1. Shared mode
   - Ensures several readers hold the lock at the same time.

2. Exclusive mode
   - Ensures a writer excludes readers and other writers.

3. Fairness
   - Ensures a queued writer is admitted before readers arriving after it.
   - Ensures readers queued behind a writer are admitted together afterwards.

4. Misuse
   - Confirms releasing a mode that isn't held raises RuntimeError.
   - Ensures an interrupted acquire gives its turn up instead of blocking everyone behind it.

5. ConcurrencyGuard
   - Ensures shared() and exclusive() map onto the lock's modes.
"""

import time
import threading

import pytest

from urlshortener.concurrency import ReadWriteLock, ConcurrencyGuard


TIMEOUT = 5


# -------------------------------
# Helpers
# -------------------------------


def wait_until(predicate, timeout=TIMEOUT):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError('Condition not met in time.')
        time.sleep(0.005)


def start(target):
    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    return thread


# -------------------------------
# 1. Shared mode
# -------------------------------


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    barrier = threading.Barrier(3, timeout=TIMEOUT)
    errors = []

    def read():
        with lock.read_locked():
            try:
                barrier.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

    threads = [start(read) for _ in range(3)]
    for thread in threads:
        thread.join(TIMEOUT)

    assert errors == []
    assert lock.readers == 0


# -------------------------------
# 2. Exclusive mode
# -------------------------------


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    entered = threading.Event()

    def read():
        with lock.read_locked():
            entered.set()

    lock.acquire_write()
    reader = start(read)
    wait_until(lambda: lock.waiting == 1)

    assert not entered.wait(0.05)
    lock.release_write()
    reader.join(TIMEOUT)
    assert entered.is_set()


def test_writer_excludes_writers():
    lock = ReadWriteLock()
    entered = threading.Event()

    def write():
        with lock.write_locked():
            entered.set()

    lock.acquire_write()
    writer = start(write)
    wait_until(lambda: lock.waiting == 1)

    assert not entered.wait(0.05)
    lock.release_write()
    writer.join(TIMEOUT)
    assert entered.is_set()
    assert not lock.writing


def test_writer_waits_for_active_readers():
    lock = ReadWriteLock()
    entered = threading.Event()

    def write():
        with lock.write_locked():
            entered.set()

    lock.acquire_read()
    lock.acquire_read()
    writer = start(write)
    wait_until(lambda: lock.waiting == 1)

    lock.release_read()
    assert not entered.wait(0.05)
    lock.release_read()
    writer.join(TIMEOUT)
    assert entered.is_set()


# -------------------------------
# 3. Fairness
# -------------------------------


def test_queued_writer_goes_before_later_readers():
    """A steady stream of readers can't starve a writer."""
    lock = ReadWriteLock()
    order = []

    def write():
        with lock.write_locked():
            order.append('writer')

    def read():
        with lock.read_locked():
            order.append('reader')

    lock.acquire_read()
    writer = start(write)
    wait_until(lambda: lock.waiting == 1)
    reader = start(read)
    wait_until(lambda: lock.waiting == 2)

    assert order == []
    lock.release_read()
    writer.join(TIMEOUT)
    reader.join(TIMEOUT)

    assert order == ['writer', 'reader']


def test_readers_queued_behind_writer_are_admitted_together():
    lock = ReadWriteLock()
    barrier = threading.Barrier(2, timeout=TIMEOUT)
    errors = []

    def read():
        with lock.read_locked():
            try:
                barrier.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

    lock.acquire_write()
    readers = [start(read) for _ in range(2)]
    wait_until(lambda: lock.waiting == 2)
    lock.release_write()
    for reader in readers:
        reader.join(TIMEOUT)

    assert errors == []


# -------------------------------
# 4. Misuse
# -------------------------------


def test_release_read_without_holding():
    with pytest.raises(RuntimeError):
        ReadWriteLock().release_read()


def test_release_write_without_holding():
    with pytest.raises(RuntimeError):
        ReadWriteLock().release_write()


def test_lock_released_when_body_raises():
    lock = ReadWriteLock()
    with pytest.raises(KeyError):
        with lock.write_locked():
            raise KeyError('boom')
    assert not lock.writing


def interrupted_wait(predicate, timeout=None):
    raise KeyboardInterrupt


def test_interrupted_acquire_at_head_of_queue(monkeypatch):
    lock = ReadWriteLock()
    entered = threading.Event()

    def write():
        with lock.write_locked():
            entered.set()

    lock.acquire_read()
    with monkeypatch.context() as m:
        m.setattr(lock._condition, 'wait_for', interrupted_wait)
        with pytest.raises(KeyboardInterrupt):
            lock.acquire_write()

    assert lock.waiting == 0
    writer = start(write)
    wait_until(lambda: lock.waiting == 1)
    lock.release_read()
    writer.join(TIMEOUT)
    assert entered.is_set()


def test_interrupted_acquire_behind_others(monkeypatch):
    lock = ReadWriteLock()
    order = []

    def write():
        with lock.write_locked():
            order.append('writer')

    def read():
        with lock.read_locked():
            order.append('reader')

    lock.acquire_write()
    writer = start(write)
    wait_until(lambda: lock.waiting == 1)

    with monkeypatch.context() as m:
        m.setattr(lock._condition, 'wait_for', interrupted_wait)
        with pytest.raises(KeyboardInterrupt):
            lock.acquire_read()

    assert lock.waiting == 1
    reader = start(read)
    wait_until(lambda: lock.waiting == 2)
    lock.release_write()
    writer.join(TIMEOUT)
    reader.join(TIMEOUT)

    assert order == ['writer', 'reader']
    assert lock.waiting == 0


# -------------------------------
# 5. ConcurrencyGuard
# -------------------------------


def test_guard_shared_holds_read_mode():
    guard = ConcurrencyGuard()
    with guard.shared():
        assert guard.lock.readers == 1
        assert not guard.lock.writing
    assert guard.lock.readers == 0


def test_guard_exclusive_holds_write_mode():
    guard = ConcurrencyGuard()
    with guard.exclusive():
        assert guard.lock.writing
        assert guard.lock.readers == 0
    assert not guard.lock.writing


def test_guard_uses_given_lock():
    lock = ReadWriteLock()
    assert ConcurrencyGuard(lock).lock is lock
