"""Tests for wren._internal.rwlock — shared/exclusive locking."""

import threading
import time
from collections.abc import Callable

import pytest

from wren._internal.rwlock import ReadWriteLock


def _wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class TestReadWriteLock:
    def test_readers_share(self) -> None:
        lock = ReadWriteLock()
        with lock.read(), lock.read():
            assert lock.readers == 2
        assert lock.readers == 0

    def test_writer_waits_for_readers(self) -> None:
        lock = ReadWriteLock()
        acquired = threading.Event()

        def writer() -> None:
            with lock.write():
                acquired.set()

        with lock.read():
            thread = threading.Thread(target=writer)
            thread.start()
            assert not acquired.wait(0.05)
            assert not lock.locked_for_write

        thread.join(timeout=2)
        assert acquired.is_set()
        assert not lock.locked_for_write

    def test_writer_excludes_readers(self) -> None:
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader() -> None:
            with lock.read():
                entered.set()

        with lock.write():
            thread = threading.Thread(target=reader)
            thread.start()
            assert not entered.wait(0.05)

        thread.join(timeout=2)
        assert entered.is_set()

    def test_waiting_writer_blocks_new_readers(self) -> None:
        lock = ReadWriteLock()
        order: list[str] = []

        def writer() -> None:
            with lock.write():
                order.append("writer")

        def reader() -> None:
            with lock.read():
                order.append("reader")

        lock.acquire_read()
        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        assert _wait_for(lambda: lock._waiting_writers == 1)

        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        time.sleep(0.05)
        assert order == []

        lock.release_read()
        writer_thread.join(timeout=2)
        reader_thread.join(timeout=2)
        assert order == ["writer", "reader"]

    def test_released_on_error(self) -> None:
        lock = ReadWriteLock()
        with pytest.raises(ValueError), lock.write():
            raise ValueError("boom")
        assert not lock.locked_for_write

        with pytest.raises(ValueError), lock.read():
            raise ValueError("boom")
        assert lock.readers == 0

    def test_unbalanced_release(self) -> None:
        lock = ReadWriteLock()
        with pytest.raises(RuntimeError):
            lock.release_read()
        with pytest.raises(RuntimeError):
            lock.release_write()
