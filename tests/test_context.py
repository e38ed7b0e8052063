"""Unit tests for RequestContext and ReadWriteLock."""
import threading
import time

import pytest

from cex_sdk.exchange.context import RequestContext
from cex_sdk.exchange.errors import CancelledError
from cex_sdk.utils.rwlock import ReadWriteLock


class TestRequestContext:
    """Tests for cancellation and deadlines."""

    def test_background_never_expires(self):
        """A background context has no deadline."""
        ctx = RequestContext.background()
        assert ctx.cancelled is False
        assert ctx.remaining() is None

    def test_cancel(self):
        """cancel() marks the context done."""
        ctx = RequestContext.background()
        ctx.cancel()
        assert ctx.cancelled is True
        with pytest.raises(CancelledError, match='context cancelled'):
            ctx.raise_if_cancelled()

    def test_deadline(self):
        """A zero timeout is immediately expired."""
        ctx = RequestContext.with_timeout(0)
        assert ctx.cancelled is True
        assert ctx.reason == 'context deadline exceeded'
        assert ctx.remaining() == 0.0

    def test_remaining_counts_down(self):
        """remaining() never exceeds the timeout."""
        ctx = RequestContext.with_timeout(5)
        assert 0 < ctx.remaining() <= 5

    def test_wait_returns_false_when_not_cancelled(self):
        """A short wait on a live context reports no cancellation."""
        ctx = RequestContext.background()
        assert ctx.wait(0.01) is False

    def test_wait_stops_at_deadline(self):
        """Waiting past the deadline returns early with True."""
        ctx = RequestContext.with_timeout(0.05)
        start = time.monotonic()
        assert ctx.wait(10) is True
        assert time.monotonic() - start < 2.0

    def test_wait_wakes_on_cancel(self):
        """cancel() from another thread wakes a waiter."""
        ctx = RequestContext.background()
        timer = threading.Timer(0.05, ctx.cancel)
        timer.start()
        start = time.monotonic()
        assert ctx.wait(10) is True
        assert time.monotonic() - start < 2.0


class TestReadWriteLock:
    """Tests for the reader/writer lock."""

    def test_readers_share(self):
        """Several readers hold the lock at once."""
        lock = ReadWriteLock()
        lock.acquire_read()
        lock.acquire_read()
        lock.release_read()
        lock.release_read()

    def test_writer_excludes_readers(self):
        """A reader blocks while a writer holds the lock."""
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader():
            with lock.read_locked():
                entered.set()

        with lock.write_locked():
            thread = threading.Thread(target=reader)
            thread.start()
            assert not entered.wait(0.05)

        assert entered.wait(1.0)
        thread.join()

    def test_writer_waits_for_readers(self):
        """A writer blocks until active readers release."""
        lock = ReadWriteLock()
        written = threading.Event()

        def writer():
            with lock.write_locked():
                written.set()

        lock.acquire_read()
        thread = threading.Thread(target=writer)
        thread.start()
        assert not written.wait(0.05)

        lock.release_read()
        assert written.wait(1.0)
        thread.join()
