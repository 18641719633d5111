# tests/services/test_debounce.py
"""
Tests for DebouncedWriter.

Timer-based tests use short delays and wait on events rather than
sleeping for fixed periods where possible.
"""

import threading
import time

import pytest

from wealthvault.services.debounce import DebouncedWriter


class CountingWrite:
    def __init__(self):
        self.calls = 0
        self.done = threading.Event()

    def __call__(self):
        self.calls += 1
        self.done.set()


class TestFlush:
    """Synchronous behaviour through flush()."""

    def test_flush_without_pending_does_nothing(self):
        write = CountingWrite()
        writer = DebouncedWriter(60, write)

        assert writer.flush() is False
        assert write.calls == 0

    def test_burst_coalesces_into_one_write(self):
        write = CountingWrite()
        writer = DebouncedWriter(60, write)

        for _ in range(5):
            writer.submit()
        assert writer.has_pending is True

        assert writer.flush() is True
        assert write.calls == 1
        assert writer.has_pending is False

    def test_second_flush_is_noop(self):
        write = CountingWrite()
        writer = DebouncedWriter(60, write)
        writer.submit()
        writer.flush()

        assert writer.flush() is False
        assert write.calls == 1

    def test_cancel_drops_pending_write(self):
        write = CountingWrite()
        writer = DebouncedWriter(60, write)
        writer.submit()
        writer.cancel()

        assert writer.flush() is False
        assert write.calls == 0

    def test_flush_propagates_write_errors(self):
        def failing_write():
            raise RuntimeError("disk full")

        writer = DebouncedWriter(60, failing_write)
        writer.submit()
        with pytest.raises(RuntimeError):
            writer.flush()


class TestTimer:
    """Writes performed by the timer thread."""

    def test_write_happens_after_quiet_period(self):
        write = CountingWrite()
        writer = DebouncedWriter(0.05, write)
        writer.submit()

        assert write.done.wait(timeout=2)
        assert write.calls == 1
        assert writer.has_pending is False

    def test_resubmit_restarts_timer(self):
        write = CountingWrite()
        writer = DebouncedWriter(0.2, write)

        writer.submit()
        time.sleep(0.1)
        writer.submit()
        time.sleep(0.12)
        # 0.22s since the first submit, only 0.12s since the second
        assert write.calls == 0

        assert write.done.wait(timeout=2)
        assert write.calls == 1

    def test_timer_errors_are_logged_not_raised(self, caplog):
        failed = threading.Event()

        def failing_write():
            failed.set()
            raise RuntimeError("disk full")

        writer = DebouncedWriter(0.01, failing_write, name="user-9")
        writer.submit()

        assert failed.wait(timeout=2)
        time.sleep(0.05)
        assert writer.has_pending is False
        assert any("user-9" in record.getMessage() for record in caplog.records)
