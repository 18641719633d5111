# wealthvault/services/debounce.py
"""
Debounced writer: coalesce a burst of changes into one write.

Every submit() cancels the pending timer and starts a new one, so a
burst of edits produces exactly one write after the quiet period. The
write callback reads the latest state when it runs, never a snapshot
taken at submit time.

Writes are serialized: a timer firing while flush() is writing waits for
it. flush() writes immediately if something is pending and is what the
application calls on shutdown.

States:
    IDLE     - Nothing pending
    PENDING  - Timer scheduled, write not yet started

Usage:
    writer = DebouncedWriter(0.4, session.persist_now, name="user-1")
    writer.submit()      # after each mutation
    writer.flush()       # on shutdown
"""

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class DebouncedWriter:
    """
    Cancel-and-reschedule timer around a write callback.

    The callback's own exceptions propagate out of flush(); on the timer
    thread they are logged, since there is no caller to receive them.
    """

    def __init__(self, delay_seconds: float, write: Callable[[], None], name: str = "writer") -> None:
        self._delay = delay_seconds
        self._write = write
        self._name = name
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending = False

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending

    def submit(self) -> None:
        """Mark state dirty and restart the quiet-period timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = True
            timer = threading.Timer(self._delay, self._fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def flush(self) -> bool:
        """
        Write now if anything is pending.

        Returns:
            True if a write was performed
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        return self._run_write()

    def cancel(self) -> None:
        """Drop the pending write without performing it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = False

    def _fire(self) -> None:
        try:
            self._run_write()
        except Exception as e:
            logger.error(f"Debounced write failed for {self._name}: {e}", exc_info=True)

    def _run_write(self) -> bool:
        with self._write_lock:
            with self._lock:
                if not self._pending:
                    return False
                self._pending = False
            self._write()
            return True
