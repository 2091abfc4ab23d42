"""Background flush scheduler.

Tracks the dirty counter and runs the worker thread that decides when the
backing file gets rewritten.
"""

from __future__ import annotations

import logging
import queue
import threading
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class Trigger(Enum):
    """Reason the worker ran a flush."""

    DEBOUNCE = "debounce"
    TIMER = "timer"
    SHUTDOWN = "shutdown"


class FlushScheduler:
    """Write-back flush loop with a dirty threshold, a timer and shutdown.

    Args:
        flush: Callable that rewrites the backing file and calls mark_clean()
        threshold: Dirty count that must be exceeded before a debounce signal is sent
        interval: Seconds between timer-driven flushes
        name: Worker thread name

    The worker blocks on a single-slot queue. A DEBOUNCE item means "flush
    needed", a SHUTDOWN item requests the final flush, and a read timeout is
    the timer tick. The final flush result is handed back on a reply queue.

    Invariants:
        - At most one debounce signal is pending; extra signals are dropped
        - Exactly one flush runs per trigger
        - A failed flush never stops the worker; the counter stays dirty
    """

    def __init__(
        self,
        flush: Callable[[], None],
        threshold: int = 5,
        interval: float = 5.0,
        name: str = "FlushWorker",
    ):
        self._flush = flush
        self.threshold = threshold
        self.interval = interval

        self._signals: queue.Queue[Trigger] = queue.Queue(maxsize=1)
        self._replies: queue.Queue[Exception | None] = queue.Queue(maxsize=1)

        self._dirty: int = 0
        self._dirty_lock = threading.Lock()

        self._worker_thread: threading.Thread = threading.Thread(
            target=self._flush_worker, daemon=True, name=name
        )

    @property
    def dirty_count(self) -> int:
        with self._dirty_lock:
            return self._dirty

    def is_running(self) -> bool:
        return self._worker_thread.is_alive()

    def start(self) -> None:
        self._worker_thread.start()

    def mark_dirty(self) -> bool:
        """Count one mutation; signal the worker once the threshold is exceeded.

        Returns:
            True if a new debounce signal was queued
        """
        with self._dirty_lock:
            self._dirty += 1
            over = self._dirty > self.threshold

        if not over:
            return False
        try:
            self._signals.put_nowait(Trigger.DEBOUNCE)
        except queue.Full:
            return False
        logger.debug("Queued debounce flush signal")
        return True

    def mark_clean(self, flushed: int) -> None:
        """Discount mutations that a successful flush has written out.

        Args:
            flushed: Dirty count observed when the flushed snapshot was taken
        """
        with self._dirty_lock:
            self._dirty = max(self._dirty - flushed, 0)

    def _run_flush(self, trigger: Trigger) -> Exception | None:
        """Run one flush, returning the error instead of raising it."""
        try:
            self._flush()
        except Exception as e:
            logger.exception(f"Flush failed (trigger={trigger.value})")
            return e
        logger.debug(f"Flush completed (trigger={trigger.value})")
        return None

    def _flush_worker(self) -> None:
        """Background thread that flushes on debounce, timer tick or shutdown."""
        logger.info("Flush worker started")

        while True:
            try:
                trigger = self._signals.get(timeout=self.interval)
            except queue.Empty:
                trigger = Trigger.TIMER

            if trigger is Trigger.SHUTDOWN:
                self._replies.put(self._run_flush(trigger))
                break

            self._run_flush(trigger)

        logger.info("Flush worker stopped")

    def stop(self) -> None:
        """Request the final flush and block until it has completed.

        Raises:
            The exception raised by the final flush, if any
        """
        if self.is_running():
            # Blocks while a debounce signal is pending; the worker drains it first.
            self._signals.put(Trigger.SHUTDOWN)
            error = self._replies.get()
            self._worker_thread.join()
        else:
            error = self._run_flush(Trigger.SHUTDOWN)

        if error is not None:
            raise error
