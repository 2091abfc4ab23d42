"""Unit tests for the background flush scheduler."""

from __future__ import annotations

import threading
import time

import pytest

from filedb.components.scheduler import FlushScheduler


def wait_until(predicate, timeout: float = 2.0) -> bool:
    """Poll predicate until it is true or timeout elapses."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class RecordingFlush:
    """Flush callable that counts calls and marks the scheduler clean."""

    def __init__(self):
        self.calls = 0
        self.fail = False
        self.scheduler: FlushScheduler | None = None
        self.gate = threading.Event()
        self.gate.set()

    def __call__(self) -> None:
        self.gate.wait()
        self.calls += 1
        if self.fail:
            raise OSError("disk full")
        self.scheduler.mark_clean(self.scheduler.dirty_count)


@pytest.fixture
def flush():
    return RecordingFlush()


def make_scheduler(flush, threshold=5, interval=60.0) -> FlushScheduler:
    scheduler = FlushScheduler(flush, threshold=threshold, interval=interval)
    flush.scheduler = scheduler
    return scheduler


def test_worker_lifecycle(flush):
    scheduler = make_scheduler(flush)
    scheduler.start()
    assert scheduler.is_running()

    scheduler.stop()

    assert not scheduler.is_running()
    assert flush.calls == 1


def test_no_signal_at_or_below_threshold(flush):
    scheduler = make_scheduler(flush, threshold=5)

    signalled = [scheduler.mark_dirty() for _ in range(5)]

    assert signalled == [False] * 5
    assert scheduler.dirty_count == 5


def test_signal_strictly_above_threshold(flush):
    scheduler = make_scheduler(flush, threshold=5)

    for _ in range(5):
        scheduler.mark_dirty()

    assert scheduler.mark_dirty() is True


def test_debounce_signals_coalesce(flush):
    """Only one signal is pending no matter how many mutations arrive."""
    scheduler = make_scheduler(flush, threshold=0)

    results = [scheduler.mark_dirty() for _ in range(10)]

    assert results.count(True) == 1
    assert scheduler.dirty_count == 10


def test_debounce_triggers_flush(flush):
    scheduler = make_scheduler(flush, threshold=2, interval=60.0)
    scheduler.start()

    for _ in range(3):
        scheduler.mark_dirty()

    assert wait_until(lambda: flush.calls == 1 and scheduler.dirty_count == 0)
    scheduler.stop()


def test_timer_triggers_flush(flush):
    scheduler = make_scheduler(flush, threshold=100, interval=0.05)
    scheduler.start()

    scheduler.mark_dirty()

    assert wait_until(lambda: flush.calls >= 1 and scheduler.dirty_count == 0)
    scheduler.stop()


def test_failed_flush_keeps_worker_alive_and_counter_dirty(flush):
    flush.fail = True
    scheduler = make_scheduler(flush, threshold=0, interval=60.0)
    scheduler.start()

    scheduler.mark_dirty()
    assert wait_until(lambda: flush.calls >= 1)

    assert scheduler.is_running()
    assert scheduler.dirty_count == 1

    flush.fail = False
    scheduler.stop()
    assert scheduler.dirty_count == 0


def test_stop_raises_final_flush_error(flush):
    flush.fail = True
    scheduler = make_scheduler(flush)
    scheduler.start()

    with pytest.raises(OSError):
        scheduler.stop()

    assert not scheduler.is_running()


def test_stop_waits_for_pending_signal(flush):
    """Shutdown with a debounce signal pending runs both flushes in order."""
    flush.gate.clear()
    scheduler = make_scheduler(flush, threshold=0)
    scheduler.start()

    scheduler.mark_dirty()
    # The worker is now blocked inside the first flush; queue another signal
    assert wait_until(lambda: scheduler._signals.empty())
    scheduler.mark_dirty()

    stopper = threading.Thread(target=scheduler.stop)
    stopper.start()
    time.sleep(0.05)
    assert stopper.is_alive()

    flush.gate.set()
    stopper.join(timeout=2.0)

    assert not stopper.is_alive()
    assert flush.calls == 3


def test_stop_without_start_flushes_inline(flush):
    scheduler = make_scheduler(flush)

    scheduler.stop()

    assert flush.calls == 1


def test_mark_clean_keeps_later_mutations(flush):
    """Mutations made after the flushed snapshot stay dirty."""
    scheduler = make_scheduler(flush, threshold=100)
    for _ in range(4):
        scheduler.mark_dirty()
    observed = scheduler.dirty_count

    scheduler.mark_dirty()
    scheduler.mark_dirty()
    scheduler.mark_clean(observed)

    assert scheduler.dirty_count == 2


def test_mark_clean_never_goes_negative(flush):
    scheduler = make_scheduler(flush)
    scheduler.mark_dirty()

    scheduler.mark_clean(5)

    assert scheduler.dirty_count == 0
