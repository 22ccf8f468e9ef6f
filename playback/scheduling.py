"""Scheduling seam: cancellable periodic callbacks.

The Scheduler Protocol abstracts the timing source behind the playback
controller and the effect loop. QtScheduler backs it with QTimer for the
GUI; ManualScheduler advances a virtual clock on demand so playback can run
headless.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """A running periodic callback. cancel() is idempotent."""

    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Protocol for pluggable timing sources."""

    def call_every(
        self, interval_ms: int, callback: Callable[[], None],
    ) -> TimerHandle:
        """Invoke callback every interval_ms until the handle is cancelled."""
        ...


def _check_interval(interval_ms):
    if interval_ms <= 0:
        raise ValueError(f"interval_ms must be positive, got {interval_ms}")


# ---------------------------------------------------------------------------
# QtScheduler
# ---------------------------------------------------------------------------

class _QtTimerHandle:

    def __init__(self, timer):
        self._timer = timer

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None


class QtScheduler:
    """QTimer-backed scheduler. Must be used from the GUI thread."""

    def __init__(self, precise=False):
        self._precise = precise

    def call_every(self, interval_ms, callback):
        from PyQt6.QtCore import Qt, QTimer

        _check_interval(interval_ms)
        timer = QTimer()
        if self._precise:
            timer.setTimerType(Qt.TimerType.PreciseTimer)
        timer.setInterval(int(interval_ms))
        timer.timeout.connect(callback)
        timer.start()
        return _QtTimerHandle(timer)


# ---------------------------------------------------------------------------
# ManualScheduler
# ---------------------------------------------------------------------------

class _ManualTimer:

    def __init__(self, scheduler, interval_ms, callback, due):
        self._scheduler = scheduler
        self.interval_ms = interval_ms
        self.callback = callback
        self.due = due
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._scheduler._timers.remove(self)


class ManualScheduler:
    """Virtual-clock scheduler: timers fire only inside advance().

    Timers due at the same instant fire in creation order. A timer cancelled
    from inside another timer's callback does not fire afterwards.
    """

    def __init__(self):
        self.now_ms = 0
        self._timers: list[_ManualTimer] = []

    @property
    def active_count(self) -> int:
        """Number of live periodic timers."""
        return len(self._timers)

    def call_every(self, interval_ms, callback):
        _check_interval(interval_ms)
        timer = _ManualTimer(self, interval_ms, callback, self.now_ms + interval_ms)
        self._timers.append(timer)
        return timer

    def advance(self, ms: int) -> int:
        """Move the clock forward by ms, firing due callbacks in time order.

        Returns:
            Number of callbacks fired.
        """
        target = self.now_ms + ms
        fired = 0
        while True:
            due = [t for t in self._timers if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now_ms = timer.due
            timer.due += timer.interval_ms
            timer.callback()
            fired += 1
        self.now_ms = target
        return fired
