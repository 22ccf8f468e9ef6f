"""Continuous effect loop: a frame counter for cosmetic pulsing.

Runs only while playback is PLAYING. It never touches the step index or
the simulation state; dropping it entirely leaves playback correct.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from playback.scheduling import Scheduler, TimerHandle


class EffectLoop:
    """Scoped per-frame ticker.

    start() acquires a periodic timer, stop() releases it. Both are
    idempotent, so at most one timer is ever held.
    """

    INTERVAL_MS = 16  # ~60 fps
    PULSE_PERIOD_FRAMES = 60

    def __init__(
        self,
        scheduler: Scheduler,
        on_frame: Callable[[int], None] | None = None,
        interval_ms: int | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._on_frame = on_frame
        self._interval_ms = interval_ms or self.INTERVAL_MS
        self._handle: TimerHandle | None = None
        self.frame = 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        self._handle = self._scheduler.call_every(self._interval_ms, self._tick)

    def stop(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None

    def pulse(self) -> float:
        """Smooth 0..1 oscillation of the frame counter."""
        phase = 2 * math.pi * self.frame / self.PULSE_PERIOD_FRAMES
        return 0.5 - 0.5 * math.cos(phase)

    def _tick(self) -> None:
        self.frame += 1
        if self._on_frame is not None:
            self._on_frame(self.frame)
