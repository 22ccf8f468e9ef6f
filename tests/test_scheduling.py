"""Tests for playback/scheduling.py and playback/effects.py."""

import math

import pytest

from playback.effects import EffectLoop
from playback.scheduling import ManualScheduler


class TestManualScheduler:
    """Virtual clock semantics."""

    def test_fires_on_interval(self):
        clock = ManualScheduler()
        calls = []
        clock.call_every(100, lambda: calls.append(clock.now_ms))
        clock.advance(350)
        assert calls == [100, 200, 300]
        assert clock.now_ms == 350

    def test_cancel_stops_firing(self):
        clock = ManualScheduler()
        calls = []
        handle = clock.call_every(100, lambda: calls.append(1))
        clock.advance(100)
        handle.cancel()
        handle.cancel()
        clock.advance(500)
        assert calls == [1]
        assert not handle.active
        assert clock.active_count == 0

    def test_interleaves_timers_in_time_order(self):
        clock = ManualScheduler()
        order = []
        clock.call_every(30, lambda: order.append("a"))
        clock.call_every(20, lambda: order.append("b"))
        clock.advance(60)
        assert order == ["b", "a", "b", "a", "b"]

    def test_cancel_from_callback(self):
        clock = ManualScheduler()
        calls = []
        handles = []

        def once():
            calls.append(clock.now_ms)
            handles[0].cancel()

        handles.append(clock.call_every(10, once))
        assert clock.advance(100) == 1
        assert calls == [10]

    def test_rejects_non_positive_interval(self):
        clock = ManualScheduler()
        with pytest.raises(ValueError):
            clock.call_every(0, lambda: None)


class TestEffectLoop:
    """Frame counter lifecycle."""

    def test_counts_frames_while_running(self):
        clock = ManualScheduler()
        loop = EffectLoop(clock)
        loop.start()
        clock.advance(EffectLoop.INTERVAL_MS * 5)
        assert loop.frame == 5

    def test_start_is_idempotent(self):
        clock = ManualScheduler()
        loop = EffectLoop(clock)
        loop.start()
        loop.start()
        assert clock.active_count == 1

    def test_stop_releases_timer(self):
        clock = ManualScheduler()
        loop = EffectLoop(clock)
        loop.start()
        loop.stop()
        loop.stop()
        assert clock.active_count == 0
        assert not loop.running
        clock.advance(1000)
        assert loop.frame == 0

    def test_frame_counter_survives_restart(self):
        clock = ManualScheduler()
        loop = EffectLoop(clock, interval_ms=10)
        loop.start()
        clock.advance(30)
        loop.stop()
        loop.start()
        clock.advance(20)
        assert loop.frame == 5

    def test_on_frame_callback(self):
        clock = ManualScheduler()
        frames = []
        loop = EffectLoop(clock, on_frame=frames.append, interval_ms=10)
        loop.start()
        clock.advance(30)
        assert frames == [1, 2, 3]

    def test_pulse_range(self):
        loop = EffectLoop(ManualScheduler())
        values = []
        for frame in range(EffectLoop.PULSE_PERIOD_FRAMES):
            loop.frame = frame
            values.append(loop.pulse())
        assert min(values) == pytest.approx(0.0)
        assert max(values) == pytest.approx(1.0)
        assert all(0.0 <= v <= 1.0 for v in values)

    def test_pulse_periodic(self):
        loop = EffectLoop(ManualScheduler())
        loop.frame = 7
        first = loop.pulse()
        loop.frame = 7 + EffectLoop.PULSE_PERIOD_FRAMES
        assert math.isclose(loop.pulse(), first, abs_tol=1e-12)
