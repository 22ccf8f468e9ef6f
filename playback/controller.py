"""Playback controller: the simulation state machine.

Owns SimulationState, the current step index, the auto-advance timer and
the effect loop. All mutation happens on one thread (the GUI thread); the
analysis collaborator reports back through receive_analysis().

Timers are scoped to the PLAYING state: every transition goes through
_set_state(), which releases the auto-advance timer and the effect loop
before acquiring them again for a new PLAYING phase. There is never more
than one auto-advance timer alive.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from reaction import ReactionAnalysis, SimulationState, clean_reactants
from playback.effects import EffectLoop
from playback.scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaybackSnapshot:
    """Immutable view of the controller for renderers."""

    state: SimulationState
    step_index: int
    analysis: ReactionAnalysis | None

    @property
    def current_step(self):
        if self.analysis is None or not self.analysis.reaction_steps:
            return None
        return self.analysis.reaction_steps[self.step_index]


def clamp_index(index: int, n_steps: int) -> int:
    """Clamp index into [0, max(0, n_steps - 1)]."""
    return max(0, min(int(index), max(0, n_steps - 1)))


def advance(
    state: SimulationState, index: int, n_steps: int,
) -> tuple[SimulationState, int]:
    """One auto-advance tick as a single (state, index) transition.

    Below the last index the index moves forward; at the last index the
    state becomes FINISHED and the index stays put. Any state other than
    PLAYING, or an empty step sequence, is returned unchanged.
    """
    if state is not SimulationState.PLAYING or n_steps <= 0:
        return state, clamp_index(index, n_steps)
    index = clamp_index(index, n_steps)
    if index < n_steps - 1:
        return state, index + 1
    return SimulationState.FINISHED, index


class PlaybackController:
    """Finite-state playback engine.

    Listeners registered with add_listener() are called with the
    controller after every observable change.
    """

    STEP_INTERVAL_MS = 2500

    def __init__(
        self,
        scheduler: Scheduler,
        step_interval_ms: int | None = None,
        effect_scheduler: Scheduler | None = None,
    ) -> None:
        self._scheduler = scheduler
        self.step_interval_ms = step_interval_ms or self.STEP_INTERVAL_MS
        self._state = SimulationState.IDLE
        self._analysis: ReactionAnalysis | None = None
        self._index = 0
        self._advance_timer: TimerHandle | None = None
        self._listeners: list[Callable[[PlaybackController], None]] = []
        self.effects = EffectLoop(
            effect_scheduler or scheduler, on_frame=self._on_effect_frame,
        )
        self._frame_listeners: list[Callable[[int], None]] = []

    # -- Read access --

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def analysis(self) -> ReactionAnalysis | None:
        return self._analysis

    @property
    def current_step_index(self) -> int:
        return self._index

    @property
    def n_steps(self) -> int:
        return self._analysis.n_steps if self._analysis is not None else 0

    @property
    def is_auto_advancing(self) -> bool:
        return self._advance_timer is not None

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(self._state, self._index, self._analysis)

    def add_listener(self, callback: Callable[[PlaybackController], None]) -> None:
        self._listeners.append(callback)

    def add_frame_listener(self, callback: Callable[[int], None]) -> None:
        """Register a callback for effect-loop frames (cosmetic only)."""
        self._frame_listeners.append(callback)

    # -- Transitions --

    def analyze(self, reactants) -> list[str] | None:
        """Enter ANALYZING if at least one non-empty reactant was given.

        Returns:
            The cleaned reactant list to hand to the analysis collaborator,
            or None when the request is refused.
        """
        cleaned = clean_reactants(reactants)
        if not cleaned:
            logger.info("Analyze ignored: no reactants given")
            return None
        if self._state is SimulationState.ANALYZING:
            logger.info("Superseding in-flight analysis with %s", cleaned)
        self._set_state(SimulationState.ANALYZING)
        self._notify()
        return cleaned

    def receive_analysis(self, analysis: ReactionAnalysis) -> None:
        """Store a completed analysis and move to READY at step 0."""
        self._analysis = analysis
        self._index = 0
        self._set_state(SimulationState.READY)
        if analysis.can_react and not analysis.reaction_steps:
            logger.warning("Analysis reports a reaction but carries no steps")
        logger.info(
            "Analysis ready: %s (can_react=%s, %d steps)",
            analysis.reaction_type, analysis.can_react, analysis.n_steps,
        )
        self._notify()

    def simulate(self) -> bool:
        """Start playback from step 0. Returns False if not permitted."""
        if self._state is not SimulationState.READY:
            return False
        if self._analysis is None or not self._analysis.can_react:
            return False
        self._index = 0
        self._set_state(SimulationState.PLAYING)
        self._notify()
        return True

    def toggle_play_pause(self) -> None:
        state = self._state
        if state is SimulationState.PLAYING:
            self._set_state(SimulationState.PAUSED)
        elif state in (SimulationState.PAUSED, SimulationState.READY):
            if self._analysis is None or not self._analysis.can_react:
                return
            self._set_state(SimulationState.PLAYING)
        elif state is SimulationState.FINISHED:
            self._index = 0
            self._set_state(SimulationState.PLAYING)
        else:
            return
        self._notify()

    def step_to(self, index: int) -> None:
        """Scrub to a step. Always pauses; the index is clamped into range."""
        if self._analysis is None:
            return
        self._index = clamp_index(index, self.n_steps)
        self._set_state(SimulationState.PAUSED)
        self._notify()

    def step_forward(self) -> None:
        self.step_to(self._index + 1)

    def step_back(self) -> None:
        self.step_to(self._index - 1)

    def reset(self) -> None:
        """Return to IDLE from any state, discarding the analysis."""
        self._analysis = None
        self._index = 0
        self._set_state(SimulationState.IDLE)
        self._notify()

    def shutdown(self) -> None:
        """Release every timer without changing state (component teardown)."""
        self._release_timers()

    # -- Internals --

    def _set_state(self, new_state: SimulationState) -> None:
        old_state = self._state
        self._release_timers()
        self._state = new_state
        if new_state is SimulationState.PLAYING:
            self._acquire_timers()
        if old_state is not new_state:
            logger.info("Playback %s -> %s", old_state.name, new_state.name)

    def _acquire_timers(self) -> None:
        if self._analysis is not None and self._analysis.playable:
            self._advance_timer = self._scheduler.call_every(
                self.step_interval_ms, self._on_advance_tick,
            )
        self.effects.start()

    def _release_timers(self) -> None:
        if self._advance_timer is not None:
            self._advance_timer.cancel()
            self._advance_timer = None
        self.effects.stop()

    def _on_advance_tick(self) -> None:
        new_state, new_index = advance(self._state, self._index, self.n_steps)
        logger.debug("Auto-advance tick: step %d -> %d", self._index, new_index)
        self._index = new_index
        if new_state is not self._state:
            self._set_state(new_state)
        self._notify()

    def _on_effect_frame(self, frame: int) -> None:
        for callback in self._frame_listeners:
            callback(frame)

    def _notify(self) -> None:
        for callback in self._listeners:
            callback(self)
