"""Stage view: particle canvas, playback bar and energy diagram.

Renders a PlaybackController. The view never mutates playback state
itself; user gestures are forwarded to the controller, and every
controller change comes back through _on_controller_changed().
"""

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QFrame

from reaction import SimulationState
from stage.canvas import StageCanvas
from stage.controls import PlaybackBar
from stage.energy_diagram import EnergyDiagram
from ui_common import LoadingOverlay

logger = logging.getLogger(__name__)

INTRO_TEXT = "Enter reactants in the left panel to begin."


class StageView(QWidget):
    """Complete stage: canvas + bottom bar, bound to one controller."""

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller

        self.canvas = StageCanvas()
        self.playback_bar = PlaybackBar()
        self.energy_diagram = EnergyDiagram()

        self.bottom_bar = QFrame()
        self.bottom_bar.setStyleSheet("background-color: #111827;")
        self.bottom_bar.setFixedHeight(190)
        bottom_layout = QHBoxLayout(self.bottom_bar)
        bottom_layout.setContentsMargins(0, 0, 0, 0)
        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.playback_bar)
        splitter.addWidget(self.energy_diagram)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 2)
        bottom_layout.addWidget(splitter)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self.canvas, 1)
        layout.addWidget(self.bottom_bar)

        self.loading_overlay = LoadingOverlay(self.canvas)

        self._shown_analysis = None

        # Wire gestures
        self.playback_bar.play_btn.clicked.connect(controller.toggle_play_pause)
        self.playback_bar.back_btn.clicked.connect(controller.step_back)
        self.playback_bar.forward_btn.clicked.connect(controller.step_forward)
        self.playback_bar.step_slider.valueChanged.connect(self._on_scrub)

        controller.add_listener(self._on_controller_changed)
        controller.add_frame_listener(self._on_effect_frame)

        self._on_controller_changed(controller)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self.loading_overlay.isVisible():
            self.loading_overlay.resize(self.canvas.size())

    # -- Controller callbacks --

    def _on_controller_changed(self, controller):
        snapshot = controller.snapshot()
        state = snapshot.state

        if state is SimulationState.ANALYZING:
            if not self.loading_overlay.running:
                self.loading_overlay.start()
        else:
            self.loading_overlay.stop()

        if state in (SimulationState.IDLE, SimulationState.ANALYZING):
            self.bottom_bar.hide()
            self._shown_analysis = None
            self.energy_diagram.set_steps(())
            self.canvas.show_intro(INTRO_TEXT)
            return

        self.bottom_bar.show()
        analysis = snapshot.analysis
        steps = analysis.reaction_steps if analysis is not None else ()

        if analysis is not self._shown_analysis:
            self._shown_analysis = analysis
            self.energy_diagram.set_steps(steps)
            self.canvas.set_step(snapshot.current_step, animate=False)
        else:
            self.canvas.set_step(snapshot.current_step)

        self.energy_diagram.set_step_index(snapshot.step_index)
        self.playback_bar.show_position(state, snapshot.step_index, len(steps))

        if state is not SimulationState.PLAYING:
            self.canvas.set_pulse(0.0)
            self.energy_diagram.set_pulse(0.0)

    def _on_effect_frame(self, frame):
        pulse = self.controller.effects.pulse()
        self.canvas.set_pulse(pulse)
        self.energy_diagram.set_pulse(pulse)

    def _on_scrub(self, value):
        logger.debug("Scrubbed to step %d", value)
        self.controller.step_to(self.playback_bar.selected_step())
