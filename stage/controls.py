"""Playback bar: step back / play-pause / step forward and a step scrubber."""

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel,
)

from reaction import SimulationState
from ui_common import make_slider, set_slider_value, slider_value


class PlaybackBar(QWidget):
    """Transport buttons and a step slider.

    Exposes its widgets; StageView wires them to the controller.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)

        buttons = QHBoxLayout()
        self.back_btn = QPushButton("⏮")
        self.back_btn.setToolTip("Previous step")
        self.play_btn = QPushButton("Play")
        self.play_btn.setMinimumWidth(80)
        self.forward_btn = QPushButton("⏭")
        self.forward_btn.setToolTip("Next step")
        buttons.addStretch(1)
        buttons.addWidget(self.back_btn)
        buttons.addWidget(self.play_btn)
        buttons.addWidget(self.forward_btn)
        buttons.addStretch(1)
        layout.addLayout(buttons)

        timeline = QHBoxLayout()
        step_caption = QLabel("STEP")
        step_caption.setStyleSheet("color: #64748b; font-family: monospace;")
        self.step_slider = make_slider(0, 0, 0)
        self.step_slider.setPageStep(1)
        self.step_label = QLabel("0/0")
        self.step_label.setStyleSheet("color: #cbd5e1; font-family: monospace;")
        self.step_label.setMinimumWidth(40)
        self.step_label.setAlignment(
            Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
        )
        timeline.addWidget(step_caption)
        timeline.addWidget(self.step_slider, 1)
        timeline.addWidget(self.step_label)
        layout.addLayout(timeline)

    def selected_step(self):
        return int(slider_value(self.step_slider))

    def show_position(self, state, index, n_steps):
        """Reflect controller state without feeding back into it."""
        self.step_slider.blockSignals(True)
        self.step_slider.setMaximum(max(0, n_steps - 1))
        self.step_slider.blockSignals(False)
        if not self.step_slider.isSliderDown():
            set_slider_value(self.step_slider, index)
        shown = index + 1 if n_steps else 0
        self.step_label.setText(f"{shown}/{n_steps}")
        self.play_btn.setText("Pause" if state is SimulationState.PLAYING else "Play")

        has_steps = n_steps > 0
        self.back_btn.setEnabled(has_steps)
        self.forward_btn.setEnabled(has_steps)
        self.step_slider.setEnabled(has_steps)
