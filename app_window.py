"""App window: input panel beside the reaction stage.

Owns the PlaybackController and the analysis collaborator, and bridges
analysis requests to a background AnalysisWorker.
"""

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QMainWindow, QSplitter, QStatusBar, QLabel, QScrollArea

from analysis_service import AnalysisWorker
from playback.controller import PlaybackController
from playback.scheduling import QtScheduler
from stage.input_panel import InputPanel
from stage.view import StageView

logger = logging.getLogger(__name__)


class AppWindow(QMainWindow):
    """Top-level window: reactant/condition form and playback stage."""

    def __init__(self, service, step_interval_ms=None, identifier=None):
        super().__init__()
        self.setWindowTitle("Reaction Lab")
        self.resize(1280, 800)

        self.service = service
        self.controller = PlaybackController(
            QtScheduler(),
            step_interval_ms=step_interval_ms,
            effect_scheduler=QtScheduler(precise=True),
        )
        self._workers = []

        # --- Panels ---
        self.input_panel = InputPanel(identifier=identifier)
        self.stage_view = StageView(self.controller)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.input_panel)
        scroll.setMinimumWidth(360)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(scroll)
        splitter.addWidget(self.stage_view)
        splitter.setStretchFactor(0, 2)
        splitter.setStretchFactor(1, 5)
        self.setCentralWidget(splitter)

        # --- Status bar ---
        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self.state_label = QLabel()
        self.step_label = QLabel()
        self._status_bar.addWidget(self.state_label)
        self._status_bar.addWidget(self.step_label)

        # --- Wiring ---
        self.input_panel.analyze_btn.clicked.connect(self._on_analyze)
        self.input_panel.simulate_btn.clicked.connect(self.controller.simulate)
        self.input_panel.reset_btn.clicked.connect(self.controller.reset)
        self.controller.add_listener(self._on_controller_changed)
        self._on_controller_changed(self.controller)

    def _on_analyze(self):
        reactants = self.controller.analyze(self.input_panel.get_reactants())
        if reactants is None:
            self._status_bar.showMessage("Enter at least one reactant", 3000)
            return
        conditions = self.input_panel.get_conditions()
        logger.info("Requesting analysis of %s", reactants)

        worker = AnalysisWorker(self.service, reactants, conditions)
        worker.analysis_ready.connect(self._on_analysis_ready)
        worker.finished.connect(self._reap_workers)
        # Keep a reference until the thread finishes
        self._workers.append(worker)
        worker.start()

    def _on_analysis_ready(self, analysis):
        self.controller.receive_analysis(analysis)

    def _reap_workers(self):
        for worker in [w for w in self._workers if w.isFinished()]:
            self._workers.remove(worker)
            worker.deleteLater()

    def _on_controller_changed(self, controller):
        snapshot = controller.snapshot()
        self.input_panel.show_state(snapshot.state, snapshot.analysis)
        self.state_label.setText(f"  {snapshot.state.name.capitalize()}  ")
        n = controller.n_steps
        if n:
            self.step_label.setText(f"  Step {snapshot.step_index + 1} of {n}  ")
        else:
            self.step_label.setText("")

    def closeEvent(self, event):
        # Component teardown: no timer may outlive the window
        self.controller.shutdown()
        for worker in list(self._workers):
            worker.wait()
        super().closeEvent(event)
