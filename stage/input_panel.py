"""Input panel: reactant fields, reaction conditions, actions and results.

A plain form. It reads values for the analysis request and displays the
analysis summary; playback decisions stay with the PlaybackController.
"""

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QGridLayout, QHBoxLayout,
    QLabel, QPushButton, QComboBox, QGroupBox, QCheckBox, QLineEdit,
    QFileDialog,
)

from analysis_service import identified_name
from reaction import (
    CONCENTRATIONS, DEFAULT_CONDITIONS, EXAMPLE_REACTIONS, SOLVENT_OPTIONS,
    ReactionCondition, SimulationState,
)
from ui_common import make_slider, slider_value

logger = logging.getLogger(__name__)


MIN_REACTANT_FIELDS = 2


class InputPanel(QWidget):
    """Reactants, conditions, Analyze / Simulate / Reset and results."""

    def __init__(self, identifier=None, parent=None):
        super().__init__(parent)
        self.identifier = identifier
        self.reactant_edits = []
        self._remove_buttons = {}
        self._init_ui()

    # -- helpers --

    def _add_reactant_row(self, text=""):
        row = QWidget()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 0, 0, 0)

        edit = QLineEdit(text)
        edit.setPlaceholderText(f"Reactant {len(self.reactant_edits) + 1}")
        row_layout.addWidget(edit)

        if self.identifier is not None:
            identify_btn = QPushButton("Image…")
            identify_btn.setToolTip("Identify this reactant from an image")
            identify_btn.clicked.connect(lambda _checked=False, e=edit: self._identify_into(e))
            row_layout.addWidget(identify_btn)

        remove_btn = QPushButton("✕")
        remove_btn.setFixedWidth(28)
        remove_btn.setToolTip("Remove this reactant")
        remove_btn.clicked.connect(lambda _checked=False, r=row, e=edit: self._remove_reactant_row(r, e))
        row_layout.addWidget(remove_btn)

        self._reactant_layout.addWidget(row)
        self.reactant_edits.append(edit)
        self._remove_buttons[edit] = remove_btn
        self._update_remove_buttons()
        return edit

    def _remove_reactant_row(self, row, edit):
        if len(self.reactant_edits) <= MIN_REACTANT_FIELDS:
            return
        self.reactant_edits.remove(edit)
        del self._remove_buttons[edit]
        self._reactant_layout.removeWidget(row)
        row.deleteLater()
        self._update_remove_buttons()

    def _update_remove_buttons(self):
        removable = len(self.reactant_edits) > MIN_REACTANT_FIELDS
        for btn in self._remove_buttons.values():
            btn.setVisible(removable)

    def _identify_into(self, edit):
        path, _ = QFileDialog.getOpenFileName(
            self, "Identify Molecule", "", "Images (*.png *.jpg *.jpeg *.webp)",
        )
        if not path:
            return
        try:
            with open(path, "rb") as f:
                image = f.read()
        except OSError as exc:
            logger.warning("Could not read image %s: %s", path, exc)
            return
        name = identified_name(self.identifier, image)
        if name is None:
            edit.setPlaceholderText("Molecule not recognized")
            return
        edit.setText(name)

    def _add_result_row(self, layout, row, label_text):
        label = QLabel(label_text)
        label.setStyleSheet("color: #888;")
        value = QLabel()
        value.setWordWrap(True)
        value.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        layout.addWidget(label, row, 0, Qt.AlignmentFlag.AlignTop)
        layout.addWidget(value, row, 1)
        return value

    # -- UI construction --

    def _init_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(8, 8, 8, 8)

        # --- Reactants ---
        reactant_group = QGroupBox("Input Molecules")
        reactant_box = QVBoxLayout()
        reactant_group.setLayout(reactant_box)

        self._reactant_layout = QVBoxLayout()
        reactant_box.addLayout(self._reactant_layout)
        for _ in range(MIN_REACTANT_FIELDS):
            self._add_reactant_row()

        self.add_reactant_btn = QPushButton("+ Add Another Component")
        self.add_reactant_btn.clicked.connect(lambda: self._add_reactant_row())
        reactant_box.addWidget(self.add_reactant_btn)

        examples = QGridLayout()
        for i, (name, reactants, _kind) in enumerate(EXAMPLE_REACTIONS):
            btn = QPushButton(name)
            btn.clicked.connect(lambda _checked=False, r=reactants: self.set_reactants(r))
            examples.addWidget(btn, i // 2, i % 2)
        reactant_box.addLayout(examples)

        main_layout.addWidget(reactant_group)

        # --- Conditions ---
        cond_group = QGroupBox("Conditions")
        cond_layout = QGridLayout()
        cond_group.setLayout(cond_layout)

        self.temperature_slider = make_slider(-50, 500, DEFAULT_CONDITIONS.temperature)
        self.temperature_label = QLabel()
        self.temperature_label.setMinimumWidth(55)
        self.temperature_label.setAlignment(
            Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
        )
        self.temperature_slider.valueChanged.connect(self._update_temperature_label)
        self._update_temperature_label()
        cond_layout.addWidget(QLabel("Temperature"), 0, 0)
        cond_layout.addWidget(self.temperature_slider, 0, 1)
        cond_layout.addWidget(self.temperature_label, 0, 2)

        self.concentration_combo = QComboBox()
        for c in CONCENTRATIONS:
            self.concentration_combo.addItem(c.capitalize(), c)
        self.concentration_combo.setCurrentIndex(
            CONCENTRATIONS.index(DEFAULT_CONDITIONS.concentration)
        )
        cond_layout.addWidget(QLabel("Concentration"), 1, 0)
        cond_layout.addWidget(self.concentration_combo, 1, 1, 1, 2)

        self.solvent_combo = QComboBox()
        self.solvent_combo.addItems(SOLVENT_OPTIONS)
        self.solvent_combo.setCurrentText(DEFAULT_CONDITIONS.solvent)
        cond_layout.addWidget(QLabel("Solvent"), 2, 0)
        cond_layout.addWidget(self.solvent_combo, 2, 1, 1, 2)

        self.catalyst_checkbox = QCheckBox("Catalyst present")
        self.catalyst_checkbox.setChecked(DEFAULT_CONDITIONS.catalyst)
        cond_layout.addWidget(self.catalyst_checkbox, 3, 0, 1, 3)

        main_layout.addWidget(cond_group)

        # --- Actions ---
        action_layout = QHBoxLayout()
        self.analyze_btn = QPushButton("Analyze Reaction")
        self.simulate_btn = QPushButton("Simulate")
        self.reset_btn = QPushButton("Reset")
        action_layout.addWidget(self.analyze_btn)
        action_layout.addWidget(self.simulate_btn)
        action_layout.addWidget(self.reset_btn)
        main_layout.addLayout(action_layout)

        # --- Results ---
        self.result_group = QGroupBox("Analysis")
        result_layout = QGridLayout()
        self.result_group.setLayout(result_layout)
        self.type_value = self._add_result_row(result_layout, 0, "Type")
        self.equation_value = self._add_result_row(result_layout, 1, "Equation")
        self.energy_value = self._add_result_row(result_layout, 2, "Energetics")
        self.activation_value = self._add_result_row(result_layout, 3, "Activation")
        self.products_value = self._add_result_row(result_layout, 4, "Products")
        self.explanation_value = self._add_result_row(result_layout, 5, "Notes")
        self.result_group.hide()
        main_layout.addWidget(self.result_group)

        main_layout.addStretch()

    def _update_temperature_label(self, _val=None):
        self.temperature_label.setText(f"{slider_value(self.temperature_slider):.0f} °C")

    # -- Public accessors --

    def get_reactants(self):
        return [edit.text() for edit in self.reactant_edits]

    def set_reactants(self, reactants):
        """Fill the reactant fields, adding rows as needed."""
        while len(self.reactant_edits) < len(reactants):
            self._add_reactant_row()
        for i, edit in enumerate(self.reactant_edits):
            edit.setText(reactants[i] if i < len(reactants) else "")

    def get_conditions(self):
        return ReactionCondition(
            temperature=slider_value(self.temperature_slider),
            concentration=self.concentration_combo.currentData(),
            solvent=self.solvent_combo.currentText(),
            catalyst=self.catalyst_checkbox.isChecked(),
        )

    def show_state(self, state, analysis):
        """Enable actions for the current state and show the analysis."""
        analyzing = state is SimulationState.ANALYZING
        self.analyze_btn.setEnabled(not analyzing and state is not SimulationState.PLAYING)
        self.analyze_btn.setText("Analyzing..." if analyzing else "Analyze Reaction")
        self.simulate_btn.setEnabled(
            state is SimulationState.READY
            and analysis is not None and analysis.can_react
        )
        self.reset_btn.setEnabled(state is not SimulationState.IDLE)

        if analysis is None:
            self.result_group.hide()
            return

        self.type_value.setText(analysis.reaction_type or "-")
        self.equation_value.setText(analysis.equation or "-")
        if analysis.can_react:
            self.energy_value.setText(
                "Exothermic" if analysis.exothermic else "Endothermic"
            )
        else:
            self.energy_value.setText("No reaction")
        self.activation_value.setText(analysis.activation_energy_description or "-")
        self.products_value.setText(
            ", ".join(f"{p.name} ({p.formula})" for p in analysis.products) or "-"
        )
        self.explanation_value.setText(analysis.explanation)
        self.result_group.show()
