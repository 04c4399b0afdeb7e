"""Control Panel - Run/Stop/Reset buttons and live simulation status."""

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (QComboBox, QDoubleSpinBox, QFormLayout, QGroupBox,
                             QHBoxLayout, QLabel, QPushButton, QVBoxLayout,
                             QWidget)

logger = logging.getLogger(__name__)

_OK_STYLE = "QLabel { color: green; }"
_ERROR_STYLE = "QLabel { color: white; background-color: #C62828; padding: 6px; border-radius: 4px; }"
_LED_ON_STYLE = "QLabel { color: #F9A825; font-weight: bold; }"
_IDLE_STYLE = "QLabel { color: gray; }"


class ControlPanel(QWidget):
    """Panel with the simulation controls and a status summary.

    Shows the running state, the LED indicator, component and wire
    counts, the single most important error message, and a resistance
    editor for the resistors on the canvas.
    """

    def __init__(self, circuit_ctrl, simulation_ctrl):
        super().__init__()
        self.circuit_ctrl = circuit_ctrl
        self.simulation_ctrl = simulation_ctrl
        self.model = circuit_ctrl.model

        self._init_ui()

        # Register as observer for model changes
        self.circuit_ctrl.add_observer(self._on_model_changed)

        # Initial refresh
        self.refresh()

    def _init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)

        title = QLabel("Controls")
        title.setFont(QFont("", 11, QFont.Weight.Bold))
        layout.addWidget(title)

        buttons = QHBoxLayout()
        self.run_button = QPushButton("Run Simulation")
        self.run_button.clicked.connect(self._on_run_clicked)
        buttons.addWidget(self.run_button)
        self.reset_button = QPushButton("Reset Circuit")
        self.reset_button.clicked.connect(self._on_reset_clicked)
        buttons.addWidget(self.reset_button)
        layout.addLayout(buttons)

        # --- Status group ---
        status_group = QGroupBox("Status")
        form = QFormLayout(status_group)
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight)

        self.state_label = QLabel("Stopped")
        form.addRow("State:", self.state_label)
        self.led_label = QLabel("OFF")
        form.addRow("LED:", self.led_label)
        self.components_label = QLabel("0")
        form.addRow("Components:", self.components_label)
        self.wires_label = QLabel("0")
        form.addRow("Wires:", self.wires_label)
        layout.addWidget(status_group)

        # --- Resistor editor ---
        resistor_group = QGroupBox("Resistor")
        resistor_form = QFormLayout(resistor_group)
        self.resistor_combo = QComboBox()
        self.resistor_combo.currentTextChanged.connect(self._on_resistor_selected)
        resistor_form.addRow("Component:", self.resistor_combo)
        self.resistance_spin = QDoubleSpinBox()
        self.resistance_spin.setRange(1.0, 1e7)
        self.resistance_spin.setDecimals(0)
        self.resistance_spin.setSuffix(" Ω")
        self.resistance_spin.editingFinished.connect(self._on_resistance_edited)
        resistor_form.addRow("Value:", self.resistance_spin)
        layout.addWidget(resistor_group)

        self.message_label = QLabel("")
        self.message_label.setWordWrap(True)
        layout.addWidget(self.message_label)

        layout.addStretch()

    # --- Button handlers ---

    def _on_run_clicked(self):
        if self.simulation_ctrl.is_running:
            self.simulation_ctrl.stop()
        else:
            self.simulation_ctrl.run()
        self.refresh()

    def _on_reset_clicked(self):
        self.simulation_ctrl.reset()
        self.refresh()

    def _on_resistor_selected(self, component_id: str):
        component = self.model.components.get(component_id)
        if component is None:
            return
        self.resistance_spin.blockSignals(True)
        self.resistance_spin.setValue(component.get_resistance())
        self.resistance_spin.blockSignals(False)

    def _on_resistance_edited(self):
        component_id = self.resistor_combo.currentText()
        if component_id not in self.model.components:
            return
        try:
            self.circuit_ctrl.set_resistance(component_id, self.resistance_spin.value())
        except ValueError as e:
            logger.warning("Rejected resistance for %s: %s", component_id, e)
            self.message_label.setText(str(e))

    # --- Observer callback ---

    def _on_model_changed(self, event: str, data) -> None:
        """Handle model change events from the controller."""
        self.refresh()

    # --- Refresh ---

    def refresh(self):
        """Re-read controller state into the widgets."""
        running = self.simulation_ctrl.is_running
        self.run_button.setText("Stop Simulation" if running else "Run Simulation")
        self.state_label.setText("Running" if running else "Stopped")
        self.state_label.setStyleSheet(_OK_STYLE if running else _IDLE_STYLE)

        led_on = self.simulation_ctrl.led_state
        self.led_label.setText("ON" if led_on else "OFF")
        self.led_label.setStyleSheet(_LED_ON_STYLE if led_on else _IDLE_STYLE)

        self.components_label.setText(str(self.circuit_ctrl.component_count))
        self.wires_label.setText(str(self.circuit_ctrl.wire_count))

        message = self.simulation_ctrl.error_message
        if message:
            self.message_label.setText(message)
            self.message_label.setStyleSheet(_ERROR_STYLE)
        elif running:
            self.message_label.setText("Circuit is working.")
            self.message_label.setStyleSheet(_OK_STYLE)
        else:
            self.message_label.setText("")
            self.message_label.setStyleSheet("")

        self._refresh_resistors()

    def _refresh_resistors(self):
        resistor_ids = sorted(
            cid for cid, c in self.model.components.items() if c.component_type == "resistor"
        )
        current = self.resistor_combo.currentText()
        self.resistor_combo.blockSignals(True)
        self.resistor_combo.clear()
        self.resistor_combo.addItems(resistor_ids)
        if current in resistor_ids:
            self.resistor_combo.setCurrentText(current)
        self.resistor_combo.blockSignals(False)
        self.resistance_spin.setEnabled(bool(resistor_ids))
        if resistor_ids:
            self._on_resistor_selected(self.resistor_combo.currentText())
