"""Tests for the ControlPanel widget."""

import pytest
from controllers.circuit_controller import CircuitController
from controllers.simulation_controller import SimulationController
from models.circuit import CircuitModel

pytest.importorskip("PyQt6")

from GUI.control_panel import ControlPanel
from PyQt6.QtCore import Qt


@pytest.fixture
def control_panel(qtbot):
    """Create a ControlPanel wired to a fresh model/controller."""
    model = CircuitModel()
    circuit_ctrl = CircuitController(model)
    sim_ctrl = SimulationController(model, circuit_ctrl)
    panel = ControlPanel(circuit_ctrl, sim_ctrl)
    qtbot.addWidget(panel)
    return panel, circuit_ctrl, sim_ctrl


def _build_led_circuit(ctrl):
    ctrl.add_component("5v")
    ctrl.add_component("resistor")
    ctrl.add_component("led")
    ctrl.add_component("gnd")
    ctrl.add_wire("VCC1", "out", "R1", "term-a")
    ctrl.add_wire("R1", "term-b", "LED1", "anode")
    ctrl.add_wire("LED1", "cathode", "GND1", "in")


class TestInitialState:
    def test_stopped(self, control_panel):
        panel, _, _ = control_panel
        assert panel.run_button.text() == "Run Simulation"
        assert panel.state_label.text() == "Stopped"
        assert panel.led_label.text() == "OFF"
        assert panel.message_label.text() == ""

    def test_counts_follow_model(self, control_panel):
        panel, circuit_ctrl, _ = control_panel
        _build_led_circuit(circuit_ctrl)
        assert panel.components_label.text() == "4"
        assert panel.wires_label.text() == "3"


class TestRunButton:
    def test_run_lights_led(self, control_panel, qtbot):
        panel, circuit_ctrl, sim_ctrl = control_panel
        _build_led_circuit(circuit_ctrl)
        qtbot.mouseClick(panel.run_button, Qt.MouseButton.LeftButton)

        assert sim_ctrl.is_running
        assert panel.run_button.text() == "Stop Simulation"
        assert panel.state_label.text() == "Running"
        assert panel.led_label.text() == "ON"
        assert panel.message_label.text() == "Circuit is working."

    def test_second_click_stops(self, control_panel, qtbot):
        panel, circuit_ctrl, sim_ctrl = control_panel
        _build_led_circuit(circuit_ctrl)
        qtbot.mouseClick(panel.run_button, Qt.MouseButton.LeftButton)
        qtbot.mouseClick(panel.run_button, Qt.MouseButton.LeftButton)

        assert not sim_ctrl.is_running
        assert panel.led_label.text() == "OFF"
        assert panel.message_label.text() == ""

    def test_error_message_shown(self, control_panel, qtbot):
        panel, circuit_ctrl, _ = control_panel
        circuit_ctrl.add_component("led")
        qtbot.mouseClick(panel.run_button, Qt.MouseButton.LeftButton)
        assert "ground" in panel.message_label.text()

    def test_live_update_while_running(self, control_panel, qtbot):
        panel, circuit_ctrl, _ = control_panel
        _build_led_circuit(circuit_ctrl)
        qtbot.mouseClick(panel.run_button, Qt.MouseButton.LeftButton)
        circuit_ctrl.remove_wire_by_id("W3")
        assert panel.led_label.text() == "OFF"

    def test_reset(self, control_panel, qtbot):
        panel, circuit_ctrl, sim_ctrl = control_panel
        _build_led_circuit(circuit_ctrl)
        qtbot.mouseClick(panel.run_button, Qt.MouseButton.LeftButton)
        qtbot.mouseClick(panel.reset_button, Qt.MouseButton.LeftButton)
        assert sim_ctrl.last_result is None
        assert panel.state_label.text() == "Stopped"


class TestResistorEditor:
    def test_lists_resistors(self, control_panel):
        panel, circuit_ctrl, _ = control_panel
        circuit_ctrl.add_component("resistor", config={"resistance": 470})
        circuit_ctrl.add_component("led")
        assert panel.resistor_combo.count() == 1
        assert panel.resistor_combo.currentText() == "R1"
        assert panel.resistance_spin.value() == 470.0

    def test_edit_updates_model(self, control_panel):
        panel, circuit_ctrl, _ = control_panel
        comp = circuit_ctrl.add_component("resistor")
        panel.resistance_spin.setValue(1000.0)
        panel._on_resistance_edited()
        assert comp.get_resistance() == 1000.0

    def test_disabled_without_resistors(self, control_panel):
        panel, _, _ = control_panel
        assert not panel.resistance_spin.isEnabled()
