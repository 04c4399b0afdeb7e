"""Tests for the LogicPanel widget."""

import pytest
from controllers.circuit_controller import CircuitController
from models.circuit import CircuitModel
from models.registry import PinMode

pytest.importorskip("PyQt6")

from GUI.logic_panel import LogicPanel
from PyQt6.QtCore import Qt


@pytest.fixture
def logic_panel(qtbot):
    model = CircuitModel()
    circuit_ctrl = CircuitController(model)
    panel = LogicPanel(circuit_ctrl)
    qtbot.addWidget(panel)
    return panel, model, circuit_ctrl


class TestLogicPanel:
    def test_no_boards(self, logic_panel):
        panel, _, _ = logic_panel
        assert panel._buttons == {}

    def test_board_added_creates_buttons(self, logic_panel):
        panel, _, circuit_ctrl = logic_panel
        circuit_ctrl.add_component("arduino-uno")
        assert panel.button_for("UNO1", "d13", "INPUT").isChecked()
        assert not panel.button_for("UNO1", "d13", "HIGH").isChecked()

    def test_click_sets_pin_mode(self, logic_panel, qtbot):
        panel, model, circuit_ctrl = logic_panel
        circuit_ctrl.add_component("arduino-uno")
        qtbot.mouseClick(panel.button_for("UNO1", "d13", "HIGH"), Qt.MouseButton.LeftButton)
        assert model.get_pin_mode("UNO1", "d13") == PinMode.HIGH
        assert not panel.button_for("UNO1", "d13", "INPUT").isChecked()

    def test_controller_change_syncs_buttons(self, logic_panel):
        panel, _, circuit_ctrl = logic_panel
        circuit_ctrl.add_component("esp32")
        circuit_ctrl.set_pin_mode("ESP1", "d25", "LOW")
        assert panel.button_for("ESP1", "d25", "LOW").isChecked()

    def test_input_only_pins_disabled(self, logic_panel):
        panel, _, circuit_ctrl = logic_panel
        circuit_ctrl.add_component("esp32")
        assert panel.button_for("ESP1", "d34", "INPUT").isEnabled()
        assert not panel.button_for("ESP1", "d34", "HIGH").isEnabled()
        assert not panel.button_for("ESP1", "d35", "LOW").isEnabled()

    def test_board_removed(self, logic_panel):
        panel, _, circuit_ctrl = logic_panel
        circuit_ctrl.add_component("arduino-uno")
        circuit_ctrl.remove_component("UNO1")
        assert panel._buttons == {}

    def test_two_boards(self, logic_panel):
        panel, _, circuit_ctrl = logic_panel
        circuit_ctrl.add_component("arduino-uno")
        circuit_ctrl.add_component("esp32")
        assert len(panel._buttons) == 11 + 5
