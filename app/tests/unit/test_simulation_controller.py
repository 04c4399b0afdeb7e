"""Tests for SimulationController."""

import pytest
from controllers.circuit_controller import CircuitController
from controllers.simulation_controller import SimulationController
from models.circuit import CircuitModel
from simulation.settings import SimulationSettings


def _build_led_circuit(ctrl):
    """5V - R1 - LED1 - GND built through the controller."""
    ctrl.add_component("5v")
    ctrl.add_component("resistor")
    ctrl.add_component("led")
    ctrl.add_component("gnd")
    ctrl.add_wire("VCC1", "out", "R1", "term-a")
    ctrl.add_wire("R1", "term-b", "LED1", "anode")
    ctrl.add_wire("LED1", "cathode", "GND1", "in")


@pytest.fixture
def controllers():
    model = CircuitModel()
    circuit_ctrl = CircuitController(model)
    sim_ctrl = SimulationController(model, circuit_ctrl)
    events = []
    circuit_ctrl.add_observer(lambda event, data: events.append(event))
    return circuit_ctrl, sim_ctrl, events


class TestInit:
    def test_defaults(self):
        ctrl = SimulationController()
        assert not ctrl.is_running
        assert ctrl.last_result is None
        assert ctrl.settings == SimulationSettings()

    def test_model_taken_from_circuit_controller(self):
        circuit_ctrl = CircuitController()
        assert SimulationController(circuit_ctrl=circuit_ctrl).model is circuit_ctrl.model


class TestRunStop:
    def test_run_resolves_and_notifies(self, controllers):
        circuit_ctrl, sim_ctrl, events = controllers
        _build_led_circuit(circuit_ctrl)
        events.clear()

        result = sim_ctrl.run()

        assert sim_ctrl.is_running
        assert result.led_lit
        assert sim_ctrl.led_state
        assert sim_ctrl.error_message is None
        assert events == ["simulation_started", "simulation_completed"]

    def test_stop_hides_result(self, controllers):
        circuit_ctrl, sim_ctrl, events = controllers
        _build_led_circuit(circuit_ctrl)
        sim_ctrl.run()
        sim_ctrl.stop()

        assert not sim_ctrl.is_running
        assert sim_ctrl.displayed_result is None
        assert sim_ctrl.last_result is not None
        assert not sim_ctrl.led_state
        assert events[-1] == "simulation_stopped"

    def test_stop_when_not_running_is_noop(self, controllers):
        _, sim_ctrl, events = controllers
        sim_ctrl.stop()
        assert events == []

    def test_reset_forgets_result(self, controllers):
        circuit_ctrl, sim_ctrl, events = controllers
        _build_led_circuit(circuit_ctrl)
        sim_ctrl.run()
        sim_ctrl.reset()
        assert sim_ctrl.last_result is None
        assert events[-1] == "simulation_stopped"

    def test_error_message_while_running(self, controllers):
        circuit_ctrl, sim_ctrl, _ = controllers
        circuit_ctrl.add_component("5v")
        circuit_ctrl.add_component("led")
        circuit_ctrl.add_component("gnd")
        circuit_ctrl.add_wire("VCC1", "out", "LED1", "anode")
        circuit_ctrl.add_wire("LED1", "cathode", "GND1", "in")
        sim_ctrl.run()
        assert sim_ctrl.error_message == "LED requires a resistor in series to limit current and prevent damage."
        assert not sim_ctrl.led_state


class TestLiveUpdates:
    def test_edit_while_running_re_resolves(self, controllers):
        circuit_ctrl, sim_ctrl, events = controllers
        _build_led_circuit(circuit_ctrl)
        sim_ctrl.run()
        events.clear()

        circuit_ctrl.remove_wire_by_id("W3")

        assert "simulation_completed" in events
        assert not sim_ctrl.led_state
        assert not sim_ctrl.last_result.is_valid

    def test_remove_component_resolves_once(self, controllers):
        circuit_ctrl, sim_ctrl, events = controllers
        _build_led_circuit(circuit_ctrl)
        sim_ctrl.run()
        events.clear()

        circuit_ctrl.remove_component("LED1")

        assert events.count("wire_removed") == 2
        assert events.count("simulation_completed") == 1
        assert "LED1" not in sim_ctrl.last_result.component_states
        assert sim_ctrl.last_result.warnings == []

    def test_edit_while_stopped_clears_result(self, controllers):
        circuit_ctrl, sim_ctrl, events = controllers
        _build_led_circuit(circuit_ctrl)
        sim_ctrl.resolve()
        circuit_ctrl.set_resistance("R1", 330)
        assert sim_ctrl.last_result is None
        assert "simulation_completed" not in events

    def test_pin_mode_change_while_running(self, controllers):
        circuit_ctrl, sim_ctrl, _ = controllers
        circuit_ctrl.add_component("arduino-uno")
        circuit_ctrl.add_component("resistor")
        circuit_ctrl.add_component("led")
        circuit_ctrl.add_wire("UNO1", "d13", "R1", "term-a")
        circuit_ctrl.add_wire("R1", "term-b", "LED1", "anode")
        circuit_ctrl.add_wire("LED1", "cathode", "UNO1", "gnd")
        sim_ctrl.run()
        assert not sim_ctrl.led_state

        circuit_ctrl.set_pin_mode("UNO1", "d13", "HIGH")
        assert sim_ctrl.led_state

        circuit_ctrl.set_pin_mode("UNO1", "d13", "LOW")
        assert not sim_ctrl.led_state

    def test_set_settings_while_running(self, controllers):
        circuit_ctrl, sim_ctrl, _ = controllers
        _build_led_circuit(circuit_ctrl)
        sim_ctrl.run()
        sim_ctrl.set_settings(SimulationSettings(led_forward_voltage=5.5))
        assert not sim_ctrl.led_state

    def test_detach(self, controllers):
        circuit_ctrl, sim_ctrl, events = controllers
        sim_ctrl.run()
        sim_ctrl.detach()
        events.clear()
        circuit_ctrl.add_component("led")
        assert events == ["component_added"]
