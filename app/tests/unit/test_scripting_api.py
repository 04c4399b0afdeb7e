"""Tests for the headless scripting API (scripting/circuit.py)."""

import json

import pytest
from controllers.project_store import JsonDirectoryProjectStore, MemoryProjectStore
from scripting import Circuit, SimulationResult


def _blink(circuit):
    circuit.add_component("5v")
    circuit.add_component("resistor", resistance=220)
    circuit.add_component("led")
    circuit.add_component("gnd")
    circuit.add_wire("VCC1", "out", "R1", "term-a")
    circuit.add_wire("R1", "term-b", "LED1", "anode")
    circuit.add_wire("LED1", "cathode", "GND1", "in")


class TestBuild:
    def test_add_component_returns_id(self):
        circuit = Circuit()
        assert circuit.add_component("led") == "LED1"
        assert circuit.add_component("arduino-uno", position=(10, 20), rotation=450) == "UNO1"
        assert circuit.components["UNO1"].rotation == 90

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Valid types"):
            Circuit().add_component("transistor")

    def test_add_and_remove_wire(self):
        circuit = Circuit()
        wire_id = circuit.add_wire("A1", "x", "B1", "y")
        assert wire_id == "W1"
        circuit.remove_wire(wire_id)
        assert circuit.wires == []

    def test_remove_component(self):
        circuit = Circuit()
        _blink(circuit)
        circuit.remove_component("R1")
        assert "R1" not in circuit.components
        assert len(circuit.wires) == 1

    def test_component_types(self):
        assert "esp32" in Circuit().component_types


class TestResolve:
    def test_blink_lights(self):
        circuit = Circuit()
        _blink(circuit)
        result = circuit.resolve()
        assert isinstance(result, SimulationResult)
        assert result.led_lit
        assert circuit.validate() == []

    def test_button_controls_led(self):
        circuit = Circuit()
        circuit.add_component("5v")
        circuit.add_component("button")
        circuit.add_component("resistor")
        circuit.add_component("led")
        circuit.add_component("gnd")
        circuit.add_wire("VCC1", "out", "BTN1", "in")
        circuit.add_wire("BTN1", "out", "R1", "term-a")
        circuit.add_wire("R1", "term-b", "LED1", "anode")
        circuit.add_wire("LED1", "cathode", "GND1", "in")

        assert not circuit.resolve().led_lit
        circuit.configure("BTN1", pressed=True)
        assert circuit.resolve().led_lit

    def test_configure_rejects_bad_value(self):
        circuit = Circuit()
        circuit.add_component("potentiometer")
        with pytest.raises(ValueError):
            circuit.configure("POT1", position=2)

    def test_set_pin(self):
        circuit = Circuit()
        circuit.add_component("arduino-uno")
        circuit.add_component("resistor")
        circuit.add_component("led")
        circuit.add_wire("UNO1", "d13", "R1", "term-a")
        circuit.add_wire("R1", "term-b", "LED1", "anode")
        circuit.add_wire("LED1", "cathode", "UNO1", "gnd")
        circuit.set_pin("UNO1", "d13", "HIGH")
        assert circuit.resolve().led_lit

    def test_validate_reports_messages(self):
        circuit = Circuit()
        circuit.add_component("led")
        messages = circuit.validate()
        assert any("ground" in m for m in messages)


class TestPersistence:
    def test_save_and_load(self, tmp_path):
        circuit = Circuit()
        _blink(circuit)
        path = tmp_path / "blink.json"
        circuit.save(path)

        loaded = Circuit.load(path)
        assert set(loaded.components) == {"VCC1", "R1", "LED1", "GND1"}
        assert loaded.resolve().led_lit
        assert loaded.add_component("led") == "LED2"

    def test_load_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"wires": []}))
        with pytest.raises(ValueError):
            Circuit.load(path)

    def test_result_to_csv(self, tmp_path):
        circuit = Circuit()
        _blink(circuit)
        path = tmp_path / "result.csv"
        circuit.result_to_csv(path)
        assert "Pin Readings" in path.read_text(encoding="utf-8")

    def test_project_round_trip_in_memory(self):
        store = MemoryProjectStore()
        circuit = Circuit()
        _blink(circuit)
        circuit.save_project("Blink", store)

        reopened = Circuit.open_project("Blink", store)
        assert store.list_projects() == ["Blink"]
        assert reopened.resolve().led_lit
        assert reopened.model is not circuit.model

    def test_project_in_directory(self, tmp_path):
        store = JsonDirectoryProjectStore(tmp_path)
        circuit = Circuit()
        _blink(circuit)
        circuit.save_project("My Blink", store)

        assert (tmp_path / "my_blink.json").exists()
        assert set(Circuit.open_project("My Blink", store).components) == {"VCC1", "R1", "LED1", "GND1"}

    def test_open_missing_project(self):
        with pytest.raises(ValueError, match="No project named"):
            Circuit.open_project("nothing", MemoryProjectStore())
