"""Tests for FileController and circuit file validation."""

import json

import pytest
from controllers.circuit_controller import CircuitController
from controllers.file_controller import FileController, validate_circuit_data
from models.circuit import CircuitModel
from models.registry import PinMode


def _valid_data():
    return {
        "components": [
            {"id": "VCC1", "type": "5v", "pos": {"x": 0, "y": 0}},
            {"id": "UNO1", "type": "arduino-uno", "pos": {"x": 100, "y": 0}, "config": {}},
        ],
        "wires": [
            {"id": "W1", "start_comp": "VCC1", "start_term": "out", "end_comp": "UNO1", "end_term": "vin"},
            {"id": "W2", "start_comp": "UNO1", "start_term": "d7", "end_comp": None, "end_term": None},
        ],
        "pin_modes": {"UNO1": {"d13": "HIGH"}},
    }


@pytest.fixture
def file_ctrl(tmp_path):
    model = CircuitModel()
    circuit_ctrl = CircuitController(model)
    ctrl = FileController(
        model,
        circuit_ctrl,
        session_file=tmp_path / "session.txt",
        autosave_file=tmp_path / "autosave.json",
    )
    return ctrl, circuit_ctrl


class TestValidateCircuitData:
    def test_valid(self):
        validate_circuit_data(_valid_data())

    def test_unknown_type_allowed(self):
        data = _valid_data()
        data["components"][0]["type"] = "hologram"
        validate_circuit_data(data)

    @pytest.mark.parametrize("mutate, message", [
        (lambda d: d.pop("components"), "components"),
        (lambda d: d.__setitem__("wires", {}), "wires"),
        (lambda d: d["components"][0].pop("pos"), "missing required field 'pos'"),
        (lambda d: d["components"][0].__setitem__("pos", {"x": "a", "y": 0}), "numeric"),
        (lambda d: d["components"][1].__setitem__("id", "VCC1"), "Duplicate"),
        (lambda d: d["components"][1].__setitem__("config", [1]), "config"),
        (lambda d: d["wires"][0].pop("id"), "Wire #1"),
        (lambda d: d["wires"][0].__setitem__("end_comp", "R7"), "unknown component 'R7'"),
        (lambda d: d.__setitem__("pin_modes", []), "pin_modes"),
        (lambda d: d["pin_modes"]["UNO1"].__setitem__("d13", "PWM"), "invalid mode"),
        (lambda d: d["components"][0].__setitem__("id", 5), "field 'id' must be a non-empty string"),
        (lambda d: d["components"][0].__setitem__("type", ["resistor"]), "field 'type'"),
        (lambda d: d["wires"][0].__setitem__("start_term", 0), "start_term"),
        (lambda d: d["wires"][0].__setitem__("end_comp", ["UNO1"]), "end_comp"),
        (lambda d: d["wires"][0].__setitem__("id", 1), "id must be a string"),
        (lambda d: d.__setitem__("counters", []), "counters"),
        (lambda d: d.__setitem__("counters", {"R": "two"}), "counters"),
        (lambda d: d.__setitem__("wire_counter", "3"), "wire_counter"),
        (lambda d: d["pin_modes"]["UNO1"].__setitem__("d13", ["HIGH"]), "invalid mode"),
    ])
    def test_invalid(self, mutate, message):
        data = _valid_data()
        mutate(data)
        with pytest.raises(ValueError, match=message):
            validate_circuit_data(data)

    def test_not_a_dict(self):
        with pytest.raises(ValueError):
            validate_circuit_data([])


class TestSaveLoad:
    def test_round_trip(self, file_ctrl, tmp_path):
        ctrl, circuit_ctrl = file_ctrl
        circuit_ctrl.add_component("arduino-uno")
        circuit_ctrl.add_component("led")
        circuit_ctrl.add_wire("UNO1", "d13", "LED1", "anode")
        circuit_ctrl.set_pin_mode("UNO1", "d13", "HIGH")
        path = tmp_path / "blink.json"

        ctrl.save_circuit(path)
        assert ctrl.current_file == path

        ctrl.new_circuit()
        assert ctrl.model.components == {}
        assert ctrl.current_file is None

        ctrl.load_circuit(path)
        assert set(ctrl.model.components) == {"UNO1", "LED1"}
        assert ctrl.model.get_pin_mode("UNO1", "d13") == PinMode.HIGH
        assert circuit_ctrl.add_component("led").component_id == "LED2"

    def test_load_keeps_model_reference(self, file_ctrl, tmp_path):
        ctrl, circuit_ctrl = file_ctrl
        path = tmp_path / "c.json"
        path.write_text(json.dumps(_valid_data()), encoding="utf-8")
        model = ctrl.model
        ctrl.load_circuit(path)
        assert ctrl.model is model
        assert circuit_ctrl.model is model

    def test_load_notifies(self, file_ctrl, tmp_path):
        ctrl, circuit_ctrl = file_ctrl
        events = []
        circuit_ctrl.add_observer(lambda e, d: events.append(e))
        path = tmp_path / "c.json"
        path.write_text(json.dumps(_valid_data()), encoding="utf-8")
        ctrl.load_circuit(path)
        assert events == ["model_loaded"]

    def test_load_invalid_leaves_model(self, file_ctrl, tmp_path):
        ctrl, circuit_ctrl = file_ctrl
        circuit_ctrl.add_component("led")
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"components": "nope", "wires": []}), encoding="utf-8")
        with pytest.raises(ValueError):
            ctrl.load_circuit(path)
        assert "LED1" in ctrl.model.components

    def test_load_malformed_json(self, file_ctrl, tmp_path):
        ctrl, _ = file_ctrl
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            ctrl.load_circuit(path)


class TestSession:
    def test_window_title(self, file_ctrl, tmp_path):
        ctrl, _ = file_ctrl
        assert ctrl.get_window_title() == "E-GROOTS Simulator"
        ctrl.save_circuit(tmp_path / "lab1.json")
        assert ctrl.get_window_title() == "E-GROOTS Simulator - lab1.json"
        assert ctrl.has_file()

    def test_last_session(self, file_ctrl, tmp_path):
        ctrl, _ = file_ctrl
        assert ctrl.load_last_session() is None
        path = tmp_path / "lab1.json"
        ctrl.save_circuit(path)
        assert ctrl.load_last_session() == path

    def test_last_session_file_deleted(self, file_ctrl, tmp_path):
        ctrl, _ = file_ctrl
        path = tmp_path / "lab1.json"
        ctrl.save_circuit(path)
        path.unlink()
        assert ctrl.load_last_session() is None


class TestAutoSave:
    def test_auto_save_and_recover(self, file_ctrl):
        ctrl, circuit_ctrl = file_ctrl
        circuit_ctrl.add_component("buzzer")
        ctrl.auto_save()
        assert ctrl.has_auto_save()
        assert ctrl.current_file is None

        ctrl.new_circuit()
        assert ctrl.load_auto_save() == ""
        assert "BZ1" in ctrl.model.components

    def test_auto_save_remembers_source(self, file_ctrl, tmp_path):
        ctrl, circuit_ctrl = file_ctrl
        circuit_ctrl.add_component("led")
        path = tmp_path / "lab.json"
        ctrl.save_circuit(path)
        ctrl.auto_save()
        ctrl.new_circuit()
        assert ctrl.load_auto_save() == str(path)
        assert ctrl.current_file == path

    def test_corrupt_auto_save(self, file_ctrl, tmp_path):
        ctrl, _ = file_ctrl
        (tmp_path / "autosave.json").write_text("garbage", encoding="utf-8")
        assert ctrl.load_auto_save() is None

    def test_clear_auto_save(self, file_ctrl):
        ctrl, _ = file_ctrl
        ctrl.auto_save()
        ctrl.clear_auto_save()
        assert not ctrl.has_auto_save()
        ctrl.clear_auto_save()
