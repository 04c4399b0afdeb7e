"""Tests for SimulationSettings and SettingsStore."""

import json

import pytest
from simulation.settings import DEFAULT_SETTINGS, SettingsStore, SimulationSettings


class TestSimulationSettings:
    def test_defaults(self):
        settings = SimulationSettings()
        assert settings.led_forward_voltage == 1.8
        assert settings.led_max_current == 0.02
        assert settings.min_resistance == 1.0

    def test_round_trip(self):
        settings = SimulationSettings(buzzer_min_voltage=2.5)
        assert SimulationSettings.from_dict(settings.to_dict()) == settings

    def test_unknown_keys_ignored(self):
        settings = SimulationSettings.from_dict({"servo_min_voltage": 4.8, "theme": "dark"})
        assert settings.servo_min_voltage == 4.8

    def test_rejects_negative(self):
        with pytest.raises(ValueError, match="negative"):
            SimulationSettings.from_dict({"led_forward_voltage": -1})

    def test_rejects_non_numeric(self):
        with pytest.raises(ValueError):
            SimulationSettings.from_dict({"led_max_current": "lots"})
        with pytest.raises(ValueError):
            SimulationSettings.from_dict({"led_max_current": True})

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_SETTINGS.led_forward_voltage = 2.0


class TestSettingsStore:
    def test_missing_file_gives_defaults(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        assert store.load() == DEFAULT_SETTINGS

    def test_save_and_load(self, tmp_path):
        store = SettingsStore(tmp_path / "nested" / "settings.json")
        store.save(SimulationSettings(sensor_min_voltage=2.7))
        assert store.load().sensor_min_voltage == 2.7

        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert data["settings"]["sensor_min_voltage"] == 2.7

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert SettingsStore(path).load() == DEFAULT_SETTINGS

    def test_invalid_value_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"settings": {"min_resistance": -5}}), encoding="utf-8")
        assert SettingsStore(path).load() == DEFAULT_SETTINGS

    def test_reset_removes_file(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        store.save(SimulationSettings(min_resistance=2.0))
        store.reset()
        assert not store.path.exists()
        assert store.load() == DEFAULT_SETTINGS
