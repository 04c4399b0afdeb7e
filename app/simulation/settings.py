"""Simulation settings - thresholds used by the resolver, with JSON persistence."""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class SimulationSettings:
    """Tunable thresholds of the educational resolver.

    These are teaching approximations, not device models.
    """

    # Minimum anode-cathode difference for an LED to light (volts)
    led_forward_voltage: float = 1.8
    # Estimated LED current above which the series resistor is flagged (amps)
    led_max_current: float = 0.02
    buzzer_min_voltage: float = 3.0
    servo_min_voltage: float = 4.5
    sensor_min_voltage: float = 3.0
    # Fixed voltages closer than this are the same source value
    voltage_tolerance: float = 1e-6
    # Resistive links are never treated as lower than this (ohms)
    min_resistance: float = 1.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationSettings":
        """Build settings from a dict, ignoring unknown keys.

        Raises:
            ValueError: If a known key holds a non-numeric or negative value.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Setting '{key}' must be a number, got {value!r}.")
            if value < 0:
                raise ValueError(f"Setting '{key}' must not be negative, got {value}.")
            values[key] = float(value)
        return cls(**values)


DEFAULT_SETTINGS = SimulationSettings()


class SettingsStore:
    """Loads and saves SimulationSettings as JSON in a user-writable file."""

    def __init__(self, settings_file: Optional[Path] = None):
        if settings_file is None:
            settings_file = self._default_settings_path()
        self._settings_file = Path(settings_file)

    @staticmethod
    def _default_settings_path() -> Path:
        """Return the default path for the user settings file."""
        return Path.home() / ".egroots" / "simulation_settings.json"

    @property
    def path(self) -> Path:
        return self._settings_file

    def load(self) -> SimulationSettings:
        """Return saved settings, or defaults if the file is missing or unreadable."""
        if not self._settings_file.exists():
            return DEFAULT_SETTINGS
        try:
            data = json.loads(self._settings_file.read_text(encoding="utf-8"))
            return SimulationSettings.from_dict(data.get("settings", {}))
        except (json.JSONDecodeError, OSError, AttributeError, ValueError) as e:
            logger.error("Failed to load simulation settings from %s: %s", self._settings_file, e)
            return DEFAULT_SETTINGS

    def save(self, settings: SimulationSettings) -> None:
        self._settings_file.parent.mkdir(parents=True, exist_ok=True)
        data = {"version": _SCHEMA_VERSION, "settings": settings.to_dict()}
        self._settings_file.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def reset(self) -> None:
        """Delete the saved file so defaults apply again."""
        if self._settings_file.exists():
            self._settings_file.unlink()
