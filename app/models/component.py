"""
ComponentData - Pure Python data model for placed components.

This module contains no Qt dependencies. All positions are represented as
tuples (x, y). Terminal metadata comes from the component registry; a
ComponentData only carries what differs per instance (id, placement and
configuration such as resistor value or button state).
"""

import copy
import math
from dataclasses import dataclass, field
from typing import Optional

from .registry import COMPONENT_REGISTRY, ComponentSpec, TerminalDef

# Config keys that must hold a strictly positive number
_POSITIVE_CONFIG_KEYS = ("resistance",)


def default_config(component_type: str) -> dict:
    """Return a fresh copy of the registry default config for a type."""
    spec = COMPONENT_REGISTRY.get(component_type)
    if spec is None:
        return {}
    return copy.deepcopy(spec.default_config)


def validate_config_value(key: str, value) -> None:
    """
    Check a single per-instance configuration value.

    Raises:
        ValueError: If the value is out of range for the key.
    """
    if key in _POSITIVE_CONFIG_KEYS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"'{key}' must be a number, got {value!r}.")
        if value <= 0:
            raise ValueError(f"'{key}' must be greater than zero, got {value}.")
    elif key == "position":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"'position' must be a number, got {value!r}.")
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"'position' must be between 0 and 1, got {value}.")
    elif key == "pressed":
        if not isinstance(value, bool):
            raise ValueError(f"'pressed' must be true or false, got {value!r}.")


@dataclass
class ComponentData:
    """
    Pure Python data class representing a component placed on the canvas.

    The registry entry is looked up by ``component_type``; instances of
    unknown types can still be stored and serialized, the resolver simply
    skips them.
    """

    component_id: str
    component_type: str
    position: tuple[float, float] = (0.0, 0.0)  # (x, y) in canvas coordinates
    rotation: int = 0  # degrees: 0, 90, 180, 270
    config: dict = field(default_factory=dict)

    def __post_init__(self):
        """Fill in registry defaults for keys the caller did not set."""
        merged = default_config(self.component_type)
        merged.update(self.config)
        self.config = merged

    @property
    def spec(self) -> Optional[ComponentSpec]:
        return COMPONENT_REGISTRY.get(self.component_type)

    def get_terminals(self) -> list[TerminalDef]:
        """Return the registry terminals for this component, empty if unknown."""
        spec = self.spec
        return list(spec.terminals) if spec else []

    def get_terminal_ids(self) -> list[str]:
        return [t.id for t in self.get_terminals()]

    def has_terminal(self, terminal_id: str) -> bool:
        spec = self.spec
        return spec is not None and spec.terminal(terminal_id) is not None

    def get_terminal_positions(self) -> dict[str, tuple[float, float]]:
        """
        Return terminal positions in world coordinates (after rotation and translation).

        Returns:
            Dict mapping terminal id to (x, y) in canvas coordinates.
        """
        rad = math.radians(self.rotation)
        cos_a = math.cos(rad)
        sin_a = math.sin(rad)

        positions = {}
        for term in self.get_terminals():
            tx, ty = term.offset
            new_x = tx * cos_a - ty * sin_a
            new_y = tx * sin_a + ty * cos_a
            positions[term.id] = (self.position[0] + new_x, self.position[1] + new_y)
        return positions

    def get_resistance(self) -> float:
        """Total resistance in ohms for resistive parts, 0.0 otherwise."""
        value = self.config.get("resistance", 0.0)
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    def set_config(self, key: str, value) -> None:
        """Validate and store one configuration value."""
        validate_config_value(key, value)
        self.config[key] = value

    def to_dict(self) -> dict:
        """Serialize component to dictionary."""
        return {
            "id": self.component_id,
            "type": self.component_type,
            "pos": {"x": self.position[0], "y": self.position[1]},
            "rotation": self.rotation,
            "config": copy.deepcopy(self.config),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ComponentData":
        """Deserialize component from dictionary."""
        return cls(
            component_id=data["id"],
            component_type=data["type"],
            position=(data["pos"]["x"], data["pos"]["y"]),
            rotation=data.get("rotation", 0),
            config=dict(data.get("config") or {}),
        )

    def __repr__(self) -> str:
        return (
            f"ComponentData(id={self.component_id!r}, type={self.component_type!r}, "
            f"pos={self.position}, rot={self.rotation})"
        )
