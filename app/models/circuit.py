"""
CircuitModel - Central data store for circuit state.

This module contains no Qt dependencies. It holds the editor's snapshot
(placed components, wires and the per-board pin-mode map). Nets are not
stored here; the resolver recomputes them from this snapshot every run.
"""

from dataclasses import dataclass, field
from typing import Optional

from .component import ComponentData
from .registry import PinMode
from .wire import WireData

PinModeMap = dict[str, dict[str, PinMode]]


@dataclass
class CircuitModel:
    """
    Central data store holding all circuit state.

    Manages components, wires and the mock pin modes learners assign to
    microcontroller pins in the logic panel.
    """

    components: dict[str, ComponentData] = field(default_factory=dict)
    wires: list[WireData] = field(default_factory=list)
    pin_modes: PinModeMap = field(default_factory=dict)
    component_counter: dict[str, int] = field(default_factory=dict)
    wire_counter: int = 0

    # --- Component operations ---

    def add_component(self, component: ComponentData) -> None:
        """Add a component to the circuit."""
        self.components[component.component_id] = component

    def remove_component(self, component_id: str) -> list[int]:
        """
        Remove a component and return indices of connected wires to remove.

        The caller is responsible for calling remove_wire() for each returned
        index (in reverse order to avoid index shifts). Pin modes stored for
        the component are dropped with it.
        """
        if component_id not in self.components:
            return []

        wire_indices = [i for i, wire in enumerate(self.wires) if wire.connects_component(component_id)]

        del self.components[component_id]
        self.pin_modes.pop(component_id, None)
        return wire_indices

    # --- Wire operations ---

    def add_wire(self, wire: WireData) -> None:
        """Add a wire."""
        self.wires.append(wire)

    def remove_wire(self, wire_index: int) -> Optional[WireData]:
        """Remove a wire by index, returning it (None if out of range)."""
        if not (0 <= wire_index < len(self.wires)):
            return None
        return self.wires.pop(wire_index)

    def find_wire_index(self, wire_id: str) -> Optional[int]:
        for i, wire in enumerate(self.wires):
            if wire.wire_id == wire_id:
                return i
        return None

    # --- Pin modes ---

    def get_pin_mode(self, board_id: str, pin_id: str) -> PinMode:
        """Mode of a board pin; pins never configured are INPUT."""
        return self.pin_modes.get(board_id, {}).get(pin_id, PinMode.INPUT)

    def set_pin_mode(self, board_id: str, pin_id: str, mode: PinMode) -> None:
        self.pin_modes.setdefault(board_id, {})[pin_id] = PinMode(mode)

    # --- Circuit operations ---

    def clear(self) -> None:
        """Clear all circuit data."""
        self.components.clear()
        self.wires.clear()
        self.pin_modes.clear()
        self.component_counter.clear()
        self.wire_counter = 0

    # --- Serialization ---

    def to_dict(self) -> dict:
        """Serialize circuit to dictionary."""
        data = {
            "components": [c.to_dict() for c in self.components.values()],
            "wires": [w.to_dict() for w in self.wires],
            "counters": self.component_counter.copy(),
        }
        pin_modes = {
            board_id: {pin: mode.value for pin, mode in sorted(modes.items())}
            for board_id, modes in sorted(self.pin_modes.items())
            if modes
        }
        if pin_modes:
            data["pin_modes"] = pin_modes
        if self.wire_counter:
            data["wire_counter"] = self.wire_counter
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CircuitModel":
        """Deserialize circuit from dictionary."""
        model = cls()
        model.component_counter = data.get("counters", {}).copy()
        model.wire_counter = data.get("wire_counter", 0)

        for comp_data in data.get("components", []):
            component = ComponentData.from_dict(comp_data)
            model.components[component.component_id] = component

        for wire_data in data.get("wires", []):
            model.wires.append(WireData.from_dict(wire_data))

        for board_id, modes in data.get("pin_modes", {}).items():
            for pin_id, mode in modes.items():
                model.set_pin_mode(board_id, pin_id, PinMode(mode))

        return model
