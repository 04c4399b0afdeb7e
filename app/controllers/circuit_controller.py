"""
CircuitController - Orchestrates component, wire and pin-mode operations.

This module contains no Qt dependencies. It manages the CircuitModel
and notifies views of changes through an observer pattern.
"""

import logging
from typing import Any, Callable, Optional

from models.circuit import CircuitModel
from models.component import ComponentData, validate_config_value
from models.registry import PinMode, TerminalMode, get_spec
from models.wire import WireData

logger = logging.getLogger(__name__)


class CircuitController:
    """
    Controller for circuit component and wire operations.

    Manages the CircuitModel and notifies registered observers when
    the model changes. Views register callbacks to stay in sync.

    Observer events:
        component_added (ComponentData) - A new component was added
        component_removed (str) - A component was removed (by ID)
        component_rotated (ComponentData) - A component was rotated
        component_moved (ComponentData) - A component was moved
        component_config_changed (ComponentData) - Resistance, button or knob changed
        wire_added (WireData) - A new wire was added
        wire_removed (WireData) - A wire was removed
        pin_mode_changed (tuple[str, str, PinMode]) - A board pin was set
        circuit_cleared (None) - The entire circuit was cleared
        model_loaded (None) - Circuit loaded from file
        simulation_started (None) - Run was pressed
        simulation_completed (SimulationResult) - A resolve pass finished while running
        simulation_stopped (None) - Stop or Reset was pressed
    """

    def __init__(self, model: Optional[CircuitModel] = None):
        self.model = model or CircuitModel()
        self._observers: list[Callable[[str, Any], None]] = []

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Register a callback for model change events."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Unregister a previously registered callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, event: str, data: Any) -> None:
        """Notify all observers of a model change."""
        for observer in self._observers:
            try:
                observer(event, data)
            except (TypeError, AttributeError, RuntimeError) as e:
                logger.error("Error notifying observer: %s", e)

    # --- Component operations ---

    def _next_component_id(self, prefix: str) -> str:
        count = self.model.component_counter.get(prefix, 0) + 1
        while f"{prefix}{count}" in self.model.components:
            count += 1
        self.model.component_counter[prefix] = count
        return f"{prefix}{count}"

    def add_component(self, component_type: str,
                      position: tuple[float, float] = (0.0, 0.0),
                      config: Optional[dict] = None) -> ComponentData:
        """
        Create and add a new component to the circuit.

        Generates a unique ID from the registry prefix (LED1, R1, UNO1, ...).

        Raises:
            ValueError: If the type is not registered or a config value is invalid.

        Returns:
            The newly created ComponentData.
        """
        spec = get_spec(component_type)
        if spec is None:
            raise ValueError(f"Unknown component type: {component_type!r}")
        for key, value in (config or {}).items():
            validate_config_value(key, value)

        component = ComponentData(
            component_id=self._next_component_id(spec.id_prefix),
            component_type=component_type,
            position=position,
            config=dict(config or {}),
        )
        self.model.add_component(component)
        self._notify('component_added', component)
        return component

    def remove_component(self, component_id: str) -> None:
        """
        Remove a component and all connected wires.

        Wires are removed in reverse index order to preserve indices.
        """
        if component_id not in self.model.components:
            return
        wire_indices = self.model.remove_component(component_id)
        for idx in sorted(wire_indices, reverse=True):
            wire = self.model.remove_wire(idx)
            self._notify('wire_removed', wire)
        self._notify('component_removed', component_id)

    def rotate_component(self, component_id: str, clockwise: bool = True) -> None:
        """Rotate a component 90 degrees."""
        component = self.model.components.get(component_id)
        if component is None:
            return
        delta = 90 if clockwise else -90
        component.rotation = (component.rotation + delta) % 360
        self._notify('component_rotated', component)

    def move_component(self, component_id: str,
                       position: tuple[float, float]) -> None:
        """Move a component to a new position."""
        component = self.model.components.get(component_id)
        if component is None:
            return
        component.position = position
        self._notify('component_moved', component)

    def update_component_config(self, component_id: str, key: str, value) -> None:
        """
        Change one configuration value (resistance, pressed, position, ...).

        Raises:
            ValueError: If the component does not exist or the value is invalid.
        """
        component = self.model.components.get(component_id)
        if component is None:
            raise ValueError(f"No component with id {component_id!r}")
        component.set_config(key, value)
        self._notify('component_config_changed', component)

    def set_resistance(self, component_id: str, ohms: float) -> None:
        self.update_component_config(component_id, "resistance", ohms)

    def set_button_pressed(self, component_id: str, pressed: bool) -> None:
        self.update_component_config(component_id, "pressed", pressed)

    def set_potentiometer_position(self, component_id: str, position: float) -> None:
        self.update_component_config(component_id, "position", position)

    # --- Wire operations ---

    def add_wire(self, start_comp_id: Optional[str], start_term: Optional[str],
                 end_comp_id: Optional[str] = None, end_term: Optional[str] = None) -> WireData:
        """
        Create and add a new wire connection.

        Either end may be left unset for a wire still being drawn; the
        resolver ignores it until both ends are attached.

        Returns:
            The newly created WireData.
        """
        taken = {w.wire_id for w in self.model.wires}
        self.model.wire_counter += 1
        while f"W{self.model.wire_counter}" in taken:
            self.model.wire_counter += 1
        wire = WireData(
            wire_id=f"W{self.model.wire_counter}",
            start_component_id=start_comp_id,
            start_terminal=start_term,
            end_component_id=end_comp_id,
            end_terminal=end_term,
        )
        self.model.add_wire(wire)
        self._notify('wire_added', wire)
        return wire

    def remove_wire(self, wire_index: int) -> None:
        """Remove a wire by index."""
        wire = self.model.remove_wire(wire_index)
        if wire is not None:
            self._notify('wire_removed', wire)

    def remove_wire_by_id(self, wire_id: str) -> None:
        index = self.model.find_wire_index(wire_id)
        if index is not None:
            self.remove_wire(index)

    # --- Pin modes ---

    def set_pin_mode(self, board_id: str, pin_id: str, mode) -> None:
        """
        Set the mock logic state of a microcontroller pin.

        Raises:
            ValueError: If the board or pin does not exist, the mode is not
                INPUT/HIGH/LOW, or an input-only pin is set to drive.
        """
        component = self.model.components.get(board_id)
        spec = component.spec if component else None
        if spec is None or spec.board is None:
            raise ValueError(f"{board_id!r} is not a microcontroller board")
        pin = next((p for p in spec.logic_pins() if p.id == pin_id), None)
        if pin is None:
            raise ValueError(f"{board_id} has no configurable pin {pin_id!r}")
        try:
            mode = PinMode(mode)
        except ValueError:
            raise ValueError(f"Invalid pin mode {mode!r}; expected INPUT, HIGH or LOW") from None
        if mode != PinMode.INPUT and pin.mode == TerminalMode.INPUT:
            raise ValueError(f"{board_id} pin {pin.name} is input-only and cannot be set {mode.value}")

        self.model.set_pin_mode(board_id, pin_id, mode)
        self._notify('pin_mode_changed', (board_id, pin_id, mode))

    # --- Circuit operations ---

    def clear_circuit(self) -> None:
        """Clear the entire circuit."""
        self.model.clear()
        self._notify('circuit_cleared', None)

    def load_model(self, model: CircuitModel) -> None:
        """Replace the current model contents with a loaded one."""
        self.model.clear()
        self.model.components.update(model.components)
        self.model.wires.extend(model.wires)
        self.model.pin_modes.update(model.pin_modes)
        self.model.component_counter.update(model.component_counter)
        self.model.wire_counter = model.wire_counter
        self._notify('model_loaded', None)

    @property
    def component_count(self) -> int:
        return len(self.model.components)

    @property
    def wire_count(self) -> int:
        return len(self.model.wires)
