"""
High-level scripting API for programmatic circuit manipulation.

No GUI or PyQt6 dependency. Wraps the existing model/controller/simulation
layers behind a user-friendly interface.
"""

import json
from pathlib import Path
from typing import Optional, Union

from controllers.circuit_controller import CircuitController
from controllers.file_controller import validate_circuit_data
from controllers.project_store import JsonDirectoryProjectStore, ProjectStore
from controllers.simulation_controller import SimulationController
from models.circuit import CircuitModel
from models.component import ComponentData
from models.registry import COMPONENT_TYPES
from simulation.csv_exporter import export_result, write_csv
from simulation.result import SimulationResult
from simulation.settings import SimulationSettings


class Circuit:
    """A scriptable circuit that can be built, resolved, and saved programmatically.

    Wraps CircuitModel, CircuitController, and SimulationController to provide
    a clean API for headless circuit workflows.

    Args:
        model: An existing CircuitModel to wrap. If None, creates an empty circuit.
        settings: Simulation thresholds; defaults apply if None.
    """

    def __init__(self, model: Optional[CircuitModel] = None,
                 settings: Optional[SimulationSettings] = None):
        self._model = model or CircuitModel()
        self._controller = CircuitController(self._model)
        self._sim = SimulationController(self._model, self._controller, settings)

    # --- Factory methods ---

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Circuit":
        """Load a circuit from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file is not valid JSON.
            ValueError: If the JSON structure is invalid.
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        validate_circuit_data(data)
        return cls(CircuitModel.from_dict(data))

    @classmethod
    def open_project(cls, name: str, store: Optional[ProjectStore] = None) -> "Circuit":
        """Load a named project, by default from ~/.egroots/projects.

        Raises:
            ValueError: If the project does not exist or is invalid.
        """
        store = store or JsonDirectoryProjectStore()
        return cls(store.load(name))

    # --- Component operations ---

    def add_component(
        self,
        component_type: str,
        position: tuple[float, float] = (0.0, 0.0),
        rotation: int = 0,
        **config,
    ) -> str:
        """Add a component to the circuit.

        Args:
            component_type: A registry id such as "led", "resistor", "5v",
                "gnd" or "arduino-uno". See ``Circuit.component_types``.
            position: (x, y) position on the canvas.
            rotation: Rotation in degrees (0, 90, 180, 270).
            **config: Per-instance settings, e.g. ``resistance=330`` or
                ``pressed=True``.

        Returns:
            The auto-generated component ID (e.g. "R1", "LED1", "UNO1").

        Raises:
            ValueError: If the component_type is not recognized or a config
                value is out of range.
        """
        if component_type not in COMPONENT_TYPES:
            raise ValueError(f"Unknown component type '{component_type}'. Valid types: {', '.join(COMPONENT_TYPES)}")

        comp = self._controller.add_component(component_type, position, config)
        if rotation:
            comp.rotation = rotation % 360
        return comp.component_id

    def remove_component(self, component_id: str) -> None:
        """Remove a component and its connected wires."""
        self._controller.remove_component(component_id)

    def configure(self, component_id: str, **config) -> None:
        """Update one or more config values, e.g. ``configure("BTN1", pressed=True)``."""
        for key, value in config.items():
            self._controller.update_component_config(component_id, key, value)

    # --- Wire operations ---

    def add_wire(self, start_component: str, start_terminal: str,
                 end_component: str, end_terminal: str) -> str:
        """Connect two component terminals with a wire.

        Args:
            start_component: ID of the first component (e.g. "VCC1").
            start_terminal: Terminal id on the first component (e.g. "out").
            end_component: ID of the second component (e.g. "R1").
            end_terminal: Terminal id on the second component (e.g. "term-a").

        Returns:
            The new wire's ID.
        """
        return self._controller.add_wire(start_component, start_terminal, end_component, end_terminal).wire_id

    def remove_wire(self, wire_id: str) -> None:
        self._controller.remove_wire_by_id(wire_id)

    # --- Pin modes ---

    def set_pin(self, board_id: str, pin_id: str, mode: str) -> None:
        """Set a microcontroller pin to "INPUT", "HIGH" or "LOW"."""
        self._controller.set_pin_mode(board_id, pin_id, mode)

    # --- Resolve ---

    def resolve(self) -> SimulationResult:
        """Resolve the circuit.

        Returns:
            A SimulationResult. Wiring problems are reported in its
            errors and warnings, never raised.
        """
        return self._sim.resolve()

    def validate(self) -> list[str]:
        """Error messages for the circuit, empty if it is valid."""
        return [issue.message for issue in self._sim.resolve().errors]

    # --- Persistence ---

    def save(self, path: Union[str, Path]) -> None:
        """Save the circuit to a JSON file."""
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self._model.to_dict(), f, indent=2)

    def save_project(self, name: str, store: Optional[ProjectStore] = None) -> None:
        """Store the circuit as a named project, by default under ~/.egroots/projects."""
        (store or JsonDirectoryProjectStore()).save(name, self._model)

    def result_to_csv(self, path: Union[str, Path]) -> None:
        """Resolve and write nets, pins and issues to a CSV file."""
        write_csv(export_result(self.resolve()), path)

    # --- Properties ---

    @property
    def components(self) -> dict[str, ComponentData]:
        """All components in the circuit, keyed by ID."""
        return self._model.components

    @property
    def wires(self) -> list:
        """All wires in the circuit."""
        return self._model.wires

    @property
    def model(self) -> CircuitModel:
        """Direct access to the underlying CircuitModel."""
        return self._model

    @property
    def component_types(self) -> list[str]:
        """List of all supported component types."""
        return list(COMPONENT_TYPES)
