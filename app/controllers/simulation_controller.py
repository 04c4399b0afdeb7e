"""
SimulationController - Owns the Run/Stop state and the last resolve result.

This module contains no Qt dependencies. The resolver itself is stateless;
this controller decides when to call it and which result the panels show.
"""

import logging
from typing import Any, Optional

from models.circuit import CircuitModel
from simulation.resolver import resolve
from simulation.result import SimulationResult
from simulation.settings import DEFAULT_SETTINGS, SimulationSettings

logger = logging.getLogger(__name__)

# Circuit events that invalidate the last result
MODEL_EVENTS = frozenset({
    "component_added",
    "component_removed",
    "component_moved",
    "component_rotated",
    "component_config_changed",
    "wire_added",
    "wire_removed",
    "pin_mode_changed",
    "circuit_cleared",
    "model_loaded",
})


class SimulationController:
    """
    Controller for the simulation Run/Stop cycle.

    While running, every model change triggers a fresh resolve and a
    ``simulation_completed`` notification through the circuit controller.
    While stopped, ``displayed_result`` is None and panels show idle state.
    """

    def __init__(self, model: Optional[CircuitModel] = None, circuit_ctrl=None,
                 settings: Optional[SimulationSettings] = None):
        if model is None and circuit_ctrl is not None:
            model = circuit_ctrl.model
        self.model = model or CircuitModel()
        self.circuit_ctrl = circuit_ctrl
        self.settings = settings or DEFAULT_SETTINGS
        self._running = False
        self._last_result: Optional[SimulationResult] = None
        if circuit_ctrl is not None:
            circuit_ctrl.add_observer(self._on_model_event)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_result(self) -> Optional[SimulationResult]:
        """Most recent result, kept after Stop until Reset."""
        return self._last_result

    @property
    def displayed_result(self) -> Optional[SimulationResult]:
        """The result panels should render, only while running."""
        return self._last_result if self._running else None

    @property
    def led_state(self) -> bool:
        result = self.displayed_result
        return result is not None and result.led_lit

    @property
    def error_message(self) -> Optional[str]:
        result = self.displayed_result
        return result.primary_message if result is not None else None

    def _notify(self, event: str, data: Any) -> None:
        if self.circuit_ctrl:
            self.circuit_ctrl._notify(event, data)

    def resolve(self) -> SimulationResult:
        """Resolve the current model without changing the running state."""
        result = resolve(self.model.components, self.model.wires, self.model.pin_modes, self.settings)
        self._last_result = result
        return result

    def run(self) -> SimulationResult:
        """Start the simulation and resolve immediately."""
        self._running = True
        self._notify("simulation_started", None)
        result = self.resolve()
        logger.info(
            "Simulation running: %d components, %d wires, LED %s",
            len(self.model.components), len(self.model.wires),
            "ON" if result.led_lit else "OFF",
        )
        self._notify("simulation_completed", result)
        return result

    def stop(self) -> None:
        """Stop the simulation; the last result is kept but no longer displayed."""
        if not self._running:
            return
        self._running = False
        logger.info("Simulation stopped")
        self._notify("simulation_stopped", None)

    def reset(self) -> None:
        """Stop and forget the last result."""
        was_running = self._running
        self._running = False
        self._last_result = None
        if was_running:
            self._notify("simulation_stopped", None)

    def set_settings(self, settings: SimulationSettings) -> None:
        self.settings = settings
        if self._running:
            self._notify("simulation_completed", self.resolve())

    def _on_model_event(self, event: str, data: Any) -> None:
        if event not in MODEL_EVENTS:
            return
        if not self._running:
            self._last_result = None
            return
        if event == "wire_removed" and self._removing_component(data):
            # component_removed follows once all of its wires are gone
            return
        self._notify("simulation_completed", self.resolve())

    def _removing_component(self, wire) -> bool:
        return any(comp_id not in self.model.components for comp_id, _ in wire.get_terminals())

    def detach(self) -> None:
        """Stop listening to the circuit controller."""
        if self.circuit_ctrl is not None:
            self.circuit_ctrl.remove_observer(self._on_model_event)
