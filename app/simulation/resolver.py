"""
simulation/resolver.py

Single entry point of the simulation core. No Qt dependencies.

resolve() is stateless: every call rebuilds nets from the snapshot it is
given and returns a fresh SimulationResult. Problems in the circuit graph
never raise; they come back as errors and warnings on the result.
"""

import logging
from typing import Iterable, Optional

from models.wire import WireData

from .circuit_validator import validate_circuit
from .connectivity import ComponentsArg, build_connectivity
from .evaluator import evaluate_components, read_pins
from .propagator import PinModes, propagate
from .result import SimulationResult
from .settings import DEFAULT_SETTINGS, SimulationSettings

logger = logging.getLogger(__name__)


def resolve(components: ComponentsArg, wires: Iterable[WireData],
            pin_modes: Optional[PinModes] = None,
            settings: Optional[SimulationSettings] = None) -> SimulationResult:
    """
    Resolve a circuit snapshot into nets, voltages and component states.

    Args:
        components: Placed components, as a dict keyed by id or a list.
        wires: Wires between component terminals; dangling wires are ignored.
        pin_modes: {board_id: {pin_id: "INPUT" | "HIGH" | "LOW"}}.
        settings: Thresholds; defaults to SimulationSettings().

    Returns:
        SimulationResult for this snapshot.
    """
    settings = settings or DEFAULT_SETTINGS

    connectivity = build_connectivity(components, list(wires))
    propagation = propagate(connectivity, pin_modes, settings)
    states = evaluate_components(connectivity, propagation, settings)
    readings = read_pins(connectivity, propagation, pin_modes)
    errors, warnings = validate_circuit(connectivity, propagation, settings, states)

    result = SimulationResult(
        circuits=propagation.circuits,
        nets=propagation.nets,
        component_states=states,
        pin_readings=readings,
        errors=errors,
        warnings=connectivity.issues + propagation.issues + warnings,
        ignored_wire_ids=connectivity.ignored_wire_ids,
        terminal_to_net=connectivity.terminal_to_net,
    )
    logger.debug(
        "Resolved %d nets in %d circuits: %d errors, %d warnings, LED %s",
        len(result.nets), len(result.circuits), len(errors), len(result.warnings),
        "on" if result.led_lit else "off",
    )
    return result


def resolve_model(model, settings: Optional[SimulationSettings] = None) -> SimulationResult:
    """Resolve a CircuitModel snapshot."""
    return resolve(model.components, model.wires, model.pin_modes, settings)
