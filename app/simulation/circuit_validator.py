"""
simulation/circuit_validator.py

Structural circuit validation with no Qt dependencies.

Findings are returned as SimulationIssue data and never stop the
resolver: a circuit with errors still gets voltages and component states.
"""

import logging
from typing import Optional

from .connectivity import Connectivity
from .propagator import Propagation
from .result import ComponentState, IssueKind, NetStatus, SimulationIssue
from .settings import DEFAULT_SETTINGS, SimulationSettings

logger = logging.getLogger(__name__)


def validate_circuit(connectivity: Connectivity, propagation: Propagation,
                     settings: SimulationSettings = DEFAULT_SETTINGS,
                     component_states: Optional[dict[str, ComponentState]] = None):
    """
    Check every circuit for wiring mistakes a learner can fix.

    Args:
        connectivity: Output of build_connectivity().
        propagation: Output of propagate() for the same connectivity.
        settings: Thresholds used by the over-current estimate.
        component_states: Evaluated states; needed only for the over-current
            warning, which applies to lit LEDs.

    Returns:
        (errors, warnings) where:
            errors: list[SimulationIssue] - problems that keep the circuit from working
            warnings: list[SimulationIssue] - non-blocking issues
    """
    errors = []
    warnings = []
    components = connectivity.components
    nets = propagation.nets

    for circuit in propagation.circuits:
        members = [components[c] for c in circuit.component_ids]
        active = [c for c in members if not c.spec.is_infrastructure]
        if not active:
            continue
        cid = circuit.circuit_id
        affected = tuple(c.component_id for c in active)
        leds = [c for c in members if c.component_type == "led"]
        has_resistor = any(c.component_type == "resistor" for c in members)

        # 1. Power and ground paths
        if not circuit.has_ground:
            errors.append(SimulationIssue(
                kind=IssueKind.NO_GROUND,
                message="Circuit is missing a ground connection. Add a GND component.",
                affected_components=affected,
                circuit_id=cid,
            ))
        if not circuit.has_power:
            errors.append(SimulationIssue(
                kind=IssueKind.NO_POWER,
                message="Circuit is missing a power source. Add a 5V or use Arduino/ESP32 power pins.",
                affected_components=affected,
                circuit_id=cid,
            ))

        # 2. LEDs need a current-limiting resistor
        if leds and not has_resistor and circuit.has_power:
            errors.append(SimulationIssue(
                kind=IssueKind.MISSING_RESISTOR,
                message="LED requires a resistor in series to limit current and prevent damage.",
                affected_components=tuple(c.component_id for c in leds),
                circuit_id=cid,
            ))

        # 3. Conflicting fixed voltages
        for net_id in circuit.net_ids:
            net = nets[net_id]
            if net.status != NetStatus.CONFLICT:
                continue
            volts = ", ".join(f"{v:g} V" for v in net.contributions)
            errors.append(SimulationIssue(
                kind=IssueKind.SHORT_CIRCUIT,
                message=f"Short circuit detected! {net_id} is driven to {volts} at once.",
                affected_components=tuple(sorted({c for c, _ in net.terminals})),
                circuit_id=cid,
            ))

        # 4. Per-LED wiring
        for led in leds:
            led_id = led.component_id
            unwired = [
                t for t in ("anode", "cathode")
                if (led_id, t) not in connectivity.wired_terminals
            ]
            if unwired:
                errors.append(SimulationIssue(
                    kind=IssueKind.OPEN_CIRCUIT,
                    message=f"{led_id} has an unconnected {' and '.join(unwired)}. Complete the circuit.",
                    affected_components=(led_id,),
                    circuit_id=cid,
                ))
                continue
            anode = connectivity.net_of(led_id, "anode").net_id
            cathode = connectivity.net_of(led_id, "cathode").net_id
            if nets[anode].is_ground and nets[cathode].is_power:
                errors.append(SimulationIssue(
                    kind=IssueKind.REVERSE_POLARITY,
                    message="LED is connected in reverse polarity. Swap anode (+) and cathode (-) connections.",
                    affected_components=(led_id,),
                    circuit_id=cid,
                ))

        # 5. Over-current estimate for lit LEDs
        if component_states is None:
            continue
        supply = max(
            (v for n in circuit.net_ids for v in nets[n].contributions),
            default=0.0,
        )
        for led in leds:
            state = component_states.get(led.component_id)
            if state is None or not state.is_active:
                continue
            issue = _overcurrent(connectivity, led.component_id, supply, settings, cid)
            if issue is not None:
                warnings.append(issue)

    if errors or warnings:
        logger.debug("Validation found %d errors and %d warnings", len(errors), len(warnings))
    return errors, warnings


def _overcurrent(connectivity: Connectivity, led_id: str, supply: float,
                 settings: SimulationSettings, circuit_id: str) -> Optional[SimulationIssue]:
    """Warn when the series resistance next to an LED is too low for its supply."""
    led_nets = {
        connectivity.terminal_to_net[(led_id, "anode")],
        connectivity.terminal_to_net[(led_id, "cathode")],
    }
    series = []
    for comp_id, comp in connectivity.components.items():
        if comp.component_type != "resistor":
            continue
        ends = {
            connectivity.terminal_to_net[(comp_id, "term-a")],
            connectivity.terminal_to_net[(comp_id, "term-b")],
        }
        if ends & led_nets:
            series.append(comp)
    if not series:
        return None

    resistance = max(sum(r.get_resistance() for r in series), settings.min_resistance)
    current = (supply - settings.led_forward_voltage) / resistance
    if current <= settings.led_max_current:
        return None
    return SimulationIssue(
        kind=IssueKind.OVERCURRENT,
        message=(
            f"{led_id} draws about {current * 1000:.0f} mA through {resistance:g} ohm; "
            f"use a larger resistor to stay under {settings.led_max_current * 1000:.0f} mA."
        ),
        affected_components=(led_id,) + tuple(r.component_id for r in series),
        severity="warning",
        circuit_id=circuit_id,
    )
