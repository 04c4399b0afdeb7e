"""
simulation/propagator.py

Assigns a voltage and status to every net produced by the connectivity
builder. No Qt dependencies.

Rules, applied in order:
    1. Seed fixed contributions from source terminals and from MCU pins
       set HIGH/LOW.
    2. One distinct fixed voltage -> driven; two or more -> conflict, and
       every other net of that circuit becomes undefined.
    3. Nets without sources take the conductance-weighted mean of their
       resolved neighbours across resistive links, one breadth-first wave
       at a time.
    4. Anything left is floating.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from models.component import ComponentData
from models.registry import PinMode, TerminalMode

from .connectivity import Connectivity
from .result import CircuitResult, IssueKind, NetResult, NetStatus, SimulationIssue
from .settings import DEFAULT_SETTINGS, SimulationSettings

logger = logging.getLogger(__name__)

PinModes = Mapping[str, Mapping[str, object]]


@dataclass
class Propagation:
    """Net voltages and per-circuit flags for one resolve pass."""

    nets: dict[str, NetResult] = field(default_factory=dict)
    circuits: list[CircuitResult] = field(default_factory=list)
    issues: list[SimulationIssue] = field(default_factory=list)


@dataclass(frozen=True)
class _Link:
    net_a: str
    net_b: str
    resistance: float


def pin_mode_of(pin_modes: Optional[PinModes], board_id: str, pin_id: str) -> PinMode:
    if not pin_modes:
        return PinMode.INPUT
    raw = pin_modes.get(board_id, {}).get(pin_id, PinMode.INPUT)
    try:
        return PinMode(raw)
    except ValueError:
        logger.warning("Ignoring unknown pin mode %r on %s:%s", raw, board_id, pin_id)
        return PinMode.INPUT


def collect_contributions(connectivity: Connectivity, pin_modes: Optional[PinModes] = None):
    """
    Gather the fixed voltages each net is held at.

    Returns:
        Tuple (contributions, issues) where contributions maps net id to the
        list of raw voltages driven onto it (duplicates included).
    """
    contributions: dict[str, list[float]] = {net.net_id: [] for net in connectivity.nets}
    issues: list[SimulationIssue] = []

    for comp_id, comp in connectivity.components.items():
        spec = comp.spec
        for term in spec.terminals:
            if term.source_voltage is not None:
                net_id = connectivity.terminal_to_net[(comp_id, term.id)]
                contributions[net_id].append(term.source_voltage)

        if spec.board is None:
            continue
        for pin in spec.logic_pins():
            mode = pin_mode_of(pin_modes, comp_id, pin.id)
            if mode == PinMode.INPUT:
                continue
            if pin.mode == TerminalMode.INPUT:
                issues.append(SimulationIssue(
                    kind=IssueKind.INPUT_ONLY_PIN,
                    message=f"{comp_id} pin {pin.name} is input-only and cannot be driven {mode.value}.",
                    affected_components=(comp_id,),
                    severity="warning",
                ))
                continue
            voltage = spec.board.logic_voltage if mode == PinMode.HIGH else 0.0
            net_id = connectivity.terminal_to_net[(comp_id, pin.id)]
            contributions[net_id].append(voltage)

    return contributions, issues


def distinct_voltages(values, tolerance: float) -> tuple[float, ...]:
    """Sorted values with near-equal entries collapsed into one."""
    result: list[float] = []
    for value in sorted(values):
        if not result or value - result[-1] > tolerance:
            result.append(float(value))
    return tuple(result)


def _link_resistance(comp: ComponentData, fraction: Optional[str], config_key: str,
                     settings: SimulationSettings) -> float:
    try:
        total = float(comp.config.get(config_key, 0.0))
    except (TypeError, ValueError):
        total = 0.0
    if fraction is not None:
        try:
            position = min(1.0, max(0.0, float(comp.config.get("position", 0.5))))
        except (TypeError, ValueError):
            position = 0.5
        total *= position if fraction == "position" else 1.0 - position
    return max(total, settings.min_resistance)


def resistive_links(connectivity: Connectivity, settings: SimulationSettings = DEFAULT_SETTINGS) -> list[_Link]:
    """Resistive links between distinct nets, in component id order."""
    links = []
    for comp_id, comp in connectivity.components.items():
        for link in comp.spec.resistive_links:
            net_a = connectivity.terminal_to_net[(comp_id, link.terminal_a)]
            net_b = connectivity.terminal_to_net[(comp_id, link.terminal_b)]
            if net_a == net_b:
                continue
            links.append(_Link(net_a, net_b, _link_resistance(comp, link.fraction, link.config_key, settings)))
    return links


def _pull(unresolved: set[str], resolved: dict[str, float], links: list[_Link]) -> dict[str, float]:
    """Resolve nets wave by wave; returns only the newly pulled voltages."""
    neighbours: dict[str, list[tuple[str, float]]] = {}
    for link in links:
        neighbours.setdefault(link.net_a, []).append((link.net_b, link.resistance))
        neighbours.setdefault(link.net_b, []).append((link.net_a, link.resistance))

    known = dict(resolved)
    pulled: dict[str, float] = {}
    while True:
        wave: dict[str, float] = {}
        for net_id in sorted(unresolved):
            weights = [
                (known[other], 1.0 / resistance)
                for other, resistance in neighbours.get(net_id, ())
                if other in known
            ]
            if not weights:
                continue
            total = sum(g for _, g in weights)
            wave[net_id] = sum(v * g for v, g in weights) / total
        if not wave:
            return pulled
        known.update(wave)
        pulled.update(wave)
        unresolved.difference_update(wave)


def propagate(connectivity: Connectivity, pin_modes: Optional[PinModes] = None,
              settings: SimulationSettings = DEFAULT_SETTINGS) -> Propagation:
    """
    Assign voltages to every net of a connectivity graph.

    Args:
        connectivity: Output of build_connectivity().
        pin_modes: {board_id: {pin_id: mode}} for MCU pins; missing means INPUT.
        settings: Thresholds; only voltage_tolerance and min_resistance are used here.

    Returns:
        Propagation with one NetResult per net and one CircuitResult per circuit.
    """
    tolerance = settings.voltage_tolerance
    raw, issues = collect_contributions(connectivity, pin_modes)

    circuit_of_net: dict[str, str] = {}
    for circuit in connectivity.circuits:
        for net_id in circuit.net_ids:
            circuit_of_net[net_id] = circuit.circuit_id

    nets: dict[str, NetResult] = {}
    for net in connectivity.nets:
        values = distinct_voltages(raw[net.net_id], tolerance)
        nets[net.net_id] = NetResult(
            net_id=net.net_id,
            terminals=net.terminals,
            contributions=values,
            is_power=any(v > tolerance for v in values),
            is_ground=any(abs(v) <= tolerance for v in values),
            circuit_id=circuit_of_net.get(net.net_id),
        )

    shorted: set[str] = set()
    resolved: dict[str, float] = {}
    for net in nets.values():
        if len(net.contributions) > 1:
            net.status = NetStatus.CONFLICT
            if net.circuit_id is not None:
                shorted.add(net.circuit_id)
            logger.debug("Net %s is in conflict: %s", net.net_id, net.contributions)
        elif len(net.contributions) == 1:
            net.status = NetStatus.DRIVEN
            net.voltage = net.contributions[0]
            resolved[net.net_id] = net.voltage

    for net in nets.values():
        if net.circuit_id in shorted and net.status != NetStatus.CONFLICT:
            net.status = NetStatus.UNDEFINED
            net.voltage = None
            resolved.pop(net.net_id, None)

    # A lone terminal with no wire stays floating even next to a resistive link
    unresolved = {
        net_id for net_id, net in nets.items()
        if net.status == NetStatus.FLOATING and net.circuit_id not in shorted
        and (len(net.terminals) > 1 or net.terminals[0] in connectivity.wired_terminals)
    }
    for net_id, voltage in _pull(unresolved, resolved, resistive_links(connectivity, settings)).items():
        nets[net_id].voltage = voltage
        nets[net_id].status = NetStatus.PULLED

    circuits = []
    for group in connectivity.circuits:
        members = [nets[n] for n in group.net_ids]
        circuits.append(CircuitResult(
            circuit_id=group.circuit_id,
            component_ids=group.component_ids,
            net_ids=group.net_ids,
            wire_ids=group.wire_ids,
            has_power=any(n.is_power for n in members),
            has_ground=any(n.is_ground for n in members),
            is_shorted=group.circuit_id in shorted,
        ))

    return Propagation(nets=nets, circuits=circuits, issues=issues)
