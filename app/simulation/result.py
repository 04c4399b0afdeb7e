"""
simulation/result.py

Result snapshot produced by one resolve pass. No Qt dependencies.
Everything here is read-only data for the control panel, logic panel
and serial monitor to render.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

# Reported instead of 0 when a pin's net is not driven by anything
NO_SIGNAL = "NO_SIGNAL"


class NetStatus(str, Enum):
    DRIVEN = "driven"  # exactly one fixed source voltage
    PULLED = "pulled"  # no source, voltage reached through a resistive link
    FLOATING = "floating"  # nothing drives it
    CONFLICT = "conflict"  # two different fixed voltages shorted together
    UNDEFINED = "undefined"  # another net in the same circuit is shorted


class IssueKind(str, Enum):
    NO_GROUND = "NO_GROUND"
    NO_POWER = "NO_POWER"
    SHORT_CIRCUIT = "SHORT_CIRCUIT"
    OPEN_CIRCUIT = "OPEN_CIRCUIT"
    REVERSE_POLARITY = "REVERSE_POLARITY"
    MISSING_RESISTOR = "MISSING_RESISTOR"
    OVERCURRENT = "OVERCURRENT"
    UNKNOWN_COMPONENT = "UNKNOWN_COMPONENT"
    UNKNOWN_TERMINAL = "UNKNOWN_TERMINAL"
    INPUT_ONLY_PIN = "INPUT_ONLY_PIN"


# Order in which errors compete for the control panel's single message
MESSAGE_PRIORITY = [
    IssueKind.SHORT_CIRCUIT,
    IssueKind.MISSING_RESISTOR,
    IssueKind.NO_POWER,
    IssueKind.NO_GROUND,
    IssueKind.OPEN_CIRCUIT,
    IssueKind.REVERSE_POLARITY,
]


@dataclass(frozen=True)
class SimulationIssue:
    """A validation finding. Never raised; always returned as data."""

    kind: IssueKind
    message: str
    affected_components: tuple[str, ...] = ()
    severity: str = "error"  # "error" or "warning"
    circuit_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "message": self.message,
            "affected_components": list(self.affected_components),
            "severity": self.severity,
            "circuit_id": self.circuit_id,
        }


@dataclass
class NetResult:
    """Resolved state of one net."""

    net_id: str
    terminals: tuple[tuple[str, str], ...]
    voltage: Optional[float] = None
    status: NetStatus = NetStatus.FLOATING
    # Distinct fixed voltages seen on the net, ascending
    contributions: tuple[float, ...] = ()
    is_power: bool = False
    is_ground: bool = False
    circuit_id: Optional[str] = None

    @property
    def is_floating(self) -> bool:
        return self.voltage is None

    def to_dict(self) -> dict:
        return {
            "net_id": self.net_id,
            "voltage": self.voltage,
            "status": self.status.value,
            "terminals": [f"{c}:{t}" for c, t in self.terminals],
            "contributions": list(self.contributions),
            "is_power": self.is_power,
            "is_ground": self.is_ground,
        }


@dataclass
class CircuitResult:
    """One connected subgraph of the canvas."""

    circuit_id: str
    component_ids: tuple[str, ...]
    net_ids: tuple[str, ...]
    wire_ids: tuple[str, ...] = ()
    has_power: bool = False
    has_ground: bool = False
    is_shorted: bool = False

    @property
    def is_complete(self) -> bool:
        return self.has_power and self.has_ground

    @property
    def is_valid(self) -> bool:
        return not self.is_shorted

    def to_dict(self) -> dict:
        return {
            "circuit_id": self.circuit_id,
            "components": list(self.component_ids),
            "nets": list(self.net_ids),
            "wires": list(self.wire_ids),
            "has_power": self.has_power,
            "has_ground": self.has_ground,
            "is_complete": self.is_complete,
            "is_shorted": self.is_shorted,
        }


@dataclass
class ComponentState:
    """Visible behaviour of one placed component."""

    component_id: str
    component_type: str
    is_active: bool = False
    powered: bool = False
    properties: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "component_id": self.component_id,
            "type": self.component_type,
            "is_active": self.is_active,
            "powered": self.powered,
            "properties": dict(self.properties),
        }


@dataclass
class PinReading:
    """One row of the serial monitor."""

    board_id: str
    board_type: str
    pin_id: str
    pin_name: str
    mode: str
    is_analog: bool
    voltage: Optional[float]
    digital: str
    analog: Union[int, str]

    @property
    def value(self) -> Union[int, str]:
        """Analog count for analog pins, HIGH/LOW otherwise."""
        return self.analog if self.is_analog else self.digital

    @property
    def has_signal(self) -> bool:
        return self.voltage is not None

    def to_dict(self) -> dict:
        return {
            "board": self.board_id,
            "pin": self.pin_id,
            "name": self.pin_name,
            "mode": self.mode,
            "voltage": self.voltage,
            "digital": self.digital,
            "analog": self.analog,
            "value": self.value,
        }


@dataclass
class SimulationResult:
    """Output snapshot of a resolve pass, superseded by the next one."""

    circuits: list[CircuitResult] = field(default_factory=list)
    nets: dict[str, NetResult] = field(default_factory=dict)
    component_states: dict[str, ComponentState] = field(default_factory=dict)
    pin_readings: list[PinReading] = field(default_factory=list)
    errors: list[SimulationIssue] = field(default_factory=list)
    warnings: list[SimulationIssue] = field(default_factory=list)
    ignored_wire_ids: list[str] = field(default_factory=list)
    terminal_to_net: dict[tuple[str, str], str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def primary_message(self) -> Optional[str]:
        """The single human-readable message the control panel shows."""
        if not self.errors:
            return None
        for kind in MESSAGE_PRIORITY:
            for issue in self.errors:
                if issue.kind == kind:
                    return issue.message
        return self.errors[0].message

    @property
    def led_lit(self) -> bool:
        return any(
            s.component_type == "led" and s.is_active for s in self.component_states.values()
        )

    def net_for_terminal(self, component_id: str, terminal_id: str) -> Optional[NetResult]:
        net_id = self.terminal_to_net.get((component_id, terminal_id))
        return self.nets.get(net_id) if net_id else None

    def voltage_at(self, component_id: str, terminal_id: str) -> Optional[float]:
        net = self.net_for_terminal(component_id, terminal_id)
        return net.voltage if net else None

    def circuit_for_component(self, component_id: str) -> Optional[CircuitResult]:
        for circuit in self.circuits:
            if component_id in circuit.component_ids:
                return circuit
        return None

    def issues_of_kind(self, kind: IssueKind) -> list[SimulationIssue]:
        return [i for i in self.errors + self.warnings if i.kind == kind]

    def readings_for_board(self, board_id: str) -> list[PinReading]:
        return [r for r in self.pin_readings if r.board_id == board_id]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "message": self.primary_message,
            "circuits": [c.to_dict() for c in self.circuits],
            "nets": [n.to_dict() for n in self.nets.values()],
            "components": [s.to_dict() for s in self.component_states.values()],
            "pins": [r.to_dict() for r in self.pin_readings],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "ignored_wires": list(self.ignored_wire_ids),
        }
