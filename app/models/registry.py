"""
Component registry - static metadata for every placeable part.

This module contains no Qt dependencies. Each registered component type
describes its terminals (electrical role, I/O mode, optional fixed source
voltage), the terminals it joins internally, the resistive links between
its terminals, and, for microcontroller boards, their logic levels.

Component types use the palette ids as canonical identifiers:
'led', 'resistor', 'button', 'buzzer', 'potentiometer', 'ultrasonic',
'ir-sensor', 'dht11', 'servo', '5v', 'gnd', 'arduino-uno', 'esp32',
'breadboard'
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TerminalRole(str, Enum):
    """Electrical role of a terminal."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    SIGNAL = "signal"
    POWER = "power"
    GROUND = "ground"
    DATA = "data"
    GPIO = "gpio"


class TerminalMode(str, Enum):
    """Direction a terminal supports."""

    INPUT = "INPUT"
    OUTPUT = "OUTPUT"
    BIDIRECTIONAL = "BIDIRECTIONAL"


class PinMode(str, Enum):
    """Mock logic state a learner assigns to an MCU pin."""

    INPUT = "INPUT"
    HIGH = "HIGH"
    LOW = "LOW"


@dataclass(frozen=True)
class TerminalDef:
    """A named connection point on a component type."""

    id: str
    name: str
    role: TerminalRole
    mode: TerminalMode = TerminalMode.BIDIRECTIONAL
    offset: tuple[float, float] = (0.0, 0.0)
    # Fixed voltage this terminal drives onto its net, None if it drives nothing
    source_voltage: Optional[float] = None
    analog: bool = False

    @property
    def is_source(self) -> bool:
        return self.source_voltage is not None


@dataclass(frozen=True)
class BoardSpec:
    """Logic-level description of a microcontroller board."""

    logic_voltage: float
    adc_max: int = 1023
    # Terminal ids that are never user-configurable logic pins
    reserved_pins: tuple[str, ...] = ("5v", "3v3", "gnd", "gnd2", "vin", "en", "vp", "vn")

    @property
    def digital_threshold(self) -> float:
        """Voltage above which an input reads HIGH."""
        return self.logic_voltage / 2


@dataclass(frozen=True)
class ResistiveLink:
    """A resistive path between two terminals of the same component.

    ``config_key`` names the instance config entry holding total resistance;
    ``fraction`` is 'position' or '1-position' for potentiometer halves.
    """

    terminal_a: str
    terminal_b: str
    config_key: str = "resistance"
    fraction: Optional[str] = None


@dataclass(frozen=True)
class ComponentSpec:
    """Registry entry for one placeable component type."""

    type_id: str
    display_name: str
    category: str
    id_prefix: str
    terminals: tuple[TerminalDef, ...]
    default_config: dict = field(default_factory=dict)
    # Groups of terminal ids that are always one node (breadboard strips)
    internal_connections: tuple[tuple[str, ...], ...] = ()
    # Terminal group joined only while config[switch_key] is truthy
    switched_connection: Optional[tuple[str, ...]] = None
    switch_key: str = "pressed"
    resistive_links: tuple[ResistiveLink, ...] = ()
    board: Optional[BoardSpec] = None
    # Passive parts that do not count as "something to power" in validation
    is_infrastructure: bool = False

    def terminal(self, terminal_id: str) -> Optional[TerminalDef]:
        for term in self.terminals:
            if term.id == terminal_id:
                return term
        return None

    def terminal_ids(self) -> list[str]:
        return [t.id for t in self.terminals]

    def logic_pins(self) -> list[TerminalDef]:
        """Configurable MCU pins, in registry order. Empty for non-boards."""
        if self.board is None:
            return []
        return [
            t for t in self.terminals
            if t.role in (TerminalRole.SIGNAL, TerminalRole.GPIO)
            and t.id not in self.board.reserved_pins
        ]


def _t(term_id, name, role, mode=TerminalMode.BIDIRECTIONAL, offset=(0, 0),
       source_voltage=None, analog=False):
    return TerminalDef(
        id=term_id,
        name=name,
        role=TerminalRole(role),
        mode=TerminalMode(mode),
        offset=(float(offset[0]), float(offset[1])),
        source_voltage=source_voltage,
        analog=analog,
    )


BREADBOARD_COLUMNS = 30
_BREADBOARD_SPACING = 8
_STRIP_ROWS = {
    "a": -35, "b": -27, "c": -19, "d": -11, "e": -3,
    "f": 13, "g": 21, "h": 29, "i": 37, "j": 45,
}
_RAILS = (
    ("power-top", "+", "power", -50),
    ("gnd-top", "-", "ground", -43),
    ("power-bottom", "+", "power", 52),
    ("gnd-bottom", "-", "ground", 59),
)


def _breadboard_terminals() -> tuple[TerminalDef, ...]:
    start_x = -(BREADBOARD_COLUMNS * _BREADBOARD_SPACING) / 2 + _BREADBOARD_SPACING / 2
    terminals = []
    for col in range(BREADBOARD_COLUMNS):
        x = start_x + col * _BREADBOARD_SPACING
        for row, y in _STRIP_ROWS.items():
            terminals.append(_t(f"{row}{col + 1}", f"{row.upper()}{col + 1}", "signal", offset=(x, y)))
    for col in range(BREADBOARD_COLUMNS):
        x = start_x + col * _BREADBOARD_SPACING
        for prefix, name, role, y in _RAILS:
            terminals.append(_t(f"{prefix}-{col + 1}", name, role, offset=(x, y)))
    return tuple(terminals)


def _breadboard_connections() -> tuple[tuple[str, ...], ...]:
    """Terminal strips joined inside the breadboard."""
    groups = []
    for col in range(1, BREADBOARD_COLUMNS + 1):
        groups.append(tuple(f"{row}{col}" for row in "abcde"))
        groups.append(tuple(f"{row}{col}" for row in "fghij"))
    for prefix, _, _, _ in _RAILS:
        groups.append(tuple(f"{prefix}-{col}" for col in range(1, BREADBOARD_COLUMNS + 1)))
    return tuple(groups)


_SPECS = [
    ComponentSpec(
        type_id="led",
        display_name="LED",
        category="Output",
        id_prefix="LED",
        terminals=(
            _t("anode", "Anode (+)", "positive", "INPUT", (-8, 28)),
            _t("cathode", "Cathode (-)", "negative", "INPUT", (8, 28)),
        ),
        default_config={"color": "red"},
    ),
    ComponentSpec(
        type_id="resistor",
        display_name="Resistor",
        category="Passive",
        id_prefix="R",
        terminals=(
            _t("term-a", "Terminal A", "signal", offset=(-30, 0)),
            _t("term-b", "Terminal B", "signal", offset=(30, 0)),
        ),
        default_config={"resistance": 220.0},
        resistive_links=(ResistiveLink("term-a", "term-b"),),
    ),
    ComponentSpec(
        type_id="button",
        display_name="Push Button",
        category="Input",
        id_prefix="BTN",
        terminals=(
            _t("in", "Input", "signal", offset=(-26, 0)),
            _t("out", "Output", "signal", offset=(26, 0)),
        ),
        default_config={"pressed": False},
        switched_connection=("in", "out"),
    ),
    ComponentSpec(
        type_id="buzzer",
        display_name="Buzzer",
        category="Output",
        id_prefix="BZ",
        terminals=(
            _t("positive", "Positive (+)", "positive", "INPUT", (-6, 20)),
            _t("negative", "Negative (-)", "negative", "INPUT", (6, 20)),
        ),
        default_config={"frequency": 440},
    ),
    ComponentSpec(
        type_id="potentiometer",
        display_name="Potentiometer",
        category="Input",
        id_prefix="POT",
        terminals=(
            _t("vcc", "VCC", "power", "INPUT", (-8, 20)),
            _t("signal", "Signal", "signal", "OUTPUT", (0, 20)),
            _t("gnd", "GND", "ground", "INPUT", (8, 20)),
        ),
        default_config={"position": 0.5, "resistance": 10000.0},
        resistive_links=(
            ResistiveLink("vcc", "signal", fraction="1-position"),
            ResistiveLink("signal", "gnd", fraction="position"),
        ),
    ),
    ComponentSpec(
        type_id="ultrasonic",
        display_name="Ultrasonic Sensor",
        category="Sensor",
        id_prefix="US",
        terminals=(
            _t("vcc", "VCC", "power", "INPUT", (-15, 22)),
            _t("trig", "TRIG", "signal", "INPUT", (-5, 22)),
            _t("echo", "ECHO", "data", "OUTPUT", (5, 22)),
            _t("gnd", "GND", "ground", "INPUT", (15, 22)),
        ),
        default_config={"distance": 0.0},
    ),
    ComponentSpec(
        type_id="ir-sensor",
        display_name="IR Sensor",
        category="Sensor",
        id_prefix="IR",
        terminals=(
            _t("vcc", "VCC", "power", "INPUT", (-8, 24)),
            _t("out", "OUT", "data", "OUTPUT", (0, 24)),
            _t("gnd", "GND", "ground", "INPUT", (8, 24)),
        ),
        default_config={"detecting": False},
    ),
    ComponentSpec(
        type_id="dht11",
        display_name="DHT11",
        category="Sensor",
        id_prefix="DHT",
        terminals=(
            _t("vcc", "VCC", "power", "INPUT", (-8, 28)),
            _t("data", "DATA", "data", "OUTPUT", (0, 28)),
            _t("gnd", "GND", "ground", "INPUT", (8, 28)),
        ),
        default_config={"temperature": 25.0, "humidity": 50.0},
    ),
    ComponentSpec(
        type_id="servo",
        display_name="Servo",
        category="Output",
        id_prefix="SRV",
        terminals=(
            _t("signal", "Signal (Orange)", "signal", "INPUT", (-14, 20)),
            _t("vcc", "VCC (Red)", "power", "INPUT", (0, 20)),
            _t("gnd", "GND (Brown)", "ground", "INPUT", (14, 20)),
        ),
        default_config={"angle": 90},
    ),
    ComponentSpec(
        type_id="5v",
        display_name="5V Supply",
        category="Power",
        id_prefix="VCC",
        terminals=(_t("out", "5V Output", "power", "OUTPUT", (0, 20), source_voltage=5.0),),
        is_infrastructure=True,
    ),
    ComponentSpec(
        type_id="gnd",
        display_name="Ground",
        category="Power",
        id_prefix="GND",
        terminals=(_t("in", "Ground", "ground", "INPUT", (0, -14), source_voltage=0.0),),
        is_infrastructure=True,
    ),
    ComponentSpec(
        type_id="arduino-uno",
        display_name="Arduino UNO",
        category="Microcontroller",
        id_prefix="UNO",
        terminals=(
            _t("5v", "5V", "power", "OUTPUT", (-30, -28), source_voltage=5.0),
            _t("3v3", "3.3V", "power", "OUTPUT", (-22, -28), source_voltage=3.3),
            _t("gnd", "GND", "ground", "INPUT", (-14, -28), source_voltage=0.0),
            _t("gnd2", "GND", "ground", "INPUT", (-6, -28), source_voltage=0.0),
            _t("vin", "VIN", "power", "INPUT", (2, -28)),
            _t("a0", "A0", "signal", offset=(10, -28), analog=True),
            _t("a1", "A1", "signal", offset=(18, -28), analog=True),
            _t("a2", "A2", "signal", offset=(26, -28), analog=True),
            _t("d13", "D13", "gpio", offset=(-30, 28)),
            _t("d12", "D12", "gpio", offset=(-22, 28)),
            _t("d11", "D11~", "gpio", offset=(-14, 28)),
            _t("d10", "D10~", "gpio", offset=(-6, 28)),
            _t("d9", "D9~", "gpio", offset=(2, 28)),
            _t("d8", "D8", "gpio", offset=(10, 28)),
            _t("d7", "D7", "gpio", offset=(18, 28)),
            _t("d6", "D6~", "gpio", offset=(26, 28)),
        ),
        board=BoardSpec(logic_voltage=5.0),
    ),
    ComponentSpec(
        type_id="esp32",
        display_name="ESP32",
        category="Microcontroller",
        id_prefix="ESP",
        terminals=(
            _t("3v3", "3.3V", "power", "OUTPUT", (-16, -24), source_voltage=3.3),
            _t("gnd", "GND", "ground", "INPUT", (-8, -24), source_voltage=0.0),
            _t("en", "EN", "signal", "INPUT", (0, -24)),
            _t("vp", "VP", "signal", "INPUT", (8, -24), analog=True),
            _t("vn", "VN", "signal", "INPUT", (16, -24), analog=True),
            _t("d34", "D34", "gpio", "INPUT", (-16, 24), analog=True),
            _t("d35", "D35", "gpio", "INPUT", (-8, 24), analog=True),
            _t("d32", "D32", "gpio", offset=(0, 24), analog=True),
            _t("d33", "D33", "gpio", offset=(8, 24), analog=True),
            _t("d25", "D25", "gpio", offset=(16, 24)),
        ),
        board=BoardSpec(logic_voltage=3.3),
    ),
    ComponentSpec(
        type_id="breadboard",
        display_name="Breadboard",
        category="Prototyping",
        id_prefix="BB",
        terminals=_breadboard_terminals(),
        internal_connections=_breadboard_connections(),
        is_infrastructure=True,
    ),
]

COMPONENT_REGISTRY: dict[str, ComponentSpec] = {spec.type_id: spec for spec in _SPECS}

# Palette order
COMPONENT_TYPES = [spec.type_id for spec in _SPECS]

BOARD_TYPES = [spec.type_id for spec in _SPECS if spec.board is not None]


def get_spec(component_type: str) -> Optional[ComponentSpec]:
    """Look up a registry entry, None for unknown types."""
    return COMPONENT_REGISTRY.get(component_type)


def is_board(component_type: str) -> bool:
    spec = COMPONENT_REGISTRY.get(component_type)
    return spec is not None and spec.board is not None
