"""
Shared test fixtures for the E-GROOTS simulator test suite.

All fixtures build pure-Python model objects (no Qt dependencies).
"""

import sys
from pathlib import Path

# Ensure app/ is on sys.path so bare imports (models, simulation, GUI, controllers)
# work when running individual test files (e.g., python -m pytest app/tests/unit/test_foo.py).
_app_dir = str(Path(__file__).resolve().parent.parent)
if _app_dir not in sys.path:
    sys.path.insert(0, _app_dir)

import pytest
from models.component import ComponentData
from models.wire import WireData

_wire_ids = iter(range(1, 1_000_000))


def make_component(component_type, component_id, position=(0.0, 0.0), **config):
    """Helper to create a ComponentData with minimal boilerplate."""
    return ComponentData(
        component_id=component_id,
        component_type=component_type,
        position=position,
        config=config,
    )


def make_wire(start_id, start_term, end_id, end_term, wire_id=None):
    """Helper to create a WireData."""
    return WireData(
        wire_id=wire_id or f"W{next(_wire_ids)}",
        start_component_id=start_id,
        start_terminal=start_term,
        end_component_id=end_id,
        end_terminal=end_term,
    )


def components_dict(*components):
    return {c.component_id: c for c in components}


@pytest.fixture
def led_series_circuit():
    """
    5V -- R1 -- LED1 -- GND

    VCC1.out -> R1.term-a, R1.term-b -> LED1.anode, LED1.cathode -> GND1.in
    """
    components = components_dict(
        make_component("5v", "VCC1"),
        make_component("resistor", "R1", resistance=220),
        make_component("led", "LED1"),
        make_component("gnd", "GND1"),
    )
    wires = [
        make_wire("VCC1", "out", "R1", "term-a", "W1"),
        make_wire("R1", "term-b", "LED1", "anode", "W2"),
        make_wire("LED1", "cathode", "GND1", "in", "W3"),
    ]
    return components, wires


@pytest.fixture
def led_without_resistor_circuit():
    """5V -- LED1 -- GND with no current-limiting resistor."""
    components = components_dict(
        make_component("5v", "VCC1"),
        make_component("led", "LED1"),
        make_component("gnd", "GND1"),
    )
    wires = [
        make_wire("VCC1", "out", "LED1", "anode", "W1"),
        make_wire("LED1", "cathode", "GND1", "in", "W2"),
    ]
    return components, wires


@pytest.fixture
def short_circuit():
    """5V wired straight to GND."""
    components = components_dict(
        make_component("5v", "VCC1"),
        make_component("gnd", "GND1"),
        make_component("resistor", "R1"),
    )
    wires = [
        make_wire("VCC1", "out", "GND1", "in", "W1"),
        make_wire("VCC1", "out", "R1", "term-a", "W2"),
    ]
    return components, wires


@pytest.fixture
def esp32_potentiometer_circuit():
    """
    ESP32 3v3 -> POT1.vcc, POT1.gnd -> ESP32 gnd, POT1.signal -> ESP32 d34 (analog).
    """
    components = components_dict(
        make_component("esp32", "ESP1"),
        make_component("potentiometer", "POT1", position=0.5),
    )
    wires = [
        make_wire("ESP1", "3v3", "POT1", "vcc", "W1"),
        make_wire("POT1", "gnd", "ESP1", "gnd", "W2"),
        make_wire("POT1", "signal", "ESP1", "d34", "W3"),
    ]
    return components, wires


@pytest.fixture
def led_series_data(led_series_circuit):
    """The LED series circuit as a circuit-file dict."""
    components, wires = led_series_circuit
    return {
        "components": [c.to_dict() for c in components.values()],
        "wires": [w.to_dict() for w in wires],
        "counters": {"VCC": 1, "R": 1, "LED": 1, "GND": 1},
    }
