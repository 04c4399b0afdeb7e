"""
simulation/evaluator.py

Derives what each component shows (LED glow, buzzer tone, sensor power)
and what each microcontroller pin reads, from resolved net voltages.
No Qt dependencies.
"""

import math
from typing import Optional, Union

from models.component import ComponentData
from models.registry import BoardSpec, PinMode

from .connectivity import Connectivity
from .propagator import Propagation, PinModes, pin_mode_of
from .result import NO_SIGNAL, ComponentState, PinReading
from .settings import DEFAULT_SETTINGS, SimulationSettings

SENSOR_TYPES = ("potentiometer", "ultrasonic", "ir-sensor", "dht11")

# Brightness reaches 1.0 this many volts above the forward voltage
_LED_BRIGHTNESS_SPAN = 3.0


class _Probe:
    """Voltage lookup for one component's terminals."""

    def __init__(self, connectivity: Connectivity, propagation: Propagation, comp_id: str):
        self._connectivity = connectivity
        self._nets = propagation.nets
        self._comp_id = comp_id

    def voltage(self, terminal_id: str) -> Optional[float]:
        net_id = self._connectivity.terminal_to_net[(self._comp_id, terminal_id)]
        return self._nets[net_id].voltage

    def wired(self, terminal_id: str) -> bool:
        return (self._comp_id, terminal_id) in self._connectivity.wired_terminals


def _is_zero(voltage: Optional[float], tolerance: float) -> bool:
    return voltage is not None and abs(voltage) <= tolerance


def _supplied(probe: _Probe, minimum: float, tolerance: float) -> bool:
    """True when vcc is at least ``minimum`` and gnd sits at 0 V."""
    vcc = probe.voltage("vcc")
    return vcc is not None and vcc >= minimum and _is_zero(probe.voltage("gnd"), tolerance)


def _drop(probe: _Probe, high: str, low: str) -> Optional[float]:
    v_high = probe.voltage(high)
    v_low = probe.voltage(low)
    if v_high is None or v_low is None:
        return None
    return v_high - v_low


def evaluate_component(comp: ComponentData, probe: _Probe, circuit_ok: bool, circuit_has_resistor: bool,
                       circuit_complete: bool, settings: SimulationSettings) -> ComponentState:
    """Compute the visible state of a single component."""
    ctype = comp.component_type
    state = ComponentState(component_id=comp.component_id, component_type=ctype)
    tol = settings.voltage_tolerance

    if ctype == "led":
        drop = _drop(probe, "anode", "cathode")
        lit = (
            probe.wired("anode") and probe.wired("cathode")
            and drop is not None and drop > settings.led_forward_voltage
            and circuit_has_resistor and circuit_complete
        )
        brightness = min(1.0, (drop - settings.led_forward_voltage) / _LED_BRIGHTNESS_SPAN) if lit else 0.0
        state.is_active = state.powered = lit
        state.properties = {
            "glowing": lit,
            "brightness": round(brightness, 3),
            "color": comp.config.get("color", "red"),
            "voltage_drop": drop,
        }
    elif ctype == "buzzer":
        drop = _drop(probe, "positive", "negative")
        sounding = drop is not None and drop >= settings.buzzer_min_voltage
        state.is_active = state.powered = sounding
        state.properties = {"sounding": sounding, "frequency": comp.config.get("frequency", 440)}
    elif ctype == "servo":
        powered = _supplied(probe, settings.servo_min_voltage, tol)
        state.is_active = state.powered = powered
        state.properties = {"angle": comp.config.get("angle", 90), "signal_voltage": probe.voltage("signal")}
    elif ctype in SENSOR_TYPES:
        powered = _supplied(probe, settings.sensor_min_voltage, tol)
        state.is_active = state.powered = powered
        state.properties = dict(comp.config)
        if ctype == "potentiometer":
            state.properties["output_voltage"] = probe.voltage("signal")
    elif ctype == "5v":
        state.is_active = state.powered = True
        state.properties = {"voltage": 5.0}
    elif ctype == "gnd":
        state.is_active = True
    elif comp.spec.board is not None:
        # Boards are USB-powered in the simulator
        state.is_active = state.powered = True
        state.properties = {"logic_voltage": comp.spec.board.logic_voltage}
    elif ctype == "button":
        state.properties = {"pressed": bool(comp.config.get("pressed", False))}
    elif ctype == "resistor":
        state.properties = {"resistance": comp.get_resistance()}

    if not circuit_ok:
        state.is_active = False
        state.powered = False
        if ctype == "led":
            state.properties.update(glowing=False, brightness=0.0)
        elif ctype == "buzzer":
            state.properties["sounding"] = False
    return state


def evaluate_components(connectivity: Connectivity, propagation: Propagation,
                        settings: SimulationSettings = DEFAULT_SETTINGS) -> dict[str, ComponentState]:
    """
    Evaluate every known component.

    Returns:
        Dict of ComponentState keyed by component id, in id order.
    """
    states = {}
    for circuit in propagation.circuits:
        members = [connectivity.components[c] for c in circuit.component_ids]
        has_resistor = any(c.component_type == "resistor" for c in members)
        for comp in members:
            probe = _Probe(connectivity, propagation, comp.component_id)
            states[comp.component_id] = evaluate_component(
                comp, probe,
                circuit_ok=not circuit.is_shorted,
                circuit_has_resistor=has_resistor,
                circuit_complete=circuit.is_complete,
                settings=settings,
            )
    return dict(sorted(states.items()))


def digital_level(voltage: Optional[float], board: BoardSpec) -> str:
    """HIGH above the board's threshold, LOW at or below it, NO_SIGNAL when floating."""
    if voltage is None:
        return NO_SIGNAL
    return "HIGH" if voltage > board.digital_threshold else "LOW"


def analog_value(voltage: Optional[float], board: BoardSpec) -> Union[int, str]:
    """ADC count for a voltage, rounded half up and clamped to 0..adc_max."""
    if voltage is None:
        return NO_SIGNAL
    # The epsilon keeps values like 1.65 V on a 3.3 V board at the upper half step
    count = math.floor(voltage / board.logic_voltage * board.adc_max + 0.5 + 1e-9)
    return max(0, min(board.adc_max, count))


def read_pins(connectivity: Connectivity, propagation: Propagation,
              pin_modes: Optional[PinModes] = None) -> list[PinReading]:
    """One reading per configurable pin of every board, boards in id order."""
    readings = []
    for comp_id, comp in sorted(connectivity.components.items()):
        board = comp.spec.board
        if board is None:
            continue
        for pin in comp.spec.logic_pins():
            net_id = connectivity.terminal_to_net[(comp_id, pin.id)]
            voltage = propagation.nets[net_id].voltage
            mode: PinMode = pin_mode_of(pin_modes, comp_id, pin.id)
            readings.append(PinReading(
                board_id=comp_id,
                board_type=comp.component_type,
                pin_id=pin.id,
                pin_name=pin.name,
                mode=mode.value,
                is_analog=pin.analog,
                voltage=voltage,
                digital=digital_level(voltage, board),
                analog=analog_value(voltage, board),
            ))
    return readings
