"""
E-GROOTS scripting API for programmatic circuit creation and resolution.

This package provides a headless Python API for building, modifying,
and resolving circuits without requiring the GUI or PyQt6.

Usage::

    from scripting import Circuit

    circuit = Circuit()
    circuit.add_component("5v")
    circuit.add_component("resistor", resistance=220)
    circuit.add_component("led")
    circuit.add_component("gnd")
    circuit.add_wire("VCC1", "out", "R1", "term-a")
    circuit.add_wire("R1", "term-b", "LED1", "anode")
    circuit.add_wire("LED1", "cathode", "GND1", "in")

    result = circuit.resolve()
    print(result.led_lit)

    circuit.save("my_circuit.json")
"""

from scripting.circuit import Circuit
from simulation.result import SimulationResult

__all__ = ["Circuit", "SimulationResult"]
