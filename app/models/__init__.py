"""
Pure Python data models for the E-GROOTS circuit simulator.

This package contains Qt-free data classes that represent the circuit a
learner builds on the canvas, plus the static component registry.
All models use only Python standard library types (no PyQt6 dependencies).
"""

from .circuit import CircuitModel
from .component import ComponentData
from .net import NetData
from .registry import (
    BOARD_TYPES,
    COMPONENT_REGISTRY,
    COMPONENT_TYPES,
    BoardSpec,
    ComponentSpec,
    PinMode,
    TerminalDef,
    TerminalMode,
    TerminalRole,
    get_spec,
)
from .wire import WireData

__all__ = [
    "CircuitModel",
    "ComponentData",
    "COMPONENT_REGISTRY",
    "COMPONENT_TYPES",
    "BOARD_TYPES",
    "BoardSpec",
    "ComponentSpec",
    "TerminalDef",
    "TerminalMode",
    "TerminalRole",
    "PinMode",
    "get_spec",
    "WireData",
    "NetData",
]
