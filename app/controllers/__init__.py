"""
Controllers for the E-GROOTS simulator.

This package contains Qt-free controller classes that orchestrate
operations between models and views using an observer pattern.
"""

from .circuit_controller import CircuitController
from .file_controller import FileController, validate_circuit_data
from .project_store import JsonDirectoryProjectStore, MemoryProjectStore, ProjectStore
from .simulation_controller import SimulationController

__all__ = [
    "CircuitController",
    "SimulationController",
    "FileController",
    "validate_circuit_data",
    "ProjectStore",
    "MemoryProjectStore",
    "JsonDirectoryProjectStore",
]
