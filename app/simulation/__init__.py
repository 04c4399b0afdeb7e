from .connectivity import build_connectivity
from .resolver import resolve, resolve_model
from .result import NO_SIGNAL, IssueKind, NetStatus, SimulationResult
from .settings import SettingsStore, SimulationSettings

__all__ = [
    'build_connectivity',
    'resolve',
    'resolve_model',
    'SimulationResult',
    'SimulationSettings',
    'SettingsStore',
    'NetStatus',
    'IssueKind',
    'NO_SIGNAL',
]
