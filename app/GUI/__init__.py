from .control_panel import ControlPanel
from .logic_panel import LogicPanel
from .serial_monitor import SerialMonitor
from .simulation_window import SimulationWindow

__all__ = [
    'ControlPanel',
    'LogicPanel',
    'SerialMonitor',
    'SimulationWindow',
]
