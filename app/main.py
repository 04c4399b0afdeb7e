"""Desktop entry point: opens the simulation window, optionally with a circuit file."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from GUI.simulation_window import SimulationWindow
from simulation.settings import SettingsStore

logger = logging.getLogger(__name__)


def main(argv=None):
    argv = sys.argv if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    app = QApplication(argv)
    window = SimulationWindow(settings=SettingsStore().load())
    if len(argv) > 1:
        try:
            window.file_ctrl.load_circuit(argv[1])
        except (OSError, ValueError) as e:
            logger.error("Could not open %s: %s", argv[1], e)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
