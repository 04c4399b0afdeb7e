"""Main simulation window hosting the control panel, logic panel and serial monitor."""

import json
import logging
from typing import Optional

from controllers.circuit_controller import CircuitController
from controllers.file_controller import FileController
from controllers.simulation_controller import SimulationController
from models.circuit import CircuitModel
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (QFileDialog, QMainWindow, QMessageBox, QSplitter)
from simulation.csv_exporter import export_result, write_csv
from simulation.excel_exporter import export_to_excel
from simulation.settings import SimulationSettings

from .control_panel import ControlPanel
from .logic_panel import LogicPanel
from .serial_monitor import SerialMonitor

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = (1100, 650)


class SimulationWindow(QMainWindow):
    """Main application window.

    Owns the model and controllers; the three panels only talk to the
    controllers and refresh themselves through observer events.
    """

    def __init__(self, model: Optional[CircuitModel] = None,
                 settings: Optional[SimulationSettings] = None):
        super().__init__()
        self.setGeometry(100, 100, *DEFAULT_WINDOW_SIZE)

        # Create model (single source of truth)
        self.model = model or CircuitModel()

        self.circuit_ctrl = CircuitController(self.model)
        self.file_ctrl = FileController(self.model, self.circuit_ctrl)
        self.simulation_ctrl = SimulationController(self.model, self.circuit_ctrl, settings)

        self.init_ui()
        self.create_menu_bar()
        self._update_title()

    def init_ui(self):
        splitter = QSplitter()
        self.control_panel = ControlPanel(self.circuit_ctrl, self.simulation_ctrl)
        self.logic_panel = LogicPanel(self.circuit_ctrl)
        self.serial_monitor = SerialMonitor(self.circuit_ctrl, self.simulation_ctrl)
        splitter.addWidget(self.control_panel)
        splitter.addWidget(self.logic_panel)
        splitter.addWidget(self.serial_monitor)
        splitter.setSizes([280, 400, 420])
        self.setCentralWidget(splitter)

    def create_menu_bar(self):
        menubar = self.menuBar()
        file_menu = menubar.addMenu("&File")

        open_action = QAction("&Open...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self.load_circuit)
        file_menu.addAction(open_action)

        save_action = QAction("&Save As...", self)
        save_action.setShortcut("Ctrl+Shift+S")
        save_action.triggered.connect(self.save_circuit)
        file_menu.addAction(save_action)

        file_menu.addSeparator()

        export_csv_action = QAction("Export Results as &CSV...", self)
        export_csv_action.triggered.connect(self.export_csv)
        file_menu.addAction(export_csv_action)

        export_xlsx_action = QAction("Export Results as &Excel...", self)
        export_xlsx_action.triggered.connect(self.export_excel)
        file_menu.addAction(export_xlsx_action)

        sim_menu = menubar.addMenu("&Simulation")
        run_action = QAction("&Run", self)
        run_action.setShortcut("F5")
        run_action.triggered.connect(self.simulation_ctrl.run)
        sim_menu.addAction(run_action)
        stop_action = QAction("S&top", self)
        stop_action.setShortcut("Shift+F5")
        stop_action.triggered.connect(self.simulation_ctrl.stop)
        sim_menu.addAction(stop_action)

    def _update_title(self):
        self.setWindowTitle(self.file_ctrl.get_window_title())

    def load_circuit(self):
        filename, _ = QFileDialog.getOpenFileName(self, "Load Circuit", "", "JSON Files (*.json);;All Files (*)")
        if not filename:
            return
        try:
            self.file_ctrl.load_circuit(filename)
        except (OSError, ValueError, json.JSONDecodeError) as e:
            QMessageBox.critical(self, "Error", f"Failed to load: {e}")
            return
        self._update_title()

    def save_circuit(self):
        filename, _ = QFileDialog.getSaveFileName(self, "Save Circuit", "", "JSON Files (*.json);;All Files (*)")
        if not filename:
            return
        try:
            self.file_ctrl.save_circuit(filename)
        except (OSError, TypeError) as e:
            QMessageBox.critical(self, "Error", f"Failed to save: {e}")
            return
        self._update_title()

    def _circuit_name(self) -> str:
        return self.file_ctrl.current_file.name if self.file_ctrl.current_file else ""

    def export_csv(self):
        filename, _ = QFileDialog.getSaveFileName(self, "Export CSV", "", "CSV Files (*.csv)")
        if not filename:
            return
        try:
            write_csv(export_result(self.simulation_ctrl.resolve(), self._circuit_name()), filename)
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Failed to export: {e}")

    def export_excel(self):
        filename, _ = QFileDialog.getSaveFileName(self, "Export Excel", "", "Excel Files (*.xlsx)")
        if not filename:
            return
        try:
            export_to_excel(self.simulation_ctrl.resolve(), filename, self._circuit_name())
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Failed to export: {e}")
