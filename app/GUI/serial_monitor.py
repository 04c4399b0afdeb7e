"""Serial Monitor - live pin readings for every placed microcontroller board."""

import logging

from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (QAbstractItemView, QGroupBox, QLabel, QScrollArea,
                             QTableWidget, QTableWidgetItem, QVBoxLayout,
                             QWidget)

logger = logging.getLogger(__name__)

NO_VALUE = "—"
COLUMNS = ("PIN", "MODE", "VOLTAGE", "VALUE")


def format_voltage(voltage) -> str:
    if voltage is None:
        return NO_VALUE
    return f"{voltage:.2f}V"


def format_value(reading) -> str:
    """Analog count or HIGH/LOW, or a dash when the pin has no signal."""
    if reading is None or not reading.has_signal:
        return NO_VALUE
    return str(reading.value)


class SerialMonitor(QWidget):
    """One PIN / MODE / VOLTAGE / VALUE table per board.

    Readings come from the simulation controller's displayed result, so
    every value shows a dash while the simulation is stopped.
    """

    def __init__(self, circuit_ctrl, simulation_ctrl):
        super().__init__()
        self.circuit_ctrl = circuit_ctrl
        self.simulation_ctrl = simulation_ctrl
        self.model = circuit_ctrl.model
        self.tables: dict[str, QTableWidget] = {}

        self._init_ui()
        self.circuit_ctrl.add_observer(self._on_model_changed)
        self.refresh()

    def _init_ui(self):
        outer_layout = QVBoxLayout(self)
        outer_layout.setContentsMargins(5, 5, 5, 5)

        title = QLabel("Serial Monitor")
        title.setFont(QFont("", 11, QFont.Weight.Bold))
        outer_layout.addWidget(title)
        subtitle = QLabel("Live pin readings from simulation")
        subtitle.setStyleSheet("QLabel { color: gray; }")
        outer_layout.addWidget(subtitle)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        content = QWidget()
        self._layout = QVBoxLayout(content)
        self._layout.setContentsMargins(0, 0, 0, 0)
        scroll.setWidget(content)
        outer_layout.addWidget(scroll)

    def _on_model_changed(self, event: str, data) -> None:
        self.refresh()

    def refresh(self):
        """Rebuild every board table from the model and the displayed result."""
        while self._layout.count():
            item = self._layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()
        self.tables.clear()

        result = self.simulation_ctrl.displayed_result
        boards = sorted(
            (c for c in self.model.components.values() if c.spec is not None and c.spec.board is not None),
            key=lambda c: c.component_id,
        )
        if not boards:
            self._layout.addWidget(QLabel("No microcontroller boards placed."))
            self._layout.addStretch()
            return

        for board in boards:
            readings = {}
            if result is not None:
                readings = {r.pin_id: r for r in result.readings_for_board(board.component_id)}
            pins = board.spec.logic_pins()

            group_box = QGroupBox(f"{board.spec.display_name} ({board.component_id})")
            box_layout = QVBoxLayout(group_box)
            table = QTableWidget(len(pins), len(COLUMNS))
            table.setHorizontalHeaderLabels(COLUMNS)
            table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
            table.verticalHeader().setVisible(False)
            for row, pin in enumerate(pins):
                reading = readings.get(pin.id)
                mode = self.model.get_pin_mode(board.component_id, pin.id).value
                cells = (
                    pin.name,
                    mode,
                    format_voltage(reading.voltage if reading else None),
                    format_value(reading),
                )
                for col, text in enumerate(cells):
                    table.setItem(row, col, QTableWidgetItem(text))
            box_layout.addWidget(table)
            self.tables[board.component_id] = table
            self._layout.addWidget(group_box)
        self._layout.addStretch()

    def cell_text(self, board_id: str, pin_name: str, column: str) -> str:
        """Text shown for a pin row, looked up by pin display name and column header."""
        table = self.tables[board_id]
        col = COLUMNS.index(column)
        for row in range(table.rowCount()):
            if table.item(row, 0).text() == pin_name:
                return table.item(row, col).text()
        raise KeyError(pin_name)
