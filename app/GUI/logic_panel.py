"""Logic Panel - mock INPUT/HIGH/LOW state for every microcontroller pin."""

import logging

from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (QButtonGroup, QGridLayout, QGroupBox, QLabel,
                             QPushButton, QScrollArea, QVBoxLayout, QWidget)

from models.registry import PinMode, TerminalMode

logger = logging.getLogger(__name__)

_REBUILD_EVENTS = {
    "component_added",
    "component_removed",
    "circuit_cleared",
    "model_loaded",
}


class LogicPanel(QWidget):
    """Per-board grid of pin mode buttons.

    Each configurable pin gets an exclusive INPUT / HIGH / LOW button
    group. Input-only pins can only be INPUT.
    """

    def __init__(self, circuit_ctrl):
        super().__init__()
        self.circuit_ctrl = circuit_ctrl
        self.model = circuit_ctrl.model
        # (board_id, pin_id) -> {PinMode: QPushButton}
        self._buttons: dict[tuple[str, str], dict[PinMode, QPushButton]] = {}
        self._groups: list[QButtonGroup] = []

        self._init_ui()
        self.circuit_ctrl.add_observer(self._on_model_changed)
        self.rebuild()

    def _init_ui(self):
        outer_layout = QVBoxLayout(self)
        outer_layout.setContentsMargins(5, 5, 5, 5)

        title = QLabel("Logic Panel")
        title.setFont(QFont("", 11, QFont.Weight.Bold))
        outer_layout.addWidget(title)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        content = QWidget()
        self._layout = QVBoxLayout(content)
        self._layout.setContentsMargins(0, 0, 0, 0)
        scroll.setWidget(content)
        outer_layout.addWidget(scroll)

        self._empty_label = QLabel("Add an Arduino UNO or ESP32 to set pin states.")
        self._empty_label.setWordWrap(True)

    def _clear(self):
        self._buttons.clear()
        self._groups.clear()
        while self._layout.count():
            item = self._layout.takeAt(0)
            widget = item.widget()
            if widget is not None and widget is not self._empty_label:
                widget.deleteLater()

    def rebuild(self):
        """Recreate the button grid from the boards currently placed."""
        self._clear()
        boards = sorted(
            (c for c in self.model.components.values() if c.spec is not None and c.spec.board is not None),
            key=lambda c: c.component_id,
        )
        if not boards:
            self._layout.addWidget(self._empty_label)
            self._layout.addStretch()
            return

        for board in boards:
            group_box = QGroupBox(f"{board.component_id} ({board.spec.display_name})")
            grid = QGridLayout(group_box)
            for row, pin in enumerate(board.spec.logic_pins()):
                grid.addWidget(QLabel(pin.name), row, 0)
                group = QButtonGroup(group_box)
                group.setExclusive(True)
                buttons = {}
                for col, mode in enumerate(PinMode, start=1):
                    button = QPushButton(mode.value)
                    button.setCheckable(True)
                    if mode != PinMode.INPUT and pin.mode == TerminalMode.INPUT:
                        button.setEnabled(False)
                        button.setToolTip("Input-only pin")
                    button.clicked.connect(
                        lambda _checked, b=board.component_id, p=pin.id, m=mode: self._on_mode_clicked(b, p, m)
                    )
                    group.addButton(button)
                    grid.addWidget(button, row, col)
                    buttons[mode] = button
                self._groups.append(group)
                self._buttons[(board.component_id, pin.id)] = buttons
            self._layout.addWidget(group_box)
        self._layout.addStretch()
        self.sync_modes()

    def sync_modes(self):
        """Check the button matching each pin's stored mode."""
        for (board_id, pin_id), buttons in self._buttons.items():
            mode = self.model.get_pin_mode(board_id, pin_id)
            buttons[mode].setChecked(True)

    def button_for(self, board_id: str, pin_id: str, mode) -> QPushButton:
        return self._buttons[(board_id, pin_id)][PinMode(mode)]

    def _on_mode_clicked(self, board_id: str, pin_id: str, mode: PinMode):
        try:
            self.circuit_ctrl.set_pin_mode(board_id, pin_id, mode)
        except ValueError as e:
            logger.warning("Pin mode rejected: %s", e)
            self.sync_modes()

    def _on_model_changed(self, event: str, data) -> None:
        if event in _REBUILD_EVENTS:
            self.rebuild()
        elif event == "pin_mode_changed":
            self.sync_modes()
