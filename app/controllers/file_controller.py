"""
FileController - Handles circuit file I/O and session persistence.

File dialog interaction is the responsibility of the view layer.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from models.circuit import CircuitModel
from models.registry import PinMode

logger = logging.getLogger(__name__)

DATA_DIR = Path.home() / ".egroots"
SESSION_FILE = DATA_DIR / "last_session.txt"
AUTOSAVE_FILE = DATA_DIR / ".autosave_recovery.json"


def validate_circuit_data(data) -> None:
    """
    Validate JSON structure before loading.

    Raises ValueError with a descriptive message if anything is wrong.
    Unknown component types and terminals are allowed here; the resolver
    reports them as warnings instead.
    """
    if not isinstance(data, dict):
        raise ValueError("File does not contain a valid circuit object.")

    if "components" not in data or not isinstance(data["components"], list):
        raise ValueError("Missing or invalid 'components' list.")
    if "wires" not in data or not isinstance(data["wires"], list):
        raise ValueError("Missing or invalid 'wires' list.")

    comp_ids = set()
    for i, comp in enumerate(data["components"]):
        if not isinstance(comp, dict):
            raise ValueError(f"Component #{i + 1} is not an object.")
        for key in ("id", "type", "pos"):
            if key not in comp:
                raise ValueError(f"Component #{i + 1} is missing required field '{key}'.")
        for key in ("id", "type"):
            if not isinstance(comp[key], str) or not comp[key]:
                raise ValueError(f"Component #{i + 1} field '{key}' must be a non-empty string.")
        pos = comp["pos"]
        if not isinstance(pos, dict) or "x" not in pos or "y" not in pos:
            raise ValueError(f"Component '{comp.get('id', i)}' has invalid position data.")
        if not isinstance(pos["x"], (int, float)) or not isinstance(pos["y"], (int, float)):
            raise ValueError(f"Component '{comp['id']}' position values must be numeric.")
        if comp["id"] in comp_ids:
            raise ValueError(f"Duplicate component id '{comp['id']}'.")
        if "config" in comp and comp["config"] is not None and not isinstance(comp["config"], dict):
            raise ValueError(f"Component '{comp['id']}' config must be an object.")
        comp_ids.add(comp["id"])

    for i, wire in enumerate(data["wires"]):
        if not isinstance(wire, dict) or "id" not in wire:
            raise ValueError(f"Wire #{i + 1} is missing required field 'id'.")
        if not isinstance(wire["id"], str):
            raise ValueError(f"Wire #{i + 1} id must be a string.")
        # Dangling ends are stored as null
        for key in ("start_comp", "start_term", "end_comp", "end_term"):
            if wire.get(key) is not None and not isinstance(wire[key], str):
                raise ValueError(f"Wire '{wire['id']}' field '{key}' must be a string or null.")
        for key in ("start_comp", "end_comp"):
            comp_id = wire.get(key)
            if comp_id is not None and comp_id not in comp_ids:
                raise ValueError(f"Wire #{i + 1} references unknown component '{comp_id}'.")

    counters = data.get("counters", {})
    if not isinstance(counters, dict) or not all(
            isinstance(k, str) and isinstance(v, int) for k, v in counters.items()):
        raise ValueError("'counters' must map id prefixes to integers.")
    if not isinstance(data.get("wire_counter", 0), int):
        raise ValueError("'wire_counter' must be an integer.")

    pin_modes = data.get("pin_modes", {})
    if not isinstance(pin_modes, dict):
        raise ValueError("'pin_modes' must be an object.")
    valid_modes = {m.value for m in PinMode}
    for board_id, modes in pin_modes.items():
        if not isinstance(modes, dict):
            raise ValueError(f"Pin modes for '{board_id}' must be an object.")
        for pin_id, mode in modes.items():
            if not isinstance(mode, str) or mode not in valid_modes:
                raise ValueError(f"Pin {board_id}:{pin_id} has invalid mode '{mode}'.")


class FileController:
    """
    Manages circuit file I/O and session persistence.

    Handles saving/loading circuit data as JSON and tracking
    the current file path for quick-save and session restore.
    """

    def __init__(
        self,
        model: Optional[CircuitModel] = None,
        circuit_ctrl=None,
        session_file=SESSION_FILE,
        autosave_file=AUTOSAVE_FILE,
    ):
        if model is None and circuit_ctrl is not None:
            model = circuit_ctrl.model
        self.model = model or CircuitModel()
        self.circuit_ctrl = circuit_ctrl
        self.current_file: Optional[Path] = None
        self._session_file = Path(session_file)
        self._autosave_file = Path(autosave_file)

    def new_circuit(self) -> None:
        """Clear the circuit and reset file state."""
        self.model.clear()
        self.current_file = None
        if self.circuit_ctrl:
            self.circuit_ctrl._notify("circuit_cleared", None)

    def save_circuit(self, filepath) -> None:
        """
        Save circuit to JSON file.

        Args:
            filepath: Path or string to save to.

        Raises:
            OSError: If the file cannot be written.
            TypeError: If model data is not JSON-serializable.
        """
        filepath = Path(filepath)
        data = self.model.to_dict()
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        self.current_file = filepath
        self._save_session()
        logger.info("Saved circuit to %s", filepath)

    def load_circuit(self, filepath) -> None:
        """
        Load circuit from JSON file.

        Validates JSON structure before loading. Updates the model
        in place (preserving the reference so views stay connected).

        Args:
            filepath: Path or string to load from.

        Raises:
            json.JSONDecodeError: If file is not valid JSON.
            ValueError: If file structure is invalid.
            OSError: If the file cannot be read.
        """
        filepath = Path(filepath)
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)

        validate_circuit_data(data)
        self._replace_model(CircuitModel.from_dict(data))

        self.current_file = filepath
        self._save_session()
        logger.info("Loaded circuit from %s", filepath)

        if self.circuit_ctrl:
            self.circuit_ctrl._notify("model_loaded", None)

    def _replace_model(self, new_model: CircuitModel) -> None:
        """Update current model in place (preserving reference)."""
        self.model.clear()
        self.model.components.update(new_model.components)
        self.model.wires.extend(new_model.wires)
        self.model.pin_modes.update(new_model.pin_modes)
        self.model.component_counter.update(new_model.component_counter)
        self.model.wire_counter = new_model.wire_counter

    def has_file(self) -> bool:
        """Return whether a current file path is set (for quick-save)."""
        return self.current_file is not None

    def get_window_title(self, base: str = "E-GROOTS Simulator") -> str:
        """Get window title based on current file."""
        if self.current_file:
            return f"{base} - {self.current_file.name}"
        return base

    def _save_session(self) -> None:
        """Save current file path for session restore."""
        try:
            self._session_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._session_file, "w", encoding="utf-8") as f:
                f.write(os.path.abspath(str(self.current_file)) if self.current_file else "")
        except OSError as e:
            logger.warning("Could not record session file %s: %s", self._session_file, e)

    def load_last_session(self) -> Optional[Path]:
        """
        Load last session file path if it exists.

        Returns:
            Path to the last opened file, or None.
        """
        try:
            with open(self._session_file, "r", encoding="utf-8") as f:
                path_str = f.read().strip()
        except OSError:
            return None
        if path_str:
            path = Path(path_str)
            if path.exists():
                return path
        return None

    # ------------------------------------------------------------------
    # Auto-save and crash recovery
    # ------------------------------------------------------------------

    def auto_save(self) -> None:
        """Save circuit to the auto-save recovery file.

        Unlike save_circuit(), this does NOT update current_file
        or session state.
        """
        try:
            data = self.model.to_dict()
            data["_autosave_source"] = str(self.current_file) if self.current_file else ""
            self._autosave_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._autosave_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except (OSError, TypeError) as e:
            logger.warning("Auto-save failed: %s", e)

    def has_auto_save(self) -> bool:
        """Return True if an auto-save recovery file exists."""
        return self._autosave_file.exists()

    def load_auto_save(self) -> Optional[str]:
        """Load circuit from the auto-save recovery file.

        Returns:
            The original file path (str) the auto-save was based on,
            or empty string if it was an unsaved circuit. Returns None
            on failure.
        """
        try:
            with open(self._autosave_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            source_path = data.pop("_autosave_source", "")
            validate_circuit_data(data)
        except (OSError, json.JSONDecodeError, ValueError) as e:
            logger.error("Could not recover auto-save %s: %s", self._autosave_file, e)
            return None

        self._replace_model(CircuitModel.from_dict(data))
        if source_path:
            self.current_file = Path(source_path)

        if self.circuit_ctrl:
            self.circuit_ctrl._notify("model_loaded", None)
        return source_path

    def clear_auto_save(self) -> None:
        """Delete the auto-save recovery file if it exists."""
        try:
            self._autosave_file.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove auto-save file: %s", e)
