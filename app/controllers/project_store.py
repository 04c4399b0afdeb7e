"""
ProjectStore - Named circuit projects behind a small storage interface.

The simulator only needs save/load/list/delete by name; where the bytes
live is up to the backing store. MemoryProjectStore serves tests and
embedding, JsonDirectoryProjectStore keeps one JSON file per project.
The scripting Circuit opens and saves named projects through it.
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from controllers.file_controller import validate_circuit_data
from models.circuit import CircuitModel

logger = logging.getLogger(__name__)

USER_PROJECTS_DIR = Path.home() / ".egroots" / "projects"


def calculate_counters(model: CircuitModel) -> dict[str, int]:
    """Calculate component counters from actual component IDs.

    Parses IDs like 'LED1', 'R2', 'UNO1' to determine the highest
    number used for each prefix.
    """
    counters: dict[str, int] = {}
    for comp_id in model.components:
        prefix = comp_id.rstrip("0123456789")
        suffix = comp_id[len(prefix):]
        if prefix and suffix:
            counters[prefix] = max(counters.get(prefix, 0), int(suffix))
    return counters


class ProjectStore(ABC):
    """Interface for named circuit project storage."""

    @abstractmethod
    def save(self, name: str, model: CircuitModel) -> None:
        """Store a snapshot of the model under a name, replacing any existing one."""

    @abstractmethod
    def load(self, name: str) -> CircuitModel:
        """
        Return a fresh CircuitModel for a stored project.

        Raises:
            ValueError: If no project has that name or its data is invalid.
        """

    @abstractmethod
    def list_projects(self) -> list[str]:
        """Names of stored projects, sorted."""

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Delete a project. Returns False if it did not exist."""

    def exists(self, name: str) -> bool:
        return name in self.list_projects()

    @staticmethod
    def _check_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValueError("Project name must not be empty.")
        return name

    @staticmethod
    def _model_from_data(name: str, data) -> CircuitModel:
        try:
            validate_circuit_data(data)
        except ValueError as e:
            raise ValueError(f"Project '{name}' is invalid: {e}") from e
        model = CircuitModel.from_dict(data)
        if not model.component_counter:
            model.component_counter = calculate_counters(model)
        return model


class MemoryProjectStore(ProjectStore):
    """Keeps serialized projects in a dict."""

    def __init__(self):
        self._projects: dict[str, dict] = {}

    def save(self, name: str, model: CircuitModel) -> None:
        self._projects[self._check_name(name)] = copy.deepcopy(model.to_dict())

    def load(self, name: str) -> CircuitModel:
        data = self._projects.get(name)
        if data is None:
            raise ValueError(f"No project named '{name}'.")
        return self._model_from_data(name, copy.deepcopy(data))

    def list_projects(self) -> list[str]:
        return sorted(self._projects)

    def delete(self, name: str) -> bool:
        return self._projects.pop(name, None) is not None


class JsonDirectoryProjectStore(ProjectStore):
    """One ``<name>.json`` circuit file per project in a directory."""

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory is not None else USER_PROJECTS_DIR

    @staticmethod
    def _name_to_filename(name: str) -> str:
        """Convert a project name to a safe filename."""
        safe = "".join(c if c.isalnum() or c in " -_" else "" for c in name)
        safe = safe.strip().replace(" ", "_").lower()
        if not safe:
            safe = "project"
        return f"{safe}.json"

    def _path(self, name: str) -> Path:
        return self.directory / self._name_to_filename(name)

    def save(self, name: str, model: CircuitModel) -> None:
        name = self._check_name(name)
        self.directory.mkdir(parents=True, exist_ok=True)
        data = model.to_dict()
        data["name"] = name
        with open(self._path(name), "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug("Saved project %r to %s", name, self._path(name))

    def load(self, name: str) -> CircuitModel:
        path = self._path(name)
        if not path.exists():
            raise ValueError(f"No project named '{name}'.")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ValueError(f"Could not read project '{name}': {e}") from e
        return self._model_from_data(name, data)

    def list_projects(self) -> list[str]:
        if not self.directory.exists():
            return []
        names = []
        for filepath in sorted(self.directory.glob("*.json")):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)
                names.append(data.get("name", filepath.stem))
            except (json.JSONDecodeError, OSError, AttributeError) as e:
                logger.warning("Failed to read project %s: %s", filepath, e)
        return sorted(names)

    def exists(self, name: str) -> bool:
        return self._path(name).exists()

    def delete(self, name: str) -> bool:
        path = self._path(name)
        if not path.exists():
            return False
        path.unlink()
        return True
