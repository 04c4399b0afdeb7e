"""
WireData - Pure Python data model for circuit wires.

This module contains no Qt dependencies. A wire joins two component
terminals; while the learner is still dragging it, one or both ends may
not be attached to anything yet.
"""

from dataclasses import dataclass
from typing import Optional

Endpoint = tuple[str, str]


@dataclass
class WireData:
    """
    Pure Python data class representing a user-drawn wire.

    Terminal ids are registry terminal names ("anode", "term-a", "d13").
    A wire with a missing endpoint is dangling and joins nothing.
    """

    wire_id: str
    start_component_id: Optional[str] = None
    start_terminal: Optional[str] = None
    end_component_id: Optional[str] = None
    end_terminal: Optional[str] = None

    @property
    def start(self) -> Optional[Endpoint]:
        if self.start_component_id is None or self.start_terminal is None:
            return None
        return (self.start_component_id, self.start_terminal)

    @property
    def end(self) -> Optional[Endpoint]:
        if self.end_component_id is None or self.end_terminal is None:
            return None
        return (self.end_component_id, self.end_terminal)

    def is_dangling(self) -> bool:
        """True if either end is not attached to a terminal."""
        return self.start is None or self.end is None

    def get_terminals(self) -> list[Endpoint]:
        """
        Get the attached terminal identifiers for this wire.

        Returns:
            List of (component_id, terminal_id) tuples; dangling ends are omitted.
        """
        return [t for t in (self.start, self.end) if t is not None]

    def connects_component(self, component_id: str) -> bool:
        """Check if this wire connects to the given component."""
        return self.start_component_id == component_id or self.end_component_id == component_id

    def connects_terminal(self, component_id: str, terminal: str) -> bool:
        """Check if this wire connects to the given terminal."""
        return (component_id, terminal) in self.get_terminals()

    def to_dict(self) -> dict:
        """
        Serialize wire to dictionary.

        Dangling ends are written as null.
        """
        return {
            "id": self.wire_id,
            "start_comp": self.start_component_id,
            "start_term": self.start_terminal,
            "end_comp": self.end_component_id,
            "end_term": self.end_terminal,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WireData":
        """Deserialize wire from dictionary."""
        return cls(
            wire_id=data["id"],
            start_component_id=data.get("start_comp"),
            start_terminal=data.get("start_term"),
            end_component_id=data.get("end_comp"),
            end_terminal=data.get("end_term"),
        )

    def __repr__(self) -> str:
        return (
            f"WireData({self.wire_id}: {self.start_component_id}[{self.start_terminal}] -> "
            f"{self.end_component_id}[{self.end_terminal}])"
        )
