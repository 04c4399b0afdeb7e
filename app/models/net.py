"""
NetData - Pure Python data model for electrical nets.

This module contains no Qt dependencies. A net is a set of component
terminals that are electrically the same node. Nets are computed from
scratch by the connectivity builder on every resolve and never persisted.
"""

from dataclasses import dataclass, field

Terminal = tuple[str, str]


def net_label(index: int) -> str:
    """Return the id for the index-th net in canonical order."""
    return f"net-{index}"


@dataclass
class NetData:
    """
    A computed equivalence class of terminals.

    ``terminals`` is kept sorted by (component id, terminal id) so two nets
    built from the same graph compare equal regardless of wire order.
    """

    net_id: str
    terminals: tuple[Terminal, ...] = ()
    # Ids of the wires whose endpoints lie in this net
    wire_ids: tuple[str, ...] = ()
    component_ids: frozenset = field(default_factory=frozenset)

    def __post_init__(self):
        self.terminals = tuple(sorted(self.terminals))
        self.wire_ids = tuple(sorted(self.wire_ids))
        if not self.component_ids:
            self.component_ids = frozenset(comp_id for comp_id, _ in self.terminals)

    def contains(self, component_id: str, terminal_id: str) -> bool:
        return (component_id, terminal_id) in self.terminals

    def is_single_terminal(self) -> bool:
        return len(self.terminals) == 1

    def __repr__(self) -> str:
        return f"NetData({self.net_id}, terminals={len(self.terminals)}, wires={len(self.wire_ids)})"
