"""
simulation/connectivity.py

Groups electrically joined terminals into nets and nets into circuits.
No Qt dependencies.
"""

import logging
from dataclasses import dataclass, field
from typing import Hashable, Iterable, Mapping, Union

from models.component import ComponentData
from models.net import NetData, net_label
from models.wire import WireData

from .result import IssueKind, SimulationIssue

logger = logging.getLogger(__name__)

Terminal = tuple[str, str]
ComponentsArg = Union[Mapping[str, ComponentData], Iterable[ComponentData]]


class UnionFind:
    """Disjoint sets with union by rank and path compression."""

    def __init__(self):
        self.parent: dict[Hashable, Hashable] = {}
        self.rank: dict[Hashable, int] = {}

    def add(self, node: Hashable) -> None:
        if node not in self.parent:
            self.parent[node] = node
            self.rank[node] = 0

    def find(self, node: Hashable) -> Hashable:
        self.add(node)
        root = node
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[node] != root:
            self.parent[node], node = root, self.parent[node]
        return root

    def union(self, node1: Hashable, node2: Hashable) -> None:
        root1 = self.find(node1)
        root2 = self.find(node2)
        if root1 == root2:
            return
        if self.rank[root1] < self.rank[root2]:
            root1, root2 = root2, root1
        self.parent[root2] = root1
        if self.rank[root1] == self.rank[root2]:
            self.rank[root1] += 1

    def groups(self) -> list[list[Hashable]]:
        """All sets, each sorted, ordered by their smallest member."""
        by_root: dict[Hashable, list] = {}
        for node in self.parent:
            by_root.setdefault(self.find(node), []).append(node)
        return sorted((sorted(members) for members in by_root.values()), key=lambda g: g[0])


@dataclass
class CircuitGroup:
    """Topology of one connected subgraph, before any voltages exist."""

    circuit_id: str
    component_ids: tuple[str, ...]
    net_ids: tuple[str, ...]
    wire_ids: tuple[str, ...]


@dataclass
class Connectivity:
    """Output of the connectivity builder."""

    components: dict[str, ComponentData]
    nets: list[NetData] = field(default_factory=list)
    terminal_to_net: dict[Terminal, str] = field(default_factory=dict)
    circuits: list[CircuitGroup] = field(default_factory=list)
    wired_terminals: set = field(default_factory=set)
    ignored_wire_ids: list[str] = field(default_factory=list)
    issues: list[SimulationIssue] = field(default_factory=list)

    def __post_init__(self):
        self._nets_by_id = {n.net_id: n for n in self.nets}

    def net(self, net_id: str) -> NetData:
        return self._nets_by_id[net_id]

    def net_of(self, component_id: str, terminal_id: str) -> NetData:
        return self._nets_by_id[self.terminal_to_net[(component_id, terminal_id)]]


def as_component_map(components: ComponentsArg) -> dict[str, ComponentData]:
    """Accept either a dict keyed by id or a plain list of components."""
    if isinstance(components, Mapping):
        return dict(components)
    return {c.component_id: c for c in components}


def build_connectivity(components: ComponentsArg, wires: Iterable[WireData]) -> Connectivity:
    """
    Build nets and circuits from placed components and wires.

    Args:
        components: Placed components, keyed by id or as a list.
        wires: User-drawn wires; dangling ones are ignored.

    Returns:
        A Connectivity whose nets and circuits are in canonical order, so
        the same graph always yields the same ids whatever the wire order.
    """
    all_components = as_component_map(components)
    known: dict[str, ComponentData] = {}
    issues: list[SimulationIssue] = []

    for comp_id in sorted(all_components):
        comp = all_components[comp_id]
        if comp.spec is None:
            logger.warning("Skipping component %s of unknown type %r", comp_id, comp.component_type)
            issues.append(SimulationIssue(
                kind=IssueKind.UNKNOWN_COMPONENT,
                message=f"{comp_id} has unknown type '{comp.component_type}' and is ignored.",
                affected_components=(comp_id,),
                severity="warning",
            ))
            continue
        known[comp_id] = comp

    uf = UnionFind()

    # Every terminal gets a set, so untouched terminals become single-terminal nets
    for comp_id, comp in known.items():
        spec = comp.spec
        for term in spec.terminals:
            uf.add((comp_id, term.id))
        for group in spec.internal_connections:
            for other in group[1:]:
                uf.union((comp_id, group[0]), (comp_id, other))
        if spec.switched_connection and comp.config.get(spec.switch_key):
            first, *rest = spec.switched_connection
            for other in rest:
                uf.union((comp_id, first), (comp_id, other))

    attached: list[WireData] = []
    ignored: list[str] = []
    wired_terminals: set[Terminal] = set()

    for wire in wires:
        if wire.is_dangling():
            ignored.append(wire.wire_id)
            continue
        bad = [
            (c, t) for c, t in (wire.start, wire.end)
            if c not in known or not known[c].has_terminal(t)
        ]
        if bad:
            comp_id, term_id = bad[0]
            logger.warning("Wire %s references unknown terminal %s:%s", wire.wire_id, comp_id, term_id)
            issues.append(SimulationIssue(
                kind=IssueKind.UNKNOWN_TERMINAL,
                message=f"Wire {wire.wire_id} is attached to unknown terminal {comp_id}:{term_id} and is ignored.",
                affected_components=tuple(sorted({c for c, _ in bad})),
                severity="warning",
            ))
            ignored.append(wire.wire_id)
            continue
        uf.union(wire.start, wire.end)
        wired_terminals.add(wire.start)
        wired_terminals.add(wire.end)
        attached.append(wire)

    terminal_to_net: dict[Terminal, str] = {}
    groups = uf.groups()
    for index, members in enumerate(groups):
        for terminal in members:
            terminal_to_net[terminal] = net_label(index)

    net_wires: dict[str, list[str]] = {}
    for wire in attached:
        net_wires.setdefault(terminal_to_net[wire.start], []).append(wire.wire_id)

    nets = []
    for index, members in enumerate(groups):
        net_id = net_label(index)
        nets.append(NetData(net_id=net_id, terminals=tuple(members), wire_ids=tuple(sorted(net_wires.get(net_id, ())))))

    result = Connectivity(
        components=known,
        nets=nets,
        terminal_to_net=terminal_to_net,
        circuits=_group_circuits(known, nets, attached),
        wired_terminals=wired_terminals,
        ignored_wire_ids=ignored,
        issues=issues,
    )
    logger.debug(
        "Built %d nets in %d circuits from %d components and %d wires (%d ignored)",
        len(nets), len(result.circuits), len(known), len(attached), len(ignored),
    )
    return result


def _group_circuits(components: dict[str, ComponentData], nets: list[NetData],
                    wires: list[WireData]) -> list[CircuitGroup]:
    """Join components that share a net into connected subgraphs."""
    uf = UnionFind()
    for comp_id in components:
        uf.add(comp_id)
    for net in nets:
        comp_ids = sorted(net.component_ids)
        for other in comp_ids[1:]:
            uf.union(comp_ids[0], other)

    circuits = []
    for index, comp_ids in enumerate(uf.groups()):
        members = set(comp_ids)
        net_ids = tuple(n.net_id for n in nets if n.component_ids & members)
        wire_ids = tuple(sorted(
            w.wire_id for w in wires
            if w.start_component_id in members and w.end_component_id in members
        ))
        circuits.append(CircuitGroup(
            circuit_id=f"circuit-{index}",
            component_ids=tuple(comp_ids),
            net_ids=net_ids,
            wire_ids=wire_ids,
        ))
    return circuits
