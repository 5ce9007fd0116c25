# starburst/domain/state.py
from dataclasses import dataclass, field

from starburst.domain.entities.network import Edge, Node
from starburst.domain.errors import InvalidTarget

NO_NODE = -1  # endpoint not present in the active node collection


@dataclass
class BlockingGraph:
    """
    Index arenas over the active nodes and the blocker edges.

    blocked_by[i]: edge indices crossing node i's segment to the target
    blocks[i]:     node indices blocked by an edge that has node i as an endpoint
    edge_ends[e]:  (origin index, dest index), NO_NODE when the endpoint is absent
    """

    nodes: list[Node]
    edges: list[Edge]
    target: int
    edge_ends: list[tuple[int, int]] = field(default_factory=list)
    blocked_by: list[set[int]] = field(default_factory=list)
    blocks: list[set[int]] = field(default_factory=list)
    # node index -> edge indices having that node as an endpoint
    incident: dict[int, set[int]] = field(default_factory=dict)

    def __post_init__(self):
        n = len(self.nodes)
        if not self.blocked_by:
            self.blocked_by = [set() for _ in range(n)]
        if not self.blocks:
            self.blocks = [set() for _ in range(n)]

    @classmethod
    def empty(cls, nodes: list[Node], edges: list[Edge], target_guid: str) -> "BlockingGraph":
        index: dict[str, int] = {}
        for i, n in enumerate(nodes):
            index.setdefault(n.guid, i)  # first occurrence wins, as in find_node
        if target_guid not in index:
            raise InvalidTarget(target_guid)
        g = cls(nodes=list(nodes), edges=list(edges), target=index[target_guid])
        for e_idx, e in enumerate(g.edges):
            o, d = index.get(e.origin.guid, NO_NODE), index.get(e.dest.guid, NO_NODE)
            g.edge_ends.append((o, d))
            for end in (o, d):
                if end != NO_NODE:
                    g.incident.setdefault(end, set()).add(e_idx)
        return g

    @property
    def target_node(self) -> Node:
        return self.nodes[self.target]

    def index_of(self, guid: str) -> int | None:
        return next((i for i, n in enumerate(self.nodes) if n.guid == guid), None)

    def candidates(self) -> range:
        return range(len(self.nodes))

    def is_linkable(self, i: int) -> bool:
        return i != self.target and not self.blocked_by[i]

    def linkable(self) -> list[int]:
        return [i for i in self.candidates() if self.is_linkable(i)]

    def total_blocking(self) -> int:
        return sum(len(s) for s in self.blocked_by)

    def blockers(self) -> list[int]:
        """Nodes still acting as endpoint of an active blocking edge, dataset order."""
        return [i for i, b in enumerate(self.blocks) if b and i != self.target]

    def endpoints(self, e_idx: int) -> tuple[int, int]:
        return self.edge_ends[e_idx]
