# tests/conftest.py
import numpy as np
import pytest

from starburst.domain.entities.network import Edge, EdgeEnd, MapData, Node


def node(guid: str, lat: float, lng: float, title: str = "") -> Node:
    return Node(guid, round(lat * 1e6), round(lng * 1e6), title=title or guid)


def edge(guid: str, a: Node | EdgeEnd, b: Node | EdgeEnd, team: str = "E") -> Edge:
    def end(x):
        return x if isinstance(x, EdgeEnd) else EdgeEnd.of(x)

    return Edge(guid, team, end(a), end(b))


@pytest.fixture
def make_node():
    return node


@pytest.fixture
def make_edge():
    return edge


@pytest.fixture
def crossing_map():
    """Target T at (0,0), candidate A at (1,0), opposing edge P(0.5,-1) -> Q(0.5,1)."""
    t, a = node("T", 0.0, 0.0), node("A", 1.0, 0.0)
    p, q = node("P", 0.5, -1.0), node("Q", 0.5, 1.0)
    return MapData(nodes=[t, a, p, q], edges=[edge("e-PQ", p, q)])


@pytest.fixture
def random_map():
    """Factory for reproducible random snapshots; a few edges point at nodes outside the set."""

    def make(seed: int, n_nodes: int = 40, n_edges: int = 60, ghosts: int = 3) -> MapData:
        rng = np.random.default_rng(seed)
        nodes = [
            Node(f"n{i}", int(rng.integers(-50_000, 50_000)), int(rng.integers(-50_000, 50_000)))
            for i in range(n_nodes)
        ]
        ghost_ends = [
            EdgeEnd(f"ghost{i}", *(int(v) for v in rng.integers(-80_000, 80_000, size=2)))
            for i in range(ghosts)
        ]
        ends = [EdgeEnd.of(n) for n in nodes[1:]] + ghost_ends
        edges = []
        for k in range(n_edges):
            i, j = rng.choice(len(ends), size=2, replace=False)
            team = "E" if rng.random() < 0.8 else "R"
            edges.append(Edge(f"e{k}", team, ends[int(i)], ends[int(j)]))
        return MapData(nodes=nodes, edges=edges)

    return make
