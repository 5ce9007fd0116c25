# starburst/domain/mutation.py
from dataclasses import dataclass

from starburst.domain.state import NO_NODE, BlockingGraph


@dataclass(frozen=True)
class Mutation:
    node: int
    removed: int  # blocking-edge references dropped across all blocked_by sets
    touched: frozenset[int]  # nodes whose blocked_by shrank


def neutralize(graph: BlockingGraph, node: int) -> Mutation:
    """
    Drop every blocking edge that has `node` as an endpoint from all blocked_by
    sets, clear blocks[node], and purge blocks entries of the other endpoints
    that no longer block anything through a remaining edge.
    Only nodes listed in blocks[node] are visited.
    """
    if node == graph.target:
        raise ValueError("the target node cannot be neutralized")

    incident = graph.incident.get(node, set())
    removed = 0
    touched = set()
    for n in graph.blocks[node]:
        gone = graph.blocked_by[n] & incident
        if not gone:
            continue
        graph.blocked_by[n] -= gone
        removed += len(gone)
        touched.add(n)
        for e_idx in gone:
            for j in graph.endpoints(e_idx):
                if j in (NO_NODE, node):
                    continue
                if not (graph.blocked_by[n] & graph.incident.get(j, set())):
                    graph.blocks[j].discard(n)
    graph.blocks[node].clear()
    return Mutation(node=node, removed=removed, touched=frozenset(touched))
