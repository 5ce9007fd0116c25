# starburst/builder/blocking.py
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

import numpy as np

from starburst.domain.entities.geography import E6
from starburst.domain.entities.network import Edge, Node
from starburst.domain.errors import MalformedEdgeReference
from starburst.domain.geometry import segments_intersect_many
from starburst.domain.state import NO_NODE, BlockingGraph
from starburst.planner.hooks import NoopHooks, PlannerHooks

Hits = list[tuple[int, np.ndarray]]


def select_blockers(edges: Iterable[Edge], target_guid: str, opposing_team: str) -> list[Edge]:
    # an edge landing on the target is the very connection being evaluated
    return [e for e in edges if e.team == opposing_team and e.dest.guid != target_guid]


class _EdgeArrays:
    """Read-only numpy view of the blocker edges shared by all scan workers."""

    def __init__(self, edges: Sequence[Edge]):
        o = np.array([(e.origin.lat_e6, e.origin.lng_e6) for e in edges], dtype=np.int64)
        d = np.array([(e.dest.lat_e6, e.dest.lng_e6) for e in edges], dtype=np.int64)
        self.origin_e6 = o.reshape(-1, 2)
        self.dest_e6 = d.reshape(-1, 2)
        self.starts = self.origin_e6 / E6
        self.ends = self.dest_e6 / E6

    def hits(self, node: Node, target: Node) -> np.ndarray:
        p = (node.lat_e6 / E6, node.lng_e6 / E6)
        t = (target.lat_e6 / E6, target.lng_e6 / E6)
        crossing = segments_intersect_many(p, t, self.starts, self.ends)
        here = np.array([node.lat_e6, node.lng_e6], dtype=np.int64)
        own = (self.origin_e6 == here).all(axis=1) | (self.dest_e6 == here).all(axis=1)
        return np.flatnonzero(crossing & ~own)


def _scan(graph: BlockingGraph, arrays: _EdgeArrays, chunk: range) -> Hits:
    target = graph.target_node
    out: Hits = []
    for i in chunk:
        if i == graph.target:
            continue
        hits = arrays.hits(graph.nodes[i], target)
        if hits.size:
            out.append((i, hits))
    return out


def _chunks(n: int, size: int) -> list[range]:
    return [range(s, min(s + size, n)) for s in range(0, n, size)]


class _Progress:
    def __init__(self, total: int, step_pct: int, hooks: PlannerHooks):
        self.total, self.step, self.hooks = total, max(1, step_pct), hooks
        self.done = 0
        self.next_pct = self.step

    def advance(self, n: int) -> None:
        self.done += n
        pct = (self.done * 100) // max(1, self.total)
        if pct >= self.next_pct:
            self.hooks.build_progress(done=self.done, total=self.total, percent=pct)
            while self.next_pct <= pct:
                self.next_pct += self.step


def _merge(graph: BlockingGraph, results: Iterable[Hits]) -> None:
    for bucket in results:
        for i, hits in bucket:
            graph.blocked_by[i] = set(hits.tolist())
            for e_idx in graph.blocked_by[i]:
                for end in graph.endpoints(e_idx):
                    if end != NO_NODE:
                        graph.blocks[end].add(i)


def _report_malformed(graph: BlockingGraph, hooks: PlannerHooks) -> int:
    count = 0
    for e_idx, (o, d) in enumerate(graph.edge_ends):
        e = graph.edges[e_idx]
        if o == NO_NODE:
            hooks.malformed_edge(MalformedEdgeReference(e.guid, e.origin.guid, "origin"))
            count += 1
        if d == NO_NODE:
            hooks.malformed_edge(MalformedEdgeReference(e.guid, e.dest.guid, "dest"))
            count += 1
    return count


def build_blocking_graph(
    nodes: Sequence[Node],
    edges: Iterable[Edge],
    target_guid: str,
    *,
    opposing_team: str = "E",
    workers: int | None = None,
    chunk_size: int = 256,
    progress_step_pct: int = 5,
    hooks: PlannerHooks | None = None,
) -> BlockingGraph:
    """
    Populate blocked_by/blocks for every node against the node->target segment.

    Chunks of nodes are scanned in a thread pool against immutable edge arrays;
    each chunk returns its own hit list and the merge into the graph happens on
    the calling thread once the scan is complete.
    """
    hooks = hooks or NoopHooks()
    t0 = time.perf_counter()
    edges = list(edges)
    blockers = select_blockers(edges, target_guid, opposing_team)
    # raises InvalidTarget before any scanning
    graph = BlockingGraph.empty(list(nodes), blockers, target_guid)
    hooks.build_start(
        nodes=len(graph.nodes), edges=len(edges), blockers=len(blockers), workers=workers
    )
    malformed = _report_malformed(graph, hooks)

    results: list[Hits] = []
    if blockers:
        arrays = _EdgeArrays(graph.edges)
        chunks = _chunks(len(graph.nodes), max(1, chunk_size))
        progress = _Progress(len(graph.nodes), progress_step_pct, hooks)
        if workers == 1:
            for chunk in chunks:
                results.append(_scan(graph, arrays, chunk))
                progress.advance(len(chunk))
        else:
            with ThreadPoolExecutor(max_workers=workers) as ex:
                futures = {ex.submit(_scan, graph, arrays, c): c for c in chunks}
                for fut in as_completed(futures):
                    results.append(fut.result())
                    progress.advance(len(futures[fut]))

    _merge(graph, results)
    hooks.build_end(
        blocked=sum(1 for s in graph.blocked_by if s),
        total_blocking=graph.total_blocking(),
        malformed=malformed,
        wall_ms=(time.perf_counter() - t0) * 1000,
    )
    return graph
