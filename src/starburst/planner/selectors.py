# starburst/planner/selectors.py
from collections import Counter

from starburst.app.protocols import NeutralizationSelector
from starburst.domain.mutation import Mutation
from starburst.domain.state import NO_NODE, BlockingGraph


def sole_blockers(graph: BlockingGraph, n: int) -> frozenset[int]:
    """Nodes that are an endpoint of every edge currently blocking node n."""
    common: set[int] | None = None
    for e_idx in graph.blocked_by[n]:
        ends = {i for i in graph.endpoints(e_idx) if i != NO_NODE}
        common = ends if common is None else common & ends
        if not common:
            break
    return frozenset(common or ())


def _first_max(graph: BlockingGraph, scores: Counter) -> tuple[int, int] | None:
    best: tuple[int, int] | None = None
    for c in graph.blockers():
        s = scores.get(c, 0)
        # strict comparison keeps the first maximal candidate
        if best is None or s > best[1]:
            best = (c, s)
    return best


class ScanSelector(NeutralizationSelector):
    """Recomputes every score from the current blocked_by sets on each call."""

    def reset(self, graph: BlockingGraph) -> None:
        pass

    def scores(self, graph: BlockingGraph) -> Counter:
        scores: Counter = Counter()
        for n in graph.candidates():
            if n == graph.target or not graph.blocked_by[n]:
                continue
            scores.update(sole_blockers(graph, n))
        return scores

    def select(self, graph: BlockingGraph) -> tuple[int, int] | None:
        return _first_max(graph, self.scores(graph))

    def update(self, graph: BlockingGraph, mutation: Mutation) -> None:
        pass


class IncrementalSelector(NeutralizationSelector):
    """Keeps running scores and refreshes only the nodes a mutation touched."""

    def __init__(self):
        self._sole: dict[int, frozenset[int]] = {}
        self._scores: Counter = Counter()

    def reset(self, graph: BlockingGraph) -> None:
        self._sole.clear()
        self._scores = Counter()
        for n in graph.candidates():
            if n != graph.target and graph.blocked_by[n]:
                self._refresh(graph, n)

    def _refresh(self, graph: BlockingGraph, n: int) -> None:
        self._scores.subtract(self._sole.pop(n, ()))
        if graph.blocked_by[n]:
            sole = sole_blockers(graph, n)
            self._sole[n] = sole
            self._scores.update(sole)

    def select(self, graph: BlockingGraph) -> tuple[int, int] | None:
        return _first_max(graph, self._scores)

    def update(self, graph: BlockingGraph, mutation: Mutation) -> None:
        for n in mutation.touched:
            self._refresh(graph, n)
