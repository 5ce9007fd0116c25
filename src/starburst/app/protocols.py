from typing import Protocol, runtime_checkable

from starburst.domain.mutation import Mutation
from starburst.domain.state import BlockingGraph


# ------------- Planning --------------------
@runtime_checkable
class NeutralizationSelector(Protocol):
    """
    Responsibilities:
      • Rank the nodes still acting as blockers by how many blocked nodes
        they alone fully block.
      • Return the first maximal one in dataset order, or None when no
        blocker is left.
    """

    def reset(self, graph: BlockingGraph) -> None: ...
    def select(self, graph: BlockingGraph) -> tuple[int, int] | None:
        """Return (node index, score) of the node to neutralize next."""

    def update(self, graph: BlockingGraph, mutation: Mutation) -> None: ...


# ------------- Output --------------------
@runtime_checkable
class Sink(Protocol):
    def write(self, ev) -> None: ...
