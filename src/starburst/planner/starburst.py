# starburst/planner/starburst.py
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from starburst.app.protocols import NeutralizationSelector
from starburst.builder.blocking import build_blocking_graph
from starburst.domain.entities.network import Edge, Node
from starburst.domain.mutation import neutralize
from starburst.domain.state import BlockingGraph
from starburst.planner.hooks import NoopHooks, PlannerHooks
from starburst.planner.selectors import ScanSelector

Reason = Literal["target_met", "exhausted", "iteration_cap"]


class PlannerState(Enum):
    SCANNING = "scanning"
    SELECTING = "selecting"
    MUTATING = "mutating"
    DONE = "done"


@dataclass(frozen=True)
class Neutralized:
    guid: str
    title: str
    score: int  # blocked nodes this node alone was blocking when picked
    removed: int  # blocking-edge references dropped
    linkable: int  # linkable count after the mutation


@dataclass
class Plan:
    target: Node
    target_count: int
    linkable: list[Node] = field(default_factory=list)
    neutralized: list[Neutralized] = field(default_factory=list)
    iterations: int = 0
    reason: Reason = "target_met"

    @property
    def target_met(self) -> bool:
        return len(self.linkable) >= self.target_count

    @property
    def guids(self) -> list[str]:
        return [n.guid for n in self.linkable]


class StarburstPlanner:
    """
    Greedy neutralization loop over a built BlockingGraph.

    SCANNING checks the linkable count against the target, SELECTING asks the
    selector for the next node, MUTATING neutralizes it. The loop ends in DONE
    when the target is met or no blocker is left. Single-threaded: every
    selection reads the state left by the previous mutation.
    """

    def __init__(
        self,
        graph: BlockingGraph,
        *,
        target_count: int,
        selector: NeutralizationSelector | None = None,
        hooks: PlannerHooks | None = None,
    ):
        if target_count < 1:
            raise ValueError(f"target_count must be positive, got {target_count}")
        self.graph = graph
        self.target_count = target_count
        self.selector = selector or ScanSelector()
        self.hooks = hooks or NoopHooks()
        self.state = PlannerState.SCANNING
        self._linkable: list[int] = []
        self._pick: tuple[int, int] | None = None

    def run(self) -> Plan:
        g = self.graph
        t0 = time.perf_counter()
        plan = Plan(target=g.target_node, target_count=self.target_count)
        cap = len(g.blockers())
        self.selector.reset(g)
        self._linkable = g.linkable()
        self.hooks.plan_start(
            target=g.target_node.guid, target_count=self.target_count, linkable=len(self._linkable)
        )

        self.state = PlannerState.SCANNING
        while self.state is not PlannerState.DONE:
            if self.state is PlannerState.SCANNING:
                if len(self._linkable) >= self.target_count:
                    plan.reason = "target_met"
                    self.state = PlannerState.DONE
                elif plan.iterations >= cap:
                    plan.reason = "iteration_cap"
                    self.state = PlannerState.DONE
                else:
                    self.state = PlannerState.SELECTING

            elif self.state is PlannerState.SELECTING:
                self._pick = self.selector.select(g)
                if self._pick is None:
                    plan.reason = "exhausted"
                    self.state = PlannerState.DONE
                else:
                    self.state = PlannerState.MUTATING

            elif self.state is PlannerState.MUTATING:
                node, score = self._pick
                mutation = neutralize(g, node)
                self.selector.update(g, mutation)
                self._linkable = g.linkable()
                plan.iterations += 1
                picked = g.nodes[node]
                plan.neutralized.append(
                    Neutralized(
                        guid=picked.guid,
                        title=picked.title,
                        score=score,
                        removed=mutation.removed,
                        linkable=len(self._linkable),
                    )
                )
                self.hooks.iteration(
                    iteration=plan.iterations,
                    node=picked.guid,
                    title=picked.title,
                    score=score,
                    removed=mutation.removed,
                    linkable=len(self._linkable),
                )
                self.state = PlannerState.SCANNING

        plan.linkable = [g.nodes[i] for i in self._linkable]
        self.hooks.plan_end(
            iterations=plan.iterations,
            linkable=len(plan.linkable),
            reason=plan.reason,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return plan


def plan_starburst(
    nodes: Sequence[Node],
    edges: Iterable[Edge],
    target_guid: str,
    target_count: int,
    *,
    opposing_team: str = "E",
    selector: NeutralizationSelector | None = None,
    workers: int | None = None,
    chunk_size: int = 256,
    progress_step_pct: int = 5,
    hooks: PlannerHooks | None = None,
) -> Plan:
    graph = build_blocking_graph(
        nodes,
        edges,
        target_guid,
        opposing_team=opposing_team,
        workers=workers,
        chunk_size=chunk_size,
        progress_step_pct=progress_step_pct,
        hooks=hooks,
    )
    planner = StarburstPlanner(graph, target_count=target_count, selector=selector, hooks=hooks)
    return planner.run()
