# planner/hooks.py
from typing import Protocol

from starburst.domain.errors import MalformedEdgeReference


class PlannerHooks(Protocol):
    def build_start(self, *, nodes, edges, blockers, workers): ...
    def build_progress(self, *, done, total, percent): ...
    def build_end(self, *, blocked, total_blocking, malformed, wall_ms): ...
    def malformed_edge(self, ref: MalformedEdgeReference): ...
    def plan_start(self, *, target, target_count, linkable): ...
    def iteration(self, *, iteration, node, title, score, removed, linkable): ...
    def plan_end(self, *, iterations, linkable, reason, wall_ms): ...


class NoopHooks:
    def build_start(self, **_):
        pass

    def build_progress(self, **_):
        pass

    def build_end(self, **_):
        pass

    def malformed_edge(self, *_, **__):
        pass

    def plan_start(self, **_):
        pass

    def iteration(self, **_):
        pass

    def plan_end(self, **_):
        pass
