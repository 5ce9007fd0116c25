# starburst/io/plan_events.py

from dataclasses import dataclass


# Base type for recorded planning outcomes (analytics only, never fed back)
@dataclass
class PlanEvent:
    run_id: str
    name: str  # stable event name


@dataclass
class NeutralizationApplied(PlanEvent):
    iteration: int
    node: str
    title: str
    score: int
    removed: int
    linkable: int


@dataclass
class PlanCompleted(PlanEvent):
    target: str
    target_count: int
    linkable: int
    iterations: int
    reason: str
    wall_ms: float | None = None
