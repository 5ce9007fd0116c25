# io/planner_logging.py
import json
import logging
import sys

from starburst.domain.errors import MalformedEdgeReference
from starburst.io.plan_events import NeutralizationApplied, PlanCompleted
from starburst.io.recorder import Recorder
from starburst.planner.hooks import NoopHooks


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload)


def default_json_logger(name="starburst", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class PlannerLogging(NoopHooks):
    """
    Shapes builder and planner hook calls into structured JSON logs and
    forwards planning outcomes to the recorder.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        # malformed_edge records are DEBUG; debug mode must let them through
        self.log = logger or default_json_logger(level="DEBUG" if debug else level)
        self._target = ""
        self._target_count = 0

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # builder

    def build_start(self, *, nodes, edges, blockers, workers):
        self._emit(
            "INFO", "build_start", nodes=nodes, edges=edges, blockers=blockers, workers=workers
        )

    def build_progress(self, *, done, total, percent):
        self._emit("INFO", "build_progress", done=done, total=total, percent=percent)

    def build_end(self, *, blocked, total_blocking, malformed, wall_ms):
        self._emit(
            "INFO",
            "build_end",
            blocked=blocked,
            total_blocking=total_blocking,
            malformed=malformed,
            wall_ms=round(wall_ms, 3),
        )

    def malformed_edge(self, ref: MalformedEdgeReference):
        # endpoints outside the pre-filter radius are routine
        if self.debug:
            self._emit(
                "DEBUG", "malformed_edge", edge=ref.edge_guid, node=ref.node_guid, side=ref.side
            )

    # planner

    def plan_start(self, *, target, target_count, linkable):
        self._target, self._target_count = target, target_count
        self._emit(
            "INFO", "plan_start", target=target, target_count=target_count, linkable=linkable
        )

    def iteration(self, *, iteration, node, title, score, removed, linkable):
        if self.debug or (iteration % self.sample_every) == 0:
            self._emit(
                "INFO",
                "iteration",
                iteration=iteration,
                node=node,
                title=title,
                score=score,
                removed=removed,
                linkable=linkable,
            )
        if self.recorder:
            self.recorder.emit(
                NeutralizationApplied(
                    run_id=self.run_id,
                    name="NeutralizationApplied",
                    iteration=iteration,
                    node=node,
                    title=title,
                    score=score,
                    removed=removed,
                    linkable=linkable,
                )
            )

    def plan_end(self, *, iterations, linkable, reason, wall_ms):
        self._emit(
            "INFO",
            "plan_end",
            iterations=iterations,
            linkable=linkable,
            reason=reason,
            wall_ms=round(wall_ms, 3),
        )
        if self.recorder:
            self.recorder.emit(
                PlanCompleted(
                    run_id=self.run_id,
                    name="PlanCompleted",
                    target=self._target,
                    target_count=self._target_count,
                    linkable=linkable,
                    iterations=iterations,
                    reason=reason,
                    wall_ms=wall_ms,
                )
            )
