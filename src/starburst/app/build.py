# starburst/app/build.py
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from starburst.app.protocols import NeutralizationSelector
from starburst.config.models import PlanModel
from starburst.domain.entities.network import MapData
from starburst.io.drawtools import format_plan, write_plan
from starburst.io.filters import filter_by_radius
from starburst.io.mapdata import load_map
from starburst.io.planner_logging import PlannerLogging
from starburst.io.recorder import JsonlSink, Recorder
from starburst.planner.hooks import NoopHooks, PlannerHooks
from starburst.planner.starburst import Plan, plan_starburst
from starburst.runtime.registries import make_selector


@dataclass
class App:
    model: PlanModel
    hooks: PlannerHooks
    selector: NeutralizationSelector

    def prepare(self, map_data: MapData) -> MapData:
        return filter_by_radius(map_data, self.model.target_guid, self.model.filter.max_distance_km)

    def plan(self, map_data: MapData) -> Plan:
        m = self.model
        return plan_starburst(
            map_data.nodes,
            map_data.edges,
            m.target_guid,
            m.target_links,
            opposing_team=m.opposing_team,
            selector=self.selector,
            workers=m.builder.workers,
            chunk_size=m.builder.chunk_size,
            progress_step_pct=m.builder.progress_step_pct,
            hooks=self.hooks,
        )

    def render(self, plan: Plan) -> list[dict]:
        out = self.model.output
        return format_plan(plan.linkable, plan.target, color=out.color, markers=out.markers)


def build(
    cfg: PlanModel | Mapping, *, use_logging: bool = True, recorder: Recorder | None = None
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, PlanModel) else PlanModel.model_validate(cfg)

    # 1) Hooks (structured logs + outcome recording)
    if use_logging:
        hooks: PlannerHooks = PlannerLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
            recorder=recorder or Recorder(JsonlSink(sys.stderr)),
        )
    else:
        hooks = NoopHooks()

    # 2) Selection strategy
    selector = make_selector(model.selector)
    return App(model=model, hooks=hooks, selector=selector)


def run(cfg: PlanModel | Mapping, **kw) -> tuple[Plan, Path]:
    """load -> filter -> plan -> write; returns the plan and the output path."""
    app = build(cfg, **kw)
    m = app.model
    if m.input_path is None or m.output_path is None:
        raise ValueError("input_path and output_path are required to run")
    map_data = app.prepare(load_map(m.input_path))
    plan = app.plan(map_data)
    return plan, write_plan(m.output_path, app.render(plan))
