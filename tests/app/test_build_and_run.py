# tests/app/test_build_and_run.py
import json

import pytest
from pydantic import ValidationError

from starburst.app.build import build, run
from starburst.config.models import PlanModel, SelectorIncrementalModel
from starburst.io.mapdata import dump_map
from starburst.io.recorder import MemorySink, Recorder
from starburst.planner.hooks import NoopHooks
from starburst.planner.selectors import IncrementalSelector, ScanSelector
from starburst.runtime.registries import make_selector


def _cfg(**kw):
    cfg = {
        "name": "test",
        "run_id": "t-1",
        "target_guid": "T",
        "target_links": 3,
        "filter": {"max_distance_km": None},
        "builder": {"workers": 1},
    }
    cfg.update(kw)
    return cfg


def test_build_plans_in_memory(crossing_map):
    app = build(_cfg(), use_logging=False)
    assert isinstance(app.hooks, NoopHooks)
    assert isinstance(app.selector, ScanSelector)
    plan = app.plan(app.prepare(crossing_map))
    assert plan.guids == ["A", "P", "Q"]
    items = app.render(plan)
    assert len(items) == 3
    assert all(i["latLngs"][1] == {"lat": 0.0, "lng": 0.0} for i in items)


def test_default_radius_filter_drops_distant_nodes(crossing_map):
    app = build(_cfg(filter={}), use_logging=False)
    # the whole fixture spans ~100 km, only the target survives 6 km
    assert [n.guid for n in app.prepare(crossing_map).nodes] == ["T"]


def test_run_end_to_end(tmp_path, crossing_map):
    src, out = tmp_path / "map.json", tmp_path / "out" / "plan.json"
    src.write_text(dump_map(crossing_map))
    sink = MemorySink()
    plan, path = run(
        _cfg(input_path=str(src), output_path=str(out), selector={"kind": "incremental"}),
        recorder=Recorder(sink),
    )
    assert path == out
    assert len(json.loads(out.read_text())) == len(plan.linkable) == 3
    assert sink.events[-1].reason == "target_met"


def test_run_requires_paths(crossing_map):
    with pytest.raises(ValueError):
        run(_cfg(), use_logging=False)


def test_selector_registry():
    assert isinstance(make_selector(SelectorIncrementalModel()), IncrementalSelector)


def test_config_is_strict():
    with pytest.raises(ValidationError):
        PlanModel.model_validate(_cfg(unknown=True))
    with pytest.raises(ValidationError):
        PlanModel.model_validate(_cfg(target_links=0))
    with pytest.raises(ValidationError):
        PlanModel.model_validate(_cfg(selector={"kind": "annealing"}))
    with pytest.raises(ValidationError):
        PlanModel.model_validate(_cfg(builder={"workers": 0}))
    m = PlanModel.model_validate({"target_guid": "T"})
    assert (m.target_links, m.opposing_team, m.filter.max_distance_km) == (1400, "E", 6.0)
    assert m.output.color == "#a24ac3"
