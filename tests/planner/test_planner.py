# tests/planner/test_planner.py
import pytest

from starburst.app.protocols import NeutralizationSelector
from starburst.builder.blocking import build_blocking_graph
from starburst.domain.entities.network import MapData
from starburst.planner.hooks import NoopHooks
from starburst.planner.selectors import IncrementalSelector, ScanSelector
from starburst.planner.starburst import PlannerState, StarburstPlanner, plan_starburst


@pytest.fixture
def two_walls(make_node, make_edge):
    """
    A wide wall H-L at x=0.5 blocks C1 and C2, a short wall K-M at x=-0.5 blocks C3.
    K and M come first in dataset order.
    """
    t = make_node("T", 0.0, 0.0)
    c1, c2, c3 = make_node("C1", 1.0, 0.0), make_node("C2", 1.0, 0.2), make_node("C3", -1.0, 0.0)
    k, m = make_node("K", -0.5, 1.0), make_node("M", -0.5, -1.0)
    h, lo = make_node("H", 0.5, 2.0), make_node("L", 0.5, -2.0)
    return MapData(
        nodes=[t, c1, c2, c3, k, m, h, lo],
        edges=[make_edge("e-KM", k, m), make_edge("e-HL", h, lo)],
    )


class ConsistencyHooks(NoopHooks):
    """Checks linkability against blocked_by after every iteration."""

    def __init__(self, graph):
        self.graph = graph
        self.counts = []

    def iteration(self, *, iteration, node, title, score, removed, linkable):
        g = self.graph
        expected = [i for i in g.candidates() if i != g.target and not g.blocked_by[i]]
        assert g.linkable() == expected
        assert linkable == len(expected)
        self.counts.append(linkable)


def test_target_already_met_needs_no_neutralization(crossing_map):
    plan = plan_starburst(crossing_map.nodes, crossing_map.edges, "T", 2, workers=1)
    assert plan.iterations == 0
    assert plan.guids == ["P", "Q"]
    assert plan.reason == "target_met"


def test_crossing_scenario_neutralizes_first_endpoint(crossing_map):
    plan = plan_starburst(crossing_map.nodes, crossing_map.edges, "T", 3, workers=1)
    assert [n.guid for n in plan.neutralized] == ["P"]
    assert plan.guids == ["A", "P", "Q"]
    assert plan.target_met
    assert plan.target.guid == "T"


def test_ties_go_to_the_first_candidate_in_dataset_order(crossing_map):
    t, a, p, q = crossing_map.nodes
    plan = plan_starburst([t, a, q, p], crossing_map.edges, "T", 3, workers=1)
    assert [n.guid for n in plan.neutralized] == ["Q"]


def test_greedy_picks_the_node_that_fully_clears_most(two_walls):
    plan = plan_starburst(two_walls.nodes, two_walls.edges, "T", 6, workers=1)
    assert [(n.guid, n.score, n.removed, n.linkable) for n in plan.neutralized] == [("H", 2, 2, 6)]
    assert plan.guids == ["C1", "C2", "K", "M", "H", "L"]


def test_runs_until_exhausted_when_target_is_out_of_reach(two_walls):
    plan = plan_starburst(two_walls.nodes, two_walls.edges, "T", 8, workers=1)
    assert [n.guid for n in plan.neutralized] == ["H", "K"]
    assert plan.reason == "exhausted"
    assert len(plan.linkable) == 7
    assert not plan.target_met


def test_no_opposing_edges_returns_full_candidate_set(random_map):
    m = random_map(2)
    plan = plan_starburst(m.nodes, m.edges, "n0", 1400, opposing_team="nobody")
    assert plan.iterations == 0
    assert plan.reason == "exhausted"
    assert plan.guids == [n.guid for n in m.nodes[1:]]


def test_target_count_must_be_positive(crossing_map):
    g = build_blocking_graph(crossing_map.nodes, crossing_map.edges, "T", workers=1)
    with pytest.raises(ValueError):
        StarburstPlanner(g, target_count=0)


@pytest.mark.parametrize("seed", [1, 3, 8, 13])
def test_planner_terminates_with_consistent_linkable_set(random_map, seed):
    m = random_map(seed, n_nodes=50, n_edges=90)
    g = build_blocking_graph(m.nodes, m.edges, "n0", workers=2, chunk_size=7)
    opposing_nodes = len(g.blockers())
    hooks = ConsistencyHooks(g)
    planner = StarburstPlanner(g, target_count=len(m.nodes), hooks=hooks)
    plan = planner.run()

    assert planner.state is PlannerState.DONE
    assert plan.iterations <= opposing_nodes
    assert len(hooks.counts) == plan.iterations
    assert hooks.counts == sorted(hooks.counts)
    assert [n.guid for n in plan.linkable] == [g.nodes[i].guid for i in g.linkable()]


@pytest.mark.parametrize("seed", [1, 3, 8, 13, 34])
def test_incremental_selector_matches_scan(random_map, seed):
    m = random_map(seed, n_nodes=50, n_edges=90)
    a = plan_starburst(m.nodes, m.edges, "n0", 45, selector=ScanSelector(), workers=1)
    b = plan_starburst(m.nodes, m.edges, "n0", 45, selector=IncrementalSelector(), workers=1)
    assert a.neutralized == b.neutralized
    assert a.guids == b.guids
    assert a.reason == b.reason


class StuckSelector(NeutralizationSelector):
    """Keeps proposing a node that blocks nothing."""

    def __init__(self, node):
        self.node = node

    def reset(self, graph):
        pass

    def select(self, graph):
        return self.node, 0

    def update(self, graph, mutation):
        pass


def test_iteration_cap_stops_a_selector_that_makes_no_progress(crossing_map):
    g = build_blocking_graph(crossing_map.nodes, crossing_map.edges, "T", workers=1)
    assert len(g.blockers()) == 2
    plan = StarburstPlanner(g, target_count=3, selector=StuckSelector(g.index_of("A"))).run()
    assert plan.reason == "iteration_cap"
    assert plan.iterations == 2
    assert [n.guid for n in plan.neutralized] == ["A", "A"]
    assert plan.guids == ["P", "Q"]
