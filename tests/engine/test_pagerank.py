"""PageRank solver tests."""

from __future__ import annotations

import math

import pytest

from linkrank.engine.errors import EngineStateError, InvariantViolationError
from linkrank.engine.graph import LinkGraph
from linkrank.engine.pagerank import EXTRA_PASSES, PageRankEngine, compute_scores, effective_passes

from .conftest import make_graph

DAMPING = 0.85


def test_mutual_link_stays_symmetric():
    graph = make_graph([(1, 2), (2, 1)], {1, 2})

    scores = compute_scores(graph, 0, DAMPING)

    assert scores[1] == scores[2]
    assert scores[1] == pytest.approx(1.0)


@pytest.mark.parametrize("iterations", [0, 1, 5, 30])
def test_isolated_node_keeps_base_score(iterations):
    graph = make_graph([], {5})

    scores = compute_scores(graph, iterations, DAMPING)

    assert dict(scores) == {5: 1 - DAMPING}


@pytest.mark.parametrize("iterations", [0, 3, 12])
def test_node_without_inbound_links_scores_base_term(iterations):
    graph = make_graph([(1, 2), (2, 3), (3, 2)], {1, 2, 3})

    scores = compute_scores(graph, iterations, DAMPING)

    assert scores[1] == 1 - DAMPING


def test_extra_pass_is_applied():
    graph = make_graph([(1, 2)], {1, 2})

    assert EXTRA_PASSES == 1
    assert effective_passes(0) == 1
    assert compute_scores(graph, 0, DAMPING)[2] == pytest.approx(1.0)
    # Second pass sees node 1 already at its base score.
    assert compute_scores(graph, 1, DAMPING)[2] == pytest.approx(0.15 + 0.85 * 0.15)


def test_duplicate_edges_pass_on_multiple_shares():
    edges = [(1, 2), (1, 2), (1, 3)]

    scores = compute_scores(make_graph(edges, {1, 2, 3}), 0, DAMPING)
    assert scores[2] == pytest.approx(0.15 + 0.85 * 2 / 3)
    assert scores[3] == pytest.approx(0.15 + 0.85 * 1 / 3)

    deduped = compute_scores(make_graph(edges, {1, 2, 3}, dedupe=True), 0, DAMPING)
    assert deduped[2] == pytest.approx(0.15 + 0.85 * 0.5)
    assert deduped[2] == deduped[3]


def test_self_loop_counts_towards_out_degree():
    graph = make_graph([(1, 1), (1, 2)], {1, 2})

    scores = compute_scores(graph, 0, DAMPING)

    assert scores[1] == pytest.approx(0.15 + 0.85 * 0.5)
    assert scores[2] == pytest.approx(0.15 + 0.85 * 0.5)


def test_scores_are_finite_and_non_negative():
    edges = [(i, (i + 1) % 12) for i in range(12)] + [(i, (i * 5 + 2) % 12) for i in range(12)]
    graph = make_graph(edges, range(12))

    for iterations in (0, 1, 10, 50):
        scores = compute_scores(graph, iterations, DAMPING)
        assert len(scores) == 12
        assert all(math.isfinite(value) and value >= 0.0 for value in scores.values())


def test_results_are_deterministic_across_runs_and_workers():
    edges = [(i, (i * 7 + 3) % 40) for i in range(40)] + [(i, (i * 3 + 1) % 40) for i in range(0, 40, 2)]
    graph = make_graph(edges, range(45))

    first = compute_scores(graph, 15, DAMPING)
    second = compute_scores(graph, 15, DAMPING)
    threaded = compute_scores(graph, 15, DAMPING, workers=4)

    assert first.as_dict() == second.as_dict()
    assert first.as_dict() == threaded.as_dict()


def test_unregistered_ids_are_scored():
    graph = make_graph([(1, 99)], {1})

    scores = compute_scores(graph, 0, DAMPING)

    assert set(scores) == {1, 99}
    assert scores[99] == pytest.approx(1.0)


def test_zero_out_degree_source_is_rejected():
    graph = LinkGraph(
        forward={},
        reverse={2: frozenset({1})},
        all_ids=frozenset({1, 2}),
        registered_ids=frozenset({1, 2}),
    )

    with pytest.raises(InvariantViolationError):
        compute_scores(graph, 3, DAMPING)


def test_reverse_link_without_forward_edge_is_rejected():
    graph = LinkGraph(
        forward={1: (3,)},
        reverse={2: frozenset({1}), 3: frozenset({1})},
        all_ids=frozenset({1, 2, 3}),
        registered_ids=frozenset({1, 2, 3}),
    )

    with pytest.raises(InvariantViolationError, match="no matching forward"):
        compute_scores(graph, 0, DAMPING)


def test_hub_shares_are_split_evenly():
    fan_out = 30000
    graph = make_graph([(0, target) for target in range(1, fan_out + 1)], range(fan_out + 1))

    scores = compute_scores(graph, 0, DAMPING)

    assert scores[0] == pytest.approx(1 - DAMPING)
    assert scores[1] == pytest.approx(1 - DAMPING + DAMPING / fan_out)
    assert scores[fan_out] == scores[1]


@pytest.mark.parametrize(
    ("iterations", "damping"),
    [(-1, 0.85), (1.5, 0.85), (True, 0.85), (2, 1.2), (2, -0.1), (2, float("nan"))],
)
def test_invalid_arguments_raise_value_error(iterations, damping):
    with pytest.raises(ValueError):
        compute_scores(make_graph([(1, 2)], {1, 2}), iterations, damping)


def test_damping_bounds_are_accepted():
    graph = make_graph([(1, 2)], {1, 2})

    assert compute_scores(graph, 2, 0.0).as_dict() == {1: 1.0, 2: 1.0}
    assert compute_scores(graph, 0, 1.0).as_dict() == {1: 0.0, 2: 1.0}


def test_engine_keeps_latest_scores(engine_config):
    engine = PageRankEngine(engine_config)
    graph = make_graph([(1, 2), (3, 2), (2, 1)], {1, 2, 3})

    with pytest.raises(EngineStateError):
        engine.ranked()

    scores = engine.compute(graph, iterations=0)

    assert engine.scores is scores
    assert [doc_id for doc_id, _ in engine.ranked()] == [2, 1, 3]
    with pytest.raises(TypeError):
        scores[1] = 5.0  # type: ignore[index]
