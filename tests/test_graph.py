"""Tests for graph building, sync detection and completion-time propagation."""

from __future__ import annotations

import pytest

from drill_timing.fixtures import make_action, make_player
from drill_timing.graph import (
    SUPER_START,
    TimelineEdge,
    TimelineGraph,
    build_timeline_graph,
    end_node,
    start_node,
)
from drill_timing.propagation import compute_completion_times
from drill_timing.schema import DrillState
from drill_timing.sync import detect_synchronizations


def pass_to(receiver_actions):
    return DrillState.model_validate({
        "players": [
            make_player("P", [make_action("pass", (0, 0), (300, 0))], has_ball=True),
            make_player("R", receiver_actions),
        ]
    })


# ============================================================
# BUILDER
# ============================================================

def test_builder_creates_one_chain_per_player(pass_and_run):
    graph = build_timeline_graph(pass_and_run)

    assert graph.nodes[0] == SUPER_START
    assert len(graph.action_edges) == 3
    assert graph.sync_edges == []

    chain = [e for e in graph.action_edges if e.action_ref.player_index == 1]
    assert [(e.source, e.target) for e in chain] == [
        (start_node(1), end_node(1, 0)),
        (end_node(1, 0), end_node(1, 1)),
    ]
    assert chain[1].action_ref.action is pass_and_run.players[1].actions[1]

    roots = [e for e in graph.incoming(start_node(0))]
    assert len(roots) == 1
    assert roots[0].source == SUPER_START
    assert roots[0].min_duration == 0


def test_builder_handles_player_without_actions():
    state = DrillState.model_validate({"players": [make_player("idle", [])]})
    graph = build_timeline_graph(state)

    assert start_node(0) in graph.nodes
    assert graph.action_edges == []


# ============================================================
# SYNC DETECTOR
# ============================================================

def test_sync_edge_links_pass_end_to_receiver_end(pass_and_run):
    graph = build_timeline_graph(pass_and_run)
    added = detect_synchronizations(pass_and_run, graph)

    assert len(added) == 1
    edge = added[0]
    assert edge.is_sync
    assert edge.min_duration == 0
    assert (edge.source, edge.target) == (end_node(0, 0), end_node(1, 0))
    assert graph.sync_nodes() == {end_node(0, 0), end_node(1, 0)}


def test_sync_picks_strictly_nearest_candidate():
    state = pass_to([
        make_action("run", (300, 200), (300, 50)),
        make_action("run", (300, 50), (310, 10)),
        make_action("dribble", (310, 10), (500, 10)),
    ])
    graph = build_timeline_graph(state)
    added = detect_synchronizations(state, graph)

    assert [e.target for e in added] == [end_node(1, 1)]


def test_no_sync_outside_threshold():
    state = pass_to([make_action("run", (300, 300), (300, 150))])
    graph = build_timeline_graph(state)

    assert detect_synchronizations(state, graph) == []
    assert detect_synchronizations(state, graph, proximity=200) != []


def test_sync_ignores_non_receiving_actions_and_the_sender():
    state = DrillState.model_validate({
        "players": [
            make_player("P", [
                make_action("pass", (0, 0), (300, 0)),
                make_action("run", (0, 0), (300, 0)),
            ], has_ball=True),
            make_player("R", [make_action("turn", (300, 0), (300, 0))]),
        ]
    })
    graph = build_timeline_graph(state)

    assert detect_synchronizations(state, graph) == []


def test_shots_are_propel_actions_too():
    state = DrillState.model_validate({
        "players": [
            make_player("S", [make_action("shoot", (0, 0), (0, 300))], has_ball=True),
            make_player("K", [make_action("run", (50, 300), (10, 300))]),
        ]
    })
    graph = build_timeline_graph(state)

    assert len(detect_synchronizations(state, graph)) == 1


# ============================================================
# PROPAGATION
# ============================================================

def test_completion_time_takes_maximum_over_predecessors():
    graph = TimelineGraph()
    graph.add_edge(TimelineEdge(SUPER_START, "a", 0.0))
    graph.add_edge(TimelineEdge(SUPER_START, "c", 0.0))
    graph.add_edge(TimelineEdge("a", "b", 1.0))
    graph.add_edge(TimelineEdge("c", "b", 3.0))

    times = compute_completion_times(graph)

    assert times[SUPER_START] == 0
    assert times["b"] == pytest.approx(3.0)


def test_receiver_never_finishes_before_the_ball(pass_and_run):
    graph = build_timeline_graph(pass_and_run)
    detect_synchronizations(pass_and_run, graph)
    times = compute_completion_times(graph)

    ball_arrival = times[end_node(0, 0)]
    assert ball_arrival == pytest.approx(372.0013 / 225, rel=1e-4)
    assert times[end_node(1, 0)] == pytest.approx(ball_arrival)
    assert times[end_node(1, 1)] > ball_arrival


def test_cycle_falls_back_to_insertion_order(load):
    state = load("mutual_passes")
    graph = build_timeline_graph(state)
    assert len(detect_synchronizations(state, graph)) == 2

    assert graph.topological_order() == graph.nodes

    times = compute_completion_times(graph)
    assert set(times) == set(graph.nodes)
    assert all(t >= 0 for t in times.values())
