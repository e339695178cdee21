"""
Drill Timing Optimizer - Synchronize players around ball releases.

Usage:
    from drill_timing import DrillState, optimize

    state = DrillState.model_validate(payload)
    optimize(state)          # mutates and returns the same object
    state.to_json_dict()

The call is pure apart from mutating its input: every graph and table is
allocated per call, so concurrent invocations need no locking.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .adjuster import SLACK_EPSILON, SlackAdjustment, adjust_slack
from .diagnostics import log_schedule, log_test_case, natural_schedule, optimized_schedule
from .graph import TimelineEdge, build_timeline_graph
from .propagation import compute_completion_times
from .schema import DrillState
from .sync import PROXIMITY_PX, detect_synchronizations

logger = logging.getLogger(__name__)


@dataclass
class OptimizationReport:
    """Intermediate results of one optimize call, for diagnostics and tests"""
    sync_edges: List[TimelineEdge] = field(default_factory=list)
    completion_times: Dict[str, float] = field(default_factory=dict)
    adjustments: List[SlackAdjustment] = field(default_factory=list)

    def ball_arrivals(self, state: DrillState) -> List[Tuple[str, float]]:
        """(receiver id, time the ball reaches them) for every sync edge"""
        arrivals = []
        for edge in self.sync_edges:
            player_index = int(edge.target.split(":")[1])
            arrivals.append((
                state.players[player_index].id,
                self.completion_times.get(edge.source, 0.0),
            ))
        return arrivals


class DrillOptimizer:
    """
    Assigns speeds, delays and pre-events so receivers meet the ball.

    Example:
        optimizer = DrillOptimizer(proximity=80)
        report = optimizer.run(state)
        print(len(report.sync_edges), "synchronizations")
    """

    def __init__(
        self,
        proximity: float = PROXIMITY_PX,
        epsilon: float = SLACK_EPSILON,
        log: Optional[logging.Logger] = None,
    ):
        self.proximity = proximity
        self.epsilon = epsilon
        self.log = log or logger

    def run(self, state: DrillState) -> OptimizationReport:
        """Optimize state in place and return what was computed along the way"""
        log_test_case(state, self.log)
        self.log.info("[OPTIMIZE] Optimizing drill with %d players", len(state.players))

        graph = build_timeline_graph(state)
        sync_edges = detect_synchronizations(state, graph, self.proximity, self.log)
        completion_times = compute_completion_times(graph)

        log_schedule("NATURAL TIMES (no optimization)", natural_schedule(state), self.log)

        adjustments = adjust_slack(graph, completion_times, self.epsilon, self.log)

        log_schedule(
            "OPTIMIZED TIMES",
            optimized_schedule(state, completion_times),
            self.log,
        )

        return OptimizationReport(
            sync_edges=sync_edges,
            completion_times=completion_times,
            adjustments=adjustments,
        )

    def optimize(self, state: DrillState) -> DrillState:
        self.run(state)
        return state


def optimize(state: DrillState, log: Optional[logging.Logger] = None) -> DrillState:
    """
    Optimize one drill snapshot.

    Args:
        state: Players and their actions; mutated in place
        log: Optional logger to receive sync/adjust/schedule diagnostics

    Returns:
        The same DrillState object
    """
    return DrillOptimizer(log=log).optimize(state)
