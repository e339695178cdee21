"""
Synchronization Detector - Couple ball releases with the runs that receive them.

For each propel action (pass, shoot) the nearest run/dribble end of every
other player is a candidate reception point. Matching is greedy and local:
each (propel, receiver) pair is decided on its own, with no global
assignment across pairs.
"""

import logging
import math
from typing import List, Optional

from .graph import TimelineEdge, TimelineGraph, end_node
from .motion import end_position
from .schema import ActionType, DrillState

logger = logging.getLogger(__name__)

PROXIMITY_PX = 100  # Receiver must finish this close to the ball's arrival

RECEIVING_TYPES = (ActionType.RUN, ActionType.DRIBBLE)


def detect_synchronizations(
    state: DrillState,
    graph: TimelineGraph,
    proximity: float = PROXIMITY_PX,
    log: Optional[logging.Logger] = None,
) -> List[TimelineEdge]:
    """
    Add zero-duration sync edges from propel ends to receiver ends.

    Args:
        state: The drill snapshot the graph was built from
        graph: Graph to extend in place
        proximity: Maximum distance (px) between ball arrival and receiver end
        log: Logger to report matches on (module logger by default)

    Returns:
        The sync edges that were added
    """
    log = log or logger
    added = []

    for s_idx, sender in enumerate(state.players):
        for a_idx, action in enumerate(sender.actions):
            if not action.is_propel:
                continue

            ball_x, ball_y = end_position(action)

            for r_idx, receiver in enumerate(state.players):
                if r_idx == s_idx:
                    continue

                best_dist = math.inf
                best_idx = -1
                for c_idx, candidate in enumerate(receiver.actions):
                    if candidate.type not in RECEIVING_TYPES:
                        continue
                    cx, cy = end_position(candidate)
                    dist = math.hypot(ball_x - cx, ball_y - cy)
                    if dist < best_dist:
                        best_dist = dist
                        best_idx = c_idx

                if best_idx < 0:
                    continue

                if best_dist < proximity:
                    edge = graph.add_edge(TimelineEdge(
                        source=end_node(s_idx, a_idx),
                        target=end_node(r_idx, best_idx),
                        min_duration=0.0,
                        is_sync=True,
                    ))
                    added.append(edge)
                    log.info(
                        "[SYNC] %s %s -> receiver %s action %d (dist=%.0fpx)",
                        action.type.value, sender.id, receiver.id, best_idx, best_dist
                    )
                else:
                    log.debug(
                        "[SYNC] No sync: nearest receiver %s action %d dist=%.0fpx (threshold=%.0fpx)",
                        receiver.id, best_idx, best_dist, proximity
                    )

    return added
