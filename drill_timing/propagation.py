"""
Earliest-Completion Propagator.

Each node's completion time is the MAXIMUM over its incoming edges of
(predecessor time + edge duration). A receiver synchronized to a pass can
therefore never finish before the ball arrives, even though its own chain
alone would allow it. A shortest-path (minimum) pass is wrong here.
"""

from typing import Dict

from .graph import SUPER_START, TimelineGraph


def compute_completion_times(graph: TimelineGraph) -> Dict[str, float]:
    """
    Forward pass over the graph in topological order.

    Returns:
        Mapping node -> earliest feasible completion time (seconds)
    """
    times: Dict[str, float] = {SUPER_START: 0.0}

    for node in graph.topological_order():
        if node == SUPER_START:
            continue

        incoming = graph.incoming(node)
        if not incoming:
            times[node] = 0.0
            continue

        # Predecessors not yet visited (cycle fallback) count as 0
        times[node] = max(
            0.0,
            *(times.get(e.source, 0.0) + e.min_duration for e in incoming)
        )

    return times
