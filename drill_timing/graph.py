"""
Timeline Graph - Per-player action chains joined by a super-source.

Nodes mean "player has just finished action i" plus one start node per
player and a synthetic SUPER_START. Edges carry the minimum duration of
the action they wrap. Synchronization edges (zero duration, propel end ->
receiver end) are added later by the sync detector.

The graph lives for a single optimize call.
"""

import logging
from dataclasses import dataclass
from graphlib import CycleError, TopologicalSorter
from typing import Dict, List, Optional, Set

from .motion import min_duration
from .schema import DrillAction, DrillPlayer, DrillState

logger = logging.getLogger(__name__)

SUPER_START = "SUPER_START"


def start_node(player_index: int) -> str:
    return f"start:{player_index}"


def end_node(player_index: int, action_index: int) -> str:
    return f"end:{player_index}:{action_index}"


# ============================================================
# RECORDS
# ============================================================

@dataclass
class ActionRef:
    """Back-reference from an edge to the action it wraps"""
    player: DrillPlayer
    action: DrillAction
    player_index: int
    action_index: int


@dataclass
class TimelineEdge:
    source: str
    target: str
    min_duration: float
    action_ref: Optional[ActionRef] = None
    is_sync: bool = False


# ============================================================
# GRAPH
# ============================================================

class TimelineGraph:
    """Node arena plus plain edge records with an incoming-edge index"""

    def __init__(self):
        self.nodes: List[str] = []
        self.edges: List[TimelineEdge] = []
        self._incoming: Dict[str, List[TimelineEdge]] = {}

    def add_node(self, node: str):
        if node in self._incoming:
            return
        self.nodes.append(node)
        self._incoming[node] = []

    def add_edge(self, edge: TimelineEdge) -> TimelineEdge:
        self.add_node(edge.source)
        self.add_node(edge.target)
        self.edges.append(edge)
        self._incoming[edge.target].append(edge)
        return edge

    def incoming(self, node: str) -> List[TimelineEdge]:
        return self._incoming.get(node, [])

    @property
    def action_edges(self) -> List[TimelineEdge]:
        return [e for e in self.edges if e.action_ref is not None]

    @property
    def sync_edges(self) -> List[TimelineEdge]:
        return [e for e in self.edges if e.is_sync]

    def sync_nodes(self) -> Set[str]:
        """Every node that is the source or target of a sync edge"""
        nodes = set()
        for edge in self.sync_edges:
            nodes.add(edge.source)
            nodes.add(edge.target)
        return nodes

    def topological_order(self) -> List[str]:
        """
        Nodes in dependency order.

        A cycle can only come from mutually passing players matched by the
        sync detector. In that case the insertion order is returned and the
        resulting times for the affected nodes are not guaranteed.
        """
        sorter = TopologicalSorter({
            node: [e.source for e in self._incoming[node]]
            for node in self.nodes
        })
        try:
            return list(sorter.static_order())
        except CycleError as e:
            logger.warning("[GRAPH] Cycle detected, falling back to insertion order: %s", e.args[1])
            return list(self.nodes)


# ============================================================
# BUILDER
# ============================================================

def build_timeline_graph(state: DrillState) -> TimelineGraph:
    """
    Build one chain per player and join all chains to SUPER_START.

    Args:
        state: The drill snapshot; actions are referenced, not copied

    Returns:
        A fresh TimelineGraph without sync edges
    """
    graph = TimelineGraph()
    graph.add_node(SUPER_START)

    for p_idx, player in enumerate(state.players):
        prev = start_node(p_idx)
        graph.add_node(prev)

        for a_idx, action in enumerate(player.actions):
            target = end_node(p_idx, a_idx)
            graph.add_edge(TimelineEdge(
                source=prev,
                target=target,
                min_duration=min_duration(action),
                action_ref=ActionRef(player, action, p_idx, a_idx),
            ))
            prev = target

    for p_idx in range(len(state.players)):
        graph.add_edge(TimelineEdge(SUPER_START, start_node(p_idx), 0.0))

    return graph
