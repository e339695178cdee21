"""
Slack Adjuster - Turn spare time on each action into speed and delay.

Walks every action edge once against a fixed completion-time table. Only
unset speeds and "auto" pre-events are rewritten; post-events are never
touched. There is no re-propagation after an adjustment.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .graph import TimelineGraph
from .motion import (
    EVENT_AUTO,
    MAX_PLAYER_SPEED,
    MIN_PLAYER_SPEED,
    format_wait_event,
    is_event_auto,
    path_length,
    px_per_sec_to_speed_percent,
)
from .schema import DrillAction
from .sync import RECEIVING_TYPES

logger = logging.getLogger(__name__)

SLACK_EPSILON = 0.05  # seconds


class Decision(str, Enum):
    TIGHT = "tight"
    RECEIVER_DELAY = "receiver_delay"
    SPEED_SET = "speed_set"
    MIN_SPEED_DELAY = "min_speed_delay"
    PINNED = "pinned"


@dataclass
class SlackAdjustment:
    """What happened to one action during the adjustment pass"""
    player_id: str
    action_index: int
    available: float
    required: float
    slack: float
    decision: Decision
    wait_before: float = 0.0


def _speed_editable(action: DrillAction) -> bool:
    return action.speed is None


def _pre_event_editable(action: DrillAction) -> bool:
    return is_event_auto(action.config.pre_event)


def _apply_wait(action: DrillAction, wait: float):
    """Write a delay into waitBefore and, when positive, into the pre-event"""
    action.wait_before = wait
    if wait > 0:
        action.config.pre_event = format_wait_event(wait)


def adjust_slack(
    graph: TimelineGraph,
    completion_times: Dict[str, float],
    epsilon: float = SLACK_EPSILON,
    log: Optional[logging.Logger] = None,
) -> List[SlackAdjustment]:
    """
    Redistribute each action's slack into speed and/or waitBefore.

    Policy:
    - Tight (slack <= epsilon): a run/dribble feeding a sync node with no
      speed is pushed to max speed; an auto pre-event is reset to "auto"
      with no delay.
    - Receiver (run/dribble feeding a sync node, speed unset): run at max
      speed and start late instead of crawling to the reception point.
    - General (speed unset): slow down to fill the window, but never below
      MIN_PLAYER_SPEED for players; the rest becomes waitBefore. Balls are
      not subject to the floor.

    Args:
        graph: Graph with sync edges already added
        completion_times: Output of compute_completion_times
        epsilon: Slack (seconds) considered zero
        log: Logger to report receiver delays on

    Returns:
        One SlackAdjustment per action, in edge order
    """
    log = log or logger
    sync_nodes = graph.sync_nodes()
    adjustments = []

    for edge in graph.action_edges:
        ref = edge.action_ref
        action = ref.action

        available = completion_times.get(edge.target, 0.0) - completion_times.get(edge.source, 0.0)
        required = edge.min_duration
        slack = available - required
        feeds_sync = edge.target in sync_nodes and action.type in RECEIVING_TYPES

        record = SlackAdjustment(
            player_id=ref.player.id,
            action_index=ref.action_index,
            available=available,
            required=required,
            slack=slack,
            decision=Decision.PINNED,
        )
        adjustments.append(record)

        if slack <= epsilon:
            record.decision = Decision.TIGHT
            if feeds_sync and _speed_editable(action):
                action.speed = px_per_sec_to_speed_percent(MAX_PLAYER_SPEED)
            if _pre_event_editable(action):
                action.wait_before = 0.0
                action.config.pre_event = EVENT_AUTO
            continue

        if not _speed_editable(action):
            continue

        length = path_length(action)

        if feeds_sync:
            wait = max(0.0, available - length / MAX_PLAYER_SPEED)
            action.speed = px_per_sec_to_speed_percent(MAX_PLAYER_SPEED)
            record.decision = Decision.RECEIVER_DELAY
            if _pre_event_editable(action):
                _apply_wait(action, wait)
                record.wait_before = wait
            log.info(
                "[ADJUST] Receiver %s %s: waitBefore=%.2fs available=%.2fs",
                ref.player.id, action.type.value, wait, available
            )
            continue

        desired = length / available
        if desired >= MIN_PLAYER_SPEED or action.is_propel:
            action.speed = px_per_sec_to_speed_percent(desired)
            wait = 0.0
            record.decision = Decision.SPEED_SET
        else:
            action.speed = px_per_sec_to_speed_percent(MIN_PLAYER_SPEED)
            wait = max(0.0, available - length / MIN_PLAYER_SPEED)
            record.decision = Decision.MIN_SPEED_DELAY

        if _pre_event_editable(action):
            _apply_wait(action, wait)
            record.wait_before = wait

    return adjustments
