"""
Drill Diagnostics - Idle time and per-action schedule reports.

Nothing here feeds back into scheduling. These are evaluation metrics and
the natural/optimized timing tables written to the log around an optimize
call.
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .graph import end_node, start_node
from .motion import min_duration
from .schema import DrillState

logger = logging.getLogger(__name__)


# ============================================================
# IDLE TIME
# ============================================================

def compute_idle_time(state: DrillState) -> float:
    """
    Total time players spend waiting after having done something.

    A waitBefore on a player's first action is not idle time: the player
    has not moved yet. Every later non-zero waitBefore counts.
    """
    total = 0.0
    for player in state.players:
        clock = 0.0
        has_moved = False
        for action in player.actions:
            wait = action.wait_before or 0.0
            start = clock + wait
            if has_moved and wait > 0:
                total += wait
            has_moved = True
            clock = start + min_duration(action)
    return total


# ============================================================
# SCHEDULE REPORT
# ============================================================

@dataclass
class ScheduledAction:
    """Start/end window of one action on the shared clock"""
    player_id: str
    action_index: int
    action_type: str
    start: float
    end: float
    wait_before: float = 0.0
    speed: Optional[float] = None
    pre_event: str = ""

    @property
    def duration(self) -> float:
        return self.end - self.start


def natural_schedule(state: DrillState) -> List[ScheduledAction]:
    """Each player's actions back to back at current speeds, no sync, no waits"""
    schedule = []
    for player in state.players:
        clock = 0.0
        for idx, action in enumerate(player.actions):
            duration = min_duration(action)
            schedule.append(ScheduledAction(
                player_id=player.id,
                action_index=idx,
                action_type=action.type.value,
                start=clock,
                end=clock + duration,
                speed=action.speed,
                pre_event=action.config.pre_event,
            ))
            clock += duration
    return schedule


def optimized_schedule(state: DrillState, completion_times: Dict[str, float]) -> List[ScheduledAction]:
    """
    Action windows after optimization.

    Each action starts at its predecessor's completion time plus its
    waitBefore and lasts as long as its (possibly reassigned) speed allows.
    """
    schedule = []
    for p_idx, player in enumerate(state.players):
        prev = start_node(p_idx)
        for a_idx, action in enumerate(player.actions):
            start = completion_times.get(prev, 0.0) + (action.wait_before or 0.0)
            schedule.append(ScheduledAction(
                player_id=player.id,
                action_index=a_idx,
                action_type=action.type.value,
                start=start,
                end=start + min_duration(action),
                wait_before=action.wait_before or 0.0,
                speed=action.speed,
                pre_event=action.config.pre_event,
            ))
            prev = end_node(p_idx, a_idx)
    return schedule


def log_schedule(title: str, schedule: List[ScheduledAction], log: Optional[logging.Logger] = None):
    log = log or logger
    log.info("========== %s ==========", title)
    for item in schedule:
        log.info(
            "  [%s] action %d (%s): start=%.2fs end=%.2fs waitBefore=%.2fs speed=%s preEvent=%s",
            item.player_id, item.action_index, item.action_type,
            item.start, item.end, item.wait_before,
            "-" if item.speed is None else item.speed,
            item.pre_event or "-",
        )


def log_test_case(state: DrillState, log: Optional[logging.Logger] = None):
    """Dump the incoming state as JSON so a failing drill can become a test fixture"""
    log = log or logger
    if log.isEnabledFor(logging.DEBUG):
        log.debug("[OPTIMIZE] Test case data:\n%s", json.dumps(state.to_json_dict(), indent=2))
