"""
Action-Duration Model - Path lengths and traversal times for actions.

The speed mapping here is shared with the playback engine. If the two
diverge, predicted synchronization visibly drifts from the animation.
"""

import math
from typing import Callable, Dict, Optional, Tuple

from .schema import ActionType, DrillAction, PathType


# ============================================================
# CONSTANTS
# ============================================================

BASE_SPEED_PX_PER_SEC = 50
MAX_ADDITIONAL_SPEED_PX_PER_SEC = 350
DEFAULT_SPEED_PERCENT = 50

MAX_PLAYER_SPEED = 350  # px/s, run/dribble with no explicit speed
MIN_PLAYER_SPEED = 100  # px/s, floor when slowing a player down

INSTANT_ACTION_DURATION = 0.5  # turn/tackle
ZERO_LENGTH_DURATION = 0.5

# Freehand path whose polyline was not sent
FREEHAND_FALLBACK_FACTOR = 1.2

EVENT_AUTO = "auto"
EVENT_IMMEDIATE = "immediate"
EVENT_WAIT_PREFIX = "wait:"


# ============================================================
# SPEED MAPPING
# ============================================================

def speed_to_px_per_sec(pct: float) -> float:
    """Convert a speed percentage (0-100) to px/s, as the playback engine does"""
    return BASE_SPEED_PX_PER_SEC + (pct / 100) * MAX_ADDITIONAL_SPEED_PX_PER_SEC


def px_per_sec_to_speed_percent(px_per_sec: float) -> int:
    """Inverse of speed_to_px_per_sec, rounded and clamped to [0, 100]"""
    pct = ((px_per_sec - BASE_SPEED_PX_PER_SEC) / MAX_ADDITIONAL_SPEED_PX_PER_SEC) * 100
    return max(0, min(100, round(pct)))


# ============================================================
# GEOMETRY
# ============================================================

def path_length(action: DrillAction) -> float:
    """Distance covered by an action, in canvas pixels"""
    straight = math.hypot(action.end_x - action.start_x, action.end_y - action.start_y)
    if action.path_type == PathType.STRAIGHT:
        return straight

    if action.points:
        return sum(
            math.hypot(b.x - a.x, b.y - a.y)
            for a, b in zip(action.points, action.points[1:])
        )
    return straight * FREEHAND_FALLBACK_FACTOR


def end_position(action: DrillAction) -> Tuple[float, float]:
    """Where the action (or the ball it propels) finishes"""
    if action.path_type == PathType.FREEHAND and action.points:
        last = action.points[-1]
        return last.x, last.y
    return action.end_x, action.end_y


def final_position(action: DrillAction) -> Tuple[float, float]:
    """Where the player stands once the action is over"""
    if not action.moves_player:
        return action.start_x, action.start_y
    if action.path_type == PathType.FREEHAND and not action.points:
        return action.start_x, action.start_y
    return end_position(action)


# ============================================================
# DURATIONS
# ============================================================

def _travel_time(length: float, px_per_sec: float) -> float:
    if length == 0:
        return ZERO_LENGTH_DURATION
    return length / px_per_sec


def _propel_duration(action: DrillAction) -> float:
    pct = action.speed if action.speed is not None else DEFAULT_SPEED_PERCENT
    return _travel_time(path_length(action), speed_to_px_per_sec(pct))


def _displacement_duration(action: DrillAction) -> float:
    if action.speed is not None:
        px_per_sec = speed_to_px_per_sec(action.speed)
    else:
        px_per_sec = MAX_PLAYER_SPEED
    return _travel_time(path_length(action), px_per_sec)


def _instant_duration(action: DrillAction) -> float:
    return INSTANT_ACTION_DURATION


_DURATION_BY_KIND: Dict[ActionType, Callable[[DrillAction], float]] = {
    ActionType.RUN: _displacement_duration,
    ActionType.DRIBBLE: _displacement_duration,
    ActionType.PASS: _propel_duration,
    ActionType.SHOOT: _propel_duration,
    ActionType.TACKLE: _instant_duration,
    ActionType.TURN: _instant_duration,
}


def min_duration(action: DrillAction) -> float:
    """
    Time (seconds) an action needs at its current speed.

    Unset speeds fall back to the defaults the playback engine uses:
    DEFAULT_SPEED_PERCENT for the ball, MAX_PLAYER_SPEED for players.
    A zero-length path still takes ZERO_LENGTH_DURATION so it shows
    up as a visible beat.
    """
    return _DURATION_BY_KIND[action.type](action)


# ============================================================
# TIMING EVENTS
# ============================================================

def is_event_auto(value: Optional[str]) -> bool:
    """True if a pre/post event is in "auto" mode and may be rewritten"""
    return (value or "").strip().lower() == EVENT_AUTO


def format_wait_event(seconds: float) -> str:
    return f"{EVENT_WAIT_PREFIX}{round(seconds, 3)}"


def parse_wait_event(value: Optional[str]) -> Optional[float]:
    """Seconds of a "wait:N" event, or None if the event is not a wait"""
    text = (value or "").strip().lower()
    if not text.startswith(EVENT_WAIT_PREFIX):
        return None
    try:
        return float(text[len(EVENT_WAIT_PREFIX):])
    except ValueError:
        return None
