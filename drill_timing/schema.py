"""
Drill State Schema - Core data models using Pydantic.

This module defines the drill snapshot exchanged with the editor and the
playback engine. Field names on the wire are camelCase; Python attributes
are snake_case. Unknown per-kind extras (gesture, dribbleType, radius...)
are kept so a round-trip through the optimizer never loses editor data.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class ActionType(str, Enum):
    RUN = "run"
    DRIBBLE = "dribble"
    PASS = "pass"
    SHOOT = "shoot"
    TACKLE = "tackle"
    TURN = "turn"


class BallInteraction(str, Enum):
    NONE = "none"
    CARRY = "carry"    # Ball moves with the player
    PROPEL = "propel"  # Ball is released and travels to the action end


class PathType(str, Enum):
    STRAIGHT = "straight"
    FREEHAND = "freehand"


# Motion semantics are derived from the kind, never set independently
MOVES_PLAYER = {
    ActionType.RUN: True,
    ActionType.DRIBBLE: True,
    ActionType.PASS: False,
    ActionType.SHOOT: False,
    ActionType.TACKLE: False,
    ActionType.TURN: False,
}

BALL_INTERACTION = {
    ActionType.RUN: BallInteraction.NONE,
    ActionType.DRIBBLE: BallInteraction.CARRY,
    ActionType.PASS: BallInteraction.PROPEL,
    ActionType.SHOOT: BallInteraction.PROPEL,
    ActionType.TACKLE: BallInteraction.NONE,
    ActionType.TURN: BallInteraction.NONE,
}


# ============================================================
# CORE TYPES
# ============================================================

class Point(BaseModel):
    """A point in canvas pixels"""
    x: float
    y: float


class ActionConfig(BaseModel):
    """
    Timing events around an action.

    Each event is one of "auto", "immediate" or "wait:N". Only "auto"
    events may be rewritten by the optimizer.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    pre_event: str = Field(default="auto", alias="preEvent")
    post_event: str = Field(default="auto", alias="postEvent")


# ============================================================
# ENTITIES
# ============================================================

class DrillAction(BaseModel):
    """One atomic motion or interaction segment of a player"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = ""
    type: ActionType
    start_x: float = Field(alias="startX")
    start_y: float = Field(alias="startY")
    end_x: float = Field(alias="endX")
    end_y: float = Field(alias="endY")
    config: ActionConfig = Field(default_factory=ActionConfig)
    path_type: PathType = Field(default=PathType.STRAIGHT, alias="pathType")
    points: List[Point] = Field(default_factory=list)
    scene_index: int = Field(default=0, alias="sceneIndex")

    # Optimization params. speed None means the optimizer may assign one.
    speed: Optional[float] = Field(default=None, description="Speed percentage (0-100)")
    wait_before: float = Field(default=0.0, alias="waitBefore")

    @property
    def moves_player(self) -> bool:
        return MOVES_PLAYER[self.type]

    @property
    def ball_interaction(self) -> BallInteraction:
        return BALL_INTERACTION[self.type]

    @property
    def is_propel(self) -> bool:
        return self.ball_interaction == BallInteraction.PROPEL


class DrillPlayer(BaseModel):
    """A drill participant with an ordered action sequence"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    x: float = 0.0
    y: float = 0.0
    initial_x: float = Field(default=0.0, alias="initialX")
    initial_y: float = Field(default=0.0, alias="initialY")
    number: str = ""
    team: str = ""
    has_ball: bool = Field(default=False, alias="hasBall")
    actions: List[DrillAction]


# ============================================================
# COMPLETE DRILL STATE
# ============================================================

class DrillState(BaseModel):
    """
    One scene's worth of players and their action sequences.

    This is the structure the optimizer mutates in place and returns.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    players: List[DrillPlayer]

    def to_json_dict(self) -> dict:
        """Serialize back to the editor's camelCase wire format"""
        return self.model_dump(mode="json", by_alias=True)
