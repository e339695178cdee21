"""
Drill Validation - Structural diagnostics for drill snapshots.

The optimizer never validates its input; this module is the separate,
non-blocking check the editor and the CLI can run. It reports:
1. Chain continuity (each action starts where the previous one left the player)
2. Speed and delay ranges
3. Timing-event syntax
"""

import math
from typing import List
from dataclasses import dataclass, field

from .motion import EVENT_AUTO, EVENT_IMMEDIATE, final_position, parse_wait_event
from .schema import DrillPlayer, DrillState, PathType


# ============================================================
# VALIDATION RESULT
# ============================================================

@dataclass
class ValidationIssue:
    """A single validation issue"""
    message: str
    severity: str = "error"  # "error", "warning", "info"

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


@dataclass
class ValidationResult:
    """Complete validation result"""
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """True if no errors (warnings are OK)"""
        return not any(issue.is_error for issue in self.issues)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def add(self, message: str, severity: str = "error"):
        self.issues.append(ValidationIssue(message, severity))

    def add_error(self, message: str):
        self.add(message, "error")

    def add_warning(self, message: str):
        self.add(message, "warning")

    def add_info(self, message: str):
        self.add(message, "info")

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "issues": [{"message": i.message, "severity": i.severity} for i in self.issues],
        }


# ============================================================
# STRUCTURAL VALIDATOR
# ============================================================

def is_known_event(value: str) -> bool:
    text = (value or "").strip().lower()
    if text in (EVENT_AUTO, EVENT_IMMEDIATE):
        return True
    wait = parse_wait_event(text)
    return wait is not None and wait >= 0


class StructuralValidator:
    """
    Validates the structural correctness of a drill snapshot.

    Checks:
    - Actions of a player form a continuous chain
    - Explicit speeds are percentages
    - Delays are non-negative
    - Pre/post events are "auto", "immediate" or "wait:N"
    """

    CONTINUITY_TOLERANCE = 1.0  # px

    def __init__(self, state: DrillState):
        self.state = state

    def validate(self) -> ValidationResult:
        """Run all structural validations"""
        result = ValidationResult()

        for player in self.state.players:
            self._check_continuity(player, result)
            self._check_fields(player, result)

        self._check_ball_holder(result)

        return result

    def _check_continuity(self, player: DrillPlayer, result: ValidationResult):
        """Verify action i+1 starts where the player stood after action i"""
        for i, (prev, nxt) in enumerate(zip(player.actions, player.actions[1:])):
            x, y = final_position(prev)
            gap = math.hypot(nxt.start_x - x, nxt.start_y - y)
            if gap > self.CONTINUITY_TOLERANCE:
                result.add_warning(
                    f"Player {player.id}: action {i + 2} starts {gap:.1f}px away "
                    f"from where action {i + 1} left the player"
                )

    def _check_fields(self, player: DrillPlayer, result: ValidationResult):
        """Verify speed, delay and timing-event values"""
        for i, action in enumerate(player.actions):
            label = f"Player {player.id} action {i + 1} ({action.type.value})"

            if action.speed is not None and not (0 <= action.speed <= 100):
                result.add_error(f"{label}: speed {action.speed} is outside 0-100")

            if action.wait_before < 0:
                result.add_error(f"{label}: waitBefore {action.wait_before} is negative")

            for name, value in (("preEvent", action.config.pre_event),
                                ("postEvent", action.config.post_event)):
                if not is_known_event(value):
                    result.add_warning(f"{label}: unrecognised {name} '{value}'")

            if action.path_type == PathType.FREEHAND and not action.points:
                result.add_info(f"{label}: freehand path without points, length is estimated")

    def _check_ball_holder(self, result: ValidationResult):
        """Verify someone holds the ball when the drill propels it"""
        propels = any(a.is_propel for p in self.state.players for a in p.actions)
        if propels and not any(p.has_ball for p in self.state.players):
            result.add_warning("Drill has passes or shots but no player holds the ball")


def validate_drill(state: DrillState) -> ValidationResult:
    """
    Run all validations on a drill snapshot.

    Args:
        state: The drill to validate (never mutated)

    Returns:
        ValidationResult
    """
    return StructuralValidator(state).validate()
