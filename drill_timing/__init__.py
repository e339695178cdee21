"""
Drill Timing Optimizer

Synchronizes the players of a drill so that receivers reach the reception
point when the ball does, without touching values the coach pinned.

Quick Start:
    from drill_timing import DrillState, optimize

    state = DrillState.model_validate(payload)
    optimize(state)
    print(state.to_json_dict())

Batch Usage:
    from drill_timing import OptimizationPipeline

    pipeline = OptimizationPipeline()
    result = pipeline.run_from_json("drill.json", output_svg="timeline.svg")
    print(result.idle_before, "->", result.idle_after)
"""

from .schema import (
    # Enums
    ActionType,
    BallInteraction,
    PathType,

    # Core types
    Point,
    ActionConfig,

    # Entities
    DrillAction,
    DrillPlayer,
    DrillState,
)

from .motion import (
    speed_to_px_per_sec,
    px_per_sec_to_speed_percent,
    path_length,
    end_position,
    min_duration,
)
from .graph import TimelineGraph, TimelineEdge, build_timeline_graph
from .sync import detect_synchronizations
from .propagation import compute_completion_times
from .adjuster import adjust_slack, SlackAdjustment, Decision
from .diagnostics import compute_idle_time, natural_schedule, optimized_schedule, ScheduledAction
from .optimizer import optimize, DrillOptimizer, OptimizationReport
from .validator import validate_drill, ValidationResult
from .pipeline import OptimizationPipeline, PipelineResult

__all__ = [
    # Enums
    "ActionType",
    "BallInteraction",
    "PathType",

    # Core types
    "Point",
    "ActionConfig",

    # Entities
    "DrillAction",
    "DrillPlayer",
    "DrillState",

    # Functions
    "speed_to_px_per_sec",
    "px_per_sec_to_speed_percent",
    "path_length",
    "end_position",
    "min_duration",
    "build_timeline_graph",
    "detect_synchronizations",
    "compute_completion_times",
    "adjust_slack",
    "compute_idle_time",
    "natural_schedule",
    "optimized_schedule",
    "optimize",
    "validate_drill",

    # Classes
    "TimelineGraph",
    "TimelineEdge",
    "SlackAdjustment",
    "Decision",
    "ScheduledAction",
    "DrillOptimizer",
    "OptimizationReport",
    "ValidationResult",
    "OptimizationPipeline",
    "PipelineResult",
]

__version__ = "1.0.0"
