"""
Optimization Pipeline - Validate, optimize and report on a drill.

This is the batch entry point used by the CLI. It orchestrates:
1. Structural validation (non-blocking)
2. Timing optimization
3. Idle-time before/after
4. JSON and timeline chart outputs

Usage:
    from drill_timing.pipeline import OptimizationPipeline

    pipeline = OptimizationPipeline()
    result = pipeline.run_from_json(
        "drill.json",
        output_json="optimized.json",
        output_svg="timeline.svg"
    )
"""

import json
import logging
from typing import Optional, List
from dataclasses import dataclass, field

from .diagnostics import compute_idle_time, optimized_schedule
from .optimizer import DrillOptimizer
from .adjuster import SlackAdjustment
from .renderer import render, render_to_png
from .schema import DrillState
from .sync import PROXIMITY_PX
from .validator import validate_drill, ValidationResult


@dataclass
class PipelineResult:
    """Result of the optimization pipeline"""
    state: DrillState
    validation: ValidationResult
    idle_before: float
    idle_after: float
    adjustments: List[SlackAdjustment] = field(default_factory=list)
    sync_count: int = 0
    json_path: Optional[str] = None
    svg_path: Optional[str] = None
    png_path: Optional[str] = None

    @property
    def errors(self) -> List[str]:
        return [e.message for e in self.validation.errors]

    @property
    def warnings(self) -> List[str]:
        return [w.message for w in self.validation.warnings]


class OptimizationPipeline:
    """
    Complete pipeline for optimizing a drill snapshot.

    Example:
        pipeline = OptimizationPipeline(proximity=80)
        result = pipeline.run(state, output_svg="timeline.svg")

        print(result.idle_before, "->", result.idle_after)
        if result.errors:
            print("Errors:", result.errors)
    """

    def __init__(self, proximity: float = PROXIMITY_PX, log: Optional[logging.Logger] = None):
        self.optimizer = DrillOptimizer(proximity=proximity, log=log)

    def run(
        self,
        state: DrillState,
        output_json: Optional[str] = None,
        output_svg: Optional[str] = None,
        output_png: Optional[str] = None
    ) -> PipelineResult:
        """
        Validate and optimize a drill, then write the requested outputs.

        Validation issues never stop the optimization; they are returned
        alongside the result.

        Args:
            state: Drill snapshot, optimized in place
            output_json: Path to save the optimized drill (optional)
            output_svg: Path to save the timeline chart as SVG (optional)
            output_png: Path to save the timeline chart as PNG (optional)

        Returns:
            PipelineResult with the state, validation and file paths
        """
        validation = validate_drill(state)
        idle_before = compute_idle_time(state)

        report = self.optimizer.run(state)

        result = PipelineResult(
            state=state,
            validation=validation,
            idle_before=idle_before,
            idle_after=compute_idle_time(state),
            adjustments=report.adjustments,
            sync_count=len(report.sync_edges),
        )

        if output_svg or output_png:
            schedule = optimized_schedule(state, report.completion_times)
            arrivals = report.ball_arrivals(state)
            if output_svg:
                result.svg_path = render(schedule, output_svg, arrivals)
            if output_png:
                result.png_path = render_to_png(schedule, output_png, arrivals)

        if output_json:
            with open(output_json, 'w') as f:
                json.dump(state.to_json_dict(), f, indent=2)
            result.json_path = output_json

        return result

    def run_from_json(
        self,
        json_path: str,
        output_json: Optional[str] = None,
        output_svg: Optional[str] = None,
        output_png: Optional[str] = None
    ) -> PipelineResult:
        """Load a drill snapshot from JSON and run the pipeline on it"""
        with open(json_path) as f:
            data = json.load(f)

        state = DrillState.model_validate(data)
        return self.run(state, output_json, output_svg, output_png)


# ============================================================
# CLI
# ============================================================

def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="Synchronize drill timings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Optimize a drill and save the result
  drill-timing drill.json -o optimized.json

  # Also draw the optimized timeline
  drill-timing drill.json -o optimized.json --svg timeline.svg
        """
    )

    parser.add_argument(
        "input",
        help="Drill state JSON exported from the editor"
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Output JSON path for the optimized drill"
    )
    parser.add_argument(
        "--svg",
        type=str,
        help="Also draw the optimized timeline to this SVG"
    )
    parser.add_argument(
        "--png",
        type=str,
        help="Also draw the optimized timeline to this PNG"
    )
    parser.add_argument(
        "--proximity",
        type=float,
        default=PROXIMITY_PX,
        help=f"Reception distance threshold in px (default: {PROXIMITY_PX})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log sync matches and natural/optimized schedules"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s"
    )

    pipeline = OptimizationPipeline(proximity=args.proximity)

    try:
        result = pipeline.run_from_json(
            args.input,
            output_json=args.output,
            output_svg=args.svg,
            output_png=args.png
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    # Print summary
    print("\n" + "=" * 50)
    print(f"DRILL: {args.input}")
    print("=" * 50)
    print(f"\nPlayers: {len(result.state.players)}")
    print(f"Actions: {sum(len(p.actions) for p in result.state.players)}")
    print(f"Synchronizations: {result.sync_count}")
    print(f"Idle time: {result.idle_before:.2f}s -> {result.idle_after:.2f}s")

    # Validation results
    if result.errors:
        print("\n⚠ Validation Errors:")
        for error in result.errors:
            print(f"  ✗ {error}")

    if result.warnings:
        print("\nWarnings:")
        for warning in result.warnings:
            print(f"  ⚡ {warning}")

    # Output files
    if result.json_path or result.svg_path or result.png_path:
        print("\nGenerated Files:")
    if result.json_path:
        print(f"  JSON: {result.json_path}")
    if result.svg_path:
        print(f"  SVG: {result.svg_path}")
    if result.png_path:
        print(f"  PNG: {result.png_path}")

    return 0


if __name__ == "__main__":
    exit(main())
