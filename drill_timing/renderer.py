"""
Timeline Renderer - Generates SVG/PNG charts from drill schedules.

This module renders:
- One lane per player
- One bar per action, coloured by action type
- Hatched segments for waitBefore delays
- Optional markers where a ball arrives at a receiver
"""

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend

from matplotlib.figure import Figure
import matplotlib.patches as patches
import numpy as np
from typing import Dict, List, Optional, Tuple

from .diagnostics import ScheduledAction


# ============================================================
# STYLING
# ============================================================

ACTION_COLORS = {
    "run": "#f1fa3c",      # Yellow, like run arrows on the field
    "dribble": "#6fbf4a",  # Green
    "pass": "#457b9d",     # Blue
    "shoot": "#e63946",    # Red
    "tackle": "#f4a261",   # Orange
    "turn": "#b0b0b0",     # Gray
}

WAIT_COLOR = "#dddddd"
LANE_HEIGHT = 0.6
BACKGROUND = "#1e2a1e"


# ============================================================
# TIMELINE RENDERER
# ============================================================

class TimelineRenderer:
    """Draws a schedule as horizontal bars, one lane per player"""

    def __init__(self, ax, schedule: List[ScheduledAction]):
        self.ax = ax
        self.schedule = schedule
        self.lanes: Dict[str, int] = {}
        for item in schedule:
            self.lanes.setdefault(item.player_id, len(self.lanes))

    @property
    def end_time(self) -> float:
        return max((item.end for item in self.schedule), default=0.0)

    def draw(self, ball_arrivals: Optional[List[Tuple[str, float]]] = None):
        """Draw lanes, bars, delays and sync markers"""
        self.ax.set_facecolor(BACKGROUND)

        for item in self.schedule:
            self._draw_wait(item)
            self._draw_action(item)

        if ball_arrivals:
            for player_id, t in ball_arrivals:
                self._draw_sync_marker(player_id, t)

        self._draw_axes()

    def _lane_y(self, player_id: str) -> float:
        return self.lanes[player_id]

    def _draw_wait(self, item: ScheduledAction):
        if item.wait_before <= 0:
            return
        y = self._lane_y(item.player_id)
        self.ax.add_patch(patches.Rectangle(
            (item.start - item.wait_before, y - LANE_HEIGHT / 2),
            item.wait_before, LANE_HEIGHT,
            facecolor="none", edgecolor=WAIT_COLOR, hatch="//", lw=0.8, zorder=2
        ))

    def _draw_action(self, item: ScheduledAction):
        y = self._lane_y(item.player_id)
        color = ACTION_COLORS.get(item.action_type, ACTION_COLORS["turn"])
        self.ax.add_patch(patches.Rectangle(
            (item.start, y - LANE_HEIGHT / 2),
            max(item.duration, 0.01), LANE_HEIGHT,
            facecolor=color, edgecolor="black", lw=0.8, zorder=3
        ))

        label = item.action_type
        if item.speed is not None:
            label += f" {item.speed:g}%"
        self.ax.annotate(
            label,
            (item.start + item.duration / 2, y),
            ha='center', va='center',
            fontsize=6, fontweight='bold', color='black',
            zorder=4
        )

    def _draw_sync_marker(self, player_id: str, t: float):
        """Draw the moment a ball reaches a receiver"""
        if player_id not in self.lanes:
            return
        y = self._lane_y(player_id)
        self.ax.scatter(
            t, y + LANE_HEIGHT / 2 + 0.1, s=40, marker="v",
            c="white", edgecolors="black", linewidths=0.8, zorder=5
        )

    def _draw_axes(self):
        end = max(self.end_time, 1.0)
        self.ax.set_xlim(0, end * 1.05)
        self.ax.set_ylim(-0.75, len(self.lanes) - 0.25)
        self.ax.invert_yaxis()

        step = 0.5 if end <= 5 else 1.0
        self.ax.set_xticks(np.arange(0, end + step, step))
        self.ax.set_yticks(list(self.lanes.values()))
        self.ax.set_yticklabels(list(self.lanes.keys()))
        self.ax.set_xlabel("time (s)")
        self.ax.grid(axis="x", color="#3a4a3a", lw=0.5, zorder=0)


# ============================================================
# MAIN RENDER FUNCTIONS
# ============================================================

def _figure(schedule: List[ScheduledAction], ball_arrivals: Optional[List[Tuple[str, float]]], width: float):
    lanes = len({item.player_id for item in schedule}) or 1
    # Figure is not registered with pyplot, so concurrent renders share no state
    fig = Figure(figsize=(width, 1 + 0.7 * lanes))
    ax = fig.subplots()
    TimelineRenderer(ax, schedule).draw(ball_arrivals)
    return fig


def render(
    schedule: List[ScheduledAction],
    output_path: str,
    ball_arrivals: Optional[List[Tuple[str, float]]] = None,
    width: float = 10,
    dpi: int = 100
) -> str:
    """
    Render a schedule to an SVG file.

    Args:
        schedule: Output of natural_schedule or optimized_schedule
        output_path: Path to save the SVG
        ball_arrivals: Optional (player id, time) ball arrival markers
        width: Figure width in inches (height follows the lane count)
        dpi: Resolution for raster elements

    Returns:
        The output path
    """
    fig = _figure(schedule, ball_arrivals, width)
    fig.savefig(output_path, format="svg", bbox_inches="tight", dpi=dpi)

    return output_path


def render_to_png(
    schedule: List[ScheduledAction],
    output_path: str,
    ball_arrivals: Optional[List[Tuple[str, float]]] = None,
    width: float = 10,
    dpi: int = 150
) -> str:
    """Render a schedule to a PNG file"""
    fig = _figure(schedule, ball_arrivals, width)
    fig.savefig(output_path, format="png", bbox_inches="tight", dpi=dpi)

    return output_path
