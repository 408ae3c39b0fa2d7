"""ScheduleBar value object: a schedule projected onto the time axis."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

PROJECT_COLORS: tuple[str, ...] = (
    "rgb(59, 130, 246)",  # blue
    "rgb(16, 185, 129)",  # green
    "rgb(234, 179, 8)",  # yellow
    "rgb(168, 85, 247)",  # purple
    "rgb(99, 102, 241)",  # indigo
    "rgb(236, 72, 153)",  # pink
    "rgb(249, 115, 22)",  # orange
    "rgb(20, 184, 166)",  # teal
    "rgb(6, 182, 212)",  # cyan
    "rgb(132, 204, 22)",  # lime
    "rgb(16, 185, 129)",  # emerald
    "rgb(14, 165, 233)",  # sky
    "rgb(239, 68, 68)",  # red
)


def project_color(project_id: int) -> str:
    """Stable bar color for a project."""
    return PROJECT_COLORS[project_id % len(PROJECT_COLORS)]


@dataclass(frozen=True)
class ScheduleBar:
    schedule_id: int
    project_id: int
    bay_id: int
    track: int
    left: int
    width: int
    color: str
    start_date: date
    end_date: date
    clipped_start: bool = False
    clipped_end: bool = False

    @property
    def right(self) -> int:
        return self.left + self.width
