"""
Bay Utilization

Load indicators shown alongside the bay schedule:

- a per-bay capacity badge derived from how many active schedules the bay
  carries against its staffed weekly hours;
- per-week utilization of each bay, derived from which projects have a
  bay-floor phase (PRODUCTION, IT, NTC) running in that week.

Phase windows split a schedule's span sequentially by the project's phase
percentages, each rounded to whole days.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta

from ....core.config import settings
from ..entities.bay import Bay
from ..entities.project import Project
from ..entities.schedule import ManufacturingSchedule
from ..value_objects.enums import CapacityStatus, Phase
from .capacity import weekly_capacity_hours

ESTIMATED_WEEKLY_HOURS_PER_PROJECT = 40
UNSTAFFED_PERCENT_PER_PROJECT = 50
NEAR_CAPACITY_PERCENT = 50
AT_CAPACITY_PERCENT = 100

PHASE_ORDER = (
    Phase.FAB,
    Phase.PAINT,
    Phase.PRODUCTION,
    Phase.IT,
    Phase.NTC,
    Phase.QC,
)


@dataclass(frozen=True)
class BayCapacityInfo:
    bay_id: int
    active_schedules: int
    weekly_capacity_hours: float
    percentage: int
    status: CapacityStatus


@dataclass(frozen=True)
class PhaseWindow:
    phase: Phase
    start: date
    end: date  # exclusive

    @property
    def days(self) -> int:
        return (self.end - self.start).days


@dataclass(frozen=True)
class PhaseAlignment:
    project_id: int
    project_number: str
    phase: Phase
    start: date
    end: date


@dataclass(frozen=True)
class WeeklyUtilization:
    week_start: date
    week_end: date  # Sunday, inclusive
    bay_id: int
    bay_name: str
    team: str
    project_count: int
    utilization_percentage: int
    aligned_phases: tuple[PhaseAlignment, ...] = field(default_factory=tuple)

    @property
    def week_key(self) -> str:
        return self.week_start.isoformat()


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _status_for(percentage: int) -> CapacityStatus:
    if percentage >= AT_CAPACITY_PERCENT:
        return CapacityStatus.AT_CAPACITY
    if percentage >= NEAR_CAPACITY_PERCENT:
        return CapacityStatus.NEAR_CAPACITY
    return CapacityStatus.AVAILABLE


def bay_capacity_status(
    bay: Bay, schedules: Iterable[ManufacturingSchedule]
) -> BayCapacityInfo:
    """
    Capacity badge for one bay.

    Each active schedule is assumed to need a standard 40 hour week from the
    bay. An unstaffed bay counts 50% per schedule. The result is capped at
    100%.
    """
    active = sum(
        1 for s in schedules if s.bay_id == bay.id and s.status.is_active
    )
    capacity = weekly_capacity_hours(bay)

    percentage = 0
    if active > 0:
        if capacity > 0:
            percentage = _round_half_up(
                active * ESTIMATED_WEEKLY_HOURS_PER_PROJECT / capacity * 100
            )
        else:
            percentage = active * UNSTAFFED_PERCENT_PER_PROJECT
    percentage = min(percentage, AT_CAPACITY_PERCENT)

    return BayCapacityInfo(
        bay_id=bay.id,
        active_schedules=active,
        weekly_capacity_hours=capacity,
        percentage=percentage,
        status=_status_for(percentage),
    )


def calculate_phase_windows(
    schedule: ManufacturingSchedule, project: Project
) -> dict[Phase, PhaseWindow]:
    """
    Split a schedule's span into consecutive phase windows.

    Each phase gets round(span_days * percentage / 100) days, in FAB, PAINT,
    PRODUCTION, IT, NTC, QC order. Percentages need not sum to 100, so the
    windows may stop short of or run past ``end_date``.
    """
    total_days = schedule.duration_days
    windows: dict[Phase, PhaseWindow] = {}
    current = schedule.start_date
    for phase in PHASE_ORDER:
        days = _round_half_up(total_days * project.phase_percentage(phase) / 100)
        end = current + timedelta(days=days)
        windows[phase] = PhaseWindow(phase=phase, start=current, end=end)
        current = end
    return windows


def utilization_percentage(project_count: int) -> int:
    """Map concurrent projects in a bay-week to 0, 50, 85 or 115 percent."""
    if project_count <= 0:
        return 0
    if project_count == 1:
        return 50
    if project_count == 2:
        return 85
    return 115


def week_start_for(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def phase_alignments_for_week(
    week_start: date,
    week_end: date,
    schedules: Iterable[ManufacturingSchedule],
    projects: dict[int, Project],
    bay_id: int,
) -> list[PhaseAlignment]:
    """
    Bay-floor phases of ``bay_id``'s schedules that touch the week.

    ``week_end`` is inclusive. Empty phases do not count.
    """
    alignments: list[PhaseAlignment] = []
    for schedule in schedules:
        if schedule.bay_id != bay_id:
            continue
        project = projects.get(schedule.project_id)
        if project is None:
            continue

        windows = calculate_phase_windows(schedule, project)
        for phase in PHASE_ORDER:
            if not phase.counts_toward_utilization:
                continue
            window = windows[phase]
            if window.days <= 0:
                continue
            last_day = window.end - timedelta(days=1)
            if window.start <= week_end and week_start <= last_day:
                alignments.append(
                    PhaseAlignment(
                        project_id=project.id,
                        project_number=project.project_number,
                        phase=phase,
                        start=window.start,
                        end=window.end,
                    )
                )
    return alignments


def _counts_for_utilization(bay: Bay, excluded_teams: set[str]) -> bool:
    if not bay.team:
        return False
    return bay.team.upper() not in excluded_teams


def weekly_bay_utilization(
    schedules: Iterable[ManufacturingSchedule],
    projects: Iterable[Project],
    bays: Iterable[Bay],
    start_date: date,
    weeks: int | None = None,
    excluded_teams: Iterable[str] | None = None,
) -> list[WeeklyUtilization]:
    """
    Weekly utilization of every counted bay.

    Args:
        schedules: Committed schedules
        projects: Projects the schedules belong to
        bays: Bays to report on; bays without a team or on an excluded team
            are skipped
        start_date: Any day of the first week (weeks start on Monday)
        weeks: Number of weeks (defaults to UTILIZATION_DEFAULT_WEEKS)
        excluded_teams: Team names to skip (defaults to
            UTILIZATION_EXCLUDED_TEAMS)

    Returns:
        One entry per (week, bay), week-major
    """
    week_count = weeks if weeks is not None else settings.UTILIZATION_DEFAULT_WEEKS
    excluded = {
        team.upper()
        for team in (
            excluded_teams
            if excluded_teams is not None
            else settings.UTILIZATION_EXCLUDED_TEAMS
        )
    }
    schedule_list = list(schedules)
    project_map = {project.id: project for project in projects}
    counted_bays = [bay for bay in bays if _counts_for_utilization(bay, excluded)]

    first_week = week_start_for(start_date)
    results: list[WeeklyUtilization] = []
    for offset in range(week_count):
        week_start = first_week + timedelta(weeks=offset)
        week_end = week_start + timedelta(days=6)
        for bay in counted_bays:
            alignments = phase_alignments_for_week(
                week_start, week_end, schedule_list, project_map, bay.id
            )
            project_count = len({a.project_id for a in alignments})
            results.append(
                WeeklyUtilization(
                    week_start=week_start,
                    week_end=week_end,
                    bay_id=bay.id,
                    bay_name=bay.name,
                    team=bay.team or "Unknown",
                    project_count=project_count,
                    utilization_percentage=utilization_percentage(project_count),
                    aligned_phases=tuple(alignments),
                )
            )
    return results


def team_week_utilization(
    schedules: Iterable[ManufacturingSchedule],
    projects: Iterable[Project],
    team_bays: Iterable[Bay],
    day: date,
) -> tuple[int, int]:
    """
    Utilization of a team across all its bays for the week containing ``day``.

    Returns:
        (distinct project count, utilization percentage)
    """
    week_start = week_start_for(day)
    week_end = week_start + timedelta(days=6)
    schedule_list = list(schedules)
    project_map = {project.id: project for project in projects}

    project_ids: set[int] = set()
    for bay in team_bays:
        project_ids.update(
            a.project_id
            for a in phase_alignments_for_week(
                week_start, week_end, schedule_list, project_map, bay.id
            )
        )
    return len(project_ids), utilization_percentage(len(project_ids))
