"""Builders for domain entities with sensible test defaults."""

from datetime import date

from bay_scheduler.domain.scheduling.entities import (
    Bay,
    ManufacturingSchedule,
    Project,
)
from bay_scheduler.domain.scheduling.value_objects import ScheduleStatus


def make_bay(
    bay_id: int = 1,
    *,
    name: str | None = None,
    team: str | None = "Team A",
    assembly: int = 2,
    electrical: int = 1,
    hours_per_person: float = 40,
) -> Bay:
    return Bay(
        id=bay_id,
        name=name or f"Bay {bay_id}",
        bay_number=bay_id,
        team=team,
        assembly_staff_count=assembly,
        electrical_staff_count=electrical,
        hours_per_person_per_week=hours_per_person,
    )


def make_schedule(
    schedule_id: int,
    start: date,
    end: date,
    *,
    bay_id: int | None = 1,
    project_id: int | None = None,
    track: int = 0,
    total_hours: float = 40,
    status: ScheduleStatus = ScheduleStatus.SCHEDULED,
) -> ManufacturingSchedule:
    return ManufacturingSchedule(
        id=schedule_id,
        project_id=project_id if project_id is not None else schedule_id,
        bay_id=bay_id,
        start_date=start,
        end_date=end,
        total_hours=total_hours,
        track=track,
        status=status,
    )


def make_project(
    project_id: int, *, total_hours: float = 96, **percentages: float
) -> Project:
    return Project(
        id=project_id,
        project_number=f"P-{project_id:04d}",
        name=f"Project {project_id}",
        total_hours=total_hours,
        **percentages,
    )
