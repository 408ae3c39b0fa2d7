"""
Manufacturing Schedule Entity

A time-bounded assignment of one project's work to one bay, drawn on one
track of that bay's timeline. A schedule with no bay sits in the unassigned
pool.
"""

from datetime import date

from pydantic import Field, model_validator
from typing_extensions import Self

from ...shared.base import Entity
from ..value_objects.enums import ScheduleStatus

# Id carried by a placed project until the committer assigns the real one.
# Committed schedules have positive ids, so it never names a stored schedule.
PLACEHOLDER_SCHEDULE_ID = 0


class ManufacturingSchedule(Entity):
    """A work interval of a project on a bay track."""

    id: int = Field(gt=PLACEHOLDER_SCHEDULE_ID)
    project_id: int
    bay_id: int | None = None
    start_date: date
    end_date: date
    total_hours: float = Field(default=0, ge=0)
    track: int = Field(default=0, ge=0)
    status: ScheduleStatus = ScheduleStatus.SCHEDULED

    @model_validator(mode="after")
    def _check_date_order(self) -> Self:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @property
    def is_placeholder(self) -> bool:
        """Check if this is a new placement not yet given an id by the committer."""
        return self.id == PLACEHOLDER_SCHEDULE_ID

    @property
    def is_unassigned(self) -> bool:
        """Check if the schedule is in the unassigned pool."""
        return self.bay_id is None

    @property
    def duration_days(self) -> int:
        """Get the calendar length of the half-open [start, end) interval."""
        return (self.end_date - self.start_date).days

    def overlaps(self, start_date: date, end_date: date) -> bool:
        """
        Check if this schedule's [start, end) range intersects another.

        Ranges that only touch (one ends the day the other starts) do not
        overlap.
        """
        return max(self.start_date, start_date) < min(self.end_date, end_date)

    def moved_to(
        self,
        *,
        bay_id: int | None,
        start_date: date,
        end_date: date,
        track: int,
    ) -> "ManufacturingSchedule":
        """Return a copy placed on another bay/track/date range."""
        return self.model_copy(
            update={
                "bay_id": bay_id,
                "start_date": start_date,
                "end_date": end_date,
                "track": track,
            }
        )

    def __str__(self) -> str:
        return (
            f"Schedule(id={self.id}, project={self.project_id}, bay={self.bay_id}, "
            f"track={self.track}, {self.start_date}..{self.end_date})"
        )
