"""
Domain Events

Events raised by the reschedule protocol and bay management. They are
published on the in-memory event bus so callers can refresh views or notify
the operator without the domain knowing about either.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from ..entities.schedule import ManufacturingSchedule


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class ScheduleCommitted(DomainEvent):
    """Raised when a moved, placed or resized schedule is persisted."""

    schedule: ManufacturingSchedule
    previous_bay_id: int | None = None
    previous_start_date: date | None = None
    is_new: bool = False


@dataclass(frozen=True)
class ScheduleCommitFailed(DomainEvent):
    """Raised when persistence rejected or timed out; local state was rolled back."""

    project_id: int
    schedule_id: int | None
    reason: str
    timed_out: bool = False


@dataclass(frozen=True)
class DropRejected(DomainEvent):
    """Raised when a drop failed validation. Nothing was persisted."""

    project_id: int
    schedule_id: int | None
    bay_id: int | None
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class SchedulesRepooled(DomainEvent):
    """Raised when a bay is removed and its schedules return to the unassigned pool."""

    bay_id: int | None
    schedule_ids: tuple[int, ...] = ()
