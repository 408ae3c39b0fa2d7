"""
Schedule Gateways

Contracts for the collaborators the scheduling engine consumes. Persistence
and bay CRUD live outside this package; the engine only reads the current
state and hands finished placements back for committing.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from ..entities.bay import Bay
from ..entities.project import Project
from ..entities.schedule import ManufacturingSchedule


@runtime_checkable
class ScheduleDataSource(Protocol):
    """Read access to bays, committed schedules and projects."""

    def list_bays(self) -> Sequence[Bay]:
        """All bays, in display order."""
        ...

    def list_schedules(self) -> Sequence[ManufacturingSchedule]:
        """All committed schedules, assigned or not."""
        ...

    def list_projects(self) -> Sequence[Project]:
        ...


@runtime_checkable
class ScheduleCommitter(Protocol):
    """Persists one schedule placement."""

    async def commit_schedule(
        self, proposed: ManufacturingSchedule
    ) -> ManufacturingSchedule:
        """
        Persist a moved, placed or resized schedule.

        Args:
            proposed: Schedule as validated by the engine. New placements
                carry id 0 and get their id from the committer.

        Returns:
            The schedule as stored

        Raises:
            Exception: Any failure; the engine treats it as a failed commit
        """
        ...


@runtime_checkable
class EventPublisher(Protocol):
    def publish(self, event: Any) -> None: ...
