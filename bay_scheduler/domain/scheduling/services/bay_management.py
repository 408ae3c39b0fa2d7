"""
Bay Management

Committed scheduling state as the engine sees it, plus the rules bay
management imposes on it: which projects still need a bay, and what happens
to schedules when their bay is removed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ....core.observability import get_logger
from ...shared.exceptions import NotFoundError
from ..entities.bay import Bay
from ..entities.project import Project
from ..entities.schedule import ManufacturingSchedule
from ..events import SchedulesRepooled
from ..repositories import EventPublisher, ScheduleDataSource

logger = get_logger(__name__)


def unassigned_projects(
    projects: Iterable[Project], schedules: Iterable[ManufacturingSchedule]
) -> list[Project]:
    """
    Projects waiting for a bay.

    A project is unassigned when none of its schedules sits on a bay. Projects
    whose schedules were re-pooled count as unassigned; those schedules are
    dragged back with ``DragPayload.for_schedule`` so their id is kept.
    """
    placed = {
        schedule.project_id for schedule in schedules if schedule.bay_id is not None
    }
    return [project for project in projects if project.id not in placed]


def repool_bay_schedules(
    bay_id: int, schedules: Iterable[ManufacturingSchedule]
) -> list[ManufacturingSchedule]:
    """
    Return ``schedules`` with every schedule of ``bay_id`` moved to the pool.

    Re-pooled schedules keep their dates and hours; they lose their bay and
    go back to track 0. Order is preserved.
    """
    return [
        schedule.model_copy(update={"bay_id": None, "track": 0})
        if schedule.bay_id == bay_id
        else schedule
        for schedule in schedules
    ]


@dataclass(frozen=True)
class BoardSnapshot:
    """Point-in-time copy of the board used to undo optimistic changes."""

    bays: tuple[Bay, ...]
    schedules: tuple[ManufacturingSchedule, ...]


class ScheduleBoard:
    """
    In-memory committed state of one bay schedule view.

    Entities are frozen, so a snapshot only copies references and restoring
    it is exact.
    """

    def __init__(
        self,
        bays: Iterable[Bay] = (),
        schedules: Iterable[ManufacturingSchedule] = (),
        projects: Iterable[Project] = (),
        event_bus: EventPublisher | None = None,
    ):
        self._bays: dict[int, Bay] = {bay.id: bay for bay in bays}
        self._schedules: dict[int, ManufacturingSchedule] = {
            schedule.id: schedule for schedule in schedules
        }
        self._projects: dict[int, Project] = {
            project.id: project for project in projects
        }
        self._event_bus = event_bus

    @classmethod
    def from_source(
        cls, source: ScheduleDataSource, event_bus: EventPublisher | None = None
    ) -> ScheduleBoard:
        board = cls(
            source.list_bays(),
            source.list_schedules(),
            source.list_projects(),
            event_bus=event_bus,
        )
        logger.debug(
            "Schedule board loaded",
            bay_count=len(board._bays),
            schedule_count=len(board._schedules),
            project_count=len(board._projects),
        )
        return board

    @property
    def bays(self) -> list[Bay]:
        return list(self._bays.values())

    @property
    def bay_map(self) -> Mapping[int, Bay]:
        return dict(self._bays)

    @property
    def schedules(self) -> list[ManufacturingSchedule]:
        return list(self._schedules.values())

    @property
    def projects(self) -> list[Project]:
        return list(self._projects.values())

    def get_bay(self, bay_id: int) -> Bay | None:
        return self._bays.get(bay_id)

    def get_schedule(self, schedule_id: int) -> ManufacturingSchedule | None:
        return self._schedules.get(schedule_id)

    def get_project(self, project_id: int) -> Project | None:
        return self._projects.get(project_id)

    def require_schedule(self, schedule_id: int) -> ManufacturingSchedule:
        schedule = self._schedules.get(schedule_id)
        if schedule is None:
            raise NotFoundError("schedule", schedule_id)
        return schedule

    def schedules_for_bay(self, bay_id: int) -> list[ManufacturingSchedule]:
        return [s for s in self._schedules.values() if s.bay_id == bay_id]

    def unassigned_projects(self) -> list[Project]:
        return unassigned_projects(self._projects.values(), self._schedules.values())

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            bays=tuple(self._bays.values()),
            schedules=tuple(self._schedules.values()),
        )

    def restore(self, snapshot: BoardSnapshot) -> None:
        self._bays = {bay.id: bay for bay in snapshot.bays}
        self._schedules = {schedule.id: schedule for schedule in snapshot.schedules}

    def apply(
        self, schedule: ManufacturingSchedule, replaces: int | None = None
    ) -> None:
        """
        Insert or replace a committed schedule.

        Args:
            schedule: Schedule to store under its id
            replaces: Id of a provisional entry to drop first (a placed
                project's placeholder before the committer assigned its id)
        """
        if replaces is not None and replaces != schedule.id:
            self._schedules.pop(replaces, None)
        self._schedules[schedule.id] = schedule

    def discard(self, schedule_id: int) -> None:
        self._schedules.pop(schedule_id, None)

    def remove_bay(self, bay_id: int) -> list[ManufacturingSchedule]:
        """
        Remove a bay and return its schedules to the unassigned pool.

        Returns:
            The re-pooled schedules

        Raises:
            NotFoundError: If the bay is unknown
        """
        if bay_id not in self._bays:
            raise NotFoundError("bay", bay_id)

        repooled = [
            schedule
            for schedule in repool_bay_schedules(bay_id, self._schedules.values())
            if schedule.is_unassigned and self._schedules[schedule.id].bay_id == bay_id
        ]
        for schedule in repooled:
            self._schedules[schedule.id] = schedule
        del self._bays[bay_id]

        logger.info(
            "Bay removed, schedules re-pooled",
            bay_id=bay_id,
            repooled_count=len(repooled),
        )
        if self._event_bus is not None:
            self._event_bus.publish(
                SchedulesRepooled(
                    bay_id=bay_id,
                    schedule_ids=tuple(schedule.id for schedule in repooled),
                )
            )
        return repooled

    def __len__(self) -> int:
        return len(self._schedules)
