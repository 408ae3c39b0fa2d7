"""
Drag Operation Value Objects

Ephemeral interaction state of a drag gesture on the bay schedule. Every
step of the reschedule protocol produces a new DragOperation; nothing here
is mutated in place, so visual feedback can be computed from the value alone.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .enums import DragKind, DragState
from .placement import PlacementValidation

if TYPE_CHECKING:
    from ..entities.project import Project
    from ..entities.schedule import ManufacturingSchedule


@dataclass(frozen=True)
class DragPayload:
    """What is being dragged: an existing schedule or an unassigned project."""

    kind: DragKind
    project_id: int
    total_hours: float
    schedule_id: int | None = None
    origin_bay_id: int | None = None

    @classmethod
    def for_schedule(cls, schedule: ManufacturingSchedule) -> DragPayload:
        return cls(
            kind=DragKind.MOVE_EXISTING,
            project_id=schedule.project_id,
            total_hours=schedule.total_hours,
            schedule_id=schedule.id,
            origin_bay_id=schedule.bay_id,
        )

    @classmethod
    def for_project(cls, project: Project) -> DragPayload:
        return cls(
            kind=DragKind.PLACE_NEW,
            project_id=project.id,
            total_hours=project.total_hours,
        )

    def __post_init__(self) -> None:
        if self.kind == DragKind.MOVE_EXISTING and self.schedule_id is None:
            raise ValueError("Moving an existing schedule requires schedule_id")
        if self.total_hours < 0:
            raise ValueError("total_hours must not be negative")


@dataclass(frozen=True)
class DropTarget:
    """A candidate position: bay row, time slot column, and track lane."""

    bay_id: int
    slot_index: int
    track: int = 0

    @classmethod
    def from_pointer(
        cls,
        bay_id: int,
        slot_index: int,
        offset_y: float,
        row_height: float,
        track_bound: int,
    ) -> DropTarget:
        """
        Infer the track from the pointer's vertical offset inside a bay row.

        The row band is split into ``track_bound`` equal lanes; offsets
        outside the band clamp to the first or last lane.
        """
        if row_height <= 0 or track_bound <= 0:
            raise ValueError("row_height and track_bound must be positive")
        lane_height = row_height / track_bound
        track = int(offset_y // lane_height)
        return cls(
            bay_id=bay_id,
            slot_index=slot_index,
            track=min(max(track, 0), track_bound - 1),
        )


@dataclass(frozen=True)
class DragOperation:
    payload: DragPayload
    state: DragState = DragState.PICKED_UP
    target: DropTarget | None = None
    proposed: ManufacturingSchedule | None = None
    validation: PlacementValidation | None = None

    @property
    def kind(self) -> DragKind:
        return self.payload.kind

    @property
    def is_valid(self) -> bool:
        """Advisory validity at the current hover target."""
        return self.validation is not None and self.validation.is_valid

    def hovering(
        self,
        target: DropTarget,
        proposed: ManufacturingSchedule | None,
        validation: PlacementValidation,
    ) -> DragOperation:
        return replace(
            self,
            state=DragState.HOVERING,
            target=target,
            proposed=proposed,
            validation=validation,
        )

    def with_state(self, state: DragState) -> DragOperation:
        return replace(self, state=state)

    def highlight(self, bay_id: int, track: int) -> str | None:
        """Drop-zone highlight for one lane: "valid", "invalid" or None."""
        if self.target is None or self.validation is None:
            return None
        if self.target.bay_id != bay_id or self.target.track != track:
            return None
        return "valid" if self.validation.is_valid else "invalid"
