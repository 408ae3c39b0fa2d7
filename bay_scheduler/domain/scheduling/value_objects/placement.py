"""Placement validation result returned by the conflict validator."""

from __future__ import annotations

from dataclasses import dataclass, field

from ...shared.exceptions import (
    CapacityViolationError,
    InvalidPlacementError,
    PlacementError,
    TrackConflictError,
)
from .enums import ViolationKind


@dataclass(frozen=True)
class PlacementViolation:
    """One reason a proposed placement was refused."""

    kind: ViolationKind
    message: str
    bay_id: int | None = None
    track: int | None = None
    conflicting_schedule_id: int | None = None

    def to_error(self) -> PlacementError:
        """Convert the violation to its domain exception."""
        if self.kind == ViolationKind.CAPACITY_VIOLATION and self.bay_id is not None:
            return CapacityViolationError(self.bay_id)
        if (
            self.kind == ViolationKind.TRACK_CONFLICT
            and self.bay_id is not None
            and self.track is not None
            and self.conflicting_schedule_id is not None
        ):
            return TrackConflictError(
                self.bay_id, self.track, self.conflicting_schedule_id
            )
        return InvalidPlacementError(
            self.message, {"kind": self.kind.value, "bay_id": self.bay_id}
        )


@dataclass(frozen=True)
class PlacementValidation:
    violations: tuple[PlacementViolation, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def kinds(self) -> set[ViolationKind]:
        return {violation.kind for violation in self.violations}

    def has(self, kind: ViolationKind) -> bool:
        return kind in self.kinds

    @property
    def first_error(self) -> PlacementError | None:
        return self.violations[0].to_error() if self.violations else None

    def messages(self) -> list[str]:
        return [violation.message for violation in self.violations]


VALID_PLACEMENT = PlacementValidation()
