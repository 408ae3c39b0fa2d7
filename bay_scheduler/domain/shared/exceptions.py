"""
Domain Exceptions

Custom exceptions for bay scheduling errors, discriminated by ``ErrorType``.
Placement violations (capacity, track conflicts) are normally reported as
values on a validation result; the exception classes exist so the same
information can be raised or serialized where a caller needs it.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    CAPACITY_VIOLATION = "capacity_violation"
    TRACK_CONFLICT = "track_conflict"
    INVALID_PLACEMENT = "invalid_placement"
    COMMIT_FAILED = "commit_failed"
    DRAG_STATE = "drag_state"
    NOT_FOUND = "not_found"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(DomainError):
    """Raised when a referenced bay, schedule or project does not exist."""

    def __init__(self, entity_type: str, entity_id: int) -> None:
        super().__init__(
            f"{entity_type.capitalize()} not found: {entity_id}",
            ErrorType.NOT_FOUND,
            {"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class PlacementError(DomainError):
    """Base class for rejected schedule placements."""


class CapacityViolationError(PlacementError):
    """Raised when the target bay has no staff to absorb work."""

    def __init__(self, bay_id: int, weekly_capacity_hours: float = 0) -> None:
        super().__init__(
            f"Bay {bay_id} has no staffed capacity",
            ErrorType.CAPACITY_VIOLATION,
            {"bay_id": bay_id, "weekly_capacity_hours": int(weekly_capacity_hours)},
        )
        self.bay_id = bay_id


class TrackConflictError(PlacementError):
    """Raised when a placement overlaps another schedule on the same track."""

    def __init__(self, bay_id: int, track: int, conflicting_schedule_id: int) -> None:
        super().__init__(
            f"Track {track} of bay {bay_id} is occupied by schedule "
            f"{conflicting_schedule_id} in the requested period",
            ErrorType.TRACK_CONFLICT,
            {
                "bay_id": bay_id,
                "track": track,
                "conflicting_schedule_id": conflicting_schedule_id,
            },
        )
        self.bay_id = bay_id
        self.track = track
        self.conflicting_schedule_id = conflicting_schedule_id


class InvalidPlacementError(PlacementError):
    """Raised for placements that fail bounds checks (range, track, bay)."""

    def __init__(
        self, message: str, details: dict[str, str | int | bool | None] | None = None
    ) -> None:
        super().__init__(message, ErrorType.INVALID_PLACEMENT, details)


class CommitFailedError(DomainError):
    """Raised when the persistence collaborator rejects or times out a commit."""

    def __init__(
        self,
        schedule_id: int | None,
        reason: str,
        timed_out: bool = False,
    ) -> None:
        super().__init__(
            f"Commit failed for schedule {schedule_id}: {reason}",
            ErrorType.COMMIT_FAILED,
            {"schedule_id": schedule_id, "reason": reason, "timed_out": timed_out},
        )
        self.schedule_id = schedule_id
        self.reason = reason
        self.timed_out = timed_out


class DragStateError(DomainError):
    """Raised when a drag gesture step is invoked from the wrong state."""

    def __init__(self, operation: str, state: str) -> None:
        super().__init__(
            f"Cannot {operation} while drag session is {state}",
            ErrorType.DRAG_STATE,
            {"operation": operation, "state": state},
        )
        self.operation = operation
        self.state = state
