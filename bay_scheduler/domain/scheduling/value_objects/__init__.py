"""Value objects for the scheduling domain."""

from .drag_operation import DragOperation, DragPayload, DropTarget
from .enums import (
    CapacityStatus,
    DragKind,
    DragState,
    DropResult,
    Granularity,
    Phase,
    ScheduleStatus,
    ViolationKind,
)
from .placement import VALID_PLACEMENT, PlacementValidation, PlacementViolation
from .schedule_bar import PROJECT_COLORS, ScheduleBar, project_color
from .timeslot import TimeAxis, TimeSlot

__all__ = [
    # Enums
    "Granularity",
    "ScheduleStatus",
    "DragKind",
    "DragState",
    "DropResult",
    "ViolationKind",
    "CapacityStatus",
    "Phase",
    # Time axis
    "TimeSlot",
    "TimeAxis",
    # Layout output
    "ScheduleBar",
    "PROJECT_COLORS",
    "project_color",
    # Validation
    "PlacementViolation",
    "PlacementValidation",
    "VALID_PLACEMENT",
    # Drag and drop
    "DragPayload",
    "DropTarget",
    "DragOperation",
]
