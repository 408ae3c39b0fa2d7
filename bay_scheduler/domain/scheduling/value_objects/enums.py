"""Domain enums for bay scheduling."""

from enum import Enum


class Granularity(str, Enum):
    """Time axis granularity (the view mode of the bay schedule)."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"

    @property
    def slot_width(self) -> int:
        """Fixed rendering width of one slot at this granularity."""
        return {
            Granularity.DAY: 50,
            Granularity.WEEK: 100,
            Granularity.MONTH: 150,
            Granularity.QUARTER: 200,
        }[self]


class ScheduleStatus(str, Enum):
    """Manufacturing schedule status."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    MAINTENANCE = "maintenance"

    @property
    def is_active(self) -> bool:
        """Check if the schedule still occupies its bay."""
        return self != ScheduleStatus.COMPLETE


class DragKind(str, Enum):
    """What a drag gesture carries."""

    MOVE_EXISTING = "move_existing"
    PLACE_NEW = "place_new"


class DragState(str, Enum):
    """Reschedule protocol states."""

    IDLE = "idle"
    PICKED_UP = "picked_up"
    HOVERING = "hovering"
    COMMITTING = "committing"
    REJECTED = "rejected"

    @property
    def is_active_gesture(self) -> bool:
        """Check if a gesture is in progress and can still be cancelled."""
        return self in {DragState.PICKED_UP, DragState.HOVERING}

    def can_transition_to(self, target_state: "DragState") -> bool:
        """Check if the session can move from this state to target state."""
        valid_transitions = {
            # A resize commits straight from idle
            DragState.IDLE: {DragState.PICKED_UP, DragState.COMMITTING},
            DragState.PICKED_UP: {
                DragState.HOVERING,
                DragState.COMMITTING,
                DragState.REJECTED,
                DragState.IDLE,
            },
            DragState.HOVERING: {
                DragState.HOVERING,
                DragState.COMMITTING,
                DragState.REJECTED,
                DragState.IDLE,
            },
            DragState.COMMITTING: {DragState.IDLE},
            DragState.REJECTED: {DragState.IDLE},
        }
        return target_state in valid_transitions.get(self, set())


class DropResult(str, Enum):
    """Terminal result of a drop or resize."""

    COMMITTED = "committed"
    REJECTED = "rejected"
    COMMIT_FAILED = "commit_failed"
    CANCELLED = "cancelled"


class ViolationKind(str, Enum):
    """Reasons a proposed placement is refused."""

    UNKNOWN_BAY = "unknown_bay"
    CAPACITY_VIOLATION = "capacity_violation"
    INVALID_RANGE = "invalid_range"
    INVALID_TRACK = "invalid_track"
    TRACK_CONFLICT = "track_conflict"
    OUTSIDE_AXIS = "outside_axis"


class CapacityStatus(str, Enum):
    """Bay load indicator shown next to each bay row."""

    AVAILABLE = "Available"
    NEAR_CAPACITY = "Near Capacity"
    AT_CAPACITY = "At Capacity"


class Phase(str, Enum):
    """Manufacturing phases a schedule span is divided into."""

    FAB = "FAB"
    PAINT = "PAINT"
    PRODUCTION = "PRODUCTION"
    IT = "IT"
    NTC = "NTC"
    QC = "QC"

    @property
    def counts_toward_utilization(self) -> bool:
        """Only bay-floor phases load a bay."""
        return self in {Phase.PRODUCTION, Phase.IT, Phase.NTC}
