"""
Domain Services

Layout, validation and rescheduling logic for the bay schedule. Layout
services (time axis, track assignment, duration estimation, validation,
utilization) are pure functions; the reschedule protocol is the only
stateful service and owns the drag-and-drop state machine.
"""

from .bay_management import (
    BoardSnapshot,
    ScheduleBoard,
    repool_bay_schedules,
    unassigned_projects,
)
from .capacity import daily_capacity_hours, weekly_capacity_hours
from .conflict_validator import find_track_conflicts, validate_placement
from .duration_estimator import days_needed, estimate_end_date
from .reschedule_protocol import (
    PLACEHOLDER_SCHEDULE_ID,
    DropOutcome,
    RescheduleSession,
)
from .time_axis import compute_time_axis, iter_time_slots
from .track_assignment import (
    TrackAssignment,
    assign_tracks,
    compute_schedule_bars,
    project_schedule,
)
from .utilization import (
    BayCapacityInfo,
    PhaseWindow,
    WeeklyUtilization,
    bay_capacity_status,
    calculate_phase_windows,
    team_week_utilization,
    utilization_percentage,
    weekly_bay_utilization,
)

__all__ = [
    # Capacity and duration
    "weekly_capacity_hours",
    "daily_capacity_hours",
    "days_needed",
    "estimate_end_date",
    # Layout
    "compute_time_axis",
    "iter_time_slots",
    "TrackAssignment",
    "assign_tracks",
    "project_schedule",
    "compute_schedule_bars",
    # Validation
    "validate_placement",
    "find_track_conflicts",
    # Rescheduling
    "RescheduleSession",
    "DropOutcome",
    "PLACEHOLDER_SCHEDULE_ID",
    # Bay management
    "ScheduleBoard",
    "BoardSnapshot",
    "unassigned_projects",
    "repool_bay_schedules",
    # Utilization
    "BayCapacityInfo",
    "PhaseWindow",
    "WeeklyUtilization",
    "bay_capacity_status",
    "calculate_phase_windows",
    "weekly_bay_utilization",
    "team_week_utilization",
    "utilization_percentage",
]
