"""
Track Assignment Engine

Lays out each bay's schedules into a bounded number of horizontal tracks so
that schedules sharing a track do not overlap, then projects every schedule
onto the time axis as a ScheduleBar.

Tracks are assigned greedily in (start_date, id) order: a schedule takes the
first track that is free by its start date. When every track is still busy
the schedule goes onto the track that frees up earliest and is allowed to
overlap there visually; nothing is dropped from the layout.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from ....core.config import settings
from ....core.observability import DEGRADED_PLACEMENTS, get_logger, monitor_layout
from ..entities.bay import Bay
from ..entities.schedule import ManufacturingSchedule
from ..value_objects.schedule_bar import ScheduleBar, project_color
from ..value_objects.timeslot import TimeAxis

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrackAssignment:
    schedule: ManufacturingSchedule
    track: int
    degraded: bool = False


def _layout_order(schedule: ManufacturingSchedule) -> tuple[date, int]:
    return schedule.start_date, schedule.id


def assign_tracks(
    schedules: Iterable[ManufacturingSchedule],
    track_bound: int | None = None,
) -> list[TrackAssignment]:
    """
    Assign display tracks to one bay's schedules.

    Args:
        schedules: Schedules of a single bay, in any order
        track_bound: Number of tracks available (defaults to TRACKS_PER_BAY)

    Returns:
        Assignments in (start_date, id) order
    """
    bound = track_bound if track_bound is not None else settings.TRACKS_PER_BAY
    if bound < 1:
        raise ValueError("track_bound must be at least 1")

    track_ends = [date.min] * bound
    assignments: list[TrackAssignment] = []

    for schedule in sorted(schedules, key=_layout_order):
        chosen = next(
            (
                index
                for index, track_end in enumerate(track_ends)
                if track_end <= schedule.start_date
            ),
            None,
        )
        degraded = chosen is None
        if chosen is None:
            # min() keeps the lowest index on ties
            chosen = min(range(bound), key=lambda index: track_ends[index])
            if settings.ENABLE_METRICS:
                DEGRADED_PLACEMENTS.inc()
            logger.info(
                "All tracks busy, overlapping on earliest-ending track",
                schedule_id=schedule.id,
                bay_id=schedule.bay_id,
                track=chosen,
                track_bound=bound,
            )

        track_ends[chosen] = schedule.end_date
        assignments.append(TrackAssignment(schedule, chosen, degraded))

    return assignments


def project_schedule(
    schedule: ManufacturingSchedule, track: int, axis: TimeAxis
) -> ScheduleBar | None:
    """
    Project one schedule onto the axis.

    Returns None when the schedule lies entirely outside the axis. Schedules
    that start before or end after it are clipped to the visible slots.
    """
    if axis.is_empty() or schedule.bay_id is None:
        return None
    axis_start, axis_end = axis.start, axis.end
    assert axis_start is not None and axis_end is not None

    # Last occupied day of the half-open range; zero-length schedules occupy
    # their start day so they stay visible
    last_day = max(schedule.start_date, schedule.end_date - timedelta(days=1))
    if last_day < axis_start or schedule.start_date >= axis_end:
        return None

    first_index = axis.slot_index_for(max(schedule.start_date, axis_start))
    last_index = axis.slot_index_for(min(last_day, axis_end - timedelta(days=1)))
    assert first_index is not None and last_index is not None

    return ScheduleBar(
        schedule_id=schedule.id,
        project_id=schedule.project_id,
        bay_id=schedule.bay_id,
        track=track,
        left=first_index * axis.slot_width,
        width=(last_index - first_index + 1) * axis.slot_width,
        color=project_color(schedule.project_id),
        start_date=schedule.start_date,
        end_date=schedule.end_date,
        clipped_start=schedule.start_date < axis_start,
        clipped_end=last_day >= axis_end,
    )


@monitor_layout("schedule_bars")
def compute_schedule_bars(
    bays: Iterable[Bay],
    schedules: Iterable[ManufacturingSchedule],
    axis: TimeAxis,
    track_bound: int | None = None,
) -> list[ScheduleBar]:
    """
    Lay out every bay's schedules and project them onto the axis.

    Bars come out grouped by bay in the order the bays were given, and in
    (start_date, id) order inside a bay. Unassigned schedules and schedules
    on bays not in ``bays`` are not drawn.
    """
    by_bay: dict[int, list[ManufacturingSchedule]] = defaultdict(list)
    for schedule in schedules:
        if schedule.bay_id is not None:
            by_bay[schedule.bay_id].append(schedule)

    bars: list[ScheduleBar] = []
    for bay in bays:
        for assignment in assign_tracks(by_bay.get(bay.id, []), track_bound):
            bar = project_schedule(assignment.schedule, assignment.track, axis)
            if bar is not None:
                bars.append(bar)

    logger.debug(
        "Schedule bars computed",
        bar_count=len(bars),
        slot_count=len(axis),
        granularity=axis.granularity.value,
    )
    return bars
