"""
Time Axis Generator

Turns an inclusive date range and a view granularity into the ordered run of
TimeSlots the bay schedule is drawn against.
"""

from collections.abc import Iterator
from datetime import date, timedelta

from ....core.observability import get_logger, monitor_layout
from ..value_objects.enums import Granularity
from ..value_objects.timeslot import TimeAxis, TimeSlot

logger = get_logger(__name__)

ONE_DAY = timedelta(days=1)


def _first_of_next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def _quarter_start_month(day: date) -> int:
    return ((day.month - 1) // 3) * 3 + 1


def _first_of_next_quarter(day: date) -> date:
    month = _quarter_start_month(day) + 3
    if month > 12:
        return date(day.year + 1, month - 12, 1)
    return date(day.year, month, 1)


def _next_boundary(current: date, granularity: Granularity) -> date:
    if granularity == Granularity.DAY:
        return current + ONE_DAY
    if granularity == Granularity.WEEK:
        # Weeks step from the range start, not from calendar Mondays
        return current + timedelta(days=7)
    if granularity == Granularity.MONTH:
        return _first_of_next_month(current)
    return _first_of_next_quarter(current)


def _short_day(day: date) -> str:
    return f"{day:%b} {day.day}"


def _labels(current: date, slot_end: date, granularity: Granularity) -> tuple[str, str]:
    if granularity == Granularity.DAY:
        return _short_day(current), f"{current:%a}"
    if granularity == Granularity.WEEK:
        last_day = slot_end - ONE_DAY
        return (
            f"Week {current.isocalendar()[1]}",
            f"{_short_day(current)} - {_short_day(last_day)}",
        )
    if granularity == Granularity.MONTH:
        return f"{current:%b %Y}", f"{current:%B}"
    first_month = _quarter_start_month(current)
    quarter = (first_month - 1) // 3 + 1
    return (
        f"Q{quarter} {current.year}",
        f"{date(current.year, first_month, 1):%b} - "
        f"{date(current.year, first_month + 2, 1):%b}",
    )


def iter_time_slots(
    start: date, end: date, granularity: Granularity | str
) -> Iterator[TimeSlot]:
    """
    Yield the slots covering ``[start, end]`` (both days included).

    The first slot always begins on ``start``; when ``start`` is not on a
    month or quarter boundary that slot is partial. The last slot is cut at
    ``end``. An inverted range yields nothing.
    """
    granularity = Granularity(granularity)
    if end < start:
        return

    width = granularity.slot_width
    stop = end + ONE_DAY
    current = start
    while current < stop:
        slot_end = min(_next_boundary(current, granularity), stop)
        label, sub_label = _labels(current, slot_end, granularity)
        yield TimeSlot(
            date=current,
            end=slot_end,
            label=label,
            sub_label=sub_label,
            width=width,
            is_weekend=granularity == Granularity.DAY and current.weekday() >= 5,
        )
        current = slot_end


@monitor_layout("time_axis")
def compute_time_axis(
    start: date, end: date, granularity: Granularity | str
) -> TimeAxis:
    """Materialize the slots for a range into a TimeAxis."""
    granularity = Granularity(granularity)
    axis = TimeAxis(
        granularity=granularity,
        slots=tuple(iter_time_slots(start, end, granularity)),
    )
    if axis.is_empty():
        logger.debug(
            "Empty time axis requested",
            start=start.isoformat(),
            end=end.isoformat(),
            granularity=granularity.value,
        )
    return axis
