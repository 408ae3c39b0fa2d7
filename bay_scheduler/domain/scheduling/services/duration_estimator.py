"""
Duration Estimator

Converts a work-hour total into an end date on a given bay. Durations are
counted in calendar days: weekends are not skipped.
"""

import math
from datetime import date, timedelta

from ..entities.bay import Bay
from .capacity import daily_capacity_hours

MIN_DURATION_DAYS = 1


def days_needed(bay: Bay, total_hours: float) -> int:
    """
    Calendar days the bay needs to burn down ``total_hours``.

    Args:
        bay: Bay doing the work
        total_hours: Work content in hours

    Returns:
        Number of days, at least one

    Raises:
        ValueError: If total_hours is negative
    """
    if total_hours < 0:
        raise ValueError("total_hours must not be negative")
    return max(MIN_DURATION_DAYS, math.ceil(total_hours / daily_capacity_hours(bay)))


def estimate_end_date(bay: Bay, total_hours: float, start_date: date) -> date:
    """End date of ``total_hours`` of work started on ``start_date`` in ``bay``."""
    return start_date + timedelta(days=days_needed(bay, total_hours))
