"""Capacity arithmetic over a bay's staffing."""

from ..entities.bay import Bay

WORKDAYS_PER_WEEK = 5
MIN_DAILY_CAPACITY_HOURS = 1.0


def weekly_capacity_hours(bay: Bay) -> float:
    """Hours of work the bay absorbs per week."""
    return bay.total_staff * bay.hours_per_person_per_week


def daily_capacity_hours(bay: Bay) -> float:
    """
    Hours of work the bay absorbs per working day.

    Floored at one hour so duration math never divides by zero. Unstaffed
    bays are refused by the conflict validator before this matters.
    """
    return max(MIN_DAILY_CAPACITY_HOURS, weekly_capacity_hours(bay) / WORKDAYS_PER_WEEK)


def total_weekly_capacity_hours(bays: list[Bay]) -> float:
    return sum(weekly_capacity_hours(bay) for bay in bays)
