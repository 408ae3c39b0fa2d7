"""
Domain Events Module

Exports all bay scheduling domain events.
"""

from .domain_events import (
    DomainEvent,
    DropRejected,
    ScheduleCommitFailed,
    ScheduleCommitted,
    SchedulesRepooled,
)

__all__ = [
    # Base class
    "DomainEvent",
    # Reschedule events
    "ScheduleCommitted",
    "ScheduleCommitFailed",
    "DropRejected",
    # Bay management events
    "SchedulesRepooled",
]
