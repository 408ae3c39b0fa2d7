"""Gateway contracts for the scheduling domain."""

from .schedule_gateway import EventPublisher, ScheduleCommitter, ScheduleDataSource

__all__ = ["ScheduleDataSource", "ScheduleCommitter", "EventPublisher"]
