"""Scheduling entities."""

from .bay import Bay
from .project import DEFAULT_PHASE_PERCENTAGES, Project
from .schedule import ManufacturingSchedule

__all__ = ["Bay", "ManufacturingSchedule", "Project", "DEFAULT_PHASE_PERCENTAGES"]
