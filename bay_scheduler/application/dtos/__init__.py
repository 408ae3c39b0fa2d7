"""Data transfer objects for the bay schedule API."""

from .bay_schedule_dtos import (
    BayCapacityResponse,
    BayDTO,
    EstimateRequest,
    EstimateResponse,
    PlacementValidationResponse,
    ProjectDTO,
    ProposedScheduleDTO,
    ScheduleBarResponse,
    ScheduleBarsRequest,
    ScheduleBarsResponse,
    ScheduleDTO,
    TimeAxisResponse,
    TimeSlotResponse,
    UtilizationRequest,
    UtilizationResponse,
    ValidatePlacementRequest,
    ViolationResponse,
    WeeklyUtilizationResponse,
)

__all__ = [
    # Domain records
    "BayDTO",
    "ScheduleDTO",
    "ProposedScheduleDTO",
    "ProjectDTO",
    # Layout
    "TimeSlotResponse",
    "TimeAxisResponse",
    "ScheduleBarsRequest",
    "ScheduleBarResponse",
    "ScheduleBarsResponse",
    "BayCapacityResponse",
    # Estimate
    "EstimateRequest",
    "EstimateResponse",
    # Validation
    "ValidatePlacementRequest",
    "ViolationResponse",
    "PlacementValidationResponse",
    # Utilization
    "UtilizationRequest",
    "WeeklyUtilizationResponse",
    "UtilizationResponse",
]
