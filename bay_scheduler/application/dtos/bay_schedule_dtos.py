"""
Bay Schedule Data Transfer Objects.

Request and response models for the bay schedule API. Requests carry the
caller's bays, schedules and projects; the engine keeps no state between
requests, so every layout is computed from what the request sends.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing_extensions import Self

from ...core.config import settings
from ...domain.scheduling.entities import Bay, ManufacturingSchedule, Project
from ...domain.scheduling.services import (
    BayCapacityInfo,
    WeeklyUtilization,
)
from ...domain.scheduling.value_objects import (
    CapacityStatus,
    Granularity,
    PlacementValidation,
    ScheduleBar,
    ScheduleStatus,
    TimeAxis,
    TimeSlot,
)


def _default_hours_per_person() -> float:
    return settings.DEFAULT_HOURS_PER_PERSON_PER_WEEK


# ============================================================================
# Domain records
# ============================================================================


class BayDTO(BaseModel):
    """DTO for a manufacturing bay."""

    id: int
    name: str = Field(..., min_length=1, max_length=100)
    bay_number: int = Field(..., ge=0)
    is_active: bool = True
    team: str | None = Field(None, max_length=100)
    assembly_staff_count: int = Field(0, ge=0)
    electrical_staff_count: int = Field(0, ge=0)
    hours_per_person_per_week: float = Field(
        default_factory=_default_hours_per_person, ge=0
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Bay 1",
                "bay_number": 1,
                "team": "Team A",
                "assembly_staff_count": 2,
                "electrical_staff_count": 1,
                "hours_per_person_per_week": 40,
            }
        }
    )

    def to_entity(self) -> Bay:
        return Bay(**self.model_dump())


class _ScheduleFields(BaseModel):
    id: int
    project_id: int
    bay_id: int | None = None
    start_date: date
    end_date: date
    total_hours: float = Field(0, ge=0)
    track: int = Field(0, ge=0)
    status: ScheduleStatus = ScheduleStatus.SCHEDULED


class ScheduleDTO(_ScheduleFields):
    """DTO for a committed manufacturing schedule."""

    id: int = Field(..., gt=0)

    @model_validator(mode="after")
    def validate_end_after_start(self) -> Self:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def to_entity(self) -> ManufacturingSchedule:
        return ManufacturingSchedule(**self.model_dump())


class ProposedScheduleDTO(_ScheduleFields):
    """
    DTO for a placement to validate.

    Date order and track range are not checked here: the validator reports
    them as violations instead. An id of 0 marks a new placement.
    """

    id: int = Field(0, ge=0)
    track: int = 0

    def to_entity(self) -> ManufacturingSchedule:
        return ManufacturingSchedule.model_construct(**self.model_dump())


class ProjectDTO(BaseModel):
    """DTO for a project and its optional phase percentages."""

    id: int
    project_number: str = Field(..., min_length=1, max_length=50)
    name: str = ""
    total_hours: float = Field(0, ge=0)
    fab_percentage: float | None = Field(None, ge=0, le=100)
    paint_percentage: float | None = Field(None, ge=0, le=100)
    production_percentage: float | None = Field(None, ge=0, le=100)
    it_percentage: float | None = Field(None, ge=0, le=100)
    ntc_percentage: float | None = Field(None, ge=0, le=100)
    qc_percentage: float | None = Field(None, ge=0, le=100)

    def to_entity(self) -> Project:
        return Project(**self.model_dump())


# ============================================================================
# Time axis
# ============================================================================


class TimeSlotResponse(BaseModel):
    start: date
    end: date
    label: str
    sub_label: str
    width: int
    is_weekend: bool

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "TimeSlotResponse":
        return cls(
            start=slot.date,
            end=slot.end,
            label=slot.label,
            sub_label=slot.sub_label,
            width=slot.width,
            is_weekend=slot.is_weekend,
        )


class TimeAxisResponse(BaseModel):
    """DTO for a computed time axis."""

    granularity: Granularity
    slot_width: int
    total_width: int
    slots: list[TimeSlotResponse]

    @classmethod
    def from_axis(cls, axis: TimeAxis) -> "TimeAxisResponse":
        return cls(
            granularity=axis.granularity,
            slot_width=axis.slot_width,
            total_width=axis.total_width,
            slots=[TimeSlotResponse.from_slot(slot) for slot in axis.slots],
        )


# ============================================================================
# Schedule bars
# ============================================================================


class ScheduleBarsRequest(BaseModel):
    """DTO for laying out schedule bars over a date range."""

    start_date: date
    end_date: date
    granularity: Granularity = Granularity.WEEK
    track_bound: int | None = Field(None, ge=1, le=20)
    bays: list[BayDTO] = Field(default_factory=list)
    schedules: list[ScheduleDTO] = Field(default_factory=list)


class ScheduleBarResponse(BaseModel):
    schedule_id: int
    project_id: int
    bay_id: int
    track: int
    left: int
    width: int
    color: str
    start_date: date
    end_date: date
    clipped_start: bool
    clipped_end: bool

    @classmethod
    def from_bar(cls, bar: ScheduleBar) -> "ScheduleBarResponse":
        return cls(
            schedule_id=bar.schedule_id,
            project_id=bar.project_id,
            bay_id=bar.bay_id,
            track=bar.track,
            left=bar.left,
            width=bar.width,
            color=bar.color,
            start_date=bar.start_date,
            end_date=bar.end_date,
            clipped_start=bar.clipped_start,
            clipped_end=bar.clipped_end,
        )


class BayCapacityResponse(BaseModel):
    bay_id: int
    active_schedules: int
    weekly_capacity_hours: float
    percentage: int
    status: CapacityStatus

    @classmethod
    def from_info(cls, info: BayCapacityInfo) -> "BayCapacityResponse":
        return cls(
            bay_id=info.bay_id,
            active_schedules=info.active_schedules,
            weekly_capacity_hours=info.weekly_capacity_hours,
            percentage=info.percentage,
            status=info.status,
        )


class ScheduleBarsResponse(BaseModel):
    """DTO for a full bay schedule layout."""

    axis: TimeAxisResponse
    bars: list[ScheduleBarResponse]
    capacity: list[BayCapacityResponse]
    unassigned_schedule_ids: list[int]


# ============================================================================
# Duration estimate
# ============================================================================


class EstimateRequest(BaseModel):
    """DTO for estimating the end date of work on a bay."""

    bay: BayDTO
    total_hours: float = Field(..., ge=0)
    start_date: date

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "bay": {
                    "id": 1,
                    "name": "Bay 1",
                    "bay_number": 1,
                    "assembly_staff_count": 2,
                    "electrical_staff_count": 1,
                },
                "total_hours": 96,
                "start_date": "2025-03-03",
            }
        }
    )


class EstimateResponse(BaseModel):
    start_date: date
    end_date: date
    days_needed: int
    weekly_capacity_hours: float
    daily_capacity_hours: float


# ============================================================================
# Placement validation
# ============================================================================


class ValidatePlacementRequest(BaseModel):
    """DTO for checking a placement against committed schedules."""

    proposed: ProposedScheduleDTO
    schedules: list[ScheduleDTO] = Field(default_factory=list)
    bays: list[BayDTO] = Field(default_factory=list)
    track_bound: int | None = Field(None, ge=1, le=20)


class ViolationResponse(BaseModel):
    kind: str
    message: str
    bay_id: int | None = None
    track: int | None = None
    conflicting_schedule_id: int | None = None


class PlacementValidationResponse(BaseModel):
    is_valid: bool
    violations: list[ViolationResponse]

    @classmethod
    def from_validation(
        cls, validation: PlacementValidation
    ) -> "PlacementValidationResponse":
        return cls(
            is_valid=validation.is_valid,
            violations=[
                ViolationResponse(
                    kind=violation.kind.value,
                    message=violation.message,
                    bay_id=violation.bay_id,
                    track=violation.track,
                    conflicting_schedule_id=violation.conflicting_schedule_id,
                )
                for violation in validation.violations
            ],
        )


# ============================================================================
# Utilization
# ============================================================================


class UtilizationRequest(BaseModel):
    """DTO for weekly bay utilization."""

    start_date: date
    weeks: int | None = Field(None, ge=1, le=104)
    bays: list[BayDTO] = Field(default_factory=list)
    schedules: list[ScheduleDTO] = Field(default_factory=list)
    projects: list[ProjectDTO] = Field(default_factory=list)


class WeeklyUtilizationResponse(BaseModel):
    week_key: str
    week_start: date
    week_end: date
    bay_id: int
    bay_name: str
    team: str
    project_count: int
    utilization_percentage: int
    project_ids: list[int]

    @classmethod
    def from_week(cls, week: WeeklyUtilization) -> "WeeklyUtilizationResponse":
        return cls(
            week_key=week.week_key,
            week_start=week.week_start,
            week_end=week.week_end,
            bay_id=week.bay_id,
            bay_name=week.bay_name,
            team=week.team,
            project_count=week.project_count,
            utilization_percentage=week.utilization_percentage,
            project_ids=sorted({a.project_id for a in week.aligned_phases}),
        )


class UtilizationResponse(BaseModel):
    weeks: list[WeeklyUtilizationResponse]
