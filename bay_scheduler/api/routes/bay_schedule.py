"""
Bay Schedule API Routes

Stateless layout endpoints for the bay schedule view: time axis, schedule
bars with capacity badges, duration estimates, placement checks and weekly
utilization.
"""

from datetime import date

from fastapi import APIRouter, Query

from ...application.dtos import (
    BayCapacityResponse,
    EstimateRequest,
    EstimateResponse,
    PlacementValidationResponse,
    ScheduleBarResponse,
    ScheduleBarsRequest,
    ScheduleBarsResponse,
    TimeAxisResponse,
    UtilizationRequest,
    UtilizationResponse,
    ValidatePlacementRequest,
    WeeklyUtilizationResponse,
)
from ...core.observability import get_logger
from ...domain.scheduling.services import (
    bay_capacity_status,
    compute_schedule_bars,
    compute_time_axis,
    daily_capacity_hours,
    days_needed,
    estimate_end_date,
    validate_placement,
    weekly_bay_utilization,
    weekly_capacity_hours,
)
from ...domain.scheduling.value_objects import Granularity
from ...domain.shared.exceptions import CapacityViolationError

logger = get_logger(__name__)
router = APIRouter()


@router.get("/axis", response_model=TimeAxisResponse, summary="Compute time axis")
async def get_time_axis(
    start_date: date = Query(..., description="First day shown"),
    end_date: date = Query(..., description="Last day shown (inclusive)"),
    granularity: Granularity = Query(Granularity.WEEK, description="View mode"),
) -> TimeAxisResponse:
    """
    Get the header slots for a date range.

    An end date before the start date yields an empty axis.
    """
    axis = compute_time_axis(start_date, end_date, granularity)
    return TimeAxisResponse.from_axis(axis)


@router.post(
    "/bars", response_model=ScheduleBarsResponse, summary="Lay out schedule bars"
)
async def get_schedule_bars(request: ScheduleBarsRequest) -> ScheduleBarsResponse:
    """
    Lay out schedules into bay tracks and project them onto the time axis.

    Also returns each bay's capacity badge and the ids of schedules in the
    unassigned pool, which are not drawn.
    """
    bays = [bay.to_entity() for bay in request.bays]
    schedules = [schedule.to_entity() for schedule in request.schedules]

    axis = compute_time_axis(request.start_date, request.end_date, request.granularity)
    bars = compute_schedule_bars(bays, schedules, axis, request.track_bound)

    logger.info(
        "Schedule bars requested",
        bay_count=len(bays),
        schedule_count=len(schedules),
        bar_count=len(bars),
        granularity=request.granularity.value,
    )

    return ScheduleBarsResponse(
        axis=TimeAxisResponse.from_axis(axis),
        bars=[ScheduleBarResponse.from_bar(bar) for bar in bars],
        capacity=[
            BayCapacityResponse.from_info(bay_capacity_status(bay, schedules))
            for bay in bays
        ],
        unassigned_schedule_ids=[s.id for s in schedules if s.is_unassigned],
    )


@router.post(
    "/estimate", response_model=EstimateResponse, summary="Estimate end date"
)
async def estimate_schedule_end(request: EstimateRequest) -> EstimateResponse:
    """
    Get the end date of a work-hour total started on a bay.

    Unstaffed bays cannot absorb work and are refused with 409.
    """
    bay = request.bay.to_entity()
    if not bay.is_staffed:
        raise CapacityViolationError(bay.id, weekly_capacity_hours(bay))
    return EstimateResponse(
        start_date=request.start_date,
        end_date=estimate_end_date(bay, request.total_hours, request.start_date),
        days_needed=days_needed(bay, request.total_hours),
        weekly_capacity_hours=weekly_capacity_hours(bay),
        daily_capacity_hours=daily_capacity_hours(bay),
    )


@router.post(
    "/validate",
    response_model=PlacementValidationResponse,
    summary="Validate a placement",
)
async def validate_schedule_placement(
    request: ValidatePlacementRequest,
) -> PlacementValidationResponse:
    """
    Check a proposed placement against committed schedules.

    Violations are reported in the body; the request itself succeeds.
    """
    validation = validate_placement(
        request.proposed.to_entity(),
        [schedule.to_entity() for schedule in request.schedules],
        [bay.to_entity() for bay in request.bays],
        request.track_bound,
    )
    if not validation.is_valid:
        logger.info(
            "Placement check failed",
            schedule_id=request.proposed.id,
            bay_id=request.proposed.bay_id,
            violations=[kind.value for kind in validation.kinds],
        )
    return PlacementValidationResponse.from_validation(validation)


@router.post(
    "/utilization",
    response_model=UtilizationResponse,
    summary="Weekly bay utilization",
)
async def get_weekly_utilization(request: UtilizationRequest) -> UtilizationResponse:
    """Get per-bay utilization for consecutive Monday-start weeks."""
    weeks = weekly_bay_utilization(
        [schedule.to_entity() for schedule in request.schedules],
        [project.to_entity() for project in request.projects],
        [bay.to_entity() for bay in request.bays],
        request.start_date,
        request.weeks,
    )
    return UtilizationResponse(
        weeks=[WeeklyUtilizationResponse.from_week(week) for week in weeks]
    )
