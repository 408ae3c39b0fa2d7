"""
Conflict Validator

Decides whether a proposed schedule placement may be committed. The check is
a pure function of the proposal, the committed schedules and the bays, so the
same answer comes back for hover feedback and for the final drop.

The greedy track layout only decides where bars are drawn. A track chosen
explicitly at drop time is authoritative, so overlap is checked against the
tracks stored on committed schedules, not against the layout.
"""

from collections.abc import Iterable, Mapping

from ....core.config import settings
from ..entities.bay import Bay
from ..entities.schedule import ManufacturingSchedule
from ..value_objects.enums import ViolationKind
from ..value_objects.placement import PlacementValidation, PlacementViolation
from .capacity import weekly_capacity_hours


def _bay_index(bays: Iterable[Bay] | Mapping[int, Bay]) -> Mapping[int, Bay]:
    if isinstance(bays, Mapping):
        return bays
    return {bay.id: bay for bay in bays}


def find_track_conflicts(
    proposed: ManufacturingSchedule,
    schedules: Iterable[ManufacturingSchedule],
) -> list[ManufacturingSchedule]:
    """
    Committed schedules on the proposal's bay and track that overlap it.

    A proposal for an existing schedule skips its own previous version. A
    new placement still carries the placeholder id and is checked against
    every schedule.
    """
    own_id = None if proposed.is_placeholder else proposed.id
    return [
        schedule
        for schedule in schedules
        if schedule.id != own_id
        and schedule.bay_id is not None
        and schedule.bay_id == proposed.bay_id
        and schedule.track == proposed.track
        and schedule.overlaps(proposed.start_date, proposed.end_date)
    ]


def validate_placement(
    proposed: ManufacturingSchedule,
    schedules: Iterable[ManufacturingSchedule],
    bays: Iterable[Bay] | Mapping[int, Bay],
    track_bound: int | None = None,
) -> PlacementValidation:
    """
    Validate a proposed placement against committed state.

    Args:
        proposed: The schedule as it would be committed
        schedules: Currently committed schedules (the proposal's own previous
            version is ignored unless the proposal is a new placement)
        bays: Known bays, as an iterable or an id mapping
        track_bound: Number of tracks per bay (defaults to TRACKS_PER_BAY)

    Returns:
        PlacementValidation listing every violation found
    """
    bound = track_bound if track_bound is not None else settings.TRACKS_PER_BAY
    violations: list[PlacementViolation] = []

    if proposed.end_date < proposed.start_date:
        violations.append(
            PlacementViolation(
                kind=ViolationKind.INVALID_RANGE,
                message=(
                    f"End date {proposed.end_date} is before start date "
                    f"{proposed.start_date}"
                ),
                bay_id=proposed.bay_id,
            )
        )

    bay = _bay_index(bays).get(proposed.bay_id) if proposed.bay_id is not None else None
    if bay is None:
        violations.append(
            PlacementViolation(
                kind=ViolationKind.UNKNOWN_BAY,
                message=f"Bay {proposed.bay_id} does not exist",
                bay_id=proposed.bay_id,
            )
        )
        return PlacementValidation(tuple(violations))

    if weekly_capacity_hours(bay) <= 0:
        violations.append(
            PlacementViolation(
                kind=ViolationKind.CAPACITY_VIOLATION,
                message=f"Bay {bay.name} has no staffed capacity",
                bay_id=bay.id,
            )
        )

    if not 0 <= proposed.track < bound:
        violations.append(
            PlacementViolation(
                kind=ViolationKind.INVALID_TRACK,
                message=f"Track {proposed.track} is outside 0..{bound - 1}",
                bay_id=bay.id,
                track=proposed.track,
            )
        )

    for conflict in find_track_conflicts(proposed, schedules):
        violations.append(
            PlacementViolation(
                kind=ViolationKind.TRACK_CONFLICT,
                message=(
                    f"Track {proposed.track} of bay {bay.name} is taken by "
                    f"schedule {conflict.id} from {conflict.start_date} "
                    f"to {conflict.end_date}"
                ),
                bay_id=bay.id,
                track=proposed.track,
                conflicting_schedule_id=conflict.id,
            )
        )

    return PlacementValidation(tuple(violations))
