"""
Unit Tests for the Conflict Validator

Tests every rejection reason, that touching ranges do not conflict, and
that a schedule never conflicts with its own committed version.
"""

from datetime import date

from bay_scheduler.domain.scheduling.entities import ManufacturingSchedule
from bay_scheduler.domain.scheduling.entities.schedule import PLACEHOLDER_SCHEDULE_ID
from bay_scheduler.domain.scheduling.services.conflict_validator import (
    find_track_conflicts,
    validate_placement,
)
from bay_scheduler.domain.scheduling.value_objects import ViolationKind
from bay_scheduler.domain.shared.exceptions import (
    CapacityViolationError,
    InvalidPlacementError,
    TrackConflictError,
)
from bay_scheduler.tests.utils.factories import make_schedule


class TestValidatePlacement:
    """Test placement validation against committed schedules."""

    def test_free_track_is_valid(self, staffed_bay, march_schedules):
        proposed = make_schedule(99, date(2025, 3, 2), date(2025, 3, 6), track=2)
        validation = validate_placement(proposed, march_schedules, [staffed_bay])

        assert validation.is_valid
        assert validation.violations == ()
        assert validation.first_error is None

    def test_unstaffed_bay_is_a_capacity_violation(
        self, unstaffed_bay, march_schedules
    ):
        """Any drop onto a bay without staff is refused."""
        proposed = make_schedule(
            99, date(2025, 3, 2), date(2025, 3, 6), bay_id=unstaffed_bay.id
        )
        validation = validate_placement(proposed, march_schedules, [unstaffed_bay])

        assert not validation.is_valid
        assert validation.kinds == {ViolationKind.CAPACITY_VIOLATION}
        assert isinstance(validation.first_error, CapacityViolationError)

    def test_overlap_on_same_track_conflicts(self, staffed_bay, march_schedules):
        proposed = make_schedule(99, date(2025, 3, 8), date(2025, 3, 12), track=0)
        validation = validate_placement(proposed, march_schedules, [staffed_bay])

        assert validation.has(ViolationKind.TRACK_CONFLICT)
        violation = validation.violations[0]
        assert violation.conflicting_schedule_id == 1
        assert violation.track == 0
        error = validation.first_error
        assert isinstance(error, TrackConflictError)
        assert error.to_dict()["details"]["conflicting_schedule_id"] == 1

    def test_touching_ranges_do_not_conflict(self, staffed_bay, march_schedules):
        proposed = make_schedule(99, date(2025, 3, 10), date(2025, 3, 20), track=0)
        assert validate_placement(proposed, march_schedules, [staffed_bay]).is_valid

    def test_schedule_ignores_its_own_committed_version(
        self, staffed_bay, march_schedules
    ):
        moved = march_schedules[0].moved_to(
            bay_id=1, start_date=date(2025, 3, 2), end_date=date(2025, 3, 11), track=0
        )
        assert validate_placement(moved, march_schedules, [staffed_bay]).is_valid

    def test_new_placement_is_checked_against_every_schedule(self, staffed_bay):
        """A placeholder id never matches a stored schedule and skips nothing."""
        stored_as_zero = ManufacturingSchedule.model_construct(
            id=PLACEHOLDER_SCHEDULE_ID,
            project_id=5,
            bay_id=1,
            start_date=date(2025, 3, 1),
            end_date=date(2025, 3, 10),
        )
        proposed = ManufacturingSchedule.model_construct(
            id=PLACEHOLDER_SCHEDULE_ID,
            project_id=7,
            bay_id=1,
            start_date=date(2025, 3, 3),
            end_date=date(2025, 3, 7),
        )

        validation = validate_placement(proposed, [stored_as_zero], [staffed_bay])

        assert validation.has(ViolationKind.TRACK_CONFLICT)

    def test_other_bays_do_not_conflict(self, staffed_bay, march_schedules):
        other = staffed_bay.model_copy(update={"id": 5})
        proposed = make_schedule(
            99, date(2025, 3, 1), date(2025, 3, 10), bay_id=5, track=0
        )
        assert validate_placement(proposed, march_schedules, [other]).is_valid

    def test_every_overlapping_schedule_is_reported(self, staffed_bay):
        committed = [
            make_schedule(1, date(2025, 3, 1), date(2025, 3, 5)),
            make_schedule(2, date(2025, 3, 6), date(2025, 3, 9)),
        ]
        proposed = make_schedule(99, date(2025, 3, 4), date(2025, 3, 8))
        validation = validate_placement(proposed, committed, [staffed_bay])

        assert [v.conflicting_schedule_id for v in validation.violations] == [1, 2]

    def test_track_outside_bound(self, staffed_bay):
        proposed = make_schedule(99, date(2025, 3, 1), date(2025, 3, 2), track=4)

        validation = validate_placement(proposed, [], [staffed_bay])
        assert validation.kinds == {ViolationKind.INVALID_TRACK}
        assert isinstance(validation.first_error, InvalidPlacementError)

        proposed = make_schedule(99, date(2025, 3, 1), date(2025, 3, 2), track=2)
        assert validate_placement(proposed, [], [staffed_bay], track_bound=2).has(
            ViolationKind.INVALID_TRACK
        )

    def test_unknown_bay(self, staffed_bay):
        proposed = make_schedule(99, date(2025, 3, 1), date(2025, 3, 2), bay_id=42)
        validation = validate_placement(proposed, [], [staffed_bay])

        assert validation.kinds == {ViolationKind.UNKNOWN_BAY}

    def test_unassigned_proposal_has_no_bay(self, staffed_bay):
        proposed = make_schedule(99, date(2025, 3, 1), date(2025, 3, 2), bay_id=None)
        assert validate_placement(proposed, [], [staffed_bay]).has(
            ViolationKind.UNKNOWN_BAY
        )

    def test_end_before_start(self, staffed_bay):
        proposed = ManufacturingSchedule.model_construct(
            id=99,
            project_id=99,
            bay_id=1,
            start_date=date(2025, 3, 10),
            end_date=date(2025, 3, 1),
            total_hours=10,
            track=0,
        )
        validation = validate_placement(proposed, [], [staffed_bay])

        assert validation.has(ViolationKind.INVALID_RANGE)

    def test_violations_are_collected(self, unstaffed_bay):
        proposed = make_schedule(
            99, date(2025, 3, 1), date(2025, 3, 2), bay_id=unstaffed_bay.id, track=9
        )
        validation = validate_placement(proposed, [], {unstaffed_bay.id: unstaffed_bay})

        assert validation.kinds == {
            ViolationKind.CAPACITY_VIOLATION,
            ViolationKind.INVALID_TRACK,
        }
        assert len(validation.messages()) == 2

    def test_validation_does_not_touch_inputs(self, staffed_bay, march_schedules):
        before = list(march_schedules)
        proposed = make_schedule(99, date(2025, 3, 8), date(2025, 3, 12), track=0)
        validate_placement(proposed, march_schedules, [staffed_bay])

        assert march_schedules == before


def test_find_track_conflicts(march_schedules):
    proposed = make_schedule(99, date(2025, 3, 9), date(2025, 3, 21), track=0)
    conflicts = find_track_conflicts(proposed, march_schedules)

    assert [c.id for c in conflicts] == [1, 3]
