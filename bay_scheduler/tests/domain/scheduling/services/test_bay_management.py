"""Tests for the schedule board and bay management rules."""

from datetime import date

import pytest
from pydantic import ValidationError

from bay_scheduler.domain.scheduling.entities import ManufacturingSchedule
from bay_scheduler.domain.scheduling.events import SchedulesRepooled
from bay_scheduler.domain.scheduling.services import (
    PLACEHOLDER_SCHEDULE_ID,
    ScheduleBoard,
    repool_bay_schedules,
    unassigned_projects,
)
from bay_scheduler.domain.shared.exceptions import NotFoundError
from bay_scheduler.tests.utils.factories import (
    make_bay,
    make_project,
    make_schedule,
)


class TestUnassignedProjects:
    def test_projects_without_bay_schedule(self, march_schedules):
        projects = [make_project(i) for i in (1, 2, 3, 4)]
        pooled = make_schedule(
            9, date(2025, 3, 1), date(2025, 3, 2), project_id=4, bay_id=None
        )

        result = unassigned_projects(projects, [*march_schedules, pooled])

        assert [p.id for p in result] == [4]

    def test_project_with_any_placed_schedule_is_assigned(self):
        schedules = [
            make_schedule(1, date(2025, 3, 1), date(2025, 3, 2), project_id=5, bay_id=None),
            make_schedule(2, date(2025, 3, 3), date(2025, 3, 4), project_id=5, bay_id=1),
        ]
        assert unassigned_projects([make_project(5)], schedules) == []


class TestRepool:
    def test_repool_moves_only_that_bay(self):
        schedules = [
            make_schedule(1, date(2025, 3, 1), date(2025, 3, 5), bay_id=1, track=2),
            make_schedule(2, date(2025, 3, 1), date(2025, 3, 5), bay_id=2, track=1),
        ]

        result = repool_bay_schedules(1, schedules)

        assert [s.id for s in result] == [1, 2]
        assert result[0].bay_id is None
        assert result[0].track == 0
        assert result[0].start_date == date(2025, 3, 1)
        assert result[0].total_hours == schedules[0].total_hours
        assert result[1] == schedules[1]
        # Inputs are frozen and untouched
        assert schedules[0].bay_id == 1


class TestScheduleBoard:
    def test_from_source(self, board):
        assert len(board) == 3
        assert [bay.id for bay in board.bays] == [1, 2]
        assert [s.id for s in board.schedules_for_bay(1)] == [1, 2, 3]
        assert board.schedules_for_bay(2) == []

    def test_require_schedule_raises_for_unknown_id(self, board):
        with pytest.raises(NotFoundError) as exc_info:
            board.require_schedule(42)
        assert exc_info.value.entity_id == 42

    def test_remove_bay_repools_its_schedules(self, board, event_bus):
        repooled = board.remove_bay(1)

        assert [s.id for s in repooled] == [1, 2, 3]
        assert all(s.is_unassigned and s.track == 0 for s in board.schedules)
        assert board.get_bay(1) is None
        assert board.schedules_for_bay(1) == []

        events = event_bus.get_event_history(SchedulesRepooled)
        assert len(events) == 1
        assert events[0].bay_id == 1
        assert events[0].schedule_ids == (1, 2, 3)

    def test_remove_empty_bay(self, board, event_bus):
        assert board.remove_bay(2) == []
        assert len(board) == 3
        assert event_bus.get_event_history(SchedulesRepooled)[0].schedule_ids == ()

    def test_remove_unknown_bay_raises(self, board):
        with pytest.raises(NotFoundError):
            board.remove_bay(99)

    def test_repooled_projects_become_unassigned(self):
        board = ScheduleBoard(
            bays=[make_bay(1)],
            schedules=[
                make_schedule(1, date(2025, 3, 1), date(2025, 3, 5), project_id=7)
            ],
            projects=[make_project(7)],
        )
        assert board.unassigned_projects() == []

        board.remove_bay(1)

        assert [p.id for p in board.unassigned_projects()] == [7]

    def test_snapshot_and_restore(self, board):
        snapshot = board.snapshot()
        moved = board.get_schedule(3).model_copy(update={"track": 3})
        board.apply(moved)
        board.remove_bay(2)

        board.restore(snapshot)

        assert board.get_schedule(3).track == 0
        assert board.get_bay(2) is not None

    def test_apply_replaces_placeholder(self, board):
        placeholder = ManufacturingSchedule.model_construct(
            id=PLACEHOLDER_SCHEDULE_ID,
            project_id=8,
            bay_id=1,
            start_date=date(2025, 3, 1),
            end_date=date(2025, 3, 2),
        )
        board.apply(placeholder)

        board.apply(placeholder.model_copy(update={"id": 500}), replaces=0)

        assert board.get_schedule(0) is None
        assert board.get_schedule(500).project_id == 8
        assert len(board) == 4

    def test_discard(self, board):
        board.discard(1)
        board.discard(1)
        assert board.get_schedule(1) is None
        assert len(board) == 2

    def test_committed_schedule_cannot_take_placeholder_id(self):
        with pytest.raises(ValidationError):
            make_schedule(PLACEHOLDER_SCHEDULE_ID, date(2025, 3, 1), date(2025, 3, 10))
