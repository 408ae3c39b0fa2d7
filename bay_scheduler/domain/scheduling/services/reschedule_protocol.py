"""
Reschedule Protocol

Drives one operator's drag-and-drop gestures on the bay schedule:

    IDLE -> PICKED_UP -> HOVERING -> COMMITTING -> IDLE
                                  -> REJECTED   -> IDLE

Hovering is advisory: it builds the proposal at the pointer's slot and
track and validates it without side effects. Dropping validates again at the
exact target and, when valid, hands the proposal to the caller's committer
under a timeout. The local board only reflects a placement after the
committer accepted it, or, with optimistic updates, is restored from a
snapshot when it did not.
"""

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta

from ....core.config import settings
from ....core.observability import get_logger, record_drag_outcome
from ...shared.exceptions import CommitFailedError, DomainError, DragStateError
from ..entities.schedule import PLACEHOLDER_SCHEDULE_ID, ManufacturingSchedule
from ..events import (
    DomainEvent,
    DropRejected,
    ScheduleCommitFailed,
    ScheduleCommitted,
)
from ..repositories import EventPublisher, ScheduleCommitter
from ..value_objects.drag_operation import DragOperation, DragPayload, DropTarget
from ..value_objects.enums import DragKind, DragState, DropResult, ViolationKind
from ..value_objects.placement import PlacementValidation, PlacementViolation
from ..value_objects.timeslot import TimeAxis
from .bay_management import ScheduleBoard
from .conflict_validator import validate_placement
from .duration_estimator import MIN_DURATION_DAYS, estimate_end_date

logger = get_logger(__name__)


@dataclass(frozen=True)
class DropOutcome:
    """Terminal result of a drop or resize."""

    result: DropResult
    schedule: ManufacturingSchedule | None = None
    validation: PlacementValidation | None = None
    error: DomainError | None = None

    @property
    def committed(self) -> bool:
        return self.result == DropResult.COMMITTED


class RescheduleSession:
    """
    Reschedule state machine for one operator session.

    Args:
        board: Committed state the session reads and updates
        committer: Persistence collaborator
        axis: Time axis currently on screen; slot indexes refer to it
        event_bus: Optional publisher for commit and rejection events
        commit_timeout: Seconds to wait for the committer
            (defaults to COMMIT_TIMEOUT_SECONDS)
        optimistic: Apply placements before the committer answers
            (defaults to OPTIMISTIC_UPDATES)
        track_bound: Tracks per bay (defaults to TRACKS_PER_BAY)
    """

    def __init__(
        self,
        board: ScheduleBoard,
        committer: ScheduleCommitter,
        axis: TimeAxis,
        event_bus: EventPublisher | None = None,
        commit_timeout: float | None = None,
        optimistic: bool | None = None,
        track_bound: int | None = None,
    ):
        self.board = board
        self._committer = committer
        self._axis = axis
        self._event_bus = event_bus
        self._commit_timeout = (
            commit_timeout
            if commit_timeout is not None
            else settings.COMMIT_TIMEOUT_SECONDS
        )
        self._optimistic = (
            optimistic if optimistic is not None else settings.OPTIMISTIC_UPDATES
        )
        self._track_bound = (
            track_bound if track_bound is not None else settings.TRACKS_PER_BAY
        )
        self._state = DragState.IDLE
        self._operation: DragOperation | None = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def operation(self) -> DragOperation | None:
        return self._operation

    @property
    def axis(self) -> TimeAxis:
        return self._axis

    def set_axis(self, axis: TimeAxis) -> None:
        """Switch to another view; only allowed between gestures."""
        if self._state != DragState.IDLE:
            raise DragStateError("change the time axis", self._state.value)
        self._axis = axis

    # ------------------------------------------------------------------
    # Gesture steps
    # ------------------------------------------------------------------

    def begin_drag(self, payload: DragPayload) -> DragOperation:
        """
        Pick up an existing schedule or an unassigned project.

        Raises:
            DragStateError: If a gesture or commit is already in progress
            NotFoundError: If the dragged schedule is not on the board
        """
        if self._state != DragState.IDLE:
            raise DragStateError("begin drag", self._state.value)
        if payload.kind == DragKind.MOVE_EXISTING:
            assert payload.schedule_id is not None
            self.board.require_schedule(payload.schedule_id)

        self._transition("begin drag", DragState.PICKED_UP)
        self._operation = DragOperation(payload=payload)
        logger.debug(
            "Drag started",
            kind=payload.kind.value,
            project_id=payload.project_id,
            schedule_id=payload.schedule_id,
        )
        return self._operation

    def hover(self, target: DropTarget) -> DragOperation:
        """Evaluate the placement under the pointer. Nothing is persisted."""
        operation = self._require_gesture("hover")
        proposed, validation = self._evaluate(operation.payload, target)
        self._transition("hover", DragState.HOVERING)
        self._operation = operation.hovering(target, proposed, validation)
        return self._operation

    async def drop(self, target: DropTarget | None) -> DropOutcome:
        """
        Release the dragged item over ``target``.

        A missing target, or one outside the axis, cancels the gesture.
        Otherwise the placement is validated at the target and committed
        when valid. Rejections and failed commits are returned, not raised.
        """
        operation = self._require_gesture("drop")
        if target is None or self._axis.slot_at(target.slot_index) is None:
            self.cancel()
            return DropOutcome(result=DropResult.CANCELLED)

        payload = operation.payload
        proposed, validation = self._evaluate(payload, target)
        if proposed is None or not validation.is_valid:
            self._transition("drop", DragState.REJECTED)
            self._operation = operation.hovering(
                target, proposed, validation
            ).with_state(DragState.REJECTED)
            outcome = self._reject(payload, target.bay_id, validation)
            self._finish()
            return outcome

        self._transition("drop", DragState.COMMITTING)
        self._operation = operation.hovering(target, proposed, validation).with_state(
            DragState.COMMITTING
        )
        previous = (
            self.board.get_schedule(payload.schedule_id)
            if payload.schedule_id is not None
            else None
        )
        try:
            return await self._commit(
                proposed, previous, validation, payload.kind.value
            )
        finally:
            self._finish()

    def cancel(self) -> None:
        """Abandon the current gesture without side effects."""
        operation = self._require_gesture("cancel")
        self._transition("cancel", DragState.IDLE)
        self._operation = None
        record_drag_outcome(operation.kind.value, DropResult.CANCELLED.value)
        logger.debug("Drag cancelled", project_id=operation.payload.project_id)

    async def resize(
        self, schedule_id: int, start_date: date, end_date: date
    ) -> DropOutcome:
        """
        Change an existing schedule's dates in place.

        Bay, track and hours are kept. The new range goes through the same
        validation and commit path as a drop.
        """
        if self._state != DragState.IDLE:
            raise DragStateError("resize", self._state.value)

        current = self.board.require_schedule(schedule_id)
        # model_copy skips validation so an inverted range reaches the validator
        proposed = current.model_copy(
            update={"start_date": start_date, "end_date": end_date}
        )
        validation = validate_placement(
            proposed, self.board.schedules, self.board.bay_map, self._track_bound
        )
        if not validation.is_valid:
            return self._reject(
                DragPayload.for_schedule(current), current.bay_id, validation
            )

        self._transition("resize", DragState.COMMITTING)
        try:
            return await self._commit(proposed, current, validation, "resize")
        finally:
            self._state = DragState.IDLE

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_gesture(self, operation: str) -> DragOperation:
        if not self._state.is_active_gesture or self._operation is None:
            raise DragStateError(operation, self._state.value)
        return self._operation

    def _transition(self, operation: str, target_state: DragState) -> None:
        if not self._state.can_transition_to(target_state):
            raise DragStateError(operation, self._state.value)
        self._state = target_state

    def _finish(self) -> None:
        self._state = DragState.IDLE
        self._operation = None

    def _evaluate(
        self, payload: DragPayload, target: DropTarget
    ) -> tuple[ManufacturingSchedule | None, PlacementValidation]:
        slot = self._axis.slot_at(target.slot_index)
        if slot is None:
            return None, PlacementValidation(
                (
                    PlacementViolation(
                        kind=ViolationKind.OUTSIDE_AXIS,
                        message=f"Slot {target.slot_index} is not on the time axis",
                        bay_id=target.bay_id,
                        track=target.track,
                    ),
                )
            )

        start_date = slot.date
        bay = self.board.get_bay(target.bay_id)
        if bay is not None:
            end_date = estimate_end_date(bay, payload.total_hours, start_date)
        else:
            end_date = start_date + timedelta(days=MIN_DURATION_DAYS)

        if payload.kind == DragKind.MOVE_EXISTING:
            assert payload.schedule_id is not None
            current = self.board.require_schedule(payload.schedule_id)
            proposed = current.moved_to(
                bay_id=target.bay_id,
                start_date=start_date,
                end_date=end_date,
                track=target.track,
            )
        else:
            proposed = ManufacturingSchedule.model_construct(
                id=PLACEHOLDER_SCHEDULE_ID,
                project_id=payload.project_id,
                bay_id=target.bay_id,
                start_date=start_date,
                end_date=end_date,
                total_hours=payload.total_hours,
                track=target.track,
            )

        validation = validate_placement(
            proposed, self.board.schedules, self.board.bay_map, self._track_bound
        )
        return proposed, validation

    def _reject(
        self,
        payload: DragPayload,
        bay_id: int | None,
        validation: PlacementValidation,
    ) -> DropOutcome:
        record_drag_outcome(payload.kind.value, DropResult.REJECTED.value)
        logger.info(
            "Placement rejected",
            project_id=payload.project_id,
            schedule_id=payload.schedule_id,
            bay_id=bay_id,
            violations=[kind.value for kind in validation.kinds],
        )
        self._publish(
            DropRejected(
                project_id=payload.project_id,
                schedule_id=payload.schedule_id,
                bay_id=bay_id,
                reasons=tuple(validation.messages()),
            )
        )
        return DropOutcome(
            result=DropResult.REJECTED,
            validation=validation,
            error=validation.first_error,
        )

    async def _commit(
        self,
        proposed: ManufacturingSchedule,
        previous: ManufacturingSchedule | None,
        validation: PlacementValidation,
        kind: str,
    ) -> DropOutcome:
        snapshot = self.board.snapshot()
        if self._optimistic:
            self.board.apply(proposed)

        error: CommitFailedError | None = None
        try:
            committed = await asyncio.wait_for(
                self._committer.commit_schedule(proposed),
                timeout=self._commit_timeout,
            )
        except asyncio.TimeoutError:
            error = CommitFailedError(
                previous.id if previous else None,
                f"no answer within {self._commit_timeout}s",
                timed_out=True,
            )
        except asyncio.CancelledError:
            self.board.restore(snapshot)
            raise
        except Exception as e:
            error = CommitFailedError(
                previous.id if previous else None, str(e) or type(e).__name__
            )

        if error is not None:
            self.board.restore(snapshot)
            record_drag_outcome(kind, DropResult.COMMIT_FAILED.value)
            logger.warning(
                "Commit failed, board rolled back",
                project_id=proposed.project_id,
                schedule_id=error.schedule_id,
                reason=error.reason,
                timed_out=error.timed_out,
            )
            self._publish(
                ScheduleCommitFailed(
                    project_id=proposed.project_id,
                    schedule_id=error.schedule_id,
                    reason=error.reason,
                    timed_out=error.timed_out,
                )
            )
            return DropOutcome(
                result=DropResult.COMMIT_FAILED, validation=validation, error=error
            )

        self.board.apply(committed, replaces=proposed.id)
        record_drag_outcome(kind, DropResult.COMMITTED.value)
        logger.info(
            "Schedule committed",
            schedule_id=committed.id,
            project_id=committed.project_id,
            bay_id=committed.bay_id,
            track=committed.track,
            start_date=committed.start_date.isoformat(),
            end_date=committed.end_date.isoformat(),
        )
        self._publish(
            ScheduleCommitted(
                schedule=committed,
                previous_bay_id=previous.bay_id if previous else None,
                previous_start_date=previous.start_date if previous else None,
                is_new=previous is None,
            )
        )
        return DropOutcome(
            result=DropResult.COMMITTED, schedule=committed, validation=validation
        )

    def _publish(self, event: DomainEvent) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
