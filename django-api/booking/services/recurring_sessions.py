"""Recurring session generator - expands one request into a weekly series."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from booking.domain import (
    MAX_RECURRING_WEEKS,
    MIN_RECURRING_WEEKS,
    Capacity,
    Points,
    RecurrenceChild,
    RecurrenceRoot,
    Session,
    SessionId,
    SessionType,
    UserId,
)
from booking.domain.errors import InvalidRecurrenceError
from booking.services.session_catalog import Clock, utc_now
from booking.stores.interfaces import SessionStore, UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecurringSessionRequest:
    """Admin input for a weekly series. ``scheduled_at`` is the first occurrence."""

    admin_id: UserId
    title: str
    description: str
    type: SessionType
    scheduled_at: datetime
    duration_minutes: int
    max_participants: int
    points_required: int
    is_active: bool
    recurring_weeks: int
    host_id: UserId | None = None
    meeting_url: str | None = None


class RecurringSessionGenerator:
    """Builds and stores a root session plus its weekly children."""

    def __init__(
        self,
        store: SessionStore,
        unit_of_work: UnitOfWork,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._uow = unit_of_work
        self._clock = clock

    def create_recurring_sessions(self, request: RecurringSessionRequest) -> list[Session]:
        """Create ``recurring_weeks`` sessions one week apart.

        The admin role check belongs to the caller.

        Raises:
            InvalidRecurrenceError: If the week count is out of range, the
                start time is naive or the session fields are invalid.
        """
        sessions = self.build_series(request)
        with self._uow.atomic():
            stored = self._store.create_many(sessions)
        logger.info(
            "Created recurring series %s with %d sessions", stored[0].id, len(stored)
        )
        return stored

    def build_series(self, request: RecurringSessionRequest) -> list[Session]:
        weeks = request.recurring_weeks
        if not MIN_RECURRING_WEEKS <= weeks <= MAX_RECURRING_WEEKS:
            raise InvalidRecurrenceError(
                f"Recurring weeks must be between {MIN_RECURRING_WEEKS} "
                f"and {MAX_RECURRING_WEEKS}"
            )
        if request.scheduled_at.tzinfo is None:
            raise InvalidRecurrenceError("Start time must include a timezone")

        root_id = SessionId.new()
        now = self._clock()
        try:
            root = self._occurrence(
                request, root_id, request.scheduled_at, RecurrenceRoot(weeks), now
            )
            children = [
                self._occurrence(
                    request,
                    SessionId.new(),
                    # Aware arithmetic keeps the wall-clock time across DST.
                    request.scheduled_at + timedelta(weeks=week),
                    RecurrenceChild(parent_id=root_id),
                    now,
                )
                for week in range(1, weeks)
            ]
        except ValueError as exc:
            raise InvalidRecurrenceError(str(exc)) from exc
        return [root, *children]

    @staticmethod
    def _occurrence(
        request: RecurringSessionRequest,
        session_id: SessionId,
        scheduled_at: datetime,
        recurrence: RecurrenceRoot | RecurrenceChild,
        now: datetime,
    ) -> Session:
        return Session(
            id=session_id,
            title=request.title,
            description=request.description,
            type=request.type,
            host_id=request.host_id or request.admin_id,
            meeting_url=request.meeting_url,
            scheduled_at=scheduled_at,
            duration_minutes=request.duration_minutes,
            max_participants=Capacity(request.max_participants),
            current_participants=Capacity(0),
            points_required=Points(request.points_required),
            is_active=request.is_active,
            created_at=now,
            updated_at=now,
            recurrence=recurrence,
        )
