"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in booking/models.py (persistence layer).
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from booking.domain.errors import InsufficientBalanceError, InvalidBookingStateError
from booking.domain.value_objects import (
    BookingId,
    Capacity,
    Points,
    SessionId,
    UserId,
)

MAX_ACTIVE_BOOKINGS = 2
MIN_RECURRING_WEEKS = 1
MAX_RECURRING_WEEKS = 52


class SessionType(Enum):
    SPEAKING = "SPEAKING"
    EVENT = "EVENT"


class BookingStatus(Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class RecurrenceRoot:
    """First occurrence of a recurring series. Has no parent."""

    weeks: int

    def __post_init__(self) -> None:
        if not MIN_RECURRING_WEEKS <= self.weeks <= MAX_RECURRING_WEEKS:
            raise ValueError(
                f"Recurring weeks must be between {MIN_RECURRING_WEEKS} "
                f"and {MAX_RECURRING_WEEKS}"
            )


@dataclass(frozen=True)
class RecurrenceChild:
    """Later occurrence of a recurring series, linked to its root."""

    parent_id: SessionId


Recurrence = RecurrenceRoot | RecurrenceChild


@dataclass(frozen=True)
class Session:
    """Domain representation of a bookable Session."""

    id: SessionId
    title: str
    description: str
    type: SessionType
    host_id: UserId
    meeting_url: str | None
    scheduled_at: datetime
    duration_minutes: int
    max_participants: Capacity
    current_participants: Capacity
    points_required: Points
    is_active: bool
    created_at: datetime
    updated_at: datetime
    recurrence: Recurrence | None = None

    def __post_init__(self) -> None:
        if self.max_participants.value < 1:
            raise ValueError("A session needs room for at least one participant")
        if self.current_participants.value > self.max_participants.value:
            raise ValueError("Participants cannot exceed capacity")
        if self.duration_minutes <= 0:
            raise ValueError("Duration must be positive")

    @property
    def available_slots(self) -> int:
        return self.max_participants.value - self.current_participants.value

    def is_full(self) -> bool:
        return self.available_slots == 0

    def has_started(self, now: datetime) -> bool:
        return self.scheduled_at <= now

    def can_book(self, now: datetime) -> bool:
        return self.is_active and not self.is_full() and not self.has_started(now)

    @property
    def is_recurring(self) -> bool:
        return self.recurrence is not None

    @property
    def recurring_parent_id(self) -> SessionId | None:
        if isinstance(self.recurrence, RecurrenceChild):
            return self.recurrence.parent_id
        return None

    @property
    def recurring_weeks(self) -> int | None:
        if isinstance(self.recurrence, RecurrenceRoot):
            return self.recurrence.weeks
        return None


@dataclass(frozen=True)
class Booking:
    """Domain representation of a user's reservation on a session.

    ``points_spent`` records what was debited when the booking was made so a
    cancellation refunds that amount even if the session price changed since.
    """

    id: BookingId
    user_id: UserId
    session_id: SessionId
    status: BookingStatus
    points_spent: Points
    created_at: datetime
    updated_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status is BookingStatus.CONFIRMED

    def cancel(self, at: datetime) -> "Booking":
        """Return the cancelled booking.

        Raises:
            InvalidBookingStateError: If the booking is not CONFIRMED.
        """
        if not self.is_active:
            raise InvalidBookingStateError(str(self.id), self.status.value)
        return replace(self, status=BookingStatus.CANCELLED, updated_at=at)


@dataclass(frozen=True)
class Profile:
    """A user's points wallet."""

    user_id: UserId
    points: Points

    @property
    def level(self) -> int:
        return self.points.level

    def credit(self, amount: int) -> "Profile":
        return replace(self, points=self.points.plus(amount))

    def debit(self, amount: int) -> "Profile":
        """Return the wallet with ``amount`` removed.

        Raises:
            InsufficientBalanceError: If the balance does not cover ``amount``.
        """
        if not self.points.covers(amount):
            raise InsufficientBalanceError(
                str(self.user_id), required=amount, available=self.points.value
            )
        return replace(self, points=self.points.minus(amount))
