from booking.domain.models import (
    MAX_ACTIVE_BOOKINGS,
    MAX_RECURRING_WEEKS,
    MIN_RECURRING_WEEKS,
    Booking,
    BookingStatus,
    Profile,
    Recurrence,
    RecurrenceChild,
    RecurrenceRoot,
    Session,
    SessionType,
)
from booking.domain.value_objects import (
    POINTS_PER_LEVEL,
    BookingId,
    Capacity,
    Points,
    SessionId,
    UserId,
)

__all__ = [
    "Booking",
    "BookingStatus",
    "Profile",
    "Recurrence",
    "RecurrenceChild",
    "RecurrenceRoot",
    "Session",
    "SessionType",
    "BookingId",
    "SessionId",
    "UserId",
    "Capacity",
    "Points",
    "MAX_ACTIVE_BOOKINGS",
    "MAX_RECURRING_WEEKS",
    "MIN_RECURRING_WEEKS",
    "POINTS_PER_LEVEL",
]
