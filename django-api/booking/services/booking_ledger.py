"""Booking ledger - booking records and their status transitions."""

from booking.domain import Booking, BookingId, BookingStatus, Points, SessionId, UserId
from booking.domain.errors import (
    BookingNotFoundError,
    InvalidBookingStateError,
    UnauthorizedError,
)
from booking.services.session_catalog import Clock, utc_now
from booking.stores.interfaces import BookingStore


class BookingLedger:
    """Service over the booking store."""

    def __init__(self, store: BookingStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def has_active_booking(self, user_id: UserId, session_id: SessionId) -> bool:
        return any(
            booking.session_id == session_id
            for booking in self._store.find_active_by_user(user_id)
        )

    def count_active(self, user_id: UserId) -> int:
        return len(self._store.find_active_by_user(user_id))

    def list_for_user(self, user_id: UserId) -> list[Booking]:
        return self._store.find_by_user(user_id)

    def list_attendees(self, session_id: SessionId) -> list[Booking]:
        """Return the CONFIRMED bookings of a session, in booking order."""
        return self._store.find_active_by_session(session_id)

    def create(
        self, user_id: UserId, session_id: SessionId, points_spent: int = 0
    ) -> Booking:
        now = self._clock()
        booking = Booking(
            id=BookingId.new(),
            user_id=user_id,
            session_id=session_id,
            status=BookingStatus.CONFIRMED,
            points_spent=Points(points_spent),
            created_at=now,
            updated_at=now,
        )
        return self._store.create(booking)

    def find_owned(self, booking_id: BookingId, user_id: UserId) -> Booking:
        """Return a booking that belongs to ``user_id``.

        Raises:
            BookingNotFoundError: If the booking does not exist.
            UnauthorizedError: If it belongs to someone else.
        """
        booking = self._store.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(str(booking_id))
        if booking.user_id != user_id:
            raise UnauthorizedError(str(booking_id))
        return booking

    def cancel(self, booking: Booking) -> Booking:
        """Mark a loaded CONFIRMED booking as CANCELLED.

        The stored row moves only if it still has the status it was loaded
        with, so of two concurrent cancels only the first one succeeds.

        Raises:
            InvalidBookingStateError: If the booking is not CONFIRMED, or was
                changed since it was loaded.
        """
        target = booking.cancel(self._clock())
        cancelled = self._store.update_status(
            booking.id, expected=booking.status, status=target.status
        )
        if cancelled is None:
            current = self._store.get(booking.id)
            status = current.status.value if current else "MISSING"
            raise InvalidBookingStateError(str(booking.id), status)
        return cancelled

    def discard(self, booking_id: BookingId) -> None:
        self._store.delete(booking_id)
