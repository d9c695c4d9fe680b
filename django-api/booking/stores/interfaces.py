"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Every mutating method is a
single atomically-conditioned write; services never read-then-write a counter.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from booking.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Profile,
    Session,
    SessionId,
    UserId,
)


class UnitOfWork(ABC):
    """Scope in which a sequence of store calls commits or rolls back together."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager wrapping one transaction."""
        ...


class SessionStore(ABC):
    """Interface for session persistence operations."""

    @abstractmethod
    def get(self, session_id: SessionId) -> Session | None:
        """Return a session by ID, or None if not found."""
        ...

    @abstractmethod
    def conditional_increment_participants(self, session_id: SessionId) -> bool:
        """Take one slot if, and only if, the session is not full at commit time.

        Returns False when no row was updated.
        """
        ...

    @abstractmethod
    def decrement_participants(self, session_id: SessionId) -> None:
        """Give back one slot, never going below zero."""
        ...

    @abstractmethod
    def create_many(self, sessions: list[Session]) -> list[Session]:
        """Persist a batch of sessions, all or nothing, in the given order."""
        ...

    @abstractmethod
    def list_upcoming(self, now: datetime, limit: int | None = None) -> list[Session]:
        """Return active sessions scheduled after ``now``, soonest first."""
        ...

    @abstractmethod
    def list_between(self, start: datetime, end: datetime) -> list[Session]:
        """Return active sessions scheduled within ``[start, end]``, soonest first."""
        ...


class BookingStore(ABC):
    """Interface for booking persistence operations."""

    @abstractmethod
    def create(self, booking: Booking) -> Booking:
        """Persist a new booking.

        Raises:
            AlreadyBookedError: If a CONFIRMED booking exists for the same
                user and session.
        """
        ...

    @abstractmethod
    def get(self, booking_id: BookingId) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def find_active_by_user(self, user_id: UserId) -> list[Booking]:
        """Return the user's CONFIRMED bookings."""
        ...

    @abstractmethod
    def find_active_by_session(self, session_id: SessionId) -> list[Booking]:
        """Return the session's CONFIRMED bookings, oldest first."""
        ...

    @abstractmethod
    def find_by_user(self, user_id: UserId) -> list[Booking]:
        """Return all of the user's bookings, newest first."""
        ...

    @abstractmethod
    def update_status(
        self,
        booking_id: BookingId,
        expected: BookingStatus,
        status: BookingStatus,
    ) -> Booking | None:
        """Move a booking from ``expected`` to ``status``.

        Returns None if the booking was not in ``expected`` any more.
        """
        ...

    @abstractmethod
    def delete(self, booking_id: BookingId) -> None:
        """Remove a booking row."""
        ...


class WalletStore(ABC):
    """Interface for points wallet persistence operations."""

    @abstractmethod
    def get(self, user_id: UserId) -> Profile | None:
        """Return a user's wallet, or None if they have none yet."""
        ...

    @abstractmethod
    def lock(self, user_id: UserId) -> Profile:
        """Lock the user's wallet row until the surrounding transaction ends.

        Creates an empty wallet when the user has none.
        """
        ...

    @abstractmethod
    def apply_delta(self, user_id: UserId, delta: int) -> Profile:
        """Add ``delta`` (negative for a debit) and recompute the level.

        Raises:
            InsufficientBalanceError: If the result would be negative.
        """
        ...
