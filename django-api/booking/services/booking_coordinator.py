"""Booking coordinator - reserves and releases session slots against points.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Each public operation runs as one unit of work. The user's wallet row is
locked first, which serializes concurrent requests from the same user; the
slot itself is taken with a conditional increment, which arbitrates between
different users racing for the last places. Failures after the slot is taken
are compensated inside the same unit of work before the error propagates.
No operation retries.
"""

import logging
from dataclasses import dataclass
from typing import TypeVar

from booking.domain import MAX_ACTIVE_BOOKINGS, Booking, BookingId, SessionId, UserId
from booking.domain.errors import (
    AlreadyBookedError,
    BookingLimitExceededError,
    DomainError,
    InsufficientBalanceError,
    InvalidIdError,
    SessionFullError,
)
from booking.services.booking_ledger import BookingLedger
from booking.services.points_wallet import PointsWallet
from booking.services.session_catalog import SessionCatalog
from booking.stores.interfaces import UnitOfWork

logger = logging.getLogger(__name__)

IdT = TypeVar("IdT", UserId, SessionId, BookingId)


def _parse_id(id_type: type[IdT], value: str, kind: str) -> IdT:
    try:
        return id_type.from_string(value)
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidIdError(kind) from exc


@dataclass(frozen=True)
class BookingEligibility:
    """Dry-run answer to whether a user could book a session right now."""

    session_id: SessionId
    points_required: int
    spots_available: int
    user_points: int
    active_bookings: int
    reasons: tuple[str, ...] = ()

    @property
    def can_book(self) -> bool:
        return not self.reasons


class BookingCoordinator:
    """Creates and cancels bookings atomically."""

    def __init__(
        self,
        catalog: SessionCatalog,
        ledger: BookingLedger,
        wallet: PointsWallet,
        unit_of_work: UnitOfWork,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._wallet = wallet
        self._uow = unit_of_work

    def create_booking(self, user_id: str, session_id: str) -> Booking:
        """Book one slot of a session for a user.

        Raises:
            InvalidIdError: If either ID is malformed.
            SessionNotFoundError: If the session does not exist.
            SessionNotBookableError: If the session is inactive or in the past.
            InsufficientBalanceError: If the user cannot pay the session's points.
            BookingLimitExceededError: If the user already has the maximum of
                active bookings.
            AlreadyBookedError: If the user already booked this session.
            SessionFullError: If no slot is left.
        """
        uid = _parse_id(UserId, user_id, "user")
        sid = _parse_id(SessionId, session_id, "session")

        with self._uow.atomic():
            session = self._catalog.find_bookable(sid)
            wallet = self._wallet.lock(uid)

            price = session.points_required.value
            if price > 0 and not wallet.points.covers(price):
                raise InsufficientBalanceError(
                    str(uid), required=price, available=wallet.points.value
                )
            if self._ledger.count_active(uid) >= MAX_ACTIVE_BOOKINGS:
                raise BookingLimitExceededError(str(uid), MAX_ACTIVE_BOOKINGS)
            if self._ledger.has_active_booking(uid, sid):
                raise AlreadyBookedError(str(sid))

            if not self._catalog.try_reserve_slot(sid):
                logger.warning("Lost the race for the last slot of session %s", sid)
                raise SessionFullError(str(sid))
            booking = self._confirm(uid, sid, price)

        logger.info(
            "Booking %s confirmed for user %s on session %s (%d points)",
            booking.id,
            uid,
            sid,
            price,
        )
        return booking

    def _confirm(self, user_id: UserId, session_id: SessionId, price: int) -> Booking:
        # The slot is already held here; undo it on any domain failure.
        try:
            booking = self._ledger.create(user_id, session_id, points_spent=price)
        except DomainError:
            logger.warning("Releasing slot on session %s after failed booking", session_id)
            self._catalog.release_slot(session_id)
            raise

        try:
            if price > 0:
                self._wallet.debit(user_id, price)
        except DomainError:
            logger.warning(
                "Rolling back booking %s after failed debit of %d points", booking.id, price
            )
            self._ledger.discard(booking.id)
            self._catalog.release_slot(session_id)
            raise
        return booking

    def cancel_booking(self, user_id: str, booking_id: str) -> Booking:
        """Cancel a user's booking, free its slot and refund its points.

        Raises:
            InvalidIdError: If either ID is malformed.
            BookingNotFoundError: If the booking does not exist.
            UnauthorizedError: If the booking belongs to another user.
            InvalidBookingStateError: If the booking is not CONFIRMED.
        """
        uid = _parse_id(UserId, user_id, "user")
        bid = _parse_id(BookingId, booking_id, "booking")

        with self._uow.atomic():
            booking = self._ledger.find_owned(bid, uid)
            cancelled = self._ledger.cancel(booking)
            self._catalog.release_slot(booking.session_id)
            refund = booking.points_spent.value
            if refund > 0:
                self._wallet.credit(uid, refund)

        logger.info(
            "Booking %s cancelled by user %s (%d points refunded)", bid, uid, refund
        )
        return cancelled

    def check_eligibility(self, user_id: str, session_id: str) -> BookingEligibility:
        """Apply the create_booking rules without taking a slot or points.

        Every failing rule is reported, not just the first. The answer can be
        stale by the time the user books.

        Raises:
            InvalidIdError: If either ID is malformed.
            SessionNotFoundError: If the session does not exist.
        """
        uid = _parse_id(UserId, user_id, "user")
        sid = _parse_id(SessionId, session_id, "session")

        session = self._catalog.get(sid)
        points = self._wallet.balance(uid)
        active = self._ledger.count_active(uid)
        price = session.points_required.value

        reasons = self._catalog.closed_reasons(session)
        if self._ledger.has_active_booking(uid, sid):
            reasons.append("Already booked this session")
        if active >= MAX_ACTIVE_BOOKINGS:
            reasons.append(f"Maximum active bookings reached ({MAX_ACTIVE_BOOKINGS})")
        if price > 0 and points < price:
            reasons.append(f"Insufficient points (need {price}, have {points})")

        return BookingEligibility(
            session_id=sid,
            points_required=price,
            spots_available=session.available_slots,
            user_points=points,
            active_bookings=active,
            reasons=tuple(reasons),
        )
