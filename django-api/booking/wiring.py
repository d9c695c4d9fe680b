"""Builds the booking services over the Django ORM stores.

The outer HTTP or CLI layer calls these instead of assembling stores itself.
"""

from booking.services import (
    BookingCoordinator,
    BookingLedger,
    PointsWallet,
    RecurringSessionGenerator,
    SessionCatalog,
)
from booking.stores.django_store import (
    DjangoBookingStore,
    DjangoSessionStore,
    DjangoUnitOfWork,
    DjangoWalletStore,
)


def build_booking_coordinator() -> BookingCoordinator:
    return BookingCoordinator(
        catalog=SessionCatalog(DjangoSessionStore()),
        ledger=BookingLedger(DjangoBookingStore()),
        wallet=PointsWallet(DjangoWalletStore()),
        unit_of_work=DjangoUnitOfWork(),
    )


def build_recurring_session_generator() -> RecurringSessionGenerator:
    return RecurringSessionGenerator(DjangoSessionStore(), DjangoUnitOfWork())


def build_points_wallet() -> PointsWallet:
    return PointsWallet(DjangoWalletStore())
