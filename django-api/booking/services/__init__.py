from booking.services.booking_coordinator import BookingCoordinator, BookingEligibility
from booking.services.booking_ledger import BookingLedger
from booking.services.points_wallet import PointsWallet
from booking.services.recurring_sessions import (
    RecurringSessionGenerator,
    RecurringSessionRequest,
)
from booking.services.session_catalog import SessionCatalog

__all__ = [
    "BookingCoordinator",
    "BookingEligibility",
    "BookingLedger",
    "PointsWallet",
    "RecurringSessionGenerator",
    "RecurringSessionRequest",
    "SessionCatalog",
]
