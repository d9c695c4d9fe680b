"""Domain error codes for the booking module.

Every error carries a stable code and a user-safe message. Callers branch on
the kind (the intermediate base classes) or on the code, never on the text.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    SESSION_NOT_BOOKABLE = "SESSION_NOT_BOOKABLE"
    ALREADY_BOOKED = "ALREADY_BOOKED"
    INVALID_BOOKING_STATE = "INVALID_BOOKING_STATE"
    SESSION_FULL = "SESSION_FULL"
    INSUFFICIENT_POINTS = "INSUFFICIENT_POINTS"
    BOOKING_LIMIT_EXCEEDED = "BOOKING_LIMIT_EXCEEDED"
    INVALID_ID = "INVALID_ID"
    INVALID_RECURRENCE = "INVALID_RECURRENCE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """A referenced session or booking does not exist."""


class UnauthorizedError(DomainError):
    """The caller does not own the resource."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.UNAUTHORIZED,
            message="Not allowed to modify this booking",
        )
        self.booking_id = booking_id


class InvalidStateError(DomainError):
    """The resource is not in a state that allows the operation."""


class ResourceExhaustedError(DomainError):
    """No capacity left."""


class InsufficientBalanceError(DomainError):
    """Raised when a wallet cannot cover a debit."""

    def __init__(self, user_id: str, required: int, available: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_POINTS,
            message="Insufficient points",
        )
        self.user_id = user_id
        self.required = required
        self.available = available


class LimitExceededError(DomainError):
    """A per-user quota has been reached."""


class ValidationError(DomainError):
    """Input is malformed."""


class SessionNotFoundError(NotFoundError):
    """Raised when a session is not found."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found",
        )
        self.session_id = session_id


class BookingNotFoundError(NotFoundError):
    """Raised when a booking is not found."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class SessionNotBookableError(InvalidStateError):
    """Raised when a session is inactive or already started."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_BOOKABLE,
            message="Session cannot be booked",
        )
        self.session_id = session_id


class AlreadyBookedError(InvalidStateError):
    """Raised when the user already holds a confirmed booking for the session."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_BOOKED,
            message="Session already booked",
        )
        self.session_id = session_id


class InvalidBookingStateError(InvalidStateError):
    """Raised on a transition out of a terminal booking status."""

    def __init__(self, booking_id: str, status: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_BOOKING_STATE,
            message="Booking is already cancelled or completed",
        )
        self.booking_id = booking_id
        self.status = status


class SessionFullError(ResourceExhaustedError):
    """Raised when no slot is left on a session."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_FULL,
            message="Session is full",
        )
        self.session_id = session_id


class BookingLimitExceededError(LimitExceededError):
    """Raised when a user already holds the maximum of active bookings."""

    def __init__(self, user_id: str, limit: int) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_LIMIT_EXCEEDED,
            message="Maximum active bookings reached",
        )
        self.user_id = user_id
        self.limit = limit


class InvalidIdError(ValidationError):
    """Raised when an ID is not a valid UUID."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )
        self.kind = kind


class InvalidRecurrenceError(ValidationError):
    """Raised when a recurring series request is malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_RECURRENCE,
            message=message,
        )
