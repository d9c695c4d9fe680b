"""Session catalog - loads sessions and moves their capacity counters."""

from collections.abc import Callable
from datetime import datetime, timezone

from booking.domain import Session, SessionId
from booking.domain.errors import (
    SessionFullError,
    SessionNotBookableError,
    SessionNotFoundError,
)
from booking.stores.interfaces import SessionStore

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionCatalog:
    """Service for session lookup and slot accounting."""

    def __init__(self, store: SessionStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def get(self, session_id: SessionId) -> Session:
        """Return a session by ID.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        session = self._store.get(session_id)
        if session is None:
            raise SessionNotFoundError(str(session_id))
        return session

    def find_bookable(self, session_id: SessionId) -> Session:
        """Return a session that can take a new booking right now.

        Raises:
            SessionNotFoundError: If the session does not exist.
            SessionNotBookableError: If it is inactive or no longer in the future.
            SessionFullError: If every slot is taken.
        """
        session = self.get(session_id)
        if not session.is_active or session.has_started(self._clock()):
            raise SessionNotBookableError(str(session_id))
        if session.is_full():
            raise SessionFullError(str(session_id))
        return session

    def closed_reasons(self, session: Session) -> list[str]:
        """Explain why ``session`` cannot take a booking now; empty if it can."""
        reasons = []
        if not session.is_active:
            reasons.append("Session is not active")
        if session.has_started(self._clock()):
            reasons.append("Session has already started")
        if session.is_full():
            reasons.append("Session is full")
        return reasons

    def try_reserve_slot(self, session_id: SessionId) -> bool:
        return self._store.conditional_increment_participants(session_id)

    def release_slot(self, session_id: SessionId) -> None:
        self._store.decrement_participants(session_id)

    def list_upcoming(self, limit: int | None = None) -> list[Session]:
        return self._store.list_upcoming(self._clock(), limit)

    def list_between(self, start: datetime, end: datetime) -> list[Session]:
        return self._store.list_between(start, end)
