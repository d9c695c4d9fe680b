"""Pytest configuration and shared fixtures.

The in-memory stores below guard each method with a lock so that every call
behaves like one SQL statement. The wallet store also hands out one lock per
user, held from ``lock()`` until the fake unit of work exits, like a row lock
held until commit. Capacity races are still left to the stores alone.
"""

import threading
from collections import defaultdict
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import replace
from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from booking.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Capacity,
    Points,
    Profile,
    Session,
    SessionId,
    SessionType,
    UserId,
)
from booking.domain.errors import AlreadyBookedError
from booking.services import (
    BookingCoordinator,
    BookingLedger,
    PointsWallet,
    RecurringSessionGenerator,
    SessionCatalog,
)
from booking.stores.interfaces import BookingStore, SessionStore, UnitOfWork, WalletStore
from helpers import NOW


class InMemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self._rows: dict[SessionId, Session] = {}
        self._lock = threading.Lock()

    def add(self, session: Session) -> Session:
        with self._lock:
            self._rows[session.id] = session
        return session

    def get(self, session_id: SessionId) -> Session | None:
        with self._lock:
            return self._rows.get(session_id)

    def conditional_increment_participants(self, session_id: SessionId) -> bool:
        with self._lock:
            session = self._rows.get(session_id)
            if session is None or session.is_full():
                return False
            self._rows[session_id] = replace(
                session,
                current_participants=Capacity(session.current_participants.value + 1),
            )
            return True

    def decrement_participants(self, session_id: SessionId) -> None:
        with self._lock:
            session = self._rows.get(session_id)
            if session is None or session.current_participants.value == 0:
                return
            self._rows[session_id] = replace(
                session,
                current_participants=Capacity(session.current_participants.value - 1),
            )

    def create_many(self, sessions: list[Session]) -> list[Session]:
        with self._lock:
            if any(session.id in self._rows for session in sessions):
                raise ValueError("duplicate session id")
            for session in sessions:
                self._rows[session.id] = session
        return list(sessions)

    def list_upcoming(self, now: datetime, limit: int | None = None) -> list[Session]:
        with self._lock:
            upcoming = sorted(
                (s for s in self._rows.values() if s.is_active and s.scheduled_at > now),
                key=lambda s: s.scheduled_at,
            )
        return upcoming[:limit] if limit is not None else upcoming

    def list_between(self, start: datetime, end: datetime) -> list[Session]:
        with self._lock:
            return sorted(
                (
                    s
                    for s in self._rows.values()
                    if s.is_active and start <= s.scheduled_at <= end
                ),
                key=lambda s: s.scheduled_at,
            )

    def __len__(self) -> int:
        return len(self._rows)


class InMemoryBookingStore(BookingStore):
    def __init__(self) -> None:
        self._rows: dict[BookingId, Booking] = {}
        self._lock = threading.Lock()
        self.fail_next_create = False

    def create(self, booking: Booking) -> Booking:
        with self._lock:
            if self.fail_next_create:
                self.fail_next_create = False
                raise AlreadyBookedError(str(booking.session_id))
            for existing in self._rows.values():
                if (
                    existing.is_active
                    and existing.user_id == booking.user_id
                    and existing.session_id == booking.session_id
                ):
                    raise AlreadyBookedError(str(booking.session_id))
            self._rows[booking.id] = booking
        return booking

    def get(self, booking_id: BookingId) -> Booking | None:
        with self._lock:
            return self._rows.get(booking_id)

    def find_active_by_user(self, user_id: UserId) -> list[Booking]:
        with self._lock:
            return [b for b in self._rows.values() if b.user_id == user_id and b.is_active]

    def find_active_by_session(self, session_id: SessionId) -> list[Booking]:
        with self._lock:
            attendees = [
                b for b in self._rows.values() if b.session_id == session_id and b.is_active
            ]
        return sorted(attendees, key=lambda b: b.created_at)

    def find_by_user(self, user_id: UserId) -> list[Booking]:
        with self._lock:
            mine = [b for b in self._rows.values() if b.user_id == user_id]
        return sorted(mine, key=lambda b: b.created_at, reverse=True)

    def update_status(
        self,
        booking_id: BookingId,
        expected: BookingStatus,
        status: BookingStatus,
    ) -> Booking | None:
        with self._lock:
            booking = self._rows.get(booking_id)
            if booking is None or booking.status is not expected:
                return None
            updated = replace(booking, status=status)
            self._rows[booking_id] = updated
            return updated

    def delete(self, booking_id: BookingId) -> None:
        with self._lock:
            self._rows.pop(booking_id, None)

    def all(self) -> list[Booking]:
        with self._lock:
            return list(self._rows.values())


class InMemoryWalletStore(WalletStore):
    def __init__(self) -> None:
        self._rows: dict[UserId, Profile] = {}
        self._lock = threading.Lock()
        self._row_locks = defaultdict(threading.RLock)
        self._held = threading.local()
        self.fail_debits = False

    def set_balance(self, user_id: UserId, points: int) -> None:
        with self._lock:
            self._rows[user_id] = Profile(user_id=user_id, points=Points(points))

    def get(self, user_id: UserId) -> Profile | None:
        with self._lock:
            return self._rows.get(user_id)

    def lock(self, user_id: UserId) -> Profile:
        with self._lock:
            row_lock = self._row_locks[user_id]
        row_lock.acquire()
        self._held_locks().append(row_lock)
        with self._lock:
            return self._rows.setdefault(
                user_id, Profile(user_id=user_id, points=Points(0))
            )

    def apply_delta(self, user_id: UserId, delta: int) -> Profile:
        with self._lock:
            wallet = self._rows.get(user_id, Profile(user_id=user_id, points=Points(0)))
            if delta < 0 and self.fail_debits:
                # Simulates another writer draining the wallet after the check.
                wallet = replace(wallet, points=Points(0))
            wallet = wallet.credit(delta) if delta >= 0 else wallet.debit(-delta)
            self._rows[user_id] = wallet
            return wallet

    def release_held(self) -> None:
        """Release every row lock the calling thread took since its last release."""
        held = self._held_locks()
        while held:
            held.pop().release()

    def _held_locks(self) -> list:
        if not hasattr(self._held, "locks"):
            self._held.locks = []
        return self._held.locks


class FakeUnitOfWork(UnitOfWork):
    """Releases the wallet row locks taken inside it when the outermost scope exits."""

    def __init__(self, wallet_store: InMemoryWalletStore) -> None:
        self.entered = 0
        self._wallet_store = wallet_store
        self._depth = threading.local()

    def atomic(self) -> AbstractContextManager[None]:
        self.entered += 1
        return self._scope()

    @contextmanager
    def _scope(self) -> Iterator[None]:
        depth = getattr(self._depth, "value", 0)
        self._depth.value = depth + 1
        try:
            yield
        finally:
            self._depth.value = depth
            if depth == 0:
                self._wallet_store.release_held()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def booking_store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def wallet_store() -> InMemoryWalletStore:
    return InMemoryWalletStore()


@pytest.fixture
def unit_of_work(wallet_store) -> FakeUnitOfWork:
    return FakeUnitOfWork(wallet_store)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def catalog(session_store, clock) -> SessionCatalog:
    return SessionCatalog(session_store, clock=clock)


@pytest.fixture
def ledger(booking_store, clock) -> BookingLedger:
    return BookingLedger(booking_store, clock=clock)


@pytest.fixture
def wallet(wallet_store) -> PointsWallet:
    return PointsWallet(wallet_store)


@pytest.fixture
def coordinator(catalog, ledger, wallet, unit_of_work) -> BookingCoordinator:
    return BookingCoordinator(catalog, ledger, wallet, unit_of_work)


@pytest.fixture
def generator(session_store, unit_of_work, clock) -> RecurringSessionGenerator:
    return RecurringSessionGenerator(session_store, unit_of_work, clock=clock)


@pytest.fixture
def make_session(session_store):
    """Add a session to the in-memory store; defaults to a free, open session."""

    def _make(
        max_participants: int = 10,
        current_participants: int = 0,
        points_required: int = 0,
        is_active: bool = True,
        scheduled_at: datetime = NOW + timedelta(days=1),
    ) -> Session:
        return session_store.add(
            Session(
                id=SessionId.new(),
                title="Speaking club",
                description="Small-group conversation practice",
                type=SessionType.SPEAKING,
                host_id=UserId(uuid4()),
                meeting_url="https://meet.example.com/club",
                scheduled_at=scheduled_at,
                duration_minutes=60,
                max_participants=Capacity(max_participants),
                current_participants=Capacity(current_participants),
                points_required=Points(points_required),
                is_active=is_active,
                created_at=NOW,
                updated_at=NOW,
            )
        )

    return _make


@pytest.fixture
def new_user():
    return lambda: UserId(uuid4())
