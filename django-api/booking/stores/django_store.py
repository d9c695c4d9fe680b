"""Django ORM implementation of the stores.

Capacity and status changes are issued as conditional UPDATEs and judged by
the affected-row count. Wallet changes run under ``SELECT ... FOR UPDATE``.
"""

from contextlib import AbstractContextManager
from datetime import datetime

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from booking import models as orm
from booking.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Capacity,
    Points,
    Profile,
    RecurrenceChild,
    RecurrenceRoot,
    Session,
    SessionId,
    SessionType,
    UserId,
)
from booking.domain.errors import AlreadyBookedError
from booking.stores.interfaces import BookingStore, SessionStore, UnitOfWork, WalletStore


class DjangoUnitOfWork(UnitOfWork):
    """Maps a unit of work onto ``transaction.atomic``."""

    def __init__(self, using: str | None = None) -> None:
        self._using = using

    def atomic(self) -> AbstractContextManager[None]:
        return transaction.atomic(using=self._using)


def _session_to_domain(row: orm.Session) -> Session:
    recurrence = None
    if row.recurring_parent_id is not None:
        recurrence = RecurrenceChild(parent_id=SessionId(row.recurring_parent_id))
    elif row.is_recurring and row.recurring_weeks is not None:
        recurrence = RecurrenceRoot(weeks=row.recurring_weeks)
    return Session(
        id=SessionId(row.id),
        title=row.title,
        description=row.description,
        type=SessionType(row.type),
        host_id=UserId(row.host_id),
        meeting_url=row.meeting_url,
        scheduled_at=row.scheduled_at,
        duration_minutes=row.duration_minutes,
        max_participants=Capacity(row.max_participants),
        current_participants=Capacity(row.current_participants),
        points_required=Points(row.points_required),
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
        recurrence=recurrence,
    )


def _session_to_row(session: Session) -> orm.Session:
    parent = session.recurring_parent_id
    return orm.Session(
        id=session.id.value,
        title=session.title,
        description=session.description,
        type=session.type.value,
        host_id=session.host_id.value,
        meeting_url=session.meeting_url,
        scheduled_at=session.scheduled_at,
        duration_minutes=session.duration_minutes,
        max_participants=session.max_participants.value,
        current_participants=session.current_participants.value,
        points_required=session.points_required.value,
        is_active=session.is_active,
        is_recurring=session.is_recurring,
        recurring_parent_id=parent.value if parent else None,
        recurring_weeks=session.recurring_weeks,
    )


def _booking_to_domain(row: orm.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        user_id=UserId(row.user_id),
        session_id=SessionId(row.session_id),
        status=BookingStatus(row.status),
        points_spent=Points(row.points_spent),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _profile_to_domain(row: orm.Profile) -> Profile:
    return Profile(user_id=UserId(row.user_id), points=Points(row.points))


class DjangoSessionStore(SessionStore):
    """PostgreSQL-backed session store using Django ORM."""

    def get(self, session_id: SessionId) -> Session | None:
        row = orm.Session.objects.filter(pk=session_id.value).first()
        return _session_to_domain(row) if row else None

    def conditional_increment_participants(self, session_id: SessionId) -> bool:
        updated = orm.Session.objects.filter(
            pk=session_id.value,
            current_participants__lt=F("max_participants"),
        ).update(
            current_participants=F("current_participants") + 1,
            updated_at=timezone.now(),
        )
        return updated == 1

    def decrement_participants(self, session_id: SessionId) -> None:
        orm.Session.objects.filter(
            pk=session_id.value,
            current_participants__gt=0,
        ).update(
            current_participants=F("current_participants") - 1,
            updated_at=timezone.now(),
        )

    def create_many(self, sessions: list[Session]) -> list[Session]:
        rows = [_session_to_row(session) for session in sessions]
        # Roots first so children's parent rows exist on databases that check
        # foreign keys immediately.
        rows.sort(key=lambda row: row.recurring_parent_id is not None)
        with transaction.atomic():
            orm.Session.objects.bulk_create(rows)
        stored = orm.Session.objects.in_bulk([session.id.value for session in sessions])
        return [_session_to_domain(stored[session.id.value]) for session in sessions]

    def list_upcoming(self, now: datetime, limit: int | None = None) -> list[Session]:
        rows = orm.Session.objects.filter(is_active=True, scheduled_at__gt=now).order_by(
            "scheduled_at"
        )
        if limit is not None:
            rows = rows[:limit]
        return [_session_to_domain(row) for row in rows]

    def list_between(self, start: datetime, end: datetime) -> list[Session]:
        rows = orm.Session.objects.filter(
            is_active=True, scheduled_at__range=(start, end)
        ).order_by("scheduled_at")
        return [_session_to_domain(row) for row in rows]


class DjangoBookingStore(BookingStore):
    """PostgreSQL-backed booking store using Django ORM."""

    def create(self, booking: Booking) -> Booking:
        row = orm.Booking(
            id=booking.id.value,
            user_id=booking.user_id.value,
            session_id=booking.session_id.value,
            status=booking.status.value,
            points_spent=booking.points_spent.value,
        )
        try:
            # Savepoint keeps the outer transaction usable after a violation.
            with transaction.atomic():
                row.save(force_insert=True)
        except IntegrityError as exc:
            # Only the one-confirmed-per-user-and-session index means a duplicate.
            if not self._has_confirmed(booking.user_id, booking.session_id):
                raise
            raise AlreadyBookedError(str(booking.session_id)) from exc
        return _booking_to_domain(row)

    def _has_confirmed(self, user_id: UserId, session_id: SessionId) -> bool:
        return orm.Booking.objects.filter(
            user_id=user_id.value,
            session_id=session_id.value,
            status=orm.Booking.Status.CONFIRMED,
        ).exists()

    def get(self, booking_id: BookingId) -> Booking | None:
        row = orm.Booking.objects.filter(pk=booking_id.value).first()
        return _booking_to_domain(row) if row else None

    def find_active_by_user(self, user_id: UserId) -> list[Booking]:
        rows = orm.Booking.objects.filter(
            user_id=user_id.value, status=orm.Booking.Status.CONFIRMED
        )
        return [_booking_to_domain(row) for row in rows]

    def find_active_by_session(self, session_id: SessionId) -> list[Booking]:
        rows = orm.Booking.objects.filter(
            session_id=session_id.value, status=orm.Booking.Status.CONFIRMED
        ).order_by("created_at")
        return [_booking_to_domain(row) for row in rows]

    def find_by_user(self, user_id: UserId) -> list[Booking]:
        rows = orm.Booking.objects.filter(user_id=user_id.value).order_by("-created_at")
        return [_booking_to_domain(row) for row in rows]

    def update_status(
        self,
        booking_id: BookingId,
        expected: BookingStatus,
        status: BookingStatus,
    ) -> Booking | None:
        updated = orm.Booking.objects.filter(
            pk=booking_id.value, status=expected.value
        ).update(status=status.value, updated_at=timezone.now())
        if updated != 1:
            return None
        return self.get(booking_id)

    def delete(self, booking_id: BookingId) -> None:
        orm.Booking.objects.filter(pk=booking_id.value).delete()


class DjangoWalletStore(WalletStore):
    """PostgreSQL-backed points wallet store using Django ORM."""

    def get(self, user_id: UserId) -> Profile | None:
        row = orm.Profile.objects.filter(user_id=user_id.value).first()
        return _profile_to_domain(row) if row else None

    def lock(self, user_id: UserId) -> Profile:
        row, _ = orm.Profile.objects.select_for_update().get_or_create(
            user_id=user_id.value
        )
        return _profile_to_domain(row)

    def apply_delta(self, user_id: UserId, delta: int) -> Profile:
        with transaction.atomic():
            row, _ = orm.Profile.objects.select_for_update().get_or_create(
                user_id=user_id.value
            )
            wallet = _profile_to_domain(row)
            wallet = wallet.credit(delta) if delta >= 0 else wallet.debit(-delta)
            row.points = wallet.points.value
            row.level = wallet.level
            row.save(update_fields=["points", "level", "updated_at"])
        return wallet
