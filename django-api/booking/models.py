"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
The check and unique constraints below are the last line of defence for the
capacity, wallet and one-confirmed-booking invariants.
"""

import uuid

from django.db import models
from django.db.models import F, Q


class Session(models.Model):
    """Persistence model for bookable sessions."""

    class Type(models.TextChoices):
        SPEAKING = "SPEAKING"
        EVENT = "EVENT"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=16, choices=Type.choices)
    host_id = models.UUIDField()
    meeting_url = models.URLField(max_length=500, blank=True, null=True)
    scheduled_at = models.DateTimeField()
    duration_minutes = models.PositiveIntegerField()
    max_participants = models.PositiveIntegerField()
    current_participants = models.PositiveIntegerField(default=0)
    points_required = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    is_recurring = models.BooleanField(default=False)
    recurring_parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        related_name="occurrences",
        blank=True,
        null=True,
    )
    recurring_weeks = models.PositiveSmallIntegerField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["scheduled_at"]
        indexes = [
            models.Index(fields=["scheduled_at"], name="session_scheduled_at_idx"),
            models.Index(
                fields=["is_active", "scheduled_at"],
                name="session_active_scheduled_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(max_participants__gte=1),
                name="session_max_participants_positive",
            ),
            models.CheckConstraint(
                condition=Q(duration_minutes__gte=1),
                name="session_duration_positive",
            ),
            models.CheckConstraint(
                condition=Q(current_participants__lte=F("max_participants")),
                name="session_participants_within_capacity",
            ),
            models.CheckConstraint(
                condition=Q(recurring_parent__isnull=True)
                | Q(recurring_weeks__isnull=True),
                name="session_only_root_carries_weeks",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.scheduled_at}"


class Booking(models.Model):
    """Persistence model for bookings."""

    class Status(models.TextChoices):
        CONFIRMED = "CONFIRMED"
        CANCELLED = "CANCELLED"
        COMPLETED = "COMPLETED"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField()
    session = models.ForeignKey(
        Session, on_delete=models.PROTECT, related_name="bookings"
    )
    status = models.CharField(
        max_length=16, choices=Status.choices, default=Status.CONFIRMED
    )
    points_spent = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user_id", "status"], name="booking_user_status_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "session"],
                condition=Q(status="CONFIRMED"),
                name="booking_one_confirmed_per_user_session",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} - {self.session_id} ({self.status})"


class Profile(models.Model):
    """Persistence model for a user's points wallet."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(unique=True)
    points = models.PositiveIntegerField(default=0)
    level = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.user_id} - {self.points} pts"
