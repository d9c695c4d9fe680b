from django.contrib import admin

from booking.domain import Points
from booking.models import Booking, Profile, Session


class OccurrenceInline(admin.TabularInline):
    model = Session
    fk_name = "recurring_parent"
    fields = ["scheduled_at", "max_participants", "current_participants", "is_active"]
    readonly_fields = ["current_participants"]
    extra = 0


class BookingInline(admin.TabularInline):
    model = Booking
    fields = ["user_id", "status", "points_spent", "created_at"]
    readonly_fields = fields
    extra = 0
    can_delete = False


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "type",
        "scheduled_at",
        "current_participants",
        "max_participants",
        "points_required",
        "is_active",
    ]
    list_filter = ["type", "is_active", "is_recurring"]
    search_fields = ["title"]
    # Participant counts only move through bookings.
    readonly_fields = ["current_participants", "recurring_parent", "recurring_weeks"]
    inlines = [OccurrenceInline, BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["user_id", "session", "status", "points_spent", "created_at"]
    list_filter = ["status"]
    readonly_fields = ["user_id", "session", "status", "points_spent"]


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ["user_id", "points", "level"]
    search_fields = ["user_id"]
    readonly_fields = ["level"]

    def save_model(self, request, obj, form, change):
        obj.level = Points(obj.points).level
        super().save_model(request, obj, form, change)
