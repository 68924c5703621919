"""Admin registration for facilities."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, Resource, WaitlistEntry


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "hostel_id", "is_operational", "maintenance_note", "updated_at")
    list_filter = ("type", "is_operational")
    search_fields = ("name", "hostel_id")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "resource",
        "user",
        "status",
        "start_time",
        "end_time",
        "cancellation_source",
        "created_at",
    )
    list_filter = ("status", "cancellation_source", "resource__type", "start_time")
    search_fields = ("resource__name", "user__email")
    raw_id_fields = ("resource", "user", "reassigned_from")
    readonly_fields = ("cancelled_at", "created_at", "updated_at")


@admin.register(WaitlistEntry)
class WaitlistEntryAdmin(admin.ModelAdmin):
    list_display = ("user", "hostel_id", "type", "status", "joined_at", "fulfilled_at")
    list_filter = ("type", "status")
    search_fields = ("user__email",)
    raw_id_fields = ("user",)
