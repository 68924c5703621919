"""Facility domain models: resources, slot bookings and the waitlist."""

from __future__ import annotations

import math
import uuid
from datetime import datetime

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class ResourceType(models.TextChoices):
    LAUNDRY = "LAUNDRY", _("Laundry machine")
    BADMINTON = "BADMINTON", _("Badminton court")


class Resource(models.Model):
    """A physically exclusive machine or court inside a hostel."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    hostel_id = models.UUIDField(db_index=True)
    type = models.CharField(max_length=20, choices=ResourceType.choices)
    name = models.CharField(max_length=100)
    is_operational = models.BooleanField(default=True)
    maintenance_note = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Resource")
        verbose_name_plural = _("Resources")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["hostel_id", "type"], name="fac_resource_hostel_type"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.get_type_display()})"

    def set_operational(self, is_operational: bool, note: str | None = None) -> None:
        self.is_operational = is_operational
        # A note only makes sense while the resource is out of order
        self.maintenance_note = "" if is_operational else (note or "")
        self.save(update_fields=["is_operational", "maintenance_note", "updated_at"])


class Booking(models.Model):
    """Exclusive hold of a resource for one time window."""

    class Status(models.TextChoices):
        CONFIRMED = "CONFIRMED", _("Confirmed")
        ACTIVE = "ACTIVE", _("Active")
        CANCELLED = "CANCELLED", _("Cancelled")
        COMPLETED = "COMPLETED", _("Completed")

    class CancellationSource(models.TextChoices):
        USER = "USER", _("User")
        ADMIN = "ADMIN", _("Admin")
        SYSTEM = "SYSTEM", _("System")

    # Statuses that occupy the resource
    HOLDING_STATUSES = (Status.CONFIRMED, Status.ACTIVE)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    resource = models.ForeignKey(
        Resource,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="facility_bookings",
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.CONFIRMED,
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_source = models.CharField(
        max_length=20,
        choices=CancellationSource.choices,
        blank=True,
    )
    reassigned_from = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reassignments",
        help_text=_("Cancelled booking whose remaining time this booking took over."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="facility_booking_valid_range",
            ),
            models.UniqueConstraint(
                fields=["resource", "start_time"],
                condition=models.Q(status__in=["CONFIRMED", "ACTIVE"]),
                name="facility_booking_unique_live_slot",
            ),
        ]
        indexes = [
            models.Index(fields=["resource", "start_time"], name="fac_booking_resource_start"),
            models.Index(fields=["status", "start_time"], name="fac_booking_status_start"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} on {self.resource_id} at {self.start_time:%Y-%m-%d %H:%M}"

    def remaining_minutes(self, now: datetime) -> int:
        """Whole minutes left until the hard end boundary, half rounded up."""
        return math.floor((self.end_time - now).total_seconds() / 60 + 0.5)

    def mark_cancelled(self, source: str, now: datetime | None = None) -> None:
        self.status = self.Status.CANCELLED
        self.cancellation_source = source
        self.cancelled_at = now or timezone.now()
        self.save(update_fields=["status", "cancellation_source", "cancelled_at", "updated_at"])


class WaitlistEntry(models.Model):
    """A resident waiting for any resource of one type in their hostel."""

    class Status(models.TextChoices):
        WAITING = "WAITING", _("Waiting")
        FULFILLED = "FULFILLED", _("Fulfilled")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="waitlist_entries",
    )
    hostel_id = models.UUIDField()
    type = models.CharField(max_length=20, choices=ResourceType.choices)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.WAITING,
    )
    joined_at = models.DateTimeField(default=timezone.now)
    fulfilled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Waitlist entry")
        verbose_name_plural = _("Waitlist entries")
        ordering = ["joined_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "type"],
                condition=models.Q(status="WAITING"),
                name="facility_waitlist_one_waiting_per_type",
            ),
        ]
        indexes = [
            models.Index(fields=["hostel_id", "type", "status", "joined_at"], name="fac_waitlist_fifo"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id} waiting for {self.type} since {self.joined_at:%H:%M}"

    def mark_fulfilled(self, now: datetime | None = None) -> None:
        self.status = self.Status.FULFILLED
        self.fulfilled_at = now or timezone.now()
        self.save(update_fields=["status", "fulfilled_at"])
