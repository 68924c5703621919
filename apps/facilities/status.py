"""Read-side views of the facilities: live resource status and a user's queue."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone  # type: ignore

from .models import Booking, Resource, WaitlistEntry
from .registry import resources_for_hostel
from .slots import booked_starts_today, build_slot_grid, grid_start


class LiveStatus:
    AVAILABLE = "AVAILABLE"
    IN_USE = "IN_USE"
    MAINTENANCE = "MAINTENANCE"
    FULLY_BOOKED = "FULLY_BOOKED"


@dataclass
class ResourceStatus:
    resource: Resource
    live_status: str
    slots_left: int
    current_user: str | None = None
    available_at: datetime | None = None


def resources_with_status(hostel_id, type: str | None = None, now: datetime | None = None) -> list[ResourceStatus]:
    """
    Derive each resource's live status from current bookings.

    Nothing here is persisted; the status is recomputed per request.
    """
    now = now or timezone.now()
    resources = list(resources_for_hostel(hostel_id, type))
    resource_ids = [r.pk for r in resources]

    running = {
        b.resource_id: b
        for b in Booking.objects.select_related("user").filter(
            resource_id__in=resource_ids,
            status__in=Booking.HOLDING_STATUSES,
            start_time__lte=now,
            end_time__gte=now,
        )
    }

    possible_slots = len(build_slot_grid(now))
    first_start = grid_start(now)
    booked_counts = Counter(
        resource_id
        for resource_id, start in booked_starts_today(resource_ids, now)
        if start >= first_start
    )

    statuses = []
    for resource in resources:
        slots_left = max(0, possible_slots - booked_counts.get(resource.pk, 0))
        active = running.get(resource.pk)

        if not resource.is_operational:
            statuses.append(ResourceStatus(resource, LiveStatus.MAINTENANCE, slots_left))
        elif active is not None:
            statuses.append(
                ResourceStatus(
                    resource,
                    LiveStatus.IN_USE,
                    slots_left,
                    current_user=active.user.display_name if active.user_id else "Someone",
                    available_at=active.end_time,
                )
            )
        elif slots_left == 0:
            statuses.append(ResourceStatus(resource, LiveStatus.FULLY_BOOKED, slots_left, current_user="Booked out"))
        else:
            statuses.append(ResourceStatus(resource, LiveStatus.AVAILABLE, slots_left))
    return statuses


def my_queue(user_id, now: datetime | None = None) -> dict:
    """The user's current or upcoming bookings and open waitlist entries."""
    now = now or timezone.now()
    bookings = Booking.objects.select_related("resource").filter(
        user_id=user_id,
        status__in=Booking.HOLDING_STATUSES,
        end_time__gte=now,
    )
    waitlists = WaitlistEntry.objects.filter(
        user_id=user_id,
        status=WaitlistEntry.Status.WAITING,
    )
    return {"bookings": list(bookings), "waitlists": list(waitlists)}
