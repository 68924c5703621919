"""Bookable slot grid for a resource.

The grid is recomputed on every call from the current time; nothing is
cached so a slot disappears as soon as somebody books it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from django.utils import timezone  # type: ignore

from shared.domain.value_objects import TimeSlot

from .conf import facility_setting
from .models import Booking, Resource
from .exceptions import ResourceNotFoundError


def grid_start(now: datetime) -> datetime:
    """Next full local hour; `now` itself when it is already on the hour."""
    local_now = timezone.localtime(now)
    start = local_now.replace(minute=0, second=0, microsecond=0)
    if local_now.minute > 0:
        start += timedelta(hours=1)
    return start


def build_slot_grid(
    now: datetime,
    *,
    slot_minutes: int | None = None,
    max_slots: int | None = None,
    last_hour: int | None = None,
) -> list[TimeSlot]:
    """
    Consecutive fixed-length slots from the next full hour.

    Generation stops at `max_slots` slots, at the first slot starting at
    or after `last_hour`, or when the grid would spill into the next day.
    """
    slot_minutes = slot_minutes or facility_setting("SLOT_MINUTES")
    max_slots = max_slots or facility_setting("MAX_SLOTS_PER_DAY")
    last_hour = last_hour if last_hour is not None else facility_setting("LAST_SLOT_HOUR")

    today = timezone.localtime(now).date()
    start = grid_start(now)
    length = timedelta(minutes=slot_minutes)

    slots: list[TimeSlot] = []
    for i in range(max_slots):
        slot_start = start + i * length
        if slot_start.date() != today or slot_start.hour >= last_hour:
            break
        slots.append(TimeSlot(slot_start, slot_start + length))
    return slots


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    local_now = timezone.localtime(now)
    day_start = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return day_start, day_start + timedelta(days=1)


def booked_starts_today(resource_ids: Iterable, now: datetime):
    """CONFIRMED/ACTIVE bookings starting today, as (resource_id, start_time) rows."""
    day_start, day_end = day_bounds(now)
    return Booking.objects.filter(
        resource_id__in=list(resource_ids),
        status__in=Booking.HOLDING_STATUSES,
        start_time__gte=day_start,
        start_time__lt=day_end,
    ).values_list("resource_id", "start_time")


def available_slots(resource_id, now: datetime | None = None) -> list[TimeSlot]:
    """Today's grid for the resource minus the slots already booked."""
    now = now or timezone.now()
    if not Resource.objects.filter(pk=resource_id).exists():
        raise ResourceNotFoundError()

    booked = {start for _, start in booked_starts_today([resource_id], now)}
    return [slot for slot in build_slot_grid(now) if slot.start not in booked]
