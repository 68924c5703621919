"""Aggregations over facility bookings and the waitlist.

Everything here is a read-only projection of the facilities tables,
scoped to one hostel and one resource type.
"""

from __future__ import annotations

import math

from django.db.models import Count  # type: ignore
from django.db.models.functions import ExtractHour, ExtractWeekDay  # type: ignore

from apps.facilities.models import Booking, ResourceType, WaitlistEntry

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Bookings that actually used (or still hold) the resource
USED_STATUSES = [Booking.Status.CONFIRMED, Booking.Status.ACTIVE, Booking.Status.COMPLETED]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _bookings(hostel_id, type: str = ResourceType.LAUNDRY):
    return Booking.objects.filter(resource__hostel_id=hostel_id, resource__type=type)


def status_counts(hostel_id, type: str = ResourceType.LAUNDRY) -> dict[str, int]:
    counts = {status: 0 for status in Booking.Status.values}
    rows = _bookings(hostel_id, type).values("status").annotate(n=Count("id")).order_by()
    for row in rows:
        counts[row["status"]] = row["n"]
    return counts


def heatmap(hostel_id, type: str = ResourceType.LAUNDRY) -> list[dict[str, int]]:
    """
    Booking counts by local weekday (0=Sunday..6=Saturday) and hour.

    Extraction happens in the current time zone, so the buckets follow
    the hostel's wall clock rather than UTC.
    """
    rows = (
        _bookings(hostel_id, type)
        .filter(status__in=USED_STATUSES)
        .annotate(weekday=ExtractWeekDay("start_time"), hour=ExtractHour("start_time"))
        .values("weekday", "hour")
        .annotate(booking_count=Count("id"))
        .order_by("weekday", "hour")
    )
    # Django numbers weekdays 1=Sunday..7=Saturday
    return [
        {"dayOfWeek": row["weekday"] - 1, "hour": row["hour"], "bookingCount": row["booking_count"]}
        for row in rows
    ]


def peak_weekdays(hostel_id, type: str = ResourceType.LAUNDRY, limit: int = 3) -> list[dict]:
    totals: dict[int, int] = {}
    for cell in heatmap(hostel_id, type):
        totals[cell["dayOfWeek"]] = totals.get(cell["dayOfWeek"], 0) + cell["bookingCount"]
    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))[:limit]
    return [{"day": WEEKDAY_NAMES[day], "dayOfWeek": day, "bookingCount": n} for day, n in ranked]


def waitlist_turnaround(hostel_id, type: str = ResourceType.LAUNDRY) -> dict[str, int]:
    """Number of fulfilled entries and their average wait in minutes."""
    entries = WaitlistEntry.objects.filter(
        hostel_id=hostel_id,
        type=type,
        status=WaitlistEntry.Status.FULFILLED,
        fulfilled_at__isnull=False,
    ).values_list("joined_at", "fulfilled_at")

    waits = [(fulfilled - joined).total_seconds() / 60 for joined, fulfilled in entries]
    if not waits:
        return {"totalFulfilled": 0, "avgWaitMinutes": 0}
    return {
        "totalFulfilled": len(waits),
        "avgWaitMinutes": _round_half_up(sum(waits) / len(waits)),
    }


def flake_rate(hostel_id, type: str = ResourceType.LAUNDRY) -> dict[str, int]:
    """Share of bookings that ended up cancelled, in whole percent."""
    counts = status_counts(hostel_id, type)
    completed = counts[Booking.Status.COMPLETED.value]
    cancelled = counts[Booking.Status.CANCELLED.value]
    confirmed = counts[Booking.Status.CONFIRMED.value]
    active = counts[Booking.Status.ACTIVE.value]
    total = completed + cancelled + confirmed + active
    return {
        "total": total,
        "completed": completed,
        "cancelled": cancelled,
        "confirmed": confirmed,
        "active": active,
        "flakeRate": _round_half_up(cancelled / total * 100) if total else 0,
    }


def overview(hostel_id, type: str = ResourceType.LAUNDRY) -> dict:
    counts = status_counts(hostel_id, type)
    waiting = WaitlistEntry.objects.filter(
        hostel_id=hostel_id,
        type=type,
        status=WaitlistEntry.Status.WAITING,
    ).count()
    return {
        "type": type,
        "totalBookings": sum(counts.values()),
        "byStatus": counts,
        "waitlistLength": waiting,
        "peakDays": peak_weekdays(hostel_id, type),
    }
