"""Booking ledger: exclusive slot reservations under a resource row lock."""

from __future__ import annotations

import logging
from datetime import datetime

from django.db import IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import TimeSlot

from .domain.events import BookingConfirmed
from .exceptions import InvalidTimeRangeError, ResourceUnavailableError, SlotTakenError
from .models import Booking, Resource

logger = logging.getLogger(__name__)


def _slot(start: datetime, end: datetime) -> TimeSlot:
    try:
        return TimeSlot(start, end)
    except ValueError as exc:
        raise InvalidTimeRangeError() from exc


def slot_is_taken(resource_id, start: datetime) -> bool:
    """
    Exact start-time match against bookings that hold the resource.

    Every booking made through the public flow sits on the fixed slot
    grid, where equal starts and overlapping windows are the same thing.
    """
    return Booking.objects.filter(
        resource_id=resource_id,
        status__in=Booking.HOLDING_STATUSES,
        start_time=start,
    ).exists()


def insert_booking(
    resource: Resource,
    user_id,
    start: datetime,
    end: datetime,
    *,
    reassigned_from: Booking | None = None,
) -> Booking:
    """
    Insert a CONFIRMED booking.

    Must run inside a transaction. The partial unique index on
    (resource, start_time) is the last line against double booking; a
    violation surfaces as SLOT_TAKEN without poisoning the outer
    transaction.
    """
    try:
        with transaction.atomic():
            return Booking.objects.create(
                resource=resource,
                user_id=user_id,
                start_time=start,
                end_time=end,
                status=Booking.Status.CONFIRMED,
                reassigned_from=reassigned_from,
            )
    except IntegrityError as exc:
        raise SlotTakenError() from exc


def _reserve(user_id, resource_id, start: datetime, end: datetime, *, bypassed_queue: bool) -> Booking:
    slot = _slot(start, end)

    with DjangoUnitOfWork() as uow:
        # Serializes every booking attempt on this resource until commit
        resource = uow.lock_one(Resource.objects.filter(pk=resource_id))
        if resource is None or not resource.is_operational:
            raise ResourceUnavailableError()

        if slot_is_taken(resource.pk, slot.start):
            raise SlotTakenError()

        booking = insert_booking(resource, user_id, slot.start, slot.end)
        uow.record(
            BookingConfirmed(
                aggregate_id=booking.id,
                booking_id=booking.id,
                resource_id=resource.pk,
                user_id=user_id,
                slot=slot,
                bypassed_queue=bypassed_queue,
            )
        )

    logger.info(
        f"Booked {resource.name} ({resource.pk}) {slot} for user {user_id}"
        + (" (queue bypassed)" if bypassed_queue else "")
    )
    return booking


def book_slot(user_id, resource_id, start: datetime, end: datetime) -> Booking:
    """
    Reserve the resource for exactly [start, end).

    Raises:
        ResourceUnavailableError: resource missing or under maintenance
        SlotTakenError: a CONFIRMED/ACTIVE booking already starts at `start`
    """
    return _reserve(user_id, resource_id, start, end, bypassed_queue=False)


def bypass_book(user_id, resource_id, start: datetime, end: datetime) -> Booking:
    """Admin assignment of a slot to a resident; same lock and conflict check."""
    return _reserve(user_id, resource_id, start, end, bypassed_queue=True)


def active_bookings(hostel_id, now: datetime | None = None):
    """CONFIRMED/ACTIVE bookings in the hostel that have not ended yet."""
    now = now or timezone.now()
    return (
        Booking.objects.select_related("resource", "user")
        .filter(
            resource__hostel_id=hostel_id,
            status__in=Booking.HOLDING_STATUSES,
            end_time__gte=now,
        )
        .order_by("start_time")
    )
