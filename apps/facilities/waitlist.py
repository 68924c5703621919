"""FIFO waitlist per (hostel, resource type)."""

from __future__ import annotations

import logging
from datetime import datetime

from django.db import IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import lock_for_update

from .exceptions import AlreadyWaitingError, InvalidBookingStateError
from .models import WaitlistEntry

logger = logging.getLogger(__name__)


def waiting_queryset(hostel_id, type: str):
    return WaitlistEntry.objects.filter(
        hostel_id=hostel_id,
        type=type,
        status=WaitlistEntry.Status.WAITING,
    ).order_by("joined_at", "id")


@transaction.atomic
def join_waitlist(user_id, hostel_id, type: str, now: datetime | None = None) -> WaitlistEntry:
    """
    Put the user in line for any resource of `type` in the hostel.

    A user holds at most one WAITING entry per type; a second join is
    rejected with ALREADY_WAITING and creates nothing.
    """
    already_waiting = WaitlistEntry.objects.filter(
        user_id=user_id,
        type=type,
        status=WaitlistEntry.Status.WAITING,
    ).exists()
    if already_waiting:
        raise AlreadyWaitingError()

    try:
        with transaction.atomic():
            entry = WaitlistEntry.objects.create(
                user_id=user_id,
                hostel_id=hostel_id,
                type=type,
                joined_at=now or timezone.now(),
            )
    except IntegrityError as exc:
        # Lost a race against a concurrent join by the same user
        raise AlreadyWaitingError() from exc

    logger.info(f"User {user_id} joined the {type} waitlist of hostel {hostel_id}")
    return entry


def dequeue_earliest(hostel_id, type: str) -> WaitlistEntry | None:
    """
    Lock and return the longest-waiting entry, or None.

    Must run inside a transaction. Rows already claimed by a concurrent
    promotion are skipped where the backend supports SKIP LOCKED, so two
    cancellations never hand the same freed slot to one resident.
    """
    return lock_for_update(waiting_queryset(hostel_id, type), skip_locked=True).first()


def mark_fulfilled(entry: WaitlistEntry, now: datetime | None = None) -> WaitlistEntry:
    """Terminal transition; a fulfilled entry never changes again."""
    if entry.status != WaitlistEntry.Status.WAITING:
        raise InvalidBookingStateError("Waitlist entry is no longer waiting.")
    entry.mark_fulfilled(now)
    return entry


def waiting_entries(hostel_id, type: str):
    return waiting_queryset(hostel_id, type).select_related("user")
