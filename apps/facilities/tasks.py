"""Celery tasks for the facilities domain."""

from __future__ import annotations

import structlog
from celery import shared_task  # type: ignore

from .models import Booking
from .reaper import GracePeriodReaper

logger = structlog.get_logger(__name__)


# ============================================================================
# PERIODIC TASKS (Celery Beat)
# ============================================================================

@shared_task(name="facilities.reap_unclaimed_bookings")
def reap_unclaimed_bookings() -> dict[str, int]:
    """
    Forfeit CONFIRMED bookings whose holder never showed up.

    Runs every REAPER_INTERVAL_SECONDS (once a minute by default). Each
    overdue booking goes through the same cancel-and-reassign path as a
    manual cancellation; a failing booking is logged and skipped.

    Returns:
        dict: {"found", "forfeited", "reassigned", "failed"}
    """
    report = GracePeriodReaper().sweep()
    if report.found:
        logger.info("reaper_sweep_finished", **report.to_dict())
    return report.to_dict()


# ============================================================================
# NOTIFICATION TASKS
# ============================================================================

def _load_booking(booking_id: str) -> Booking | None:
    try:
        return Booking.objects.select_related("user", "resource").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error("notification_booking_missing", booking_id=booking_id)
        return None


@shared_task(name="facilities.notify_booking_confirmed")
def notify_booking_confirmed(booking_id: str) -> bool:
    booking = _load_booking(booking_id)
    if booking is None:
        return False
    logger.info(
        f"[NOTIFICATION] {booking.resource.name} booked for {booking.user.email} "
        f"from {booking.start_time:%H:%M} to {booking.end_time:%H:%M}",
        booking_id=booking_id,
    )
    return True


@shared_task(name="facilities.notify_slot_reassigned")
def notify_slot_reassigned(booking_id: str) -> bool:
    """The next resident in line got a freed slot."""
    booking = _load_booking(booking_id)
    if booking is None:
        return False
    logger.info(
        f"[NOTIFICATION] {booking.resource.name} is free now for {booking.user.email} "
        f"until {booking.end_time:%H:%M}",
        booking_id=booking_id,
    )
    return True


@shared_task(name="facilities.notify_slot_forfeited")
def notify_slot_forfeited(booking_id: str) -> bool:
    """The holder missed the grace period."""
    booking = _load_booking(booking_id)
    if booking is None:
        return False
    logger.info(
        f"[NOTIFICATION] {booking.user.email} missed the grace period for "
        f"{booking.resource.name}; the slot was released",
        booking_id=booking_id,
    )
    return True
