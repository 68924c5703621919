"""
Cancellation and reassignment policy.

OrchestrationEngine.cancel_and_reassign is the only place where a freed
slot is handed to the waitlist. User cancellations, admin force-cancels
and the grace-period reaper all go through it, so the threshold and
FIFO rules are applied the same way whatever triggered the cancellation.

Steps, all inside one unit of work:
1. Lock the booking; only CONFIRMED bookings can be cancelled
2. Mark it CANCELLED
3. Compute the minutes left until its end
4. Below the usable-time threshold: stop, nobody gets the leftover
5. Otherwise lock the longest-waiting entry for the resource's hostel/type
6. Fulfil it and book the resource for that user from now until the
   original end

A failure in any step rolls back all of them, including the cancellation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID
import logging

from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork

from .conf import facility_setting
from .domain.events import BookingCancelled, SlotForfeited, SlotReassigned
from .exceptions import BookingNotFoundError, InvalidBookingStateError
from .ledger import insert_booking
from .models import Booking, Resource
from .waitlist import dequeue_earliest, mark_fulfilled

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CancellationOutcome:
    """What happened to a cancelled booking's remaining time."""

    REASSIGNED = "REASSIGNED"
    TOO_SHORT = "TOO_SHORT"
    NO_ONE_WAITING = "NO_ONE_WAITING"

    booking_id: UUID
    result: str
    remaining_minutes: int
    promoted_booking_id: UUID | None = None
    promoted_user_id: int | None = None

    @property
    def reassigned(self) -> bool:
        return self.result == self.REASSIGNED

    @property
    def message(self) -> str:
        if self.result == self.TOO_SHORT:
            return "Booking cancelled. Remaining time too short to reassign."
        if self.result == self.NO_ONE_WAITING:
            return "Booking cancelled. No one is waiting."
        return "Booking cancelled successfully. Slot reassigned to the next person in line."

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "result": self.result,
            "bookingId": str(self.booking_id),
            "remainingMinutes": self.remaining_minutes,
            "promotedBookingId": str(self.promoted_booking_id) if self.promoted_booking_id else None,
            "promotedUserId": self.promoted_user_id,
        }


class OrchestrationEngine:
    """Single authority for cancelling bookings and reassigning their time."""

    def __init__(
        self,
        clock: Callable[[], datetime] = timezone.now,
        minimum_usable_minutes: int | None = None,
    ):
        self.clock = clock
        if minimum_usable_minutes is None:
            minimum_usable_minutes = facility_setting("MINIMUM_USABLE_MINUTES")
        self.minimum_usable_minutes = minimum_usable_minutes

    def cancel_and_reassign(
        self,
        booking_id,
        *,
        source: str = Booking.CancellationSource.USER,
    ) -> CancellationOutcome:
        """
        Cancel a CONFIRMED booking and offer what is left of it to the waitlist.

        Raises:
            BookingNotFoundError: no booking with this id
            InvalidBookingStateError: the booking is not CONFIRMED
        """
        now = self.clock()

        with DjangoUnitOfWork() as uow:
            booking = uow.lock_one(Booking.objects.filter(pk=booking_id))
            if booking is None:
                raise BookingNotFoundError()
            if booking.status != Booking.Status.CONFIRMED:
                raise InvalidBookingStateError()

            booking.mark_cancelled(source, now)
            remaining = booking.remaining_minutes(now)

            uow.record(
                BookingCancelled(
                    aggregate_id=booking.id,
                    booking_id=booking.id,
                    resource_id=booking.resource_id,
                    user_id=booking.user_id,
                    source=source,
                    remaining_minutes=remaining,
                )
            )
            if source == Booking.CancellationSource.SYSTEM:
                uow.record(
                    SlotForfeited(
                        aggregate_id=booking.id,
                        booking_id=booking.id,
                        resource_id=booking.resource_id,
                        user_id=booking.user_id,
                    )
                )

            if remaining < self.minimum_usable_minutes:
                logger.info(f"Only {remaining} mins left on booking {booking.id}. Waitlist ignored.")
                return CancellationOutcome(booking.id, CancellationOutcome.TOO_SHORT, remaining)

            resource = Resource.objects.get(pk=booking.resource_id)
            entry = dequeue_earliest(resource.hostel_id, resource.type)
            if entry is None:
                logger.info(f"Booking {booking.id} cancelled, nobody waiting for {resource.type}")
                return CancellationOutcome(booking.id, CancellationOutcome.NO_ONE_WAITING, remaining)

            mark_fulfilled(entry, now)
            promoted = insert_booking(
                resource,
                entry.user_id,
                now,
                booking.end_time,
                reassigned_from=booking,
            )
            uow.record(
                SlotReassigned(
                    aggregate_id=promoted.id,
                    cancelled_booking_id=booking.id,
                    booking_id=promoted.id,
                    resource_id=resource.pk,
                    user_id=entry.user_id,
                    waitlist_entry_id=entry.id,
                    remaining_minutes=remaining,
                )
            )

        logger.info(f"Auto-assigned {resource.name} to user {entry.user_id} for {remaining} minutes.")
        return CancellationOutcome(
            booking.id,
            CancellationOutcome.REASSIGNED,
            remaining,
            promoted_booking_id=promoted.id,
            promoted_user_id=entry.user_id,
        )
