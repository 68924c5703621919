"""
Facility Domain Events

Events that represent things that have happened to bookings and the
waitlist. They are published after successful transaction commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import TimeSlot


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """
    Event: A slot was booked

    Triggers:
    - Booking confirmation to the holder
    """
    booking_id: UUID
    resource_id: UUID
    user_id: int
    slot: TimeSlot
    bypassed_queue: bool = False


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: A CONFIRMED booking was cancelled (user, admin or reaper)
    """
    booking_id: UUID
    resource_id: UUID
    user_id: int
    source: str
    remaining_minutes: int


@dataclass(kw_only=True)
class SlotReassigned(DomainEvent):
    """
    Event: The remaining time of a cancelled booking went to the next
    resident on the waitlist

    Triggers:
    - "Your machine is ready" message to the promoted resident
    """
    cancelled_booking_id: UUID
    booking_id: UUID
    resource_id: UUID
    user_id: int
    waitlist_entry_id: UUID
    remaining_minutes: int


@dataclass(kw_only=True)
class SlotForfeited(DomainEvent):
    """
    Event: The holder did not show up within the grace period

    Triggers:
    - "You missed your slot" message to the former holder
    """
    booking_id: UUID
    resource_id: UUID
    user_id: int
