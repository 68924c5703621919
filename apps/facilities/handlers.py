"""Subscribe notification tasks to committed facility events."""

from __future__ import annotations

import logging

from shared.application.message_bus import MessageBus, message_bus

from .domain.events import BookingCancelled, BookingConfirmed, SlotForfeited, SlotReassigned

logger = logging.getLogger(__name__)


def on_booking_confirmed(event: BookingConfirmed) -> None:
    from .tasks import notify_booking_confirmed

    notify_booking_confirmed.delay(str(event.booking_id))


def on_booking_cancelled(event: BookingCancelled) -> None:
    logger.info(
        f"Booking {event.booking_id} cancelled by {event.source} "
        f"with {event.remaining_minutes} minutes left"
    )


def on_slot_reassigned(event: SlotReassigned) -> None:
    from .tasks import notify_slot_reassigned

    notify_slot_reassigned.delay(str(event.booking_id))


def on_slot_forfeited(event: SlotForfeited) -> None:
    from .tasks import notify_slot_forfeited

    notify_slot_forfeited.delay(str(event.booking_id))


def register_event_handlers(bus: MessageBus = message_bus) -> None:
    bus.register_event_handler(BookingConfirmed, on_booking_confirmed)
    bus.register_event_handler(BookingCancelled, on_booking_cancelled)
    bus.register_event_handler(SlotReassigned, on_slot_reassigned)
    bus.register_event_handler(SlotForfeited, on_slot_forfeited)
