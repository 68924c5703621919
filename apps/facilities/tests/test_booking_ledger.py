"""Tests for slot booking and its exclusivity guarantees."""

from __future__ import annotations

import threading
import uuid
from datetime import datetime, timedelta
from unittest.mock import patch

from django.db import connection
from django.test import TestCase, TransactionTestCase
from django.utils import timezone

from apps.facilities import ledger, tasks
from apps.facilities.exceptions import (
    InvalidTimeRangeError,
    ResourceUnavailableError,
    SlotTakenError,
)
from apps.facilities.models import Booking, Resource, ResourceType
from apps.users.models import User


def at(hour: int, minute: int = 0) -> datetime:
    return timezone.make_aware(datetime(2026, 3, 10, hour, minute))


class BookingLedgerTests(TestCase):
    def setUp(self) -> None:
        self.hostel_id = uuid.uuid4()
        self.resource = Resource.objects.create(
            hostel_id=self.hostel_id,
            type=ResourceType.LAUNDRY,
            name="Washer 1",
        )
        self.alice = User.objects.create_user(email="alice@example.com", password="pass12345")
        self.bob = User.objects.create_user(email="bob@example.com", password="pass12345")

    def test_book_slot_creates_confirmed_booking(self) -> None:
        booking = ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))

        self.assertEqual(booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(booking.user_id, self.alice.id)
        self.assertEqual((booking.start_time, booking.end_time), (at(10, 0), at(10, 45)))

    def test_second_booking_for_same_start_is_rejected(self) -> None:
        ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))

        with self.assertRaises(SlotTakenError) as ctx:
            ledger.book_slot(self.bob.id, self.resource.id, at(10, 0), at(10, 45))

        self.assertEqual(ctx.exception.to_dict()["actionRequired"], "JOIN_WAITLIST")
        self.assertEqual(Booking.objects.filter(resource=self.resource).count(), 1)

    def test_active_booking_also_holds_the_slot(self) -> None:
        booking = ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))
        Booking.objects.filter(pk=booking.pk).update(status=Booking.Status.ACTIVE)

        with self.assertRaises(SlotTakenError):
            ledger.book_slot(self.bob.id, self.resource.id, at(10, 0), at(10, 45))

    def test_cancelled_booking_does_not_hold_the_slot(self) -> None:
        booking = ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))
        booking.mark_cancelled(Booking.CancellationSource.USER, at(9, 0))

        rebooked = ledger.book_slot(self.bob.id, self.resource.id, at(10, 0), at(10, 45))

        self.assertEqual(rebooked.user_id, self.bob.id)

    def test_adjacent_slots_do_not_conflict(self) -> None:
        ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))
        ledger.book_slot(self.bob.id, self.resource.id, at(10, 45), at(11, 30))

        self.assertEqual(Booking.objects.filter(resource=self.resource).count(), 2)

    def test_resource_under_maintenance_is_unavailable(self) -> None:
        self.resource.set_operational(False, "Drum broken")

        with self.assertRaises(ResourceUnavailableError):
            ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))

        self.assertFalse(Booking.objects.exists())

    def test_unknown_resource_is_unavailable(self) -> None:
        with self.assertRaises(ResourceUnavailableError):
            ledger.book_slot(self.alice.id, uuid.uuid4(), at(10, 0), at(10, 45))

    def test_end_must_follow_start(self) -> None:
        with self.assertRaises(InvalidTimeRangeError):
            ledger.book_slot(self.alice.id, self.resource.id, at(10, 45), at(10, 0))

    def test_unique_index_backs_up_the_conflict_check(self) -> None:
        ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))

        with patch("apps.facilities.ledger.slot_is_taken", return_value=False):
            with self.assertRaises(SlotTakenError):
                ledger.book_slot(self.bob.id, self.resource.id, at(10, 0), at(10, 45))

        self.assertEqual(Booking.objects.filter(resource=self.resource).count(), 1)

    def test_bypass_book_assigns_slot_to_given_user(self) -> None:
        booking = ledger.bypass_book(self.bob.id, self.resource.id, at(12, 0), at(12, 45))

        self.assertEqual(booking.user_id, self.bob.id)
        with self.assertRaises(SlotTakenError):
            ledger.bypass_book(self.alice.id, self.resource.id, at(12, 0), at(12, 45))

    def test_confirmation_is_sent_after_commit(self) -> None:
        with patch.object(tasks.notify_booking_confirmed, "delay") as delay:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                booking = ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))
                delay.assert_not_called()

        self.assertEqual(len(callbacks), 1)
        delay.assert_called_once_with(str(booking.id))

    def test_rejected_booking_publishes_nothing(self) -> None:
        ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))

        with self.captureOnCommitCallbacks() as callbacks:
            with self.assertRaises(SlotTakenError):
                ledger.book_slot(self.bob.id, self.resource.id, at(10, 0), at(10, 45))

        self.assertEqual(callbacks, [])

    def test_active_bookings_lists_unfinished_holds_of_the_hostel(self) -> None:
        past = ledger.book_slot(self.alice.id, self.resource.id, at(8, 0), at(8, 45))
        current = ledger.book_slot(self.alice.id, self.resource.id, at(10, 0), at(10, 45))
        later = ledger.book_slot(self.bob.id, self.resource.id, at(11, 30), at(12, 15))
        other_hostel = Resource.objects.create(hostel_id=uuid.uuid4(), type=ResourceType.LAUNDRY, name="W9")
        ledger.book_slot(self.bob.id, other_hostel.id, at(10, 0), at(10, 45))

        listed = list(ledger.active_bookings(self.hostel_id, now=at(10, 15)))

        self.assertEqual(listed, [current, later])
        self.assertNotIn(past, listed)


class ConcurrentBookingTests(TransactionTestCase):
    """Residents racing for the same slot on separate connections."""

    racers = 5

    def setUp(self) -> None:
        self.resource = Resource.objects.create(
            hostel_id=uuid.uuid4(),
            type=ResourceType.LAUNDRY,
            name="Washer 1",
        )
        self.users = [
            User.objects.create_user(email=f"racer{i}@example.com", password="pass12345")
            for i in range(self.racers)
        ]

    def test_sqlite_transactions_take_the_write_lock_up_front(self) -> None:
        if connection.vendor != "sqlite":
            self.skipTest("row locks are used on this backend")
        self.assertEqual(connection.settings_dict["OPTIONS"]["transaction_mode"], "IMMEDIATE")

    def test_exactly_one_of_many_concurrent_bookings_wins(self) -> None:
        barrier = threading.Barrier(self.racers)
        results: list[str] = []
        lock = threading.Lock()

        def attempt(user_id: int) -> None:
            try:
                barrier.wait()
                ledger.book_slot(user_id, self.resource.id, at(10, 0), at(10, 45))
                outcome = "booked"
            except SlotTakenError:
                outcome = "taken"
            except Exception as e:
                outcome = f"{type(e).__name__}: {e}"
            finally:
                connection.close()
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=attempt, args=(user.id,)) for user in self.users]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(sorted(results), ["booked"] + ["taken"] * (self.racers - 1))
        self.assertEqual(
            Booking.objects.filter(resource=self.resource, status=Booking.Status.CONFIRMED).count(),
            1,
        )
