"""Tests for the per-hostel FIFO waitlist."""

from __future__ import annotations

import uuid
from datetime import datetime

from django.test import TestCase
from django.utils import timezone

from apps.facilities import waitlist
from apps.facilities.exceptions import AlreadyWaitingError, InvalidBookingStateError
from apps.facilities.models import ResourceType, WaitlistEntry
from apps.users.models import User


def at(hour: int, minute: int = 0) -> datetime:
    return timezone.make_aware(datetime(2026, 3, 10, hour, minute))


class WaitlistQueueTests(TestCase):
    def setUp(self) -> None:
        self.hostel_id = uuid.uuid4()
        self.users = [
            User.objects.create_user(
                email=f"resident{i}@example.com",
                password="pass12345",
                hostel_id=self.hostel_id,
            )
            for i in range(3)
        ]

    def test_join_creates_waiting_entry(self) -> None:
        entry = waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 0))

        self.assertEqual(entry.status, WaitlistEntry.Status.WAITING)
        self.assertEqual(entry.joined_at, at(9, 0))
        self.assertIsNone(entry.fulfilled_at)

    def test_second_join_for_same_type_is_rejected(self) -> None:
        waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY)

        with self.assertRaises(AlreadyWaitingError):
            waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY)

        self.assertEqual(WaitlistEntry.objects.filter(user=self.users[0]).count(), 1)

    def test_user_can_wait_for_each_type_once(self) -> None:
        waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY)
        waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.BADMINTON)

        self.assertEqual(WaitlistEntry.objects.filter(user=self.users[0]).count(), 2)

    def test_fulfilled_user_can_join_again(self) -> None:
        entry = waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY)
        waitlist.mark_fulfilled(entry, at(10, 0))

        again = waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY)

        self.assertEqual(again.status, WaitlistEntry.Status.WAITING)

    def test_dequeue_returns_longest_waiting_entry(self) -> None:
        waitlist.join_waitlist(self.users[1].id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 5))
        first = waitlist.join_waitlist(self.users[2].id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 0))
        waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 10))

        self.assertEqual(waitlist.dequeue_earliest(self.hostel_id, ResourceType.LAUNDRY), first)

    def test_dequeue_skips_fulfilled_entries(self) -> None:
        first = waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 0))
        second = waitlist.join_waitlist(self.users[1].id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 5))
        waitlist.mark_fulfilled(first, at(10, 0))

        self.assertEqual(waitlist.dequeue_earliest(self.hostel_id, ResourceType.LAUNDRY), second)

    def test_dequeue_is_partitioned_by_hostel_and_type(self) -> None:
        waitlist.join_waitlist(self.users[0].id, uuid.uuid4(), ResourceType.LAUNDRY, now=at(8, 0))
        waitlist.join_waitlist(self.users[1].id, self.hostel_id, ResourceType.BADMINTON, now=at(8, 0))

        self.assertIsNone(waitlist.dequeue_earliest(self.hostel_id, ResourceType.LAUNDRY))

    def test_fulfilled_entry_is_terminal(self) -> None:
        entry = waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY)
        waitlist.mark_fulfilled(entry, at(10, 0))

        with self.assertRaises(InvalidBookingStateError):
            waitlist.mark_fulfilled(entry, at(10, 5))

        entry.refresh_from_db()
        self.assertEqual(entry.fulfilled_at, at(10, 0))

    def test_waiting_entries_are_listed_in_fifo_order(self) -> None:
        late = waitlist.join_waitlist(self.users[0].id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 30))
        early = waitlist.join_waitlist(self.users[1].id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 0))

        self.assertEqual(list(waitlist.waiting_entries(self.hostel_id, ResourceType.LAUNDRY)), [early, late])
