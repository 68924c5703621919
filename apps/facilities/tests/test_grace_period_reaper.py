"""Tests for forfeiting bookings nobody showed up for."""

from __future__ import annotations

import uuid
from datetime import datetime
from unittest.mock import Mock

from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone

from apps.facilities import ledger, waitlist
from apps.facilities.models import Booking, Resource, ResourceType, WaitlistEntry
from apps.facilities.orchestrator import OrchestrationEngine
from apps.facilities.reaper import GracePeriodReaper
from apps.facilities.tasks import reap_unclaimed_bookings
from apps.users.models import User
from config.celery import schedule_reaper


def at(hour: int, minute: int = 0) -> datetime:
    return timezone.make_aware(datetime(2026, 3, 10, hour, minute))


def reaper_at(moment: datetime, engine: OrchestrationEngine | None = None) -> GracePeriodReaper:
    return GracePeriodReaper(engine=engine, clock=lambda: moment)


class FailingEngine(OrchestrationEngine):
    """Raises for one booking id and behaves normally for the rest."""

    def __init__(self, failing_id, **kwargs):
        super().__init__(**kwargs)
        self.failing_id = failing_id

    def cancel_and_reassign(self, booking_id, **kwargs):
        if booking_id == self.failing_id:
            raise RuntimeError("lock timeout")
        return super().cancel_and_reassign(booking_id, **kwargs)


class GracePeriodReaperTests(TestCase):
    def setUp(self) -> None:
        self.hostel_id = uuid.uuid4()
        self.washers = [
            Resource.objects.create(hostel_id=self.hostel_id, type=ResourceType.LAUNDRY, name=f"Washer {i}")
            for i in range(3)
        ]
        self.holder = User.objects.create_user(
            email="sleepy@example.com", password="pass12345", hostel_id=self.hostel_id
        )
        self.waiter = User.objects.create_user(
            email="waiter@example.com", password="pass12345", hostel_id=self.hostel_id
        )

    def _book(self, start: datetime, end: datetime, washer: int = 0) -> Booking:
        return ledger.book_slot(self.holder.id, self.washers[washer].id, start, end)

    def test_booking_past_grace_period_is_forfeited(self) -> None:
        booking = self._book(at(10, 0), at(10, 45))

        report = reaper_at(at(10, 16)).sweep()

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CANCELLED)
        self.assertEqual(booking.cancellation_source, Booking.CancellationSource.SYSTEM)
        self.assertEqual((report.found, report.forfeited, report.failed), (1, 1, []))

    def test_booking_within_grace_period_is_kept(self) -> None:
        booking = self._book(at(10, 0), at(10, 45))

        for moment in (at(10, 14), at(10, 15)):
            with self.subTest(moment=moment):
                report = reaper_at(moment).sweep()
                self.assertEqual(report.found, 0)

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.CONFIRMED)

    def test_active_booking_is_never_forfeited(self) -> None:
        booking = self._book(at(10, 0), at(10, 45))
        Booking.objects.filter(pk=booking.pk).update(status=Booking.Status.ACTIVE)

        self.assertEqual(reaper_at(at(10, 30)).sweep().found, 0)

    def test_forfeited_time_goes_to_waitlist(self) -> None:
        booking = self._book(at(10, 0), at(10, 45))
        entry = waitlist.join_waitlist(self.waiter.id, self.hostel_id, ResourceType.LAUNDRY, now=at(9, 50))

        report = reaper_at(at(10, 16)).sweep()

        self.assertEqual(report.reassigned, 1)
        entry.refresh_from_db()
        self.assertEqual(entry.status, WaitlistEntry.Status.FULFILLED)
        promoted = Booking.objects.get(reassigned_from=booking)
        self.assertEqual((promoted.start_time, promoted.end_time), (at(10, 16), at(10, 45)))
        self.assertEqual(promoted.user_id, self.waiter.id)

    def test_one_failure_does_not_stop_the_sweep(self) -> None:
        first = self._book(at(9, 0), at(9, 45), washer=0)
        broken = self._book(at(9, 0), at(9, 45), washer=1)
        third = self._book(at(9, 0), at(9, 45), washer=2)
        engine = FailingEngine(broken.id, clock=lambda: at(10, 0))

        with self.assertLogs("apps.facilities.reaper", level="ERROR"):
            report = reaper_at(at(10, 0), engine=engine).sweep()

        self.assertEqual(report.found, 3)
        self.assertEqual(report.forfeited, 2)
        self.assertEqual(report.failed, [str(broken.id)])
        for booking, expected in [
            (first, Booking.Status.CANCELLED),
            (broken, Booking.Status.CONFIRMED),
            (third, Booking.Status.CANCELLED),
        ]:
            booking.refresh_from_db()
            self.assertEqual(booking.status, expected)

    def test_failed_booking_is_retried_on_next_tick(self) -> None:
        booking = self._book(at(9, 0), at(9, 45))
        engine = FailingEngine(booking.id, clock=lambda: at(10, 0))

        with self.assertLogs("apps.facilities.reaper", level="ERROR"):
            reaper_at(at(10, 0), engine=engine).sweep()
        report = reaper_at(at(10, 1)).sweep()

        self.assertEqual(report.forfeited, 1)

    def test_periodic_task_returns_counts(self) -> None:
        self._book(at(9, 0), at(9, 45))

        result = reap_unclaimed_bookings.apply().get()

        self.assertEqual(result, {"found": 1, "forfeited": 1, "reassigned": 0, "failed": 0})


class ReaperScheduleTests(SimpleTestCase):
    @override_settings(FACILITIES={"REAPER_INTERVAL_SECONDS": 30})
    def test_interval_comes_from_facilities_settings(self) -> None:
        sender = Mock()

        schedule_reaper(sender)

        sender.signature.assert_called_once_with("facilities.reap_unclaimed_bookings")
        sender.add_periodic_task.assert_called_once_with(
            30.0,
            sender.signature.return_value,
            name="reap-unclaimed-bookings",
            expires=20.0,
        )

    @override_settings(FACILITIES={"REAPER_INTERVAL_SECONDS": 5})
    def test_short_interval_keeps_a_positive_expiry(self) -> None:
        sender = Mock()

        schedule_reaper(sender)

        self.assertEqual(sender.add_periodic_task.call_args.kwargs["expires"], 1)
