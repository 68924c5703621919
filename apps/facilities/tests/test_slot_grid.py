"""Tests for the bookable slot grid."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

import pytest
from django.utils import timezone

from apps.facilities.exceptions import ResourceNotFoundError
from apps.facilities.models import Booking, Resource, ResourceType
from apps.facilities.slots import available_slots, build_slot_grid, grid_start
from apps.users.models import User


def at(hour: int, minute: int = 0, day: int = 10) -> datetime:
    return timezone.make_aware(datetime(2026, 3, day, hour, minute))


def test_grid_starts_at_now_when_on_the_hour() -> None:
    assert grid_start(at(10, 0)) == at(10, 0)


def test_grid_advances_to_next_full_hour() -> None:
    assert grid_start(at(10, 1)) == at(11, 0)
    assert grid_start(at(10, 59)) == at(11, 0)


def test_full_day_grid_is_capped_at_sixteen_slots() -> None:
    slots = build_slot_grid(at(8, 30))

    assert len(slots) == 16
    assert slots[0].start == at(9, 0)
    assert all(slot.end - slot.start == timedelta(minutes=45) for slot in slots)
    for previous, current in zip(slots, slots[1:]):
        assert current.start == previous.end


def test_grid_stops_before_last_slot_hour() -> None:
    slots = build_slot_grid(at(20, 30))

    assert [slot.start for slot in slots] == [at(21, 0), at(21, 45), at(22, 30)]


def test_grid_is_empty_late_in_the_evening() -> None:
    assert build_slot_grid(at(22, 10)) == []


def test_grid_never_spills_into_the_next_day() -> None:
    assert build_slot_grid(at(23, 30)) == []


def test_grid_parameters_can_be_overridden() -> None:
    slots = build_slot_grid(at(10, 0), slot_minutes=30, max_slots=4, last_hour=23)

    assert [slot.start for slot in slots] == [at(10, 0), at(10, 30), at(11, 0), at(11, 30)]


def test_grid_follows_facilities_setting(settings) -> None:
    settings.FACILITIES = {"SLOT_MINUTES": 60, "MAX_SLOTS_PER_DAY": 2}

    slots = build_slot_grid(at(10, 0))

    assert [(slot.start, slot.end) for slot in slots] == [(at(10, 0), at(11, 0)), (at(11, 0), at(12, 0))]


@pytest.mark.django_db
class TestAvailableSlots:
    def setup_method(self) -> None:
        self.hostel_id = uuid.uuid4()
        self.resource = Resource.objects.create(
            hostel_id=self.hostel_id,
            type=ResourceType.LAUNDRY,
            name="Washer 1",
        )
        self.user = User.objects.create_user(email="slots@example.com", password="pass12345")

    def _book(self, start: datetime, status: str = Booking.Status.CONFIRMED) -> Booking:
        return Booking.objects.create(
            resource=self.resource,
            user=self.user,
            start_time=start,
            end_time=start + timedelta(minutes=45),
            status=status,
        )

    def test_booked_start_is_removed_from_grid(self) -> None:
        self._book(at(10, 45))

        starts = [slot.start for slot in available_slots(self.resource.id, now=at(10, 0))]

        assert at(10, 45) not in starts
        assert at(10, 0) in starts
        assert len(starts) == 15

    def test_active_booking_also_blocks_its_slot(self) -> None:
        self._book(at(10, 0), status=Booking.Status.ACTIVE)

        starts = [slot.start for slot in available_slots(self.resource.id, now=at(10, 0))]

        assert at(10, 0) not in starts

    def test_cancelled_booking_frees_its_slot(self) -> None:
        self._book(at(10, 45), status=Booking.Status.CANCELLED)

        starts = [slot.start for slot in available_slots(self.resource.id, now=at(10, 0))]

        assert at(10, 45) in starts
        assert len(starts) == 16

    def test_bookings_on_other_days_do_not_count(self) -> None:
        self._book(at(10, 45, day=11))

        assert len(available_slots(self.resource.id, now=at(10, 0))) == 16

    def test_unknown_resource(self) -> None:
        with pytest.raises(ResourceNotFoundError):
            available_slots(uuid.uuid4(), now=at(10, 0))
