"""FilterSet definitions for the admin booking listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking, ResourceType


class ActiveBookingFilterSet(django_filters.FilterSet):
    resource = django_filters.UUIDFilter(field_name="resource_id")
    type = django_filters.ChoiceFilter(field_name="resource__type", choices=ResourceType.choices)
    user = django_filters.NumberFilter(field_name="user_id")
    status = django_filters.ChoiceFilter(
        field_name="status",
        choices=[(s.value, s.label) for s in Booking.HOLDING_STATUSES],
    )

    class Meta:
        model = Booking
        fields = ["resource", "type", "user", "status"]
