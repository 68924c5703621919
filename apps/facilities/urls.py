"""URL routing for the facilities domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from . import views

router = DefaultRouter()
router.register(r"admin/resources", views.AdminResourceViewSet, basename="facility-admin-resource")

urlpatterns = [
    # Resident
    path("resources/", views.ResourceListView.as_view(), name="facility-resources"),
    path("resources/<uuid:resource_id>/slots/", views.ResourceSlotsView.as_view(), name="facility-slots"),
    path("my-queue/", views.MyQueueView.as_view(), name="facility-my-queue"),
    path("book/", views.BookSlotView.as_view(), name="facility-book"),
    path("waitlist/", views.JoinWaitlistView.as_view(), name="facility-waitlist"),
    path("cancel/<uuid:booking_id>/", views.CancelBookingView.as_view(), name="facility-cancel"),
    # Hostel admin
    path(
        "admin/force-cancel/<uuid:booking_id>/",
        views.AdminForceCancelView.as_view(),
        name="facility-admin-force-cancel",
    ),
    path("admin/active-bookings/", views.AdminActiveBookingsView.as_view(), name="facility-admin-active-bookings"),
    path("admin/waitlist/", views.AdminWaitlistView.as_view(), name="facility-admin-waitlist"),
    path("admin/bypass-book/", views.AdminBypassBookView.as_view(), name="facility-admin-bypass-book"),
    path("", include(router.urls)),
]
