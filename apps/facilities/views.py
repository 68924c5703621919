"""API views for the facilities domain."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import generics, permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import HasHostel, IsHostelAdmin

from . import ledger, registry, slots, status as status_board, waitlist
from .exceptions import BookingNotFoundError, FacilityError
from .filters import ActiveBookingFilterSet
from .models import Booking, ResourceType
from .orchestrator import OrchestrationEngine
from .serializers import (
    ActiveBookingSerializer,
    BookingSerializer,
    BookSlotSerializer,
    BypassBookSerializer,
    ResourceCreateSerializer,
    ResourceSerializer,
    ResourceStatusSerializer,
    ResourceStatusUpdateSerializer,
    SlotSerializer,
    WaitlistEntrySerializer,
    WaitlistJoinSerializer,
    WaitlistListingSerializer,
)


class FacilityErrorMixin:
    """Render FacilityError as {"message", "code"} with its own status code."""

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, FacilityError):
            return Response(exc.to_dict(), status=exc.status_code)
        return super().handle_exception(exc)  # type: ignore[misc]


class ResidentAPIView(FacilityErrorMixin, APIView):
    permission_classes = [permissions.IsAuthenticated, HasHostel]


class ResourceListView(ResidentAPIView):
    """Resources of the caller's hostel with their live status."""

    def get(self, request):  # type: ignore
        rows = status_board.resources_with_status(
            request.user.hostel_id,
            type=request.query_params.get("type") or None,
        )
        return Response(ResourceStatusSerializer(rows, many=True).data)


class ResourceSlotsView(ResidentAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, resource_id):  # type: ignore
        available = slots.available_slots(resource_id)
        return Response(SlotSerializer(available, many=True).data)


class MyQueueView(ResidentAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):  # type: ignore
        queue = status_board.my_queue(request.user.id)
        return Response(
            {
                "bookings": BookingSerializer(queue["bookings"], many=True).data,
                "waitlists": WaitlistEntrySerializer(queue["waitlists"], many=True).data,
            }
        )


class BookSlotView(ResidentAPIView):
    """Book an exact slot; a lost race answers 409 with a JOIN_WAITLIST hint."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = BookSlotSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = ledger.book_slot(
            request.user.id,
            data["resourceId"],
            data["startTime"],
            data["endTime"],
        )
        return Response(
            {"message": "Slot booked successfully!", "booking": BookingSerializer(booking).data},
            status=status.HTTP_201_CREATED,
        )


class JoinWaitlistView(ResidentAPIView):
    def post(self, request):  # type: ignore
        serializer = WaitlistJoinSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resource_type = serializer.validated_data["type"]
        entry = waitlist.join_waitlist(request.user.id, request.user.hostel_id, resource_type)
        return Response(
            {
                "message": f"You are now on the waitlist for {resource_type}. "
                "We will notify you when a slot opens!",
                "waitlist": WaitlistEntrySerializer(entry).data,
            },
            status=status.HTTP_201_CREATED,
        )


class CancelBookingView(ResidentAPIView):
    """Holder cancels their own booking; the freed time may go to the waitlist."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, booking_id):  # type: ignore
        owner_id = Booking.objects.filter(pk=booking_id).values_list("user_id", flat=True).first()
        if owner_id is None:
            raise BookingNotFoundError()
        if owner_id != request.user.id:
            return Response(status=status.HTTP_403_FORBIDDEN)

        outcome = OrchestrationEngine().cancel_and_reassign(
            booking_id,
            source=Booking.CancellationSource.USER,
        )
        return Response(outcome.to_dict())


# ─── Admin ───


class AdminResourceViewSet(FacilityErrorMixin, viewsets.GenericViewSet):
    """Add machines/courts and toggle their maintenance mode."""

    permission_classes = [IsHostelAdmin]
    serializer_class = ResourceSerializer
    lookup_value_regex = "[0-9a-f-]{36}"

    def create(self, request):  # type: ignore
        serializer = ResourceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        hostel_id = data.get("hostelId") or request.user.hostel_id
        if hostel_id is None:
            return Response({"message": "Hostel ID missing"}, status=status.HTTP_400_BAD_REQUEST)
        resource = registry.create_resource(hostel_id, data["type"], data["name"])
        return Response(ResourceSerializer(resource).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):  # type: ignore
        serializer = ResourceStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        resource = registry.set_operational(
            pk,
            data["isOperational"],
            data.get("maintenance"),
            hostel_id=request.user.hostel_id,
        )
        return Response(ResourceSerializer(resource).data)


class AdminForceCancelView(FacilityErrorMixin, APIView):
    permission_classes = [IsHostelAdmin]

    def post(self, request, booking_id):  # type: ignore
        hostel_id = request.user.hostel_id
        if hostel_id is not None and not Booking.objects.filter(pk=booking_id, resource__hostel_id=hostel_id).exists():
            raise BookingNotFoundError()

        outcome = OrchestrationEngine().cancel_and_reassign(
            booking_id,
            source=Booking.CancellationSource.ADMIN,
        )
        return Response({"message": "Booking force-cancelled. Waitlist processed.", "details": outcome.to_dict()})


class AdminActiveBookingsView(generics.ListAPIView):
    permission_classes = [IsHostelAdmin]
    serializer_class = ActiveBookingSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = ActiveBookingFilterSet
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return ledger.active_bookings(self.request.user.hostel_id, timezone.now())


class AdminWaitlistView(generics.ListAPIView):
    permission_classes = [IsHostelAdmin]
    serializer_class = WaitlistListingSerializer
    pagination_class = None

    def get_queryset(self):  # type: ignore
        resource_type = self.request.query_params.get("type") or ResourceType.LAUNDRY
        return waitlist.waiting_entries(self.request.user.hostel_id, resource_type)


class AdminBypassBookView(FacilityErrorMixin, APIView):
    """Assign a slot to a specific resident without going through the queue."""

    permission_classes = [IsHostelAdmin]

    def post(self, request):  # type: ignore
        serializer = BypassBookSerializer(data=request.data, context={"hostel_id": request.user.hostel_id})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if request.user.hostel_id is not None:
            registry.get_resource(data["resourceId"], request.user.hostel_id)
        booking = ledger.bypass_book(
            data["userId"].pk,
            data["resourceId"],
            data["startTime"],
            data["endTime"],
        )
        return Response(
            {"message": "Slot assigned successfully (queue bypassed).", "booking": BookingSerializer(booking).data},
            status=status.HTTP_201_CREATED,
        )
