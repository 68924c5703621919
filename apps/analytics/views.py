"""API views for facility analytics.

Every endpoint is scoped to the requesting admin's hostel. The resource
type comes from ``?type=`` and defaults to LAUNDRY.
"""

from __future__ import annotations

from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.facilities.models import ResourceType
from apps.users.permissions import IsHostelAdmin

from . import services


class AnalyticsAPIView(APIView):
    permission_classes = [IsHostelAdmin]

    def resource_type(self, request) -> str:  # type: ignore
        requested = request.query_params.get("type")
        if requested in ResourceType.values:
            return requested
        return ResourceType.LAUNDRY


class OverviewAnalyticsView(AnalyticsAPIView):
    """Booking totals, status breakdown, waitlist length and peak days."""

    def get(self, request, format=None):  # type: ignore
        return Response(services.overview(request.user.hostel_id, self.resource_type(request)))


class HeatmapAnalyticsView(AnalyticsAPIView):
    def get(self, request, format=None):  # type: ignore
        return Response(services.heatmap(request.user.hostel_id, self.resource_type(request)))


class WaitlistTurnaroundView(AnalyticsAPIView):
    def get(self, request, format=None):  # type: ignore
        return Response(services.waitlist_turnaround(request.user.hostel_id, self.resource_type(request)))


class FlakeRateView(AnalyticsAPIView):
    def get(self, request, format=None):  # type: ignore
        return Response(services.flake_rate(request.user.hostel_id, self.resource_type(request)))
