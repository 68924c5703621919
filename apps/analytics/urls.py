"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import FlakeRateView, HeatmapAnalyticsView, OverviewAnalyticsView, WaitlistTurnaroundView


urlpatterns = [
    # Do not prefix with 'analytics/' here; the namespace is defined in config.urls
    path('overview/', OverviewAnalyticsView.as_view(), name='analytics-overview'),
    path('heatmap/', HeatmapAnalyticsView.as_view(), name='analytics-heatmap'),
    path('waitlist-turnaround/', WaitlistTurnaroundView.as_view(), name='analytics-waitlist-turnaround'),
    path('flake-rate/', FlakeRateView.as_view(), name='analytics-flake-rate'),
]
