import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("hostel_facilities")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================


@app.on_after_configure.connect
def schedule_reaper(sender, **kwargs):
    """Forfeit no-show bookings every FACILITIES["REAPER_INTERVAL_SECONDS"]."""
    from apps.facilities.conf import facility_setting

    interval = float(facility_setting("REAPER_INTERVAL_SECONDS"))
    sender.add_periodic_task(
        interval,
        sender.signature("facilities.reap_unclaimed_bookings"),
        name="reap-unclaimed-bookings",
        # A tick still queued when the next one is due is dropped
        expires=max(interval - 10, 1),
    )
