import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Resource",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("hostel_id", models.UUIDField(db_index=True)),
                (
                    "type",
                    models.CharField(
                        choices=[("LAUNDRY", "Laundry machine"), ("BADMINTON", "Badminton court")],
                        max_length=20,
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                ("is_operational", models.BooleanField(default=True)),
                ("maintenance_note", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Resource",
                "verbose_name_plural": "Resources",
                "ordering": ["name"],
                "indexes": [models.Index(fields=["hostel_id", "type"], name="fac_resource_hostel_type")],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("CONFIRMED", "Confirmed"),
                            ("ACTIVE", "Active"),
                            ("CANCELLED", "Cancelled"),
                            ("COMPLETED", "Completed"),
                        ],
                        default="CONFIRMED",
                        max_length=20,
                    ),
                ),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "cancellation_source",
                    models.CharField(
                        blank=True,
                        choices=[("USER", "User"), ("ADMIN", "Admin"), ("SYSTEM", "System")],
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "reassigned_from",
                    models.ForeignKey(
                        blank=True,
                        help_text="Cancelled booking whose remaining time this booking took over.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reassignments",
                        to="facilities.booking",
                    ),
                ),
                (
                    "resource",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="facilities.resource",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="facility_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["start_time"],
                "indexes": [
                    models.Index(fields=["resource", "start_time"], name="fac_booking_resource_start"),
                    models.Index(fields=["status", "start_time"], name="fac_booking_status_start"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(end_time__gt=models.F("start_time")),
                        name="facility_booking_valid_range",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(status__in=["CONFIRMED", "ACTIVE"]),
                        fields=("resource", "start_time"),
                        name="facility_booking_unique_live_slot",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="WaitlistEntry",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("hostel_id", models.UUIDField()),
                (
                    "type",
                    models.CharField(
                        choices=[("LAUNDRY", "Laundry machine"), ("BADMINTON", "Badminton court")],
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("WAITING", "Waiting"), ("FULFILLED", "Fulfilled")],
                        default="WAITING",
                        max_length=20,
                    ),
                ),
                ("joined_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("fulfilled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="waitlist_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Waitlist entry",
                "verbose_name_plural": "Waitlist entries",
                "ordering": ["joined_at"],
                "indexes": [
                    models.Index(
                        fields=["hostel_id", "type", "status", "joined_at"],
                        name="fac_waitlist_fifo",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status="WAITING"),
                        fields=("user", "type"),
                        name="facility_waitlist_one_waiting_per_type",
                    ),
                ],
            },
        ),
    ]
