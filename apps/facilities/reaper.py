"""Grace-period reaper: forfeits CONFIRMED bookings nobody showed up for."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from django.utils import timezone  # type: ignore

from .conf import facility_setting
from .models import Booking
from .orchestrator import OrchestrationEngine

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    found: int = 0
    forfeited: int = 0
    reassigned: int = 0
    failed: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, int]:
        return {
            "found": self.found,
            "forfeited": self.forfeited,
            "reassigned": self.reassigned,
            "failed": len(self.failed),
        }


class GracePeriodReaper:
    """
    One sweep per scheduler tick.

    Sweeps share no state. A booking that was forfeited no longer matches
    the CONFIRMED filter, and one that failed is simply picked up again by
    the next tick.
    """

    def __init__(
        self,
        engine: OrchestrationEngine | None = None,
        clock: Callable[[], datetime] = timezone.now,
        grace_minutes: int | None = None,
    ):
        self.clock = clock
        self.engine = engine or OrchestrationEngine(clock=clock)
        if grace_minutes is None:
            grace_minutes = facility_setting("GRACE_PERIOD_MINUTES")
        self.grace_minutes = grace_minutes

    def overdue_booking_ids(self, now: datetime) -> list:
        cutoff = now - timedelta(minutes=self.grace_minutes)
        return list(
            Booking.objects.filter(
                status=Booking.Status.CONFIRMED,
                start_time__lt=cutoff,
            )
            .order_by("start_time")
            .values_list("id", flat=True)
        )

    def sweep(self) -> SweepReport:
        report = SweepReport()
        overdue = self.overdue_booking_ids(self.clock())
        report.found = len(overdue)
        if not overdue:
            return report

        logger.warning(f"Found {len(overdue)} bookings past their grace period. Forfeiting slots...")

        for booking_id in overdue:
            try:
                outcome = self.engine.cancel_and_reassign(
                    booking_id,
                    source=Booking.CancellationSource.SYSTEM,
                )
            except Exception as e:
                report.failed.append(str(booking_id))
                logger.error(f"Failed to forfeit booking {booking_id}: {e}", exc_info=True)
                continue

            report.forfeited += 1
            if outcome.reassigned:
                report.reassigned += 1
            logger.info(f"Forfeited booking {booking_id} ({outcome.result})")

        return report
