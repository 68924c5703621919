"""
Common Value Objects

Value objects used across the facilities domain:
- TimeSlot: A half-open [start, end) window on a resource's timeline
"""

from dataclasses import dataclass
from datetime import datetime

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class TimeSlot(ValueObject):
    """
    Time slot value object

    Represents a window from start (inclusive) to end (exclusive).
    Used for the bookable grid and for booking periods.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Slot start ({self.start}) must be before slot end ({self.end})")

    def __str__(self):
        return f"{self.start:%H:%M} - {self.end:%H:%M}"

    def __repr__(self):
        return f"TimeSlot({self.start.isoformat()}, {self.end.isoformat()})"
