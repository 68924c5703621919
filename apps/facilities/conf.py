"""Temporal policy of the facilities domain.

Values come from the ``FACILITIES`` settings dictionary; keys missing
there fall back to the defaults below.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore

DEFAULTS: dict[str, int] = {
    "SLOT_MINUTES": 45,
    "MAX_SLOTS_PER_DAY": 16,
    "LAST_SLOT_HOUR": 23,
    "GRACE_PERIOD_MINUTES": 15,
    "MINIMUM_USABLE_MINUTES": 25,
    "REAPER_INTERVAL_SECONDS": 60,
}


def facility_setting(name: str) -> int:
    if name not in DEFAULTS:
        raise KeyError(f"Unknown facilities setting: {name}")
    overrides = getattr(settings, "FACILITIES", {}) or {}
    return int(overrides.get(name, DEFAULTS[name]))
