"""Access to the BOOKING_ENGINE policy settings."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.conf import settings  # type: ignore

DEFAULTS: dict[str, Any] = {
    "MAX_DURATION_HOURS": 5,
    "MIN_DURATION_HOURS": 1,
    "LEAD_TIME_HOURS": 1,
    "RESERVE_MAX_ATTEMPTS": 3,
    "RESERVE_RETRY_BACKOFF": 0.05,
    "GUEST_REFERENCE_LENGTH": 8,
}


def engine_setting(name: str) -> Any:
    """Read a policy value, falling back to the built-in default."""

    overrides = getattr(settings, "BOOKING_ENGINE", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]


def lead_time() -> timedelta:
    return timedelta(hours=engine_setting("LEAD_TIME_HOURS"))
