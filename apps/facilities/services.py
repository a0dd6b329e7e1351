"""Operating calendar: resolves a facility and a date to its opening hours."""

from __future__ import annotations

from datetime import date

from django.db.models import Q  # type: ignore

from apps.bookings.domain.entities import OperatingWindow

from .models import Facility, OperatingHours


class OperatingHoursNotConfigured(Exception):
    """No opening hours exist for the weekday, neither facility-specific nor global."""

    def __init__(self, facility_id: int, day: date):
        super().__init__(
            f"No operating hours configured for facility {facility_id} on weekday {day.weekday()}"
        )
        self.facility_id = facility_id
        self.day = day


def to_window(row: OperatingHours) -> OperatingWindow:
    if not row.is_open:
        return OperatingWindow.closed(row.day_of_week)
    return OperatingWindow(
        weekday=row.day_of_week,
        open_time=row.open_time,
        close_time=row.close_time,
        is_open=True,
    )


def resolve_operating_window(facility_id: int, day: date) -> OperatingWindow:
    """Opening hours of `facility_id` on `day`.

    A closed day resolves to a window with ``is_open=False``; a weekday
    without any configuration raises `OperatingHoursNotConfigured`.
    """

    rows = list(
        OperatingHours.objects.filter(day_of_week=day.weekday()).filter(
            Q(facility_id=facility_id) | Q(facility__isnull=True)
        )
    )
    if not rows:
        raise OperatingHoursNotConfigured(facility_id, day)

    # facility-specific rows win over the global schedule
    rows.sort(key=lambda row: row.facility_id is None)
    return to_window(rows[0])


def get_active_facility(facility_id: int) -> Facility:
    """Raises Facility.DoesNotExist for unknown or deactivated facilities."""

    return Facility.objects.get(pk=facility_id, is_active=True)
