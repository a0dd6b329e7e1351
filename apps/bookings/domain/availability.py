"""
Slot and duration computation

Pure functions over a snapshot of the facility's inventory. Their
output is advisory: the reservation guard re-checks everything when the
customer submits.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterator, List

from shared.domain.value_objects import TimeRange

from apps.bookings.domain.entities import OperatingWindow, SlotCandidate, earliest_bookable_start
from apps.bookings.domain.inventory import Inventory


def generate_slots(
    day: date,
    window: OperatingWindow,
    inventory: Inventory,
    now: datetime,
    *,
    tz: tzinfo,
    lead_time: timedelta = timedelta(hours=1),
) -> Iterator[SlotCandidate]:
    """
    Yield one candidate per whole hour from opening (inclusive) to closing
    (exclusive).

    When `day` is today, slots starting before the top of the current
    hour plus `lead_time` are left out entirely rather than flagged
    unavailable. Other days, past ones included, list every hour.
    """
    if not window.is_open:
        return

    earliest = None
    if day == now.astimezone(tz).date():
        earliest = earliest_bookable_start(now, lead_time, tz)

    for hour in range(window.open_hour, window.close_hour):
        slot_start = window.at(day, hour, tz)
        if earliest is not None and slot_start < earliest:
            continue
        yield SlotCandidate(starts_at=slot_start, available=not inventory.is_occupied(slot_start))


def resolve_durations(
    start: datetime,
    window: OperatingWindow,
    inventory: Inventory,
    *,
    tz: tzinfo,
    max_hours: int,
) -> List[int]:
    """
    Whole-hour durations bookable from `start`, ascending

    Nothing is offered for a start before opening time. A duration d is
    offered when start + d hours does not pass closing time and no
    allocation intersects [start, start + d hours).
    """
    if not window.is_open:
        return []

    local_start = start.astimezone(tz)
    if local_start.minute or local_start.second or local_start.microsecond:
        return []
    if local_start < window.opens_at(local_start.date(), tz):
        return []

    closes_at = window.closes_at(local_start.date(), tz)
    limit = min(max_hours, window.close_hour - local_start.hour)

    durations = []
    for hours in range(1, limit + 1):
        span = TimeRange.from_hours(start, hours)
        if span.end > closes_at:
            continue
        if not inventory.can_allocate(span):
            continue
        durations.append(hours)
    return durations
