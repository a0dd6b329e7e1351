"""Slot generation and duration resolution over in-memory inventories."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from shared.domain.value_objects import TimeRange

from apps.bookings.domain.availability import generate_slots, resolve_durations
from apps.bookings.domain.entities import OperatingWindow
from apps.bookings.domain.inventory import Inventory

TZ = ZoneInfo("Asia/Jakarta")
DAY = date(2026, 3, 2)  # a Monday
WINDOW = OperatingWindow(weekday=0, open_time=time(8), close_time=time(20))


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=TZ)


def inventory(*spans: tuple[int, int]) -> Inventory:
    return Inventory.from_spans(
        1,
        ((index, TimeRange(at(start), at(end))) for index, (start, end) in enumerate(spans, start=1)),
    )


def slot_map(slots) -> dict[str, bool]:  # type: ignore
    return {slot.time: slot.available for slot in slots}


def test_today_skips_slots_inside_lead_time() -> None:
    slots = slot_map(generate_slots(DAY, WINDOW, inventory(), at(10, 15), tz=TZ))

    assert list(slots) == [f"{hour:02d}:00" for hour in range(11, 20)]
    assert all(slots.values())


def test_lead_time_boundary() -> None:
    now = at(13, 0)
    times = [slot.time for slot in generate_slots(DAY, WINDOW, inventory(), now, tz=TZ)]

    assert "13:00" not in times
    assert times[0] == "14:00"


def test_lead_time_is_configurable() -> None:
    slots = generate_slots(DAY, WINDOW, inventory(), at(10, 15), tz=TZ, lead_time=timedelta(hours=3))

    assert [slot.time for slot in slots][0] == "13:00"


def test_future_day_offers_every_hour() -> None:
    now = at(18, 45, day=DAY - timedelta(days=1))
    slots = list(generate_slots(DAY, WINDOW, inventory(), now, tz=TZ))

    assert len(slots) == 12
    assert slots[0].time == "08:00"
    assert slots[-1].time == "19:00"


def test_past_day_lists_every_hour_with_occupancy() -> None:
    now = at(9, 0, day=DAY + timedelta(days=1))
    slots = slot_map(generate_slots(DAY, WINDOW, inventory((14, 16)), now, tz=TZ))

    assert list(slots) == [f"{hour:02d}:00" for hour in range(8, 20)]
    assert slots["13:00"] is True
    assert slots["14:00"] is False


def test_lead_time_only_applies_to_today() -> None:
    now = at(19, 30, day=DAY - timedelta(days=1))
    times = [slot.time for slot in generate_slots(DAY, WINDOW, inventory(), now, tz=TZ)]

    assert times[0] == "08:00"


def test_reserved_hours_are_flagged_unavailable() -> None:
    now = at(7, 0, day=DAY - timedelta(days=1))
    slots = slot_map(generate_slots(DAY, WINDOW, inventory((14, 16)), now, tz=TZ))

    assert slots["13:00"] is True
    assert slots["14:00"] is False
    assert slots["15:00"] is False
    assert slots["16:00"] is True


def test_closed_day_yields_nothing_regardless_of_reservations() -> None:
    closed = OperatingWindow.closed(weekday=0)
    now = at(7, 0, day=DAY - timedelta(days=1))

    assert list(generate_slots(DAY, closed, inventory((10, 12)), now, tz=TZ)) == []


def test_durations_capped_by_policy() -> None:
    assert resolve_durations(at(11), WINDOW, inventory(), tz=TZ, max_hours=5) == [1, 2, 3, 4, 5]


def test_durations_bounded_by_closing_time() -> None:
    assert resolve_durations(at(17), WINDOW, inventory(), tz=TZ, max_hours=5) == [1, 2, 3]
    assert resolve_durations(at(19), WINDOW, inventory(), tz=TZ, max_hours=5) == [1]


def test_durations_never_pass_closing_time() -> None:
    late = OperatingWindow(weekday=0, open_time=time(8), close_time=time(20, 30))
    for hour in range(8, 20):
        start = at(hour)
        for hours in resolve_durations(start, late, inventory(), tz=TZ, max_hours=12):
            assert start + timedelta(hours=hours) <= at(20, 30)


def test_durations_stop_before_existing_reservation() -> None:
    booked = inventory((14, 16))

    assert resolve_durations(at(13), WINDOW, booked, tz=TZ, max_hours=5) == [1]
    assert resolve_durations(at(14), WINDOW, booked, tz=TZ, max_hours=5) == []
    assert resolve_durations(at(16), WINDOW, booked, tz=TZ, max_hours=5) == [1, 2, 3, 4]


def test_durations_reject_unaligned_or_early_start() -> None:
    assert resolve_durations(at(11, 30), WINDOW, inventory(), tz=TZ, max_hours=5) == []
    assert resolve_durations(at(7), WINDOW, inventory(), tz=TZ, max_hours=5) == []


def test_durations_on_closed_day() -> None:
    assert resolve_durations(at(11), OperatingWindow.closed(0), inventory(), tz=TZ, max_hours=5) == []


def test_durations_accept_utc_start() -> None:
    start = at(11).astimezone(ZoneInfo("UTC"))

    assert resolve_durations(start, WINDOW, inventory(), tz=TZ, max_hours=2) == [1, 2]


def test_no_durations_before_a_half_hour_opening() -> None:
    half_past = OperatingWindow(weekday=0, open_time=time(8, 30), close_time=time(20))

    assert resolve_durations(at(8), half_past, inventory(), tz=TZ, max_hours=5) == []
    assert resolve_durations(at(9), half_past, inventory(), tz=TZ, max_hours=5) == [1, 2, 3, 4, 5]
