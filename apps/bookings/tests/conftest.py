"""Fixtures shared by the reservation tests."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest
from django.utils import timezone  # type: ignore

from apps.bookings.application.command_handlers import ReserveSlotHandler
from apps.facilities.models import Facility, OperatingHours, PaymentMethod

# a Monday, far enough ahead that the lead time never interferes
BOOKING_DAY = date(2030, 1, 7)


def local(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.get_current_timezone())


@pytest.fixture
def booking_day() -> date:
    return BOOKING_DAY


@pytest.fixture
def now() -> datetime:
    return local(BOOKING_DAY - timedelta(days=1), 9, 30)


@pytest.fixture
def facility(db) -> Facility:  # type: ignore
    return Facility.objects.create(name="Futsal A", price_per_hour=150_000)


@pytest.fixture
def weekly_hours(db) -> list[OperatingHours]:  # type: ignore
    """Global 08:00-20:00 schedule, every day of the week."""
    return [
        OperatingHours.objects.create(day_of_week=weekday, open_time=time(8), close_time=time(20))
        for weekday in range(7)
    ]


@pytest.fixture
def payment_method(db) -> PaymentMethod:  # type: ignore
    return PaymentMethod.objects.create(bank_name="BCA", account_number="123456", account_holder="SportBook")


@pytest.fixture
def guard(now: datetime) -> ReserveSlotHandler:
    return ReserveSlotHandler(clock=lambda: now, sleep=lambda seconds: None)
