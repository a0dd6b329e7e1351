"""
Reservation Domain Entities

Framework-free building blocks of the availability engine:
- OperatingWindow: opening hours of a facility for one weekday
- GuestContact / Holder: who owns a reservation
- ReservationStatus: status finite state machine
- SlotCandidate: one hourly start time offered to the customer
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Optional

from shared.domain.base import ValueObject
from shared.domain.value_objects import TimeRange

from apps.bookings.exceptions import BookingValidationError, InvalidStatusTransition

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class OperatingWindow(ValueObject):
    """
    Opening hours for a weekday (0 = Monday)

    Times are wall-clock; `opens_at` / `closes_at` anchor them to a date
    in the facility's time zone.
    """
    weekday: int
    open_time: time
    close_time: time
    is_open: bool = True

    def __post_init__(self):
        if not 0 <= self.weekday <= 6:
            raise ValueError(f"Weekday must be within 0..6, got {self.weekday}")
        if self.is_open and self.close_time <= self.open_time:
            raise ValueError("Closing time must be later than opening time")

    @classmethod
    def closed(cls, weekday: int) -> 'OperatingWindow':
        return cls(weekday=weekday, open_time=time.min, close_time=time.min, is_open=False)

    @property
    def open_hour(self) -> int:
        return self.open_time.hour

    @property
    def close_hour(self) -> int:
        return self.close_time.hour

    def at(self, day: date, hour: int, tz: tzinfo) -> datetime:
        return datetime.combine(day, time(hour), tzinfo=tz)

    def opens_at(self, day: date, tz: tzinfo) -> datetime:
        return datetime.combine(day, self.open_time, tzinfo=tz)

    def closes_at(self, day: date, tz: tzinfo) -> datetime:
        return datetime.combine(day, self.close_time, tzinfo=tz)

    def span(self, day: date, tz: tzinfo) -> Optional[TimeRange]:
        """Opening hours of `day` as a TimeRange, None when closed"""
        if not self.is_open:
            return None
        return TimeRange(self.opens_at(day, tz), self.closes_at(day, tz))

    def __str__(self):
        if not self.is_open:
            return f"weekday {self.weekday}: closed"
        return f"weekday {self.weekday}: {self.open_time:%H:%M}-{self.close_time:%H:%M}"


@dataclass(frozen=True)
class GuestContact(ValueObject):
    """Contact details of an anonymous customer"""
    name: str
    email: str
    phone: str

    def __post_init__(self):
        # normalise before validation so " A@B.co " is accepted as a@b.co
        object.__setattr__(self, 'name', (self.name or '').strip())
        object.__setattr__(self, 'email', (self.email or '').strip().lower())
        object.__setattr__(self, 'phone', (self.phone or '').strip())

    def validate(self):
        if not self.name:
            raise BookingValidationError("Please enter your full name", code="guest_name_required")
        if not self.email:
            raise BookingValidationError("Please enter your email", code="guest_email_required")
        if not self.phone:
            raise BookingValidationError("Please enter your phone number", code="guest_phone_required")
        if not EMAIL_RE.match(self.email):
            raise BookingValidationError("Please enter a valid email address", code="guest_email_invalid")


@dataclass(frozen=True)
class Holder(ValueObject):
    """Owner of a reservation: a registered user id or a guest contact, never both"""
    user_id: Optional[int] = None
    guest: Optional[GuestContact] = None

    def __post_init__(self):
        if (self.user_id is None) == (self.guest is None):
            raise BookingValidationError(
                "A reservation holder is either a registered user or a guest",
                code="holder_invalid",
            )

    @classmethod
    def registered(cls, user_id: int) -> 'Holder':
        return cls(user_id=user_id)

    @classmethod
    def anonymous(cls, name: str, email: str, phone: str) -> 'Holder':
        return cls(guest=GuestContact(name=name, email=email, phone=phone))

    @property
    def is_guest(self) -> bool:
        return self.guest is not None

    def validate(self):
        if self.guest is not None:
            self.guest.validate()


class ReservationStatus(Enum):
    """
    Reservation status finite state machine

    - PENDING -> CONFIRMED (payment verified by staff)
    - PENDING -> CANCELLED
    - CONFIRMED -> CANCELLED (frees the slot)
    Nothing leaves CANCELLED.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'

    @property
    def blocks_slots(self) -> bool:
        return self in BLOCKING_STATUSES

    def can_transition_to(self, target: 'ReservationStatus') -> bool:
        return target in ALLOWED_TRANSITIONS[self]

    def ensure_transition(self, target: 'ReservationStatus') -> bool:
        """
        Validate a change to `target`

        Returns False when `target` is the current status (a no-op, which
        makes repeated cancellation harmless), True for a real change.
        Raises InvalidStatusTransition otherwise.
        """
        if target is self:
            return False
        if not self.can_transition_to(target):
            raise InvalidStatusTransition(
                f"Cannot change a {self.value} reservation to {target.value}"
            )
        return True

    @classmethod
    def parse(cls, value: str) -> 'ReservationStatus':
        try:
            return cls(value)
        except ValueError:
            raise BookingValidationError(f"Unknown reservation status: {value!r}", code="status_invalid")


BLOCKING_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})

ALLOWED_TRANSITIONS = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CANCELLED}),
    ReservationStatus.CANCELLED: frozenset(),
}


@dataclass(frozen=True)
class SlotCandidate(ValueObject):
    """Hourly start time offered for booking; derived, never persisted"""
    starts_at: datetime
    available: bool

    @property
    def time(self) -> str:
        return f"{self.starts_at.hour:02d}:00"

    def as_dict(self) -> dict:
        return {'time': self.time, 'available': self.available}


def truncate_to_hour(instant: datetime) -> datetime:
    return instant.replace(minute=0, second=0, microsecond=0)


def earliest_bookable_start(now: datetime, lead_time: timedelta, tz: tzinfo) -> datetime:
    """Top of the current local hour plus the lead time"""
    return truncate_to_hour(now.astimezone(tz)) + lead_time
