"""
Common Value Objects

- TimeRange: half-open interval [start, end) between two instants
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterator

from shared.domain.base import ValueObject

ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents [start, end): start is inclusive, end is exclusive, so two
    back-to-back reservations (10:00-11:00 and 11:00-12:00) do not overlap.
    Both bounds must be timezone-aware.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeRange bounds must be timezone-aware")
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start}) must be before end ({self.end})")

    @classmethod
    def from_hours(cls, start: datetime, hours: int) -> 'TimeRange':
        return cls(start, start + timedelta(hours=hours))

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range shares any instant with another

        Overlap formula: start1 < end2 AND end1 > start2
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")
        return self.start < other.end and self.end > other.start

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def within(self, other: 'TimeRange') -> bool:
        """True if this range lies entirely inside `other`"""
        return other.start <= self.start and self.end <= other.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_whole_hours(self) -> bool:
        return self.duration % ONE_HOUR == timedelta(0)

    @property
    def hours(self) -> int:
        """Number of whole hours covered by the range"""
        return self.duration // ONE_HOUR

    def hour_buckets(self) -> Iterator[datetime]:
        """Start instant of every hour in the range"""
        current = self.start
        while current < self.end:
            yield current
            current += ONE_HOUR

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"TimeRange({self.start.isoformat()}, {self.end.isoformat()})"
