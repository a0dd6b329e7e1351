"""Time ranges and event dispatch of the shared kernel."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent
from shared.domain.value_objects import TimeRange


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2030, 1, 7, hour, minute, tzinfo=timezone.utc)


@dataclass
class SomethingHappened(DomainEvent):
    subject: int


def test_back_to_back_ranges_do_not_overlap() -> None:
    assert not TimeRange(at(10), at(11)).overlaps_with(TimeRange(at(11), at(12)))
    assert TimeRange(at(10), at(12)).overlaps_with(TimeRange(at(11), at(13)))


def test_range_requires_aware_ordered_bounds() -> None:
    with pytest.raises(ValueError):
        TimeRange(at(11), at(10))
    with pytest.raises(ValueError):
        TimeRange(datetime(2030, 1, 7, 10), datetime(2030, 1, 7, 11))


def test_hour_buckets_and_whole_hours() -> None:
    span = TimeRange(at(10), at(13))

    assert span.hours == 3
    assert span.is_whole_hours
    assert list(span.hour_buckets()) == [at(10), at(11), at(12)]
    assert not TimeRange(at(10), at(11, 30)).is_whole_hours


def test_event_serialises_to_flat_dict() -> None:
    payload = SomethingHappened(subject=3).to_dict()

    assert payload["event_type"] == "SomethingHappened"
    assert payload["subject"] == 3
    assert isinstance(payload["event_id"], str)


def test_failing_handler_does_not_block_others() -> None:
    bus = MessageBus()
    seen = []

    @bus.subscribe(SomethingHappened)
    def broken(event):  # type: ignore
        raise RuntimeError("boom")

    @bus.subscribe(SomethingHappened)
    def recorder(event):  # type: ignore
        seen.append(event.subject)

    bus.register_event_handler(SomethingHappened, recorder)
    bus.publish_events([SomethingHappened(subject=1)])

    assert seen == [1]
    assert bus.handlers_for(SomethingHappened) == [broken, recorder]
