"""Subscribers for reservation domain events.

Notification delivery is not part of the engine; events are recorded in
the structured log so downstream tooling can pick them up.
"""

from __future__ import annotations

import structlog

from shared.application.message_bus import message_bus
from shared.domain.base import DomainEvent

from .domain.events import (
    InventoryAllocated,
    InventoryDeallocated,
    ReservationCreated,
    ReservationStatusChanged,
)

logger = structlog.get_logger("apps.bookings.events")

RESERVATION_EVENTS = (
    ReservationCreated,
    ReservationStatusChanged,
    InventoryAllocated,
    InventoryDeallocated,
)


def log_event(event: DomainEvent) -> None:
    logger.info(event.name, **event.to_dict())


def register_handlers() -> None:
    for event_type in RESERVATION_EVENTS:
        message_bus.register_event_handler(event_type, log_event)
