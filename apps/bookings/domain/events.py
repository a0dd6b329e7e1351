"""
Reservation Domain Events

Published through the message bus after the transaction that produced
them commits.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from shared.domain.base import DomainEvent


# ===== Reservation Events =====

@dataclass
class ReservationCreated(DomainEvent):
    """
    A reservation was accepted by the guard (status pending)

    Consumers: admin dashboard refresh, guest confirmation screen.
    """
    reservation_id: int
    facility_id: int
    start: datetime
    end: datetime
    total_price: int
    is_guest: bool
    guest_reference: Optional[str] = None


@dataclass
class ReservationStatusChanged(DomainEvent):
    """
    A reservation moved to a new status

    Cancellation frees the reserved hours.
    """
    reservation_id: int
    facility_id: int
    old_status: str
    new_status: str
    changed_by: Optional[int] = None


# ===== Inventory Events =====

@dataclass
class InventoryAllocated(DomainEvent):
    """Hours were allocated on a facility for a reservation"""
    inventory_id: UUID
    facility_id: int
    reservation_id: int
    start: datetime
    end: datetime


@dataclass
class InventoryDeallocated(DomainEvent):
    """Hours held by a reservation became free again"""
    inventory_id: UUID
    facility_id: int
    reservation_id: int
