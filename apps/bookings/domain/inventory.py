"""
Inventory Aggregate

The consistency boundary for preventing double bookings of a facility.
Every allocation of hours goes through this aggregate.

Strategy (Defense in Depth):
1. Domain validation: can_allocate() checks for overlaps
2. Pessimistic locking: SELECT FOR UPDATE on the facility row
3. Database constraint: unique (facility, hour) allocation rows
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from shared.domain.base import Aggregate
from shared.domain.value_objects import TimeRange

from apps.bookings.exceptions import ConflictError


@dataclass(frozen=True)
class Allocation:
    """
    Hours held by one reservation

    Allocations of a facility never overlap.
    """
    reservation_id: Optional[int]
    span: TimeRange


@dataclass(eq=False)
class Inventory(Aggregate):
    """
    Inventory Aggregate Root

    Holds the allocations of one facility for the period that was loaded
    (a day for availability queries, the requested interval when
    committing). Only reservations that block slots are loaded.

    Usage:
        inventory = load_inventory(facility_id, span, lock=True)
        if inventory.can_allocate(span):
            inventory.allocate(reservation_id, span)
    """

    facility_id: int
    allocations: List[Allocation] = field(default_factory=list)

    @classmethod
    def from_spans(cls, facility_id: int, spans: Iterable[tuple]) -> 'Inventory':
        """Build from (reservation_id, TimeRange) pairs"""
        return cls(
            facility_id=facility_id,
            allocations=[Allocation(reservation_id, span) for reservation_id, span in spans],
        )

    def can_allocate(self, span: TimeRange) -> bool:
        return not any(a.span.overlaps_with(span) for a in self.allocations)

    def is_occupied(self, instant: datetime) -> bool:
        """True if some allocation covers `instant` (start inclusive, end exclusive)"""
        return any(a.span.contains(instant) for a in self.allocations)

    def get_allocations_for_period(self, span: TimeRange) -> List[Allocation]:
        return [a for a in self.allocations if a.span.overlaps_with(span)]

    def get_allocation(self, reservation_id: int) -> Optional[Allocation]:
        return next((a for a in self.allocations if a.reservation_id == reservation_id), None)

    def allocate(self, reservation_id: int, span: TimeRange) -> Allocation:
        """
        Allocate hours for a reservation

        Raises:
            ConflictError: if the span overlaps an existing allocation
        """
        overlapping = self.get_allocations_for_period(span)
        if overlapping:
            raise ConflictError(
                f"This time slot is no longer available ({span} overlaps "
                f"{len(overlapping)} existing reservation(s))"
            )

        allocation = Allocation(reservation_id=reservation_id, span=span)
        self.allocations.append(allocation)

        from apps.bookings.domain.events import InventoryAllocated

        self.add_event(InventoryAllocated(
            inventory_id=self.id,
            facility_id=self.facility_id,
            reservation_id=reservation_id,
            start=span.start,
            end=span.end,
        ))
        return allocation

    def deallocate(self, reservation_id: int) -> None:
        """
        Release the hours held by a reservation

        A reservation without an allocation is ignored so that a repeated
        release stays harmless.
        """
        allocation = self.get_allocation(reservation_id)
        if allocation is None:
            return

        self.allocations.remove(allocation)

        from apps.bookings.domain.events import InventoryDeallocated

        self.add_event(InventoryDeallocated(
            inventory_id=self.id,
            facility_id=self.facility_id,
            reservation_id=reservation_id,
        ))

    @property
    def total_allocations(self) -> int:
        return len(self.allocations)

    def __str__(self):
        return f"Inventory(facility={self.facility_id}, allocations={len(self.allocations)})"
