"""
Reservation Command Handlers

Use cases of the reservation engine. Each handler orchestrates domain
objects inside a unit of work (one database transaction) and publishes
domain events after commit.

Commands:
- ReserveSlotCommand: turn a chosen interval into a pending reservation
- ChangeReservationStatusCommand: confirm or cancel a reservation
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional
import time

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import TimeRange
from apps.facilities.models import Facility, PaymentMethod
from apps.facilities.services import OperatingHoursNotConfigured, resolve_operating_window
from apps.bookings import services
from apps.bookings.conf import engine_setting, lead_time
from apps.bookings.domain.entities import Holder, ReservationStatus, earliest_bookable_start
from apps.bookings.domain.events import ReservationCreated, ReservationStatusChanged
from apps.bookings.exceptions import (
    BookingError,
    BookingValidationError,
    ConflictError,
    StoreContentionError,
)
from apps.bookings.models import Reservation

logger = structlog.get_logger(__name__)

GUEST_REFERENCE_ATTEMPTS = 3


# ===== Commands =====

@dataclass
class ReserveSlotCommand:
    """
    Reserve [start, end) on a facility

    The price is always derived from the facility; callers cannot set it.
    """
    facility_id: int
    start: datetime
    end: datetime
    holder: Holder
    payment_method_id: Optional[int] = None


@dataclass
class ChangeReservationStatusCommand:
    """Move a reservation to `status`; `actor_id` is the staff user doing it"""
    reservation_id: int
    status: str
    actor_id: Optional[int] = None


@dataclass(frozen=True)
class ReservationResult:
    reservation: Reservation

    @property
    def reservation_id(self) -> int:
        return self.reservation.pk

    @property
    def guest_reference(self) -> Optional[str]:
        return self.reservation.guest_reference


@dataclass
class BulkStatusResult:
    updated: List[int] = field(default_factory=list)
    rejected: Dict[int, str] = field(default_factory=dict)


# ===== Command Handlers =====

class ReserveSlotHandler:
    """
    The reservation guard

    Re-validates the request against current configuration and commits
    it atomically, so that at most one live reservation holds any hour of
    a facility no matter how many requests race for it.

    Strategy (Defense in Depth):
    1. Validate the request (interval shape, duration policy, opening
       hours, lead time, holder contact). Never retried.
    2. Start a transaction (unit of work)
    3. Lock the facility row (SELECT FOR UPDATE) so commits for one
       facility run one after another
    4. Load the facility inventory for the interval and check overlap
    5. Insert the reservation and one SlotAllocation per hour; the unique
       (facility, hour) constraint rejects any writer that slipped past
       steps 3-4
    6. Commit, then publish events
    Steps 2-6 are retried a bounded number of times on transient store
    errors and always re-read state.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = timezone.now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.clock = clock
        self.sleep = sleep

    def handle(self, command: ReserveSlotCommand) -> ReservationResult:
        log = logger.bind(
            facility_id=command.facility_id,
            start=command.start.isoformat(),
            end=command.end.isoformat(),
            guest=command.holder.is_guest,
        )
        span = self._validate(command)

        try:
            reservation = services.run_with_retries(
                lambda: self._commit(command, span),
                label="reservation",
                sleep=self.sleep,
            )
        except ConflictError as exc:
            log.info("reservation.conflict", code=exc.code)
            raise

        log.info(
            "reservation.created",
            reservation_id=reservation.pk,
            total_price=reservation.total_price,
        )
        return ReservationResult(reservation)

    # ----- validation -----

    def _validate(self, command: ReserveSlotCommand) -> TimeRange:
        if timezone.is_naive(command.start) or timezone.is_naive(command.end):
            raise BookingValidationError("Start and end must include a time zone", code="naive_datetime")
        if command.start >= command.end:
            raise BookingValidationError("End time must be after start time", code="interval_invalid")

        span = TimeRange(command.start, command.end)
        tz = timezone.get_current_timezone()
        local_start = command.start.astimezone(tz)

        if local_start.minute or local_start.second or local_start.microsecond or not span.is_whole_hours:
            raise BookingValidationError("Bookings start on the hour and last whole hours", code="not_whole_hours")

        min_hours = engine_setting("MIN_DURATION_HOURS")
        max_hours = engine_setting("MAX_DURATION_HOURS")
        if not min_hours <= span.hours <= max_hours:
            raise BookingValidationError(
                f"Duration must be between {min_hours} and {max_hours} hours",
                code="duration_out_of_bounds",
            )

        if not Facility.objects.filter(pk=command.facility_id, is_active=True).exists():
            raise BookingValidationError("Facility not found or not active", code="facility_unavailable")

        day = local_start.date()
        try:
            window = resolve_operating_window(command.facility_id, day)
        except OperatingHoursNotConfigured as exc:
            raise BookingValidationError(str(exc), code="operating_hours_not_configured") from exc

        opening_hours = window.span(day, tz)
        if opening_hours is None:
            raise BookingValidationError("The facility is closed on this day", code="closed")
        if not span.within(opening_hours):
            raise BookingValidationError("Booking extends beyond operating hours", code="outside_operating_hours")

        if command.start < earliest_bookable_start(self.clock(), lead_time(), tz):
            raise BookingValidationError("This time slot can no longer be booked", code="too_soon")

        command.holder.validate()

        if command.payment_method_id is not None and not PaymentMethod.objects.filter(
            pk=command.payment_method_id, is_active=True
        ).exists():
            raise BookingValidationError("Please select a valid payment method", code="payment_method_invalid")

        return span

    # ----- commit -----

    def _commit(self, command: ReserveSlotCommand, span: TimeRange) -> Reservation:
        with DjangoUnitOfWork() as uow:
            facility = services.lock_facility(command.facility_id)

            inventory = services.load_inventory(facility.pk, span, lock=True)
            if not inventory.can_allocate(span):
                raise ConflictError("This time slot is no longer available")

            reservation = self._insert(command, facility, span)
            inventory.allocate(reservation.pk, span)

            uow.collect_events(inventory)
            uow.add_event(ReservationCreated(
                reservation_id=reservation.pk,
                facility_id=facility.pk,
                start=span.start,
                end=span.end,
                total_price=reservation.total_price,
                is_guest=command.holder.is_guest,
                guest_reference=reservation.guest_reference,
            ))
        return reservation

    def _insert(self, command: ReserveSlotCommand, facility: Facility, span: TimeRange) -> Reservation:
        holder = command.holder
        for _ in range(GUEST_REFERENCE_ATTEMPTS):
            reservation = Reservation(
                facility=facility,
                user_id=holder.user_id,
                customer_name=holder.guest.name if holder.guest else "",
                customer_email=holder.guest.email if holder.guest else "",
                customer_phone=holder.guest.phone if holder.guest else "",
                guest_reference=services.unique_guest_reference() if holder.is_guest else None,
                start_time=span.start,
                end_time=span.end,
                status=Reservation.Status.PENDING,
                total_price=facility.price_for(span.hours),
                payment_method_id=command.payment_method_id,
            )
            try:
                with transaction.atomic():
                    reservation.save(force_insert=True)
                    services.allocate_hours(reservation)
                return reservation
            except IntegrityError:
                if services.hours_taken(facility.pk, span):
                    raise ConflictError("This time slot is no longer available")
                if not holder.is_guest:
                    raise
                logger.warning("reservation.guest_reference_collision", facility_id=facility.pk)
        raise StoreContentionError("Could not allocate a unique guest reference")


class ChangeReservationStatusHandler:
    """
    Confirm or cancel a reservation (SetStatus)

    Setting the current status again is a no-op, so cancelling twice is
    harmless. Cancelling releases the reserved hours in the same
    transaction.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = timezone.now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.clock = clock
        self.sleep = sleep

    def handle(self, command: ChangeReservationStatusCommand) -> Reservation:
        target = ReservationStatus.parse(command.status)
        return services.run_with_retries(
            lambda: self._apply(command, target),
            label="reservation_status",
            sleep=self.sleep,
        )

    def _apply(self, command: ChangeReservationStatusCommand, target: ReservationStatus) -> Reservation:
        with DjangoUnitOfWork() as uow:
            reservation = services.lock_reservation(command.reservation_id)

            current = ReservationStatus(reservation.status)
            if not current.ensure_transition(target):
                logger.info(
                    "reservation.status_unchanged",
                    reservation_id=reservation.pk,
                    status=current.value,
                )
                return reservation

            if target is ReservationStatus.CANCELLED:
                inventory = services.load_inventory(reservation.facility_id, reservation.span, lock=True)
                inventory.deallocate(reservation.pk)
                services.release_hours(reservation)
                uow.collect_events(inventory)

            reservation.status = target.value
            reservation.status_changed_at = self.clock()
            reservation.status_changed_by_id = command.actor_id
            reservation.save(update_fields=["status", "status_changed_at", "status_changed_by", "updated_at"])

            uow.add_event(ReservationStatusChanged(
                reservation_id=reservation.pk,
                facility_id=reservation.facility_id,
                old_status=current.value,
                new_status=target.value,
                changed_by=command.actor_id,
            ))

        logger.info(
            "reservation.status_changed",
            reservation_id=reservation.pk,
            old_status=current.value,
            new_status=target.value,
            actor_id=command.actor_id,
        )
        return reservation

    def handle_many(self, reservation_ids: Iterable[int], status: str, actor_id: Optional[int] = None) -> BulkStatusResult:
        """Apply the same status to several reservations, one transaction each."""
        result = BulkStatusResult()
        for reservation_id in reservation_ids:
            try:
                self.handle(ChangeReservationStatusCommand(reservation_id, status, actor_id))
            except BookingError as exc:
                result.rejected[reservation_id] = exc.code
            else:
                result.updated.append(reservation_id)
        return result
