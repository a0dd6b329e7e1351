"""Domain services for the reservation engine."""

from __future__ import annotations

import secrets
import string
import time
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, List, Optional, TypeVar

import structlog
from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError, OperationalError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.facilities.models import Facility
from apps.facilities.services import get_active_facility, resolve_operating_window
from shared.domain.value_objects import TimeRange

from .conf import engine_setting, lead_time
from .domain.availability import generate_slots, resolve_durations
from .domain.entities import BLOCKING_STATUSES, SlotCandidate
from .domain.inventory import Inventory
from .exceptions import BookingValidationError, ReservationNotFound, StoreContentionError
from .models import Reservation, SlotAllocation

logger = structlog.get_logger(__name__)

T = TypeVar("T")

BLOCKING_STATUS_VALUES = [status.value for status in BLOCKING_STATUSES]
GUEST_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def local_day_span(day: date, tz: Optional[tzinfo] = None) -> TimeRange:
    """Midnight to midnight of `day` in the facility time zone."""

    tz = tz or timezone.get_current_timezone()
    start = datetime.combine(day, datetime.min.time(), tzinfo=tz)
    return TimeRange(start, datetime.combine(day + timedelta(days=1), datetime.min.time(), tzinfo=tz))


def lock_facility(facility_id: int) -> Facility:
    """Load the facility row under a row lock.

    Concurrent commits for the same facility queue up on this lock;
    commits for other facilities are unaffected.
    """

    facility = _lock_queryset_if_possible(Facility.objects.filter(pk=facility_id)).first()
    if facility is None or not facility.is_active:
        raise BookingValidationError("Facility not found or not active", code="facility_unavailable")
    return facility


def lock_reservation(reservation_id: int) -> Reservation:
    """Load a reservation under a row lock; raises ReservationNotFound."""

    reservation = _lock_queryset_if_possible(Reservation.objects.filter(pk=reservation_id)).first()
    if reservation is None:
        raise ReservationNotFound("Reservation not found")
    return reservation


def blocking_reservations(facility_id: int, span: TimeRange):
    """Reservations that hold any part of `span` on the facility."""

    return Reservation.objects.filter(
        facility_id=facility_id,
        status__in=BLOCKING_STATUS_VALUES,
        start_time__lt=span.end,
        end_time__gt=span.start,
    )


def load_inventory(facility_id: int, span: TimeRange, *, lock: bool = False) -> Inventory:
    """Inventory of the facility restricted to reservations intersecting `span`."""

    queryset = blocking_reservations(facility_id, span).only("id", "start_time", "end_time")
    if lock:
        queryset = _lock_queryset_if_possible(queryset)
    return Inventory.from_spans(
        facility_id,
        ((reservation.pk, reservation.span) for reservation in queryset),
    )


def allocate_hours(reservation: Reservation) -> List[SlotAllocation]:
    """Insert one SlotAllocation row per reserved hour.

    Raises IntegrityError when another reservation already holds one of
    the hours.
    """

    return SlotAllocation.objects.bulk_create(
        [
            SlotAllocation(
                facility_id=reservation.facility_id,
                reservation=reservation,
                starts_at=starts_at,
            )
            for starts_at in reservation.span.hour_buckets()
        ]
    )


def release_hours(reservation: Reservation) -> int:
    deleted, _ = SlotAllocation.objects.filter(reservation=reservation).delete()
    return deleted


def hours_taken(facility_id: int, span: TimeRange) -> bool:
    return SlotAllocation.objects.filter(
        facility_id=facility_id,
        starts_at__in=list(span.hour_buckets()),
    ).exists()


def generate_guest_reference(length: Optional[int] = None) -> str:
    """Random uppercase alphanumeric code, e.g. ``7KQ2M9XA``."""

    length = length or engine_setting("GUEST_REFERENCE_LENGTH")
    return "".join(secrets.choice(GUEST_REFERENCE_ALPHABET) for _ in range(length))


def unique_guest_reference(max_attempts: int = 5) -> str:
    """Sample codes until one is not used by any reservation.

    The unique constraint on the column still has the last word; the
    guard resamples when an insert collides anyway.
    """

    for _ in range(max_attempts):
        reference = generate_guest_reference()
        if not Reservation.objects.filter(guest_reference=reference).exists():
            return reference
    raise StoreContentionError("Could not allocate a unique guest reference")


def run_with_retries(
    operation: Callable[[], T],
    *,
    label: str,
    max_attempts: Optional[int] = None,
    backoff: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run `operation`, retrying transient store failures a bounded number of times.

    Only `OperationalError` (lock timeout, busy database, lost connection)
    is retried. Each attempt re-runs the whole operation, so state is
    always re-read inside a fresh transaction.
    """

    max_attempts = max_attempts or engine_setting("RESERVE_MAX_ATTEMPTS")
    backoff = engine_setting("RESERVE_RETRY_BACKOFF") if backoff is None else backoff

    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except OperationalError as exc:
            logger.warning(f"{label}.store_busy", attempt=attempt, max_attempts=max_attempts, error=str(exc))
            if attempt < max_attempts and backoff:
                sleep(backoff * attempt)

    logger.error(f"{label}.gave_up", attempts=max_attempts)
    raise StoreContentionError("The booking service is busy, please try again")


def get_slots(facility_id: int, day: date, *, now: Optional[datetime] = None) -> List[SlotCandidate]:
    """Hourly start slots of the facility on `day` (GetSlots).

    Raises Facility.DoesNotExist and OperatingHoursNotConfigured.
    """

    facility = get_active_facility(facility_id)
    window = resolve_operating_window(facility.pk, day)
    tz = timezone.get_current_timezone()
    inventory = load_inventory(facility.pk, local_day_span(day, tz))
    return list(
        generate_slots(
            day,
            window,
            inventory,
            now or timezone.now(),
            tz=tz,
            lead_time=lead_time(),
        )
    )


def get_durations(facility_id: int, start: datetime) -> List[int]:
    """Durations in hours bookable from `start` (GetDurations).

    Raises Facility.DoesNotExist and OperatingHoursNotConfigured.
    """

    facility = get_active_facility(facility_id)
    tz = timezone.get_current_timezone()
    day = start.astimezone(tz).date()
    window = resolve_operating_window(facility.pk, day)
    inventory = load_inventory(facility.pk, local_day_span(day, tz))
    return resolve_durations(
        start,
        window,
        inventory,
        tz=tz,
        max_hours=engine_setting("MAX_DURATION_HOURS"),
    )
