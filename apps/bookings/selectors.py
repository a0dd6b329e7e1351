"""Read paths over booking records."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from django.db.models import Count, Q, QuerySet, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from . import services
from .exceptions import ReservationNotFound
from .models import Reservation

GUEST_LOOKUP_FAILED = "Booking not found. Please check your booking reference and email."


def _with_relations(queryset: QuerySet) -> QuerySet:
    return queryset.select_related("facility", "user", "payment_method")


def lookup_guest_booking(reference: str, email: str) -> Reservation:
    """Find a guest reservation by its reference and contact email.

    The reference is normalised to upper case and the email compared
    case-insensitively. Any mismatch yields the same error so the
    response does not reveal which half was wrong.
    """

    reference = (reference or "").strip().upper()
    email = (email or "").strip()
    if not reference or not email:
        raise ReservationNotFound(GUEST_LOOKUP_FAILED)

    reservation = (
        _with_relations(Reservation.objects.all())
        .filter(guest_reference=reference, customer_email__iexact=email)
        .first()
    )
    if reservation is None:
        raise ReservationNotFound(GUEST_LOOKUP_FAILED)
    return reservation


def reservations_for_holder(user) -> QuerySet:  # type: ignore
    """Reservations booked by a registered user, newest first."""

    return _with_relations(Reservation.objects.filter(user=user)).order_by("-created_at")


def reservations_for_facility(
    facility_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> QuerySet:
    """Reservations filtered by facility and an inclusive range of local start dates."""

    queryset = _with_relations(Reservation.objects.all())
    tz = timezone.get_current_timezone()
    if facility_id is not None:
        queryset = queryset.filter(facility_id=facility_id)
    if start_date is not None:
        queryset = queryset.filter(start_time__gte=services.local_day_span(start_date, tz).start)
    if end_date is not None:
        queryset = queryset.filter(start_time__lt=services.local_day_span(end_date, tz).end)
    return queryset.order_by("-created_at")


def blocking_reservations(facility_id: int, day: date) -> QuerySet:
    """Pending and confirmed reservations intersecting the local `day`."""

    return services.blocking_reservations(facility_id, services.local_day_span(day)).order_by("start_time")


def booking_stats(queryset: Optional[QuerySet] = None) -> dict[str, Any]:
    """Dashboard figures: counts per status, confirmed revenue, cancellation rate."""

    if queryset is None:
        queryset = Reservation.objects.all()

    figures = queryset.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=Reservation.Status.PENDING)),
        confirmed=Count("id", filter=Q(status=Reservation.Status.CONFIRMED)),
        cancelled=Count("id", filter=Q(status=Reservation.Status.CANCELLED)),
        revenue=Sum("total_price", filter=Q(status=Reservation.Status.CONFIRMED)),
    )
    figures["revenue"] = figures["revenue"] or 0
    total = figures["total"]
    figures["cancellation_rate"] = round(figures["cancelled"] * 100 / total) if total else 0
    return figures
