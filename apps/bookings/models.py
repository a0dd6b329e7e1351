"""Reservation models for SportBook."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import TimeRange

from .domain.entities import ReservationStatus


class Reservation(models.Model):
    """A facility interval reserved by a registered user or a guest.

    The facility and the interval never change after creation; only the
    status moves, and only along the transitions of `ReservationStatus`.
    """

    class Status(models.TextChoices):
        PENDING = ReservationStatus.PENDING.value, _("Pending")
        CONFIRMED = ReservationStatus.CONFIRMED.value, _("Confirmed")
        CANCELLED = ReservationStatus.CANCELLED.value, _("Cancelled")

    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reservations",
    )
    customer_name = models.CharField(max_length=150, blank=True)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=32, blank=True)
    guest_reference = models.CharField(
        max_length=16,
        unique=True,
        null=True,
        blank=True,
        editable=False,
        help_text=_("Code a guest uses, with their email, to look the booking up."),
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    total_price = models.PositiveIntegerField(
        help_text=_("Hourly price at booking time multiplied by the duration."),
    )
    payment_method = models.ForeignKey(
        "facilities.PaymentMethod",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reservations",
    )
    status_changed_at = models.DateTimeField(null=True, blank=True)
    status_changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="reservation_valid_interval",
            ),
        ]
        indexes = [
            models.Index(fields=["facility", "start_time", "end_time"], name="reservation_facility_span_idx"),
            models.Index(fields=["status"], name="reservation_status_idx"),
            models.Index(fields=["customer_email"], name="reservation_email_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.pk} {self.facility_id} {self.start_time:%Y-%m-%d %H:%M} ({self.status})"

    @property
    def is_guest(self) -> bool:
        return bool(self.guest_reference)

    @property
    def span(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def duration_hours(self) -> int:
        return self.span.hours

    @property
    def blocks_slots(self) -> bool:
        return ReservationStatus(self.status).blocks_slots

    @property
    def holder_name(self) -> str:
        if self.user_id:
            return self.user.get_full_name() or self.user.get_username()
        return self.customer_name


class SlotAllocation(models.Model):
    """One reserved hour of a facility.

    The unique constraint on (facility, starts_at) is the database-level
    guarantee that two live reservations never share an hour. Rows exist
    only while their reservation blocks slots.
    """

    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.CASCADE,
        related_name="slot_allocations",
    )
    reservation = models.ForeignKey(
        Reservation,
        on_delete=models.CASCADE,
        related_name="allocations",
    )
    starts_at = models.DateTimeField()

    class Meta:
        verbose_name = _("Slot allocation")
        verbose_name_plural = _("Slot allocations")
        ordering = ["facility_id", "starts_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["facility", "starts_at"],
                name="slot_allocation_unique_hour",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.facility_id} @ {self.starts_at:%Y-%m-%d %H:%M}"
