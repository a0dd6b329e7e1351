"""Facility configuration models for SportBook."""

from __future__ import annotations

from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Facility(models.Model):
    """A bookable sports facility (court, field, pool lane...)."""

    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    image_url = models.URLField(blank=True)
    price_per_hour = models.PositiveIntegerField(
        help_text=_("Hourly price in whole currency units."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Facility")
        verbose_name_plural = _("Facilities")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price_per_hour__gt=0),
                name="facility_positive_price",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def price_for(self, hours: int) -> int:
        return self.price_per_hour * hours


class OperatingHours(models.Model):
    """Opening hours for one weekday.

    Rows without a facility are the global schedule; a facility-specific
    row for the same weekday takes precedence over it.
    """

    class Weekday(models.IntegerChoices):
        MONDAY = 0, _("Monday")
        TUESDAY = 1, _("Tuesday")
        WEDNESDAY = 2, _("Wednesday")
        THURSDAY = 3, _("Thursday")
        FRIDAY = 4, _("Friday")
        SATURDAY = 5, _("Saturday")
        SUNDAY = 6, _("Sunday")

    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="operating_hours",
        help_text=_("Leave empty for the schedule shared by all facilities."),
    )
    day_of_week = models.PositiveSmallIntegerField(choices=Weekday.choices)
    open_time = models.TimeField()
    close_time = models.TimeField()
    is_open = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Operating hours")
        verbose_name_plural = _("Operating hours")
        ordering = ["facility_id", "day_of_week"]
        constraints = [
            models.UniqueConstraint(
                fields=["facility", "day_of_week"],
                name="operating_hours_unique_facility_day",
            ),
            models.UniqueConstraint(
                fields=["day_of_week"],
                condition=models.Q(facility__isnull=True),
                name="operating_hours_unique_global_day",
            ),
            models.CheckConstraint(
                condition=models.Q(is_open=False) | models.Q(close_time__gt=models.F("open_time")),
                name="operating_hours_close_after_open",
            ),
        ]

    def __str__(self) -> str:
        scope = self.facility.name if self.facility_id else _("All facilities")
        if not self.is_open:
            return f"{scope}: {self.get_day_of_week_display()} closed"
        return f"{scope}: {self.get_day_of_week_display()} {self.open_time:%H:%M}-{self.close_time:%H:%M}"

    def clean(self) -> None:
        if self.is_open and self.close_time <= self.open_time:
            raise ValidationError(_("Closing time must be later than opening time."))


class PaymentMethod(models.Model):
    """Bank account a customer pays into; reservations only reference it."""

    bank_name = models.CharField(max_length=100)
    account_number = models.CharField(max_length=50)
    account_holder = models.CharField(max_length=150)
    is_active = models.BooleanField(default=True)
    is_receiver = models.BooleanField(
        default=True,
        help_text=_("Offered to customers as a payment destination."),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment method")
        verbose_name_plural = _("Payment methods")
        ordering = ["bank_name"]

    def __str__(self) -> str:
        return f"{self.bank_name} {self.account_number} ({self.account_holder})"
