"""Integration tests for facility availability endpoints."""

from __future__ import annotations

from datetime import datetime, time, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Reservation
from apps.facilities.models import Facility, OperatingHours, PaymentMethod


class FacilityAvailabilityAPITests(APITestCase):
    """Slots and durations as offered to the booking screen."""

    def setUp(self) -> None:
        self.facility = Facility.objects.create(name="Futsal A", price_per_hour=100_000)
        self.day = timezone.localdate() + timedelta(days=7)
        OperatingHours.objects.create(
            day_of_week=self.day.weekday(), open_time=time(8), close_time=time(20)
        )
        self.slots_url = reverse("facility-slots", args=[self.facility.pk])
        self.durations_url = reverse("facility-durations", args=[self.facility.pk])

    def _at(self, hour: int) -> datetime:
        return datetime.combine(self.day, time(hour), tzinfo=timezone.get_current_timezone())

    def _reserve(self, start_hour: int, end_hour: int, status_value: str = "confirmed") -> Reservation:
        return Reservation.objects.create(
            facility=self.facility,
            customer_name="Ana",
            customer_email="ana@example.com",
            customer_phone="0812",
            start_time=self._at(start_hour),
            end_time=self._at(end_hour),
            status=status_value,
            total_price=self.facility.price_for(end_hour - start_hour),
        )

    def test_lists_active_facilities(self) -> None:
        Facility.objects.create(name="Closed court", price_per_hour=1, is_active=False)

        response = self.client.get(reverse("facility-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["name"] for item in response.data], ["Futsal A"])

    def test_facility_detail_fields(self) -> None:
        response = self.client.get(reverse("facility-detail", args=[self.facility.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            set(response.data),
            {"id", "name", "description", "image_url", "price_per_hour", "is_active"},
        )

    def test_slots_mark_reserved_hours(self) -> None:
        self._reserve(14, 16)
        self._reserve(10, 11, status_value="cancelled")

        response = self.client.get(self.slots_url, {"date": self.day.isoformat()})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        slots = {slot["time"]: slot["available"] for slot in response.data["slots"]}
        self.assertEqual(len(slots), 12)
        self.assertTrue(slots["10:00"])
        self.assertTrue(slots["13:00"])
        self.assertFalse(slots["14:00"])
        self.assertFalse(slots["15:00"])
        self.assertTrue(slots["16:00"])

    def test_slots_without_configured_hours(self) -> None:
        unconfigured = self.day + timedelta(days=1)

        response = self.client.get(self.slots_url, {"date": unconfigured.isoformat()})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["slots"], [])
        self.assertEqual(response.data["detail"], "operating_hours_not_configured")

    def test_slots_require_a_date(self) -> None:
        response = self.client.get(self.slots_url)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_durations_stop_at_next_reservation(self) -> None:
        self._reserve(14, 16, status_value="pending")

        response = self.client.get(self.durations_url, {"start": self._at(13).isoformat()})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["durations"], [1])

    def test_durations_capped_at_policy_maximum(self) -> None:
        response = self.client.get(self.durations_url, {"start": self._at(11).isoformat()})

        self.assertEqual(response.data["durations"], [1, 2, 3, 4, 5])

    def test_durations_bounded_by_closing_time(self) -> None:
        response = self.client.get(self.durations_url, {"start": self._at(18).isoformat()})

        self.assertEqual(response.data["durations"], [1, 2])

    def test_unknown_facility(self) -> None:
        response = self.client.get(reverse("facility-slots", args=[999_999]), {"date": self.day.isoformat()})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_payment_methods_lists_receivers(self) -> None:
        PaymentMethod.objects.create(bank_name="BCA", account_number="1", account_holder="SportBook")
        PaymentMethod.objects.create(
            bank_name="BNI", account_number="2", account_holder="SportBook", is_receiver=False
        )

        response = self.client.get(reverse("payment-method-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["bank_name"] for item in response.data], ["BCA"])
