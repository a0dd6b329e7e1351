"""Integration tests for the reservation API."""

from __future__ import annotations

from datetime import date, time

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Reservation
from apps.facilities.models import Facility, OperatingHours, PaymentMethod

BOOKING_DAY = date(2030, 1, 7)


def iso(hour: int, day: date = BOOKING_DAY) -> str:
    return f"{day.isoformat()}T{hour:02d}:00:00+07:00"


class ReservationAPITests(APITestCase):
    """Covers reserving, conflicts, guest lookup and staff status changes."""

    def setUp(self) -> None:
        User = get_user_model()
        self.player = User.objects.create_user(username="player", password="PlayerPass123")
        self.other = User.objects.create_user(username="other", password="OtherPass123")
        self.staff = User.objects.create_user(username="admin", password="AdminPass123", is_staff=True)
        self.facility = Facility.objects.create(name="Futsal A", price_per_hour=100_000)
        for weekday in range(7):
            OperatingHours.objects.create(day_of_week=weekday, open_time=time(8), close_time=time(22))
        self.payment_method = PaymentMethod.objects.create(
            bank_name="BCA", account_number="123456", account_holder="SportBook"
        )
        self.list_url = reverse("reservation-list")

    def _payload(self, start_hour: int, end_hour: int, **extra) -> dict:  # type: ignore
        payload = {"facility": self.facility.pk, "start": iso(start_hour), "end": iso(end_hour)}
        payload.update(extra)
        return payload

    def _guest_payload(self, start_hour: int, end_hour: int, email: str = "ana@example.com") -> dict:
        return self._payload(
            start_hour,
            end_hour,
            guest={"name": "Ana Putri", "email": email, "phone": "+628123456789"},
            payment_method=self.payment_method.pk,
        )

    def test_user_can_reserve(self) -> None:
        self.client.force_authenticate(self.player)

        response = self.client.post(self.list_url, self._payload(10, 12), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(response.data["total_price"], 200_000)
        self.assertNotIn("guest_reference", response.data)
        reservation = Reservation.objects.get(pk=response.data["reservation_id"])
        self.assertEqual(reservation.user, self.player)

    def test_guest_can_reserve_and_look_up(self) -> None:
        response = self.client.post(self.list_url, self._guest_payload(18, 19), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        reference = response.data["guest_reference"]

        lookup = self.client.post(
            reverse("reservation-lookup"),
            {"reference": reference.lower(), "email": "ANA@example.com"},
            format="json",
        )

        self.assertEqual(lookup.status_code, status.HTTP_200_OK, lookup.data)
        self.assertEqual(lookup.data["id"], response.data["reservation_id"])

    def test_lookup_failure_does_not_reveal_which_field_was_wrong(self) -> None:
        response = self.client.post(self.list_url, self._guest_payload(18, 19), format="json")
        reference = response.data["guest_reference"]
        url = reverse("reservation-lookup")

        wrong_email = self.client.post(url, {"reference": reference, "email": "x@example.com"}, format="json")
        wrong_reference = self.client.post(url, {"reference": "ZZZZZZZZ", "email": "ana@example.com"}, format="json")

        self.assertEqual(wrong_email.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(wrong_reference.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(wrong_email.data, wrong_reference.data)

    def test_anonymous_reserve_requires_guest_contact(self) -> None:
        response = self.client.post(self.list_url, self._payload(10, 11), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("guest", response.data)

    def test_invalid_guest_email_is_rejected(self) -> None:
        response = self.client.post(self.list_url, self._guest_payload(10, 11, email="not-an-email"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "guest_email_invalid")

    def test_prevent_double_booking_on_overlap(self) -> None:
        self.client.force_authenticate(self.player)
        first = self.client.post(self.list_url, self._payload(14, 16), format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)

        conflict = self.client.post(self.list_url, self._payload(13, 15), format="json")

        self.assertEqual(conflict.status_code, status.HTTP_409_CONFLICT, conflict.data)
        self.assertEqual(conflict.data["code"], "slot_unavailable")
        adjacent = self.client.post(self.list_url, self._payload(13, 14), format="json")
        self.assertEqual(adjacent.status_code, status.HTTP_201_CREATED, adjacent.data)

    def test_outside_operating_hours(self) -> None:
        self.client.force_authenticate(self.player)

        response = self.client.post(self.list_url, self._payload(21, 23), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "outside_operating_hours")

    def test_my_bookings_lists_only_own_reservations(self) -> None:
        self.client.force_authenticate(self.player)
        self.client.post(self.list_url, self._payload(10, 11), format="json")
        self.client.force_authenticate(self.other)
        self.client.post(self.list_url, self._payload(11, 12), format="json")

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["user_id"], self.other.pk)

    def test_staff_can_filter_reservations(self) -> None:
        guest = self.client.post(self.list_url, self._guest_payload(12, 13), format="json")
        self.assertEqual(guest.status_code, status.HTTP_201_CREATED, guest.data)
        self.client.force_authenticate(self.player)
        self.client.post(self.list_url, self._payload(10, 11), format="json")
        self.client.force_authenticate(self.staff)

        everything = self.client.get(self.list_url)
        by_search = self.client.get(self.list_url, {"search": "ana@example"})
        by_date = self.client.get(self.list_url, {"date_from": "2030-01-08"})

        self.assertEqual(len(everything.data), 2)
        self.assertEqual(len(by_search.data), 1)
        self.assertEqual(by_date.data, [])

    def test_anonymous_cannot_list(self) -> None:
        response = self.client.get(self.list_url)
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_staff_confirms_and_cancels(self) -> None:
        self.client.force_authenticate(self.player)
        created = self.client.post(self.list_url, self._payload(10, 12), format="json")
        url = reverse("reservation-set-status", args=[created.data["reservation_id"]])

        self.client.force_authenticate(self.staff)
        confirmed = self.client.post(url, {"status": "confirmed"}, format="json")
        cancelled = self.client.post(url, {"status": "cancelled"}, format="json")
        again = self.client.post(url, {"status": "cancelled"}, format="json")
        reopened = self.client.post(url, {"status": "pending"}, format="json")

        self.assertEqual(confirmed.data["status"], "confirmed")
        self.assertEqual(cancelled.data["status"], "cancelled")
        self.assertEqual(again.status_code, status.HTTP_200_OK)
        self.assertEqual(reopened.status_code, status.HTTP_409_CONFLICT)

        self.client.force_authenticate(self.player)
        rebooked = self.client.post(self.list_url, self._payload(10, 12), format="json")
        self.assertEqual(rebooked.status_code, status.HTTP_201_CREATED, rebooked.data)

    def test_status_change_is_staff_only(self) -> None:
        self.client.force_authenticate(self.player)
        created = self.client.post(self.list_url, self._payload(10, 11), format="json")
        url = reverse("reservation-set-status", args=[created.data["reservation_id"]])

        response = self.client.post(url, {"status": "confirmed"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_bulk_status_and_stats(self) -> None:
        self.client.force_authenticate(self.player)
        ids = [
            self.client.post(self.list_url, self._payload(hour, hour + 1), format="json").data["reservation_id"]
            for hour in (10, 11, 12)
        ]
        self.client.force_authenticate(self.staff)

        bulk = self.client.post(
            reverse("reservation-bulk-status"), {"ids": ids[:2], "status": "confirmed"}, format="json"
        )
        self.client.post(reverse("reservation-set-status", args=[ids[2]]), {"status": "cancelled"}, format="json")
        stats = self.client.get(reverse("reservation-stats"))

        self.assertEqual(bulk.status_code, status.HTTP_200_OK, bulk.data)
        self.assertEqual(bulk.data["updated"], ids[:2])
        self.assertEqual(stats.data["total"], 3)
        self.assertEqual(stats.data["confirmed"], 2)
        self.assertEqual(stats.data["cancelled"], 1)
        self.assertEqual(stats.data["revenue"], 200_000)
        self.assertEqual(stats.data["cancellation_rate"], 33)
