"""Serializers for the reservation API."""

from __future__ import annotations

from django.utils import timezone  # type: ignore

from rest_framework import serializers  # type: ignore

from .domain.entities import ReservationStatus
from .models import Reservation


class GuestContactSerializer(serializers.Serializer):
    """Contact details posted by an anonymous customer."""

    name = serializers.CharField(max_length=150, allow_blank=True)
    email = serializers.CharField(max_length=254, allow_blank=True)
    phone = serializers.CharField(max_length=32, allow_blank=True)


class ReservationCreateSerializer(serializers.Serializer):
    """Reserve request.

    Only the request shape is checked here; the reservation guard owns
    every business rule (hours, duration, lead time, contact details).
    """

    facility = serializers.IntegerField(min_value=1)
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    payment_method = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    guest = GuestContactSerializer(required=False)

    def validate(self, attrs):  # type: ignore
        request = self.context.get("request")
        is_anonymous = request is None or not request.user.is_authenticated
        if is_anonymous and not attrs.get("guest"):
            raise serializers.ValidationError({"guest": "Guest contact details are required."})
        for key in ("start", "end"):
            if timezone.is_naive(attrs[key]):
                attrs[key] = timezone.make_aware(attrs[key])
        return attrs


class ReservationResultSerializer(serializers.Serializer):
    """Answer to a successful reserve request."""

    reservation_id = serializers.IntegerField()
    guest_reference = serializers.CharField(allow_null=True)
    status = serializers.CharField()
    total_price = serializers.IntegerField()


class ReservationSerializer(serializers.ModelSerializer):
    """Detailed reservation representation."""

    facility_id = serializers.ReadOnlyField(source="facility.id")
    facility_name = serializers.ReadOnlyField(source="facility.name")
    user_id = serializers.ReadOnlyField(source="user.id")
    holder_name = serializers.ReadOnlyField()
    duration_hours = serializers.ReadOnlyField()
    is_guest = serializers.ReadOnlyField()

    class Meta:
        model = Reservation
        fields = [
            "id",
            "facility_id",
            "facility_name",
            "user_id",
            "holder_name",
            "is_guest",
            "customer_name",
            "customer_email",
            "customer_phone",
            "guest_reference",
            "start_time",
            "end_time",
            "duration_hours",
            "status",
            "total_price",
            "payment_method",
            "status_changed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class GuestLookupSerializer(serializers.Serializer):
    reference = serializers.CharField(max_length=32)
    email = serializers.CharField(max_length=254)


class StatusChangeSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in ReservationStatus])


class BulkStatusChangeSerializer(StatusChangeSerializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)


class BulkStatusResultSerializer(serializers.Serializer):
    updated = serializers.ListField(child=serializers.IntegerField())
    rejected = serializers.DictField(child=serializers.CharField())


class BookingStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    pending = serializers.IntegerField()
    confirmed = serializers.IntegerField()
    cancelled = serializers.IntegerField()
    revenue = serializers.IntegerField()
    cancellation_rate = serializers.IntegerField()
