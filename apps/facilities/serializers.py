"""Serializers for facility configuration."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Facility, PaymentMethod


class FacilitySerializer(serializers.ModelSerializer):
    """Public facility card."""

    class Meta:
        model = Facility
        fields = ["id", "name", "description", "image_url", "price_per_hour", "is_active"]
        read_only_fields = fields


class PaymentMethodSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentMethod
        fields = ["id", "bank_name", "account_number", "account_holder"]
        read_only_fields = fields


class SlotsQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class DurationsQuerySerializer(serializers.Serializer):
    start = serializers.DateTimeField()


class SlotSerializer(serializers.Serializer):
    time = serializers.CharField()
    available = serializers.BooleanField()
