"""Read-only API for facilities, their availability and payment methods."""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.services import get_durations, get_slots

from .models import Facility, PaymentMethod
from .serializers import (
    DurationsQuerySerializer,
    FacilitySerializer,
    PaymentMethodSerializer,
    SlotSerializer,
    SlotsQuerySerializer,
)
from .services import OperatingHoursNotConfigured


class FacilityViewSet(viewsets.ReadOnlyModelViewSet):
    """Active facilities plus their hourly slots and bookable durations."""

    queryset = Facility.objects.filter(is_active=True)
    serializer_class = FacilitySerializer
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        parameters=[OpenApiParameter("date", str, description="YYYY-MM-DD", required=True)],
        responses={200: SlotSerializer(many=True)},
    )
    @action(detail=True, methods=["get"])
    def slots(self, request, pk=None):  # type: ignore
        query = SlotsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        facility = self.get_object()
        try:
            slots = get_slots(facility.pk, query.validated_data["date"])
        except OperatingHoursNotConfigured:
            return Response({"slots": [], "detail": "operating_hours_not_configured"})
        return Response({"slots": [slot.as_dict() for slot in slots]})

    @extend_schema(
        parameters=[OpenApiParameter("start", str, description="ISO 8601 datetime", required=True)],
        responses={200: {"type": "object"}},
    )
    @action(detail=True, methods=["get"])
    def durations(self, request, pk=None):  # type: ignore
        query = DurationsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        facility = self.get_object()
        start = query.validated_data["start"]
        if timezone.is_naive(start):
            start = timezone.make_aware(start)
        try:
            durations = get_durations(facility.pk, start)
        except OperatingHoursNotConfigured:
            return Response({"durations": [], "detail": "operating_hours_not_configured"})
        return Response({"durations": durations})


class PaymentMethodViewSet(viewsets.ReadOnlyModelViewSet):
    """Bank accounts customers can pay into."""

    queryset = PaymentMethod.objects.filter(is_active=True, is_receiver=True)
    serializer_class = PaymentMethodSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = None
