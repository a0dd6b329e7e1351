"""API views for reservations."""

from __future__ import annotations

from drf_spectacular.utils import extend_schema  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .application.command_handlers import (
    ChangeReservationStatusCommand,
    ChangeReservationStatusHandler,
    ReserveSlotCommand,
    ReserveSlotHandler,
)
from .domain.entities import Holder
from .filters import ReservationFilterSet
from .models import Reservation
from .selectors import booking_stats, lookup_guest_booking, reservations_for_facility, reservations_for_holder
from .serializers import (
    BookingStatsSerializer,
    BulkStatusChangeSerializer,
    BulkStatusResultSerializer,
    GuestLookupSerializer,
    ReservationCreateSerializer,
    ReservationResultSerializer,
    ReservationSerializer,
    StatusChangeSerializer,
)


def is_staff(user) -> bool:  # type: ignore
    return bool(user and user.is_authenticated and (user.is_staff or user.is_superuser))


class ReservationViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Reserve slots, look guest bookings up and manage reservation status.

    Staff see and filter every reservation; other authenticated users see
    their own. Anyone may reserve: anonymous callers as guests.
    """

    queryset = Reservation.objects.none()
    serializer_class = ReservationSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = ReservationFilterSet

    def get_permissions(self):  # type: ignore
        if self.action in ("create", "lookup"):
            return [permissions.AllowAny()]
        if self.action in ("set_status", "bulk_status", "stats"):
            return [permissions.IsAdminUser()]
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return ReservationCreateSerializer
        return ReservationSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        if is_staff(user):
            return reservations_for_facility()
        if not user.is_authenticated:
            return Reservation.objects.none()
        return reservations_for_holder(user)

    def filter_queryset(self, queryset):  # type: ignore
        # filters are a staff tool; "my bookings" is always the full list
        if not is_staff(self.request.user):
            return queryset
        return super().filter_queryset(queryset)

    @extend_schema(request=ReservationCreateSerializer, responses={201: ReservationResultSerializer})
    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if request.user.is_authenticated:
            holder = Holder.registered(request.user.pk)
        else:
            guest = data["guest"]
            holder = Holder.anonymous(guest["name"], guest["email"], guest["phone"])

        result = ReserveSlotHandler().handle(
            ReserveSlotCommand(
                facility_id=data["facility"],
                start=data["start"],
                end=data["end"],
                holder=holder,
                payment_method_id=data.get("payment_method"),
            )
        )
        reservation = result.reservation
        payload = {
            "reservation_id": result.reservation_id,
            "status": reservation.status,
            "total_price": reservation.total_price,
        }
        if result.guest_reference:
            payload["guest_reference"] = result.guest_reference
        return Response(payload, status=status.HTTP_201_CREATED)

    @extend_schema(request=GuestLookupSerializer, responses={200: ReservationSerializer})
    @action(detail=False, methods=["post"])
    def lookup(self, request):  # type: ignore
        serializer = GuestLookupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = lookup_guest_booking(**serializer.validated_data)
        return Response(ReservationSerializer(reservation).data)

    @extend_schema(request=StatusChangeSerializer, responses={200: ReservationSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):  # type: ignore
        serializer = StatusChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = self.get_object()
        reservation = ChangeReservationStatusHandler().handle(
            ChangeReservationStatusCommand(
                reservation_id=reservation.pk,
                status=serializer.validated_data["status"],
                actor_id=request.user.pk,
            )
        )
        return Response(ReservationSerializer(reservation).data)

    @extend_schema(request=BulkStatusChangeSerializer, responses={200: BulkStatusResultSerializer})
    @action(detail=False, methods=["post"], url_path="bulk-status")
    def bulk_status(self, request):  # type: ignore
        serializer = BulkStatusChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = ChangeReservationStatusHandler().handle_many(
            serializer.validated_data["ids"],
            serializer.validated_data["status"],
            actor_id=request.user.pk,
        )
        return Response(BulkStatusResultSerializer(result).data)

    @extend_schema(responses={200: BookingStatsSerializer})
    @action(detail=False, methods=["get"])
    def stats(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        return Response(BookingStatsSerializer(booking_stats(queryset)).data)
