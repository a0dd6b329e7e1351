"""FilterSet for the staff reservation listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Reservation
from .services import local_day_span


class ReservationFilterSet(django_filters.FilterSet):
    """Facility, status, local start-date range and free-text search."""

    facility = django_filters.NumberFilter(field_name="facility_id", lookup_expr="exact")
    status = django_filters.ChoiceFilter(choices=Reservation.Status.choices)
    date_from = django_filters.DateFilter(method="filter_date_from")
    date_to = django_filters.DateFilter(method="filter_date_to")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Reservation
        fields = ["facility", "status"]

    def filter_date_from(self, queryset, name, value):  # type: ignore
        span = local_day_span(value, timezone.get_current_timezone())
        return queryset.filter(start_time__gte=span.start)

    def filter_date_to(self, queryset, name, value):  # type: ignore
        span = local_day_span(value, timezone.get_current_timezone())
        return queryset.filter(start_time__lt=span.end)

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(customer_name__icontains=value)
            | Q(customer_email__icontains=value)
            | Q(guest_reference__iexact=value)
            | Q(user__username__icontains=value)
            | Q(user__email__icontains=value)
            | Q(facility__name__icontains=value)
        )
