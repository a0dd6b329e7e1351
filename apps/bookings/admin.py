"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation, SlotAllocation


class SlotAllocationInline(admin.TabularInline):
    model = SlotAllocation
    extra = 0
    can_delete = False
    readonly_fields = ("starts_at",)


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "facility",
        "holder_name",
        "guest_reference",
        "start_time",
        "end_time",
        "status",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "facility", "start_time")
    search_fields = ("guest_reference", "customer_name", "customer_email", "user__username", "facility__name")
    readonly_fields = (
        "facility",
        "user",
        "guest_reference",
        "start_time",
        "end_time",
        "status",
        "total_price",
        "status_changed_at",
        "status_changed_by",
        "created_at",
        "updated_at",
    )
    inlines = [SlotAllocationInline]

    def has_add_permission(self, request):  # type: ignore
        # reservations are created through the guard only
        return False
