"""Admin registration for facility configuration."""

from __future__ import annotations

from django.contrib import admin

from .models import Facility, OperatingHours, PaymentMethod


class OperatingHoursInline(admin.TabularInline):
    model = OperatingHours
    extra = 0


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("name", "price_per_hour", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name",)
    inlines = [OperatingHoursInline]


@admin.register(OperatingHours)
class OperatingHoursAdmin(admin.ModelAdmin):
    list_display = ("day_of_week", "facility", "open_time", "close_time", "is_open")
    list_filter = ("facility", "day_of_week", "is_open")


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ("bank_name", "account_number", "account_holder", "is_active", "is_receiver")
    list_filter = ("is_active", "is_receiver")
