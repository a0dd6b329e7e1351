"""URL routing for facilities."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import FacilityViewSet, PaymentMethodViewSet

router = SimpleRouter()
router.register(r"payment-methods", PaymentMethodViewSet, basename="payment-method")
router.register(r"", FacilityViewSet, basename="facility")

urlpatterns = [
    path("", include(router.urls)),
]
