# booking/urls.py
#
# Purpose:
# - Expose the booking REST API via DRF router.
#
# Routes (all under /api/, tenant from X-Tenant-Slug or ?tenant=):
#     GET  services/                   service catalogue with variants
#     GET  staff-members/              active specialists
#     GET  slots/                      bookable slots for one date
#     GET  slots/fully-booked/         dates with no slot in a month
#     POST appointments/               book (409 when the slot is gone)
#     POST appointments/{id}/cancel/   cancel within policy
#     POST locks/{acquire,verify,refresh,release}/

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AppointmentViewSet,
    ServiceViewSet,
    SlotLockViewSet,
    SlotViewSet,
    StaffViewSet,
)

router = DefaultRouter()
router.register(r"services", ServiceViewSet, basename="service")
router.register(r"staff-members", StaffViewSet, basename="staff-member")
router.register(r"slots", SlotViewSet, basename="slot")
router.register(r"appointments", AppointmentViewSet, basename="appointment")
router.register(r"locks", SlotLockViewSet, basename="slot-lock")

urlpatterns = [
    path("", include(router.urls)),
]
