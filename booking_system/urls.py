# booking_system/urls.py
#
# Project URL router.
# - /api/        booking API (catalogue, slots, appointments, locks)
# - /api/staff/  staff-only availability rule CRUD
#
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("booking.urls")),
    path("api/staff/", include("staff.urls")),
]
