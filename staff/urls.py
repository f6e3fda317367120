from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import CustomScheduleDayViewSet, StaffBreakViewSet, TimeOffViewSet, WorkingHoursViewSet

router = DefaultRouter()
router.register(r"working-hours", WorkingHoursViewSet, basename="working-hours")
router.register(r"breaks", StaffBreakViewSet, basename="staff-break")
router.register(r"custom-schedule", CustomScheduleDayViewSet, basename="custom-schedule")
router.register(r"time-off", TimeOffViewSet, basename="time-off")

urlpatterns = [path("", include(router.urls))]
