# staff/views.py
#
# Staff-only CRUD for availability rules. Every queryset is limited to the
# request tenant; saving a rule retires cached availability (booking.signals).
#
from rest_framework import viewsets

from booking.views import IsStaffOnly, TenantScopedMixin

from .models import CustomScheduleDay, StaffBreak, TimeOff, WorkingHours
from .serializers import (
    CustomScheduleDaySerializer,
    StaffBreakSerializer,
    TimeOffSerializer,
    WorkingHoursSerializer,
)


class _TenantRuleViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    permission_classes = [IsStaffOnly]
    model = None

    def get_queryset(self):
        qs = self.model.objects.filter(staff__tenant=self.tenant).select_related("staff")
        staff_id = self.request.query_params.get("staff")
        if staff_id:
            qs = qs.filter(staff_id=staff_id)
        return qs

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["tenant"] = self.tenant
        return context


class WorkingHoursViewSet(_TenantRuleViewSet):
    model = WorkingHours
    serializer_class = WorkingHoursSerializer


class StaffBreakViewSet(_TenantRuleViewSet):
    model = StaffBreak
    serializer_class = StaffBreakSerializer


class CustomScheduleDayViewSet(_TenantRuleViewSet):
    model = CustomScheduleDay
    serializer_class = CustomScheduleDaySerializer


class TimeOffViewSet(_TenantRuleViewSet):
    model = TimeOff
    serializer_class = TimeOffSerializer
