from rest_framework import serializers

from booking.models import Staff

from .models import CustomScheduleDay, StaffBreak, TimeOff, WorkingHours


class TenantStaffField(serializers.PrimaryKeyRelatedField):
    """Only specialists of the request tenant may be referenced."""

    def get_queryset(self):
        tenant = self.context.get("tenant")
        if tenant is None:
            return Staff.objects.none()
        return Staff.objects.filter(tenant=tenant)


class _WindowValidationMixin:
    def validate(self, attrs):
        start = attrs.get("start", getattr(self.instance, "start", None))
        end = attrs.get("end", getattr(self.instance, "end", None))
        if start and end and start >= end:
            raise serializers.ValidationError("End time must be after start time.")
        return attrs


class WorkingHoursSerializer(_WindowValidationMixin, serializers.ModelSerializer):
    staff = TenantStaffField()

    class Meta:
        model = WorkingHours
        fields = ["id", "staff", "day_of_week", "start", "end"]


class StaffBreakSerializer(_WindowValidationMixin, serializers.ModelSerializer):
    staff = TenantStaffField()

    class Meta:
        model = StaffBreak
        fields = ["id", "staff", "day_of_week", "start", "end"]


class CustomScheduleDaySerializer(serializers.ModelSerializer):
    staff = TenantStaffField()

    class Meta:
        model = CustomScheduleDay
        fields = ["id", "staff", "date", "intervals"]


class TimeOffSerializer(serializers.ModelSerializer):
    staff = TenantStaffField()

    class Meta:
        model = TimeOff
        fields = ["id", "staff", "start_date", "end_date", "reason"]

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError("Time off cannot end before it starts.")
        return attrs
