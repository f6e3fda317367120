from rest_framework import serializers
from django.utils import timezone

from .models import Appointment, Service, ServiceVariant, Staff
from .services.slot_utils import parse_iso_date


class ServiceVariantSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceVariant
        fields = ["id", "name", "duration_minutes", "price", "buffer_before_minutes", "buffer_after_minutes"]


class ServiceSerializer(serializers.ModelSerializer):
    variants = ServiceVariantSerializer(many=True, read_only=True)
    staff = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = Service
        fields = ["id", "name", "description", "active", "staff", "variants"]


class StaffSerializer(serializers.ModelSerializer):
    class Meta:
        model = Staff
        fields = ["id", "name", "email", "role", "active"]


class _IsoDateField(serializers.CharField):
    """Accepts 'YYYY-MM-DD' (or an ISO datetime, trimmed to the date)."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        try:
            return parse_iso_date(value)
        except ValueError:
            raise serializers.ValidationError("Invalid date format. Use YYYY-MM-DD.")


class SlotQuerySerializer(serializers.Serializer):
    """
    Query string of GET /api/slots/. Either variantName or totalDuration must
    resolve the duration.
    """
    serviceId = serializers.IntegerField()
    date = _IsoDateField()
    variantName = serializers.CharField(required=False, allow_blank=True)
    specialistId = serializers.IntegerField(required=False)
    totalDuration = serializers.IntegerField(required=False, min_value=1)
    any = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if not attrs.get("variantName") and not attrs.get("totalDuration"):
            raise serializers.ValidationError("Provide 'variantName' or 'totalDuration'.")
        return attrs


class FullyBookedQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1970, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)
    specialistId = serializers.IntegerField(required=False)
    serviceId = serializers.IntegerField(required=False)


class AppointmentSerializer(serializers.ModelSerializer):
    end_time = serializers.DateTimeField(read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id",
            "staff",
            "service",
            "variant_name",
            "client_name",
            "client_email",
            "client_phone",
            "start_time",
            "end_time",
            "duration_minutes",
            "status",
            "notes",
            "created_at",
            "cancellation_time",
        ]
        read_only_fields = fields


class AppointmentCreateSerializer(serializers.Serializer):
    serviceId = serializers.IntegerField()
    variantName = serializers.CharField(required=False, allow_blank=True)
    totalDuration = serializers.IntegerField(required=False, min_value=1)
    specialistId = serializers.IntegerField(required=False, allow_null=True)
    start = serializers.DateTimeField()
    clientName = serializers.CharField(max_length=200)
    clientEmail = serializers.EmailField(required=False, allow_blank=True)
    clientPhone = serializers.RegexField(r"^\+?\d{7,15}$", required=False, allow_blank=True)
    lockId = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        # prevent past dates
        if attrs["start"] <= timezone.now():
            raise serializers.ValidationError("Start time must be in the future.")
        if not attrs.get("variantName") and not attrs.get("totalDuration"):
            raise serializers.ValidationError("Provide 'variantName' or 'totalDuration'.")
        return attrs


class SlotLockSerializer(serializers.Serializer):
    specialistId = serializers.IntegerField()
    date = _IsoDateField()
    startTime = serializers.RegexField(r"^([01]\d|2[0-3]):[0-5]\d$")
    lockId = serializers.CharField(required=False)
    duration = serializers.IntegerField(required=False, min_value=1)
    ttl = serializers.IntegerField(required=False, min_value=1, help_text="Seconds")


class AppointmentCancelSerializer(serializers.Serializer):
    """Guests prove ownership with the email or phone used when booking."""
    clientEmail = serializers.EmailField(required=False, allow_blank=True)
    clientPhone = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get("clientEmail") and not attrs.get("clientPhone"):
            raise serializers.ValidationError("Provide 'clientEmail' or 'clientPhone'.")
        return attrs

    def matches(self, appointment):
        email = self.validated_data.get("clientEmail", "").strip().lower()
        phone = self.validated_data.get("clientPhone", "").strip()
        if email and appointment.client_email and email == appointment.client_email.strip().lower():
            return True
        return bool(phone and appointment.client_phone and phone == appointment.client_phone.strip())
