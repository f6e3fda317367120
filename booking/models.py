# booking/models.py
#
# Purpose:
# - Core domain models for the booking site.
#
# Design highlights:
# - Everything is tenant-scoped; a Staff or Service never crosses salons.
# - Service: catalogue entry; bookable through one or more ServiceVariant rows
#   (each variant carries its own duration and buffers).
# - Staff: a specialist; Service.staff lists who may perform a service.
# - Appointment:
#   • start_time is the moment the service itself starts (aware datetime)
#   • duration_minutes is the service time; buffer_* widen the occupied window
#   • only OCCUPYING_STATUSES block new slots
#
# Notes for developers:
# - Staff working hours, breaks, custom schedules and time off live in the
#   staff app (staff.models) to keep the rule store separate from bookings.
#

from datetime import timedelta

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from configmgr.models import Tenant


# -------------------------
# Staff member / Specialist
# -------------------------
class Staff(models.Model):
    """
    A specialist who can be assigned to appointments.
    """
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="staff")
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    role = models.CharField(max_length=100, blank=True)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name


# -------------------------
# Service catalog item
# -------------------------
class Service(models.Model):
    """
    A service offered by the salon.

    Rules:
    - at least one variant is needed before the service can be booked
    - active controls visibility and bookability
    - staff lists eligible specialists; empty means every active specialist
    """
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="services")
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    active = models.BooleanField(default=True)
    staff = models.ManyToManyField(Staff, blank=True, related_name="services")

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name

    def eligible_staff(self):
        # No linked staff means any active specialist of the tenant.
        if not self.staff.exists():
            return Staff.objects.filter(tenant=self.tenant, active=True).order_by("id")
        return self.staff.filter(active=True).order_by("id")

    def shortest_variant(self):
        return self.variants.order_by("duration_minutes", "id").first()


class ServiceVariant(models.Model):
    """
    A bookable length/price option of a service (e.g., "Short hair", "Long hair").
    """
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="variants")
    name = models.CharField(max_length=120)
    duration_minutes = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    buffer_before_minutes = models.PositiveIntegerField(default=0)
    buffer_after_minutes = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["service_id", "id"]
        constraints = [
            models.UniqueConstraint(fields=["service", "name"], name="uniq_variant_name_per_service"),
        ]

    def __str__(self):
        return f"{self.service.name} - {self.name} ({self.duration_minutes} min)"


# -------------------------
# Appointment record
# -------------------------
class AppointmentQuerySet(models.QuerySet):
    def occupying(self):
        return self.filter(status__in=Appointment.OCCUPYING_STATUSES)


class Appointment(models.Model):
    """
    A booking on a specialist's calendar.

    The occupied window is [start_time - buffer_before, start_time + duration + buffer_after).
    """
    CONFIRMED = "confirmed"
    RESERVED_UNPAID = "reserved_unpaid"
    PENDING = "pending"
    CANCELLED_BY_USER = "cancelled_by_user"
    CANCELLED_BY_ADMIN = "cancelled_by_admin"
    CANCELLED_FULL_REFUND = "cancelled_full_refund"
    CANCELLED_PARTIAL_REFUND = "cancelled_partial_refund"
    CANCELLED_NO_REFUND = "cancelled_no_refund"
    NO_SHOW = "no_show"
    COMPLETED = "completed"

    STATUS_CHOICES = [
        (CONFIRMED, "Confirmed"),
        (RESERVED_UNPAID, "Reserved (unpaid)"),
        (PENDING, "Pending"),
        (CANCELLED_BY_USER, "Cancelled by client"),
        (CANCELLED_BY_ADMIN, "Cancelled by salon"),
        (CANCELLED_FULL_REFUND, "Cancelled (full refund)"),
        (CANCELLED_PARTIAL_REFUND, "Cancelled (partial refund)"),
        (CANCELLED_NO_REFUND, "Cancelled (no refund)"),
        (NO_SHOW, "No show"),
        (COMPLETED, "Completed"),
    ]
    OCCUPYING_STATUSES = (CONFIRMED, RESERVED_UNPAID, PENDING)
    CANCELLED_STATUSES = (
        CANCELLED_BY_USER,
        CANCELLED_BY_ADMIN,
        CANCELLED_FULL_REFUND,
        CANCELLED_PARTIAL_REFUND,
        CANCELLED_NO_REFUND,
    )

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="appointments")
    staff = models.ForeignKey(Staff, on_delete=models.PROTECT, related_name="appointments")
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name="appointments")
    variant_name = models.CharField(max_length=120, blank=True)
    client_name = models.CharField(max_length=200)
    client_email = models.EmailField(blank=True)
    client_phone = models.CharField(max_length=20, blank=True)
    start_time = models.DateTimeField()
    duration_minutes = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    buffer_before_minutes = models.PositiveIntegerField(default=0)
    buffer_after_minutes = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=CONFIRMED,
        help_text="Appointment lifecycle status",
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    cancellation_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the appointment was cancelled (if applicable).",
    )

    objects = AppointmentQuerySet.as_manager()

    class Meta:
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["tenant", "staff", "start_time"], name="appt_tenant_staff_start"),
        ]

    def __str__(self):
        return f"{self.client_name} → {self.service.name} on {self.start_time}"

    def clean(self):
        if self.staff_id and self.tenant_id and self.staff.tenant_id != self.tenant_id:
            raise ValidationError("Staff member belongs to another tenant.")
        if self.service_id and self.tenant_id and self.service.tenant_id != self.tenant_id:
            raise ValidationError("Service belongs to another tenant.")

    @property
    def end_time(self):
        return self.start_time + timedelta(minutes=self.duration_minutes)

    @property
    def occupied_start(self):
        return self.start_time - timedelta(minutes=self.buffer_before_minutes)

    @property
    def occupied_end(self):
        return self.end_time + timedelta(minutes=self.buffer_after_minutes)

    @property
    def is_occupying(self):
        return self.status in self.OCCUPYING_STATUSES
