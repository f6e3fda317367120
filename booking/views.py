# booking/views.py
#
# Purpose:
# - Catalogue APIs (services, specialists) for the booking site.
# - Slot availability (GET /api/slots/) and fully-booked month index
#   (GET /api/slots/fully-booked/).
# - Appointment creation with write-time conflict check, and cancellation.
# - Slot locks held during checkout (POST /api/locks/<action>/).
#
# Every endpoint is scoped to the tenant named by the X-Tenant-Slug header
# (or ?tenant=). Objects from other tenants resolve to 404.
#
# Permissions:
# - Catalogue writes and appointment listing are staff-only.
# - Slot queries, locks and appointment creation are public (guest checkout).
# - Guests cancel by repeating the email or phone they booked with.
#
from django.shortcuts import get_object_or_404

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import BasePermission
from rest_framework.response import Response

from configmgr.tenancy import resolve_tenant

from .models import Appointment, Service, ServiceVariant, Staff
from .serializers import (
    AppointmentCancelSerializer,
    AppointmentCreateSerializer,
    AppointmentSerializer,
    FullyBookedQuerySerializer,
    ServiceSerializer,
    SlotLockSerializer,
    SlotQuerySerializer,
    StaffSerializer,
)
from .services.availability_engine import AvailabilityEngine
from .services.booking_manager import BookingManager, CancellationNotAllowed, SlotUnavailableError
from .services.month_index import cached_fully_booked_dates
from .services.slot_locks import SlotLockService

NO_SLOTS_MESSAGE = "No available slots for this date"


# -------------------- Permissions --------------------
class IsStaffOrReadOnly(BasePermission):
    """
    Read: anyone
    Write: staff only
    """
    def has_permission(self, request, view):
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return bool(request.user and request.user.is_staff)


class IsStaffOnly(BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_staff)


class TenantScopedMixin:
    """Resolves the request tenant before the handler runs (unknown -> 404)."""
    tenant = None

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.tenant = resolve_tenant(request)


# -------------------- ViewSets --------------------
class ServiceViewSet(TenantScopedMixin, viewsets.ReadOnlyModelViewSet):
    """
    Service catalog:
    - Anyone can list active services with their variants.
    - Staff users also see inactive services.
    """
    serializer_class = ServiceSerializer
    permission_classes = [IsStaffOrReadOnly]

    def get_queryset(self):
        user = getattr(self.request, "user", None)
        qs = Service.objects.filter(tenant=self.tenant).prefetch_related("variants", "staff").order_by("id")
        if user and user.is_authenticated and user.is_staff:
            return qs
        return qs.filter(active=True)


class StaffViewSet(TenantScopedMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = StaffSerializer

    def get_queryset(self):
        return Staff.objects.filter(tenant=self.tenant, active=True).order_by("id")


class SlotViewSet(TenantScopedMixin, viewsets.ViewSet):
    """
    GET /api/slots/?serviceId=&variantName=&date=YYYY-MM-DD[&specialistId=][&totalDuration=][&any=true]
    GET /api/slots/fully-booked/?year=&month=[&specialistId=][&serviceId=]
    """

    def _resolve_staff(self, service, specialist_id):
        staff = get_object_or_404(Staff, pk=specialist_id, tenant=self.tenant, active=True)
        if not service.eligible_staff().filter(pk=staff.pk).exists():
            return None
        return staff

    def list(self, request):
        query = SlotQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        service = get_object_or_404(Service, pk=params["serviceId"], tenant=self.tenant, active=True)

        variant = None
        if params.get("variantName"):
            variant = ServiceVariant.objects.filter(service=service, name=params["variantName"]).first()
            if variant is None and not params.get("totalDuration"):
                return Response(
                    {"detail": "Unknown variant for this service."},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        if params.get("specialistId") and not params.get("any"):
            staff = self._resolve_staff(service, params["specialistId"])
            if staff is None:
                return Response(
                    {"detail": "This specialist does not offer the selected service."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            staff_list = [staff]
        else:
            staff_list = list(service.eligible_staff())

        engine = AvailabilityEngine(self.tenant)
        occupancy = engine.occupancy_for(variant=variant, total_duration=params.get("totalDuration"))
        slots = engine.find_available_slots(params["date"], occupancy, staff_list)

        include_staff = len(staff_list) > 1
        data = {"slots": [slot.as_dict(include_staff=include_staff) for slot in slots]}
        if not slots:
            data["message"] = NO_SLOTS_MESSAGE
        return Response(data)

    @action(detail=False, methods=["get"], url_path="fully-booked")
    def fully_booked(self, request):
        query = FullyBookedQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        staff = service = None
        if params.get("specialistId"):
            staff = get_object_or_404(Staff, pk=params["specialistId"], tenant=self.tenant, active=True)
        if params.get("serviceId"):
            service = get_object_or_404(Service, pk=params["serviceId"], tenant=self.tenant, active=True)

        dates = cached_fully_booked_dates(
            self.tenant, params["year"], params["month"], staff=staff, service=service
        )
        return Response({"fullyBooked": dates})


class AppointmentViewSet(
    TenantScopedMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Endpoints:
    - GET    /api/appointments/              list (staff only)
    - POST   /api/appointments/              create; 409 when the slot is gone
    - POST   /api/appointments/{id}/cancel/  cancel with cutoff (staff may force)
    """
    serializer_class = AppointmentSerializer
    manager = BookingManager()

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [IsStaffOnly()]
        return super().get_permissions()

    def get_queryset(self):
        return (
            Appointment.objects.filter(tenant=self.tenant)
            .select_related("service", "staff")
            .order_by("-start_time")
        )

    def create(self, request, *args, **kwargs):
        serializer = AppointmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        service = get_object_or_404(Service, pk=data["serviceId"], tenant=self.tenant, active=True)
        variant = None
        if data.get("variantName"):
            variant = get_object_or_404(ServiceVariant, service=service, name=data["variantName"])

        staff = None
        if data.get("specialistId"):
            staff = get_object_or_404(Staff, pk=data["specialistId"], tenant=self.tenant, active=True)
            if not service.eligible_staff().filter(pk=staff.pk).exists():
                return Response(
                    {"detail": "This specialist does not offer the selected service."},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        try:
            appointment = self.manager.create_appointment(
                tenant=self.tenant,
                service=service,
                variant=variant,
                start_time=data["start"],
                staff=staff,
                client_name=data["clientName"],
                client_email=data.get("clientEmail", ""),
                client_phone=data.get("clientPhone", ""),
                total_duration=data.get("totalDuration"),
                lock_id=data.get("lockId") or None,
                notes=data.get("notes", ""),
            )
        except SlotUnavailableError as e:
            return Response({"detail": str(e)}, status=status.HTTP_409_CONFLICT)

        out = AppointmentSerializer(appointment)
        return Response(out.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        """
        Cancel an appointment. Respects the cutoff unless a staff user cancels.
        Guests must send the clientEmail or clientPhone used when booking; a
        mismatch answers 404 like an unknown id.
        """
        appointment = get_object_or_404(Appointment, pk=pk, tenant=self.tenant)
        is_admin = bool(request.user and request.user.is_staff)
        if not is_admin:
            owner = AppointmentCancelSerializer(data=request.data)
            owner.is_valid(raise_exception=True)
            if not owner.matches(appointment):
                return Response({"detail": "Not found."}, status=status.HTTP_404_NOT_FOUND)
        try:
            self.manager.cancel_appointment(
                appointment,
                status=Appointment.CANCELLED_BY_ADMIN if is_admin else Appointment.CANCELLED_BY_USER,
                force=is_admin,
            )
        except CancellationNotAllowed as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"detail": "Appointment cancelled."}, status=status.HTTP_200_OK)


class SlotLockViewSet(TenantScopedMixin, viewsets.ViewSet):
    """
    POST /api/locks/acquire/  -> 200 {locked, lockId} or 409 {locked: false, reason}
    POST /api/locks/verify/   -> 200 {valid} or 409
    POST /api/locks/refresh/  -> 200 {refreshed} or 404
    POST /api/locks/release/  -> 200 {released} or 404
    """
    locks = SlotLockService()

    def _params(self, request, require_lock_id=True):
        serializer = SlotLockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if require_lock_id and not data.get("lockId"):
            return None, Response({"detail": "lockId is required."}, status=status.HTTP_400_BAD_REQUEST)
        staff = get_object_or_404(Staff, pk=data["specialistId"], tenant=self.tenant)
        return (self.tenant.pk, staff.pk, data["date"].isoformat(), data["startTime"]), data

    @action(detail=False, methods=["post"])
    def acquire(self, request):
        key, data = self._params(request, require_lock_id=False)
        result = self.locks.acquire(*key, duration=data.get("duration"), ttl=data.get("ttl"))
        return Response(result, status=status.HTTP_200_OK if result["locked"] else status.HTTP_409_CONFLICT)

    @action(detail=False, methods=["post"])
    def verify(self, request):
        key, data = self._params(request)
        if key is None:
            return data
        result = self.locks.verify(*key, lock_id=data["lockId"])
        return Response(result, status=status.HTTP_200_OK if result["valid"] else status.HTTP_409_CONFLICT)

    @action(detail=False, methods=["post"])
    def refresh(self, request):
        key, data = self._params(request)
        if key is None:
            return data
        result = self.locks.refresh(*key, lock_id=data["lockId"], ttl=data.get("ttl"))
        return Response(result, status=status.HTTP_200_OK if result["refreshed"] else status.HTTP_404_NOT_FOUND)

    @action(detail=False, methods=["post"])
    def release(self, request):
        key, data = self._params(request)
        if key is None:
            return data
        result = self.locks.release(*key, lock_id=data["lockId"])
        return Response(result, status=status.HTTP_200_OK if result["released"] else status.HTTP_404_NOT_FOUND)
