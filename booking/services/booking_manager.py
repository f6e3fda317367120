"""
booking_manager.py
------------------
Coordinates appointment creation and cancellation.

Slot listings are advisory and can be stale by the time a customer submits,
so creation re-validates inside a transaction:
- the specialist row is locked (select_for_update) to serialise writers
- the interval must still sit inside open hours and clear the ledger
- a slot lock held by another customer blocks the booking

Without an explicit specialist, the first eligible specialist (by id) who is
free at that time is assigned.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from ..models import Appointment, Staff
from .availability_engine import AvailabilityEngine
from .slot_locks import SlotLockService

logger = logging.getLogger(__name__)


class SlotUnavailableError(ValueError):
    """The requested interval is no longer free."""


class CancellationNotAllowed(ValueError):
    """Cancellation refused by policy (already cancelled, inside cutoff)."""


class BookingManager:
    def __init__(self, locks=None):
        self.locks = locks or SlotLockService()

    def _locked_by_other(self, tenant, staff, start_time, tz, lock_id):
        local = start_time.astimezone(tz)
        lock = self.locks.holder(tenant.pk, staff.pk, local.date().isoformat(), local.strftime("%H:%M"))
        return lock is not None and lock["lock_id"] != lock_id

    @transaction.atomic
    def create_appointment(
        self,
        tenant,
        service,
        variant,
        start_time,
        client_name,
        staff=None,
        client_email="",
        client_phone="",
        total_duration=None,
        status=Appointment.CONFIRMED,
        lock_id=None,
        notes="",
    ):
        """
        Create an appointment after checking for overlap.

        Args:
            tenant, service, variant: what is being booked (variant may be None
                when total_duration is given)
            start_time: aware datetime when the service starts
            staff: Staff instance, or None for "any available"

        Raises:
            SlotUnavailableError: nobody eligible is free for that interval.
        """
        engine = AvailabilityEngine(tenant)
        occupancy = engine.occupancy_for(variant=variant, total_duration=total_duration)

        if staff is not None:
            candidates = [staff]
        else:
            candidates = list(service.eligible_staff())

        # Serialise concurrent writers per specialist.
        locked_rows = {
            s.pk: s
            for s in Staff.objects.select_for_update().filter(pk__in=[c.pk for c in candidates])
        }

        chosen = None
        for candidate in candidates:
            row = locked_rows.get(candidate.pk)
            if row is None:
                continue
            if self._locked_by_other(tenant, row, start_time, engine.tz, lock_id):
                continue
            if engine.is_slot_available_for_staff(row, start_time, occupancy):
                chosen = row
                break

        if chosen is None:
            logger.info("Rejected booking for %s at %s: slot unavailable", service, start_time)
            raise SlotUnavailableError("Selected time is no longer available.")

        appointment = Appointment.objects.create(
            tenant=tenant,
            staff=chosen,
            service=service,
            variant_name=variant.name if variant else "",
            client_name=client_name,
            client_email=client_email,
            client_phone=client_phone,
            start_time=start_time,
            duration_minutes=occupancy.duration,
            buffer_before_minutes=occupancy.before,
            buffer_after_minutes=occupancy.after,
            status=status,
            notes=notes,
        )

        if lock_id:
            local = start_time.astimezone(engine.tz)
            self.locks.release(
                tenant.pk, chosen.pk, local.date().isoformat(), local.strftime("%H:%M"), lock_id
            )

        logger.info("Appointment %s created for staff %s at %s", appointment.pk, chosen.pk, start_time)
        return appointment

    @transaction.atomic
    def cancel_appointment(
        self,
        appointment,
        status=Appointment.CANCELLED_BY_USER,
        cutoff_minutes=None,
        force=False,
    ):
        """
        Cancel an occupying appointment if outside the cutoff window.
        Admins pass force=True to skip the cutoff.
        """
        if status not in Appointment.CANCELLED_STATUSES:
            raise ValueError(f"{status!r} is not a cancellation status.")
        if not appointment.is_occupying:
            raise CancellationNotAllowed("This appointment cannot be cancelled.")

        if cutoff_minutes is None:
            cutoff_minutes = settings.CANCELLATION_CUTOFF_MINUTES
        now = timezone.now()
        if not force and appointment.start_time - now <= timedelta(minutes=cutoff_minutes):
            raise CancellationNotAllowed(
                f"Cannot cancel within {cutoff_minutes} minutes of the appointment start."
            )

        appointment.status = status
        appointment.cancellation_time = now
        appointment.save(update_fields=["status", "cancellation_time"])
        logger.info("Appointment %s cancelled (%s)", appointment.pk, status)
        return appointment
