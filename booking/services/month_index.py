"""
month_index.py
--------------
"Which dates in this month have zero bookable slots?" for the date picker.

Runs the slot generator once per day of the month (no shortcut), sharing one
ledger load and one engine (rule snapshots) across the days.

Results are cached in Django's cache for SLOTS_CACHE_SECONDS. Cache keys carry
a version number; booking/signals.py bumps the version when an appointment or
an availability rule changes, which retires every key for that tenant.
"""

import logging

from django.conf import settings
from django.core.cache import cache

from ..models import Staff
from .availability_engine import AvailabilityEngine
from .booking_ledger import BookingLedger
from .slot_utils import date_to_range, month_days

logger = logging.getLogger(__name__)


def _version_key(tenant_id) -> str:
    return f"availability:version:{tenant_id}"


def availability_version(tenant_id) -> int:
    return cache.get_or_set(_version_key(tenant_id), 1, timeout=None)


def invalidate_tenant_availability(tenant_id) -> None:
    key = _version_key(tenant_id)
    try:
        cache.incr(key)
    except ValueError:
        # key expired or was never set
        cache.set(key, 2, timeout=None)
    logger.info("Availability cache invalidated for tenant %s", tenant_id)


def _staff_for(tenant, staff=None, service=None):
    if staff is not None:
        if service is not None and not service.eligible_staff().filter(pk=staff.pk).exists():
            return []
        return [staff]
    if service is not None:
        return list(service.eligible_staff())
    return list(Staff.objects.filter(tenant=tenant, active=True).order_by("id"))


def fully_booked_dates(tenant, year: int, month: int, staff=None, service=None, now=None):
    """
    ISO dates in (year, month) on which no slot survives.

    - staff given: that specialist only
    - service given: its shortest variant, across its eligible specialists
    - neither: one slot step, across every active specialist
    Past dates count as fully booked since nothing on them is bookable.
    """
    engine = AvailabilityEngine(tenant, now=now)
    staff_list = _staff_for(tenant, staff=staff, service=service)
    variant = service.shortest_variant() if service is not None else None
    occupancy = engine.occupancy_for(variant=variant)

    days = list(month_days(year, month))
    if not staff_list:
        return [d.isoformat() for d in days]

    range_start, _ = date_to_range(days[0], engine.tz)
    _, range_end = date_to_range(days[-1], engine.tz)
    ledger = BookingLedger(tenant, [s.pk for s in staff_list], range_start, range_end)

    return [
        day.isoformat()
        for day in days
        if not engine.find_available_slots(day, occupancy, staff_list, ledger=ledger)
    ]


def cached_fully_booked_dates(tenant, year: int, month: int, staff=None, service=None):
    version = availability_version(tenant.pk)
    key = (
        f"availability:fully-booked:{tenant.pk}:v{version}:{year}-{month:02d}:"
        f"{staff.pk if staff else '-'}:{service.pk if service else '-'}"
    )
    result = cache.get(key)
    if result is None:
        result = fully_booked_dates(tenant, year, month, staff=staff, service=service)
        cache.set(key, result, timeout=settings.SLOTS_CACHE_SECONDS)
    return result
