"""
availability_engine.py
----------------------
Computes bookable slots for (specialist, service duration, date) by checking
candidate starts against:
1) the specialist's open intervals from the rule store (working hours,
   custom schedule, time off, breaks), and
2) occupying appointments from the booking ledger (double-booking prevention).

Candidates are generated in wall-clock minutes in the tenant timezone, so a
"09:00" start stays 09:00 on both sides of a DST change. Conflicts are then
checked on absolute instants.

Overlap is half-open everywhere:
    existing_start < new_end AND new_start < existing_end
so a slot ending exactly when a break or booking starts is allowed.

The engine is read-only and advisory. The write path (BookingManager)
re-validates with is_slot_available_for_staff inside a transaction.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone

from django.utils import timezone

from configmgr.scheduling import get_scheduling_settings
from staff.rule_store import day_schedule, load_staff_rules

from ..models import Staff
from .booking_ledger import BookingLedger
from .slot_utils import (
    MINUTES_PER_DAY,
    add_minutes,
    candidate_starts,
    date_to_range,
    intervals_overlap,
    localize,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Occupancy:
    """
    How long a new booking holds the specialist.

    duration: service minutes (slot end = start + duration)
    before/after: buffers around the service; 'after' includes the tenant buffer
    """
    duration: int
    before: int = 0
    after: int = 0

    @property
    def total(self) -> int:
        return self.before + self.duration + self.after


@dataclass
class Slot:
    start: datetime
    end: datetime
    staff_ids: list = field(default_factory=list)

    def as_dict(self, include_staff: bool = True) -> dict:
        data = {"startISO": self.start.isoformat(), "endISO": self.end.isoformat()}
        if include_staff:
            data["staffIds"] = list(self.staff_ids)
        return data


def generate_day_slots(schedule, day, tz, occupancy, step, busy=(), not_before=None):
    """
    Ordered candidate start instants for one specialist on one local date.

    schedule:   DaySchedule from the rule store
    busy:       occupied (start, end) instants from the ledger
    not_before: drop starts at or before this instant (past times today)
    """
    if step <= 0 or occupancy.duration <= 0:
        return []

    starts = set()
    for open_start, open_end in schedule.open:
        for window in candidate_starts(open_start, open_end, step, occupancy.total):
            window_end = window + occupancy.total
            if any(intervals_overlap(window, window_end, b0, b1) for b0, b1 in schedule.breaks):
                continue

            occupied_start = localize(day, window, tz)
            occupied_end = add_minutes(occupied_start, occupancy.total)
            if any(intervals_overlap(occupied_start, occupied_end, s, e) for s, e in busy):
                continue

            start = add_minutes(occupied_start, occupancy.before)
            if not_before is not None and start <= not_before:
                continue
            starts.add(start.astimezone(dt_timezone.utc))

    return [start.astimezone(tz) for start in sorted(starts)]


class AvailabilityEngine:
    def __init__(self, tenant, scheduling=None, now=None):
        self.tenant = tenant
        self.scheduling = scheduling or get_scheduling_settings(tenant)
        self.now = now
        self._rules = {}

    @property
    def tz(self):
        return self.scheduling.tz

    def _is_valid_staff(self, staff) -> bool:
        return isinstance(staff, Staff) and staff.tenant_id == self.tenant.pk

    def _current_time(self):
        return self.now if self.now is not None else timezone.now()

    def rules_for(self, staff):
        if staff.pk not in self._rules:
            self._rules[staff.pk] = load_staff_rules(staff)
        return self._rules[staff.pk]

    def occupancy_for(self, variant=None, total_duration=None) -> Occupancy:
        """
        Occupancy for a variant, or for an explicit total duration
        (multi-service bookings). With neither, one slot step is assumed.
        """
        before = variant.buffer_before_minutes if variant else 0
        after = (variant.buffer_after_minutes if variant else 0) + self.scheduling.buffer_minutes
        if total_duration:
            duration = int(total_duration)
        elif variant is not None:
            duration = variant.duration_minutes
        else:
            duration = self.scheduling.slot_step_minutes
        return Occupancy(duration=duration, before=before, after=after)

    def staff_day_slots(self, staff, day, occupancy, ledger=None):
        if not self._is_valid_staff(staff):
            return []

        schedule = day_schedule(self.rules_for(staff), day)
        if schedule.is_closed:
            return []

        day_start, day_end = date_to_range(day, self.tz)
        if ledger is None:
            ledger = BookingLedger(self.tenant, [staff.pk], day_start, day_end)
        busy = ledger.occupied(staff.pk, day_start, day_end)

        return generate_day_slots(
            schedule,
            day,
            self.tz,
            occupancy,
            self.scheduling.slot_step_minutes,
            busy=busy,
            not_before=self._current_time(),
        )

    def find_available_slots(self, day, occupancy, staff_list, ledger=None):
        """
        Slots for one date across 'staff_list'. With several specialists this
        is "any available": the union of their starts, each annotated with the
        specialists who can take it.
        """
        staff_list = [s for s in staff_list if self._is_valid_staff(s)]
        if not staff_list:
            return []

        if ledger is None:
            day_start, day_end = date_to_range(day, self.tz)
            ledger = BookingLedger(self.tenant, [s.pk for s in staff_list], day_start, day_end)

        by_start = {}
        for staff in staff_list:
            for start in self.staff_day_slots(staff, day, occupancy, ledger=ledger):
                by_start.setdefault(start.astimezone(dt_timezone.utc), []).append(staff.pk)

        logger.debug(
            "tenant=%s day=%s staff=%s duration=%s -> %d slot(s)",
            self.tenant.slug, day, [s.pk for s in staff_list], occupancy.duration, len(by_start),
        )
        return [
            Slot(
                start=start.astimezone(self.tz),
                end=add_minutes(start, occupancy.duration).astimezone(self.tz),
                staff_ids=sorted(ids),
            )
            for start, ids in sorted(by_start.items())
        ]

    def is_slot_available_for_staff(self, staff, start_time, occupancy) -> bool:
        """
        Write-path check: does [start - before, start + duration + after) sit
        inside one open interval and clear every occupying appointment?
        Grid alignment is not required here.
        """
        if not self._is_valid_staff(staff):
            return False

        occupied_start = add_minutes(start_time, -occupancy.before)
        occupied_end = add_minutes(occupied_start, occupancy.total)

        local_start = occupied_start.astimezone(self.tz)
        day = local_start.date()
        schedule = day_schedule(self.rules_for(staff), day)
        if schedule.is_closed:
            return False

        wall_start = local_start.hour * 60 + local_start.minute
        local_end = occupied_end.astimezone(self.tz)
        wall_end = (local_end.date() - day).days * MINUTES_PER_DAY + local_end.hour * 60 + local_end.minute
        if not any(s <= wall_start and wall_end <= e for s, e in schedule.open):
            return False
        if any(intervals_overlap(wall_start, wall_end, b0, b1) for b0, b1 in schedule.breaks):
            return False

        ledger = BookingLedger(self.tenant, [staff.pk], occupied_start, occupied_end)
        return not ledger.occupied(staff.pk, occupied_start, occupied_end)
