"""
booking_ledger.py
-----------------
Read-only view over occupying appointments, used for conflict detection.

Only appointments in Appointment.OCCUPYING_STATUSES block time; cancelled,
no-show and completed rows never do. Every query is filtered by tenant and
staff so one salon's bookings can't leak into another's availability.
"""

from datetime import timedelta

from ..models import Appointment

# Appointments that start this long before a window can still reach into it.
LOOKBACK = timedelta(days=1)


class BookingLedger:
    """
    Occupied intervals for a set of specialists over [range_start, range_end).

    Loads once, then answers per-day questions from memory, so the month index
    can run the generator day by day without a query per day.
    """

    def __init__(self, tenant, staff_ids, range_start, range_end):
        self.tenant = tenant
        self.staff_ids = list(staff_ids)
        self.range_start = range_start
        self.range_end = range_end
        self._by_staff = {sid: [] for sid in self.staff_ids}
        self._load()

    def _load(self):
        qs = (
            Appointment.objects.occupying()
            .filter(
                tenant=self.tenant,
                staff_id__in=self.staff_ids,
                start_time__lt=self.range_end + LOOKBACK,
                start_time__gte=self.range_start - LOOKBACK,
            )
            .only("staff_id", "start_time", "duration_minutes", "buffer_before_minutes", "buffer_after_minutes")
            .order_by("start_time")
        )
        for appt in qs:
            start, end = appt.occupied_start, appt.occupied_end
            if start < self.range_end and end > self.range_start:
                self._by_staff[appt.staff_id].append((start, end))

    def occupied(self, staff_id, window_start=None, window_end=None):
        """
        Occupied [start, end) instants for one specialist, optionally clipped
        to those touching [window_start, window_end).
        """
        intervals = self._by_staff.get(staff_id, [])
        if window_start is None or window_end is None:
            return list(intervals)
        return [(s, e) for s, e in intervals if s < window_end and e > window_start]


def occupied_intervals(tenant, staff_id, window_start, window_end):
    """Occupied intervals for one specialist touching [window_start, window_end)."""
    return BookingLedger(tenant, [staff_id], window_start, window_end).occupied(staff_id)
