"""
rule_store.py
-------------
Answers "which wall-clock intervals is this specialist open on this date?"
before bookings are considered.

Tiers, first match wins (no merging across tiers):
1) a TimeOff range covering the date      -> closed
2) a CustomScheduleDay for the exact date -> its intervals (empty = closed)
3) the WorkingHours row for the weekday   -> that window (missing = closed)

Breaks for the weekday are then subtracted from whatever tier 2/3 returned.

Malformed rules (bad HH:MM, start >= end, a break not contained in one open
interval) are logged and skipped; they never abort the day.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from booking.services.slot_utils import format_hhmm, parse_hhmm, resolve_day_of_week, subtract_intervals

logger = logging.getLogger(__name__)

TIME_OFF = "time_off"
CUSTOM = "custom"
WEEKLY = "weekly"
CLOSED = "closed"


@dataclass(frozen=True)
class StaffRules:
    """
    Plain snapshot of one specialist's rules.

    working_hours / breaks: {day_of_week: [("09:00", "17:00"), ...]}
    custom_schedule:        {date or "YYYY-MM-DD": [("09:00", "12:00"), ...]}
    time_off:               [(start_date, end_date), ...] inclusive
    """
    staff_id: int
    working_hours: dict = field(default_factory=dict)
    breaks: dict = field(default_factory=dict)
    custom_schedule: dict = field(default_factory=dict)
    time_off: tuple = ()


@dataclass(frozen=True)
class DaySchedule:
    """
    open:   disjoint open intervals (minutes after local midnight), breaks removed
    breaks: the break intervals that were applied
    source: which tier decided the day
    """
    open: tuple
    breaks: tuple
    source: str

    @property
    def is_closed(self) -> bool:
        return not self.open


def _windows(raw, staff_id, label):
    """Parse ("HH:MM", "HH:MM") pairs, dropping malformed ones."""
    parsed = []
    for start, end in raw:
        try:
            s, e = parse_hhmm(start), parse_hhmm(end)
        except (AttributeError, TypeError, ValueError):
            logger.warning("Staff %s: ignoring malformed %s %r-%r", staff_id, label, start, end)
            continue
        if s >= e:
            logger.warning("Staff %s: ignoring empty %s %s-%s", staff_id, label, start, end)
            continue
        parsed.append((s, e))
    return sorted(parsed)


def _merge(intervals):
    merged = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def is_time_off(rules: StaffRules, day: date) -> bool:
    return any(start <= day <= end for start, end in rules.time_off)


def day_schedule(rules: StaffRules, day: date) -> DaySchedule:
    """
    Resolve the open intervals for 'day' (a local calendar date).
    """
    if is_time_off(rules, day):
        return DaySchedule(open=(), breaks=(), source=TIME_OFF)

    weekday = resolve_day_of_week(day, None)
    custom = rules.custom_schedule.get(day, rules.custom_schedule.get(day.isoformat()))
    if custom is not None:
        source = CUSTOM
        base = _windows(custom, rules.staff_id, "custom interval")
    else:
        source = WEEKLY
        base = _windows(rules.working_hours.get(weekday, ()), rules.staff_id, "working hours")

    base = _merge(base)
    if not base:
        return DaySchedule(open=(), breaks=(), source=CLOSED if source == WEEKLY else CUSTOM)

    applied = []
    for brk in _windows(rules.breaks.get(weekday, ()), rules.staff_id, "break"):
        if any(start <= brk[0] and brk[1] <= end for start, end in base):
            applied.append(brk)
        else:
            logger.warning(
                "Staff %s: ignoring break %s-%s outside open hours on %s",
                rules.staff_id, format_hhmm(brk[0]), format_hhmm(brk[1]), day,
            )

    open_intervals = subtract_intervals(base, applied)
    return DaySchedule(open=tuple(open_intervals), breaks=tuple(applied), source=source)


def load_staff_rules(staff) -> StaffRules:
    """
    Snapshot the rules of a booking.Staff row. Scoped by the staff row itself,
    so callers must already have checked the tenant.
    """
    working_hours, breaks = {}, {}
    for wh in staff.working_hours.all():
        working_hours.setdefault(wh.day_of_week, []).append((wh.start, wh.end))
    for brk in staff.breaks.all():
        breaks.setdefault(brk.day_of_week, []).append((brk.start, brk.end))

    custom = {}
    for row in staff.custom_schedule.all():
        intervals = row.intervals if isinstance(row.intervals, list) else []
        custom[row.date] = [
            (item.get("start"), item.get("end")) for item in intervals if isinstance(item, dict)
        ]

    time_off = tuple((row.start_date, row.end_date) for row in staff.time_off.all())

    return StaffRules(
        staff_id=staff.pk,
        working_hours=working_hours,
        breaks=breaks,
        custom_schedule=custom,
        time_off=time_off,
    )
