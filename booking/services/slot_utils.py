"""
slot_utils.py
-------------
Calendar primitives shared by the rule store, the ledger and the slot generator.

Wall-clock values (working hours, breaks, candidate starts) are handled as
minutes after local midnight and only converted to aware datetimes at the
end, in the tenant's timezone. Instants are compared in absolute time.

All functions are pure.
"""

from datetime import date, datetime, time, timedelta, timezone as dt_timezone

MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: str) -> int:
    """'09:30' -> 570. Raises ValueError on anything that isn't HH:MM."""
    h, m = value.split(":")
    hours, minutes = int(h), int(m)
    if not (0 <= hours <= 24 and 0 <= minutes < 60) or (hours == 24 and minutes):
        raise ValueError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_iso_date(value: str) -> date:
    """
    Parse 'YYYY-MM-DD'. Inputs that include a time part ('2030-03-04T10:00')
    are trimmed to the date.
    """
    value = (value or "").strip()
    for sep in ("T", " "):
        if sep in value:
            value = value.split(sep, 1)[0]
    return date.fromisoformat(value)


def resolve_day_of_week(value, tz) -> int:
    """
    Day of week in the tenant timezone, 0=Sunday .. 6=Saturday.
    Accepts a date (already local) or an aware datetime (converted to tz first).
    """
    if isinstance(value, datetime):
        value = value.astimezone(tz).date()
    return (value.weekday() + 1) % 7


def intervals_overlap(a_start, a_end, b_start, b_end) -> bool:
    """Half-open overlap: touching endpoints do not overlap."""
    return a_start < b_end and b_start < a_end


def add_minutes(instant: datetime, minutes: int) -> datetime:
    """
    Add elapsed minutes to an aware instant.

    Python adds timedeltas to aware datetimes in wall-clock terms when the
    tzinfo stays the same, so go through UTC to get real elapsed time.
    """
    shifted = instant.astimezone(dt_timezone.utc) + timedelta(minutes=minutes)
    return shifted.astimezone(instant.tzinfo)


def localize(day: date, minutes: int, tz) -> datetime:
    """
    Turn (local date, minutes after midnight) into an aware datetime in tz.

    Ambiguous wall times resolve to the first occurrence (fold=0). Wall times
    skipped by a DST jump are normalised forward through a UTC round trip.
    """
    naive = datetime.combine(day, time()) + timedelta(minutes=minutes)
    aware = naive.replace(tzinfo=tz)
    return aware.astimezone(dt_timezone.utc).astimezone(tz)


def date_to_range(day: date, tz):
    """
    Aware [start, end) window covering one local calendar day in tz.
    On DST days the window is 23 or 25 hours long.
    """
    start = localize(day, 0, tz)
    end = localize(day + timedelta(days=1), 0, tz)
    return start, end


def subtract_intervals(spans, holes):
    """
    Remove every 'hole' from every 'span' (both lists of (start, end) pairs,
    half-open). Returns the remaining disjoint pieces in ascending order.
    """
    remaining = sorted(spans)
    for hole_start, hole_end in holes:
        pieces = []
        for start, end in remaining:
            if not intervals_overlap(start, end, hole_start, hole_end):
                pieces.append((start, end))
                continue
            if start < hole_start:
                pieces.append((start, hole_start))
            if hole_end < end:
                pieces.append((hole_end, end))
        remaining = pieces
    return remaining


def candidate_starts(open_start: int, open_end: int, step: int, length: int):
    """
    Wall-clock candidate starts open, open+step, ... whose window of 'length'
    minutes ends at or before open_end.
    """
    current = open_start
    while current + length <= open_end:
        yield current
        current += step


def month_days(year: int, month: int):
    day = date(year, month, 1)
    while day.month == month:
        yield day
        day += timedelta(days=1)
