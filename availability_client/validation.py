"""
Post-fetch checks on slots returned by the API.

A slot survives when both ISO strings parse to aware datetimes, end is after
start, and start falls on the requested date in the salon timezone. Bad
slots are dropped one by one; a batch that loses more than MAX_DROP_RATIO
of its slots raises SlotValidationWarning, since that usually means the
server and client disagree about the timezone.
"""

import logging
import warnings
from datetime import date, datetime
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from .exceptions import SlotValidationWarning

logger = logging.getLogger(__name__)

MAX_DROP_RATIO = 0.2


def parse_instant(value) -> Optional[datetime]:
    """Parse an ISO-8601 instant; None unless it carries an offset."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def slot_problem(slot, day: date, tz: ZoneInfo) -> Optional[str]:
    """Why the slot is invalid, or None when it is fine."""
    if not isinstance(slot, dict):
        return "not an object"
    start = parse_instant(slot.get("startISO"))
    end = parse_instant(slot.get("endISO"))
    if start is None or end is None:
        return "unparseable startISO/endISO"
    if end <= start:
        return "end is not after start"
    if start.astimezone(tz).date() != day:
        return f"starts on {start.astimezone(tz).date()}, not {day}"
    return None


def validate_slots(
    slots: Iterable,
    day: date,
    tz: Union[str, ZoneInfo],
    max_drop_ratio: float = MAX_DROP_RATIO,
) -> list:
    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    slots = list(slots or [])

    valid = []
    for slot in slots:
        problem = slot_problem(slot, day, tz)
        if problem:
            logger.warning("Dropping slot %r: %s", slot, problem)
            continue
        valid.append(slot)

    dropped = len(slots) - len(valid)
    if slots and dropped / len(slots) > max_drop_ratio:
        message = f"{dropped} of {len(slots)} slots for {day} failed validation"
        logger.error(message)
        warnings.warn(message, SlotValidationWarning, stacklevel=2)

    valid.sort(key=lambda s: parse_instant(s["startISO"]))
    return valid
