"""
facade.py
---------
The single entry point the booking UI uses to ask for availability.

query_slots(query):
    - gated: nothing is requested until service, duration and date are set
    - cached: results are reused for ClientConfig.slots_ttl_seconds
    - debounced: waits for the quiet period, newer calls cancel older ones
    - validated: malformed slots are dropped before the UI sees them
    - returns None when a newer call superseded this one

fully_booked(query):
    Same treatment for the month index that greys out dates in the picker.

After a booking succeeds, call invalidate_booking() so the affected date and
month are fetched again.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional
from zoneinfo import ZoneInfo

from .cache import TTLCache
from .client import AvailabilityClient
from .coalescer import RequestCoalescer
from .exceptions import AvailabilityUnavailable
from .query import FullyBookedQuery, SlotQuery
from .validation import validate_slots

logger = logging.getLogger(__name__)

NO_SLOTS_MESSAGE = "No available slots for this date"
UNAVAILABLE_MESSAGE = "Unable to load availability. Please try again."


@dataclass
class AvailabilityResult:
    slots: list = field(default_factory=list)
    message: Optional[str] = None
    error: Optional[str] = None
    # True when required parameters were missing and nothing was requested
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FullyBookedResult:
    dates: list = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AvailabilityFacade:
    def __init__(self, client: AvailabilityClient, slots_cache=None, fully_booked_cache=None):
        self.client = client
        self.config = client.config
        self.tz = ZoneInfo(self.config.salon_tz)
        self.slots_cache = slots_cache or TTLCache(self.config.slots_ttl_seconds)
        self.fully_booked_cache = fully_booked_cache or TTLCache(self.config.fully_booked_ttl_seconds)
        self._slot_requests = RequestCoalescer(self.config.debounce_seconds)
        self._month_requests = RequestCoalescer(self.config.debounce_seconds)

    # -------------------- Slots --------------------
    async def query_slots(self, query: SlotQuery) -> Optional[AvailabilityResult]:
        if not query.is_ready:
            self._slot_requests.supersede()
            return AvailabilityResult(skipped=True)

        cached = self.slots_cache.get(query.cache_key())
        if cached is not None:
            self._slot_requests.supersede()
            return replace(cached, slots=[dict(slot) for slot in cached.slots])

        return await self._slot_requests.submit(lambda: self._fetch_slots(query))

    async def _fetch_slots(self, query: SlotQuery) -> AvailabilityResult:
        try:
            data = await self.client.get_slots(query)
        except AvailabilityUnavailable as e:
            logger.error("Slots for %s unavailable: %s", query, e)
            return AvailabilityResult(error=UNAVAILABLE_MESSAGE)

        slots = validate_slots(data.get("slots"), query.date, self.tz)
        message = data.get("message") or None
        if not slots and message is None:
            message = NO_SLOTS_MESSAGE

        result = AvailabilityResult(slots=slots, message=message)
        self.slots_cache.set(query.cache_key(), result)
        return replace(result, slots=[dict(slot) for slot in slots])

    # -------------------- Month index --------------------
    async def fully_booked(self, query: FullyBookedQuery) -> Optional[FullyBookedResult]:
        cached = self.fully_booked_cache.get(query.cache_key())
        if cached is not None:
            self._month_requests.supersede()
            return replace(cached, dates=list(cached.dates))

        return await self._month_requests.submit(lambda: self._fetch_fully_booked(query))

    async def _fetch_fully_booked(self, query: FullyBookedQuery) -> FullyBookedResult:
        try:
            dates = await self.client.get_fully_booked(query)
        except AvailabilityUnavailable as e:
            logger.error("Fully-booked dates for %s-%02d unavailable: %s", query.year, query.month, e)
            return FullyBookedResult(error=UNAVAILABLE_MESSAGE)

        result = FullyBookedResult(dates=sorted(dates))
        self.fully_booked_cache.set(query.cache_key(), result)
        return replace(result, dates=list(result.dates))

    # -------------------- Invalidation --------------------
    def invalidate_booking(self, day: date, specialist_id: Optional[int] = None) -> None:
        """Forget cached slots for the day and the month index for its month."""
        day_iso = day.isoformat()

        def slot_key_matches(key):
            _, _, _, key_date, key_specialist, _, key_any = key
            if key_date != day_iso:
                return False
            return specialist_id is None or key_any or key_specialist in (None, specialist_id)

        def month_key_matches(key):
            _, year, month, key_specialist, _ = key
            if (year, month) != (day.year, day.month):
                return False
            return specialist_id is None or key_specialist in (None, specialist_id)

        dropped = self.slots_cache.invalidate(slot_key_matches)
        dropped += self.fully_booked_cache.invalidate(month_key_matches)
        logger.debug("Invalidated %s cached availability entries for %s", dropped, day_iso)
