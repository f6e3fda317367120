"""
slot_locks.py
-------------
Short-lived holds on a slot while a customer finishes checkout.

A lock is keyed by (tenant, specialist, date, HH:MM) and owned by whoever
holds its lock_id. Locks live in Django's cache with a TTL; acquisition uses
cache.add so two customers can't both win the same key.

Locks are advisory for slot listings. BookingManager refuses a booking on a
slot locked by someone else.
"""

import logging
import uuid

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)


class SlotLockService:
    def __init__(self, ttl_seconds=None):
        self.ttl_seconds = ttl_seconds or settings.SLOT_LOCK_TTL_SECONDS

    @staticmethod
    def _key(tenant_id, staff_id, date_str, start_time) -> str:
        return f"slot-lock:{tenant_id}:{staff_id}:{date_str}:{start_time}"

    @staticmethod
    def _remaining_ms(lock) -> int:
        remaining = lock["expires_at"] - timezone.now().timestamp()
        return max(0, int(remaining * 1000))

    def holder(self, tenant_id, staff_id, date_str, start_time):
        """Current lock dict for the slot, or None."""
        lock = cache.get(self._key(tenant_id, staff_id, date_str, start_time))
        if lock and self._remaining_ms(lock) > 0:
            return lock
        return None

    def acquire(self, tenant_id, staff_id, date_str, start_time, duration=None, ttl=None) -> dict:
        ttl = ttl or self.ttl_seconds
        lock = {
            "lock_id": uuid.uuid4().hex,
            "duration": duration,
            "expires_at": timezone.now().timestamp() + ttl,
        }
        key = self._key(tenant_id, staff_id, date_str, start_time)
        if cache.add(key, lock, timeout=ttl):
            logger.info("Lock %s acquired on %s", lock["lock_id"], key)
            return {"locked": True, "lockId": lock["lock_id"], "expiresIn": ttl * 1000}

        current = cache.get(key)
        return {
            "locked": False,
            "reason": "held",
            "remainingTTL": self._remaining_ms(current) if current else 0,
        }

    def verify(self, tenant_id, staff_id, date_str, start_time, lock_id) -> dict:
        lock = self.holder(tenant_id, staff_id, date_str, start_time)
        if lock is None:
            return {"valid": False, "reason": "not_found"}
        if lock["lock_id"] != lock_id:
            return {"valid": False, "reason": "not_owner"}
        return {"valid": True, "remainingTTL": self._remaining_ms(lock)}

    def refresh(self, tenant_id, staff_id, date_str, start_time, lock_id, ttl=None) -> dict:
        ttl = ttl or self.ttl_seconds
        key = self._key(tenant_id, staff_id, date_str, start_time)
        lock = self.holder(tenant_id, staff_id, date_str, start_time)
        if lock is None or lock["lock_id"] != lock_id:
            return {"refreshed": False, "reason": "not_found" if lock is None else "not_owner"}
        lock = dict(lock, expires_at=timezone.now().timestamp() + ttl)
        cache.set(key, lock, timeout=ttl)
        return {"refreshed": True, "expiresIn": ttl * 1000}

    def release(self, tenant_id, staff_id, date_str, start_time, lock_id) -> dict:
        key = self._key(tenant_id, staff_id, date_str, start_time)
        lock = self.holder(tenant_id, staff_id, date_str, start_time)
        if lock is None:
            return {"released": False, "reason": "not_found"}
        if lock["lock_id"] != lock_id:
            return {"released": False, "reason": "not_owner"}
        cache.delete(key)
        logger.info("Lock %s released on %s", lock_id, key)
        return {"released": True}
