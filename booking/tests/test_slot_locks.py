from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from booking.services.slot_locks import SlotLockService

SLOT = (1, 7, "2030-06-03", "09:00")


@override_settings(SLOT_LOCK_TTL_SECONDS=300)
class SlotLockTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        self.locks = SlotLockService()

    def test_acquire_is_exclusive(self):
        first = self.locks.acquire(*SLOT, duration=60)
        self.assertTrue(first["locked"])
        self.assertEqual(first["expiresIn"], 300 * 1000)

        second = self.locks.acquire(*SLOT)
        self.assertFalse(second["locked"])
        self.assertEqual(second["reason"], "held")
        self.assertGreater(second["remainingTTL"], 0)

    def test_other_slots_are_independent(self):
        self.assertTrue(self.locks.acquire(*SLOT)["locked"])
        self.assertTrue(self.locks.acquire(1, 7, "2030-06-03", "09:30")["locked"])
        self.assertTrue(self.locks.acquire(2, 7, "2030-06-03", "09:00")["locked"])

    def test_verify(self):
        lock_id = self.locks.acquire(*SLOT)["lockId"]
        self.assertTrue(self.locks.verify(*SLOT, lock_id)["valid"])
        self.assertEqual(self.locks.verify(*SLOT, "someone-else"), {"valid": False, "reason": "not_owner"})
        self.assertEqual(self.locks.verify(1, 7, "2030-06-04", "09:00", lock_id)["reason"], "not_found")

    def test_refresh_extends_for_owner_only(self):
        lock_id = self.locks.acquire(*SLOT, ttl=60)["lockId"]
        self.assertEqual(self.locks.refresh(*SLOT, "nope")["reason"], "not_owner")
        refreshed = self.locks.refresh(*SLOT, lock_id, ttl=600)
        self.assertTrue(refreshed["refreshed"])
        self.assertGreater(self.locks.verify(*SLOT, lock_id)["remainingTTL"], 60 * 1000)

    def test_release(self):
        lock_id = self.locks.acquire(*SLOT)["lockId"]
        self.assertFalse(self.locks.release(*SLOT, "nope")["released"])
        self.assertTrue(self.locks.release(*SLOT, lock_id)["released"])
        self.assertIsNone(self.locks.holder(*SLOT))
        self.assertTrue(self.locks.acquire(*SLOT)["locked"])
