from datetime import date

from django.test import SimpleTestCase

from availability_client.exceptions import SlotValidationWarning
from availability_client.validation import validate_slots

DAY = date(2030, 6, 3)


def slot(start, end):
    return {"startISO": start, "endISO": end}


class ValidateSlotsTests(SimpleTestCase):
    def test_good_slots_pass_sorted(self):
        slots = [
            slot("2030-06-03T10:00:00+01:00", "2030-06-03T11:00:00+01:00"),
            slot("2030-06-03T08:00:00Z", "2030-06-03T09:00:00Z"),
        ]
        valid = validate_slots(slots, DAY, "Europe/London")
        self.assertEqual([s["startISO"] for s in valid], ["2030-06-03T08:00:00Z", "2030-06-03T10:00:00+01:00"])

    def test_bad_slots_are_dropped_individually(self):
        good = [slot(f"2030-06-03T{h:02d}:00:00+01:00", f"2030-06-03T{h + 1:02d}:00:00+01:00") for h in range(9, 17)]
        bad = slot("2030-06-03T12:00:00+01:00", "2030-06-03T11:00:00+01:00")
        with self.assertLogs("availability_client.validation", level="WARNING") as logs:
            valid = validate_slots(good + [bad], DAY, "Europe/London")
        self.assertEqual(len(valid), 8)
        self.assertIn("end is not after start", logs.output[0])

    def test_wrong_day_in_salon_timezone(self):
        # 23:30 UTC on the 3rd is 00:30 on the 4th in London
        late = slot("2030-06-03T23:30:00Z", "2030-06-04T00:30:00Z")
        with self.assertWarns(SlotValidationWarning):
            self.assertEqual(validate_slots([late], DAY, "Europe/London"), [])

    def test_naive_and_garbage_strings(self):
        slots = [
            slot("2030-06-03T09:00:00", "2030-06-03T10:00:00"),
            slot("tomorrow", "later"),
            {"startISO": None},
            "09:00",
        ]
        with self.assertWarns(SlotValidationWarning):
            self.assertEqual(validate_slots(slots, DAY, "Europe/London"), [])

    def test_warning_only_above_twenty_percent(self):
        good = [slot(f"2030-06-03T{h:02d}:00:00+01:00", f"2030-06-03T{h:02d}:30:00+01:00") for h in range(9, 13)]
        bad = [slot("x", "y")]

        with self.assertLogs("availability_client.validation", level="WARNING") as logs:
            validate_slots(good + bad, DAY, "Europe/London")
        self.assertFalse(any("ERROR" in line for line in logs.output))

        with self.assertWarns(SlotValidationWarning), self.assertLogs("availability_client.validation", "ERROR"):
            validate_slots(good[:3] + bad, DAY, "Europe/London")

    def test_empty_batch(self):
        self.assertEqual(validate_slots([], DAY, "Europe/London"), [])
        self.assertEqual(validate_slots(None, DAY, "Europe/London"), [])
