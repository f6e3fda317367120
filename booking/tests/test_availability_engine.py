from datetime import date, timedelta

from django.test import TestCase

from booking.models import Appointment
from booking.services.availability_engine import AvailabilityEngine, Occupancy
from staff.models import CustomScheduleDay, StaffBreak, TimeOff, WorkingHours

from .helpers import MONDAY, SUNDAY, at, book, make_service, make_staff, make_tenant, wall_times

MORNING = ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30", "12:00"]
AFTERNOON = ["14:00", "14:30", "15:00", "15:30", "16:00"]


class SlotGenerationTests(TestCase):
    """
    Specialist S1 works Monday 09:00-17:00 with a 13:00-14:00 break,
    60-minute service, 30-minute step.
    """

    def setUp(self):
        self.tenant = make_tenant()
        self.s1 = make_staff(self.tenant)
        self.service = make_service(self.tenant, staff=[self.s1])
        self.engine = AvailabilityEngine(self.tenant)
        self.hour = Occupancy(duration=60)

    def slots(self, day=MONDAY, occupancy=None, staff=None):
        engine = AvailabilityEngine(self.tenant)
        return engine.find_available_slots(day, occupancy or self.hour, staff or [self.s1])

    def test_weekday_scenario(self):
        """12:00 fits before the break, 12:30 would end inside it"""
        times = wall_times(self.slots())
        self.assertEqual(times, MORNING + AFTERNOON)
        self.assertNotIn("12:30", times)

    def test_slot_end_is_start_plus_duration(self):
        slot = self.slots()[0]
        self.assertEqual(slot.end - slot.start, timedelta(minutes=60))
        self.assertEqual(slot.as_dict(include_staff=False), {
            "startISO": "2030-06-03T09:00:00+01:00",
            "endISO": "2030-06-03T10:00:00+01:00",
        })

    def test_slots_stay_inside_hours_and_clear_of_break(self):
        for slot in self.slots():
            self.assertGreaterEqual(slot.start, at(MONDAY, "09:00"))
            self.assertLessEqual(slot.end, at(MONDAY, "17:00"))
            self.assertFalse(slot.start < at(MONDAY, "14:00") and at(MONDAY, "13:00") < slot.end)

    def test_existing_appointment_blocks_overlapping_starts(self):
        book(self.s1, self.service, at(MONDAY, "10:00"))
        times = wall_times(self.slots())
        for blocked in ("09:30", "10:00", "10:30"):
            self.assertNotIn(blocked, times)
        self.assertIn("09:00", times)
        self.assertIn("11:00", times)

    def test_cancelled_and_completed_appointments_do_not_block(self):
        book(self.s1, self.service, at(MONDAY, "10:00"), status=Appointment.CANCELLED_BY_USER)
        book(self.s1, self.service, at(MONDAY, "11:00"), status=Appointment.COMPLETED)
        self.assertEqual(wall_times(self.slots()), MORNING + AFTERNOON)

    def test_reserved_and_pending_appointments_block(self):
        book(self.s1, self.service, at(MONDAY, "09:00"), status=Appointment.RESERVED_UNPAID)
        book(self.s1, self.service, at(MONDAY, "15:00"), status=Appointment.PENDING)
        times = wall_times(self.slots())
        self.assertNotIn("09:00", times)
        self.assertNotIn("15:00", times)
        self.assertIn("10:00", times)

    def test_stored_buffers_widen_the_booked_window(self):
        book(self.s1, self.service, at(MONDAY, "10:00"), buffer_after_minutes=30)
        times = wall_times(self.slots())
        self.assertNotIn("11:00", times)
        self.assertIn("11:30", times)

    def test_time_off_closes_the_day(self):
        TimeOff.objects.create(staff=self.s1, start_date=MONDAY, end_date=MONDAY, reason="Holiday")
        self.assertEqual(self.slots(), [])

    def test_no_working_hours_on_sunday(self):
        self.assertEqual(self.slots(day=SUNDAY), [])

    def test_custom_schedule_overrides_weekly_hours(self):
        CustomScheduleDay.objects.create(
            staff=self.s1, date=MONDAY, intervals=[{"start": "10:00", "end": "12:00"}]
        )
        self.assertEqual(wall_times(self.slots()), ["10:00", "10:30", "11:00"])

    def test_shorter_service_never_has_fewer_slots(self):
        short = self.slots(occupancy=Occupancy(duration=45))
        long = self.slots(occupancy=Occupancy(duration=90))
        self.assertEqual(len(short), 12)
        self.assertEqual(len(long), 10)
        self.assertGreater(len(short), len(long))

    def test_tenant_buffer_must_fit_before_closing(self):
        self.tenant.buffer_minutes = 15
        self.tenant.save()
        engine = AvailabilityEngine(self.tenant)
        occupancy = engine.occupancy_for(variant=self.service.variants.get())
        self.assertEqual(occupancy.after, 15)
        times = wall_times(engine.find_available_slots(MONDAY, occupancy, [self.s1]))
        self.assertEqual(times[:6], ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"])
        self.assertNotIn("12:00", times)
        self.assertEqual(times[-1], "15:30")

    def test_buffer_before_shifts_the_start(self):
        slots = self.slots(occupancy=Occupancy(duration=60, before=15))
        self.assertEqual(wall_times(slots)[0], "09:15")

    def test_total_duration_overrides_variant(self):
        occupancy = self.engine.occupancy_for(variant=self.service.variants.get(), total_duration=120)
        self.assertEqual(occupancy.duration, 120)

    def test_past_starts_are_dropped(self):
        engine = AvailabilityEngine(self.tenant, now=at(MONDAY, "11:10"))
        times = wall_times(engine.find_available_slots(MONDAY, self.hour, [self.s1]))
        self.assertEqual(times[0], "11:30")

    def test_hours_running_to_midnight(self):
        WorkingHours.objects.filter(staff=self.s1).update(start="20:00", end="24:00")
        StaffBreak.objects.filter(staff=self.s1).delete()
        times = wall_times(self.slots())
        self.assertEqual(times, ["20:00", "20:30", "21:00", "21:30", "22:00", "22:30", "23:00"])

    def test_malformed_break_does_not_stop_generation(self):
        StaffBreak.objects.create(staff=self.s1, day_of_week=1, start="16:30", end="18:00")
        with self.assertLogs("staff.rule_store", level="WARNING"):
            times = wall_times(self.slots())
        self.assertEqual(times, MORNING + AFTERNOON)


class AnyAvailableTests(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.s1 = make_staff(self.tenant, name="S1")
        self.s2 = make_staff(self.tenant, name="S2", hours={1: ("12:00", "18:00")}, breaks={})
        self.service = make_service(self.tenant, staff=[self.s1, self.s2])

    def test_union_with_fulfilling_staff(self):
        engine = AvailabilityEngine(self.tenant)
        slots = engine.find_available_slots(MONDAY, Occupancy(duration=60), [self.s1, self.s2])
        by_time = {t: s.staff_ids for t, s in zip(wall_times(slots), slots)}

        self.assertEqual(by_time["09:00"], [self.s1.pk])
        self.assertEqual(by_time["12:00"], [self.s1.pk, self.s2.pk])
        self.assertEqual(by_time["13:00"], [self.s2.pk])
        self.assertEqual(by_time["17:00"], [self.s2.pk])
        self.assertEqual(wall_times(slots), sorted(wall_times(slots)))
        self.assertEqual(len(set(wall_times(slots))), len(slots))

    def test_busy_specialist_drops_out_of_a_shared_start(self):
        book(self.s2, self.service, at(MONDAY, "12:00"))
        engine = AvailabilityEngine(self.tenant)
        slots = engine.find_available_slots(MONDAY, Occupancy(duration=60), [self.s1, self.s2])
        by_time = {t: s.staff_ids for t, s in zip(wall_times(slots), slots)}
        self.assertEqual(by_time["12:00"], [self.s1.pk])

    def test_eligible_staff_falls_back_to_all_active(self):
        service = make_service(self.tenant, name="Manicure")
        self.assertEqual(list(service.eligible_staff()), [self.s1, self.s2])

    def test_linked_staff_who_left_are_not_replaced(self):
        service = make_service(self.tenant, staff=[self.s1], name="Colour")
        self.s1.active = False
        self.s1.save()
        self.assertEqual(list(service.eligible_staff()), [])

    def test_only_active_linked_staff_are_eligible(self):
        self.s2.active = False
        self.s2.save()
        self.assertEqual(list(self.service.eligible_staff()), [self.s1])


class TenantIsolationTests(TestCase):
    def setUp(self):
        self.glow = make_tenant("glow")
        self.shine = make_tenant("shine")
        self.s1 = make_staff(self.glow)
        self.other = make_staff(self.shine, name="Other")
        self.service = make_service(self.glow, staff=[self.s1])

    def test_staff_from_another_tenant_yields_nothing(self):
        engine = AvailabilityEngine(self.glow)
        self.assertEqual(engine.find_available_slots(MONDAY, Occupancy(duration=60), [self.other]), [])

    def test_other_tenant_bookings_are_invisible(self):
        other_service = make_service(self.shine, staff=[self.other])
        book(self.other, other_service, at(MONDAY, "09:00"))
        engine = AvailabilityEngine(self.glow)
        slots = engine.find_available_slots(MONDAY, Occupancy(duration=60), [self.s1])
        self.assertEqual(wall_times(slots)[0], "09:00")


class DaylightSavingTests(TestCase):
    """Europe/London springs forward on Sunday 2030-03-31."""

    def setUp(self):
        self.tenant = make_tenant()
        every_day = {day: ("09:00", "17:00") for day in range(7)}
        self.s1 = make_staff(self.tenant, hours=every_day, breaks={})

    def test_nine_oclock_on_both_sides_of_the_change(self):
        engine = AvailabilityEngine(self.tenant)
        for day in (date(2030, 3, 30), date(2030, 3, 31), date(2030, 4, 1)):
            slots = engine.find_available_slots(day, Occupancy(duration=60), [self.s1])
            self.assertEqual(wall_times(slots)[0], "09:00")
            self.assertEqual(wall_times(slots)[-1], "16:00")

        saturday = engine.find_available_slots(date(2030, 3, 30), Occupancy(duration=60), [self.s1])
        sunday = engine.find_available_slots(date(2030, 3, 31), Occupancy(duration=60), [self.s1])
        self.assertEqual(saturday[0].as_dict()["startISO"], "2030-03-30T09:00:00+00:00")
        self.assertEqual(sunday[0].as_dict()["startISO"], "2030-03-31T09:00:00+01:00")


class WritePathCheckTests(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.s1 = make_staff(self.tenant)
        self.service = make_service(self.tenant, staff=[self.s1])
        self.engine = AvailabilityEngine(self.tenant)
        self.hour = Occupancy(duration=60)

    def test_off_grid_start_inside_hours_is_accepted(self):
        self.assertTrue(self.engine.is_slot_available_for_staff(self.s1, at(MONDAY, "09:15"), self.hour))

    def test_rejects_break_closing_and_conflicts(self):
        self.assertFalse(self.engine.is_slot_available_for_staff(self.s1, at(MONDAY, "12:30"), self.hour))
        self.assertFalse(self.engine.is_slot_available_for_staff(self.s1, at(MONDAY, "16:30"), self.hour))
        self.assertFalse(self.engine.is_slot_available_for_staff(self.s1, at(SUNDAY, "10:00"), self.hour))

        book(self.s1, self.service, at(MONDAY, "10:00"))
        self.assertFalse(self.engine.is_slot_available_for_staff(self.s1, at(MONDAY, "10:30"), self.hour))
        self.assertTrue(self.engine.is_slot_available_for_staff(self.s1, at(MONDAY, "11:00"), self.hour))

    def test_working_hours_change_is_seen_by_a_fresh_engine(self):
        WorkingHours.objects.filter(staff=self.s1).update(end="12:00")
        engine = AvailabilityEngine(self.tenant)
        self.assertFalse(engine.is_slot_available_for_staff(self.s1, at(MONDAY, "14:00"), self.hour))
