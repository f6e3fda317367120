from datetime import date, datetime, timedelta, timezone as dt_timezone
from zoneinfo import ZoneInfo

from django.test import SimpleTestCase

from booking.services.slot_utils import (
    add_minutes,
    candidate_starts,
    date_to_range,
    format_hhmm,
    intervals_overlap,
    localize,
    month_days,
    parse_hhmm,
    parse_iso_date,
    resolve_day_of_week,
    subtract_intervals,
)

LONDON = ZoneInfo("Europe/London")
UTC = dt_timezone.utc

# Europe/London moves to BST on 2030-03-31 and back to GMT on 2030-10-27.
SPRING_FORWARD = date(2030, 3, 31)
FALL_BACK = date(2030, 10, 27)


class TimeOfDayTests(SimpleTestCase):
    def test_parse_and_format_hhmm(self):
        self.assertEqual(parse_hhmm("09:30"), 570)
        self.assertEqual(parse_hhmm("24:00"), 1440)
        self.assertEqual(format_hhmm(570), "09:30")

    def test_parse_hhmm_rejects_garbage(self):
        for value in ("9", "25:00", "12:60", "24:30", "ab:cd"):
            with self.assertRaises(ValueError):
                parse_hhmm(value)

    def test_parse_iso_date_trims_time_part(self):
        self.assertEqual(parse_iso_date("2030-06-03"), date(2030, 6, 3))
        self.assertEqual(parse_iso_date("2030-06-03T10:00:00Z"), date(2030, 6, 3))
        with self.assertRaises(ValueError):
            parse_iso_date("03/06/2030")


class DayOfWeekTests(SimpleTestCase):
    def test_sunday_is_zero(self):
        self.assertEqual(resolve_day_of_week(date(2030, 6, 9), LONDON), 0)
        self.assertEqual(resolve_day_of_week(date(2030, 6, 3), LONDON), 1)
        self.assertEqual(resolve_day_of_week(date(2030, 6, 8), LONDON), 6)

    def test_instant_is_read_in_tenant_timezone(self):
        # 23:30 UTC on Sunday is already 00:30 Monday in London (BST)
        instant = datetime(2030, 6, 2, 23, 30, tzinfo=UTC)
        self.assertEqual(resolve_day_of_week(instant, LONDON), 1)
        self.assertEqual(resolve_day_of_week(instant, UTC), 0)


class IntervalTests(SimpleTestCase):
    def test_half_open_overlap(self):
        self.assertTrue(intervals_overlap(540, 600, 570, 630))
        self.assertFalse(intervals_overlap(540, 600, 600, 660))
        self.assertFalse(intervals_overlap(600, 660, 540, 600))
        self.assertTrue(intervals_overlap(540, 700, 600, 610))

    def test_subtract_intervals(self):
        self.assertEqual(subtract_intervals([(540, 1020)], [(780, 840)]), [(540, 780), (840, 1020)])
        self.assertEqual(subtract_intervals([(540, 600)], [(600, 660)]), [(540, 600)])
        self.assertEqual(subtract_intervals([(540, 600)], [(500, 700)]), [])

    def test_candidate_start_may_end_exactly_at_close(self):
        self.assertEqual(list(candidate_starts(900, 1020, 30, 60)), [900, 930, 960])
        self.assertEqual(list(candidate_starts(900, 950, 30, 60)), [])

    def test_month_days(self):
        days = list(month_days(2030, 2))
        self.assertEqual(len(days), 28)
        self.assertEqual(days[0], date(2030, 2, 1))
        self.assertEqual(days[-1], date(2030, 2, 28))


class DstTests(SimpleTestCase):
    def test_add_minutes_counts_elapsed_time_across_spring_forward(self):
        start = datetime(2030, 3, 31, 0, 30, tzinfo=LONDON)
        end = add_minutes(start, 60)
        self.assertEqual(end.astimezone(UTC), datetime(2030, 3, 31, 1, 30, tzinfo=UTC))
        self.assertEqual((end.hour, end.minute), (2, 30))

    def test_localize_keeps_wall_clock_on_both_sides(self):
        before = localize(date(2030, 3, 30), 9 * 60, LONDON)
        after = localize(SPRING_FORWARD, 9 * 60, LONDON)
        self.assertEqual((before.hour, after.hour), (9, 9))
        self.assertEqual(before.utcoffset(), timedelta(0))
        self.assertEqual(after.utcoffset(), timedelta(hours=1))

    def test_localize_moves_skipped_time_forward(self):
        skipped = localize(SPRING_FORWARD, 60, LONDON)
        self.assertEqual((skipped.hour, skipped.minute), (2, 0))

    def test_date_to_range_on_dst_days(self):
        start, end = date_to_range(SPRING_FORWARD, LONDON)
        self.assertEqual(end.astimezone(UTC) - start.astimezone(UTC), timedelta(hours=23))
        start, end = date_to_range(FALL_BACK, LONDON)
        self.assertEqual(end.astimezone(UTC) - start.astimezone(UTC), timedelta(hours=25))
