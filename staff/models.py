# staff/models.py
#
# Availability rules for a specialist. Points to booking.Staff to avoid
# having two Staff models.
#
# - WorkingHours: recurring weekly hours, one row per day at most.
# - StaffBreak: recurring daily exclusion inside the working hours.
# - CustomScheduleDay: replaces the weekly hours for one date.
# - TimeOff: closes the specialist for a whole date range.
#
# day_of_week follows the booking site convention: 0=Sunday .. 6=Saturday.
# Times are wall-clock "HH:MM" in the tenant's timezone.
#
import re

from django.core.exceptions import ValidationError
from django.db import models

HHMM_RE = re.compile(r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$")

DAY_OF_WEEK_CHOICES = [
    (0, "Sunday"),
    (1, "Monday"),
    (2, "Tuesday"),
    (3, "Wednesday"),
    (4, "Thursday"),
    (5, "Friday"),
    (6, "Saturday"),
]


def validate_hhmm(value):
    if not HHMM_RE.match(value or ""):
        raise ValidationError(f"Time must use HH:MM format, got {value!r}.")


def validate_intervals(value):
    """
    Validate a custom-schedule interval list: [{"start": "09:00", "end": "12:00"}, ...].
    An empty list is allowed and means "closed that day".
    """
    if not isinstance(value, list):
        raise ValidationError("Intervals must be a list.")
    for item in value:
        if not isinstance(item, dict):
            raise ValidationError("Each interval must be an object with start and end.")
        start, end = item.get("start"), item.get("end")
        validate_hhmm(start)
        validate_hhmm(end)
        if start >= end:
            raise ValidationError(f"Interval {start}-{end}: end must be after start.")


class _DailyWindow(models.Model):
    day_of_week = models.PositiveSmallIntegerField(choices=DAY_OF_WEEK_CHOICES)
    start = models.CharField(max_length=5, validators=[validate_hhmm])
    end = models.CharField(max_length=5, validators=[validate_hhmm])

    class Meta:
        abstract = True

    def clean(self):
        if self.start and self.end and self.start >= self.end:
            raise ValidationError("End time must be after start time.")


class WorkingHours(_DailyWindow):
    staff = models.ForeignKey(
        "booking.Staff",
        on_delete=models.CASCADE,
        related_name="working_hours",
    )

    class Meta:
        ordering = ["staff_id", "day_of_week"]
        verbose_name_plural = "working hours"
        constraints = [
            models.UniqueConstraint(fields=["staff", "day_of_week"], name="uniq_working_hours_per_day"),
        ]

    def __str__(self):
        return f"{self.staff.name}: {self.get_day_of_week_display()} {self.start}-{self.end}"


class StaffBreak(_DailyWindow):
    staff = models.ForeignKey(
        "booking.Staff",
        on_delete=models.CASCADE,
        related_name="breaks",
    )

    class Meta:
        ordering = ["staff_id", "day_of_week", "start"]

    def __str__(self):
        return f"{self.staff.name}: break {self.get_day_of_week_display()} {self.start}-{self.end}"


class CustomScheduleDay(models.Model):
    staff = models.ForeignKey(
        "booking.Staff",
        on_delete=models.CASCADE,
        related_name="custom_schedule",
    )
    date = models.DateField()
    intervals = models.JSONField(default=list, blank=True, validators=[validate_intervals])

    class Meta:
        ordering = ["staff_id", "date"]
        constraints = [
            models.UniqueConstraint(fields=["staff", "date"], name="uniq_custom_schedule_per_date"),
        ]

    def __str__(self):
        spans = ", ".join(f"{i.get('start')}-{i.get('end')}" for i in self.intervals) or "closed"
        return f"{self.staff.name}: {self.date} {spans}"


class TimeOff(models.Model):
    staff = models.ForeignKey(
        "booking.Staff",
        on_delete=models.CASCADE,
        related_name="time_off",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.CharField(max_length=200, blank=True)

    class Meta:
        ordering = ["staff_id", "start_date"]
        verbose_name_plural = "time off"

    def __str__(self):
        return f"{self.staff.name}: off {self.start_date} - {self.end_date}"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError("Time off cannot end before it starts.")
