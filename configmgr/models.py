# configmgr/models.py
#
# Purpose:
# - Tenants (one salon per row) and their scheduling configuration.
# - Platform-wide key/value fallbacks for values a tenant leaves unset.
#
# Notes:
# - Every wall-clock rule (working hours, breaks, "today") is read in the
#   tenant's IANA timezone, never in the server's TIME_ZONE.
#
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


def validate_timezone(value):
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown timezone: {value!r}")


class SystemSetting(models.Model):
    """
    Simple key/value settings store.
    Example keys:
      - DEFAULT_TIMEZONE  (e.g., 'Europe/London')
      - DEFAULT_SLOT_STEP (minutes between candidate starts, e.g., '30')
      - DEFAULT_BUFFER    (minutes appended after each booking, e.g., '0')
    """
    key = models.CharField(max_length=100, unique=True)
    value = models.CharField(max_length=200)

    def __str__(self):
        return f"{self.key}={self.value}"


class Tenant(models.Model):
    """
    A salon using the booking site.

    slot_step_minutes / buffer_minutes may be left empty, in which case the
    SystemSetting defaults apply (see configmgr.scheduling).
    """
    slug = models.SlugField(max_length=80, unique=True)
    name = models.CharField(max_length=200)
    timezone = models.CharField(
        max_length=64,
        default="Europe/London",
        validators=[validate_timezone],
    )
    slot_step_minutes = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(5)],
        help_text="Granularity between candidate slot starts.",
    )
    buffer_minutes = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Gap appended after every booking before the next bookable start.",
    )
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["slug"]

    def __str__(self):
        return self.name
