"""
scheduling.py
-------------
Resolves the effective scheduling settings (timezone, slot step, buffer) for a
tenant. Values the tenant leaves unset fall back to SystemSetting rows, and
then to code defaults. Bad stored values never raise.
"""

import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings

from .models import SystemSetting

logger = logging.getLogger(__name__)

DEFAULT_SLOT_STEP = 30
DEFAULT_BUFFER = 0


@dataclass(frozen=True)
class SchedulingSettings:
    tz: ZoneInfo
    slot_step_minutes: int
    buffer_minutes: int


def _setting(key: str):
    row = SystemSetting.objects.filter(key=key).first()
    return row.value.strip() if row else None


def _positive_int(raw, default: int, minimum: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric scheduling setting %r", raw)
        return default
    if value < minimum:
        logger.warning("Ignoring out-of-range scheduling setting %r", raw)
        return default
    return value


def _zone(name, fallback: str) -> ZoneInfo:
    for candidate in (name, fallback):
        if not candidate:
            continue
        try:
            return ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, falling back", candidate)
    return ZoneInfo("UTC")


def get_scheduling_settings(tenant) -> SchedulingSettings:
    """
    Return the SchedulingSettings for 'tenant'.

    Order of precedence for each value: tenant column, SystemSetting row,
    Django settings / module default.
    """
    platform_tz = _setting("DEFAULT_TIMEZONE") or settings.DEFAULT_TENANT_TIMEZONE
    tz = _zone(tenant.timezone, platform_tz)

    step = tenant.slot_step_minutes
    if not step:
        step = _positive_int(_setting("DEFAULT_SLOT_STEP"), DEFAULT_SLOT_STEP, minimum=5)

    buffer = tenant.buffer_minutes
    if buffer is None:
        buffer = _positive_int(_setting("DEFAULT_BUFFER"), DEFAULT_BUFFER, minimum=0)

    return SchedulingSettings(tz=tz, slot_step_minutes=step, buffer_minutes=buffer)
