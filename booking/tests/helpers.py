# booking/tests/helpers.py
#
# Small fixture builders shared by the booking tests.
# Dates are fixed in 2030 so "now" never filters them out.
#
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from booking.models import Appointment, Service, ServiceVariant, Staff
from configmgr.models import Tenant
from staff.models import StaffBreak, WorkingHours

LONDON = ZoneInfo("Europe/London")

MONDAY = date(2030, 6, 3)
SUNDAY = date(2030, 6, 9)


def make_tenant(slug="glow", **kwargs):
    defaults = {"name": slug.title(), "timezone": "Europe/London", "slot_step_minutes": 30, "buffer_minutes": 0}
    defaults.update(kwargs)
    return Tenant.objects.create(slug=slug, **defaults)


def make_staff(tenant, name="S1", hours=None, breaks=None):
    """
    hours/breaks: {day_of_week: ("HH:MM", "HH:MM")}; day_of_week 0=Sunday.
    Defaults to Monday 09:00-17:00 with a 13:00-14:00 break.
    """
    staff = Staff.objects.create(tenant=tenant, name=name)
    if hours is None:
        hours = {1: ("09:00", "17:00")}
    if breaks is None:
        breaks = {1: ("13:00", "14:00")}
    for day, (start, end) in hours.items():
        WorkingHours.objects.create(staff=staff, day_of_week=day, start=start, end=end)
    for day, (start, end) in breaks.items():
        StaffBreak.objects.create(staff=staff, day_of_week=day, start=start, end=end)
    return staff


def make_service(tenant, staff=(), name="Haircut", variants=(("Standard", 60),)):
    service = Service.objects.create(tenant=tenant, name=name)
    for variant_name, minutes in variants:
        ServiceVariant.objects.create(service=service, name=variant_name, duration_minutes=minutes)
    if staff:
        service.staff.set(staff)
    return service


def book(staff, service, start, minutes=60, status=Appointment.CONFIRMED, **kwargs):
    return Appointment.objects.create(
        tenant=staff.tenant,
        staff=staff,
        service=service,
        client_name="Client",
        start_time=start,
        duration_minutes=minutes,
        status=status,
        **kwargs,
    )


def at(day, hhmm, tz=LONDON):
    hours, minutes = map(int, hhmm.split(":"))
    return datetime.combine(day, time(hours, minutes), tzinfo=tz)


def wall_times(slots, tz=LONDON):
    return [slot.start.astimezone(tz).strftime("%H:%M") for slot in slots]
