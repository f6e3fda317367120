"""
seed_demo_salon.py
------------------
Seeds (creates or updates) a demo tenant with a small catalogue, two
specialists and their weekly hours, so the slot endpoints return something
useful straight after `migrate`. Safe to run repeatedly; rows are upserted.

Usage:
    python manage.py seed_demo_salon
    python manage.py seed_demo_salon --slug my-salon --timezone Europe/Paris
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from booking.models import Service, ServiceVariant, Staff
from configmgr.models import Tenant
from staff.models import StaffBreak, WorkingHours


CATALOG = [
    {
        "name": "Haircut",
        "description": "Wash, cut and style",
        "variants": [
            {"name": "Short hair", "duration_minutes": 30, "price": Decimal("25.00")},
            {"name": "Long hair", "duration_minutes": 60, "price": Decimal("40.00"), "buffer_after_minutes": 10},
        ],
    },
    {
        "name": "Colour",
        "description": "Full colour",
        "variants": [
            {"name": "Roots", "duration_minutes": 90, "price": Decimal("55.00"), "buffer_before_minutes": 15},
            {"name": "Full head", "duration_minutes": 150, "price": Decimal("95.00"), "buffer_before_minutes": 15},
        ],
    },
    {
        "name": "Manicure",
        "description": "Classic manicure",
        "variants": [
            {"name": "Standard", "duration_minutes": 45, "price": Decimal("20.00")},
        ],
    },
]

SPECIALISTS = [
    {"name": "Alex", "role": "Stylist", "services": ["Haircut", "Colour"]},
    {"name": "Sam", "role": "Nail technician", "services": ["Manicure", "Haircut"]},
]

# Monday..Saturday 09:00-17:00 with a lunch break; Sunday closed.
WEEK = {day: ("09:00", "17:00") for day in range(1, 7)}
LUNCH = ("12:00", "12:30")


class Command(BaseCommand):
    help = "Seed or update a demo salon with services, specialists and working hours."

    def add_arguments(self, parser):
        parser.add_argument("--slug", default="demo-salon")
        parser.add_argument("--timezone", default="Europe/London")

    @transaction.atomic
    def handle(self, *args, **options):
        tenant, _ = Tenant.objects.update_or_create(
            slug=options["slug"],
            defaults={"name": "Demo Salon", "timezone": options["timezone"], "active": True},
        )

        services = {}
        for item in CATALOG:
            svc, _ = Service.objects.update_or_create(
                tenant=tenant,
                name=item["name"],
                defaults={"description": item["description"], "active": True},
            )
            for variant in item["variants"]:
                fields = dict(variant)
                ServiceVariant.objects.update_or_create(service=svc, name=fields.pop("name"), defaults=fields)
            services[svc.name] = svc

        for spec in SPECIALISTS:
            person, _ = Staff.objects.update_or_create(
                tenant=tenant,
                name=spec["name"],
                defaults={"role": spec["role"], "active": True},
            )
            for name in spec["services"]:
                services[name].staff.add(person)
            for day, (start, end) in WEEK.items():
                WorkingHours.objects.update_or_create(
                    staff=person, day_of_week=day, defaults={"start": start, "end": end}
                )
                StaffBreak.objects.get_or_create(staff=person, day_of_week=day, start=LUNCH[0], end=LUNCH[1])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed complete. Tenant={tenant.slug}, Services={len(services)}, Specialists={len(SPECIALISTS)}"
            )
        )
