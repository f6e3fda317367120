import django.db.models.deletion
from django.db import migrations, models

import staff.models

DAY_CHOICES = [
    (0, "Sunday"),
    (1, "Monday"),
    (2, "Tuesday"),
    (3, "Wednesday"),
    (4, "Thursday"),
    (5, "Friday"),
    (6, "Saturday"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("booking", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WorkingHours",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("day_of_week", models.PositiveSmallIntegerField(choices=DAY_CHOICES)),
                ("start", models.CharField(max_length=5, validators=[staff.models.validate_hhmm])),
                ("end", models.CharField(max_length=5, validators=[staff.models.validate_hhmm])),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="working_hours",
                        to="booking.staff",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "working hours",
                "ordering": ["staff_id", "day_of_week"],
            },
        ),
        migrations.AddConstraint(
            model_name="workinghours",
            constraint=models.UniqueConstraint(fields=("staff", "day_of_week"), name="uniq_working_hours_per_day"),
        ),
        migrations.CreateModel(
            name="StaffBreak",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("day_of_week", models.PositiveSmallIntegerField(choices=DAY_CHOICES)),
                ("start", models.CharField(max_length=5, validators=[staff.models.validate_hhmm])),
                ("end", models.CharField(max_length=5, validators=[staff.models.validate_hhmm])),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="breaks",
                        to="booking.staff",
                    ),
                ),
            ],
            options={
                "ordering": ["staff_id", "day_of_week", "start"],
            },
        ),
        migrations.CreateModel(
            name="CustomScheduleDay",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField()),
                (
                    "intervals",
                    models.JSONField(blank=True, default=list, validators=[staff.models.validate_intervals]),
                ),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="custom_schedule",
                        to="booking.staff",
                    ),
                ),
            ],
            options={
                "ordering": ["staff_id", "date"],
            },
        ),
        migrations.AddConstraint(
            model_name="customscheduleday",
            constraint=models.UniqueConstraint(fields=("staff", "date"), name="uniq_custom_schedule_per_date"),
        ),
        migrations.CreateModel(
            name="TimeOff",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("reason", models.CharField(blank=True, max_length=200)),
                (
                    "staff",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="time_off",
                        to="booking.staff",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "time off",
                "ordering": ["staff_id", "start_date"],
            },
        ),
    ]
