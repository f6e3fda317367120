import django.core.validators
from django.db import migrations, models

import configmgr.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SystemSetting",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(max_length=100, unique=True)),
                ("value", models.CharField(max_length=200)),
            ],
        ),
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("slug", models.SlugField(max_length=80, unique=True)),
                ("name", models.CharField(max_length=200)),
                (
                    "timezone",
                    models.CharField(
                        default="Europe/London",
                        max_length=64,
                        validators=[configmgr.models.validate_timezone],
                    ),
                ),
                (
                    "slot_step_minutes",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Granularity between candidate slot starts.",
                        null=True,
                        validators=[django.core.validators.MinValueValidator(5)],
                    ),
                ),
                (
                    "buffer_minutes",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Gap appended after every booking before the next bookable start.",
                        null=True,
                    ),
                ),
                ("active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["slug"],
            },
        ),
    ]
