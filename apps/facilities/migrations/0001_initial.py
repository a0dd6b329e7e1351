from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Facility",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150)),
                ("description", models.TextField(blank=True)),
                ("image_url", models.URLField(blank=True)),
                ("price_per_hour", models.PositiveIntegerField(help_text="Hourly price in whole currency units.")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Facility",
                "verbose_name_plural": "Facilities",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("price_per_hour__gt", 0)),
                        name="facility_positive_price",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentMethod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bank_name", models.CharField(max_length=100)),
                ("account_number", models.CharField(max_length=50)),
                ("account_holder", models.CharField(max_length=150)),
                ("is_active", models.BooleanField(default=True)),
                (
                    "is_receiver",
                    models.BooleanField(default=True, help_text="Offered to customers as a payment destination."),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Payment method",
                "verbose_name_plural": "Payment methods",
                "ordering": ["bank_name"],
            },
        ),
        migrations.CreateModel(
            name="OperatingHours",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "day_of_week",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (0, "Monday"),
                            (1, "Tuesday"),
                            (2, "Wednesday"),
                            (3, "Thursday"),
                            (4, "Friday"),
                            (5, "Saturday"),
                            (6, "Sunday"),
                        ]
                    ),
                ),
                ("open_time", models.TimeField()),
                ("close_time", models.TimeField()),
                ("is_open", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "facility",
                    models.ForeignKey(
                        blank=True,
                        help_text="Leave empty for the schedule shared by all facilities.",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="operating_hours",
                        to="facilities.facility",
                    ),
                ),
            ],
            options={
                "verbose_name": "Operating hours",
                "verbose_name_plural": "Operating hours",
                "ordering": ["facility_id", "day_of_week"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("facility", "day_of_week"),
                        name="operating_hours_unique_facility_day",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("facility__isnull", True)),
                        fields=("day_of_week",),
                        name="operating_hours_unique_global_day",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("is_open", False), ("close_time__gt", models.F("open_time")), _connector="OR"),
                        name="operating_hours_close_after_open",
                    ),
                ],
            },
        ),
    ]
