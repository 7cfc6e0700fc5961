import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Ward",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("name", models.CharField(max_length=150, unique=True, verbose_name="Ward Name")),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Ward",
                "verbose_name_plural": "Wards",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="SubZone",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("name", models.CharField(max_length=150, verbose_name="Sub-Zone Name")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("ward", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sub_zones", to="complaints.ward", verbose_name="Ward")),
            ],
            options={
                "verbose_name": "Sub-Zone",
                "verbose_name_plural": "Sub-Zones",
                "ordering": ["ward__name", "name"],
                "constraints": [
                    models.UniqueConstraint(fields=("ward", "name"), name="unique_sub_zone_name_per_ward"),
                ],
            },
        ),
    ]
