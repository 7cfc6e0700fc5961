import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("complaints", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Complaint",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("type", models.CharField(blank=True, db_index=True, default="", max_length=100, verbose_name="Complaint Type")),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                ("status", models.CharField(choices=[("REGISTERED", "Registered"), ("ASSIGNED", "Assigned"), ("IN_PROGRESS", "In Progress"), ("RESOLVED", "Resolved"), ("CLOSED", "Closed"), ("REOPENED", "Reopened")], db_index=True, default="REGISTERED", max_length=20, verbose_name="Status")),
                ("priority", models.CharField(choices=[("LOW", "Low"), ("MEDIUM", "Medium"), ("HIGH", "High"), ("CRITICAL", "Critical")], default="MEDIUM", max_length=10, verbose_name="Priority")),
                ("contact_phone", models.CharField(blank=True, default="", max_length=20, verbose_name="Contact Phone")),
                ("submitted_on", models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="Submitted On")),
                ("closed_on", models.DateTimeField(blank=True, db_index=True, null=True, verbose_name="Closed On")),
                ("deadline", models.DateTimeField(blank=True, null=True, verbose_name="Deadline")),
                ("assigned_to", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="assigned_complaints", to=settings.AUTH_USER_MODEL, verbose_name="Assigned To")),
                ("submitted_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="submitted_complaints", to=settings.AUTH_USER_MODEL, verbose_name="Submitted By")),
                ("sub_zone", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="complaints", to="complaints.subzone", verbose_name="Sub-Zone")),
                ("ward", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="complaints", to="complaints.ward", verbose_name="Ward")),
            ],
            options={
                "verbose_name": "Complaint",
                "verbose_name_plural": "Complaints",
                "ordering": ["-submitted_on"],
                "indexes": [
                    models.Index(fields=["ward", "status"], name="complaint_ward_status_idx"),
                    models.Index(fields=["assigned_to", "status"], name="complaint_assignee_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("closed_on__isnull", True), ("closed_on__gte", models.F("submitted_on")), _connector="OR"), name="complaint_closed_after_submitted"),
                ],
            },
        ),
    ]
