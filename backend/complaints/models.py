"""
Complaints app models.

The complaint **ledger**: wards, sub-zones and complaints moving through
the civic lifecycle (registered → assigned → in progress → resolved /
closed, with re-opening).  Creation and status transitions are owned by
the complaint-handling subsystem; the reporting engine in ``reports``
only ever reads these tables.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class ComplaintStatus(models.TextChoices):
    """Lifecycle status of a complaint."""

    REGISTERED = "REGISTERED", "Registered"
    ASSIGNED = "ASSIGNED", "Assigned"
    IN_PROGRESS = "IN_PROGRESS", "In Progress"
    RESOLVED = "RESOLVED", "Resolved"
    CLOSED = "CLOSED", "Closed"
    REOPENED = "REOPENED", "Reopened"


class ComplaintPriority(models.TextChoices):
    """Operator-assigned urgency."""

    LOW = "LOW", "Low"
    MEDIUM = "MEDIUM", "Medium"
    HIGH = "HIGH", "High"
    CRITICAL = "CRITICAL", "Critical"


#: Statuses that carry a ``closed_on`` timestamp.
CLOSED_STATUSES: tuple[str, ...] = (
    ComplaintStatus.RESOLVED,
    ComplaintStatus.CLOSED,
)

#: Statuses still awaiting work.
OPEN_STATUSES: tuple[str, ...] = (
    ComplaintStatus.REGISTERED,
    ComplaintStatus.ASSIGNED,
    ComplaintStatus.IN_PROGRESS,
    ComplaintStatus.REOPENED,
)


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Ward(TimeStampedModel):
    """Top-level administrative area of the city."""

    name = models.CharField(
        max_length=150,
        unique=True,
        verbose_name="Ward Name",
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name="Active",
    )

    class Meta:
        verbose_name = "Ward"
        verbose_name_plural = "Wards"
        ordering = ["name"]

    def __str__(self):
        return self.name


class SubZone(TimeStampedModel):
    """A zone inside exactly one ward."""

    ward = models.ForeignKey(
        Ward,
        on_delete=models.CASCADE,
        related_name="sub_zones",
        verbose_name="Ward",
    )
    name = models.CharField(
        max_length=150,
        verbose_name="Sub-Zone Name",
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name="Active",
    )

    class Meta:
        verbose_name = "Sub-Zone"
        verbose_name_plural = "Sub-Zones"
        ordering = ["ward__name", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["ward", "name"],
                name="unique_sub_zone_name_per_ward",
            ),
        ]

    def __str__(self):
        return f"{self.ward.name} / {self.name}"


class Complaint(TimeStampedModel):
    """
    A civic complaint.

    * ``type`` is the complaint-category key matched (case-insensitively)
      against ``COMPLAINT_TYPE_<KEY>`` configuration rows to find its SLA.
    * ``closed_on`` is set only when the status is RESOLVED or CLOSED and
      is never earlier than ``submitted_on``.
    * ``deadline`` is informational; SLA compliance is computed from the
      configured SLA hours, not from this field.
    """

    type = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="Complaint Type",
        db_index=True,
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.REGISTERED,
        verbose_name="Status",
        db_index=True,
    )
    priority = models.CharField(
        max_length=10,
        choices=ComplaintPriority.choices,
        default=ComplaintPriority.MEDIUM,
        verbose_name="Priority",
    )

    # ── Where ───────────────────────────────────────────────────────
    ward = models.ForeignKey(
        Ward,
        on_delete=models.PROTECT,
        related_name="complaints",
        verbose_name="Ward",
    )
    sub_zone = models.ForeignKey(
        SubZone,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaints",
        verbose_name="Sub-Zone",
    )

    # ── Who ─────────────────────────────────────────────────────────
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_complaints",
        verbose_name="Assigned To",
    )
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="submitted_complaints",
        verbose_name="Submitted By",
    )
    contact_phone = models.CharField(
        max_length=20,
        blank=True,
        default="",
        verbose_name="Contact Phone",
    )

    # ── When ────────────────────────────────────────────────────────
    submitted_on = models.DateTimeField(
        default=timezone.now,
        verbose_name="Submitted On",
        db_index=True,
    )
    closed_on = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Closed On",
        db_index=True,
    )
    deadline = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Deadline",
    )

    class Meta:
        verbose_name = "Complaint"
        verbose_name_plural = "Complaints"
        ordering = ["-submitted_on"]
        indexes = [
            models.Index(fields=["ward", "status"], name="complaint_ward_status_idx"),
            models.Index(fields=["assigned_to", "status"], name="complaint_assignee_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(closed_on__isnull=True) | Q(closed_on__gte=F("submitted_on")),
                name="complaint_closed_after_submitted",
            ),
        ]

    def __str__(self):
        return f"Complaint #{self.pk} [{self.status}] {self.type or '-'}"

    def clean(self):
        super().clean()
        if self.closed_on is not None and self.submitted_on and self.closed_on < self.submitted_on:
            raise ValidationError(
                {"closed_on": "Closed-on timestamp cannot precede submission."}
            )
        if self.sub_zone_id is not None and self.sub_zone.ward_id != self.ward_id:
            raise ValidationError(
                {"sub_zone": "Sub-zone must belong to the complaint's ward."}
            )

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES
