"""
Core app models.

Provides abstract base models and the key/value configuration store
shared across the project.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides self-updating ``created_at`` and
    ``updated_at`` timestamp fields for every concrete child model.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True


class SystemConfig(TimeStampedModel):
    """
    Operator-editable configuration row.

    Complaint-type SLA thresholds are stored here as
    ``COMPLAINT_TYPE_<KEY>`` rows whose ``value`` is a JSON object
    ``{"name": "Water Supply", "slaHours": 24}``.  The reporting engine
    reads these rows on every request and never writes them; CRUD is
    owned by the configuration subsystem (Django admin here).
    """

    key = models.CharField(
        max_length=150,
        unique=True,
        verbose_name="Key",
        db_index=True,
    )
    value = models.TextField(
        blank=True,
        default="",
        verbose_name="Value",
        help_text="Raw value; complaint-type rows hold a JSON object.",
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
        verbose_name = "System Configuration"
        verbose_name_plural = "System Configuration"
        ordering = ["key"]

    def __str__(self):
        return self.key
