"""
Core app serializers.

**Response-only** serializers for the system constants endpoint.  They
work exclusively with the plain dicts produced by
``core.services.SystemConstantsService``.
"""

from __future__ import annotations

from rest_framework import serializers


# ════════════════════════════════════════════════════════════════════
#  System Constants / Enums
# ════════════════════════════════════════════════════════════════════

class ChoiceItemSerializer(serializers.Serializer):
    """
    A single key-label pair representing one choice/enum option.

    Example::

        {"value": "IN_PROGRESS", "label": "In Progress"}
    """

    value = serializers.CharField(
        help_text="Machine-readable value to send in API requests.",
    )
    label = serializers.CharField(
        help_text="Human-readable display label for the UI.",
    )


class ComplaintTypeItemSerializer(serializers.Serializer):
    """
    One configured complaint type.

    Example::

        {"key": "WATER_SUPPLY", "name": "Water Supply", "slaHours": 48.0}
    """

    key = serializers.CharField(help_text="Internal type key (suffix of the COMPLAINT_TYPE_ config row).")
    name = serializers.CharField(help_text="Display name.")
    slaHours = serializers.FloatField(help_text="Allowed hours from submission to closure.")


class SystemConstantsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/constants/``.

    Response shape::

        {
            "complaint_statuses": [{"value": "REGISTERED", "label": "Registered"}, ...],
            "complaint_priorities": [...],
            "roles": [...],
            "complaint_types": [
                {"key": "WATER_SUPPLY", "name": "Water Supply", "slaHours": 48.0},
                ...
            ]
        }
    """

    complaint_statuses = ChoiceItemSerializer(
        many=True,
        help_text="Complaint lifecycle statuses (ComplaintStatus enum).",
    )
    complaint_priorities = ChoiceItemSerializer(
        many=True,
        help_text="Complaint priorities (ComplaintPriority enum).",
    )
    roles = ChoiceItemSerializer(
        many=True,
        help_text="User roles (UserRole enum).",
    )
    complaint_types = ComplaintTypeItemSerializer(
        many=True,
        help_text="Complaint types with a valid SLA configuration.",
    )
