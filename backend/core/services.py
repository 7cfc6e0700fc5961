"""
Core app services — **Service Layer**.

Holds project-wide services that do not belong to a single feature
app.  Cross-app models and choice classes are imported lazily inside
methods (``apps.get_model`` or a local import) so that ``core`` never
creates an import cycle at module load time.
"""

from __future__ import annotations

from typing import Any


# ════════════════════════════════════════════════════════════════════
#  System Constants Service
# ════════════════════════════════════════════════════════════════════

class SystemConstantsService:
    """
    Gathers all system-wide choice enumerations and the currently
    configured complaint types into a single dict for the frontend.

    This service is **stateless** — it does not depend on the requesting
    user.  Complaint types are read through the same ``SlaRuleResolver``
    the reports use, so the dropdown never lists a type the reports
    would ignore.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        """Return all system constants as a dict."""
        from accounts.models import UserRole
        from complaints.models import ComplaintPriority, ComplaintStatus
        from reports.services import SlaRuleResolver

        to_list = SystemConstantsService._choices_to_list

        complaint_types = [
            {"key": rule.key, "name": rule.name, "slaHours": rule.sla_hours}
            for rule in SlaRuleResolver().load()
        ]

        return {
            "complaint_statuses": to_list(ComplaintStatus),
            "complaint_priorities": to_list(ComplaintPriority),
            "roles": to_list(UserRole),
            "complaint_types": complaint_types,
        }

    @staticmethod
    def _choices_to_list(
        choices_class: type,
    ) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` class to a list of
        ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]
