"""
Reports app serializers.

``ReportQuerySerializer`` validates and normalises the query string
shared by every reporting endpoint and turns it into a ``ReportQuery``.
Everything else here is **response-only**: the services return plain
dicts and these serializers fix the output schema (camelCase keys, as
consumed by the dashboard front end).
"""

from __future__ import annotations

from typing import Any

from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework import serializers

from complaints.models import ComplaintPriority, ComplaintStatus
from core.constants import (
    DEFAULT_PAGE_SIZE,
    EARLIEST_REPORT_DATE,
    LATEST_REPORT_DATE,
    MAX_PAGE_SIZE,
    MAX_REPORT_SPAN_DAYS,
)

from .services import ReportQuery

#: Query-string values meaning "no filter".
ALL_VALUES = {"all", "*"}


# ═══════════════════════════════════════════════════════════════════
#  1. Query-Parameter Serializer
# ═══════════════════════════════════════════════════════════════════


class LenientDateField(serializers.DateField):
    """
    ``DateField`` that also accepts ISO 8601 datetimes.

    A datetime is reduced to its calendar date in the active time zone,
    so ``2024-01-01T23:30:00-05:00`` becomes ``2024-01-02`` under UTC.
    """

    def to_internal_value(self, value):
        if isinstance(value, str) and ("T" in value or " " in value.strip()):
            parsed = parse_datetime(value.strip())
            if parsed is not None:
                if not timezone.is_aware(parsed):
                    return parsed.date()
                try:
                    return timezone.localtime(parsed).date()
                except OverflowError:
                    raise serializers.ValidationError("Date is out of range.")
        return super().to_internal_value(value)


def _normalise_choice(value: str) -> str:
    return value.strip().upper().replace("-", "_").replace(" ", "_")


class ReportQuerySerializer(serializers.Serializer):
    """
    Validates the reporting query string.

    Query Parameters
    ----------------
    ``from`` / ``to`` : date — inclusive window (ISO date or datetime)
    ``ward``          : int  — ward id, or ``all``
    ``type``          : str  — complaint type key or name, or ``all``
    ``status``        : str  — ``ComplaintStatus`` value, case-insensitive
    ``priority``      : str  — ``ComplaintPriority`` value, case-insensitive
    ``page``          : int  — ≥ 1, default 1
    ``limit``         : int  — 1..10000, default 1000

    Empty values are treated as absent.  ``from`` and ``to`` are Python
    keywords, so they are attached in ``get_fields``.
    """

    ward = serializers.CharField(required=False, help_text="Ward id, or 'all'.")
    type = serializers.CharField(required=False, max_length=100, help_text="Complaint type key or display name, or 'all'.")
    status = serializers.CharField(required=False, help_text="Complaint status, e.g. 'in_progress' or 'In Progress'.")
    priority = serializers.CharField(required=False, help_text="Complaint priority, e.g. 'high'.")
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=MAX_PAGE_SIZE,
        default=DEFAULT_PAGE_SIZE,
    )

    def get_fields(self):
        fields = super().get_fields()
        fields["from"] = LenientDateField(
            required=False,
            source="start_date",
            help_text="Window start (inclusive), ISO 8601 date.",
        )
        fields["to"] = LenientDateField(
            required=False,
            source="end_date",
            help_text="Window end (inclusive), ISO 8601 date.",
        )
        return fields

    def to_internal_value(self, data):
        if hasattr(data, "items"):
            data = {key: value for key, value in data.items() if value not in ("", None)}
        return super().to_internal_value(data)

    def validate_ward(self, value: str) -> int | None:
        value = value.strip()
        if value.lower() in ALL_VALUES:
            return None
        try:
            ward_id = int(value)
        except ValueError:
            raise serializers.ValidationError("Ward must be a numeric id or 'all'.")
        if ward_id < 1:
            raise serializers.ValidationError("Ward must be a positive id.")
        return ward_id

    def validate_type(self, value: str) -> str | None:
        value = value.strip()
        if not value or value.lower() in ALL_VALUES:
            return None
        return value

    def validate_status(self, value: str) -> str | None:
        return self._validate_choice(value, ComplaintStatus)

    def validate_priority(self, value: str) -> str | None:
        return self._validate_choice(value, ComplaintPriority)

    @staticmethod
    def _validate_choice(value: str, choices) -> str | None:
        if value.strip().lower() in ALL_VALUES:
            return None
        normalised = _normalise_choice(value)
        if normalised not in choices.values:
            raise serializers.ValidationError(
                f"'{value}' is not valid. Options: {', '.join(choices.values)}."
            )
        return normalised

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        start = attrs.get("start_date")
        end = attrs.get("end_date")
        for param, value in (("from", start), ("to", end)):
            if value is not None and not EARLIEST_REPORT_DATE <= value <= LATEST_REPORT_DATE:
                raise serializers.ValidationError({
                    param: (
                        f"Date must be between {EARLIEST_REPORT_DATE.isoformat()} "
                        f"and {LATEST_REPORT_DATE.isoformat()}."
                    ),
                })
        if start and end and start > end:
            raise serializers.ValidationError({"from": "'from' must not be later than 'to'."})
        if start and end and (end - start).days + 1 > MAX_REPORT_SPAN_DAYS:
            raise serializers.ValidationError({
                "to": f"The report window may not exceed {MAX_REPORT_SPAN_DAYS} days.",
            })
        return attrs

    def to_query(self) -> ReportQuery:
        """Build the immutable ``ReportQuery`` from validated data."""
        data = self.validated_data
        return ReportQuery(
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            ward=data.get("ward"),
            complaint_type=data.get("type"),
            status=data.get("status"),
            priority=data.get("priority"),
            page=data.get("page", 1),
            limit=data.get("limit", DEFAULT_PAGE_SIZE),
        )


# ═══════════════════════════════════════════════════════════════════
#  2. Shared blocks
# ═══════════════════════════════════════════════════════════════════


class ComplianceSerializer(serializers.Serializer):
    """
    SLA compliance over eligible closed complaints.

    Example::

        {"compliance": 50.0, "eligible": 4, "compliant": 2}
    """

    compliance = serializers.FloatField(help_text="Compliant / eligible × 100, one decimal; 0 when nothing is eligible.")
    eligible = serializers.IntegerField(help_text="Closed complaints whose type has an SLA.")
    compliant = serializers.IntegerField(help_text="Eligible complaints closed within their SLA.")


class TrendBucketSerializer(serializers.Serializer):
    date = serializers.DateField()
    submitted = serializers.IntegerField()
    resolved = serializers.IntegerField()
    compliancePct = serializers.FloatField()


class GroupMetricsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    resolved = serializers.IntegerField()
    avgResolutionTime = serializers.FloatField(help_text="Mean days to close (rounded up per complaint).")
    resolutionRate = serializers.FloatField(
        help_text="Resolved / total × 100. A resolution ratio, not SLA compliance.",
    )


class WardBreakdownSerializer(GroupMetricsSerializer):
    wardId = serializers.IntegerField()
    wardName = serializers.CharField()


class CategoryBreakdownSerializer(GroupMetricsSerializer):
    type = serializers.CharField(help_text="Canonical complaint type key.")
    label = serializers.CharField()


# ═══════════════════════════════════════════════════════════════════
#  3. Dashboard summary
# ═══════════════════════════════════════════════════════════════════


class SummaryComplaintsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    byStatus = serializers.DictField(child=serializers.IntegerField())


class SummaryTodaySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    resolved = serializers.IntegerField()


class UserRoleCountSerializer(serializers.Serializer):
    role = serializers.CharField()
    count = serializers.IntegerField()


class DashboardSummarySerializer(serializers.Serializer):
    """
    Response serializer for ``GET /api/reports/summary/``.

    ``users`` is only populated for administrators.
    """

    complaints = SummaryComplaintsSerializer()
    today = SummaryTodaySerializer()
    sla = ComplianceSerializer()
    users = UserRoleCountSerializer(many=True)


# ═══════════════════════════════════════════════════════════════════
#  4. Detailed analytics
# ═══════════════════════════════════════════════════════════════════


class AnalyticsComplaintsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    resolved = serializers.IntegerField()
    pending = serializers.IntegerField()
    overdue = serializers.IntegerField()


class AnalyticsSlaSerializer(ComplianceSerializer):
    avgResolutionTime = serializers.FloatField()
    target = serializers.IntegerField(help_text="Advertised resolution target in hours.")


class PerformanceSerializer(serializers.Serializer):
    available = serializers.BooleanField()
    reason = serializers.CharField()
    metrics = serializers.DictField(allow_null=True)


class PaginationSerializer(serializers.Serializer):
    page = serializers.IntegerField()
    pageSize = serializers.IntegerField()
    totalRecords = serializers.IntegerField()
    totalPages = serializers.IntegerField()


class AnalyticsMetadataSerializer(serializers.Serializer):
    pagination = PaginationSerializer()
    generatedAt = serializers.DateTimeField()


class AnalyticsReportSerializer(serializers.Serializer):
    """
    Response serializer for ``GET /api/reports/analytics/``.

    ``sla.compliance`` is guaranteed to equal the summary's
    ``sla.compliance`` for the same user and query.
    """

    complaints = AnalyticsComplaintsSerializer()
    sla = AnalyticsSlaSerializer()
    trends = TrendBucketSerializer(many=True)
    wards = WardBreakdownSerializer(many=True)
    categories = CategoryBreakdownSerializer(many=True)
    performance = PerformanceSerializer()
    metadata = AnalyticsMetadataSerializer()


# ═══════════════════════════════════════════════════════════════════
#  5. Heatmap
# ═══════════════════════════════════════════════════════════════════


class HeatmapMetaSerializer(serializers.Serializer):
    typeKeys = serializers.ListField(child=serializers.CharField(allow_blank=True))
    geoIds = serializers.ListField(child=serializers.IntegerField())
    geoLevel = serializers.ChoiceField(choices=["ward", "subZone"])
    wardId = serializers.IntegerField(allow_null=True)


class HeatmapSerializer(serializers.Serializer):
    """
    Response serializer for ``GET /api/reports/heatmap/``.

    ``matrix[i][j]`` is the number of complaints for ``yLabels[i]`` ×
    ``xLabels[j]``.
    """

    xLabels = serializers.ListField(child=serializers.CharField())
    yLabels = serializers.ListField(child=serializers.CharField())
    matrix = serializers.ListField(child=serializers.ListField(child=serializers.IntegerField()))
    xAxisLabel = serializers.CharField()
    yAxisLabel = serializers.CharField()
    meta = HeatmapMetaSerializer()


# ═══════════════════════════════════════════════════════════════════
#  6. Deadline status
# ═══════════════════════════════════════════════════════════════════


class DeadlineCountsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    overdue = serializers.IntegerField()
    warning = serializers.IntegerField()
    onTrack = serializers.IntegerField()


class PriorityDeadlineSerializer(DeadlineCountsSerializer):
    priority = serializers.CharField()


class DeadlineStatusSerializer(serializers.Serializer):
    """Response serializer for ``GET /api/reports/sla/``."""

    priorities = PriorityDeadlineSerializer(many=True)
    totals = DeadlineCountsSerializer()
    generatedAt = serializers.DateTimeField()


# ═══════════════════════════════════════════════════════════════════
#  7. Export
# ═══════════════════════════════════════════════════════════════════


class ExportSummarySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    resolved = serializers.IntegerField()
    pending = serializers.IntegerField()


class ComplaintExportSerializer(serializers.Serializer):
    """JSON rendition of ``GET /api/reports/export/?format=json``."""

    columns = serializers.ListField(child=serializers.CharField())
    rows = serializers.ListField(child=serializers.ListField(child=serializers.CharField()))
    summary = ExportSummarySerializer()
    exportedAt = serializers.DateTimeField()
