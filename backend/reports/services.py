"""
Reports app services — **Service Layer**.

The SLA compliance & analytics engine.  Every reporting endpoint reads
the complaint ledger through the classes defined here; views only
validate query parameters and serialise the returned dicts.

╔══════════════════════════════════════════════════════════════════════╗
║  CONSISTENCY RULEBOOK                                              ║
║                                                                    ║
║  1. Row visibility is decided ONLY by ``ReportScope`` (dispatched  ║
║     through ``core.domain.access.resolve_scope_predicate``).       ║
║     Never filter by ward / assignee anywhere else.                 ║
║                                                                    ║
║  2. Compliance is computed ONLY by ``ComplianceCalculatorService``.║
║     The summary and the detailed report call the same method on   ║
║     the same scoped queryset and window, so they always agree.    ║
║                                                                    ║
║  3. Every percentage goes through ``percentage()`` and every       ║
║     displayed decimal through ``round_half_up()``.                 ║
║                                                                    ║
║  4. SLA rules are loaded once per request by ``SlaRuleResolver``   ║
║     and handed to every component.  Nothing is cached.             ║
║                                                                    ║
║  5. Cross-app models are resolved lazily with                      ║
║     ``apps.get_model`` inside methods.                             ║
╚══════════════════════════════════════════════════════════════════════╝

Every service accepts an optional base ``complaints`` queryset and an
optional pre-loaded ``rules`` set so it can be exercised without the
default manager or configuration table.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Iterable, Iterator

from django.apps import apps
from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from core.constants import (
    COMPLAINT_TYPE_CONFIG_PREFIX,
    DEADLINE_WARNING_HOURS,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TREND_DAYS,
    EXPORT_DESCRIPTION_MAX_LENGTH,
    MAX_REPORT_SPAN_DAYS,
    SLA_MAX_HOURS,
    SLA_TARGET_HOURS,
    UNCATEGORISED_LABEL,
)
from core.domain.access import (
    ScopeRules,
    get_user_role_name,
    require_role,
    resolve_scope_predicate,
)
from core.domain.exceptions import DomainError, PermissionDenied
from core.permissions_constants import ReportAccess, Roles

if TYPE_CHECKING:
    from accounts.models import User

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════
#  Numeric helpers
# ════════════════════════════════════════════════════════════════════

def round_half_up(value: float | int | Decimal, places: int = 1) -> float:
    """
    Round ``value`` half-up to ``places`` decimals.

    Python's ``round`` uses banker's rounding (``round(0.25, 1) == 0.2``);
    reports must round ``x.x5`` up, so the value goes through ``Decimal``.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> float:
    """``part / whole × 100`` rounded to one decimal; ``0.0`` when ``whole`` is 0."""
    if not whole:
        return 0.0
    return round_half_up(Decimal(part) * 100 / Decimal(whole))


def resolution_days(submitted_on: datetime, closed_on: datetime) -> int:
    """Whole days taken to close a complaint, rounded up (``ceil``)."""
    seconds = (closed_on - submitted_on).total_seconds()
    return math.ceil(seconds / 86400)


# ════════════════════════════════════════════════════════════════════
#  Query value objects
# ════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ReportWindow:
    """
    Half-open time window ``[start, end)`` of aware datetimes.

    Either bound may be ``None`` (unbounded).  Windows are built from
    inclusive calendar dates in the active time zone, so
    ``from=2024-01-01&to=2024-01-03`` covers three whole local days.
    """

    start: datetime | None = None
    end: datetime | None = None

    @classmethod
    def from_dates(cls, start_date: date | None, end_date: date | None) -> ReportWindow:
        tz = timezone.get_current_timezone()
        start = end = None
        if start_date is not None:
            start = timezone.make_aware(datetime.combine(start_date, time.min), tz)
        if end_date is not None:
            end = timezone.make_aware(
                datetime.combine(end_date + timedelta(days=1), time.min), tz,
            )
        return cls(start=start, end=end)

    @classmethod
    def for_day(cls, day: date) -> ReportWindow:
        return cls.from_dates(day, day)

    def q(self, field_name: str) -> Q:
        """Return a ``Q`` restricting ``field_name`` to the window."""
        predicate = Q()
        if self.start is not None:
            predicate &= Q(**{f"{field_name}__gte": self.start})
        if self.end is not None:
            predicate &= Q(**{f"{field_name}__lt": self.end})
        return predicate


@dataclass(frozen=True)
class ReportQuery:
    """Validated, normalised report query parameters."""

    start_date: date | None = None
    end_date: date | None = None
    ward: int | None = None
    complaint_type: str | None = None
    status: str | None = None
    priority: str | None = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def window(self) -> ReportWindow:
        return ReportWindow.from_dates(self.start_date, self.end_date)

    def apply_filters(self, queryset: QuerySet, rules: SlaRuleSet) -> QuerySet:
        """
        Narrow ``queryset`` by the type / status / priority filters.

        A type filter matches the raw value case-insensitively and, when
        it resolves to a configured rule, also the rule's key and name.
        """
        if self.complaint_type:
            aliases = {self.complaint_type}
            rule = rules.rule_for(self.complaint_type)
            if rule is not None:
                aliases.update((rule.key, rule.name))
            type_q = Q()
            for alias in sorted(aliases):
                type_q |= Q(type__iexact=alias)
            queryset = queryset.filter(type_q)
        if self.status:
            queryset = queryset.filter(status=self.status)
        if self.priority:
            queryset = queryset.filter(priority=self.priority)
        return queryset


# ════════════════════════════════════════════════════════════════════
#  Role-based Scope Filter
# ════════════════════════════════════════════════════════════════════

def _administrator_scope(ctx: ReportScope) -> Q:
    if ctx.requested_ward is None:
        return Q()
    return Q(ward_id=ctx.requested_ward)


#: Role → complaint visibility.  Roles missing here see nothing.
#: A ward officer's ``requested_ward`` is never consulted.
COMPLAINT_SCOPE_RULES: ScopeRules = {
    Roles.ADMINISTRATOR: _administrator_scope,
    Roles.WARD_OFFICER: lambda ctx: Q(ward_id=ctx.ward_id),
    Roles.MAINTENANCE_TEAM: lambda ctx: Q(assigned_to_id=ctx.user_id),
}


@dataclass(frozen=True)
class ReportScope:
    """
    Immutable visibility context for one request.

    Built once from the authenticated user and the validated ``ward``
    parameter, then handed to every aggregator.
    """

    role: str | None
    user_id: int | None
    ward_id: int | None = None
    requested_ward: int | None = None

    @classmethod
    def for_user(cls, user: User, requested_ward: int | None = None) -> ReportScope:
        return cls(
            role=get_user_role_name(user),
            user_id=getattr(user, "pk", None),
            ward_id=getattr(user, "ward_id", None),
            requested_ward=requested_ward,
        )

    @property
    def is_administrator(self) -> bool:
        return self.role == Roles.ADMINISTRATOR

    @property
    def effective_ward(self) -> int | None:
        """The single ward this scope is pinned to, if any."""
        if self.is_administrator:
            return self.requested_ward
        if self.role == Roles.WARD_OFFICER:
            return self.ward_id
        return None

    def predicate(self) -> Q:
        """
        Return the complaint predicate for this scope.

        Raises:
            PermissionDenied: The role has no visibility, or a ward
                officer has no home ward.
        """
        if self.role == Roles.WARD_OFFICER and self.ward_id is None:
            raise PermissionDenied("Ward officer account has no ward assigned.")
        predicate = resolve_scope_predicate(
            self.role, self, scope_rules=COMPLAINT_SCOPE_RULES,
        )
        if predicate is None:
            raise PermissionDenied(
                f"Role '{self.role}' may not view complaint reports."
            )
        return predicate

    def apply(self, queryset: QuerySet) -> QuerySet:
        return queryset.filter(self.predicate())

    def ensure_can_view_ward(self, ward_id: int | None) -> None:
        """
        Reject an explicit request for a ward outside this scope.

        Unlike ``predicate()``, which silently pins a ward officer to
        their own ward, this is used by surfaces where the requested
        ward changes the *shape* of the answer (the heatmap).
        """
        if ward_id is None or self.is_administrator:
            return
        if self.role == Roles.WARD_OFFICER and ward_id == self.ward_id:
            return
        raise PermissionDenied("You may only view data for your own ward.")


# ════════════════════════════════════════════════════════════════════
#  SLA Rule Resolver
# ════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SlaRule:
    """One configured complaint type and its allowed resolution time."""

    key: str
    name: str
    sla_hours: float


class SlaRuleSet:
    """
    Request-lifetime lookup of SLA rules.

    Lookups tolerate case differences and accept either the internal
    key (``WATER_SUPPLY``) or the display name (``Water Supply``).
    When a key and another rule's name collide, the key wins.
    """

    def __init__(self, rules: Iterable[SlaRule] = ()) -> None:
        self._rules: list[SlaRule] = list(rules)
        self._index: dict[str, SlaRule] = {}
        for rule in self._rules:
            self._register(rule.name, rule)
        for rule in self._rules:
            self._register(rule.key, rule)

    def _register(self, alias: str, rule: SlaRule) -> None:
        if not alias:
            return
        for variant in (alias, alias.upper(), alias.lower()):
            self._index[variant] = rule

    def __iter__(self) -> Iterator[SlaRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def rule_for(self, complaint_type: str | None) -> SlaRule | None:
        value = (complaint_type or "").strip()
        if not value:
            return None
        for variant in (value, value.upper(), value.lower()):
            rule = self._index.get(variant)
            if rule is not None:
                return rule
        return None

    def hours_for(self, complaint_type: str | None) -> float | None:
        rule = self.rule_for(complaint_type)
        return rule.sla_hours if rule is not None else None

    def canonical_key(self, complaint_type: str | None) -> str:
        """Configured key for ``complaint_type``, else the stripped value in upper case."""
        rule = self.rule_for(complaint_type)
        if rule is not None:
            return rule.key
        return (complaint_type or "").strip().upper()

    def label_for(self, complaint_type: str | None) -> str:
        value = (complaint_type or "").strip()
        if not value:
            return UNCATEGORISED_LABEL
        rule = self.rule_for(value)
        return rule.name if rule is not None else value


class SlaRuleResolver:
    """
    Builds an ``SlaRuleSet`` from ``core.SystemConfig`` rows.

    Rows are keyed ``COMPLAINT_TYPE_<KEY>`` and hold JSON
    ``{"name": "...", "slaHours": 48}``.  Unusable rows are skipped
    with a warning; a bad row never fails the request.
    """

    def __init__(self, configs: QuerySet | None = None) -> None:
        self._configs = configs

    def load(self) -> SlaRuleSet:
        if self._configs is not None:
            configs = self._configs
        else:
            SystemConfig = apps.get_model("core", "SystemConfig")
            configs = SystemConfig.objects.all()

        rows = (
            configs
            .filter(is_active=True, key__startswith=COMPLAINT_TYPE_CONFIG_PREFIX)
            .order_by("key")
            .values_list("key", "value")
        )
        rules = []
        for config_key, raw_value in rows:
            rule = self.parse_row(config_key, raw_value)
            if rule is not None:
                rules.append(rule)
        logger.debug("Loaded %d SLA rule(s).", len(rules))
        return SlaRuleSet(rules)

    @staticmethod
    def parse_row(config_key: str, raw_value: Any) -> SlaRule | None:
        """Parse one configuration row, or return ``None`` if unusable."""
        type_key = config_key[len(COMPLAINT_TYPE_CONFIG_PREFIX):].strip()
        if not type_key:
            logger.warning("Skipping SLA config %r: empty type key.", config_key)
            return None

        try:
            payload = json.loads(raw_value)
        except (TypeError, ValueError):
            logger.warning("Skipping SLA config %r: value is not valid JSON.", config_key)
            return None
        if not isinstance(payload, dict):
            logger.warning("Skipping SLA config %r: value is not a JSON object.", config_key)
            return None

        raw_hours = payload.get("slaHours")
        hours = None
        if isinstance(raw_hours, (int, float, str)) and not isinstance(raw_hours, bool):
            try:
                hours = float(raw_hours)
            except (ValueError, OverflowError):
                hours = None
        if hours is None:
            logger.warning("Skipping SLA config %r: slaHours is not numeric.", config_key)
            return None
        if not math.isfinite(hours) or hours <= 0:
            logger.warning("Skipping SLA config %r: slaHours must be positive.", config_key)
            return None
        if hours > SLA_MAX_HOURS:
            logger.warning(
                "Skipping SLA config %r: slaHours exceeds %d.", config_key, SLA_MAX_HOURS,
            )
            return None

        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            name = type_key
        return SlaRule(key=type_key, name=name.strip(), sla_hours=float(hours))


# ════════════════════════════════════════════════════════════════════
#  Compliance Calculator — Single Source of Truth
# ════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ComplianceResult:
    eligible: int
    compliant: int
    compliance: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "compliance": self.compliance,
            "eligible": self.eligible,
            "compliant": self.compliant,
        }


class ComplianceCalculatorService:
    """
    **Single Source of Truth** for SLA compliance.

    A closed complaint (RESOLVED / CLOSED with ``closed_on`` set) is
    *eligible* when its type resolves an SLA rule, and *compliant* when

    .. math::

        closed\\_on \\le submitted\\_on + sla\\_hours

    using exact hour arithmetic.  Complaints of unconfigured types are
    excluded from both numerator and denominator.

    Every surface that reports compliance (dashboard summary, detailed
    analytics, daily trends) MUST go through this class.
    """

    def __init__(self, rules: SlaRuleSet) -> None:
        self.rules = rules

    @staticmethod
    def is_compliant(submitted_on: datetime, closed_on: datetime, sla_hours: float) -> bool:
        return closed_on <= submitted_on + timedelta(hours=sla_hours)

    def evaluate(
        self,
        complaint_type: str | None,
        submitted_on: datetime,
        closed_on: datetime,
    ) -> bool | None:
        """Compliance of one closed complaint, or ``None`` if not eligible."""
        sla_hours = self.rules.hours_for(complaint_type)
        if sla_hours is None:
            return None
        return self.is_compliant(submitted_on, closed_on, sla_hours)

    @staticmethod
    def closed_in_window(queryset: QuerySet, window: ReportWindow | None = None) -> QuerySet:
        from complaints.models import CLOSED_STATUSES

        closed = queryset.filter(status__in=CLOSED_STATUSES, closed_on__isnull=False)
        if window is not None:
            closed = closed.filter(window.q("closed_on"))
        return closed

    def compute(self, queryset: QuerySet, window: ReportWindow | None = None) -> ComplianceResult:
        eligible = compliant = 0
        rows = (
            self.closed_in_window(queryset, window)
            .values_list("type", "submitted_on", "closed_on")
            .iterator()
        )
        for complaint_type, submitted_on, closed_on in rows:
            outcome = self.evaluate(complaint_type, submitted_on, closed_on)
            if outcome is None:
                continue
            eligible += 1
            if outcome:
                compliant += 1
        return ComplianceResult(
            eligible=eligible,
            compliant=compliant,
            compliance=percentage(compliant, eligible),
        )

    def average_resolution_days(
        self,
        queryset: QuerySet,
        window: ReportWindow | None = None,
    ) -> float:
        """Mean ``ceil`` days-to-close of complaints closed in ``window``; 0 when none."""
        total = count = 0
        rows = (
            self.closed_in_window(queryset, window)
            .values_list("submitted_on", "closed_on")
            .iterator()
        )
        for submitted_on, closed_on in rows:
            total += resolution_days(submitted_on, closed_on)
            count += 1
        if not count:
            return 0.0
        return round_half_up(Decimal(total) / Decimal(count))


# ════════════════════════════════════════════════════════════════════
#  Trend Aggregator
# ════════════════════════════════════════════════════════════════════

@dataclass
class _TrendBucket:
    submitted: int = 0
    resolved: int = 0
    eligible: int = 0
    compliant: int = 0


class TrendAggregationService:
    """
    Dense daily time series of submitted / resolved / compliance.

    Every calendar day of ``[start_date, end_date]`` gets a bucket, even
    when nothing happened on it.  Days are local dates in the active
    time zone.  ``resolved`` counts only status CLOSED.
    """

    def __init__(self, calculator: ComplianceCalculatorService) -> None:
        self.calculator = calculator

    @staticmethod
    def resolve_dates(
        start_date: date | None,
        end_date: date | None,
        today: date | None = None,
    ) -> tuple[date, date]:
        """Fill missing bounds from the ``DEFAULT_TREND_DAYS`` window."""
        span = timedelta(days=DEFAULT_TREND_DAYS - 1)
        if start_date is None and end_date is None:
            end_date = today or timezone.localdate()
            start_date = end_date - span
        elif start_date is None:
            start_date = end_date - span
        elif end_date is None:
            end_date = start_date + span
        return start_date, end_date

    def build(
        self,
        queryset: QuerySet,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[dict[str, Any]]:
        from complaints.models import ComplaintStatus

        start_date, end_date = self.resolve_dates(start_date, end_date)
        span = (end_date - start_date).days + 1
        if span > MAX_REPORT_SPAN_DAYS:
            raise DomainError(
                f"Trend window of {span} days exceeds {MAX_REPORT_SPAN_DAYS} days."
            )
        window = ReportWindow.from_dates(start_date, end_date)

        buckets: dict[date, _TrendBucket] = {}
        day = start_date
        while day <= end_date:
            buckets[day] = _TrendBucket()
            day += timedelta(days=1)

        submitted = (
            queryset.filter(window.q("submitted_on"))
            .values_list("submitted_on", flat=True)
            .iterator()
        )
        for submitted_on in submitted:
            bucket = buckets.get(timezone.localtime(submitted_on).date())
            if bucket is not None:
                bucket.submitted += 1

        closed = (
            queryset.filter(status=ComplaintStatus.CLOSED, closed_on__isnull=False)
            .filter(window.q("closed_on"))
            .values_list("type", "submitted_on", "closed_on")
            .iterator()
        )
        for complaint_type, submitted_on, closed_on in closed:
            bucket = buckets.get(timezone.localtime(closed_on).date())
            if bucket is None:
                continue
            bucket.resolved += 1
            outcome = self.calculator.evaluate(complaint_type, submitted_on, closed_on)
            if outcome is not None:
                bucket.eligible += 1
                bucket.compliant += int(outcome)

        return [
            {
                "date": day.isoformat(),
                "submitted": bucket.submitted,
                "resolved": bucket.resolved,
                "compliancePct": percentage(bucket.compliant, bucket.eligible),
            }
            for day, bucket in buckets.items()
        ]


# ════════════════════════════════════════════════════════════════════
#  Ward / Category Breakdown Aggregators
# ════════════════════════════════════════════════════════════════════

@dataclass
class _GroupTally:
    total: int = 0
    resolved: int = 0
    resolution_days: list[int] = field(default_factory=list)

    def metrics(self) -> dict[str, Any]:
        if self.resolution_days:
            avg = round_half_up(
                Decimal(sum(self.resolution_days)) / Decimal(len(self.resolution_days))
            )
        else:
            avg = 0.0
        return {
            "total": self.total,
            "resolved": self.resolved,
            "avgResolutionTime": avg,
            "resolutionRate": percentage(self.resolved, self.total),
        }


class BreakdownAggregationService:
    """
    Per-ward and per-category totals.

    The population of each group is the in-scope complaints submitted in
    the window.  ``resolutionRate`` is ``resolved / total × 100``: a
    resolution-ratio score, **not** SLA compliance.
    """

    def __init__(self, rules: SlaRuleSet) -> None:
        self.rules = rules

    def _tally(
        self,
        queryset: QuerySet,
        window: ReportWindow,
        group_field: str,
    ) -> dict[Any, _GroupTally]:
        from complaints.models import CLOSED_STATUSES

        tallies: dict[Any, _GroupTally] = {}
        rows = (
            queryset.filter(window.q("submitted_on"))
            .values_list(group_field, "status", "submitted_on", "closed_on")
            .iterator()
        )
        for group, status, submitted_on, closed_on in rows:
            tally = tallies.setdefault(group, _GroupTally())
            tally.total += 1
            if status not in CLOSED_STATUSES or closed_on is None:
                continue
            if window.end is not None and closed_on >= window.end:
                continue
            tally.resolved += 1
            tally.resolution_days.append(resolution_days(submitted_on, closed_on))
        return tallies

    def by_ward(
        self,
        queryset: QuerySet,
        window: ReportWindow,
        wards: QuerySet | None = None,
    ) -> list[dict[str, Any]]:
        """
        One row per ward: every ward in ``wards`` plus wards present in
        the data, ordered by name.
        """
        Ward = apps.get_model("complaints", "Ward")

        tallies = self._tally(queryset, window, "ward_id")
        if wards is None:
            wards = Ward.objects.filter(is_active=True)
        ward_ids = set(wards.values_list("id", flat=True)) | set(tallies)
        names = dict(Ward.objects.filter(id__in=ward_ids).values_list("id", "name"))

        rows = [
            {
                "wardId": ward_id,
                "wardName": names.get(ward_id, ""),
                **tallies.get(ward_id, _GroupTally()).metrics(),
            }
            for ward_id in ward_ids
        ]
        rows.sort(key=lambda row: (row["wardName"].lower(), row["wardId"]))
        return rows

    def by_category(self, queryset: QuerySet, window: ReportWindow) -> list[dict[str, Any]]:
        """One row per canonical complaint type, densest first."""
        merged: dict[str, _GroupTally] = {}
        for raw_type, tally in self._tally(queryset, window, "type").items():
            key = self.rules.canonical_key(raw_type)
            target = merged.setdefault(key, _GroupTally())
            target.total += tally.total
            target.resolved += tally.resolved
            target.resolution_days.extend(tally.resolution_days)

        rows = [
            {"type": key, "label": self.rules.label_for(key), **tally.metrics()}
            for key, tally in merged.items()
        ]
        rows.sort(key=lambda row: (-row["total"], row["label"].lower(), row["type"]))
        return rows


# ════════════════════════════════════════════════════════════════════
#  Request-bound report services
# ════════════════════════════════════════════════════════════════════

class ScopedReportService:
    """
    Common set-up for the endpoint-level services.

    Checks the caller's role against ``required_roles``, builds the
    ``ReportScope`` and prepares the scoped, filtered complaint queryset
    plus the request's ``SlaRuleSet``.
    """

    required_roles: tuple[str, ...] = ReportAccess.VIEW_ANALYTICS

    def __init__(
        self,
        user: User,
        query: ReportQuery | None = None,
        *,
        complaints: QuerySet | None = None,
        rules: SlaRuleSet | None = None,
    ) -> None:
        require_role(user, *self.required_roles)
        self.user = user
        self.query = query or ReportQuery()
        self.scope = ReportScope.for_user(user, requested_ward=self.query.ward)
        self.rules = rules if rules is not None else SlaRuleResolver().load()
        self.window = self.query.window()

        if complaints is None:
            Complaint = apps.get_model("complaints", "Complaint")
            complaints = Complaint.objects.all()
        self.complaints = self.query.apply_filters(self.scope.apply(complaints), self.rules)
        logger.debug(
            "%s: role=%s ward=%s user=%s",
            self.__class__.__name__,
            self.scope.role,
            self.scope.effective_ward,
            self.scope.user_id,
        )

    def submitted_in_window(self) -> QuerySet:
        return self.complaints.filter(self.window.q("submitted_on"))


class DashboardSummaryService(ScopedReportService):
    """
    Lightweight dashboard figures.

    ``sla`` comes from the same ``ComplianceCalculatorService.compute``
    call as ``AnalyticsReportService`` and therefore always matches it.
    """

    def get_summary(self) -> dict[str, Any]:
        from complaints.models import CLOSED_STATUSES, ComplaintStatus

        population = self.submitted_in_window()
        by_status = {value: 0 for value in ComplaintStatus.values}
        for row in population.order_by().values("status").annotate(count=Count("id")):
            by_status[row["status"]] = row["count"]

        today = ReportWindow.for_day(timezone.localdate())
        today_resolved = self.complaints.filter(
            today.q("closed_on"), status__in=CLOSED_STATUSES,
        ).count()

        calculator = ComplianceCalculatorService(self.rules)
        return {
            "complaints": {
                "total": sum(by_status.values()),
                "byStatus": by_status,
            },
            "today": {
                "total": self.complaints.filter(today.q("submitted_on")).count(),
                "resolved": today_resolved,
            },
            "sla": calculator.compute(self.complaints, self.window).as_dict(),
            "users": self._user_role_counts(),
        }

    def _user_role_counts(self) -> list[dict[str, Any]]:
        if self.scope.role not in ReportAccess.VIEW_CITYWIDE:
            return []
        User = apps.get_model("accounts", "User")
        return list(
            User.objects.filter(is_active=True)
            .values("role")
            .annotate(count=Count("id"))
            .order_by("role")
        )


class AnalyticsReportService(ScopedReportService):
    """Detailed analytics: totals, SLA, trends and breakdowns."""

    PERFORMANCE_UNAVAILABLE_REASON = (
        "Satisfaction and escalation metrics require feedback data that "
        "this service does not collect."
    )

    def get_report(self) -> dict[str, Any]:
        from complaints.models import CLOSED_STATUSES, OPEN_STATUSES

        now = timezone.now()
        population = self.submitted_in_window()
        counts = population.aggregate(
            total=Count("id"),
            resolved=Count("id", filter=Q(status__in=CLOSED_STATUSES)),
            pending=Count("id", filter=Q(status__in=OPEN_STATUSES)),
            overdue=Count(
                "id",
                filter=Q(status__in=OPEN_STATUSES, deadline__isnull=False, deadline__lt=now),
            ),
        )

        calculator = ComplianceCalculatorService(self.rules)
        breakdowns = BreakdownAggregationService(self.rules)
        trends = TrendAggregationService(calculator)

        return {
            "complaints": counts,
            "sla": {
                **calculator.compute(self.complaints, self.window).as_dict(),
                "avgResolutionTime": calculator.average_resolution_days(
                    self.complaints, self.window,
                ),
                "target": SLA_TARGET_HOURS,
            },
            "trends": trends.build(
                self.complaints, self.query.start_date, self.query.end_date,
            ),
            "wards": self._ward_breakdown(breakdowns),
            "categories": breakdowns.by_category(self.complaints, self.window),
            "performance": {
                "available": False,
                "reason": self.PERFORMANCE_UNAVAILABLE_REASON,
                "metrics": None,
            },
            "metadata": {
                "pagination": self._pagination(counts["total"]),
                "generatedAt": now,
            },
        }

    def _ward_breakdown(self, breakdowns: BreakdownAggregationService) -> list[dict[str, Any]]:
        if self.scope.role not in ReportAccess.VIEW_CITYWIDE:
            return []
        Ward = apps.get_model("complaints", "Ward")
        wards = Ward.objects.filter(is_active=True)
        if self.scope.requested_ward is not None:
            wards = Ward.objects.filter(id=self.scope.requested_ward)
        return breakdowns.by_ward(self.complaints, self.window, wards)

    def _pagination(self, total_records: int) -> dict[str, int]:
        return {
            "page": self.query.page,
            "pageSize": self.query.limit,
            "totalRecords": total_records,
            "totalPages": math.ceil(total_records / self.query.limit),
        }


# ════════════════════════════════════════════════════════════════════
#  Heatmap Matrix Builder
# ════════════════════════════════════════════════════════════════════

class HeatmapService(ScopedReportService):
    """
    Geo-unit × complaint-type count matrix.

    ===================  ===========================  ==================
    Caller               ``ward`` parameter           Rows
    ===================  ===========================  ==================
    ADMINISTRATOR        absent / ``all``             wards
    ADMINISTRATOR        ward id                      that ward's sub-zones
    WARD_OFFICER         absent or own ward id        own ward's sub-zones
    WARD_OFFICER         any other ward id            403
    ===================  ===========================  ==================
    """

    required_roles = ReportAccess.VIEW_HEATMAP

    def build(self) -> dict[str, Any]:
        self.scope.ensure_can_view_ward(self.query.ward)

        ward_id = self.scope.effective_ward
        population = self.submitted_in_window()
        if ward_id is None:
            geo_level = "ward"
            geo_field = "ward_id"
            units = self._units("Ward", Q())
        else:
            geo_level = "subZone"
            geo_field = "sub_zone_id"
            units = self._units("SubZone", Q(ward_id=ward_id))
            population = population.filter(sub_zone__isnull=False)

        counts: dict[tuple[int, str], int] = {}
        type_totals: dict[str, int] = {}
        rows = population.values_list(geo_field, "type").order_by().annotate(n=Count("id"))
        for geo_id, raw_type, n in rows:
            key = self.rules.canonical_key(raw_type)
            counts[(geo_id, key)] = counts.get((geo_id, key), 0) + n
            type_totals[key] = type_totals.get(key, 0) + n

        present = {geo_id for geo_id, _ in counts}
        missing = present - set(units)
        if missing:
            units.update(self._unit_names(geo_level, missing))
        geo_ids = sorted(units, key=lambda pk: (units[pk].lower(), pk))

        type_keys = sorted(
            type_totals,
            key=lambda key: (-type_totals[key], self.rules.label_for(key).lower(), key),
        )
        matrix = [
            [counts.get((geo_id, key), 0) for key in type_keys]
            for geo_id in geo_ids
        ]
        logger.debug(
            "Heatmap %s: %d row(s) × %d column(s).", geo_level, len(geo_ids), len(type_keys),
        )
        return {
            "xLabels": [self.rules.label_for(key) for key in type_keys],
            "yLabels": [units[pk] for pk in geo_ids],
            "matrix": matrix,
            "xAxisLabel": "Complaint Type",
            "yAxisLabel": "Ward" if geo_level == "ward" else "Sub-Zone",
            "meta": {
                "typeKeys": type_keys,
                "geoIds": geo_ids,
                "geoLevel": geo_level,
                "wardId": ward_id,
            },
        }

    @staticmethod
    def _units(model_name: str, predicate: Q) -> dict[int, str]:
        model = apps.get_model("complaints", model_name)
        return dict(
            model.objects.filter(predicate, is_active=True).values_list("id", "name")
        )

    @staticmethod
    def _unit_names(geo_level: str, ids: set[int]) -> dict[int, str]:
        model_name = "Ward" if geo_level == "ward" else "SubZone"
        model = apps.get_model("complaints", model_name)
        return dict(model.objects.filter(id__in=ids).values_list("id", "name"))


# ════════════════════════════════════════════════════════════════════
#  Deadline Status Report
# ════════════════════════════════════════════════════════════════════

class DeadlineStatusService(ScopedReportService):
    """
    Open complaints grouped by priority against their deadlines.

    ``overdue``: deadline already passed.  ``warning``: deadline within
    ``DEADLINE_WARNING_HOURS``.  ``onTrack``: everything else, including
    complaints without a deadline.
    """

    required_roles = ReportAccess.VIEW_DEADLINE_STATUS

    def build(self) -> dict[str, Any]:
        from complaints.models import OPEN_STATUSES, ComplaintPriority

        now = timezone.now()
        horizon = now + timedelta(hours=DEADLINE_WARNING_HOURS)
        open_complaints = self.submitted_in_window().filter(status__in=OPEN_STATUSES)
        grouped = {
            row["priority"]: row
            for row in (
                open_complaints.order_by()
                .values("priority")
                .annotate(
                    total=Count("id"),
                    overdue=Count("id", filter=Q(deadline__lt=now)),
                    warning=Count("id", filter=Q(deadline__gte=now, deadline__lt=horizon)),
                )
            )
        }

        priorities = []
        totals = {"total": 0, "overdue": 0, "warning": 0, "onTrack": 0}
        for priority in reversed(ComplaintPriority.values):
            row = grouped.get(priority, {"total": 0, "overdue": 0, "warning": 0})
            entry = {
                "priority": priority,
                "total": row["total"],
                "overdue": row["overdue"],
                "warning": row["warning"],
                "onTrack": row["total"] - row["overdue"] - row["warning"],
            }
            priorities.append(entry)
            for key in totals:
                totals[key] += entry[key]

        return {"priorities": priorities, "totals": totals, "generatedAt": now}


# ════════════════════════════════════════════════════════════════════
#  Export Formatter
# ════════════════════════════════════════════════════════════════════

class ComplaintExportService(ScopedReportService):
    """
    Flattens the scoped ledger into fixed-column rows.

    Ward officers always export their own ward: ``ReportScope`` ignores
    any ward they ask for.
    """

    required_roles = ReportAccess.EXPORT

    COLUMNS = (
        "ID",
        "Type",
        "Description",
        "Status",
        "Priority",
        "Ward",
        "Sub-Zone",
        "Submitted On",
        "Closed On",
        "Deadline",
        "Assigned To",
        "Contact",
    )
    MISSING = "N/A"
    UNASSIGNED = "Unassigned"

    def queryset(self) -> QuerySet:
        return (
            self.submitted_in_window()
            .select_related("ward", "sub_zone", "assigned_to")
            .order_by("-submitted_on", "-id")
        )

    def rows(self) -> Iterator[list[str]]:
        for complaint in self.queryset().iterator():
            yield self._row(complaint)

    def _row(self, complaint) -> list[str]:
        assignee = complaint.assigned_to
        if assignee is None:
            assigned_to = self.UNASSIGNED
        else:
            assigned_to = assignee.get_full_name() or assignee.username
        return [
            str(complaint.pk),
            self.rules.label_for(complaint.type),
            self._truncate(complaint.description),
            complaint.get_status_display(),
            complaint.get_priority_display(),
            complaint.ward.name,
            complaint.sub_zone.name if complaint.sub_zone_id else self.MISSING,
            self._timestamp(complaint.submitted_on),
            self._timestamp(complaint.closed_on),
            self._timestamp(complaint.deadline),
            assigned_to,
            complaint.contact_phone or self.MISSING,
        ]

    def _truncate(self, text: str) -> str:
        text = (text or "").strip()
        if not text:
            return self.MISSING
        if len(text) <= EXPORT_DESCRIPTION_MAX_LENGTH:
            return text
        return text[:EXPORT_DESCRIPTION_MAX_LENGTH - 3] + "..."

    def _timestamp(self, value: datetime | None) -> str:
        if value is None:
            return self.MISSING
        return timezone.localtime(value).strftime("%Y-%m-%d %H:%M")

    def as_dict(self) -> dict[str, Any]:
        from complaints.models import CLOSED_STATUSES, OPEN_STATUSES

        population = self.submitted_in_window()
        return {
            "columns": list(self.COLUMNS),
            "rows": list(self.rows()),
            "summary": population.aggregate(
                total=Count("id"),
                resolved=Count("id", filter=Q(status__in=CLOSED_STATUSES)),
                pending=Count("id", filter=Q(status__in=OPEN_STATUSES)),
            ),
            "exportedAt": timezone.now(),
        }

    def filename(self, extension: str = "csv") -> str:
        stamp = timezone.localdate().strftime("%Y%m%d")
        ward = self.scope.effective_ward
        suffix = f"_ward{ward}" if ward is not None else ""
        return f"complaints_export{suffix}_{stamp}.{extension}"
