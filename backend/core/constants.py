"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any formula or business rule that references a numeric constant should
import it from here instead of hardcoding.  This avoids drift between
the summary and detailed report surfaces that use the same value.

SLA *hours* are **not** constants: they are operator-editable
``SystemConfig`` rows read on every request (see
``reports.services.SlaRuleResolver``).
"""

from datetime import date

# ── SLA configuration rows ──────────────────────────────────────────
# Every complaint type is configured as a ``SystemConfig`` row keyed
#     COMPLAINT_TYPE_<KEY>  →  {"name": "...", "slaHours": 48}
COMPLAINT_TYPE_CONFIG_PREFIX: str = "COMPLAINT_TYPE_"

# Display label for complaints whose type is blank.
UNCATEGORISED_LABEL: str = "Others"

# ── Reporting windows ───────────────────────────────────────────────
# Number of daily trend buckets returned when no window is requested.
DEFAULT_TREND_DAYS: int = 30

# Advertised organisation-wide resolution target (hours).
SLA_TARGET_HOURS: int = 72

# Largest usable SLA (ten years).  Rows above it are skipped so deadline
# arithmetic stays inside the datetime range.
SLA_MAX_HOURS: int = 24 * 366 * 10

# Widest report window accepted from a client, in days.
MAX_REPORT_SPAN_DAYS: int = 366 * 5

# Calendar range accepted for ``from`` / ``to``.
EARLIEST_REPORT_DATE: date = date(1900, 1, 1)
LATEST_REPORT_DATE: date = date(2999, 12, 31)

# Open complaints whose deadline falls within this many hours are
# reported as "warning" by the deadline status report.
DEADLINE_WARNING_HOURS: int = 24

# ── Pagination / export ─────────────────────────────────────────────
DEFAULT_PAGE_SIZE: int = 1000
MAX_PAGE_SIZE: int = 10_000

EXPORT_DESCRIPTION_MAX_LENGTH: int = 100
