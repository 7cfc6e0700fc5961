"""
Role Access Constants — **Single Source of Truth**

Every role check referenced in code (report services, views, tests)
MUST use one of the tuples defined here instead of spelling role names
inline.

Organisation
------------
Roles are a fixed enumeration stored on ``accounts.User.role``
(``accounts.models.UserRole``).  The identity layer supplies the role
verbatim; this module only decides *which* roles may reach *which*
reporting surface.  Row-level visibility (ward / assignee restriction)
is decided separately by ``reports.services.COMPLAINT_SCOPE_RULES``.

All constants store the **role value** (e.g. ``"WARD_OFFICER"``) so
they can be compared against ``user.role`` without importing the
accounts app at module load time.
"""


class Roles:
    """Role values as stored on ``accounts.User.role``."""

    ADMINISTRATOR = "ADMINISTRATOR"
    WARD_OFFICER = "WARD_OFFICER"
    MAINTENANCE_TEAM = "MAINTENANCE_TEAM"
    CITIZEN = "CITIZEN"


# ════════════════════════════════════════════════════════════════════
#  REPORTS APP — surface-level access
# ════════════════════════════════════════════════════════════════════

class ReportAccess:
    """Roles allowed to reach each reporting endpoint."""

    #: Dashboard summary and detailed analytics.
    VIEW_ANALYTICS = (
        Roles.ADMINISTRATOR,
        Roles.WARD_OFFICER,
        Roles.MAINTENANCE_TEAM,
    )

    #: Geo × type heatmap.
    VIEW_HEATMAP = (
        Roles.ADMINISTRATOR,
        Roles.WARD_OFFICER,
    )

    #: Open-complaint deadline status grouped by priority.
    VIEW_DEADLINE_STATUS = (
        Roles.ADMINISTRATOR,
        Roles.WARD_OFFICER,
    )

    #: Flat CSV / JSON export.
    EXPORT = (
        Roles.ADMINISTRATOR,
        Roles.WARD_OFFICER,
    )

    #: Ward breakdown and user-role counts.
    VIEW_CITYWIDE = (
        Roles.ADMINISTRATOR,
    )
