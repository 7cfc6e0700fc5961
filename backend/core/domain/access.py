"""
core.domain.access — Role-scoped query predicates (shared patterns).

This module provides shared utilities that each app's service layer
calls to obtain query predicates filtered by the requesting user's role.

╔══════════════════════════════════════════════════════════════════╗
║  IMPORTANT — Per-app scoping logic does NOT live here.         ║
║  Each app's ``services.py`` owns its own scope-rules table.    ║
║  This module provides:                                         ║
║    1) ``resolve_scope_predicate`` — role → ``Q`` dispatch.     ║
║    2) ``require_role`` — guard that checks the role value.     ║
║    3) ``get_user_role_name`` — informational role helper.      ║
╚══════════════════════════════════════════════════════════════════╝

Architecture overview
---------------------
Role-based data access follows a **scope-rule** pattern:

    ┌─────────┐      ┌────────────────┐      ┌──────────────────┐
    │  View   │─────▶│  App service   │─────▶│ core.domain      │
    │ (thin)  │      │ (owns rules)   │      │   .access        │
    └─────────┘      └────────────────┘      │ (shared helpers) │
                                             └──────────────────┘

Usage in an app's service layer::

    from core.domain.access import resolve_scope_predicate

    COMPLAINT_SCOPE_RULES = {
        "ADMINISTRATOR":    lambda ctx: Q(),
        "WARD_OFFICER":     lambda ctx: Q(ward_id=ctx.ward_id),
        "MAINTENANCE_TEAM": lambda ctx: Q(assigned_to_id=ctx.user_id),
    }

    predicate = resolve_scope_predicate(
        ctx.role, ctx, scope_rules=COMPLAINT_SCOPE_RULES,
    )

The rules receive an immutable *context* object (not the request) so
the same predicate can be rebuilt in tests without a live user.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from django.db.models import Q

if TYPE_CHECKING:
    from accounts.models import User

# Type alias for a scope predicate builder.
# Takes an immutable scope context and returns a ``Q`` object.
ScopePredicate = Callable[[Any], Q]

# Role value → predicate builder.
ScopeRules = dict[str, ScopePredicate]


def get_user_role_name(user: User) -> str | None:
    """
    Return the role value for a user, or ``None`` if unassigned.

    This is an **informational** helper — used for JWT claims, API
    responses, and logging.

    Args:
        user: Authenticated User instance.

    Returns:
        Role value string (e.g. ``"WARD_OFFICER"``), or ``None``.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return getattr(user, "role", None) or None


def resolve_scope_predicate(
    role: str | None,
    context: Any,
    *,
    scope_rules: ScopeRules,
) -> Q | None:
    """
    Return the predicate for ``role``, or ``None`` when no rule matches.

    ``None`` is distinct from ``Q()``: an empty ``Q`` means
    *unrestricted*, ``None`` means *this role has no visibility at all*.
    Callers decide whether ``None`` is an error or an empty result.

    Args:
        role:        Role value of the requesting user.
        context:     Immutable scope context handed to the rule.
        scope_rules: Mapping of role value to predicate builder.
    """
    if role is None:
        return None
    builder = scope_rules.get(role)
    if builder is None:
        return None
    return builder(context)


def require_role(user: User, *allowed_roles: str, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` if the user's role is not
    among ``allowed_roles``.

    Args:
        user:           Authenticated user.
        *allowed_roles: One or more role values.
        message:        Optional custom error message.

    Raises:
        core.domain.exceptions.PermissionDenied: If the user's role is
            not listed.

    Example::

        require_role(user, *ReportAccess.EXPORT)
    """
    from core.domain.exceptions import PermissionDenied as DomainPermissionDenied

    role_name = get_user_role_name(user)
    if role_name not in allowed_roles:
        raise DomainPermissionDenied(
            message
            or (
                f"Role '{role_name}' is not permitted for this operation. "
                f"Required: {', '.join(allowed_roles)}."
            )
        )
