"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF exception handler that renders those exceptions.
access             Role-scoped query predicates and role guards.

Usage from any app::

    from core.domain.exceptions import DomainError, PermissionDenied
    from core.domain.access import resolve_scope_predicate, require_role
"""
