"""
Smoke tests — verify that Django boots, URL routing resolves, and
the core domain modules behave.

These tests do NOT require real data — they just prove the plumbing
works.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from django.db.models import Q
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL namespaces resolve without 404."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("accounts:login",            "/api/accounts/auth/login/"),
        ("accounts:token-refresh",    "/api/accounts/auth/token/refresh/"),
        ("accounts:me",               "/api/accounts/me/"),
        ("core:system-constants",     "/api/core/constants/"),
        ("reports:summary",           "/api/reports/summary/"),
        ("reports:analytics",         "/api/reports/analytics/"),
        ("reports:heatmap",           "/api/reports/heatmap/"),
        ("reports:deadline-status",   "/api/reports/sla/"),
        ("reports:export",            "/api/reports/export/"),
        ("schema",                    "/api/schema/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_resolves(self, url_name: str, expected_path: str):
        """Named URL reverses to the expected path."""
        assert reverse(url_name) == expected_path

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_resolve_matches_view(self, url_name: str, expected_path: str):
        """Path resolves to a view function (not a 404)."""
        match = resolve(expected_path)
        assert match.func is not None


# ════════════════════════════════════════════════════════════════════
#  Exception Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:
    """Unit tests for domain exception classes."""

    def test_inheritance_chain(self):
        from core.domain.exceptions import Conflict, DomainError, NotFound, PermissionDenied

        assert issubclass(Conflict, DomainError)
        assert issubclass(PermissionDenied, DomainError)
        assert issubclass(NotFound, DomainError)

    def test_domain_error_message(self):
        from core.domain.exceptions import DomainError

        err = DomainError("test message")
        assert str(err) == "test message"
        assert err.message == "test message"


class TestDomainExceptionHandler:
    """``domain_exception_handler`` maps exceptions to responses."""

    @pytest.mark.parametrize(
        "exc_name,expected_status",
        [
            ("PermissionDenied", 403),
            ("NotFound", 404),
            ("Conflict", 409),
            ("DomainError", 400),
        ],
    )
    def test_domain_exceptions_mapped(self, exc_name: str, expected_status: int):
        from core.domain import exceptions
        from core.domain.exception_handler import domain_exception_handler

        exc = getattr(exceptions, exc_name)("nope")
        response = domain_exception_handler(exc, {"view": object()})

        assert response.status_code == expected_status
        assert response.data == {"detail": "nope"}

    def test_view_failure_message_produces_envelope(self):
        from core.domain.exception_handler import domain_exception_handler

        view = SimpleNamespace(failure_message="Failed to do the thing.")
        response = domain_exception_handler(ValueError("boom"), {"view": view})

        assert response.status_code == 500
        assert response.data == {
            "success": False,
            "message": "Failed to do the thing.",
            "error": "boom",
        }

    def test_other_views_propagate(self):
        from core.domain.exception_handler import domain_exception_handler

        assert domain_exception_handler(ValueError("boom"), {"view": object()}) is None


# ════════════════════════════════════════════════════════════════════
#  Access Helper Unit Tests
# ════════════════════════════════════════════════════════════════════

class TestAccessHelpers:
    """Unit tests for core.domain.access helpers."""

    RULES = {
        "ADMINISTRATOR": lambda ctx: Q(),
        "WARD_OFFICER": lambda ctx: Q(ward_id=ctx.ward_id),
    }

    def test_resolve_scope_predicate_dispatches_on_role(self):
        from core.domain.access import resolve_scope_predicate

        ctx = SimpleNamespace(ward_id=4)
        assert resolve_scope_predicate("WARD_OFFICER", ctx, scope_rules=self.RULES) == Q(ward_id=4)
        assert resolve_scope_predicate("ADMINISTRATOR", ctx, scope_rules=self.RULES) == Q()

    def test_resolve_scope_predicate_unknown_role_is_none(self):
        from core.domain.access import resolve_scope_predicate

        assert resolve_scope_predicate("CITIZEN", None, scope_rules=self.RULES) is None
        assert resolve_scope_predicate(None, None, scope_rules=self.RULES) is None

    def test_get_user_role_name(self):
        from core.domain.access import get_user_role_name

        user = MagicMock(is_authenticated=True, role="WARD_OFFICER")
        assert get_user_role_name(user) == "WARD_OFFICER"
        assert get_user_role_name(MagicMock(is_authenticated=False)) is None
        assert get_user_role_name(None) is None

    def test_require_role(self):
        from core.domain.access import require_role
        from core.domain.exceptions import PermissionDenied

        user = MagicMock(is_authenticated=True, role="CITIZEN")
        require_role(user, "CITIZEN")
        with pytest.raises(PermissionDenied, match="CITIZEN"):
            require_role(user, "ADMINISTRATOR", "WARD_OFFICER")
