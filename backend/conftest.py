"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating test users.
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``create_ward`` / ``create_complaint`` / ``configure_sla`` ledger
    factories used by the report tests.
"""

from __future__ import annotations

import json

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            user = create_user(username="alice")
            # or a ward officer:
            officer = create_user(role="WARD_OFFICER", ward=ward)
    """
    from accounts.models import User, UserRole

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        password: str = "TestPass123!",
        email: str | None = None,
        role: str = UserRole.CITIZEN,
        ward=None,
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"testuser{_counter}"
        if email is None:
            email = f"{username}@test.local"

        return User.objects.create_user(
            username=username,
            password=password,
            email=email,
            role=role,
            ward=ward,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper function that creates a user and returns an
    ``Authorization`` header dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(role="ADMINISTRATOR")
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/reports/summary/")
            assert resp.status_code != 401

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(
        *,
        username: str | None = None,
        role: str = "CITIZEN",
        **user_kwargs,
    ) -> dict[str, str]:
        user = create_user(username=username, role=role, **user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def create_ward(db):
    """Factory for ``complaints.Ward`` rows with unique default names."""
    from complaints.models import Ward

    _counter = 0

    def _factory(name: str | None = None, **kwargs) -> Ward:
        nonlocal _counter
        _counter += 1
        return Ward.objects.create(name=name or f"Ward {_counter}", **kwargs)

    return _factory


@pytest.fixture()
def create_complaint(db):
    """
    Factory for ``complaints.Complaint`` rows.

    ``status`` defaults to CLOSED when ``closed_on`` is given and to
    REGISTERED otherwise.
    """
    from complaints.models import Complaint, ComplaintStatus

    def _factory(*, ward, submitted_on, closed_on=None, status=None, **kwargs) -> Complaint:
        if status is None:
            status = ComplaintStatus.CLOSED if closed_on else ComplaintStatus.REGISTERED
        return Complaint.objects.create(
            ward=ward,
            submitted_on=submitted_on,
            closed_on=closed_on,
            status=status,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def configure_sla(db):
    """Create a ``COMPLAINT_TYPE_<KEY>`` configuration row."""
    from core.models import SystemConfig

    def _factory(key: str, sla_hours, name: str | None = None, **kwargs) -> SystemConfig:
        return SystemConfig.objects.create(
            key=f"COMPLAINT_TYPE_{key}",
            value=json.dumps({"name": name or key.title(), "slaHours": sla_hours}),
            **kwargs,
        )

    return _factory
