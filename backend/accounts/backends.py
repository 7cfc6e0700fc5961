"""
Authentication backend for the reporting API.

Users log in with either their ``username`` or their ``email``.  The
backend also flags ward officers who have no home ward: they can sign
in, but every report they request is refused until an administrator
assigns one.

Registered in ``settings.AUTHENTICATION_BACKENDS`` ahead of Django's
``ModelBackend``.
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q

from core.permissions_constants import Roles

logger = logging.getLogger(__name__)

User = get_user_model()


class MultiFieldAuthBackend(ModelBackend):
    """Resolve ``identifier`` against username (exact) or email (case-insensitive)."""

    def authenticate(self, request, identifier=None, password=None, **kwargs):
        if not identifier or password is None:
            return None

        candidates = list(
            User.objects.select_related("ward")
            .filter(Q(username=identifier) | Q(email__iexact=identifier))[:2]
        )
        if len(candidates) != 1:
            # Equalise timing with the found-user path.
            User().set_password(password)
            if candidates:
                logger.warning("Login identifier %r matches more than one account.", identifier)
            return None

        user = candidates[0]
        if not (user.check_password(password) and self.user_can_authenticate(user)):
            logger.info("Rejected login for %r.", identifier)
            return None

        if user.role == Roles.WARD_OFFICER and user.ward_id is None:
            logger.warning(
                "Ward officer %s has no home ward; report requests will be refused.",
                user.username,
            )
        return user
