"""
Accounts app models.

Defines the custom ``User`` model that extends Django's ``AbstractUser``
with the two facts the reporting engine trusts verbatim from the
identity layer: the user's **role** and, for ward officers, their
**home ward**.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models

from core.permissions_constants import Roles


class UserRole(models.TextChoices):
    """Fixed set of roles recognised by the reporting engine."""

    ADMINISTRATOR = Roles.ADMINISTRATOR, "Administrator"
    WARD_OFFICER = Roles.WARD_OFFICER, "Ward Officer"
    MAINTENANCE_TEAM = Roles.MAINTENANCE_TEAM, "Maintenance Team"
    CITIZEN = Roles.CITIZEN, "Citizen"


class User(AbstractUser):
    """
    Custom user model for the civic complaints system.

    Login is supported via *either* username or email together with the
    password (see ``accounts.backends.MultiFieldAuthBackend``).

    * ``role`` decides which reporting surfaces the user may reach.
    * ``ward`` is the home ward of a ward officer; every analytics query
      made by a ward officer is forced to this ward.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    phone_number = models.CharField(
        max_length=15,
        blank=True,
        default="",
        verbose_name="Phone Number",
    )

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CITIZEN,
        verbose_name="Role",
        db_index=True,
    )
    ward = models.ForeignKey(
        "complaints.Ward",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="officers",
        verbose_name="Home Ward",
        help_text="Required for ward officers; their reports are locked to it.",
    )

    # Fields required when creating a superuser via CLI
    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"
