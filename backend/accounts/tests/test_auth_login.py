"""
Integration tests — login with username or email.

Endpoint under test:  POST /api/accounts/auth/login/
                      (named URL: accounts:login)
Request payload:      {"identifier": "<username|email>", "password": "<password>"}
Success response:     HTTP 200, body contains {"access": "...", "refresh": "...",
                      "user": {...}}
Failure response:     HTTP 400 — CustomTokenObtainPairSerializer.validate
                      raises ValidationError when credentials are invalid.

The access token must carry the ``role`` and ``ward_id`` claims the
reporting engine trusts.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import UserRole
from complaints.models import Ward

User = get_user_model()

# ── Constants ────────────────────────────────────────────────────────────────
_PASSWORD = "Str0ng!Pass99"

_USER_FIELDS = {
    "username":   "login_test_user",
    "email":      "login_test_user@example.com",
    "first_name": "Login",
    "last_name":  "Tester",
}


class TestAuthLoginMultiIdentifier(TestCase):
    """Integration tests for the multi-field login endpoint."""

    @classmethod
    def setUpTestData(cls):
        cls.ward = Ward.objects.create(name="Login Ward")
        cls.user = User.objects.create_user(
            password=_PASSWORD,
            role=UserRole.WARD_OFFICER,
            ward=cls.ward,
            **_USER_FIELDS,
        )

    def setUp(self):
        self.client = APIClient()
        self.login_url = reverse("accounts:login")

    # ── Helper ───────────────────────────────────────────────────────────────

    def _post_login(self, identifier: str, password: str):
        return self.client.post(
            self.login_url,
            {"identifier": identifier, "password": password},
            format="json",
        )

    # ── Success tests ────────────────────────────────────────────────────────

    def test_login_with_username(self):
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)

        self.assertEqual(
            resp.status_code,
            status.HTTP_200_OK,
            msg=f"Expected 200 logging in with username. Body: {resp.data}",
        )
        self._assert_token_shape(resp)
        self._assert_user_info(resp)

    def test_login_with_email_is_case_insensitive(self):
        resp = self._post_login(_USER_FIELDS["email"].upper(), _PASSWORD)

        self.assertEqual(
            resp.status_code,
            status.HTTP_200_OK,
            msg=f"Expected 200 logging in with email. Body: {resp.data}",
        )
        self._assert_token_shape(resp)
        self._assert_user_info(resp)

    def test_access_token_carries_role_and_ward_claims(self):
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        token = AccessToken(resp.data["access"])
        self.assertEqual(token["role"], UserRole.WARD_OFFICER)
        self.assertEqual(token["ward_id"], self.ward.pk)

    # ── Negative tests ────────────────────────────────────────────────────────

    def test_wrong_password_rejected(self):
        resp = self._post_login(_USER_FIELDS["username"], "WrongPassword!")

        self.assertEqual(
            resp.status_code,
            status.HTTP_400_BAD_REQUEST,
            msg=f"Expected 400 for wrong password. Body: {resp.data}",
        )
        self.assertIn("detail", resp.data)

    def test_unknown_identifier_rejected(self):
        resp = self._post_login("nobody_at_all_xyz", _PASSWORD)

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detail", resp.data)

    def test_inactive_user_cannot_login(self):
        inactive = User.objects.create_user(
            username="inactive_login_user",
            password=_PASSWORD,
            email="inactive_login@example.com",
            is_active=False,
        )
        resp = self._post_login(inactive.username, _PASSWORD)

        self.assertEqual(
            resp.status_code,
            status.HTTP_400_BAD_REQUEST,
            msg=f"Expected 400 for inactive user login. Body: {resp.data}",
        )

    def test_missing_password_field_rejected(self):
        resp = self.client.post(
            self.login_url,
            {"identifier": _USER_FIELDS["username"]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_rejected_login_is_logged(self):
        with self.assertLogs("accounts.backends", level="INFO") as logs:
            self._post_login(_USER_FIELDS["username"], "WrongPassword!")
        self.assertIn("Rejected login", logs.output[0])

    def test_ward_officer_without_ward_is_flagged(self):
        User.objects.create_user(
            username="wardless_officer",
            password=_PASSWORD,
            email="wardless@example.com",
            role=UserRole.WARD_OFFICER,
        )
        with self.assertLogs("accounts.backends", level="WARNING") as logs:
            resp = self._post_login("wardless_officer", _PASSWORD)

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIsNone(AccessToken(resp.data["access"])["ward_id"])
        self.assertIn("no home ward", logs.output[0])

    # ── Shared assertion helpers ──────────────────────────────────────────────

    def _assert_token_shape(self, resp) -> None:
        for key in ("access", "refresh"):
            self.assertIn(key, resp.data, msg=f"Login response must include '{key}'.")
            self.assertTrue(
                isinstance(resp.data[key], str) and resp.data[key],
                msg=f"'{key}' token must be a non-empty string.",
            )

    def _assert_user_info(self, resp) -> None:
        self.assertIn("user", resp.data, msg="Login response must include 'user' object.")
        user_data = resp.data["user"]
        self.assertEqual(user_data.get("username"), _USER_FIELDS["username"])
        self.assertEqual(user_data.get("email"), _USER_FIELDS["email"])
        self.assertEqual(user_data.get("role"), UserRole.WARD_OFFICER)
        self.assertEqual(user_data.get("ward"), self.ward.pk)
        # Password must not be leaked in the user object
        self.assertNotIn("password", user_data)
