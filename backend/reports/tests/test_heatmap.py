"""
Service tests — geo-unit × complaint-type heatmap.

Checks shape (rows == yLabels, row width == xLabels), ordering (rows
alphabetical, columns densest first), the sum invariant and the
authorization rules per role.
"""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone

from django.test import TestCase

from accounts.models import User, UserRole
from complaints.models import Complaint, SubZone, Ward
from core.domain.exceptions import PermissionDenied
from reports.services import HeatmapService, ReportQuery, SlaRule, SlaRuleSet

RULES = SlaRuleSet([
    SlaRule(key="WATER", name="Water Supply", sla_hours=24),
    SlaRule(key="ROADS", name="Roads", sla_hours=48),
])
T0 = datetime(2024, 6, 1, 12, 0, tzinfo=dt_timezone.utc)


class TestHeatmapService(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.beta = Ward.objects.create(name="Beta")
        cls.alpha = Ward.objects.create(name="Alpha")
        cls.gamma = Ward.objects.create(name="Gamma")

        cls.zone_b = SubZone.objects.create(ward=cls.alpha, name="Bazaar")
        cls.zone_a = SubZone.objects.create(ward=cls.alpha, name="Airport")
        cls.zone_idle = SubZone.objects.create(ward=cls.alpha, name="Canal")
        SubZone.objects.create(ward=cls.beta, name="Docks")

        def make(ward, complaint_type, sub_zone=None):
            Complaint.objects.create(
                ward=ward, sub_zone=sub_zone, type=complaint_type, submitted_on=T0,
            )

        make(cls.alpha, "water", cls.zone_a)
        make(cls.alpha, "WATER", cls.zone_b)
        make(cls.alpha, "Water Supply", cls.zone_b)
        make(cls.alpha, "roads", cls.zone_a)
        make(cls.alpha, "")                       # no sub-zone
        make(cls.beta, "ROADS")
        make(cls.beta, "STREET_LIGHT")

        cls.admin = User.objects.create_user(
            username="heat_admin", email="heat_admin@example.com",
            password="x", role=UserRole.ADMINISTRATOR,
        )
        cls.officer = User.objects.create_user(
            username="heat_officer", email="heat_officer@example.com",
            password="x", role=UserRole.WARD_OFFICER, ward=cls.alpha,
        )
        cls.crew = User.objects.create_user(
            username="heat_crew", email="heat_crew@example.com",
            password="x", role=UserRole.MAINTENANCE_TEAM,
        )

    def _build(self, user, ward=None):
        return HeatmapService(user, ReportQuery(ward=ward), rules=RULES).build()

    def _assert_shape(self, heatmap):
        self.assertEqual(len(heatmap["matrix"]), len(heatmap["yLabels"]))
        for row in heatmap["matrix"]:
            self.assertEqual(len(row), len(heatmap["xLabels"]))
            self.assertTrue(all(isinstance(cell, int) and cell >= 0 for cell in row))

    def test_administrator_gets_wards_by_type(self):
        heatmap = self._build(self.admin)

        self._assert_shape(heatmap)
        self.assertEqual(heatmap["yLabels"], ["Alpha", "Beta", "Gamma"])
        self.assertEqual(heatmap["xLabels"], ["Water Supply", "Roads", "Others", "STREET_LIGHT"])
        self.assertEqual(heatmap["matrix"], [
            [3, 1, 1, 0],
            [0, 1, 0, 1],
            [0, 0, 0, 0],
        ])
        self.assertEqual(sum(map(sum, heatmap["matrix"])), Complaint.objects.count())
        self.assertEqual(heatmap["meta"]["geoLevel"], "ward")
        self.assertEqual(heatmap["meta"]["typeKeys"], ["WATER", "ROADS", "", "STREET_LIGHT"])
        self.assertEqual(
            heatmap["meta"]["geoIds"], [self.alpha.pk, self.beta.pk, self.gamma.pk],
        )
        self.assertIsNone(heatmap["meta"]["wardId"])
        self.assertEqual(heatmap["yAxisLabel"], "Ward")

    def test_administrator_drills_into_sub_zones(self):
        heatmap = self._build(self.admin, ward=self.alpha.pk)

        self._assert_shape(heatmap)
        self.assertEqual(heatmap["yLabels"], ["Airport", "Bazaar", "Canal"])
        self.assertEqual(heatmap["xLabels"], ["Water Supply", "Roads"])
        self.assertEqual(heatmap["matrix"], [[1, 1], [2, 0], [0, 0]])
        # The complaint without a sub-zone has no row at this level.
        self.assertEqual(
            sum(map(sum, heatmap["matrix"])),
            Complaint.objects.filter(ward=self.alpha, sub_zone__isnull=False).count(),
        )
        self.assertEqual(heatmap["meta"]["geoLevel"], "subZone")
        self.assertEqual(heatmap["meta"]["wardId"], self.alpha.pk)

    def test_ward_officer_gets_own_sub_zones(self):
        heatmap = self._build(self.officer)

        self.assertEqual(heatmap["yLabels"], ["Airport", "Bazaar", "Canal"])
        self.assertEqual(heatmap["meta"]["wardId"], self.alpha.pk)

    def test_ward_officer_may_name_own_ward(self):
        heatmap = self._build(self.officer, ward=self.alpha.pk)
        self.assertEqual(heatmap["meta"]["wardId"], self.alpha.pk)

    def test_ward_officer_other_ward_rejected(self):
        with self.assertRaises(PermissionDenied):
            self._build(self.officer, ward=self.beta.pk)

    def test_maintenance_team_rejected(self):
        with self.assertRaises(PermissionDenied):
            self._build(self.crew)

    def test_empty_scope_yields_rows_without_columns(self):
        heatmap = self._build(self.admin, ward=self.gamma.pk)

        self.assertEqual(heatmap["yLabels"], [])
        self.assertEqual(heatmap["xLabels"], [])
        self.assertEqual(heatmap["matrix"], [])

    def test_unconfigured_type_case_variants_share_a_column(self):
        for complaint_type in ("pothole", "POTHOLE", " Pothole ", "Others"):
            Complaint.objects.create(ward=self.gamma, type=complaint_type, submitted_on=T0)

        heatmap = self._build(self.admin)

        self._assert_shape(heatmap)
        keys = heatmap["meta"]["typeKeys"]
        self.assertEqual(keys.count("POTHOLE"), 1)
        self.assertEqual(keys[:3], ["POTHOLE", "WATER", "ROADS"])
        gamma_row = heatmap["matrix"][heatmap["yLabels"].index("Gamma")]
        self.assertEqual(gamma_row[keys.index("POTHOLE")], 3)
        # A type literally named "Others" stays apart from blank types.
        self.assertEqual(keys[3:], ["", "OTHERS", "STREET_LIGHT"])
        self.assertEqual(heatmap["xLabels"][3:], ["Others", "OTHERS", "STREET_LIGHT"])
        self.assertEqual(sum(map(sum, heatmap["matrix"])), Complaint.objects.count())
