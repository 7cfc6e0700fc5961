"""
Unit tests — SLA rule resolution.

Covers ``SlaRuleResolver`` (parsing ``COMPLAINT_TYPE_<KEY>`` rows,
fail-soft skipping of bad rows) and ``SlaRuleSet`` lookups (case
variants, key vs display name, labels).
"""

from __future__ import annotations

import json

from django.test import SimpleTestCase, TestCase

from core.constants import SLA_MAX_HOURS
from core.models import SystemConfig
from reports.services import SlaRule, SlaRuleResolver, SlaRuleSet


class TestParseRow(SimpleTestCase):

    def test_valid_row(self):
        rule = SlaRuleResolver.parse_row(
            "COMPLAINT_TYPE_WATER_SUPPLY",
            json.dumps({"name": "Water Supply", "slaHours": 48}),
        )
        self.assertEqual(rule, SlaRule(key="WATER_SUPPLY", name="Water Supply", sla_hours=48.0))

    def test_numeric_string_hours_accepted(self):
        rule = SlaRuleResolver.parse_row(
            "COMPLAINT_TYPE_ROADS", json.dumps({"name": "Roads", "slaHours": "72"}),
        )
        self.assertEqual(rule.sla_hours, 72.0)

    def test_missing_name_falls_back_to_key(self):
        rule = SlaRuleResolver.parse_row("COMPLAINT_TYPE_DRAINAGE", json.dumps({"slaHours": 12}))
        self.assertEqual(rule.name, "DRAINAGE")

    def test_invalid_rows_are_skipped_with_warning(self):
        bad_values = {
            "not json": "{oops",
            "json list": json.dumps([1, 2]),
            "missing hours": json.dumps({"name": "X"}),
            "zero hours": json.dumps({"name": "X", "slaHours": 0}),
            "negative hours": json.dumps({"name": "X", "slaHours": -5}),
            "boolean hours": json.dumps({"name": "X", "slaHours": True}),
            "text hours": json.dumps({"name": "X", "slaHours": "soon"}),
            "infinite hours": json.dumps({"name": "X", "slaHours": "inf"}),
            "overflowing hours": json.dumps({"name": "X", "slaHours": "1e400"}),
            "huge hours": json.dumps({"name": "X", "slaHours": 1e12}),
            "huge integer hours": '{"name": "X", "slaHours": ' + "9" * 400 + "}",
            "above the ceiling": json.dumps({"name": "X", "slaHours": SLA_MAX_HOURS + 1}),
            "null value": None,
        }
        for label, raw in bad_values.items():
            with self.subTest(label):
                with self.assertLogs("reports.services", level="WARNING"):
                    self.assertIsNone(SlaRuleResolver.parse_row("COMPLAINT_TYPE_X", raw))

    def test_ceiling_itself_is_accepted(self):
        rule = SlaRuleResolver.parse_row(
            "COMPLAINT_TYPE_X", json.dumps({"name": "X", "slaHours": SLA_MAX_HOURS}),
        )
        self.assertEqual(rule.sla_hours, float(SLA_MAX_HOURS))

    def test_empty_type_key_skipped(self):
        with self.assertLogs("reports.services", level="WARNING"):
            self.assertIsNone(
                SlaRuleResolver.parse_row("COMPLAINT_TYPE_", json.dumps({"slaHours": 5}))
            )


class TestSlaRuleSetLookups(SimpleTestCase):

    def setUp(self):
        self.rules = SlaRuleSet([
            SlaRule(key="WATER_SUPPLY", name="Water Supply", sla_hours=48),
            SlaRule(key="ROADS", name="Potholes", sla_hours=72),
        ])

    def test_lookup_by_key_in_any_case(self):
        for value in ("WATER_SUPPLY", "water_supply", "Water_Supply"):
            with self.subTest(value):
                self.assertEqual(self.rules.hours_for(value), 48)

    def test_lookup_by_display_name(self):
        self.assertEqual(self.rules.hours_for("Water Supply"), 48)
        self.assertEqual(self.rules.hours_for("WATER SUPPLY"), 48)
        self.assertEqual(self.rules.hours_for("potholes"), 72)

    def test_unknown_and_blank_types_unresolved(self):
        self.assertIsNone(self.rules.hours_for("STREET_LIGHT"))
        self.assertIsNone(self.rules.hours_for(""))
        self.assertIsNone(self.rules.hours_for(None))

    def test_key_wins_over_other_rules_display_name(self):
        rules = SlaRuleSet([
            SlaRule(key="NOISE", name="Noise", sla_hours=10),
            SlaRule(key="NUISANCE", name="noise", sla_hours=99),
        ])
        self.assertEqual(rules.rule_for("noise").key, "NOISE")

    def test_labels_and_canonical_keys(self):
        self.assertEqual(self.rules.label_for("water_supply"), "Water Supply")
        self.assertEqual(self.rules.label_for("STREET_LIGHT"), "STREET_LIGHT")
        self.assertEqual(self.rules.label_for(""), "Others")
        self.assertEqual(self.rules.label_for(None), "Others")
        self.assertEqual(self.rules.canonical_key("Potholes"), "ROADS")
        self.assertEqual(self.rules.canonical_key(" street_light "), "STREET_LIGHT")
        self.assertEqual(self.rules.canonical_key("Others"), "OTHERS")
        self.assertEqual(self.rules.label_for(self.rules.canonical_key("Others")), "OTHERS")


class TestSlaRuleResolverLoad(TestCase):

    @classmethod
    def setUpTestData(cls):
        SystemConfig.objects.create(
            key="COMPLAINT_TYPE_GARBAGE",
            value=json.dumps({"name": "Garbage", "slaHours": 24}),
        )
        SystemConfig.objects.create(
            key="COMPLAINT_TYPE_BROKEN",
            value="not-json",
        )
        SystemConfig.objects.create(
            key="COMPLAINT_TYPE_RETIRED",
            value=json.dumps({"name": "Retired", "slaHours": 10}),
            is_active=False,
        )
        SystemConfig.objects.create(
            key="APP_NAME",
            value=json.dumps({"name": "Not a type", "slaHours": 1}),
        )

    def test_loads_only_active_valid_type_rows(self):
        with self.assertLogs("reports.services", level="WARNING") as logs:
            rules = SlaRuleResolver().load()

        self.assertEqual([rule.key for rule in rules], ["GARBAGE"])
        self.assertEqual(rules.hours_for("garbage"), 24)
        self.assertTrue(any("COMPLAINT_TYPE_BROKEN" in line for line in logs.output))

    def test_rules_are_reloaded_on_every_call(self):
        with self.assertLogs("reports.services", level="WARNING"):
            first = SlaRuleResolver().load()
        SystemConfig.objects.filter(key="COMPLAINT_TYPE_GARBAGE").update(
            value=json.dumps({"name": "Garbage", "slaHours": 6}),
        )
        with self.assertLogs("reports.services", level="WARNING"):
            second = SlaRuleResolver().load()

        self.assertEqual(first.hours_for("GARBAGE"), 24)
        self.assertEqual(second.hours_for("GARBAGE"), 6)
