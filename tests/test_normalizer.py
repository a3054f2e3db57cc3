"""Tests for normalizing raw form data into project records."""

import pytest

from grant_assessor.normalizer import normalize_project
from grant_assessor.schema import ProjectRecord, parse_amount, round_half_up


class TestNormalizeProject:
    """Tests for the loose form formats."""

    def test_camel_case_form(self, project_data):
        record = normalize_project(project_data)
        assert record.ipa_window == "window3"
        assert record.lead_partner == "Municipality of Tirana"
        assert record.smart_objectives.time_bound.startswith("All works finish")
        assert record.partners == ["Municipality of Durrës", "Energy Agency of North Macedonia"]

    def test_snake_case_keys(self):
        record = normalize_project({
            "ipa_window": "window4",
            "total_budget": "1,500,000",
            "smart_objectives": {"time_bound": "By 2027"},
        })
        assert record.ipa_window == "window4"
        assert record.total_budget == 1500000
        assert record.smart_objectives.time_bound == "By 2027"

    @pytest.mark.parametrize("value,expected", [
        ('["Durrës", "Skopje"]', ["Durrës", "Skopje"]),
        ("Durrës, Skopje", ["Durrës", "Skopje"]),
        ([{"name": "Durrës"}, {"organization": "Skopje"}], ["Durrës", "Skopje"]),
        ("", []),
        (None, []),
    ])
    def test_partners_formats(self, value, expected):
        assert normalize_project({"partners": value}).partners == expected

    @pytest.mark.parametrize("value,expected", [
        ("", None),
        ("n/a", None),
        (True, None),
        (250000, 250000),
        ("250,000", 250000),
    ])
    def test_numeric_fields(self, value, expected):
        assert normalize_project({"euContribution": value}).eu_contribution == expected

    def test_numbers_in_text_fields(self):
        record = normalize_project({"budget": 2000000.0, "duration": 24})
        assert record.budget == "2000000"
        assert record.duration == "24"
        assert record.duration_months == 24

    def test_blank_optional_fields_become_none(self):
        record = normalize_project({"leadPartner": "", "milestones": "M6"})
        assert record.lead_partner is None
        assert record.milestones == "M6"

    def test_record_passes_through(self, strong_record):
        assert normalize_project(strong_record) is strong_record

    def test_unknown_keys_ignored(self):
        assert normalize_project({"colour": "green"}) == ProjectRecord()


class TestBudgetParsing:
    """Tests for the budget helpers on the record."""

    @pytest.mark.parametrize("text,expected", [
        ("€1,200,000", 1200000),
        ("1200000 EUR", 1200000),
        ("approx. 500000 - 700000", 500000),
        ("to be decided", None),
        ("", None),
        (None, None),
    ])
    def test_parse_amount(self, text, expected):
        assert parse_amount(text) == expected

    def test_budget_amount_prefers_total_budget(self):
        record = ProjectRecord(budget="€1,000,000", total_budget=750000)
        assert record.budget_value == 1000000
        assert record.budget_amount == 750000

    def test_budget_amount_falls_back_to_text(self):
        assert ProjectRecord(budget="€1,000,000").budget_amount == 1000000

    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.49, 1), (2.5, 3), (32.25, 32)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected
