"""Tests for single field validation and quality indicators."""

import pytest

from grant_assessor.field_validator import field_quality_indicator, validate_field
from grant_assessor.schema import IssueSeverity


class TestValidateField:
    """Tests for the per-field quick checks."""

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_empty_value(self, value):
        result = validate_field("title", value)
        assert not result.is_valid
        assert result.score == 0

    def test_good_title(self):
        result = validate_field("title", "Green Tirana: Renewable Energy")
        assert result.is_valid
        assert result.score == 85
        assert result.issues == []

    @pytest.mark.parametrize("value,message", [
        ("Short", "Title seems too brief"),
        ("x" * 101, "Title is very long"),
    ])
    def test_title_length_issues(self, value, message):
        result = validate_field("title", value)
        assert not result.is_valid
        assert result.score == 0
        assert result.issues[0].message == message
        assert result.issues[0].severity == IssueSeverity.WARNING

    @pytest.mark.parametrize("length,score", [(100, 40), (600, 70), (900, 90)])
    def test_description_bands(self, length, score):
        result = validate_field("description", "a" * length)
        assert result.is_valid
        assert result.score == score
        assert len(result.suggestions) == (0 if score == 90 else 1)

    @pytest.mark.parametrize("value,score", [
        ("€50,000", 60),
        ("€2,000,000", 90),
        ("15000000", 70),
    ])
    def test_budget_bands(self, value, score):
        assert validate_field("budget", value).score == score

    def test_unparseable_budget(self):
        result = validate_field("budget", "to be confirmed")
        assert result.is_valid
        assert result.score == 0

    @pytest.mark.parametrize("length,score", [(20, 60), (51, 85)])
    def test_other_fields(self, length, score):
        assert validate_field("methodology", "m" * length).score == score

    def test_value_read_from_record(self, strong_record):
        result = validate_field("ipaWindow", record=strong_record)
        assert result.field == "ipaWindow"
        assert result.score == 60

        result = validate_field("description", record=strong_record)
        assert result.score == 90

    def test_explicit_value_wins_over_record(self, strong_record):
        assert validate_field("title", "Short", record=strong_record).score == 0

    def test_missing_record_field(self, empty_record):
        assert not validate_field("leadPartner", record=empty_record).is_valid


class TestFieldQualityIndicator:
    """Tests for the traffic-light indicator."""

    @pytest.mark.parametrize("score,color,message", [
        (100, "green", "Excellent quality"),
        (85, "green", "Excellent quality"),
        (84, "blue", "Good quality"),
        (70, "blue", "Good quality"),
        (50, "orange", "Needs improvement"),
        (49, "red", "Critical issues"),
        (0, "red", "Critical issues"),
    ])
    def test_bands(self, score, color, message):
        indicator = field_quality_indicator(score)
        assert indicator.color == color
        assert indicator.message == message
