"""Tests for the Validation Engine."""

import pytest

from grant_assessor.schema import (
    ComplianceLevel,
    Severity,
    ValidationError,
    ValidationWarning,
)
from grant_assessor.validator import ValidationEngine, _dedupe, determine_compliance_level


def _error(severity, field="x"):
    return ValidationError(field=field, message="m", severity=severity)


def _warning(field="x"):
    return ValidationWarning(field=field, message="m", impact="i")


class TestDetermineComplianceLevel:
    """Tests for the compliance level decision table."""

    def test_any_critical_is_non_compliant(self):
        assert determine_compliance_level([_error(Severity.CRITICAL)], [], 100) == ComplianceLevel.NON_COMPLIANT

    def test_more_than_two_major_is_non_compliant(self):
        errors = [_error(Severity.MAJOR)] * 3
        assert determine_compliance_level(errors, [], 100) == ComplianceLevel.NON_COMPLIANT

    def test_major_is_partially_compliant(self):
        errors = [_error(Severity.MAJOR)] * 2
        assert determine_compliance_level(errors, [], 100) == ComplianceLevel.PARTIALLY_COMPLIANT

    def test_low_performance_is_partially_compliant(self):
        assert determine_compliance_level([], [], 64) == ComplianceLevel.PARTIALLY_COMPLIANT

    def test_excellent(self):
        warnings = [_warning(), _warning()]
        assert determine_compliance_level([], warnings, 80) == ComplianceLevel.EXCELLENT

    @pytest.mark.parametrize("errors,warnings,score", [
        ([], [], 79),
        ([_error(Severity.MINOR)], [], 95),
        ([], [_warning()] * 3, 95),
    ])
    def test_compliant(self, errors, warnings, score):
        assert determine_compliance_level(errors, warnings, score) == ComplianceLevel.COMPLIANT


class TestValidationEngine:
    """Tests for validating records."""

    def test_empty_record(self, empty_record):
        result = ValidationEngine().validate(empty_record)

        assert not result.is_valid
        assert result.compliance_level == ComplianceLevel.NON_COMPLIANT

        critical = [e for e in result.errors if e.severity == Severity.CRITICAL]
        assert len(critical) == 8
        mandatory = [e for e in critical if e.message.endswith("is mandatory for IPA III applications")]
        assert [e.field for e in mandatory] == [
            "title", "municipality", "country", "ipaWindow", "description", "objectives",
        ]
        assert {e.field for e in critical} - {e.field for e in mandatory} == {"relevance", "maturity"}

    def test_empty_record_priority_recommendations_first(self, empty_record):
        recommendations = ValidationEngine().validate(empty_record).recommendations
        assert recommendations[0] == (
            "PRIORITY: Develop comprehensive implementation plan with clear deliverables"
        )
        assert recommendations[1] == (
            "PRIORITY: Strengthen strategic alignment with IPA III objectives and EU acquis"
        )
        assert len(recommendations) == len(set(recommendations))

    def test_complete_record(self, strong_record):
        result = ValidationEngine().validate(strong_record)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []
        assert result.recommendations == []
        assert result.compliance_level == ComplianceLevel.EXCELLENT
        assert result.assessment.performance_score == 93

    def test_eu_share_above_limit_is_critical(self, strong_record):
        record = strong_record.model_copy(update={
            "eu_contribution": 900000,
            "partner_contribution": 100000,
        })
        result = ValidationEngine().validate(record)

        assert not result.is_valid
        assert result.compliance_level == ComplianceLevel.NON_COMPLIANT
        error = [e for e in result.errors if e.field == "euContribution"][0]
        assert error.severity == Severity.CRITICAL
        assert error.message == "EU contribution cannot exceed 85% for IPA III projects"

    def test_eu_share_at_limit_is_a_warning(self, strong_record):
        record = strong_record.model_copy(update={
            "eu_contribution": 850000,
            "partner_contribution": 150000,
        })
        result = ValidationEngine().validate(record)

        assert result.is_valid
        messages = [w.message for w in result.warnings]
        assert "EU contribution above 80% requires strong justification" in messages

    def test_low_eu_share(self, strong_record):
        record = strong_record.model_copy(update={
            "eu_contribution": 400000,
            "partner_contribution": 600000,
        })
        messages = [w.message for w in ValidationEngine().validate(record).warnings]
        assert "Low EU contribution request" in messages

    def test_short_description_is_major(self, strong_record):
        record = strong_record.model_copy(update={"description": "Solar panels on schools."})
        result = ValidationEngine().validate(record)
        error = [e for e in result.errors if e.field == "description"][0]
        assert error.severity == Severity.MAJOR

    def test_cross_border_window_needs_partners(self, strong_record):
        record = strong_record.model_copy(update={"ipa_window": "window5", "partners": []})
        messages = [w.message for w in ValidationEngine().validate(record).warnings]
        assert "No implementation partners defined" in messages
        assert "Cross-border projects require multiple country partners" in messages

    def test_precomputed_assessment_is_used(self, strong_record, empty_record):
        engine = ValidationEngine()
        weak_assessment = engine.assessor.assess(empty_record)
        result = engine.validate(strong_record, weak_assessment)
        assert result.assessment == weak_assessment
        assert not result.is_valid

    def test_deterministic(self, strong_record):
        engine = ValidationEngine()
        assert engine.validate(strong_record) == engine.validate(strong_record)


def test_dedupe_keeps_first_occurrence():
    assert _dedupe(["a", "b", "a", "c", "b"]) == ["a", "b", "c"]
