"""Tests for the plain-text report formatters."""

from datetime import datetime, timezone

import pytest

from grant_assessor.optimizer import ResourceOptimizer
from grant_assessor.performance import PerformanceAssessor
from grant_assessor.report import (
    enrich_prompt,
    format_assessment_report,
    format_compliance_summary,
    format_optimization_summary,
    format_validation_report,
)
from grant_assessor.section_scorer import SectionComplianceScorer
from grant_assessor.validator import ValidationEngine


GENERATED_AT = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestAssessmentReport:
    """Tests for the performance assessment report."""

    def test_strong_record(self, strong_record):
        report = format_assessment_report(PerformanceAssessor().assess(strong_record), GENERATED_AT)
        lines = report.split("\n")

        assert lines[0] == "IPA III PERFORMANCE ASSESSMENT REPORT"
        assert "OVERALL PERFORMANCE SCORE: 93/100" in lines
        assert "STATUS: COMPLIANT" in lines
        assert "3. CLIMATE CONTRIBUTION: 60%" in lines
        assert "   Target: 18% minimum" in lines
        assert "   Status: ACHIEVED" in lines
        assert "5. PERFORMANCE INDICATORS: 4 defined" in lines
        assert lines[-1] == "Generated: 2026-01-01T00:00:00+00:00"

    def test_weak_record(self, empty_record):
        report = format_assessment_report(PerformanceAssessor().assess(empty_record), GENERATED_AT)
        assert "STATUS: NON-COMPLIANT" in report
        assert "   Status: BELOW TARGET" in report
        assert "   - CRITICAL: Project readiness is insufficient for implementation" in report


class TestValidationReport:
    """Tests for the validation report."""

    def test_non_compliant(self, empty_record):
        result = ValidationEngine().validate(empty_record)
        report = format_validation_report(result, empty_record, GENERATED_AT)
        lines = report.split("\n")

        assert "Project: Untitled" in lines
        assert "Municipality: Not specified" in lines
        assert "IPA Window: Not selected" in lines
        assert "Date: 2026-01-01T00:00:00+00:00" in lines
        assert "COMPLIANCE STATUS: NON-COMPLIANT" in lines
        assert "VALIDATION RESULT: FAIL" in lines
        assert f"ERRORS ({len(result.errors)})" in lines
        assert "[CRITICAL] title: Project Title is mandatory for IPA III applications" in lines
        assert "1. Address all critical and major errors" in lines
        assert lines[-1] == "Based on Regulation (EU) 2021/1529"

    def test_excellent(self, strong_record):
        result = ValidationEngine().validate(strong_record)
        report = format_validation_report(result, strong_record, GENERATED_AT)

        assert "COMPLIANCE STATUS: EXCELLENT" in report
        assert "VALIDATION RESULT: PASS" in report
        assert "No errors found" in report
        assert "No warnings" in report
        assert "No additional recommendations" in report
        assert "2. Prepare for fast-track review" in report

    def test_deterministic_with_fixed_time(self, strong_record):
        result = ValidationEngine().validate(strong_record)
        first = format_validation_report(result, strong_record, GENERATED_AT)
        second = format_validation_report(result, strong_record, GENERATED_AT)
        assert first == second


class TestComplianceSummary:
    """Tests for the checklist summary."""

    def test_missing_items_listed(self, empty_record):
        summary = format_compliance_summary(SectionComplianceScorer().score(empty_record))
        lines = summary.split("\n")

        assert lines[0].startswith("Compliance: 0/100 for Green Agenda & Sustainable Connectivity")
        assert lines[0].endswith("FAIL")
        assert any(line.startswith("      missing: ") for line in lines)

    def test_complete_record(self, strong_record):
        summary = format_compliance_summary(SectionComplianceScorer().score(strong_record))
        assert summary.startswith("Compliance: 100/100")
        assert "missing:" not in summary


class TestOptimizationSummary:
    """Tests for the resource optimization summary."""

    def test_empty_record(self, empty_record):
        summary = format_optimization_summary(ResourceOptimizer().optimize(empty_record))
        lines = summary.split("\n")

        assert lines[0] == "Recommended budget: €2,571,429 (window3)"
        assert lines[1] == "Co-financing: EU 75% / national 20% / municipal 5%"
        assert "Timeline: 18 months (+15% buffer)" in lines
        assert "  - Project Setup & Planning: months 1-4, €385,714" in lines
        assert "Personnel: 24 person-months, training budget €12,000" in lines
        assert "Complexity: 3/10 (simple)" in lines
        assert lines[-1] == "Confidence: 60%"


class TestEnrichPrompt:
    """Tests for municipality-aware prompt enrichment."""

    def test_unknown_municipality(self, empty_record):
        prompt = enrich_prompt("Write a summary.", "Atlantis", empty_record)
        assert prompt == (
            "Write a summary.\n\nNote: Municipality-specific intelligence not available. "
            "Use general Western Balkan context."
        )

    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_municipality(self, name, empty_record):
        assert "intelligence not available" in enrich_prompt("Base", name, empty_record)

    def test_known_municipality(self, strong_record):
        prompt = enrich_prompt("Write a summary.", "Tirana", strong_record)
        lines = prompt.split("\n")

        assert lines[0] == "Write a summary."
        assert "MUNICIPALITY-SPECIFIC INTELLIGENCE" in lines
        assert "RECOMMENDED PARTNERSHIPS:" in lines
        partners = lines[lines.index("RECOMMENDED PARTNERSHIPS:") + 1]
        assert partners.startswith("Italian municipalities")
        assert "Air pollution" in prompt
