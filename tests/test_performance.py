"""Tests for the Performance Assessment Engine."""

import pytest
from pydantic import ValidationError

from grant_assessor.config import AssessorConfig, ClimatePolicyConfig
from grant_assessor.performance import PerformanceAssessor
from grant_assessor.schema import ProjectRecord


class TestRelevance:
    """Tests for the weighted relevance score."""

    def test_empty_record(self, empty_record):
        # 50*.25 + 55*.15 + 50*.15 + 40*.10 = 32.25
        assert PerformanceAssessor().relevance_score(empty_record) == 32

    def test_complete_record(self, strong_record):
        assert PerformanceAssessor().relevance_score(strong_record) == 88

    def test_window_alignment(self):
        assessor = PerformanceAssessor()
        aligned = ProjectRecord(ipa_window="window3", objectives="A green city")
        unaligned = ProjectRecord(ipa_window="window3", objectives="A city")
        assert assessor.relevance_score(aligned) > assessor.relevance_score(unaligned)

    def test_matching_is_case_insensitive(self):
        assessor = PerformanceAssessor()
        lower = ProjectRecord(description="regional cooperation in the western balkans")
        upper = ProjectRecord(description="Regional cooperation in the Western Balkans")
        assert assessor.relevance_score(lower) == assessor.relevance_score(upper)

    def test_adding_keywords_never_lowers_relevance(self):
        assessor = PerformanceAssessor()
        base = ProjectRecord(ipa_window="window1", description="Court reform")
        richer = base.model_copy(update={
            "description": "Court reform with a regional, innovative pilot under the national strategy",
        })
        assert assessor.relevance_score(richer) >= assessor.relevance_score(base)


class TestMaturity:
    """Tests for the weighted maturity score."""

    def test_empty_record(self, empty_record):
        # Implementation plan base 5 * .20 + timeline base 20 * .10
        assert PerformanceAssessor().maturity_score(empty_record) == 3

    def test_complete_record(self, strong_record):
        assert PerformanceAssessor().maturity_score(strong_record) == 100

    def test_duration_outside_range(self, strong_record):
        assessor = PerformanceAssessor()
        long_project = strong_record.model_copy(update={"duration": "48 months"})
        assert assessor.maturity_score(long_project) < assessor.maturity_score(strong_record)


class TestClimateContribution:
    """Tests for the climate share of the budget."""

    def test_direct_keyword_in_green_window(self):
        record = ProjectRecord(
            budget="1000000",
            ipa_window="window3",
            description="renewable energy",
        )
        assert PerformanceAssessor().climate_contribution(record) == 60

    def test_green_window_floor(self):
        record = ProjectRecord(budget="1000000", ipa_window="window3", description="A library")
        assert PerformanceAssessor().climate_contribution(record) == 50

    def test_indirect_keyword_only(self):
        record = ProjectRecord(budget="1000000", ipa_window="window1", description="sustainable courts")
        assert PerformanceAssessor().climate_contribution(record) == 12

    def test_direct_keyword_in_objectives(self):
        record = ProjectRecord(budget="1000000", ipa_window="window4", objectives="Solar panels")
        assert PerformanceAssessor().climate_contribution(record) == 60

    def test_no_budget(self):
        record = ProjectRecord(ipa_window="window3", description="renewable energy")
        assert PerformanceAssessor().climate_contribution(record) == 0

    def test_total_budget_preferred(self):
        record = ProjectRecord(
            budget="",
            total_budget=500000,
            ipa_window="window2",
            description="energy efficiency",
        )
        assert PerformanceAssessor().climate_contribution(record) == 60

    def test_config_shares(self):
        config = AssessorConfig(climate=ClimatePolicyConfig(direct_share=0.4))
        record = ProjectRecord(budget="1000000", ipa_window="window1", description="solar")
        assert PerformanceAssessor(config=config).climate_contribution(record) == 40


class TestCrossCuttingPriorities:
    """Tests for keyword-based cross-cutting scores."""

    def test_baselines(self, empty_record):
        priorities = PerformanceAssessor().cross_cutting_priorities(empty_record)
        assert priorities.gender_equality == 30
        assert priorities.environmental_protection == 30
        assert priorities.digital_transformation == 20
        assert priorities.good_governance == 30
        assert priorities.youth_inclusion == 20
        assert priorities.climate_action == 0

    def test_scores_capped(self, strong_record):
        priorities = PerformanceAssessor().cross_cutting_priorities(strong_record)
        for value in priorities.model_dump().values():
            assert 0 <= value <= 100
        assert priorities.youth_inclusion == 100

    def test_climate_action_reuses_contribution(self, strong_record):
        assessor = PerformanceAssessor()
        priorities = assessor.cross_cutting_priorities(strong_record)
        assert priorities.climate_action == assessor.climate_contribution(strong_record)


class TestAssessment:
    """Tests for the complete assessment."""

    def test_performance_score_blend(self, strong_record):
        assessment = PerformanceAssessor().assess(strong_record)
        assert assessment.performance_score == round(
            assessment.relevance_score * 0.6 + assessment.maturity_score * 0.4
        )
        assert assessment.performance_score == 93

    def test_performance_score_not_settable(self, strong_record):
        assessment = PerformanceAssessor().assess(strong_record)
        with pytest.raises((AttributeError, ValidationError)):
            assessment.performance_score = 1

    def test_compliance_flags(self, strong_record, empty_record):
        strong = PerformanceAssessor().assess(strong_record).compliance
        assert strong.meets_relevance_criteria
        assert strong.meets_maturity_criteria
        assert strong.meets_climate_target
        assert strong.overall_compliant

        weak = PerformanceAssessor().assess(empty_record).compliance
        assert not weak.overall_compliant
        assert not weak.meets_climate_target

    def test_indicators(self, strong_record):
        indicators = PerformanceAssessor().assess(strong_record).indicators
        assert len(indicators) == 4

    def test_recommendations_for_weak_project(self, empty_record):
        recommendations = PerformanceAssessor().assess(empty_record).recommendations
        assert "CRITICAL: Project lacks clear strategic alignment with IPA III priorities" in recommendations
        assert "CRITICAL: Project readiness is insufficient for implementation" in recommendations
        assert "IMPORTANT: Increase climate-related activities to meet 18% minimum target" in recommendations
        assert "Integrate gender equality measures and women empowerment activities" in recommendations

    def test_no_recommendations_for_strong_project(self, strong_record):
        assert PerformanceAssessor().assess(strong_record).recommendations == []

    def test_deterministic(self, strong_record):
        assessor = PerformanceAssessor()
        assert assessor.assess(strong_record) == assessor.assess(strong_record)
