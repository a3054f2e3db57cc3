"""Tests for the Resource Optimizer."""

import pytest

from grant_assessor.optimizer import ResourceOptimizer
from grant_assessor.schema import ComplexityLevel, ProjectRecord, RiskCategory
from policy_catalog.municipalities import list_municipalities


WINDOWS = ["window1", "window2", "window3", "window4", "window5"]
MUNICIPALITIES = [profile.name for profile in list_municipalities()] + ["Atlantis"]


class TestEmptyRecord:
    """An empty record falls back to the default window and no profile."""

    @pytest.fixture
    def result(self, empty_record):
        return ResourceOptimizer().optimize(empty_record)

    def test_window_and_profile(self, result):
        assert result.window == "window3"
        assert not result.municipality_found

    def test_budget(self, result):
        # 3,000,000 average scaled by the 6000/7000 GDP factor
        assert result.budget.recommended_total == 2571429
        assert result.budget.breakdown.total == 2571429
        assert [a.total for a in result.budget.alternatives] == [1800000, 2571429, 3600001]

    def test_co_financing(self, result):
        co_financing = result.budget.co_financing
        assert (
            co_financing.eu_contribution,
            co_financing.national_contribution,
            co_financing.municipal_contribution,
        ) == (75, 20, 5)

    def test_personnel(self, result):
        personnel = result.personnel
        assert personnel.total_person_months == 24
        assert [role.person_months for role in personnel.key_roles] == [5, 7, 4, 5, 4]
        assert personnel.training_budget == 12000
        assert personnel.key_roles[0].total_cost == 5 * 4500

    def test_timeline(self, result):
        timeline = result.timeline
        assert timeline.recommended_duration == 18
        assert [phase.duration for phase in timeline.phases] == [4, 11, 3]
        assert [phase.start_month for phase in timeline.phases] == [1, 5, 16]
        assert timeline.buffer_percent == 15

    def test_complexity_confidence_risks(self, result):
        assert result.complexity.score == 3
        assert result.complexity.level == ComplexityLevel.SIMPLE
        assert result.confidence == 0.6
        assert [risk.category for risk in result.risks] == [RiskCategory.BUDGET]
        assert len(result.recommendations) == 3


class TestBudget:
    """Tests for budget sizing, breakdown and co-financing."""

    @pytest.mark.parametrize("municipality", MUNICIPALITIES)
    @pytest.mark.parametrize("window", WINDOWS)
    def test_breakdown_sums_to_total(self, municipality, window):
        record = ProjectRecord(municipality=municipality, ipa_window=window)
        budget = ResourceOptimizer().optimize(record).budget
        assert budget.breakdown.total == budget.recommended_total

    @pytest.mark.parametrize("municipality", MUNICIPALITIES)
    @pytest.mark.parametrize("window", WINDOWS)
    def test_total_within_window_range(self, municipality, window):
        optimizer = ResourceOptimizer()
        budget_range = optimizer.catalog.get_budget_range(window)
        record = ProjectRecord(municipality=municipality, ipa_window=window)
        total = optimizer.optimize(record).budget.recommended_total
        assert budget_range.min <= total <= budget_range.max

    @pytest.mark.parametrize("municipality", MUNICIPALITIES)
    def test_co_financing_sums_to_100(self, municipality):
        record = ProjectRecord(municipality=municipality)
        co_financing = ResourceOptimizer().optimize(record).budget.co_financing
        assert co_financing.total == 100
        assert co_financing.eu_contribution <= 85
        assert co_financing.municipal_contribution == 5

    @pytest.mark.parametrize("municipality", MUNICIPALITIES)
    def test_no_municipal_co_financing_risk(self, municipality):
        risks = ResourceOptimizer().optimize(ProjectRecord(municipality=municipality)).risks
        assert "Municipal co-financing capacity may be limited" not in [r.risk for r in risks]

    @pytest.mark.parametrize("municipality,split", [
        ("Tirana", (75, 20, 5)),
        ("Pristina", (85, 10, 5)),
        ("Belgrade", (65, 30, 5)),
    ])
    def test_co_financing_by_gdp(self, municipality, split):
        record = ProjectRecord(municipality=municipality)
        co_financing = ResourceOptimizer().optimize(record).budget.co_financing
        assert (
            co_financing.eu_contribution,
            co_financing.national_contribution,
            co_financing.municipal_contribution,
        ) == split

    def test_large_city_budget(self):
        record = ProjectRecord(municipality="Tirana", ipa_window="window3")
        result = ResourceOptimizer().optimize(record)
        # 3,000,000 * 1.3 * 7800/7000
        assert result.budget.recommended_total == 4345714
        assert "for Tirana (population: 557,422)" in result.budget.justification

    def test_municipality_override(self):
        record = ProjectRecord(municipality="Atlantis")
        result = ResourceOptimizer().optimize(record, municipality_name="Pristina")
        assert result.municipality_found
        assert result.budget.co_financing.eu_contribution == 85


class TestWindowSelection:
    """Tests for picking the window resources are sized for."""

    def test_declared_window(self):
        record = ProjectRecord(ipa_window="window1", description="digital innovation technology")
        assert ResourceOptimizer().select_window(record) == "window1"

    def test_inferred_from_text(self):
        record = ProjectRecord(description="court reform and judicial integrity")
        assert ResourceOptimizer().select_window(record) == "window1"

    def test_unknown_window_inferred(self):
        record = ProjectRecord(ipa_window="window9", description="cross-border cooperation")
        assert ResourceOptimizer().select_window(record) == "window5"

    def test_no_signal_uses_default(self, empty_record):
        assert ResourceOptimizer().select_window(empty_record) == "window3"


class TestComplexity:
    """Tests for the keyword complexity signal."""

    def test_capped_at_ten(self):
        record = ProjectRecord(description=(
            "digital smart iot blockchain infrastructure construction cross-border "
            "regulation innovative pilot"
        ))
        complexity = ResourceOptimizer().analyze_complexity(record)
        assert complexity.score == 10
        assert complexity.level == ComplexityLevel.VERY_COMPLEX
        assert len(complexity.factors) == 5

    def test_very_complex_project(self):
        record = ProjectRecord(description=(
            "digital smart iot blockchain infrastructure construction cross-border "
            "regulation innovative pilot"
        ))
        result = ResourceOptimizer().optimize(record)
        assert result.timeline.recommended_duration == 36
        assert result.personnel.total_person_months == 80
        assert any(risk.category == RiskCategory.TIMELINE for risk in result.risks)


class TestTimeline:
    """Tests for phase planning."""

    @pytest.mark.parametrize("municipality", MUNICIPALITIES)
    def test_phases_cover_duration_and_budget(self, municipality, strong_record):
        record = strong_record.model_copy(update={"municipality": municipality})
        result = ResourceOptimizer().optimize(record)
        timeline = result.timeline

        assert 12 <= timeline.recommended_duration <= 48
        assert sum(phase.duration for phase in timeline.phases) == timeline.recommended_duration
        assert sum(phase.budget_amount for phase in timeline.phases) == result.budget.recommended_total

    def test_phase_dependencies(self, empty_record):
        phases = ResourceOptimizer().optimize(empty_record).timeline.phases
        assert phases[0].dependencies == []
        assert phases[1].dependencies == [phases[0].name]
        assert phases[2].dependencies == [phases[1].name]


class TestConfidence:
    """Tests for the confidence estimate."""

    def test_capped(self, strong_record):
        assert ResourceOptimizer().optimize(strong_record).confidence == 0.95

    @pytest.mark.parametrize("municipality", MUNICIPALITIES)
    def test_bounded(self, municipality, strong_record):
        record = strong_record.model_copy(update={"municipality": municipality})
        assert 0 < ResourceOptimizer().optimize(record).confidence <= 0.95
