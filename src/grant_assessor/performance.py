"""Performance Assessment Engine.

Computes the IPA III performance criteria of a project:
- RELEVANCE: strategic alignment with window priorities, the EU acquis,
  national strategies, regional cooperation, innovation and sustainability
- MATURITY: implementation readiness (plan, budget, partners, risks,
  monitoring, timeline, technical preparation)
- climate contribution as a share of the budget
- cross-cutting priority sub-scores

The performance score is always the fixed 60/40 blend of relevance and
maturity (see ``PerformanceAssessment.performance_score``).
"""

import logging
from typing import Optional

from policy_catalog.catalog import PolicyCatalog

from .config import AssessorConfig, get_config
from .keywords import KeywordClassifier, get_classifier
from .schema import (
    CrossCuttingPriorities,
    PerformanceAssessment,
    PerformanceCompliance,
    ProjectRecord,
    round_half_up,
)


logger = logging.getLogger(__name__)


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return min(high, max(low, value))


class PerformanceAssessor:
    """Scores relevance, maturity, climate and cross-cutting priorities."""

    # Score for projects without a known window
    NO_WINDOW_ALIGNMENT = 50

    ACQUIS_CHAPTERS = [
        "judiciary", "anti-corruption", "public procurement", "statistics",
        "financial control", "economic criteria", "public administration",
        "transport", "energy", "environment", "climate", "digital",
        "competitiveness", "social policy", "education", "culture",
    ]

    NATIONAL_PRIORITY_KEYWORDS = [
        "national strategy", "government priority", "national development",
        "country strategy", "national action plan", "sectoral strategy",
    ]

    REGIONAL_KEYWORDS = [
        "regional", "cross-border", "multi-country", "western balkans",
        "neighboring", "transnational", "interregional",
    ]

    INNOVATION_KEYWORDS = [
        "innovative", "pilot", "first", "novel", "cutting-edge",
        "state-of-the-art", "transformation", "modernization", "digitalization",
    ]

    DIRECT_CLIMATE_KEYWORDS = [
        "renewable energy", "solar", "wind", "hydro",
        "energy efficiency", "insulation", "green infrastructure",
        "climate adaptation", "climate mitigation", "carbon reduction",
        "electric vehicle", "sustainable transport", "cycling infrastructure",
    ]

    INDIRECT_CLIMATE_KEYWORDS = [
        "sustainable", "circular economy", "waste management",
        "water management", "biodiversity", "forest", "agriculture",
        "smart city", "digital transformation",
    ]

    # Cross-cutting priority -> (keywords, baseline, points per match)
    CROSS_CUTTING_RULES = {
        "gender_equality": (["gender", "women", "equality", "inclusion", "empowerment"], 30, 20),
        "environmental_protection": (
            ["environment", "ecosystem", "biodiversity", "conservation", "pollution"], 30, 20
        ),
        "digital_transformation": (
            ["digital", "e-governance", "online", "software", "platform"], 20, 20
        ),
        "good_governance": (
            ["transparency", "accountability", "participation", "integrity", "efficiency"], 30, 18
        ),
        "youth_inclusion": (["youth", "young", "students", "education", "skills", "training"], 20, 20),
    }

    def __init__(
        self,
        config: Optional[AssessorConfig] = None,
        catalog: Optional[PolicyCatalog] = None,
        classifier: Optional[KeywordClassifier] = None,
    ):
        self.config = config or get_config()
        self.catalog = catalog or PolicyCatalog()
        self.classifier = classifier or get_classifier()

    def assess(self, record: ProjectRecord) -> PerformanceAssessment:
        """Run the full performance assessment of a record."""
        relevance = self.relevance_score(record)
        maturity = self.maturity_score(record)
        climate = self.climate_contribution(record)
        priorities = self.cross_cutting_priorities(record, climate)
        thresholds = self.config.thresholds

        meets_relevance = relevance >= thresholds.relevance
        meets_maturity = maturity >= thresholds.maturity

        logger.debug(
            "Performance: relevance=%d maturity=%d climate=%d%%",
            relevance, maturity, climate,
        )

        return PerformanceAssessment(
            relevance_score=relevance,
            maturity_score=maturity,
            climate_contribution=climate,
            cross_cutting_priorities=priorities,
            indicators=self.catalog.get_indicators(record.ipa_window),
            recommendations=self._recommendations(relevance, maturity, climate, priorities),
            compliance=PerformanceCompliance(
                meets_relevance_criteria=meets_relevance,
                meets_maturity_criteria=meets_maturity,
                meets_climate_target=climate >= self.config.climate.minimum_target,
                overall_compliant=meets_relevance and meets_maturity,
            ),
        )

    # -------------------------------------------------------------------------
    # Relevance
    # -------------------------------------------------------------------------

    def relevance_score(self, record: ProjectRecord) -> int:
        """Weighted relevance score (0-100)."""
        weights = self.config.relevance_weights
        score = (
            self._score_window_alignment(record) * weights.strategic_alignment
            + self._score_acquis(record) * weights.eu_acquis_alignment
            + self._score_national_priorities(record) * weights.national_priorities
            + self._score_regional(record) * weights.regional_cooperation
            + self._score_innovation(record) * weights.innovation_potential
            + self._score_sustainability(record) * weights.sustainability_impact
        )
        return round_half_up(_clamp(score))

    def _score_window_alignment(self, record: ProjectRecord) -> float:
        policy = self.catalog.get_window(record.ipa_window)
        if policy is None:
            return self.NO_WINDOW_ALIGNMENT

        text = f"{record.objectives} {record.description}"
        if self.classifier.any_match(text, policy.relevance.keywords):
            return policy.relevance.aligned_score
        return policy.relevance.base_score

    def _score_acquis(self, record: ProjectRecord) -> float:
        matched = [
            chapter for chapter in self.ACQUIS_CHAPTERS
            if self.classifier.contains(record.objectives, chapter)
            or self.classifier.contains(record.description, chapter)
        ]
        return min(100, len(matched) / len(self.ACQUIS_CHAPTERS) * 200)

    def _score_national_priorities(self, record: ProjectRecord) -> float:
        if self.classifier.any_match(record.description, self.NATIONAL_PRIORITY_KEYWORDS):
            return 85
        return 55

    def _score_regional(self, record: ProjectRecord) -> float:
        matches = self.classifier.matches(record.description, self.REGIONAL_KEYWORDS)
        return min(100, 50 + len(matches) * 10)

    def _score_innovation(self, record: ProjectRecord) -> float:
        matches = self.classifier.matches(record.description, self.INNOVATION_KEYWORDS)
        return min(100, 40 + len(matches) * 15)

    def _score_sustainability(self, record: ProjectRecord) -> float:
        text = record.sustainability
        score = 30 if text.strip() else 0
        if self.classifier.contains(text, "financial"):
            score += 20
        if self.classifier.contains(text, "institutional"):
            score += 20
        if self.classifier.contains(text, "environmental"):
            score += 30
        return score

    # -------------------------------------------------------------------------
    # Maturity
    # -------------------------------------------------------------------------

    def maturity_score(self, record: ProjectRecord) -> int:
        """Weighted maturity score (0-100)."""
        weights = self.config.maturity_weights
        score = (
            self._score_implementation_plan(record) * weights.implementation_plan
            + self._score_budget_clarity(record) * weights.budget_clarity
            + self._score_partner_capacity(record) * weights.partner_capacity
            + self._score_risk_management(record) * weights.risk_management
            + self._score_monitoring(record) * weights.monitoring_framework
            + self._score_timeline(record) * weights.timeline_realism
            + self._score_technical_readiness(record) * weights.technical_readiness
        )
        return round_half_up(_clamp(score))

    def _score_implementation_plan(self, record: ProjectRecord) -> float:
        score = 20 if record.methodology else 0
        # Short or missing methodology still earns the base length points
        score += 15 if len(record.methodology) > 200 else 5
        score += 15 if record.activities else 0
        score += 15 if record.deliverables else 0
        score += 15 if record.timeline else 0
        score += 20 if record.milestones else 0
        return score

    def _score_budget_clarity(self, record: ProjectRecord) -> float:
        return (
            (30 if record.total_budget else 0)
            + (20 if record.eu_contribution else 0)
            + (20 if record.partner_contribution else 0)
            + (30 if record.budget_breakdown else 0)
        )

    def _score_partner_capacity(self, record: ProjectRecord) -> float:
        return (
            (25 if record.lead_partner else 0)
            + (25 if record.has_partners else 0)
            + (25 if record.partner_experience else 0)
            + (25 if record.partner_roles else 0)
        )

    def _score_risk_management(self, record: ProjectRecord) -> float:
        score = 30 if record.risks else 0
        for term in ("technical", "financial", "organizational"):
            if self.classifier.contains(record.risks, term):
                score += 15
        score += 25 if record.mitigation else 0
        return score

    def _score_monitoring(self, record: ProjectRecord) -> float:
        return (
            (40 if record.indicators else 0)
            + (30 if record.monitoring_plan else 0)
            + (30 if record.evaluation_approach else 0)
        )

    def _score_timeline(self, record: ProjectRecord) -> float:
        duration = record.duration_months
        score = 30 if duration else 0
        score += 40 if duration and 12 <= duration <= 36 else 20
        score += 30 if record.phases else 0
        return score

    def _score_technical_readiness(self, record: ProjectRecord) -> float:
        return (
            (35 if record.technical_specifications else 0)
            + (35 if record.feasibility_study else 0)
            + (30 if record.preparatory_work else 0)
        )

    # -------------------------------------------------------------------------
    # Climate and cross-cutting priorities
    # -------------------------------------------------------------------------

    def climate_contribution(self, record: ProjectRecord) -> int:
        """Share of the budget attributable to climate action (0-100).

        Direct keywords (description or objectives) attribute the direct
        share; indirect keywords (description only) attribute the indirect
        share when no direct keyword matched. Green window projects are
        floored at the window floor.
        """
        total = record.budget_amount
        if not total:
            return 0

        climate = self.config.climate
        has_direct = (
            self.classifier.any_match(record.description, self.DIRECT_CLIMATE_KEYWORDS)
            or self.classifier.any_match(record.objectives, self.DIRECT_CLIMATE_KEYWORDS)
        )
        has_indirect = self.classifier.any_match(record.description, self.INDIRECT_CLIMATE_KEYWORDS)

        amount = 0.0
        if has_direct:
            amount += total * climate.direct_share
        elif has_indirect:
            amount += total * climate.indirect_share

        if record.ipa_window == climate.green_window:
            amount = max(amount, total * climate.green_window_floor)

        percentage = amount / total * 100 if total > 0 else 0
        return round_half_up(_clamp(percentage))

    def cross_cutting_priorities(
        self,
        record: ProjectRecord,
        climate: Optional[int] = None,
    ) -> CrossCuttingPriorities:
        """Keyword-based cross-cutting sub-scores; climate reuses the climate contribution."""
        scores = {}
        for name, (keywords, baseline, per_match) in self.CROSS_CUTTING_RULES.items():
            matches = self.classifier.matches(record.description, keywords)
            scores[name] = round_half_up(_clamp(baseline + len(matches) * per_match))

        if climate is None:
            climate = self.climate_contribution(record)

        return CrossCuttingPriorities(climate_action=climate, **scores)

    def _recommendations(
        self,
        relevance: int,
        maturity: int,
        climate: int,
        priorities: CrossCuttingPriorities,
    ) -> list[str]:
        recommendations = []

        if relevance < 70:
            recommendations.append("Strengthen alignment with EU acquis chapters and national strategies")
            recommendations.append("Enhance regional cooperation elements to increase strategic relevance")
        if relevance < 50:
            recommendations.append("CRITICAL: Project lacks clear strategic alignment with IPA III priorities")

        if maturity < 70:
            recommendations.append("Develop more detailed implementation plan with clear milestones")
            recommendations.append("Strengthen risk management framework and mitigation strategies")
        if maturity < 50:
            recommendations.append("CRITICAL: Project readiness is insufficient for implementation")

        target = self.config.climate.minimum_target
        if climate < target:
            recommendations.append(
                f"IMPORTANT: Increase climate-related activities to meet {target:g}% minimum target"
            )

        if priorities.gender_equality < 40:
            recommendations.append("Integrate gender equality measures and women empowerment activities")
        if priorities.digital_transformation < 30:
            recommendations.append("Consider adding digital transformation components")
        if priorities.youth_inclusion < 30:
            recommendations.append("Include youth participation and skill development activities")

        return recommendations
