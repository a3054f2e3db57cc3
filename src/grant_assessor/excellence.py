"""Excellence validation.

A 0-100 submission-readiness score built from five blocks:

- Basic completeness (30)
- Content quality (25)
- EU compliance checks (20)
- Synergy and innovation (15)
- Municipality alignment (10)
"""

import logging
import re
from typing import Optional

from policy_catalog.catalog import PolicyCatalog
from policy_catalog.municipalities import generate_municipality_intelligence

from .keywords import KeywordClassifier, get_classifier
from .schema import (
    CheckStatus,
    ComplianceCheck,
    ExcellenceIssue,
    ExcellenceLevel,
    ExcellenceResult,
    ExcellenceSuggestion,
    IssueSeverity,
    ProjectRecord,
    Rating,
    SuggestionType,
    round_half_up,
)
from .synergy import SynergyDetector


logger = logging.getLogger(__name__)


_TARGET_WORDS = re.compile(r"target|goal|achieve|improve")


class ExcellenceValidator:
    """Scores how ready a draft is for submission."""

    # (record attribute, issue field id, display name)
    REQUIRED_FIELDS = [
        ("title", "title", "Title"),
        ("municipality", "municipality", "Municipality"),
        ("country", "country", "Country"),
        ("ipa_window", "ipaWindow", "IPA window"),
        ("description", "description", "Description"),
        ("objectives", "objectives", "Objectives"),
    ]
    OPTIONAL_FIELDS = ["methodology", "risks", "sustainability", "budget", "duration"]

    INNOVATION_KEYWORDS = [
        "smart", "digital", "innovative", "technology", "new", "advanced", "modern", "pilot",
    ]

    MAX_IMPROVEMENTS = 5

    def __init__(
        self,
        catalog: Optional[PolicyCatalog] = None,
        synergy: Optional[SynergyDetector] = None,
        classifier: Optional[KeywordClassifier] = None,
    ):
        self.catalog = catalog or PolicyCatalog()
        self.classifier = classifier or get_classifier()
        self.synergy = synergy or SynergyDetector(catalog=self.catalog, classifier=self.classifier)

    def validate(self, record: ProjectRecord) -> ExcellenceResult:
        issues: list[ExcellenceIssue] = []
        suggestions: list[ExcellenceSuggestion] = []
        checks: list[ComplianceCheck] = []

        raw_score = (
            self._score_completeness(record, issues, suggestions)
            + self._score_content_quality(record, issues, suggestions)
            + self._score_eu_compliance(record, checks)
            + self._score_synergy_and_innovation(record, suggestions)
            + self._score_municipality_alignment(record, suggestions)
        )
        score = min(100, round_half_up(raw_score))
        level = ExcellenceLevel.from_score(score)

        logger.debug("Excellence score %.2f -> %d (%s)", raw_score, score, level.value)

        return ExcellenceResult(
            score=score,
            level=level,
            critical_issues=[issue for issue in issues if issue.severity == IssueSeverity.CRITICAL],
            improvements=[
                suggestion for suggestion in suggestions if suggestion.impact == Rating.HIGH
            ][:self.MAX_IMPROVEMENTS],
            compliance_checks=checks,
            recommendations=self._strategic_recommendations(score, level),
        )

    # -------------------------------------------------------------------------
    # Scoring blocks
    # -------------------------------------------------------------------------

    def _score_completeness(
        self,
        record: ProjectRecord,
        issues: list[ExcellenceIssue],
        suggestions: list[ExcellenceSuggestion],
    ) -> float:
        """Required fields 20 points, optional fields 10 points."""
        score = 0.0
        for attr, field, name in self.REQUIRED_FIELDS:
            if getattr(record, attr).strip():
                score += 20 / len(self.REQUIRED_FIELDS)
            else:
                issues.append(ExcellenceIssue(
                    field=field,
                    severity=IssueSeverity.CRITICAL,
                    message=f"{name} is required",
                    suggestion=f"Provide a comprehensive {name.lower()} to continue",
                ))

        filled = sum(1 for attr in self.OPTIONAL_FIELDS if getattr(record, attr).strip())
        score += filled / len(self.OPTIONAL_FIELDS) * 10

        missing_smart = 5 - record.smart_objectives.filled_count()
        if missing_smart > 0:
            suggestions.append(ExcellenceSuggestion(
                field="smartObjectives",
                type=SuggestionType.CONTENT,
                title="Complete SMART Objectives",
                description=f"{missing_smart} SMART objective fields need completion",
                impact=Rating.HIGH,
            ))

        return score

    def _score_content_quality(
        self,
        record: ProjectRecord,
        issues: list[ExcellenceIssue],
        suggestions: list[ExcellenceSuggestion],
    ) -> float:
        """Description 10 points, objectives 8 points, budget 7 points."""
        score = 0.0

        if record.description:
            length = len(record.description)
            if length < 500:
                issues.append(ExcellenceIssue(
                    field="description",
                    severity=IssueSeverity.WARNING,
                    message="Description is too brief for EU standards",
                    suggestion="Expand to at least 800-1500 words for comprehensive coverage",
                ))
                score += 3
            elif length < 800:
                score += 6
            else:
                score += 10

        if record.objectives:
            length = len(record.objectives)
            has_numbers = any(char.isdigit() for char in record.objectives)
            has_targets = bool(_TARGET_WORDS.search(record.objectives.lower()))

            if length > 300 and has_numbers and has_targets:
                score += 8
            elif length > 200:
                score += 5
                if not has_numbers:
                    suggestions.append(ExcellenceSuggestion(
                        field="objectives",
                        type=SuggestionType.CONTENT,
                        title="Add Quantitative Targets",
                        description="Include specific numbers and measurable targets in objectives",
                        impact=Rating.MEDIUM,
                    ))
            else:
                score += 2

        amount = record.budget_value
        if amount is not None:
            if 200_000 <= amount <= 10_000_000:
                score += 7
            elif amount < 200_000:
                suggestions.append(ExcellenceSuggestion(
                    field="budget",
                    type=SuggestionType.COMPLIANCE,
                    title="Consider Higher Budget",
                    description="Budget seems low for typical IPA III municipal projects (€200K-€10M range)",
                    impact=Rating.MEDIUM,
                ))
                score += 3
            else:
                suggestions.append(ExcellenceSuggestion(
                    field="budget",
                    type=SuggestionType.COMPLIANCE,
                    title="Budget May Be Too High",
                    description="Very high budget may require additional justification and capacity demonstration",
                    impact=Rating.MEDIUM,
                ))
                score += 5

        return score

    def _score_eu_compliance(self, record: ProjectRecord, checks: list[ComplianceCheck]) -> float:
        """Window, eligibility, duration and sustainability checks, 5 points each."""
        score = 0.0

        window_requirement = "Must select appropriate IPA III thematic window"
        if record.ipa_window:
            checks.append(ComplianceCheck(
                rule="IPA III Window Selection",
                status=CheckStatus.PASS,
                message=f"Project aligned with {record.ipa_window}",
                requirement=window_requirement,
            ))
            score += 5
        else:
            checks.append(ComplianceCheck(
                rule="IPA III Window Selection",
                status=CheckStatus.FAIL,
                message="No IPA window selected",
                requirement=window_requirement,
            ))

        country_requirement = "Must be Western Balkan beneficiary country"
        if self.catalog.is_eligible_country(record.country):
            checks.append(ComplianceCheck(
                rule="Geographic Eligibility",
                status=CheckStatus.PASS,
                message=f"{record.country} is eligible for IPA III funding",
                requirement=country_requirement,
            ))
            score += 5
        else:
            checks.append(ComplianceCheck(
                rule="Geographic Eligibility",
                status=CheckStatus.FAIL,
                message=f"{record.country or 'Country'} eligibility needs verification",
                requirement=country_requirement,
            ))

        if record.duration:
            months = record.duration_months or 0
            duration_requirement = "Should be 12-36 months for municipal projects"
            if 12 <= months <= 36:
                checks.append(ComplianceCheck(
                    rule="Project Duration",
                    status=CheckStatus.PASS,
                    message=f"{months} months is within typical IPA III project range",
                    requirement=duration_requirement,
                ))
                score += 5
            else:
                checks.append(ComplianceCheck(
                    rule="Project Duration",
                    status=CheckStatus.WARNING,
                    message=f"{months} months may require special justification",
                    requirement=duration_requirement,
                ))
                score += 2

        sustainability_requirement = "Must demonstrate long-term sustainability"
        if len(record.sustainability) > 100:
            checks.append(ComplianceCheck(
                rule="Sustainability Planning",
                status=CheckStatus.PASS,
                message="Sustainability measures addressed",
                requirement=sustainability_requirement,
            ))
            score += 5
        else:
            checks.append(ComplianceCheck(
                rule="Sustainability Planning",
                status=CheckStatus.WARNING,
                message="Sustainability planning needs strengthening",
                requirement=sustainability_requirement,
            ))
            score += 1

        return score

    def _score_synergy_and_innovation(
        self,
        record: ProjectRecord,
        suggestions: list[ExcellenceSuggestion],
    ) -> float:
        """Synergy potential 10 points, innovation signals 5 points."""
        score = 0.0

        synergy = self.synergy.detect(record)
        window_names = " and ".join(
            self.catalog.get_profile(window).label for window in synergy.synergy_windows
        )
        if synergy.synergy_score > 0.6:
            score += 10
            suggestions.append(ExcellenceSuggestion(
                field="description",
                type=SuggestionType.SYNERGY,
                title="High Synergy Potential Detected",
                description=f"Strong alignment with {window_names} - leverage this for enhanced impact",
                impact=Rating.HIGH,
            ))
        elif synergy.synergy_score > 0.3:
            score += 6
            suggestions.append(ExcellenceSuggestion(
                field="objectives",
                type=SuggestionType.SYNERGY,
                title="Cross-Window Opportunities Available",
                description=f"Consider integrating elements from {window_names} for broader impact",
                impact=Rating.MEDIUM,
            ))
        else:
            score += 3

        innovation_hits = self.classifier.total_hits(record.content, self.INNOVATION_KEYWORDS)
        if innovation_hits >= 3:
            score += 5
        elif innovation_hits >= 1:
            score += 3
            suggestions.append(ExcellenceSuggestion(
                field="description",
                type=SuggestionType.CONTENT,
                title="Enhance Innovation Elements",
                description="Consider highlighting innovative approaches, technologies, or methodologies",
                impact=Rating.MEDIUM,
            ))
        else:
            score += 1
            suggestions.append(ExcellenceSuggestion(
                field="objectives",
                type=SuggestionType.CONTENT,
                title="Add Innovation Components",
                description="EU funding favors innovative approaches - consider adding digital or technological elements",
                impact=Rating.HIGH,
            ))

        return score

    def _score_municipality_alignment(
        self,
        record: ProjectRecord,
        suggestions: list[ExcellenceSuggestion],
    ) -> float:
        """5 base points, 5 more when the municipality has a reference profile."""
        score = 5.0
        if not record.municipality:
            return score

        intelligence = generate_municipality_intelligence(record.municipality, record.content)
        if intelligence.profile is None:
            return score

        score += 5
        if intelligence.relevant_challenges:
            suggestions.append(ExcellenceSuggestion(
                field="description",
                type=SuggestionType.CONTENT,
                title="Address Local Challenges",
                description=(
                    "Consider addressing specific challenges: "
                    f"{', '.join(intelligence.relevant_challenges)}"
                ),
                impact=Rating.HIGH,
            ))
        if intelligence.aligned_opportunities:
            suggestions.append(ExcellenceSuggestion(
                field="objectives",
                type=SuggestionType.CONTENT,
                title="Leverage Local Opportunities",
                description=f"Align with local opportunities: {', '.join(intelligence.aligned_opportunities)}",
                impact=Rating.MEDIUM,
            ))

        return score

    # -------------------------------------------------------------------------
    # Recommendations
    # -------------------------------------------------------------------------

    def _strategic_recommendations(self, score: int, level: ExcellenceLevel) -> list[str]:
        recommendations = []

        if level in (ExcellenceLevel.POOR, ExcellenceLevel.BASIC):
            recommendations.extend([
                "Focus on completing all required fields with comprehensive content",
                "Add specific quantitative targets and measurable outcomes",
                "Strengthen alignment with IPA III window priorities",
            ])

        if level in (ExcellenceLevel.BASIC, ExcellenceLevel.GOOD):
            recommendations.extend([
                "Enhance innovation elements and digital transformation aspects",
                "Consider cross-window synergies for multiplicative impact",
                "Integrate specific municipality challenges and opportunities",
            ])

        if level in (ExcellenceLevel.GOOD, ExcellenceLevel.EXCELLENT):
            recommendations.extend([
                "Optimize for maximum EU assessment score with advanced methodologies",
                "Leverage regional cooperation and partnership opportunities",
                "Demonstrate scalability and replication potential",
            ])

        if score < 70:
            priority = "PRIORITY: Address critical issues before submission"
        elif score < 85:
            priority = "PRIORITY: Polish content for excellence level scoring"
        else:
            priority = "EXCELLENCE ACHIEVED: Fine-tune for maximum impact"

        return [priority] + recommendations
