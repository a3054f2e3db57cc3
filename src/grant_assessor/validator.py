"""Validation Engine.

Runs the IPA III rule groups over a project record and its performance
assessment, collecting errors, warnings and recommendations, then derives a
compliance level from the findings.

Rule groups:
1. Mandatory fields and SMART objectives
2. Window alignment keywords
3. Budget size and co-financing share
4. Relevance and maturity thresholds
5. Climate target
6. Cross-cutting priorities
7. Implementation readiness
8. Partnership
9. Monitoring framework
10. Sustainability
"""

import logging
from typing import Optional

from policy_catalog.catalog import PolicyCatalog

from .keywords import KeywordClassifier, get_classifier
from .performance import PerformanceAssessor
from .schema import (
    ComplianceLevel,
    PerformanceAssessment,
    ProjectRecord,
    Severity,
    ValidationError,
    ValidationResult,
    ValidationWarning,
)


logger = logging.getLogger(__name__)


def determine_compliance_level(
    errors: list[ValidationError],
    warnings: list[ValidationWarning],
    performance_score: float,
) -> ComplianceLevel:
    """Derive the compliance level from findings and the performance score."""
    critical = sum(1 for e in errors if e.severity == Severity.CRITICAL)
    major = sum(1 for e in errors if e.severity == Severity.MAJOR)
    minor = sum(1 for e in errors if e.severity == Severity.MINOR)

    if critical > 0:
        return ComplianceLevel.NON_COMPLIANT
    if major > 2:
        return ComplianceLevel.NON_COMPLIANT
    if major > 0 or performance_score < 65:
        return ComplianceLevel.PARTIALLY_COMPLIANT
    if performance_score >= 80 and len(warnings) < 3 and minor == 0:
        return ComplianceLevel.EXCELLENT
    return ComplianceLevel.COMPLIANT


def _dedupe(items: list[str]) -> list[str]:
    """Remove duplicates, keeping first occurrences in order."""
    return list(dict.fromkeys(items))


class ValidationEngine:
    """Validates project records against IPA III requirements."""

    MANDATORY_FIELDS = [
        ("title", "title", "Project Title"),
        ("municipality", "municipality", "Municipality"),
        ("country", "country", "Country"),
        ("ipa_window", "ipaWindow", "IPA Window"),
        ("description", "description", "Project Description"),
        ("objectives", "objectives", "Objectives"),
    ]

    MIN_BUDGET = 100_000
    LARGE_BUDGET = 10_000_000
    MAX_EU_SHARE = 85

    # Windows where partnerships are a core requirement
    CROSS_BORDER_WINDOWS = {"window5"}

    # Priority recommendations, in final display order
    PRIORITY_RECOMMENDATIONS = [
        ("climate", "PRIORITY: Increase climate-related activities to meet 18% minimum target"),
        ("maturity", "PRIORITY: Develop comprehensive implementation plan with clear deliverables"),
        ("relevance", "PRIORITY: Strengthen strategic alignment with IPA III objectives and EU acquis"),
    ]

    def __init__(
        self,
        assessor: Optional[PerformanceAssessor] = None,
        catalog: Optional[PolicyCatalog] = None,
        classifier: Optional[KeywordClassifier] = None,
    ):
        self.catalog = catalog or PolicyCatalog()
        self.classifier = classifier or get_classifier()
        self.assessor = assessor or PerformanceAssessor(catalog=self.catalog, classifier=self.classifier)

    def validate(
        self,
        record: ProjectRecord,
        assessment: Optional[PerformanceAssessment] = None,
    ) -> ValidationResult:
        """Validate a record, assessing its performance if not supplied."""
        if assessment is None:
            assessment = self.assessor.assess(record)

        errors: list[ValidationError] = []
        warnings: list[ValidationWarning] = []
        recommendations: list[str] = []

        self._check_mandatory_fields(record, errors)
        self._check_window_alignment(record, errors, warnings)
        self._check_budget(record, errors, warnings)
        self._check_performance(assessment, errors, warnings)
        self._check_climate(assessment, errors, warnings)
        self._check_cross_cutting(assessment, warnings, recommendations)
        self._check_implementation_readiness(record, warnings, recommendations)
        self._check_partnership(record, warnings)
        self._check_monitoring(record, warnings, recommendations)
        self._check_sustainability(record, warnings, recommendations)

        level = determine_compliance_level(errors, warnings, assessment.performance_score)
        recommendations = self._final_recommendations(assessment, errors, recommendations)

        logger.debug(
            "Validation: %d errors, %d warnings, level=%s",
            len(errors), len(warnings), level.value,
        )

        return ValidationResult(
            is_valid=not any(e.severity == Severity.CRITICAL for e in errors),
            errors=errors,
            warnings=warnings,
            recommendations=recommendations,
            compliance_level=level,
            assessment=assessment,
        )

    def _check_mandatory_fields(self, record: ProjectRecord, errors: list[ValidationError]) -> None:
        for attr, field, name in self.MANDATORY_FIELDS:
            value = getattr(record, attr)
            if not value.strip():
                errors.append(ValidationError(
                    field=field,
                    message=f"{name} is mandatory for IPA III applications",
                    severity=Severity.CRITICAL,
                ))
            elif attr == "description" and len(value) < 50:
                errors.append(ValidationError(
                    field=field,
                    message="Project description must be at least 50 characters",
                    severity=Severity.MAJOR,
                ))

        filled = record.smart_objectives.filled_count()
        if filled == 0:
            errors.append(ValidationError(
                field="smartObjectives",
                message="At least one SMART objective must be defined",
                severity=Severity.MAJOR,
            ))
        elif filled < 3:
            errors.append(ValidationError(
                field="smartObjectives",
                message="At least 3 SMART objectives should be defined for strong applications",
                severity=Severity.MINOR,
            ))

    def _check_window_alignment(
        self,
        record: ProjectRecord,
        errors: list[ValidationError],
        warnings: list[ValidationWarning],
    ) -> None:
        window = record.ipa_window
        if not window:
            return  # Reported as a mandatory field

        keywords = self.catalog.get_alignment_keywords(window)
        text = f"{record.description} {record.objectives}"
        matched = self.classifier.matches(text, keywords)

        if not matched:
            errors.append(ValidationError(
                field="ipaWindow",
                message=f"Project content does not align with {window} priorities",
                severity=Severity.MAJOR,
            ))
        elif len(matched) < 2:
            warnings.append(ValidationWarning(
                field="ipaWindow",
                message=f"Weak alignment with {window} priorities",
                impact="May reduce relevance score",
            ))

    def _check_budget(
        self,
        record: ProjectRecord,
        errors: list[ValidationError],
        warnings: list[ValidationWarning],
    ) -> None:
        total = record.budget_amount
        if total:
            if total < self.MIN_BUDGET:
                warnings.append(ValidationWarning(
                    field="totalBudget",
                    message="Budget below €100,000 may not meet minimum threshold",
                    impact="Consider combining with other initiatives",
                ))
            if total > self.LARGE_BUDGET:
                warnings.append(ValidationWarning(
                    field="totalBudget",
                    message="Budget above €10M requires enhanced justification",
                    impact="Ensure detailed budget breakdown and clear deliverables",
                ))

        eu = record.eu_contribution
        partner = record.partner_contribution
        if not eu or not partner:
            return

        combined = eu + partner
        if combined <= 0:
            return

        eu_share = eu / combined * 100
        if eu_share > self.MAX_EU_SHARE:
            errors.append(ValidationError(
                field="euContribution",
                message="EU contribution cannot exceed 85% for IPA III projects",
                severity=Severity.CRITICAL,
            ))
        elif eu_share > 80:
            warnings.append(ValidationWarning(
                field="euContribution",
                message="EU contribution above 80% requires strong justification",
                impact="May affect project approval",
            ))

        if eu_share < 50:
            warnings.append(ValidationWarning(
                field="euContribution",
                message="Low EU contribution request",
                impact="Consider if IPA III is the appropriate funding source",
            ))

    def _check_performance(
        self,
        assessment: PerformanceAssessment,
        errors: list[ValidationError],
        warnings: list[ValidationWarning],
    ) -> None:
        relevance = assessment.relevance_score
        if relevance < 50:
            errors.append(ValidationError(
                field="relevance",
                message="Project relevance score is critically low",
                severity=Severity.CRITICAL,
            ))
        elif relevance < 65:
            errors.append(ValidationError(
                field="relevance",
                message="Project does not meet minimum relevance threshold (65)",
                severity=Severity.MAJOR,
            ))
        elif relevance < 75:
            warnings.append(ValidationWarning(
                field="relevance",
                message="Relevance score is acceptable but could be improved",
                impact="Strengthen alignment with EU priorities",
            ))

        maturity = assessment.maturity_score
        if maturity < 45:
            errors.append(ValidationError(
                field="maturity",
                message="Project is not ready for implementation",
                severity=Severity.CRITICAL,
            ))
        elif maturity < 60:
            errors.append(ValidationError(
                field="maturity",
                message="Project does not meet minimum maturity threshold (60)",
                severity=Severity.MAJOR,
            ))
        elif maturity < 70:
            warnings.append(ValidationWarning(
                field="maturity",
                message="Maturity score indicates implementation risks",
                impact="Develop detailed implementation plan",
            ))

    def _check_climate(
        self,
        assessment: PerformanceAssessment,
        errors: list[ValidationError],
        warnings: list[ValidationWarning],
    ) -> None:
        climate = assessment.climate_contribution
        if climate < 10:
            warnings.append(ValidationWarning(
                field="climate",
                message="Very low climate contribution",
                impact="Consider adding climate-related activities",
            ))
        elif climate < 18:
            errors.append(ValidationError(
                field="climate",
                message=f"Climate contribution ({climate}%) below IPA III minimum target (18%)",
                severity=Severity.MAJOR,
            ))
        elif climate < 20:
            warnings.append(ValidationWarning(
                field="climate",
                message="Climate contribution meets minimum but below 2027 target (20%)",
                impact="Consider enhancing climate components",
            ))

    def _check_cross_cutting(
        self,
        assessment: PerformanceAssessment,
        warnings: list[ValidationWarning],
        recommendations: list[str],
    ) -> None:
        priorities = assessment.cross_cutting_priorities

        if priorities.gender_equality < 30:
            warnings.append(ValidationWarning(
                field="gender",
                message="Insufficient gender equality integration",
                impact="Add gender-specific objectives and activities",
            ))
            recommendations.append("Include gender impact assessment and women empowerment activities")

        if priorities.digital_transformation < 20:
            recommendations.append(
                "Consider adding digital transformation components to modernize project delivery"
            )

        if priorities.good_governance < 40:
            warnings.append(ValidationWarning(
                field="governance",
                message="Limited good governance elements",
                impact="Strengthen transparency and accountability measures",
            ))

        if priorities.youth_inclusion < 25:
            recommendations.append("Include youth participation and capacity building activities")

        if priorities.environmental_protection < 30:
            warnings.append(ValidationWarning(
                field="environment",
                message="Low environmental protection focus",
                impact="Add environmental safeguards and sustainability measures",
            ))

    def _check_implementation_readiness(
        self,
        record: ProjectRecord,
        warnings: list[ValidationWarning],
        recommendations: list[str],
    ) -> None:
        if len(record.methodology) < 100:
            warnings.append(ValidationWarning(
                field="methodology",
                message="Implementation methodology is insufficient",
                impact="Develop detailed implementation approach",
            ))

        if not record.timeline:
            warnings.append(ValidationWarning(
                field="timeline",
                message="No implementation timeline provided",
                impact="Define clear project phases and milestones",
            ))
            recommendations.append("Create a detailed Gantt chart with key milestones")

        if not record.milestones:
            warnings.append(ValidationWarning(
                field="milestones",
                message="No milestones defined",
                impact="Set measurable milestones for progress tracking",
            ))

        if len(record.risks) < 50:
            warnings.append(ValidationWarning(
                field="risks",
                message="Risk assessment is inadequate",
                impact="Conduct comprehensive risk analysis",
            ))
            recommendations.append("Develop risk register with mitigation strategies")

    def _check_partnership(self, record: ProjectRecord, warnings: list[ValidationWarning]) -> None:
        if not record.lead_partner:
            warnings.append(ValidationWarning(
                field="leadPartner",
                message="No lead partner identified",
                impact="Identify organization responsible for implementation",
            ))

        if not record.has_partners:
            warnings.append(ValidationWarning(
                field="partners",
                message="No implementation partners defined",
                impact="Consider partnerships for enhanced capacity",
            ))
            if record.ipa_window in self.CROSS_BORDER_WINDOWS:
                warnings.append(ValidationWarning(
                    field="partners",
                    message="Cross-border projects require multiple country partners",
                    impact="Critical requirement for Window 5",
                ))

    def _check_monitoring(
        self,
        record: ProjectRecord,
        warnings: list[ValidationWarning],
        recommendations: list[str],
    ) -> None:
        if not record.monitoring_plan:
            warnings.append(ValidationWarning(
                field="monitoringPlan",
                message="No monitoring and evaluation framework",
                impact="Define how progress will be measured",
            ))
            recommendations.append("Develop M&E framework with clear indicators and verification methods")

        if not record.indicators:
            warnings.append(ValidationWarning(
                field="indicators",
                message="No performance indicators defined",
                impact="Set SMART indicators for result measurement",
            ))

        if not record.evaluation_approach:
            recommendations.append("Include mid-term and final evaluation plans")

    def _check_sustainability(
        self,
        record: ProjectRecord,
        warnings: list[ValidationWarning],
        recommendations: list[str],
    ) -> None:
        text = record.sustainability
        if len(text) < 100:
            warnings.append(ValidationWarning(
                field="sustainability",
                message="Sustainability plan is insufficient",
                impact="Demonstrate long-term viability",
            ))

        if not self.classifier.contains(text, "financial"):
            recommendations.append("Address financial sustainability beyond project period")
        if not self.classifier.contains(text, "institutional"):
            recommendations.append("Define institutional arrangements for continuation")
        if not self.classifier.contains(text, "environmental"):
            recommendations.append("Include environmental sustainability measures")

    def _final_recommendations(
        self,
        assessment: PerformanceAssessment,
        errors: list[ValidationError],
        recommendations: list[str],
    ) -> list[str]:
        """Put priority items first, add performance-based advice and dedupe."""
        error_fields = {e.field for e in errors}
        priority = [text for field, text in self.PRIORITY_RECOMMENDATIONS if field in error_fields]

        extra = []
        performance = assessment.performance_score
        relevance = assessment.relevance_score
        maturity = assessment.maturity_score

        if performance < 70:
            extra.append("Consider technical assistance to strengthen project design")
        if relevance > 75 and maturity < 65:
            extra.append(
                "Focus on implementation readiness - good strategic alignment but needs operational planning"
            )
        if maturity > 75 and relevance < 65:
            extra.append(
                "Enhance strategic narrative - implementation ready but needs stronger EU alignment"
            )
        if 75 <= performance < 80:
            extra.append(
                "Project is close to excellence level - minor improvements could significantly "
                "enhance competitiveness"
            )

        return _dedupe(priority + recommendations + extra)
