"""Report Formatter - plain-text renderings of engine results.

Every function is pure: timestamps are passed in (``generated_at``) and only
default to the current UTC time when omitted.
"""

from datetime import datetime, timezone
from typing import Optional

from policy_catalog.municipalities import generate_municipality_intelligence

from .schema import (
    ComplianceLevel,
    ComplianceMetrics,
    PerformanceAssessment,
    ProjectRecord,
    ResourceOptimization,
    ValidationResult,
)


RULE = "====================================="

NEXT_STEPS = {
    ComplianceLevel.NON_COMPLIANT: [
        "Address all critical and major errors",
        "Strengthen project design based on recommendations",
        "Consider technical assistance for project development",
    ],
    ComplianceLevel.PARTIALLY_COMPLIANT: [
        "Resolve remaining major errors",
        "Implement key recommendations",
        "Enhance weak areas identified in warnings",
    ],
    ComplianceLevel.COMPLIANT: [
        "Address any remaining warnings",
        "Consider recommendations for strengthening",
        "Proceed with application submission",
    ],
    ComplianceLevel.EXCELLENT: [
        "Minor refinements based on recommendations",
        "Prepare for fast-track review",
        "Consider as best practice example",
    ],
}


def _timestamp(generated_at: Optional[datetime]) -> str:
    return (generated_at or datetime.now(timezone.utc)).isoformat()


def _status(passed: bool, yes: str = "PASS", no: str = "FAIL") -> str:
    return yes if passed else no


def _numbered(items: list[str]) -> list[str]:
    return [f"{i}. {item}" for i, item in enumerate(items, 1)]


def format_assessment_report(
    assessment: PerformanceAssessment,
    generated_at: Optional[datetime] = None,
    minimum_climate_target: float = 18,
) -> str:
    """Render a performance assessment."""
    compliance = assessment.compliance
    priorities = assessment.cross_cutting_priorities

    lines = [
        "IPA III PERFORMANCE ASSESSMENT REPORT",
        RULE,
        "",
        f"OVERALL PERFORMANCE SCORE: {assessment.performance_score}/100",
        f"STATUS: {_status(compliance.overall_compliant, 'COMPLIANT', 'NON-COMPLIANT')}",
        "",
        f"1. RELEVANCE SCORE: {assessment.relevance_score}/100",
        f"   Status: {_status(compliance.meets_relevance_criteria)}",
        "",
        f"2. MATURITY SCORE: {assessment.maturity_score}/100",
        f"   Status: {_status(compliance.meets_maturity_criteria)}",
        "",
        f"3. CLIMATE CONTRIBUTION: {assessment.climate_contribution}%",
        f"   Target: {minimum_climate_target:g}% minimum",
        f"   Status: {_status(compliance.meets_climate_target, 'ACHIEVED', 'BELOW TARGET')}",
        "",
        "4. CROSS-CUTTING PRIORITIES:",
        f"   - Gender Equality: {priorities.gender_equality}%",
        f"   - Environmental Protection: {priorities.environmental_protection}%",
        f"   - Climate Action: {priorities.climate_action}%",
        f"   - Digital Transformation: {priorities.digital_transformation}%",
        f"   - Good Governance: {priorities.good_governance}%",
        f"   - Youth Inclusion: {priorities.youth_inclusion}%",
        "",
        f"5. PERFORMANCE INDICATORS: {len(assessment.indicators)} defined",
        "",
        "6. RECOMMENDATIONS:",
    ]
    lines.extend(f"   - {recommendation}" for recommendation in assessment.recommendations)
    lines.extend(["", RULE, f"Generated: {_timestamp(generated_at)}"])
    return "\n".join(lines)


def format_validation_report(
    result: ValidationResult,
    record: ProjectRecord,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render a validation result with next steps for its compliance level."""
    lines = [
        "IPA III COMPLIANCE VALIDATION REPORT",
        RULE,
        f"Project: {record.title or 'Untitled'}",
        f"Municipality: {record.municipality or 'Not specified'}",
        f"IPA Window: {record.ipa_window or 'Not selected'}",
        f"Date: {_timestamp(generated_at)}",
        "",
        f"COMPLIANCE STATUS: {result.compliance_level.value.upper()}",
        f"VALIDATION RESULT: {_status(result.is_valid)}",
        "",
        RULE,
        f"ERRORS ({len(result.errors)})",
        RULE,
    ]
    if result.errors:
        lines.extend(
            f"[{error.severity.value.upper()}] {error.field}: {error.message}"
            for error in result.errors
        )
    else:
        lines.append("No errors found")

    lines.extend(["", RULE, f"WARNINGS ({len(result.warnings)})", RULE])
    if result.warnings:
        blocks = [
            f"{warning.field}: {warning.message}\n  Impact: {warning.impact}"
            for warning in result.warnings
        ]
        lines.append("\n\n".join(blocks))
    else:
        lines.append("No warnings")

    lines.extend(["", RULE, f"RECOMMENDATIONS ({len(result.recommendations)})", RULE])
    lines.extend(_numbered(result.recommendations) or ["No additional recommendations"])

    lines.extend(["", RULE, "NEXT STEPS", RULE])
    lines.extend(_numbered(NEXT_STEPS[result.compliance_level]))

    lines.extend(["", RULE, "Based on Regulation (EU) 2021/1529"])
    return "\n".join(lines)


def format_compliance_summary(metrics: ComplianceMetrics) -> str:
    """Render checklist compliance, one line per section plus missing items."""
    lines = [
        f"Compliance: {metrics.total}/100 for {metrics.window_label} "
        f"(threshold {metrics.window_threshold:g}) - "
        f"{_status(metrics.meets_window_threshold)}",
    ]
    for section in metrics.sections:
        lines.append(
            f"  - {section.label}: {section.percentage}% "
            f"(weight {section.weight:.2f}, threshold {section.threshold:g}) "
            f"{_status(section.meets_threshold)}"
        )
        for item in section.items:
            if not item.met:
                lines.append(f"      missing: {item.label}" + (f" - {item.guidance}" if item.guidance else ""))
    return "\n".join(lines)


def format_optimization_summary(optimization: ResourceOptimization) -> str:
    """Render the budget, timeline and staffing recommendation."""
    budget = optimization.budget
    timeline = optimization.timeline
    personnel = optimization.personnel
    co_financing = budget.co_financing

    lines = [
        f"Recommended budget: €{budget.recommended_total:,} ({optimization.window})",
        f"Co-financing: EU {co_financing.eu_contribution}% / "
        f"national {co_financing.national_contribution}% / "
        f"municipal {co_financing.municipal_contribution}%",
        "Breakdown:",
    ]
    lines.extend(
        f"  - {category.value}: €{amount:,}" for category, amount in budget.breakdown.as_dict().items()
    )
    lines.append("Alternatives:")
    lines.extend(
        f"  - {alternative.scenario.value}: €{alternative.total:,} - {alternative.description}"
        for alternative in budget.alternatives
    )

    lines.append(
        f"Timeline: {timeline.recommended_duration} months "
        f"(+{timeline.buffer_percent}% buffer)"
    )
    lines.extend(
        f"  - {phase.name}: months {phase.start_month}-{phase.start_month + phase.duration - 1}, "
        f"€{phase.budget_amount:,}"
        for phase in timeline.phases
    )

    lines.append(
        f"Personnel: {personnel.total_person_months} person-months, "
        f"training budget €{personnel.training_budget:,}"
    )
    lines.extend(
        f"  - {role.role}: {role.person_months} pm ({role.skill_level.value}) €{role.total_cost:,}"
        for role in personnel.key_roles
    )

    lines.append(
        f"Complexity: {optimization.complexity.score:g}/10 ({optimization.complexity.level.value})"
    )
    if optimization.risks:
        lines.append("Risks:")
        lines.extend(f"  - [{risk.category.value}] {risk.risk}" for risk in optimization.risks)
    lines.append("Recommendations:")
    lines.extend(f"  - {recommendation}" for recommendation in optimization.recommendations)
    lines.append(f"Confidence: {optimization.confidence:.0%}")
    return "\n".join(lines)


def enrich_prompt(base_prompt: str, municipality_name: Optional[str], record: ProjectRecord) -> str:
    """Append municipality-specific context to a text-generation prompt."""
    intelligence = generate_municipality_intelligence(municipality_name, record.content)
    profile = intelligence.profile

    if profile is None:
        return (
            base_prompt
            + "\n\nNote: Municipality-specific intelligence not available. "
            "Use general Western Balkan context."
        )

    challenges = ", ".join(intelligence.relevant_challenges) or "General municipal development needs"
    opportunities = ", ".join(intelligence.aligned_opportunities) or "Standard development potential"

    sections = [
        base_prompt,
        "",
        "MUNICIPALITY-SPECIFIC INTELLIGENCE",
        intelligence.local_context,
        "",
        "BUDGET & FINANCING INTELLIGENCE:",
        intelligence.budget_guidance,
        "",
        "LOCAL OPTIMIZATION REQUIREMENTS:",
        f"- Address specific local challenges: {challenges}",
        f"- Leverage local opportunities: {opportunities}",
        f"- Consider demographic profile: {profile.demographics.age_groups.youth:g}% youth, "
        f"{profile.demographics.education.high_education:g}% higher education",
        f"- Infrastructure context: {profile.infrastructure.internet_coverage:g}% internet coverage, "
        f"{profile.infrastructure.energy_efficiency:g}/10 energy efficiency",
        f"- Governance level: {profile.governance.transparency_score}/10 transparency, "
        f"{profile.governance.digital_services:g}% services digitalized",
        "",
        "RECOMMENDED PARTNERSHIPS:",
        ", ".join(intelligence.recommended_partners[:3]),
        "",
        f"Tailor the response to {profile.name}'s context, challenges and opportunities. "
        "Reference local conditions, demographics and strategic priorities, and keep "
        "recommendations realistic for the municipality's capacity and resources.",
    ]
    return "\n".join(sections)
