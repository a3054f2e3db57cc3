"""Pydantic models for the Grant Assessment Engine.

Input schemas for draft project records and output schemas for compliance,
performance, validation, synergy and resource recommendations.
"""

import math
import re
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

# Re-export catalog types for convenience
from policy_catalog.schema import (
    BudgetCategory,
    IndicatorCategory,
    PerformanceIndicator,
    SectionId,
)


# =============================================================================
# Severity and Level Enums
# =============================================================================


class Severity(str, Enum):
    """Severity of a validation error."""
    CRITICAL = "critical"  # Blocks submission
    MAJOR = "major"  # Blocks compliance
    MINOR = "minor"  # Cosmetic


class ComplianceLevel(str, Enum):
    """Overall compliance level derived from validation findings."""
    NON_COMPLIANT = "non-compliant"
    PARTIALLY_COMPLIANT = "partially-compliant"
    COMPLIANT = "compliant"
    EXCELLENT = "excellent"


class ComplexityLevel(str, Enum):
    """Project complexity bucket used by the resource optimizer."""
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    VERY_COMPLEX = "very_complex"

    @classmethod
    def from_score(cls, score: float) -> "ComplexityLevel":
        """Bucket a 1-10 complexity score."""
        if score <= 4:
            return cls.SIMPLE
        if score <= 6:
            return cls.MODERATE
        if score <= 8:
            return cls.COMPLEX
        return cls.VERY_COMPLEX


class BudgetScenario(str, Enum):
    MINIMAL = "minimal"
    STANDARD = "standard"
    ENHANCED = "enhanced"


class SkillLevel(str, Enum):
    JUNIOR = "junior"
    SENIOR = "senior"
    EXPERT = "expert"


class RiskCategory(str, Enum):
    BUDGET = "budget"
    TIMELINE = "timeline"
    PERSONNEL = "personnel"
    TECHNICAL = "technical"


class Rating(str, Enum):
    """Low/medium/high rating for probabilities and impacts."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExcellenceLevel(str, Enum):
    POOR = "poor"
    BASIC = "basic"
    GOOD = "good"
    EXCELLENT = "excellent"

    @classmethod
    def from_score(cls, score: float) -> "ExcellenceLevel":
        if score >= 85:
            return cls.EXCELLENT
        if score >= 70:
            return cls.GOOD
        if score >= 50:
            return cls.BASIC
        return cls.POOR


class IssueSeverity(str, Enum):
    """Severity of an excellence or field-level issue."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class SuggestionType(str, Enum):
    CONTENT = "content"
    STRUCTURE = "structure"
    COMPLIANCE = "compliance"
    SYNERGY = "synergy"


class CheckStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"


# =============================================================================
# Raw Input Models (matching the application form format)
# =============================================================================


class RawSmartObjectives(BaseModel):
    """Raw SMART objectives block from the form."""
    specific: Optional[Any] = None
    measurable: Optional[Any] = None
    achievable: Optional[Any] = None
    relevant: Optional[Any] = None
    timeBound: Optional[Any] = None

    class Config:
        extra = "allow"


class RawProjectRecord(BaseModel):
    """Raw project record as saved by the application form.

    Numeric fields arrive as strings, numbers or empty strings; partners may
    be a list, a comma separated string or a JSON encoded list.
    """
    title: Optional[Any] = None
    municipality: Optional[Any] = None
    country: Optional[Any] = None
    ipaWindow: Optional[Any] = None
    budget: Optional[Any] = None
    duration: Optional[Any] = None
    description: Optional[Any] = None
    objectives: Optional[Any] = None
    methodology: Optional[Any] = None
    smartObjectives: Optional[RawSmartObjectives] = None
    risks: Optional[Any] = None
    sustainability: Optional[Any] = None
    totalBudget: Optional[Any] = None
    euContribution: Optional[Any] = None
    partnerContribution: Optional[Any] = None
    leadPartner: Optional[Any] = None
    partners: Optional[Any] = None
    partnerExperience: Optional[Any] = None
    partnerRoles: Optional[Any] = None
    mitigation: Optional[Any] = None
    activities: Optional[Any] = None
    deliverables: Optional[Any] = None
    timeline: Optional[Any] = None
    milestones: Optional[Any] = None
    phases: Optional[Any] = None
    indicators: Optional[Any] = None
    monitoringPlan: Optional[Any] = None
    evaluationApproach: Optional[Any] = None
    budgetBreakdown: Optional[Any] = None
    technicalSpecifications: Optional[Any] = None
    feasibilityStudy: Optional[Any] = None
    preparatoryWork: Optional[Any] = None

    class Config:
        extra = "allow"


# =============================================================================
# Normalized Project Record
# =============================================================================


_DIGITS = re.compile(r"\d[\d,]*")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def parse_amount(value: Optional[str]) -> Optional[int]:
    """Parse the first number in a free-form string ("€1,200,000" -> 1200000)."""
    if not value:
        return None
    match = _DIGITS.search(str(value))
    if not match:
        return None
    digits = match.group(0).replace(",", "")
    return int(digits) if digits else None


class SmartObjectives(BaseModel):
    """The five SMART objective statements."""
    specific: str = ""
    measurable: str = ""
    achievable: str = ""
    relevant: str = ""
    time_bound: str = ""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def values(self) -> list[str]:
        """Statements in S-M-A-R-T order."""
        return [self.specific, self.measurable, self.achievable, self.relevant, self.time_bound]

    def filled_count(self) -> int:
        return sum(1 for value in self.values() if value.strip())


class ProjectRecord(BaseModel):
    """A draft grant application.

    The engine only reads records; every computation returns a new result
    object. Accepts both snake_case names and the form's camelCase keys.
    """
    # Identity
    title: str = ""
    municipality: str = ""
    country: str = ""
    ipa_window: str = ""

    # Free text
    description: str = ""
    objectives: str = ""
    methodology: str = ""
    risks: str = ""
    sustainability: str = ""
    smart_objectives: SmartObjectives = Field(default_factory=SmartObjectives)

    # Numeric-ish
    budget: str = ""
    duration: str = ""
    total_budget: Optional[float] = None
    eu_contribution: Optional[float] = None
    partner_contribution: Optional[float] = None

    # Extended
    lead_partner: Optional[str] = None
    partners: list[str] = Field(default_factory=list)
    partner_experience: Optional[str] = None
    partner_roles: Optional[str] = None
    mitigation: Optional[str] = None
    activities: Optional[str] = None
    deliverables: Optional[str] = None
    timeline: Optional[str] = None
    milestones: Optional[str] = None
    phases: Optional[str] = None
    indicators: Optional[str] = None
    monitoring_plan: Optional[str] = None
    evaluation_approach: Optional[str] = None
    budget_breakdown: Optional[str] = None
    technical_specifications: Optional[str] = None
    feasibility_study: Optional[str] = None
    preparatory_work: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @property
    def budget_value(self) -> Optional[int]:
        """Amount parsed from the ``budget`` text field."""
        return parse_amount(self.budget)

    @property
    def budget_amount(self) -> Optional[float]:
        """Total budget: ``total_budget`` if set, else the parsed ``budget`` text."""
        if self.total_budget:
            return self.total_budget
        return self.budget_value

    @property
    def duration_months(self) -> Optional[int]:
        return parse_amount(self.duration)

    @property
    def has_partners(self) -> bool:
        return len(self.partners) > 0

    @property
    def content(self) -> str:
        """Title, description and objectives joined for keyword scans."""
        return f"{self.title} {self.description} {self.objectives}"


# =============================================================================
# Compliance Models
# =============================================================================


class CheckItemResult(BaseModel):
    """An evaluated checklist item."""
    id: str
    label: str
    met: bool
    detail: Optional[str] = None
    guidance: Optional[str] = None
    current_value: Optional[Union[int, float, str]] = None
    score: float = 0


class SectionResult(BaseModel):
    """Per-section compliance outcome."""
    id: SectionId
    label: str
    weight: float  # Renormalized
    threshold: float
    percentage: int
    weighted_score: int
    meets_threshold: bool
    items: list[CheckItemResult] = Field(default_factory=list)


class ComplianceMetrics(BaseModel):
    """Checklist compliance of a project against its window profile."""
    total: int
    window: str
    window_label: str
    window_threshold: float
    meets_window_threshold: bool
    sections: list[SectionResult] = Field(default_factory=list)


# =============================================================================
# Performance Models
# =============================================================================


class CrossCuttingPriorities(BaseModel):
    """Cross-cutting priority sub-scores (0-100)."""
    gender_equality: int = 0
    environmental_protection: int = 0
    climate_action: int = 0
    digital_transformation: int = 0
    good_governance: int = 0
    youth_inclusion: int = 0


class PerformanceCompliance(BaseModel):
    meets_relevance_criteria: bool
    meets_maturity_criteria: bool
    meets_climate_target: bool
    overall_compliant: bool


class PerformanceAssessment(BaseModel):
    """Relevance, maturity and climate assessment of a project."""
    relevance_score: int
    maturity_score: int
    climate_contribution: int  # % of budget
    cross_cutting_priorities: CrossCuttingPriorities
    indicators: list[PerformanceIndicator] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    compliance: PerformanceCompliance

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def performance_score(self) -> int:
        """Fixed 60/40 blend of relevance and maturity."""
        return round_half_up(self.relevance_score * 0.6 + self.maturity_score * 0.4)


# =============================================================================
# Validation Models
# =============================================================================


class ValidationError(BaseModel):
    """A rule violation found in a project record."""
    field: str
    message: str
    severity: Severity


class ValidationWarning(BaseModel):
    field: str
    message: str
    impact: str


class ValidationResult(BaseModel):
    """Complete output of the validation engine."""
    is_valid: bool
    errors: list[ValidationError] = Field(default_factory=list)
    warnings: list[ValidationWarning] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    compliance_level: ComplianceLevel
    assessment: PerformanceAssessment


# =============================================================================
# Synergy Models
# =============================================================================


class SynergyResult(BaseModel):
    """Windows a project's text resonates with."""
    primary_window: str
    synergy_windows: list[str] = Field(default_factory=list)
    window_scores: dict[str, int] = Field(default_factory=dict)
    synergy_score: float = 0.0
    recommendations: list[str] = Field(default_factory=list)


# =============================================================================
# Resource Optimization Models
# =============================================================================


class ComplexityAnalysis(BaseModel):
    score: float  # 1-10
    level: ComplexityLevel
    factors: list[str] = Field(default_factory=list)


class BudgetBreakdown(BaseModel):
    """Budget amounts per cost category (EUR)."""
    personnel: int = 0
    equipment: int = 0
    services: int = 0
    travel: int = 0
    infrastructure: int = 0
    other: int = 0

    def as_dict(self) -> dict[BudgetCategory, int]:
        return {category: getattr(self, category.value) for category in BudgetCategory}

    @property
    def total(self) -> int:
        return sum(self.as_dict().values())


class CoFinancingStructure(BaseModel):
    """Percentage split of the budget between funders."""
    eu_contribution: int
    national_contribution: int
    municipal_contribution: int

    @property
    def total(self) -> int:
        return self.eu_contribution + self.national_contribution + self.municipal_contribution


class BudgetAlternative(BaseModel):
    scenario: BudgetScenario
    total: int
    description: str
    impact: str


class BudgetOptimization(BaseModel):
    recommended_total: int
    breakdown: BudgetBreakdown
    co_financing: CoFinancingStructure
    justification: str
    alternatives: list[BudgetAlternative] = Field(default_factory=list)


class ProjectPhase(BaseModel):
    name: str
    duration: int  # months
    start_month: int
    budget_share: float
    budget_amount: int
    activities: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)


class TimelineOptimization(BaseModel):
    recommended_duration: int  # months
    phases: list[ProjectPhase] = Field(default_factory=list)
    critical_path: list[str] = Field(default_factory=list)
    seasonal_considerations: list[str] = Field(default_factory=list)
    buffer_percent: int = 15


class PersonnelRole(BaseModel):
    role: str
    person_months: int
    skill_level: SkillLevel
    monthly_rate: int  # EUR
    total_cost: int


class PersonnelOptimization(BaseModel):
    total_person_months: int
    key_roles: list[PersonnelRole] = Field(default_factory=list)
    skills_needed: list[str] = Field(default_factory=list)
    training_budget: int


class ResourceRisk(BaseModel):
    category: RiskCategory
    risk: str
    probability: Rating
    impact: Rating
    mitigation: str


class ResourceOptimization(BaseModel):
    """Budget, timeline and staffing recommendation for a project."""
    window: str
    municipality_found: bool
    budget: BudgetOptimization
    timeline: TimelineOptimization
    personnel: PersonnelOptimization
    complexity: ComplexityAnalysis
    risks: list[ResourceRisk] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    confidence: float  # 0-0.95


# =============================================================================
# Excellence Models
# =============================================================================


class ExcellenceIssue(BaseModel):
    field: str
    severity: IssueSeverity
    message: str
    suggestion: str


class ExcellenceSuggestion(BaseModel):
    field: str
    type: SuggestionType
    title: str
    description: str
    impact: Rating


class ComplianceCheck(BaseModel):
    rule: str
    status: CheckStatus
    message: str
    requirement: str


class ExcellenceResult(BaseModel):
    """Submission-readiness quality score."""
    score: int  # 0-100
    level: ExcellenceLevel
    critical_issues: list[ExcellenceIssue] = Field(default_factory=list)
    improvements: list[ExcellenceSuggestion] = Field(default_factory=list)
    compliance_checks: list[ComplianceCheck] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class FieldValidation(BaseModel):
    """Quick validation of a single form field."""
    field: str
    is_valid: bool
    issues: list[ExcellenceIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    score: int = 0


class QualityIndicator(BaseModel):
    color: str
    message: str
