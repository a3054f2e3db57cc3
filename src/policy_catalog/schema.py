"""Pydantic models for the funding policy catalog."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class SectionId(str, Enum):
    """Checklist sections scored by the compliance scorer."""
    BASIC_INFO = "basicInfo"
    STRATEGIC_ALIGNMENT = "strategicAlignment"
    IMPLEMENTATION = "implementation"
    RISK_SUSTAINABILITY = "riskSustainability"
    BUDGET_TIMELINE = "budgetTimeline"


class IndicatorCategory(str, Enum):
    """Intervention logic level of a performance indicator."""
    OUTPUT = "output"
    RESULT = "result"
    IMPACT = "impact"


class BudgetCategory(str, Enum):
    """Cost categories used in budget breakdowns."""
    PERSONNEL = "personnel"
    EQUIPMENT = "equipment"
    SERVICES = "services"
    TRAVEL = "travel"
    INFRASTRUCTURE = "infrastructure"
    OTHER = "other"


# =============================================================================
# Policy Profiles
# =============================================================================


class SectionOverride(BaseModel):
    """Per-window override of a checklist section's weight or threshold."""
    weight: Optional[float] = None
    threshold: Optional[float] = None


class PolicyProfile(BaseModel):
    """Pass/fail policy for one funding window."""
    window: str
    label: str
    threshold: float = Field(70, description="Minimum total compliance score (0-100)")
    section_overrides: dict[SectionId, SectionOverride] = Field(default_factory=dict)

    model_config = {"frozen": True}


class BudgetRange(BaseModel):
    """Typical project budget range for a window (EUR)."""
    min: float
    max: float
    avg: float


class BreakdownRatios(BaseModel):
    """Share of the total budget allocated to each cost category."""
    personnel: float
    equipment: float
    services: float
    travel: float
    infrastructure: float
    other: float

    def as_dict(self) -> dict[BudgetCategory, float]:
        """Ratios keyed by category, in declaration order."""
        return {category: getattr(self, category.value) for category in BudgetCategory}


class PerformanceIndicator(BaseModel):
    """A measurable indicator attached to an assessment."""
    id: str
    category: IndicatorCategory
    description: str
    target: Union[float, str]
    baseline: Union[float, str]
    current: Optional[Union[float, str]] = None
    unit: str
    verification: str


class WindowPriority(BaseModel):
    """Programme title, narrative and key areas of a window."""
    title: str
    description: str
    key_areas: list[str] = Field(default_factory=list)


class RelevanceAlignment(BaseModel):
    """Strategic alignment scoring for a window.

    The aligned score applies when any keyword occurs in the objectives or
    description, otherwise the base score applies.
    """
    keywords: list[str] = Field(default_factory=list)
    aligned_score: float = 90
    base_score: float = 60


class WindowPolicy(BaseModel):
    """Complete declarative policy for one window.

    Every component of the engine reads window-specific data from here so the
    scorer, validator and optimizer cannot drift apart.
    """
    profile: PolicyProfile
    priority: WindowPriority
    alignment_keywords: list[str] = Field(
        default_factory=list,
        description="Keywords the validator expects in description/objectives"
    )
    relevance: RelevanceAlignment = Field(default_factory=RelevanceAlignment)
    synergy_keywords: list[str] = Field(
        default_factory=list,
        description="Keywords counted by the synergy detector"
    )
    synergy_recommendation: str = ""
    budget_range: BudgetRange
    breakdown: BreakdownRatios
    indicators: list[PerformanceIndicator] = Field(default_factory=list)
