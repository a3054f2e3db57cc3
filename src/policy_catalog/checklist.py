"""Base checklist sections evaluated by the compliance scorer.

Each section is a named group of check items with a weight and a pass
threshold. Window profiles override weights and thresholds; the items
themselves are shared by every window.

Predicates read a project record by attribute (``title``, ``description``,
``smart_objectives``, ``budget_value``, ``duration_months`` ...) and never
modify it.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel

from .schema import PolicyProfile, SectionId


MAX_BUDGET = 10_500_000


class CheckEvaluation(BaseModel):
    """Outcome of a single check item."""
    met: bool
    detail: Optional[str] = None
    guidance: Optional[str] = None
    current_value: Optional[Union[int, float, str]] = None


@dataclass(frozen=True)
class CheckItem:
    """A boolean check over a project record."""
    id: str
    label: str
    evaluate: Callable[[Any], CheckEvaluation]


@dataclass(frozen=True)
class SectionDefinition:
    """A weighted group of check items."""
    id: SectionId
    label: str
    weight: float
    threshold: float
    items: tuple[CheckItem, ...] = field(default_factory=tuple)


def _text_length(value: Optional[str]) -> int:
    return len((value or "").strip())


def _min_length(attr: str, minimum: int, guidance: str) -> Callable[[Any], CheckEvaluation]:
    """Build a predicate requiring a text field of at least ``minimum`` chars."""
    def evaluate(record: Any) -> CheckEvaluation:
        length = _text_length(getattr(record, attr, None))
        return CheckEvaluation(
            met=length >= minimum,
            detail=f"{length} characters",
            guidance=guidance,
        )
    return evaluate


def _present(attr: str, guidance: str) -> Callable[[Any], CheckEvaluation]:
    def evaluate(record: Any) -> CheckEvaluation:
        return CheckEvaluation(
            met=bool((getattr(record, attr, None) or "").strip()),
            guidance=guidance,
        )
    return evaluate


def _smart_coverage(record: Any) -> CheckEvaluation:
    smart = getattr(record, "smart_objectives", None)
    values = smart.values() if smart is not None else []
    filled = sum(1 for value in values if _text_length(value) >= 80)
    return CheckEvaluation(
        met=filled >= 4,
        detail=f"{filled} SMART elements ≥ 80 chars",
        guidance="Ensure at least four SMART statements have 80+ characters explaining the target.",
    )


def _budget_range(record: Any) -> CheckEvaluation:
    amount = getattr(record, "budget_value", None) or 0
    met = 0 < amount <= MAX_BUDGET
    return CheckEvaluation(
        met=met,
        detail=f"€{amount:,}" if met else "Budget missing or out of range",
        guidance="Enter a total budget (≤ €10.5m) to match IPA co-financing expectations.",
        current_value=amount,
    )


def _duration_defined(record: Any) -> CheckEvaluation:
    duration = getattr(record, "duration_months", None) or 0
    return CheckEvaluation(
        met=duration >= 6,
        detail=f"{duration} months" if duration else "Not provided",
        guidance="Define a project duration of at least 6 months to fulfil IPA design norms.",
        current_value=duration,
    )


BASE_SECTIONS: tuple[SectionDefinition, ...] = (
    SectionDefinition(
        id=SectionId.BASIC_INFO,
        label="Basic Information",
        weight=0.2,
        threshold=60,
        items=(
            CheckItem(
                "title",
                "Project title is descriptive (≥ 10 characters)",
                _min_length("title", 10, "Provide a descriptive title with at least 10 characters."),
            ),
            CheckItem(
                "municipality",
                "Municipality selected",
                _present("municipality", "Specify the implementing municipality."),
            ),
            CheckItem(
                "country",
                "Country selected",
                _present("country", "Select the project country to confirm eligibility."),
            ),
            CheckItem(
                "ipaWindow",
                "IPA III window selected",
                _present("ipa_window", "Choose the primary IPA III window for alignment."),
            ),
        ),
    ),
    SectionDefinition(
        id=SectionId.STRATEGIC_ALIGNMENT,
        label="Strategic Alignment",
        weight=0.25,
        threshold=65,
        items=(
            CheckItem(
                "description-depth",
                "Project description depth (≥ 250 characters)",
                _min_length(
                    "description", 250,
                    "Expand the project description to at least 250 characters to cover context and rationale.",
                ),
            ),
            CheckItem(
                "objectives-depth",
                "Objectives cover EU alignment (≥ 200 characters)",
                _min_length(
                    "objectives", 200,
                    "Elaborate objectives with at least 200 characters referencing IPA priorities.",
                ),
            ),
        ),
    ),
    SectionDefinition(
        id=SectionId.IMPLEMENTATION,
        label="Implementation & SMART Logic",
        weight=0.25,
        threshold=70,
        items=(
            CheckItem(
                "methodology-depth",
                "Implementation methodology detailed (≥ 220 characters)",
                _min_length(
                    "methodology", 220,
                    "Describe methodology with at least 220 characters covering phases and partners.",
                ),
            ),
            CheckItem(
                "smart-coverage",
                "SMART objectives mostly completed (≥ 4 entries ≥ 80 characters)",
                _smart_coverage,
            ),
        ),
    ),
    SectionDefinition(
        id=SectionId.RISK_SUSTAINABILITY,
        label="Risk & Sustainability",
        weight=0.15,
        threshold=60,
        items=(
            CheckItem(
                "risks-depth",
                "Risk mitigation analysed (≥ 180 characters)",
                _min_length("risks", 180, "Provide at least 180 characters on key risks and mitigations."),
            ),
            CheckItem(
                "sustainability-depth",
                "Sustainability plan detailed (≥ 180 characters)",
                _min_length("sustainability", 180, "Detail sustainability actions with at least 180 characters."),
            ),
        ),
    ),
    SectionDefinition(
        id=SectionId.BUDGET_TIMELINE,
        label="Budget & Timeline",
        weight=0.15,
        threshold=55,
        items=(
            CheckItem("budget-range", "Budget defined and within EU co-financing limits", _budget_range),
            CheckItem("duration-defined", "Project duration specified (≥ 6 months)", _duration_defined),
        ),
    ),
)


def build_sections(profile: PolicyProfile) -> list[SectionDefinition]:
    """Apply a profile's overrides to the base sections and renormalize weights.

    Weights are divided by their sum so the sections of one scoring call
    always add up to 1. A non-positive weight sum leaves weights untouched.
    """
    sections = []
    for section in BASE_SECTIONS:
        override = profile.section_overrides.get(section.id)
        weight = section.weight
        threshold = section.threshold
        if override is not None:
            if override.weight is not None:
                weight = override.weight
            if override.threshold is not None:
                threshold = override.threshold
        sections.append(replace(section, weight=weight, threshold=threshold))

    total_weight = sum(section.weight for section in sections)
    if total_weight <= 0:
        return sections

    return [replace(section, weight=section.weight / total_weight) for section in sections]
