"""Section Compliance Scorer.

Scores a project's checklist completeness against the profile of its
funding window. Each section reports the share of met items; the total is
the weighted sum of section percentages using renormalized weights.
"""

import logging
from typing import Optional

from policy_catalog.catalog import PolicyCatalog
from policy_catalog.checklist import SectionDefinition, build_sections

from .schema import CheckItemResult, ComplianceMetrics, ProjectRecord, SectionResult, round_half_up


logger = logging.getLogger(__name__)


class SectionComplianceScorer:
    """Evaluates checklist sections for a project record.

    Scoring rules:
    - A project without a window is scored against the catalog's default
      window; an unknown window id uses the default profile
    - Section percentage = round(met / items * 100), 0 for empty sections
    - Weighted score = round(percentage / 100 * weight * 100)
    - Total = min(100, sum of weighted scores)
    - Rounding is half-up

    For a fixed window, meeting one more item never lowers the total.
    Selecting a window is itself an item, but it also replaces the
    default-window profile with the selected one, so the total can drop
    when the new profile weights the met sections lower.
    """

    def __init__(self, catalog: Optional[PolicyCatalog] = None):
        self.catalog = catalog or PolicyCatalog()

    def score(self, record: ProjectRecord) -> ComplianceMetrics:
        """Score a record against its window's checklist."""
        active_window = record.ipa_window.strip() or self.catalog.default_window
        profile = self.catalog.get_profile(active_window)

        sections = [
            self._score_section(section, record)
            for section in build_sections(profile)
        ]

        total = min(100, round_half_up(sum(section.weighted_score for section in sections)))

        logger.debug(
            "Compliance for window %s: total=%d (threshold %s)",
            profile.window, total, profile.threshold,
        )

        return ComplianceMetrics(
            total=total,
            window=profile.window,
            window_label=profile.label,
            window_threshold=profile.threshold,
            meets_window_threshold=total >= profile.threshold,
            sections=sections,
        )

    def _score_section(self, section: SectionDefinition, record: ProjectRecord) -> SectionResult:
        """Evaluate every item of one section."""
        item_count = len(section.items)
        item_weight = 100 / item_count if item_count else 0

        items = []
        for item in section.items:
            evaluation = item.evaluate(record)
            items.append(CheckItemResult(
                id=item.id,
                label=item.label,
                met=evaluation.met,
                detail=evaluation.detail,
                guidance=evaluation.guidance,
                current_value=evaluation.current_value,
                score=item_weight if evaluation.met else 0,
            ))

        met_count = sum(1 for item in items if item.met)
        percentage = round_half_up(met_count / item_count * 100) if item_count else 0
        weighted_score = round_half_up(percentage / 100 * section.weight * 100)

        return SectionResult(
            id=section.id,
            label=section.label,
            weight=section.weight,
            threshold=section.threshold,
            percentage=percentage,
            weighted_score=weighted_score,
            meets_threshold=percentage >= section.threshold,
            items=items,
        )
