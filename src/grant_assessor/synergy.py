"""Synergy Detector.

Finds the windows whose themes a project's text resonates with beyond its
declared primary window.
"""

import logging
from typing import Optional

from policy_catalog.catalog import PolicyCatalog

from .keywords import KeywordClassifier, get_classifier
from .schema import ProjectRecord, SynergyResult


logger = logging.getLogger(__name__)


class SynergyDetector:
    """Counts window keyword hits in title, description and objectives.

    - Primary window: the declared window, else the highest scoring window
      (ties go to the later window)
    - Synergy windows: other windows with at least MIN_HITS hits, highest
      first, at most MAX_SYNERGY_WINDOWS
    - Synergy score: min(all hits / 10, 1) when any synergy window exists
    """

    MIN_HITS = 2
    MAX_SYNERGY_WINDOWS = 2

    # Order in which synergy recommendations are listed
    RECOMMENDATION_ORDER = ["window3", "window4", "window2", "window1", "window5"]

    def __init__(
        self,
        catalog: Optional[PolicyCatalog] = None,
        classifier: Optional[KeywordClassifier] = None,
    ):
        self.catalog = catalog or PolicyCatalog()
        self.classifier = classifier or get_classifier()

    def window_scores(self, text: str) -> dict[str, int]:
        """Keyword hit count per window, in catalog order."""
        return {
            window: self.classifier.total_hits(text, keywords)
            for window, keywords in self.catalog.get_synergy_keywords().items()
        }

    def detect(self, record: ProjectRecord) -> SynergyResult:
        scores = self.window_scores(record.content.lower())

        primary = record.ipa_window or self._best_window(scores)

        ranked = sorted(
            (
                (window, score) for window, score in scores.items()
                if window != primary and score >= self.MIN_HITS
            ),
            key=lambda item: item[1],
            reverse=True,
        )
        synergy_windows = [window for window, _ in ranked[:self.MAX_SYNERGY_WINDOWS]]

        total_hits = sum(scores.values())
        synergy_score = min(total_hits / 10, 1.0) if synergy_windows else 0.0

        logger.debug(
            "Synergy: primary=%s windows=%s score=%.2f",
            primary, synergy_windows, synergy_score,
        )

        return SynergyResult(
            primary_window=primary,
            synergy_windows=synergy_windows,
            window_scores=scores,
            synergy_score=synergy_score,
            recommendations=self._recommendations(primary, synergy_windows),
        )

    def _best_window(self, scores: dict[str, int]) -> str:
        best = ""
        best_score = -1
        for window, score in scores.items():
            if score >= best_score:
                best, best_score = window, score
        return best or self.catalog.default_window

    def _recommendations(self, primary: str, synergy_windows: list[str]) -> list[str]:
        recommendations = []
        order = self.RECOMMENDATION_ORDER + [
            window for window in self.catalog.window_ids
            if window not in self.RECOMMENDATION_ORDER
        ]
        for window in order:
            if window == primary or window not in synergy_windows:
                continue
            policy = self.catalog.get_window(window)
            if policy and policy.synergy_recommendation:
                recommendations.append(policy.synergy_recommendation)
        return recommendations
