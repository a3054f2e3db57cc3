"""Keyword classification used by the scoring components.

All keyword heuristics go through a ``KeywordClassifier`` so a smarter
matcher can replace plain substring search without touching the scorers.
"""

import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional


class KeywordClassifier(ABC):
    """Decides whether, and how often, keywords occur in text."""

    @abstractmethod
    def count(self, text: Optional[str], keyword: str) -> int:
        """Number of occurrences of ``keyword`` in ``text``."""

    def contains(self, text: Optional[str], keyword: str) -> bool:
        return self.count(text, keyword) > 0

    def matches(self, text: Optional[str], keywords: Iterable[str]) -> list[str]:
        """Keywords present in the text, in the given order."""
        return [keyword for keyword in keywords if self.contains(text, keyword)]

    def any_match(self, text: Optional[str], keywords: Iterable[str]) -> bool:
        return any(self.contains(text, keyword) for keyword in keywords)

    def total_hits(self, text: Optional[str], keywords: Iterable[str]) -> int:
        """Sum of occurrence counts over all keywords."""
        return sum(self.count(text, keyword) for keyword in keywords)


class SubstringClassifier(KeywordClassifier):
    """Case-insensitive substring matching.

    No stemming and no negation handling: "not sustainable" counts as a hit
    for "sustainable".
    """

    def count(self, text: Optional[str], keyword: str) -> int:
        if not text or not keyword:
            return 0
        return len(re.findall(re.escape(keyword.lower()), text.lower()))

    def contains(self, text: Optional[str], keyword: str) -> bool:
        if not text or not keyword:
            return False
        return keyword.lower() in text.lower()


_classifier: KeywordClassifier = SubstringClassifier()


def get_classifier() -> KeywordClassifier:
    """Get the active keyword classifier."""
    return _classifier


def set_classifier(classifier: Optional[KeywordClassifier]) -> None:
    """Install a classifier (``None`` restores substring matching)."""
    global _classifier
    _classifier = classifier or SubstringClassifier()
