"""Read access to the window policy table."""

from typing import Optional

from .config import PolicyCatalogConfig, get_config
from .schema import (
    BreakdownRatios,
    BudgetRange,
    PerformanceIndicator,
    PolicyProfile,
    WindowPolicy,
    WindowPriority,
)


class PolicyCatalog:
    """Looks up window policies from the active catalog configuration.

    Unknown or empty window ids resolve to the configured fallbacks:
    compliance profiles fall back to the ``default`` profile while budget and
    priority data fall back to the default window (window3).
    """

    def __init__(self, config: Optional[PolicyCatalogConfig] = None):
        self.config = config or get_config()

    @property
    def window_ids(self) -> list[str]:
        """All known window ids in table order."""
        return list(self.config.windows.keys())

    @property
    def default_window(self) -> str:
        return self.config.default_window

    def has_window(self, window: Optional[str]) -> bool:
        return bool(window) and window in self.config.windows

    def get_window(self, window: Optional[str]) -> Optional[WindowPolicy]:
        """Get the policy for a window, or None if unknown."""
        if not window:
            return None
        return self.config.windows.get(window)

    def resolve_window(self, window: Optional[str]) -> WindowPolicy:
        """Get the policy for a window, falling back to the default window."""
        policy = self.get_window(window)
        if policy is None:
            policy = self.config.windows[self.config.default_window]
        return policy

    def get_profile(self, window: Optional[str]) -> PolicyProfile:
        """Get the compliance profile for a window (``default`` if unknown)."""
        policy = self.get_window(window)
        if policy is None:
            return self.config.default_profile
        return policy.profile

    def get_priority(self, window: Optional[str]) -> WindowPriority:
        return self.resolve_window(window).priority

    def get_budget_range(self, window: Optional[str]) -> BudgetRange:
        return self.resolve_window(window).budget_range

    def get_breakdown(self, window: Optional[str]) -> BreakdownRatios:
        return self.resolve_window(window).breakdown

    def get_alignment_keywords(self, window: Optional[str]) -> list[str]:
        policy = self.get_window(window)
        return list(policy.alignment_keywords) if policy else []

    def get_synergy_keywords(self) -> dict[str, list[str]]:
        """Synergy keyword sets for every window, in table order."""
        return {
            window_id: list(policy.synergy_keywords)
            for window_id, policy in self.config.windows.items()
        }

    def get_indicators(self, window: Optional[str]) -> list[PerformanceIndicator]:
        """Window-specific indicators followed by the common indicators."""
        indicators: list[PerformanceIndicator] = []
        policy = self.get_window(window)
        if policy:
            indicators.extend(policy.indicators)
        indicators.extend(self.config.common_indicators)
        return [indicator.model_copy() for indicator in indicators]

    def is_eligible_country(self, country: Optional[str]) -> bool:
        return bool(country) and country in self.config.eligible_countries
