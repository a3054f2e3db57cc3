"""Tests for the Synergy Detector."""

from grant_assessor.schema import ProjectRecord
from grant_assessor.synergy import SynergyDetector


class TestSynergyDetector:
    """Tests for cross-window synergy detection."""

    def test_declared_window_with_synergy(self):
        record = ProjectRecord(
            ipa_window="window3",
            description="green energy climate digital innovation technology",
        )
        result = SynergyDetector().detect(record)

        assert result.primary_window == "window3"
        assert result.window_scores["window3"] == 3
        assert result.window_scores["window4"] == 3
        assert result.synergy_windows == ["window4"]
        assert result.synergy_score == 0.6
        assert result.recommendations == [
            "Explore digital transformation elements to enhance innovation potential and "
            "competitiveness"
        ]

    def test_primary_window_inferred_with_tie_to_later_window(self):
        record = ProjectRecord(description="green energy climate digital innovation technology")
        result = SynergyDetector().detect(record)

        assert result.primary_window == "window4"
        assert result.synergy_windows == ["window3"]

    def test_single_hits_are_not_synergies(self):
        result = SynergyDetector().detect(ProjectRecord(description="cooperation governance"))

        assert result.primary_window == "window5"
        assert result.synergy_windows == []
        assert result.synergy_score == 0.0
        assert result.recommendations == []

    def test_empty_record_uses_last_window(self, empty_record):
        result = SynergyDetector().detect(empty_record)
        assert result.primary_window == "window5"
        assert set(result.window_scores.values()) == {0}

    def test_at_most_two_synergy_windows(self, strong_record):
        result = SynergyDetector().detect(strong_record)
        assert result.primary_window == "window3"
        assert len(result.synergy_windows) <= 2
        assert "window3" not in result.synergy_windows
        assert 0 <= result.synergy_score <= 1

    def test_synergy_score_capped(self):
        text = " ".join(["green digital"] * 10)
        result = SynergyDetector().detect(ProjectRecord(ipa_window="window3", description=text))
        assert result.synergy_score == 1.0

    def test_title_counts(self):
        record = ProjectRecord(ipa_window="window1", title="Digital innovation hub")
        assert SynergyDetector().detect(record).synergy_windows == ["window4"]
