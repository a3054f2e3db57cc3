"""Tests for the municipality profile store and municipality intelligence."""

import pytest
from pydantic import ValidationError

from policy_catalog.municipalities import (
    generate_municipality_intelligence,
    get_municipality_profile,
    list_municipalities,
    normalize_municipality_name,
)


class TestMunicipalityLookup:
    """Tests for profile lookup by name."""

    def test_seven_profiles(self):
        names = [profile.name for profile in list_municipalities()]
        assert len(names) == 7
        assert "Tirana" in names
        assert "Pristina" in names

    @pytest.mark.parametrize("name", ["Durrës", "durres", "DURRES", " Durres "])
    def test_accent_and_case_insensitive(self, name):
        profile = get_municipality_profile(name)
        assert profile is not None
        assert profile.id == "durres"

    def test_unknown_municipality(self):
        assert get_municipality_profile("Atlantis") is None
        assert get_municipality_profile("") is None
        assert get_municipality_profile(None) is None

    def test_normalize_name(self):
        assert normalize_municipality_name("Durrës") == "durres"
        assert normalize_municipality_name("Novi Sad") == "novisad"

    def test_profiles_are_frozen(self):
        profile = get_municipality_profile("tirana")
        with pytest.raises(ValidationError):
            profile.population = 1


class TestMunicipalityIntelligence:
    """Tests for matching a profile against project text."""

    def test_unknown_municipality(self):
        intelligence = generate_municipality_intelligence("Atlantis", "anything")
        assert intelligence.profile is None
        assert intelligence.local_context == "Municipality profile not available in database"
        assert intelligence.budget_guidance == "Standard EU funding guidelines apply"

    def test_relevant_challenges_match_first_word(self):
        intelligence = generate_municipality_intelligence(
            "Tirana", "Reducing air pollution and traffic through smart mobility"
        )
        assert "Air pollution" in intelligence.relevant_challenges
        assert "Traffic congestion" in intelligence.relevant_challenges
        assert "Smart city development" in intelligence.aligned_opportunities

    def test_local_context_lines(self):
        intelligence = generate_municipality_intelligence("Tirana", "")
        lines = intelligence.local_context.split("\n")
        assert len(lines) == 5
        assert lines[0].startswith("Tirana (Albania) - Population: 557,422")
        # Falls back to the first two challenges when none match
        assert lines[2] == "Major Challenges: Air pollution, Urban sprawl"

    def test_budget_guidance_for_large_city(self):
        guidance = generate_municipality_intelligence("Belgrade", "").budget_guidance
        assert "large city" in guidance
        assert "high income level" in guidance

    def test_recommended_partners(self):
        intelligence = generate_municipality_intelligence("Tirana", "")
        assert intelligence.recommended_partners[0] == "Italian municipalities"
