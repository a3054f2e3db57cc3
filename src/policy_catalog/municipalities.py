"""Municipality profile store.

Reference profiles for Western Balkan municipalities with economic,
demographic, infrastructure and governance attributes. The store is a
read-only in-memory map keyed by normalized municipality name.
"""

import re
import unicodedata
from typing import Optional

from pydantic import BaseModel, Field


class EconomicProfile(BaseModel):
    gdp_per_capita: float  # EUR
    unemployment_rate: float  # %
    main_economic_sectors: list[str] = Field(default_factory=list)
    business_count: int = 0
    average_income: float = 0  # EUR/month


class AgeGroups(BaseModel):
    youth: float  # % under 30
    working_age: float  # % 30-64
    elderly: float  # % 65+


class Education(BaseModel):
    high_education: float  # % with university degree
    digital_literacy: float


class Demographics(BaseModel):
    age_groups: AgeGroups
    education: Education
    ethnic_composition: list[str] = Field(default_factory=list)


class Infrastructure(BaseModel):
    internet_coverage: float  # %
    road_quality: int  # 1-10
    public_transport: int  # 1-10
    waste_management: int  # 1-10
    water_supply: float  # % coverage
    energy_efficiency: int  # 1-10


class Governance(BaseModel):
    transparency_score: int  # 1-10
    digital_services: float  # % services online
    citizen_engagement: int  # 1-10
    eu_compliance_level: int  # 1-10


class MunicipalityProfile(BaseModel):
    """Reference profile of a municipality."""
    id: str
    name: str
    country: str
    region: str
    population: int
    area: float  # km2
    economic_profile: EconomicProfile
    demographics: Demographics
    infrastructure: Infrastructure
    governance: Governance
    challenges: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    successful_projects: list[str] = Field(default_factory=list)
    preferred_partners: list[str] = Field(default_factory=list)
    strategic_priorities: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class MunicipalityIntelligence(BaseModel):
    """Project-specific reading of a municipality profile."""
    profile: Optional[MunicipalityProfile] = None
    relevant_challenges: list[str] = Field(default_factory=list)
    aligned_opportunities: list[str] = Field(default_factory=list)
    recommended_partners: list[str] = Field(default_factory=list)
    local_context: str
    budget_guidance: str


_MUNICIPALITIES: dict[str, MunicipalityProfile] = {
    profile.id: profile
    for profile in [
        MunicipalityProfile(
            id="tirana",
            name="Tirana",
            country="Albania",
            region="Central Albania",
            population=557422,
            area=41.8,
            economic_profile=EconomicProfile(
                gdp_per_capita=7800,
                unemployment_rate=12.8,
                main_economic_sectors=["Services", "Construction", "Manufacturing", "Tourism"],
                business_count=45000,
                average_income=650,
            ),
            demographics=Demographics(
                age_groups=AgeGroups(youth=35, working_age=58, elderly=7),
                education=Education(high_education=28, digital_literacy=72),
                ethnic_composition=["Albanian 95%", "Greek 2%", "Other 3%"],
            ),
            infrastructure=Infrastructure(
                internet_coverage=85, road_quality=6, public_transport=7,
                waste_management=6, water_supply=92, energy_efficiency=5,
            ),
            governance=Governance(
                transparency_score=6, digital_services=45,
                citizen_engagement=7, eu_compliance_level=6,
            ),
            challenges=["Air pollution", "Urban sprawl", "Traffic congestion", "Informal construction"],
            opportunities=["Smart city development", "Green transportation", "Digital government", "Cultural tourism"],
            successful_projects=["Tirana River revitalization", "Pedestrian zones", "Public bike system"],
            preferred_partners=[
                "Italian municipalities", "EU cities network", "World Bank",
                "Regional development agencies",
            ],
            strategic_priorities=["Digital transformation", "Green mobility", "Urban regeneration", "Citizen services"],
        ),
        MunicipalityProfile(
            id="durres",
            name="Durrës",
            country="Albania",
            region="Western Albania",
            population=175110,
            area=338.3,
            economic_profile=EconomicProfile(
                gdp_per_capita=6200,
                unemployment_rate=15.2,
                main_economic_sectors=["Port operations", "Tourism", "Agriculture", "Manufacturing"],
                business_count=8500,
                average_income=520,
            ),
            demographics=Demographics(
                age_groups=AgeGroups(youth=32, working_age=60, elderly=8),
                education=Education(high_education=22, digital_literacy=68),
                ethnic_composition=["Albanian 96%", "Greek 2%", "Other 2%"],
            ),
            infrastructure=Infrastructure(
                internet_coverage=78, road_quality=7, public_transport=5,
                waste_management=5, water_supply=88, energy_efficiency=4,
            ),
            governance=Governance(
                transparency_score=5, digital_services=35,
                citizen_engagement=6, eu_compliance_level=5,
            ),
            challenges=["Coastal erosion", "Seasonal unemployment", "Water quality", "Infrastructure aging"],
            opportunities=["Port modernization", "Beach tourism", "Logistics hub", "Renewable energy"],
            successful_projects=["Port expansion", "Tourism infrastructure", "Coastal protection"],
            preferred_partners=["Italian port cities", "Adriatic-Ionian Initiative", "EU tourism programs"],
            strategic_priorities=["Port competitiveness", "Sustainable tourism", "Coastal management", "Youth employment"],
        ),
        MunicipalityProfile(
            id="sarajevo",
            name="Sarajevo",
            country="Bosnia and Herzegovina",
            region="Central Bosnia",
            population=413593,
            area=141.5,
            economic_profile=EconomicProfile(
                gdp_per_capita=6800,
                unemployment_rate=18.4,
                main_economic_sectors=["Public administration", "Manufacturing", "Tourism", "Services"],
                business_count=12000,
                average_income=580,
            ),
            demographics=Demographics(
                age_groups=AgeGroups(youth=30, working_age=62, elderly=8),
                education=Education(high_education=32, digital_literacy=75),
                ethnic_composition=["Bosniak 78%", "Serb 12%", "Croat 8%", "Other 2%"],
            ),
            infrastructure=Infrastructure(
                internet_coverage=82, road_quality=5, public_transport=6,
                waste_management=6, water_supply=95, energy_efficiency=4,
            ),
            governance=Governance(
                transparency_score=5, digital_services=40,
                citizen_engagement=6, eu_compliance_level=5,
            ),
            challenges=["Air pollution", "Youth emigration", "Administrative complexity", "Infrastructure needs"],
            opportunities=["Cultural tourism", "Winter Olympics legacy", "Tech sector growth", "EU integration"],
            successful_projects=["Tram network modernization", "Historic center restoration", "IT cluster development"],
            preferred_partners=["EU municipalities", "Olympic cities network", "Cultural heritage organizations"],
            strategic_priorities=["Air quality improvement", "Digital economy", "Tourism development", "Youth retention"],
        ),
        MunicipalityProfile(
            id="podgorica",
            name="Podgorica",
            country="Montenegro",
            region="Central Montenegro",
            population=185937,
            area=1441,
            economic_profile=EconomicProfile(
                gdp_per_capita=8900,
                unemployment_rate=16.1,
                main_economic_sectors=["Public administration", "Services", "Manufacturing", "Agriculture"],
                business_count=5200,
                average_income=720,
            ),
            demographics=Demographics(
                age_groups=AgeGroups(youth=28, working_age=64, elderly=8),
                education=Education(high_education=35, digital_literacy=78),
                ethnic_composition=["Montenegrin 47%", "Serb 32%", "Bosniak 12%", "Other 9%"],
            ),
            infrastructure=Infrastructure(
                internet_coverage=88, road_quality=7, public_transport=5,
                waste_management=4, water_supply=90, energy_efficiency=5,
            ),
            governance=Governance(
                transparency_score=6, digital_services=50,
                citizen_engagement=6, eu_compliance_level=7,
            ),
            challenges=["Waste management", "Air quality", "Urban planning", "Public transport efficiency"],
            opportunities=["Smart city initiatives", "Green technology", "Regional hub development", "EU integration"],
            successful_projects=["City center revitalization", "Digital services platform", "Environmental monitoring"],
            preferred_partners=["EU capital cities", "Smart city networks", "Environmental agencies"],
            strategic_priorities=["Waste management reform", "Smart city development", "Air quality", "Digital services"],
        ),
        MunicipalityProfile(
            id="belgrade",
            name="Belgrade",
            country="Serbia",
            region="Central Serbia",
            population=1344844,
            area=3222,
            economic_profile=EconomicProfile(
                gdp_per_capita=9200,
                unemployment_rate=14.7,
                main_economic_sectors=["Services", "Manufacturing", "IT", "Tourism"],
                business_count=85000,
                average_income=780,
            ),
            demographics=Demographics(
                age_groups=AgeGroups(youth=26, working_age=66, elderly=8),
                education=Education(high_education=38, digital_literacy=82),
                ethnic_composition=["Serb 88%", "Yugoslav 3%", "Other 9%"],
            ),
            infrastructure=Infrastructure(
                internet_coverage=92, road_quality=6, public_transport=7,
                waste_management=6, water_supply=96, energy_efficiency=5,
            ),
            governance=Governance(
                transparency_score=5, digital_services=55,
                citizen_engagement=6, eu_compliance_level=6,
            ),
            challenges=["Air pollution", "Traffic congestion", "River pollution", "Administrative efficiency"],
            opportunities=["Tech hub expansion", "Danube corridor development", "Cultural tourism", "Smart governance"],
            successful_projects=["Belgrade Waterfront", "IT sector growth", "Cultural quarter development"],
            preferred_partners=["EU capitals", "Danube region cities", "Tech innovation hubs"],
            strategic_priorities=["Digital transformation", "Environmental protection", "Innovation ecosystem", "Urban mobility"],
        ),
        MunicipalityProfile(
            id="skopje",
            name="Skopje",
            country="North Macedonia",
            region="Central Macedonia",
            population=526502,
            area=1854,
            economic_profile=EconomicProfile(
                gdp_per_capita=6400,
                unemployment_rate=17.3,
                main_economic_sectors=["Manufacturing", "Services", "Public administration", "Agriculture"],
                business_count=18000,
                average_income=540,
            ),
            demographics=Demographics(
                age_groups=AgeGroups(youth=31, working_age=61, elderly=8),
                education=Education(high_education=29, digital_literacy=71),
                ethnic_composition=["Macedonian 64%", "Albanian 25%", "Turkish 4%", "Other 7%"],
            ),
            infrastructure=Infrastructure(
                internet_coverage=79, road_quality=6, public_transport=5,
                waste_management=5, water_supply=92, energy_efficiency=4,
            ),
            governance=Governance(
                transparency_score=5, digital_services=42,
                citizen_engagement=6, eu_compliance_level=6,
            ),
            challenges=[
                "Air pollution", "Inter-ethnic integration", "Economic development",
                "Infrastructure modernization",
            ],
            opportunities=[
                "Regional transport hub", "Manufacturing growth", "Cultural diversity",
                "EU accession momentum",
            ],
            successful_projects=["Public transport modernization", "Industrial zones", "Cultural sites restoration"],
            preferred_partners=[
                "EU municipalities", "Regional cooperation initiatives",
                "International development agencies",
            ],
            strategic_priorities=["Air quality improvement", "Economic competitiveness", "Social cohesion", "EU integration"],
        ),
        MunicipalityProfile(
            id="pristina",
            name="Pristina",
            country="Kosovo",
            region="Central Kosovo",
            population=198897,
            area=854,
            economic_profile=EconomicProfile(
                gdp_per_capita=4200,
                unemployment_rate=25.9,
                main_economic_sectors=["Public administration", "Services", "Construction", "Agriculture"],
                business_count=7500,
                average_income=360,
            ),
            demographics=Demographics(
                age_groups=AgeGroups(youth=45, working_age=50, elderly=5),
                education=Education(high_education=26, digital_literacy=69),
                ethnic_composition=["Albanian 92%", "Serbian 2%", "Other 6%"],
            ),
            infrastructure=Infrastructure(
                internet_coverage=75, road_quality=5, public_transport=4,
                waste_management=4, water_supply=85, energy_efficiency=3,
            ),
            governance=Governance(
                transparency_score=4, digital_services=30,
                citizen_engagement=5, eu_compliance_level=5,
            ),
            challenges=["Youth unemployment", "Energy security", "Waste management", "Infrastructure development"],
            opportunities=["Young population", "Diaspora connections", "EU integration path", "Digital economy potential"],
            successful_projects=["University campus expansion", "IT training programs", "Urban renewal initiatives"],
            preferred_partners=["EU development agencies", "Diaspora organizations", "International NGOs"],
            strategic_priorities=["Youth employment", "Infrastructure development", "Digital skills", "European integration"],
        ),
    ]
}


def normalize_municipality_name(name: str) -> str:
    """Normalize a municipality name to its lookup key.

    Diacritics are folded before non-letters are dropped, so "Durrës" and
    "durres" share a key.
    """
    folded = unicodedata.normalize("NFKD", name or "")
    folded = "".join(c for c in folded if not unicodedata.combining(c))
    return re.sub(r"[^a-z]", "", folded.lower())


def get_municipality_profile(name: Optional[str]) -> Optional[MunicipalityProfile]:
    """Look up a municipality profile by name (None if unknown)."""
    if not name:
        return None
    return _MUNICIPALITIES.get(normalize_municipality_name(name))


def list_municipalities() -> list[MunicipalityProfile]:
    """All known municipality profiles."""
    return list(_MUNICIPALITIES.values())


def generate_municipality_intelligence(name: Optional[str], project_text: str) -> MunicipalityIntelligence:
    """Match a municipality profile against a project's text.

    A challenge or opportunity is relevant when its first word appears in
    the project text (title, description and objectives).
    """
    profile = get_municipality_profile(name)

    if profile is None:
        return MunicipalityIntelligence(
            local_context="Municipality profile not available in database",
            budget_guidance="Standard EU funding guidelines apply",
        )

    text = (project_text or "").lower()

    relevant_challenges = [
        challenge for challenge in profile.challenges
        if challenge.lower().split(" ")[0] in text
    ]
    aligned_opportunities = [
        opportunity for opportunity in profile.opportunities
        if opportunity.lower().split(" ")[0] in text
    ]

    challenges = relevant_challenges or profile.challenges[:2]
    opportunities = aligned_opportunities or profile.opportunities[:2]
    local_context = "\n".join([
        f"{profile.name} ({profile.country}) - Population: {profile.population:,}, "
        f"GDP per capita: €{profile.economic_profile.gdp_per_capita:g}",
        f"Key Economic Sectors: {', '.join(profile.economic_profile.main_economic_sectors)}",
        f"Major Challenges: {', '.join(challenges)}",
        f"Strategic Opportunities: {', '.join(opportunities)}",
        f"Infrastructure Level: Internet {profile.infrastructure.internet_coverage:g}%, "
        f"Governance Score: {profile.governance.transparency_score}/10",
    ])

    return MunicipalityIntelligence(
        profile=profile,
        relevant_challenges=relevant_challenges,
        aligned_opportunities=aligned_opportunities,
        recommended_partners=list(profile.preferred_partners),
        local_context=local_context,
        budget_guidance=_budget_guidance(profile),
    )


def _budget_guidance(profile: MunicipalityProfile) -> str:
    """Summarize financing expectations from population and income level."""
    if profile.population > 500000:
        population_category = "large"
        project_range = "2-10M"
    elif profile.population > 100000:
        population_category = "medium"
        project_range = "0.5-5M"
    else:
        population_category = "small"
        project_range = "0.2-2M"

    gdp = profile.economic_profile.gdp_per_capita
    if gdp > 8000:
        economic_level, co_financing = "high", "65%"
    elif gdp > 6000:
        economic_level, co_financing = "medium", "75%"
    else:
        economic_level, co_financing = "developing", "85%"

    compliance = profile.governance.eu_compliance_level
    if compliance >= 6:
        capacity = "Strong"
    elif compliance >= 4:
        capacity = "Moderate"
    else:
        capacity = "Limited"

    return "\n".join([
        f"Municipality Category: {population_category} city, {economic_level} income level",
        f"Recommended EU co-financing: {co_financing}",
        f"Typical project range: €{project_range}",
        f"Local co-financing capacity: {capacity}",
    ])
