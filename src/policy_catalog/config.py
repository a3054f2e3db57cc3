"""Configuration management for the funding policy catalog.

The default configuration is the IPA III policy table: one entry per window
holding its compliance profile, keyword sets, budget range, budget breakdown
ratios and indicators. A YAML file can replace any part of it.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .schema import (
    BreakdownRatios,
    BudgetRange,
    IndicatorCategory,
    PerformanceIndicator,
    PolicyProfile,
    RelevanceAlignment,
    SectionId,
    SectionOverride,
    WindowPolicy,
    WindowPriority,
)


def _default_windows() -> dict[str, WindowPolicy]:
    """Build the IPA III window table."""
    return {
        "window1": WindowPolicy(
            profile=PolicyProfile(
                window="window1",
                label="Rule of Law & Fundamental Rights",
                threshold=82,
                section_overrides={
                    SectionId.IMPLEMENTATION: SectionOverride(threshold=75),
                    SectionId.RISK_SUSTAINABILITY: SectionOverride(weight=0.2, threshold=70),
                },
            ),
            priority=WindowPriority(
                title="Rule of Law & Fundamental Rights",
                description=(
                    "Focus on strengthening judiciary independence, fighting corruption, "
                    "enhancing transparency, and protecting fundamental rights. Projects should "
                    "demonstrate measurable improvements in institutional capacity, legal framework "
                    "alignment with EU standards, and concrete anti-corruption mechanisms."
                ),
                key_areas=[
                    "Judicial reform", "Anti-corruption", "Transparency",
                    "Human rights", "Legal framework harmonization",
                ],
            ),
            alignment_keywords=["rule of law", "judicial", "corruption", "fundamental rights", "justice"],
            relevance=RelevanceAlignment(
                keywords=["rule of law", "judicial", "corruption"],
                aligned_score=90,
                base_score=60,
            ),
            synergy_keywords=[
                "justice", "corruption", "transparency", "legal", "court", "police",
                "rights", "judicial", "reform", "governance", "integrity", "accountability",
            ],
            synergy_recommendation=(
                "Include transparency and accountability mechanisms to support rule of law objectives"
            ),
            budget_range=BudgetRange(min=300000, max=8000000, avg=2000000),
            breakdown=BreakdownRatios(
                personnel=0.35, equipment=0.15, services=0.25,
                travel=0.05, infrastructure=0.10, other=0.10,
            ),
            indicators=[
                PerformanceIndicator(
                    id="w1_judicial_efficiency",
                    category=IndicatorCategory.RESULT,
                    description="Reduction in case backlog",
                    target=30, baseline=0, unit="%",
                    verification="Court statistics",
                ),
                PerformanceIndicator(
                    id="w1_corruption_perception",
                    category=IndicatorCategory.IMPACT,
                    description="Improvement in corruption perception index",
                    target=5, baseline=0, unit="points",
                    verification="Transparency International CPI",
                ),
            ],
        ),
        "window2": WindowPolicy(
            profile=PolicyProfile(
                window="window2",
                label="Democracy, Governance & Public Administration",
                threshold=78,
                section_overrides={
                    SectionId.STRATEGIC_ALIGNMENT: SectionOverride(weight=0.3, threshold=70),
                },
            ),
            priority=WindowPriority(
                title="Democracy, Governance & Public Administration",
                description=(
                    "Emphasize democratic institution strengthening, public administration "
                    "modernization, civil society engagement, and participatory governance. "
                    "Projects should show enhanced citizen participation, improved public service "
                    "delivery, and stronger local governance capacity."
                ),
                key_areas=[
                    "Democratic governance", "Public administration reform", "Civil society",
                    "Citizen participation", "Local governance",
                ],
            ),
            alignment_keywords=["governance", "democracy", "civil society", "public administration", "transparency"],
            relevance=RelevanceAlignment(
                keywords=["governance", "democracy", "civil society"],
                aligned_score=90,
                base_score=60,
            ),
            synergy_keywords=[
                "democracy", "governance", "administration", "public", "citizen", "participation",
                "civic", "electoral", "municipal", "services", "decentralization", "institution",
            ],
            synergy_recommendation=(
                "Integrate citizen engagement and participatory governance components for "
                "democratic strengthening"
            ),
            budget_range=BudgetRange(min=250000, max=6000000, avg=1500000),
            breakdown=BreakdownRatios(
                personnel=0.40, equipment=0.10, services=0.30,
                travel=0.08, infrastructure=0.07, other=0.05,
            ),
            indicators=[
                PerformanceIndicator(
                    id="w2_public_services",
                    category=IndicatorCategory.OUTPUT,
                    description="Public services digitalized",
                    target=10, baseline=0, unit="services",
                    verification="Government reports",
                ),
                PerformanceIndicator(
                    id="w2_citizen_satisfaction",
                    category=IndicatorCategory.RESULT,
                    description="Citizen satisfaction with public services",
                    target=75, baseline=50, unit="%",
                    verification="Citizen surveys",
                ),
            ],
        ),
        "window3": WindowPolicy(
            profile=PolicyProfile(
                window="window3",
                label="Green Agenda & Sustainable Connectivity",
                threshold=76,
                section_overrides={
                    SectionId.RISK_SUSTAINABILITY: SectionOverride(weight=0.2, threshold=72),
                },
            ),
            priority=WindowPriority(
                title="Green Agenda & Sustainable Connectivity",
                description=(
                    "Target climate action, renewable energy, circular economy, sustainable "
                    "transport, and environmental protection. Projects must demonstrate measurable "
                    "environmental impact, climate resilience, energy efficiency improvements, and "
                    "alignment with EU Green Deal objectives."
                ),
                key_areas=[
                    "Climate action", "Renewable energy", "Circular economy",
                    "Sustainable transport", "Environmental protection",
                ],
            ),
            alignment_keywords=["green", "climate", "environment", "sustainable", "renewable", "energy"],
            relevance=RelevanceAlignment(
                keywords=["green", "climate", "sustainable", "environment"],
                aligned_score=95,
                base_score=65,
            ),
            synergy_keywords=[
                "green", "environment", "climate", "energy", "renewable", "waste", "sustainability",
                "carbon", "emission", "circular", "transport", "biodiversity", "pollution",
            ],
            synergy_recommendation=(
                "Consider emphasizing environmental co-benefits and climate impact for stronger "
                "Green Agenda alignment"
            ),
            budget_range=BudgetRange(min=500000, max=12000000, avg=3000000),
            breakdown=BreakdownRatios(
                personnel=0.25, equipment=0.30, services=0.20,
                travel=0.03, infrastructure=0.15, other=0.07,
            ),
            indicators=[
                PerformanceIndicator(
                    id="w3_co2_reduction",
                    category=IndicatorCategory.IMPACT,
                    description="CO2 emissions reduced",
                    target=1000, baseline=0, unit="tons/year",
                    verification="Environmental monitoring",
                ),
                PerformanceIndicator(
                    id="w3_renewable_capacity",
                    category=IndicatorCategory.OUTPUT,
                    description="Renewable energy capacity installed",
                    target=5, baseline=0, unit="MW",
                    verification="Energy authority data",
                ),
            ],
        ),
        "window4": WindowPolicy(
            profile=PolicyProfile(
                window="window4",
                label="Competitiveness & Innovation",
                threshold=77,
                section_overrides={
                    SectionId.IMPLEMENTATION: SectionOverride(weight=0.28),
                    SectionId.STRATEGIC_ALIGNMENT: SectionOverride(threshold=68),
                },
            ),
            priority=WindowPriority(
                title="Competitiveness & Innovation",
                description=(
                    "Focus on digital transformation, innovation ecosystems, SME support, skills "
                    "development, and economic competitiveness. Projects should show enhanced "
                    "digital capacity, innovation potential, job creation, and contribution to "
                    "economic growth and competitiveness."
                ),
                key_areas=[
                    "Digital transformation", "Innovation support", "SME development",
                    "Skills enhancement", "Economic competitiveness",
                ],
            ),
            alignment_keywords=["digital", "innovation", "competitiveness", "sme", "entrepreneurship", "economic"],
            relevance=RelevanceAlignment(
                keywords=["digital", "innovation", "competitiveness"],
                aligned_score=90,
                base_score=60,
            ),
            synergy_keywords=[
                "digital", "innovation", "technology", "smart", "competitiveness", "skills",
                "education", "sme", "business", "connectivity", "research", "development",
            ],
            synergy_recommendation=(
                "Explore digital transformation elements to enhance innovation potential and "
                "competitiveness"
            ),
            budget_range=BudgetRange(min=400000, max=10000000, avg=2500000),
            breakdown=BreakdownRatios(
                personnel=0.30, equipment=0.35, services=0.20,
                travel=0.05, infrastructure=0.05, other=0.05,
            ),
            indicators=[
                PerformanceIndicator(
                    id="w4_jobs_created",
                    category=IndicatorCategory.RESULT,
                    description="New jobs created",
                    target=100, baseline=0, unit="jobs",
                    verification="Employment records",
                ),
                PerformanceIndicator(
                    id="w4_smes_supported",
                    category=IndicatorCategory.OUTPUT,
                    description="SMEs receiving support",
                    target=50, baseline=0, unit="enterprises",
                    verification="Programme records",
                ),
            ],
        ),
        "window5": WindowPolicy(
            profile=PolicyProfile(
                window="window5",
                label="Territorial Cooperation & Good Neighbourly Relations",
                threshold=74,
                section_overrides={
                    SectionId.BASIC_INFO: SectionOverride(threshold=65),
                    SectionId.IMPLEMENTATION: SectionOverride(threshold=68),
                },
            ),
            priority=WindowPriority(
                title="Territorial Cooperation & Good Neighbourly Relations",
                description=(
                    "Emphasize cross-border cooperation, regional integration, territorial "
                    "cohesion, and people-to-people exchanges. Projects must demonstrate "
                    "multi-country partnerships, cross-border impact, and contribution to regional "
                    "stability and cooperation."
                ),
                key_areas=[
                    "Cross-border cooperation", "Regional integration", "Territorial cohesion",
                    "Multi-country partnerships", "People-to-people cooperation",
                ],
            ),
            alignment_keywords=["cross-border", "territorial", "cooperation", "regional", "partnership"],
            relevance=RelevanceAlignment(
                keywords=["cross-border", "territorial", "cooperation"],
                aligned_score=85,
                base_score=60,
            ),
            synergy_keywords=[
                "cooperation", "cross-border", "regional", "partnership", "territorial",
                "transnational", "integration", "connectivity", "joint", "network",
            ],
            synergy_recommendation=(
                "Explore cross-border cooperation opportunities for regional impact amplification"
            ),
            budget_range=BudgetRange(min=200000, max=5000000, avg=1200000),
            breakdown=BreakdownRatios(
                personnel=0.35, equipment=0.15, services=0.25,
                travel=0.15, infrastructure=0.05, other=0.05,
            ),
            indicators=[
                PerformanceIndicator(
                    id="w5_cross_border",
                    category=IndicatorCategory.OUTPUT,
                    description="Cross-border partnerships established",
                    target=5, baseline=0, unit="partnerships",
                    verification="Partnership agreements",
                ),
                PerformanceIndicator(
                    id="w5_people_exchanges",
                    category=IndicatorCategory.RESULT,
                    description="People participating in exchanges",
                    target=500, baseline=0, unit="persons",
                    verification="Participation records",
                ),
            ],
        ),
    }


def _default_common_indicators() -> list[PerformanceIndicator]:
    """Indicators attached to every project regardless of window."""
    return [
        PerformanceIndicator(
            id="common_budget_execution",
            category=IndicatorCategory.OUTPUT,
            description="Budget execution rate",
            target=95, baseline=0, unit="%",
            verification="Financial reports",
        ),
        PerformanceIndicator(
            id="common_beneficiaries",
            category=IndicatorCategory.RESULT,
            description="Direct beneficiaries reached",
            target=1000, baseline=0, unit="persons",
            verification="Beneficiary database",
        ),
    ]


class PolicyCatalogConfig(BaseModel):
    """Complete policy catalog configuration."""
    default_window: str = Field(
        "window3",
        description="Window used when a project has not selected one"
    )
    default_profile: PolicyProfile = Field(
        default_factory=lambda: PolicyProfile(
            window="default",
            label="General IPA Alignment",
            threshold=70,
        )
    )
    windows: dict[str, WindowPolicy] = Field(default_factory=_default_windows)
    common_indicators: list[PerformanceIndicator] = Field(default_factory=_default_common_indicators)
    eligible_countries: list[str] = Field(default_factory=lambda: [
        "Albania", "Bosnia and Herzegovina", "Montenegro",
        "North Macedonia", "Serbia", "Kosovo",
    ])


# Global config instance
_config: Optional[PolicyCatalogConfig] = None


def get_config() -> PolicyCatalogConfig:
    """Get the current configuration (loads default if not set)."""
    global _config
    if _config is None:
        _config = PolicyCatalogConfig()
    return _config


def load_config(config_path: Path) -> PolicyCatalogConfig:
    """Load configuration from a YAML file."""
    global _config

    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    _config = PolicyCatalogConfig.model_validate(data)
    return _config


def reset_config() -> None:
    """Reset to default configuration."""
    global _config
    _config = None


def save_default_config(output_path: Path) -> None:
    """Save the default configuration to a YAML file."""
    config = PolicyCatalogConfig()

    data = config.model_dump(mode="json")

    yaml_content = """# Policy Catalog Configuration
# ============================
#
# This file holds the IPA III window table: thresholds, checklist
# overrides, budget ranges and breakdowns, indicators and keywords.
#
# Copy this file to one of these locations:
#   - ./policy-catalog.yaml (current directory)
#   - ~/.config/policy-catalog/config.yaml (user config)
#
# Or set the POLICY_CATALOG_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)


def find_config_file() -> Optional[Path]:
    """Find a config file in standard locations."""
    search_paths = [
        Path.cwd() / 'policy-catalog.yaml',
        Path.cwd() / 'policy-catalog.yml',
        Path.home() / '.config' / 'policy-catalog' / 'config.yaml',
    ]

    env_config = os.environ.get('POLICY_CATALOG_CONFIG')
    if env_config:
        search_paths.insert(0, Path(env_config))

    for path in search_paths:
        if path.exists():
            return path

    return None
