"""Centralized configuration management for the grant assessor."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class RelevanceWeightsConfig(BaseModel):
    """Weights of the six relevance factors.

    The factor scores are each 0-100, so weights summing to 1.0 keep the
    relevance score on the same scale.
    """
    strategic_alignment: float = Field(
        0.25,
        description="Weight for keyword alignment with the selected window"
    )
    eu_acquis_alignment: float = Field(
        0.20,
        description="Weight for coverage of EU acquis chapters"
    )
    national_priorities: float = Field(
        0.15,
        description="Weight for references to national strategies"
    )
    regional_cooperation: float = Field(
        0.15,
        description="Weight for regional cooperation keywords"
    )
    innovation_potential: float = Field(
        0.10,
        description="Weight for innovation keywords"
    )
    sustainability_impact: float = Field(
        0.15,
        description="Weight for financial/institutional/environmental sustainability"
    )


class MaturityWeightsConfig(BaseModel):
    """Weights of the seven maturity factors."""
    implementation_plan: float = Field(0.20, description="Methodology, activities, deliverables, milestones")
    budget_clarity: float = Field(0.15, description="Total, EU and partner contributions, breakdown")
    partner_capacity: float = Field(0.15, description="Lead partner, partners, experience, roles")
    risk_management: float = Field(0.15, description="Risk analysis and mitigation")
    monitoring_framework: float = Field(0.10, description="Indicators, monitoring plan, evaluation")
    timeline_realism: float = Field(0.10, description="Duration within 12-36 months, phases")
    technical_readiness: float = Field(0.15, description="Specifications, feasibility study, preparatory work")


class ClimatePolicyConfig(BaseModel):
    """Climate contribution attribution rules."""
    direct_share: float = Field(
        0.6,
        description="Share of budget attributed when a direct climate keyword is found"
    )
    indirect_share: float = Field(
        0.12,
        description="Share attributed for indirect keywords only (30% of budget counted at 40%)"
    )
    green_window: str = Field(
        "window3",
        description="Window whose projects get the climate floor"
    )
    green_window_floor: float = Field(
        0.5,
        description="Minimum share attributed for green window projects"
    )
    minimum_target: float = Field(18, description="IPA III minimum climate target (%)")
    target_2027: float = Field(20, description="IPA III 2027 climate target (%)")


class PerformanceThresholdsConfig(BaseModel):
    """Pass marks for the performance compliance flags."""
    relevance: float = Field(65, description="Minimum relevance score")
    maturity: float = Field(60, description="Minimum maturity score")


class AssessorConfig(BaseModel):
    """Complete configuration for the grant assessor."""
    relevance_weights: RelevanceWeightsConfig = Field(default_factory=RelevanceWeightsConfig)
    maturity_weights: MaturityWeightsConfig = Field(default_factory=MaturityWeightsConfig)
    climate: ClimatePolicyConfig = Field(default_factory=ClimatePolicyConfig)
    thresholds: PerformanceThresholdsConfig = Field(default_factory=PerformanceThresholdsConfig)


# Global config instance
_config: Optional[AssessorConfig] = None


def get_config() -> AssessorConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = AssessorConfig()
    return _config


def load_config(path: Path) -> AssessorConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded AssessorConfig.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    _config = AssessorConfig.model_validate(data or {})
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = AssessorConfig()


def find_config_file() -> Optional[Path]:
    """Find an assessor configuration file.

    Looks in (order of priority):
    1. GRANT_ASSESSOR_CONFIG environment variable
    2. ./assessor-config.yaml
    3. ./assessor-config.yml
    4. ~/.config/grant-assessor/config.yaml
    """
    env_path = os.environ.get("GRANT_ASSESSOR_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    for name in ["assessor-config.yaml", "assessor-config.yml"]:
        path = Path(name)
        if path.exists():
            return path

    user_config = Path.home() / ".config" / "grant-assessor" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    Args:
        path: Path where to save the configuration.
    """
    config = AssessorConfig()
    data = config.model_dump()

    yaml_content = """# Grant Assessor Configuration
# ============================
#
# This file configures the relevance and maturity weights, the climate
# contribution rules and the performance pass marks.
#
# Copy this file to one of these locations:
#   - ./assessor-config.yaml (current directory)
#   - ~/.config/grant-assessor/config.yaml (user config)
#
# Or set the GRANT_ASSESSOR_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
