"""Shared fixtures for grant assessor and policy catalog tests."""

import json
import logging

import pytest

from grant_assessor import config as assessor_config
from grant_assessor.keywords import set_classifier
from grant_assessor.normalizer import normalize_project
from grant_assessor.schema import ProjectRecord
from policy_catalog import config as catalog_config


GREEN_TIRANA = {
    "title": "Green Tirana: Renewable Energy for Public Buildings",
    "municipality": "Tirana",
    "country": "Albania",
    "ipaWindow": "window3",
    "budget": "€2,000,000",
    "duration": "24 months",
    "description": (
        "The Green Tirana project installs renewable energy systems and energy efficiency "
        "upgrades in twelve public buildings, cutting carbon emissions and air pollution. "
        "It implements the national strategy for energy transition and supports public "
        "procurement reform, sustainable transport links and environment education in schools. "
        "The project builds regional and cross-border cooperation across the Western Balkans "
        "with partner municipalities in Albania and North Macedonia. An innovative pilot "
        "introduces a digital energy monitoring platform that publishes consumption data "
        "online to improve transparency, accountability and citizen participation. Gender "
        "equality is mainstreamed: women make up half of the trained energy managers and "
        "women-led businesses are supported. Youth inclusion is ensured through training and "
        "skills programmes for students, while biodiversity and climate adaptation measures "
        "protect green spaces around the renovated buildings."
    ),
    "objectives": (
        "Reduce energy consumption in 12 public buildings by 40% by 2027, install 1.5 MW of "
        "solar capacity, train 60 municipal energy managers and achieve a target of 2,000 "
        "tonnes of CO2 avoided per year. The project will improve transparency of municipal "
        "energy data and align Tirana with EU climate and environment acquis requirements "
        "and the Green Agenda for the Western Balkans."
    ),
    "methodology": (
        "Implementation follows three phases: an inception phase with energy audits of all "
        "twelve buildings, a works phase with procurement of solar and insulation contracts "
        "under EU rules, and a consolidation phase with training, monitoring and handover to "
        "the municipal energy unit. A steering committee with both partners meets quarterly."
    ),
    "smartObjectives": {
        "specific": "Retrofit twelve municipal buildings with solar panels, insulation and efficient heating systems.",
        "measurable": "Cut metered energy use by 40% and avoid 2,000 tonnes of CO2 per year against the 2024 baseline.",
        "achievable": "Works are scoped on completed energy audits and delivered by a municipal unit with prior EU grants.",
        "relevant": "Directly supports the Green Agenda for the Western Balkans and the national energy strategy targets.",
        "timeBound": "All works finish by month 18 and savings are verified over the final six months of the project.",
    },
    "risks": (
        "Technical risks include delays in solar installation and grid connection. Financial "
        "risks include price increases for materials. Organizational risks include staff "
        "turnover in the municipal energy unit. Each risk has an owner and a quarterly review."
    ),
    "sustainability": (
        "Financial sustainability comes from energy savings reinvested in maintenance. "
        "Institutional sustainability is ensured by the permanent municipal energy unit. "
        "Environmental sustainability follows from lower emissions and protected green spaces."
    ),
    "totalBudget": 2000000,
    "euContribution": 1500000,
    "partnerContribution": 500000,
    "leadPartner": "Municipality of Tirana",
    "partners": ["Municipality of Durrës", "Energy Agency of North Macedonia"],
    "partnerExperience": "Both partners implemented IPA II energy projects.",
    "partnerRoles": "Tirana leads works; Durrës leads training; the agency leads monitoring.",
    "mitigation": "Framework contracts with price adjustment clauses and backup suppliers.",
    "activities": "Energy audits, works procurement, installation, training, monitoring.",
    "deliverables": "Twelve retrofitted buildings, monitoring platform, 60 trained managers.",
    "timeline": "Months 1-5 inception, 6-18 works, 19-24 consolidation.",
    "milestones": "M5 audits complete, M12 half of buildings retrofitted, M18 works complete.",
    "phases": "Inception, works, consolidation.",
    "indicators": "kWh saved, tonnes CO2 avoided, managers trained.",
    "monitoringPlan": "Monthly metering reports reviewed by the steering committee.",
    "evaluationApproach": "Mid-term review at month 12 and independent final evaluation.",
    "budgetBreakdown": "Works 70%, equipment 15%, training 10%, management 5%.",
    "technicalSpecifications": "Photovoltaic arrays of 125 kWp per building with smart meters.",
    "feasibilityStudy": "Completed in 2024 for all twelve buildings.",
    "preparatoryWork": "Building permits obtained and tender documents drafted.",
}


@pytest.fixture(autouse=True)
def reset_global_state():
    """Every test starts with default configs and the default classifier."""
    assessor_config.reset_config()
    catalog_config.reset_config()
    set_classifier(None)
    yield
    assessor_config.reset_config()
    catalog_config.reset_config()
    set_classifier(None)


@pytest.fixture
def project_data() -> dict:
    """A complete window3 application in the form's camelCase format."""
    return json.loads(json.dumps(GREEN_TIRANA))


@pytest.fixture
def strong_record(project_data) -> ProjectRecord:
    return normalize_project(project_data)


@pytest.fixture
def empty_record() -> ProjectRecord:
    return ProjectRecord()


@pytest.fixture
def project_file(tmp_path, project_data):
    path = tmp_path / "project.json"
    path.write_text(json.dumps(project_data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def empty_project_file(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("{}", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_package_loggers():
    """Drop handlers and levels a verbose CLI run leaves on the package loggers."""
    yield
    for name in ("grant_assessor", "policy_catalog"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
