"""Project Normalizer - turns raw form data into a ProjectRecord.

Form data is loosely typed: numbers arrive as strings, blanks as empty
strings, partner lists as JSON text. The normalizer absorbs that so the
scoring components only ever see a typed, immutable record.
"""

import json
import logging
from typing import Any, Optional

from .schema import ProjectRecord, RawProjectRecord, RawSmartObjectives, SmartObjectives


logger = logging.getLogger(__name__)


def _camel(key: str) -> str:
    """Convert snake_case keys to the form's camelCase; leave others alone."""
    if "_" not in key:
        return key
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class ProjectNormalizer:
    """Normalizes raw project data into a ProjectRecord."""

    # Raw camelCase field -> normalized text field
    TEXT_FIELDS = {
        "title": "title",
        "municipality": "municipality",
        "country": "country",
        "ipaWindow": "ipa_window",
        "budget": "budget",
        "duration": "duration",
        "description": "description",
        "objectives": "objectives",
        "methodology": "methodology",
        "risks": "risks",
        "sustainability": "sustainability",
    }

    NUMERIC_FIELDS = {
        "totalBudget": "total_budget",
        "euContribution": "eu_contribution",
        "partnerContribution": "partner_contribution",
    }

    OPTIONAL_TEXT_FIELDS = {
        "leadPartner": "lead_partner",
        "partnerExperience": "partner_experience",
        "partnerRoles": "partner_roles",
        "mitigation": "mitigation",
        "activities": "activities",
        "deliverables": "deliverables",
        "timeline": "timeline",
        "milestones": "milestones",
        "phases": "phases",
        "indicators": "indicators",
        "monitoringPlan": "monitoring_plan",
        "evaluationApproach": "evaluation_approach",
        "budgetBreakdown": "budget_breakdown",
        "technicalSpecifications": "technical_specifications",
        "feasibilityStudy": "feasibility_study",
        "preparatoryWork": "preparatory_work",
    }

    def normalize(self, raw: RawProjectRecord) -> ProjectRecord:
        """Normalize a raw project record."""
        data: dict[str, Any] = {}

        for raw_name, name in self.TEXT_FIELDS.items():
            data[name] = self._text(getattr(raw, raw_name))

        for raw_name, name in self.NUMERIC_FIELDS.items():
            data[name] = self._number(getattr(raw, raw_name), raw_name)

        for raw_name, name in self.OPTIONAL_TEXT_FIELDS.items():
            value = self._text(getattr(raw, raw_name))
            data[name] = value or None

        data["partners"] = self._partners(raw.partners)
        data["smart_objectives"] = self._smart_objectives(raw.smartObjectives)

        return ProjectRecord.model_validate(data)

    def normalize_dict(self, data: dict[str, Any]) -> ProjectRecord:
        """Normalize a plain dict using either camelCase or snake_case keys."""
        converted = {_camel(key): value for key, value in (data or {}).items()}
        smart = converted.get("smartObjectives")
        if isinstance(smart, dict):
            converted["smartObjectives"] = {_camel(key): value for key, value in smart.items()}
        return self.normalize(RawProjectRecord.model_validate(converted))

    def _text(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if isinstance(value, (list, dict)):
            return json.dumps(value, ensure_ascii=False)
        return str(value)

    def _number(self, value: Any, field: str) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            logger.debug("Ignoring non-numeric %s value: %r", field, value)
            return None

    def _partners(self, value: Any) -> list[str]:
        """Partners may be a list, JSON list text, or comma separated text."""
        if value is None:
            return []
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return []
            if text.startswith("["):
                try:
                    value = json.loads(text)
                except json.JSONDecodeError:
                    logger.debug("Partners field is not valid JSON, splitting on commas")
                    value = text.strip("[]").split(",")
            else:
                value = text.split(",")
        if not isinstance(value, list):
            value = [value]

        partners = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("name") or item.get("organization") or ""
            name = str(item).strip()
            if name:
                partners.append(name)
        return partners

    def _smart_objectives(self, raw: Optional[RawSmartObjectives]) -> SmartObjectives:
        if raw is None:
            return SmartObjectives()
        return SmartObjectives(
            specific=self._text(raw.specific),
            measurable=self._text(raw.measurable),
            achievable=self._text(raw.achievable),
            relevant=self._text(raw.relevant),
            time_bound=self._text(raw.timeBound),
        )


def normalize_project(data: Any) -> ProjectRecord:
    """Coerce a ProjectRecord, RawProjectRecord or dict into a ProjectRecord."""
    if isinstance(data, ProjectRecord):
        return data
    normalizer = ProjectNormalizer()
    if isinstance(data, RawProjectRecord):
        return normalizer.normalize(data)
    return normalizer.normalize_dict(data)
