"""Assessment Engine - single entry point over all assessment components.

The engine wires the scorer, assessor, validator, synergy detector,
optimizer and excellence validator around one policy catalog and keyword
classifier. Records may be passed as ProjectRecord instances or as raw
form dicts, which are normalized first.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from policy_catalog.catalog import PolicyCatalog
from policy_catalog.municipalities import MunicipalityIntelligence, generate_municipality_intelligence

from .config import AssessorConfig, get_config
from .excellence import ExcellenceValidator
from .field_validator import validate_field as _validate_field
from .keywords import KeywordClassifier, get_classifier
from .normalizer import normalize_project
from .optimizer import ResourceOptimizer
from .performance import PerformanceAssessor
from .schema import (
    ComplianceMetrics,
    ExcellenceResult,
    FieldValidation,
    PerformanceAssessment,
    ProjectRecord,
    RawProjectRecord,
    ResourceOptimization,
    SynergyResult,
    ValidationResult,
)
from .section_scorer import SectionComplianceScorer
from .synergy import SynergyDetector
from .validator import ValidationEngine


logger = logging.getLogger(__name__)


ProjectInput = Union[ProjectRecord, RawProjectRecord, dict[str, Any]]


class ProjectLoadError(Exception):
    """Raised when a project file cannot be read or does not hold a valid record."""


def load_project(file_path: Union[str, Path]) -> ProjectRecord:
    """Load and normalize a project JSON file.

    Args:
        file_path: Path to the JSON project file (an object, or a list
            holding exactly one object).

    Returns:
        Normalized ProjectRecord.

    Raises:
        ProjectLoadError: If the file is missing, not JSON, or not a valid record.
    """
    path = Path(file_path)
    if not path.exists():
        raise ProjectLoadError(f"Project file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProjectLoadError(f"Invalid JSON in {path.name}: {e}") from e
    except OSError as e:
        raise ProjectLoadError(f"Cannot read {path.name}: {e}") from e

    # Handle array wrapper (file is JSON array with one object)
    if isinstance(data, list):
        if len(data) != 1:
            raise ProjectLoadError(f"Expected exactly 1 project object in {path.name}, got {len(data)}")
        data = data[0]

    if not isinstance(data, dict):
        raise ProjectLoadError(f"Expected a JSON object in {path.name}, got {type(data).__name__}")

    try:
        record = normalize_project(data)
    except PydanticValidationError as e:
        raise ProjectLoadError(f"Invalid project data in {path.name}: {e}") from e

    logger.debug("Loaded project %r from %s", record.title, path)
    return record


def validate_project_file(file_path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Check that a project file loads.

    Returns:
        (is_valid, issues) where issues are human-readable messages.
    """
    try:
        load_project(file_path)
    except ProjectLoadError as e:
        return False, [str(e)]
    return True, []


class AssessmentEngine:
    """Facade over every assessment component.

    All components share one catalog and classifier so that a custom
    catalog config or classifier applies consistently.
    """

    def __init__(
        self,
        catalog: Optional[PolicyCatalog] = None,
        config: Optional[AssessorConfig] = None,
        classifier: Optional[KeywordClassifier] = None,
    ):
        self.catalog = catalog or PolicyCatalog()
        self.config = config or get_config()
        self.classifier = classifier or get_classifier()

        self.scorer = SectionComplianceScorer(catalog=self.catalog)
        self.assessor = PerformanceAssessor(
            config=self.config, catalog=self.catalog, classifier=self.classifier
        )
        self.validator = ValidationEngine(
            assessor=self.assessor, catalog=self.catalog, classifier=self.classifier
        )
        self.synergy = SynergyDetector(catalog=self.catalog, classifier=self.classifier)
        self.optimizer = ResourceOptimizer(
            catalog=self.catalog, synergy=self.synergy, classifier=self.classifier
        )
        self.excellence = ExcellenceValidator(
            catalog=self.catalog, synergy=self.synergy, classifier=self.classifier
        )

    def score_compliance(self, record: ProjectInput) -> ComplianceMetrics:
        return self.scorer.score(normalize_project(record))

    def assess_performance(self, record: ProjectInput) -> PerformanceAssessment:
        return self.assessor.assess(normalize_project(record))

    def validate(self, record: ProjectInput) -> ValidationResult:
        return self.validator.validate(normalize_project(record))

    def optimize_resources(
        self,
        record: ProjectInput,
        municipality_name: Optional[str] = None,
    ) -> ResourceOptimization:
        return self.optimizer.optimize(normalize_project(record), municipality_name)

    def detect_synergies(self, record: ProjectInput) -> SynergyResult:
        return self.synergy.detect(normalize_project(record))

    def validate_excellence(self, record: ProjectInput) -> ExcellenceResult:
        return self.excellence.validate(normalize_project(record))

    def validate_field(
        self,
        field_name: str,
        value: Optional[str] = None,
        record: Optional[ProjectInput] = None,
    ) -> FieldValidation:
        return _validate_field(
            field_name, value, normalize_project(record) if record is not None else None
        )

    def municipality_intelligence(
        self,
        record: ProjectInput,
        municipality_name: Optional[str] = None,
    ) -> MunicipalityIntelligence:
        """Local context for the record's (or the named) municipality."""
        record = normalize_project(record)
        return generate_municipality_intelligence(
            municipality_name or record.municipality, record.content
        )


# Module-level convenience functions. Each builds a fresh engine so that
# config and classifier changes take effect immediately.


def score_compliance(record: ProjectInput) -> ComplianceMetrics:
    """Score checklist completeness against the record's window profile."""
    return AssessmentEngine().score_compliance(record)


def assess_performance(record: ProjectInput) -> PerformanceAssessment:
    """Compute relevance, maturity, climate and cross-cutting scores."""
    return AssessmentEngine().assess_performance(record)


def validate(record: ProjectInput) -> ValidationResult:
    """Run all validation rule groups and derive the compliance level."""
    return AssessmentEngine().validate(record)


def optimize_resources(
    record: ProjectInput,
    municipality_name: Optional[str] = None,
) -> ResourceOptimization:
    """Recommend budget, timeline and staffing for a record."""
    return AssessmentEngine().optimize_resources(record, municipality_name)


def detect_synergies(record: ProjectInput) -> SynergyResult:
    return AssessmentEngine().detect_synergies(record)


def validate_excellence(record: ProjectInput) -> ExcellenceResult:
    return AssessmentEngine().validate_excellence(record)


def validate_field(
    field_name: str,
    value: Optional[str] = None,
    record: Optional[ProjectInput] = None,
) -> FieldValidation:
    return AssessmentEngine().validate_field(field_name, value, record)
