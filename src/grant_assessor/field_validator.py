"""Quick validation of a single form field while it is being edited.

This is a lightweight path with its own score bands; it does not share
thresholds with the section scorer or the validation engine.
"""

from typing import Optional

from .normalizer import ProjectNormalizer
from .schema import (
    ExcellenceIssue,
    FieldValidation,
    IssueSeverity,
    ProjectRecord,
    QualityIndicator,
    parse_amount,
)


def _field_attr(field_name: str) -> str:
    """Map a form key (``ipaWindow``) to its record attribute (``ipa_window``)."""
    fields = {
        **ProjectNormalizer.TEXT_FIELDS,
        **ProjectNormalizer.NUMERIC_FIELDS,
        **ProjectNormalizer.OPTIONAL_TEXT_FIELDS,
    }
    return fields.get(field_name, field_name)


def validate_field(
    field_name: str,
    value: Optional[str] = None,
    record: Optional[ProjectRecord] = None,
) -> FieldValidation:
    """Validate one field value.

    When ``value`` is None the field is read from ``record``.
    """
    attr = _field_attr(field_name)
    if value is None and record is not None:
        value = getattr(record, attr, None)
        if value is not None and not isinstance(value, str):
            value = str(value)

    issues: list[ExcellenceIssue] = []
    suggestions: list[str] = []

    if not value or not value.strip():
        return FieldValidation(field=field_name, is_valid=False, score=0)

    score = 0
    if attr == "title":
        if len(value) < 10:
            issues.append(ExcellenceIssue(
                field=field_name,
                severity=IssueSeverity.WARNING,
                message="Title seems too brief",
                suggestion="Consider a more descriptive title (10-100 characters)",
            ))
        elif len(value) > 100:
            issues.append(ExcellenceIssue(
                field=field_name,
                severity=IssueSeverity.WARNING,
                message="Title is very long",
                suggestion="Consider shortening for better readability",
            ))
        else:
            score = 85

    elif attr == "description":
        if len(value) < 500:
            suggestions.append("Expand description to 800-1500 words for EU standards")
            score = 40
        elif len(value) < 800:
            suggestions.append("Consider adding more detail for comprehensive coverage")
            score = 70
        else:
            score = 90

    elif attr == "budget":
        amount = parse_amount(value)
        if amount is not None:
            if amount < 100_000:
                suggestions.append("Consider if budget is sufficient for project scope")
                score = 60
            elif amount > 10_000_000:
                suggestions.append("Very high budget may require additional justification")
                score = 70
            else:
                score = 90

    else:
        score = 85 if len(value) > 50 else 60

    return FieldValidation(
        field=field_name,
        is_valid=not issues,
        issues=issues,
        suggestions=suggestions,
        score=score,
    )


def field_quality_indicator(score: float) -> QualityIndicator:
    """Traffic-light indicator for a field or document score."""
    if score >= 85:
        return QualityIndicator(color="green", message="Excellent quality")
    if score >= 70:
        return QualityIndicator(color="blue", message="Good quality")
    if score >= 50:
        return QualityIndicator(color="orange", message="Needs improvement")
    return QualityIndicator(color="red", message="Critical issues")
