"""Validation result models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List

from fieldmap.compatibility.type_compatibility import CompatibilityLevel


class ValidationStatus(str, Enum):
    """Status of a single mapping or a whole mapping set."""

    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"


class Severity(str, Enum):
    """Severity of a rule finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"  # Reported with the warnings, but not a quality problem


class RuleCategory(str, Enum):
    """Rule categories; each one backs a flag in ValidationDetails."""

    TYPE = "type"
    CONSTRAINT = "constraint"
    FORMAT = "format"
    SIZE = "size"
    REQUIRED = "required"


CRITICAL_CATEGORIES = (RuleCategory.TYPE, RuleCategory.CONSTRAINT)
FIXABLE_CATEGORIES = (RuleCategory.FORMAT, RuleCategory.SIZE)


@dataclass(frozen=True)
class ValidationIssue:
    """Structured error or warning produced by a rule."""

    rule: str
    category: RuleCategory
    severity: Severity
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    @property
    def is_critical(self) -> bool:
        return self.is_error and self.category in CRITICAL_CATEGORIES

    @property
    def is_fixable(self) -> bool:
        return self.is_error and self.category in FIXABLE_CATEGORIES

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "rule": self.rule,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass
class ValidationDetails:
    """Per-category pass flags."""

    type_compatibility: bool = True
    constraint_validation: bool = True
    format_validation: bool = True
    size_validation: bool = True
    required_field_validation: bool = True

    def to_dict(self) -> Dict[str, bool]:
        """Convert to dictionary."""
        return {
            "type_compatibility": self.type_compatibility,
            "constraint_validation": self.constraint_validation,
            "format_validation": self.format_validation,
            "size_validation": self.size_validation,
            "required_field_validation": self.required_field_validation,
        }


@dataclass
class ValidationResult:
    """Validation outcome for a single mapping."""

    mapping_id: str
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    compatibility: CompatibilityLevel = CompatibilityLevel.COMPATIBLE
    score: int = 100
    details: ValidationDetails = field(default_factory=ValidationDetails)
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def status(self) -> ValidationStatus:
        """Classify the mapping: error, warning or valid."""
        if self.errors:
            return ValidationStatus.ERROR
        if self.warnings:
            return ValidationStatus.WARNING
        return ValidationStatus.VALID

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mapping_id": self.mapping_id,
            "status": self.status.value,
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "compatibility": self.compatibility.value,
            "score": self.score,
            "details": self.details.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class ValidationSummary:
    """Roll-up of the validation results of a mapping set."""

    status: ValidationStatus
    total_mappings: int = 0
    valid_mappings: int = 0
    warning_mappings: int = 0
    error_mappings: int = 0
    overall_score: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    critical_issues: List[str] = field(default_factory=list)
    fixable_issues: List[str] = field(default_factory=list)

    @property
    def can_run(self) -> bool:
        """Whether the configuration may be saved/run (no invalid mapping)."""
        return self.status != ValidationStatus.ERROR

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "total_mappings": self.total_mappings,
            "valid_mappings": self.valid_mappings,
            "warning_mappings": self.warning_mappings,
            "error_mappings": self.error_mappings,
            "overall_score": self.overall_score,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
            "critical_issues": list(self.critical_issues),
            "fixable_issues": list(self.fixable_issues),
        }


def get_validation_priority(result: ValidationResult) -> int:
    """Sort key for results: 1 has errors, 2 has warnings, 3 clean."""
    if result.errors:
        return 1
    if result.warnings:
        return 2
    return 3


def sort_by_priority(results: Iterable[ValidationResult]) -> List[ValidationResult]:
    """Return results ordered errors first, then warnings, then clean ones."""
    return sorted(results, key=get_validation_priority)


def format_validation_message(message: str, mapping) -> str:
    """Fill {sourceField}/{targetField}/{sourceType}/{targetType} placeholders."""
    source = mapping.source_field
    target = mapping.target_field
    return (
        message.replace("{sourceField}", source.name)
        .replace("{targetField}", target.name)
        .replace("{sourceType}", source.type)
        .replace("{targetType}", target.type)
    )
