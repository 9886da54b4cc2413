"""
Validation rules evaluated against every field mapping.

Each rule looks at one aspect of a mapping (types, constraints, formats,
sizes, completeness) and either passes or returns a finding. Rules never
look at each other: the rule engine folds their outcomes into one
ValidationResult.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from config import ValidationConfig
from fieldmap.compatibility.type_compatibility import (
    CompatibilityLevel,
    find_type_mapping,
    resolve_compatibility,
)
from fieldmap.mapper.mapping import Mapping
from fieldmap.schema.models import ConstraintKind, parse_constraints
from fieldmap.validator.format_validator import validate_format, validate_size
from fieldmap.validator.results import RuleCategory, Severity

logger = logging.getLogger(__name__)

_VARCHAR_LENGTH = re.compile(r"varchar\s*\(\s*(\d+)\s*\)")
_DECIMAL_PRECISION = re.compile(r"(?:decimal|numeric)\s*\(\s*(\d+)\s*,\s*(\d+)\s*\)")


def _attr(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class MappingView:
    """Normalized, read-only view of the mapping attributes the rules use."""

    mapping_id: str = ""
    source_name: str = ""
    source_type: str = ""
    source_nullable: bool = False
    source_sample: Any = None
    target_name: str = ""
    target_type: str = ""
    target_constraints: Tuple[ConstraintKind, ...] = ()

    @classmethod
    def of(cls, mapping: Any) -> "MappingView":
        """
        Build a view from a Mapping, a mapping dict or any object exposing
        source_field/target_field.
        """
        if isinstance(mapping, dict):
            mapping = Mapping.from_dict(mapping)

        source = _attr(mapping, "source_field")
        target = _attr(mapping, "target_field")

        return cls(
            mapping_id=_text(_attr(mapping, "id")),
            source_name=_text(_attr(source, "name")),
            source_type=_text(_attr(source, "type")),
            source_nullable=_attr(source, "nullable") is True,
            source_sample=_attr(source, "sample"),
            target_name=_text(_attr(target, "name")),
            target_type=_text(_attr(target, "type")),
            target_constraints=parse_constraints(_attr(target, "constraints")),
        )

    @property
    def has_sample(self) -> bool:
        return self.source_sample is not None

    def target_has(self, kind: ConstraintKind) -> bool:
        return kind in self.target_constraints

    def names_contain(self, keyword: str) -> bool:
        return keyword in self.source_name.lower() or keyword in self.target_name.lower()


@dataclass
class RuleOutcome:
    """Result of evaluating a single rule."""

    passed: bool
    severity: Severity = Severity.WARNING
    message: str = ""
    suggestions: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls, *suggestions: str) -> "RuleOutcome":
        return cls(passed=True, suggestions=list(suggestions))

    @classmethod
    def fail(cls, severity: Severity, message: str, *suggestions: str) -> "RuleOutcome":
        return cls(passed=False, severity=severity, message=message, suggestions=list(suggestions))


@dataclass(frozen=True)
class ValidationRule:
    """A named check applied to every mapping."""

    name: str
    description: str
    category: RuleCategory
    check: Callable[[MappingView, ValidationConfig], RuleOutcome]


# ---------------------------------------------------------------------------
# Type rules
# ---------------------------------------------------------------------------


def _null_rejecting_constraint(view: MappingView) -> Optional[ConstraintKind]:
    for kind in (ConstraintKind.PRIMARY_KEY, ConstraintKind.NOT_NULL):
        if view.target_has(kind):
            return kind
    return None


def check_type_compatibility(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    """Run the compatibility resolver; conversion risks into NULL-rejecting columns are errors."""
    result = resolve_compatibility(view.source_type, view.target_type)
    entry = find_type_mapping(view.source_type, view.target_type)
    reason = entry.description if entry else "no known conversion"
    pairing = f"{view.source_type} → {view.target_type}"

    if result.level == CompatibilityLevel.ERROR:
        return RuleOutcome.fail(
            Severity.ERROR,
            f"Type incompatibility: {pairing} ({reason})",
            *result.suggestions,
            "Consider using a compatible type or add data transformation",
        )

    if result.level == CompatibilityLevel.WARNING:
        constraint = _null_rejecting_constraint(view)
        if config.promote_conversion_risks and view.source_nullable and constraint is not None:
            return RuleOutcome.fail(
                Severity.ERROR,
                f"Type conversion risk: {pairing} ({reason}) into {constraint.value} "
                f"column '{view.target_name}' with no NULL fallback",
                *result.suggestions,
                "Transform or validate values before insert so conversions cannot fail",
            )
        return RuleOutcome.fail(
            Severity.WARNING,
            f"Type conversion warning: {pairing} ({reason})",
            *result.suggestions,
            "Review data transformation requirements",
        )

    return RuleOutcome.ok(*result.suggestions)


# ---------------------------------------------------------------------------
# Constraint rules
# ---------------------------------------------------------------------------


def check_not_null(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    if view.target_has(ConstraintKind.NOT_NULL) and view.source_nullable:
        return RuleOutcome.fail(
            Severity.ERROR,
            f"Source field '{view.source_name}' is nullable but target '{view.target_name}' requires NOT NULL",
            "Ensure source data is never null or add null handling",
        )
    return RuleOutcome.ok()


def check_primary_key(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    if view.target_has(ConstraintKind.PRIMARY_KEY) and view.source_nullable:
        return RuleOutcome.fail(
            Severity.ERROR,
            f"PRIMARY KEY field '{view.target_name}' cannot accept nullable source '{view.source_name}'",
            "Ensure source field always has a value",
        )
    return RuleOutcome.ok()


def check_unique(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    if view.target_has(ConstraintKind.UNIQUE):
        return RuleOutcome.fail(
            Severity.INFO,
            f"Target field '{view.target_name}' has UNIQUE constraint; uniqueness cannot be verified statically",
            "Ensure source data contains unique values",
        )
    return RuleOutcome.ok()


# ---------------------------------------------------------------------------
# Format rules
# ---------------------------------------------------------------------------


def _format_rule(
    format_name: str,
    label: str,
    sample_trigger: Callable[[MappingView], bool],
    advisory_trigger: Optional[Callable[[MappingView], bool]] = None,
) -> Callable[[MappingView, ValidationConfig], RuleOutcome]:
    """
    Build a format rule.

    Without a sample value the rule only recommends format checking.
    With one, a mismatching sample is a warning.
    """

    def check(view: MappingView, config: ValidationConfig) -> RuleOutcome:
        strong = sample_trigger(view)
        weak = advisory_trigger(view) if advisory_trigger else False
        if not (strong or weak):
            return RuleOutcome.ok()

        if strong and view.has_sample:
            result = validate_format(format_name, view.source_sample)
            if not result.is_valid:
                return RuleOutcome.fail(
                    Severity.WARNING,
                    f"{label} field '{view.source_name}' sample {view.source_sample!r} "
                    f"has invalid format: {result.message}",
                    *result.suggestions,
                )
            return RuleOutcome.ok()

        return RuleOutcome.ok(f"Add {format_name} format validation for '{view.source_name}'")

    return check


check_email_format = _format_rule("email", "Email", lambda v: v.names_contain("email"))
check_phone_format = _format_rule("phone", "Phone", lambda v: v.names_contain("phone"))
check_uuid_format = _format_rule(
    "uuid",
    "UUID",
    lambda v: v.names_contain("uuid")
    or "uuid" in v.target_type.lower()
    or "uniqueidentifier" in v.target_type.lower(),
    advisory_trigger=lambda v: "id" in v.target_name.lower(),
)


# ---------------------------------------------------------------------------
# Size rules
# ---------------------------------------------------------------------------


def check_varchar_length(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    match = _VARCHAR_LENGTH.search(view.target_type.lower())
    if not match:
        return RuleOutcome.ok()

    length = int(match.group(1))
    minimum = config.size_limits.min_varchar_length
    if length < minimum:
        return RuleOutcome.fail(
            Severity.WARNING,
            f"VARCHAR length {length} of field '{view.target_name}' may be too short for some data",
            "Consider increasing VARCHAR length or using TEXT type",
        )
    return RuleOutcome.ok()


def check_decimal_precision(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    match = _DECIMAL_PRECISION.search(view.target_type.lower())
    if not match:
        return RuleOutcome.ok()

    precision, scale = int(match.group(1)), int(match.group(2))
    limits = config.size_limits
    if precision < limits.min_decimal_precision or scale < limits.min_decimal_scale:
        return RuleOutcome.fail(
            Severity.WARNING,
            f"DECIMAL field '{view.target_name}' may have insufficient precision ({precision},{scale})",
            "Consider increasing precision and scale",
        )
    return RuleOutcome.ok()


def check_sample_size(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    if not view.has_sample:
        return RuleOutcome.ok()

    result = validate_size(view.target_type, view.source_sample, config.size_limits)
    if not result.is_valid:
        return RuleOutcome.fail(
            Severity.ERROR,
            f"Sample value of '{view.source_name}' does not fit '{view.target_name}': {result.message}",
            *result.suggestions,
        )
    return RuleOutcome.ok(*result.suggestions)


# ---------------------------------------------------------------------------
# Shape rules
# ---------------------------------------------------------------------------


def check_date_format(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    target = view.target_type.lower()
    if "date" not in target and "timestamp" not in target:
        return RuleOutcome.ok()

    source = view.source_type.lower()
    if any(token in source for token in ("date", "timestamp", "string")):
        return RuleOutcome.ok()

    return RuleOutcome.fail(
        Severity.WARNING,
        f"Date field '{view.target_name}' requires proper date format",
        "Ensure source data is in ISO 8601 format (YYYY-MM-DD)",
    )


def check_json_format(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    if "json" not in view.target_type.lower():
        return RuleOutcome.ok()

    source = view.source_type.lower()
    if any(token in source for token in ("object", "array", "json")):
        return RuleOutcome.ok()

    return RuleOutcome.fail(
        Severity.WARNING,
        f"JSON field '{view.target_name}' requires valid JSON data",
        "Ensure source data is valid JSON or can be serialized",
    )


# ---------------------------------------------------------------------------
# Completeness
# ---------------------------------------------------------------------------


def check_required_fields(view: MappingView, config: ValidationConfig) -> RuleOutcome:
    missing = [
        label
        for label, value in (
            ("source name", view.source_name),
            ("source type", view.source_type),
            ("target name", view.target_name),
            ("target type", view.target_type),
        )
        if not value.strip()
    ]
    if missing:
        return RuleOutcome.fail(
            Severity.ERROR,
            f"Required field mapping is incomplete: missing {', '.join(missing)}",
            "Ensure all required fields are properly mapped",
        )
    return RuleOutcome.ok()


VALIDATION_RULES: Tuple[ValidationRule, ...] = (
    ValidationRule("type_compatibility", "Source and target types are compatible", RuleCategory.TYPE, check_type_compatibility),
    ValidationRule("not_null_constraint", "NOT NULL targets receive non-nullable data", RuleCategory.CONSTRAINT, check_not_null),
    ValidationRule("primary_key_constraint", "PRIMARY KEY targets receive non-nullable data", RuleCategory.CONSTRAINT, check_primary_key),
    ValidationRule("unique_constraint", "UNIQUE targets need unique source data", RuleCategory.CONSTRAINT, check_unique),
    ValidationRule("email_format", "Email fields carry valid addresses", RuleCategory.FORMAT, check_email_format),
    ValidationRule("phone_format", "Phone fields carry valid numbers", RuleCategory.FORMAT, check_phone_format),
    ValidationRule("uuid_format", "UUID fields carry valid UUIDs", RuleCategory.FORMAT, check_uuid_format),
    ValidationRule("varchar_length", "VARCHAR columns are long enough", RuleCategory.SIZE, check_varchar_length),
    ValidationRule("decimal_precision", "DECIMAL columns have enough precision", RuleCategory.SIZE, check_decimal_precision),
    ValidationRule("sample_size", "Sample values fit the target column", RuleCategory.SIZE, check_sample_size),
    ValidationRule("date_format", "Date columns receive date-shaped data", RuleCategory.FORMAT, check_date_format),
    ValidationRule("json_format", "JSON columns receive structured data", RuleCategory.FORMAT, check_json_format),
    ValidationRule("required_field_mapping", "Both ends of the mapping are named and typed", RuleCategory.REQUIRED, check_required_fields),
)
