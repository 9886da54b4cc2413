"""
Mapping Rule Engine - evaluates one mapping against the rule battery.

The engine is pure: the same mapping always produces the same result and
nothing is stored between calls. It never raises; malformed input shows
up as required-field errors and a failing rule is reported as an error
for that rule.
"""

import logging
import math
from typing import Any, List, Optional, Set

from config import ValidationConfig
from fieldmap.compatibility.type_compatibility import check_compatibility
from fieldmap.validator.results import (
    RuleCategory,
    Severity,
    ValidationDetails,
    ValidationIssue,
    ValidationResult,
)
from fieldmap.validator.rules import VALIDATION_RULES, MappingView, RuleOutcome, ValidationRule

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores."""
    return int(math.floor(value + 0.5))


def _run_rule(rule: ValidationRule, view: MappingView, config: ValidationConfig) -> RuleOutcome:
    try:
        return rule.check(view, config)
    except Exception as e:
        logger.exception(f"Rule {rule.name} failed on mapping {view.mapping_id}")
        return RuleOutcome.fail(Severity.ERROR, f"Rule '{rule.name}' could not be evaluated: {e}")


def _view_of(mapping: Any) -> MappingView:
    try:
        return MappingView.of(mapping)
    except Exception as e:
        logger.error(f"Could not read mapping {mapping!r}: {e}")
        return MappingView(mapping_id=str(getattr(mapping, "id", "") or ""))


def _details(failed: Set[RuleCategory]) -> ValidationDetails:
    return ValidationDetails(
        type_compatibility=RuleCategory.TYPE not in failed,
        constraint_validation=RuleCategory.CONSTRAINT not in failed,
        format_validation=RuleCategory.FORMAT not in failed,
        size_validation=RuleCategory.SIZE not in failed,
        required_field_validation=RuleCategory.REQUIRED not in failed,
    )


def evaluate_mapping(mapping: Any, config: Optional[ValidationConfig] = None) -> ValidationResult:
    """
    Validate a single field mapping.

    Args:
        mapping: Mapping object, mapping dict (snake_case or camelCase keys)
            or any object with source_field/target_field attributes
        config: Validation configuration; defaults are used when omitted

    Returns:
        ValidationResult; is_valid is False exactly when an error was found
    """
    config = config or ValidationConfig()
    view = _view_of(mapping)

    errors: List[str] = []
    warnings: List[str] = []
    suggestions: List[str] = []
    issues: List[ValidationIssue] = []
    failed: Set[RuleCategory] = set()
    passed = 0

    for rule in VALIDATION_RULES:
        outcome = _run_rule(rule, view, config)
        suggestions.extend(outcome.suggestions)

        if outcome.passed:
            passed += 1
            continue

        issues.append(ValidationIssue(rule.name, rule.category, outcome.severity, outcome.message))
        if outcome.severity == Severity.ERROR:
            errors.append(outcome.message)
        else:
            warnings.append(outcome.message)

        # Informational findings are reported but leave the category flag set
        if outcome.severity != Severity.INFO:
            failed.add(rule.category)

    score = round_half_up(100 * passed / len(VALIDATION_RULES))

    result = ValidationResult(
        mapping_id=view.mapping_id,
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        suggestions=suggestions,
        compatibility=check_compatibility(view.source_type, view.target_type),
        score=score,
        details=_details(failed),
        issues=issues,
    )

    logger.debug(
        f"Mapping {view.mapping_id}: {len(errors)} error(s), {len(warnings)} warning(s), score {score}"
    )
    return result
