"""
Validation Aggregator - rolls per-mapping results into a configuration summary.

The summary status gates saving/running a configuration: any invalid
mapping makes the whole set an error.
"""

import logging
from typing import Any, Iterable, List, Optional

from config import ValidationConfig
from fieldmap.validator.results import ValidationResult, ValidationStatus, ValidationSummary
from fieldmap.validator.rule_engine import evaluate_mapping, round_half_up

logger = logging.getLogger(__name__)

EMPTY_SET_WARNING = "No mappings to validate"
EMPTY_SET_SUGGESTION = "Add field mappings to validate compatibility and constraints"


def empty_summary() -> ValidationSummary:
    """Summary reported for a configuration without mappings."""
    return ValidationSummary(
        status=ValidationStatus.WARNING,
        overall_score=0,
        warnings=[EMPTY_SET_WARNING],
        suggestions=[EMPTY_SET_SUGGESTION],
    )


def summarize_results(results: Iterable[ValidationResult]) -> ValidationSummary:
    """
    Aggregate already computed results, preserving mapping order.

    Messages are concatenated without de-duplication so that identical
    findings on different mappings stay countable.
    """
    results = list(results)
    if not results:
        return empty_summary()

    summary = ValidationSummary(status=ValidationStatus.VALID, total_mappings=len(results))

    for result in results:
        status = result.status
        if status == ValidationStatus.ERROR:
            summary.error_mappings += 1
        elif status == ValidationStatus.WARNING:
            summary.warning_mappings += 1
        else:
            summary.valid_mappings += 1

        summary.errors.extend(result.errors)
        summary.warnings.extend(result.warnings)
        summary.suggestions.extend(result.suggestions)

        for issue in result.issues:
            if issue.is_critical:
                summary.critical_issues.append(issue.message)
            elif issue.is_fixable:
                summary.fixable_issues.append(issue.message)

    summary.overall_score = round_half_up(sum(r.score for r in results) / len(results))

    if summary.error_mappings > 0:
        summary.status = ValidationStatus.ERROR
    elif summary.warning_mappings > 0:
        summary.status = ValidationStatus.WARNING

    return summary


def summarize_mappings(
    mappings: Optional[Iterable[Any]],
    config: Optional[ValidationConfig] = None,
) -> ValidationSummary:
    """
    Evaluate every mapping and summarize the outcome.

    Args:
        mappings: Mappings in editor order (None is treated as empty)
        config: Validation configuration passed to the rule engine

    Returns:
        ValidationSummary with counts, rounded mean score and issues
    """
    results = evaluate_all(mappings, config)
    summary = summarize_results(results)
    logger.info(
        f"Validated {summary.total_mappings} mapping(s): {summary.status.value}, "
        f"score {summary.overall_score}"
    )
    return summary


def evaluate_all(
    mappings: Optional[Iterable[Any]],
    config: Optional[ValidationConfig] = None,
) -> List[ValidationResult]:
    """Evaluate each mapping in order."""
    config = config or ValidationConfig()
    return [evaluate_mapping(mapping, config) for mapping in (mappings or [])]
