"""
Mapping Validation Module

Evaluates field mappings against a fixed rule battery and rolls the
results up into a configuration summary:
- Format and size validators for sample values
- Rule engine producing one ValidationResult per mapping
- Aggregator producing the ValidationSummary that gates save/run
- Debounced live validation of an editable mapping set
"""

from .aggregator import evaluate_all, summarize_mappings, summarize_results
from .format_validator import CheckResult, validate_format, validate_size
from .live import LiveSnapshot, LiveValidator, observe
from .results import (
    RuleCategory,
    Severity,
    ValidationDetails,
    ValidationIssue,
    ValidationResult,
    ValidationStatus,
    ValidationSummary,
)
from .rule_engine import evaluate_mapping
from .rules import VALIDATION_RULES, ValidationRule

__all__ = [
    "CheckResult",
    "LiveSnapshot",
    "LiveValidator",
    "RuleCategory",
    "Severity",
    "VALIDATION_RULES",
    "ValidationDetails",
    "ValidationIssue",
    "ValidationResult",
    "ValidationRule",
    "ValidationStatus",
    "ValidationSummary",
    "evaluate_all",
    "evaluate_mapping",
    "observe",
    "summarize_mappings",
    "summarize_results",
    "validate_format",
    "validate_size",
]
