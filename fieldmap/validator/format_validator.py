"""Format and size validators applied to sample values."""
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config import SizeLimits

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Outcome of a single format or size check."""

    is_valid: bool
    message: str = ""
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "is_valid": self.is_valid,
            "message": self.message,
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class FormatRule:
    """A named format with its pattern and advice."""

    pattern: "re.Pattern"
    message: str
    suggestions: tuple


FORMAT_RULES: Dict[str, FormatRule] = {
    "email": FormatRule(
        pattern=re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$"),
        message="Invalid email format",
        suggestions=("Use VARCHAR(255) with email validation", "Consider UNIQUE constraint"),
    ),
    "phone": FormatRule(
        pattern=re.compile(r"^[+]?[1-9]\d{0,15}$"),
        message="Invalid phone number format",
        suggestions=("Use VARCHAR(20) for international numbers", "Consider format standardization"),
    ),
    "url": FormatRule(
        pattern=re.compile(r"^https?://.+"),
        message="Invalid URL format",
        suggestions=("Use VARCHAR(2083) for full URLs", "Consider URL validation"),
    ),
    "uuid": FormatRule(
        pattern=re.compile(
            r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
            re.IGNORECASE,
        ),
        message="Invalid UUID format",
        suggestions=("Use CHAR(36) or UUID type", "Consider UNIQUE constraint"),
    ),
    "ip": FormatRule(
        pattern=re.compile(
            r"^(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
            r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$"
        ),
        message="Invalid IP address format",
        suggestions=("Use VARCHAR(15) for IPv4", "Use VARCHAR(39) for IPv6"),
    ),
}

_DECLARED_LENGTH = re.compile(r"varchar\s*\(\s*(\d+)\s*\)")
_DECLARED_DECIMAL = re.compile(r"decimal\s*\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\)")
_INTEGER_TYPE = re.compile(r"\b(?:tiny|small|medium|big)?int(?:eger|\d+)?\b")


def validate_format(format_name: Optional[str], value: Any) -> CheckResult:
    """
    Validate *value* against a named format.

    Unknown or empty format names are a no-op and always valid.
    """
    if not format_name:
        return CheckResult(is_valid=True)

    rule = FORMAT_RULES.get(str(format_name).strip().lower())
    if rule is None:
        return CheckResult(is_valid=True)

    text = "" if value is None else str(value)
    if rule.pattern.match(text):
        return CheckResult(is_valid=True)

    return CheckResult(is_valid=False, message=rule.message, suggestions=list(rule.suggestions))


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    try:
        text = str(value).strip()
        return int(text) if re.fullmatch(r"[+-]?\d+", text) else float(text)
    except (TypeError, ValueError):
        return None


def validate_size(sql_type: Optional[str], value: Any, limits: Optional[SizeLimits] = None) -> CheckResult:
    """
    Check a sample value against size/precision limits of a SQL type.

    Applies to varchar/text (length), integer types (range) and decimal
    (precision/scale, informational). Other types are a no-op, and a
    non-numeric sample for an integer column is never a range failure.
    """
    limits = limits or SizeLimits()
    type_name = "" if sql_type is None else str(sql_type).strip().lower()
    suggestions: List[str] = []

    if "varchar" in type_name or "text" in type_name:
        # Scalars are measured as they would be stored
        length = len(str(value)) if isinstance(value, (str, int, float)) else 0
        is_varchar = "varchar" in type_name
        max_length = limits.varchar_max_length if is_varchar else limits.text_max_length
        threshold = limits.varchar_warning_threshold if is_varchar else limits.text_warning_threshold

        declared = _DECLARED_LENGTH.search(type_name)
        if declared and length > int(declared.group(1)):
            return CheckResult(
                is_valid=False,
                message=f"Value too long for {type_name} ({length} > {declared.group(1)})",
                suggestions=["Increase the column length or truncate the value before insert"],
            )

        if length > max_length:
            return CheckResult(
                is_valid=False,
                message=f"Value too long for {type_name} ({length} > {max_length})",
                suggestions=["Consider using TEXT or LONGTEXT for longer content"],
            )

        if length > threshold:
            suggestions.append(f"Consider using TEXT for content longer than {threshold} characters")

        return CheckResult(is_valid=True, suggestions=suggestions)

    if _INTEGER_TYPE.search(type_name):
        low, high = limits.bigint_range if "bigint" in type_name else limits.int_range
        number = _to_number(value)

        # Non-numeric samples have no range to check
        if number is None:
            return CheckResult(is_valid=True, suggestions=["Parse and validate numeric values before insert"])

        if isinstance(number, float) and not math.isfinite(number):
            return CheckResult(
                is_valid=False,
                message=f"Value {value!r} is not a finite number for {type_name}",
                suggestions=["Reject NaN and infinite values before insert"],
            )

        if number < low or number > high:
            suggestion = (
                "Consider using DECIMAL or NUMERIC for larger numbers"
                if "bigint" in type_name
                else "Consider using BIGINT for larger numbers"
            )
            return CheckResult(
                is_valid=False,
                message=f"Value out of range for {type_name} ({low} to {high})",
                suggestions=[suggestion],
            )

        return CheckResult(is_valid=True)

    if "decimal" in type_name:
        declared = _DECLARED_DECIMAL.search(type_name)
        if declared:
            precision = int(declared.group(1))
            scale = int(declared.group(2) or 0)
            if precision > limits.decimal_max_precision or scale > limits.decimal_max_scale:
                suggestions.append(
                    f"DECIMAL supports at most precision {limits.decimal_max_precision} "
                    f"and scale {limits.decimal_max_scale}"
                )
        return CheckResult(is_valid=True, message="DECIMAL precision and scale limits", suggestions=suggestions)

    return CheckResult(is_valid=True)
