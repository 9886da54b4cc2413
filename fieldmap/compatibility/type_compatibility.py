"""
Type Compatibility Resolver - classifies API type → SQL type conversions.

Source types come from the JSON field extractor (string, number, boolean,
date, object, array, binary, function/undefined). Target types are raw SQL
column types as reported by the database (varchar(255), decimal(10,2),
tinyint(1), jsonb, ...).

Matching is by substring containment against an ordered table: the first
entry whose source aliases occur in the source type AND whose target aliases
occur in the target type decides the verdict. Narrow entries are therefore
declared before the broader entries that would otherwise shadow them.
"""

import logging
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class CompatibilityLevel(str, Enum):
    """Verdict for a source → target type pairing."""

    COMPATIBLE = "compatible"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class TypeMapping:
    """One row of the compatibility table."""

    source: Tuple[str, ...]
    target: Tuple[str, ...]
    level: CompatibilityLevel
    description: str
    examples: Tuple[str, ...] = ()

    def matches_source(self, source: str) -> bool:
        return any(alias in source for alias in self.source)

    def matches_target(self, target: str) -> bool:
        return any(alias in target for alias in self.target)


@dataclass
class TypeCompatibilityResult:
    """Verdict with a human-readable message and suggestions."""

    level: CompatibilityLevel
    message: str
    suggestions: List[str] = dataclass_field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "level": self.level.value,
            "message": self.message,
            "suggestions": list(self.suggestions),
        }


NON_SERIALIZABLE_TYPES = ("function", "undefined", "symbol")

TYPE_MAPPINGS: Tuple[TypeMapping, ...] = (
    # Non-serializable values
    TypeMapping(
        source=NON_SERIALIZABLE_TYPES,
        target=("varchar", "char", "text", "clob", "json"),
        level=CompatibilityLevel.ERROR,
        description="Non-serializable type, cannot be stored",
        examples=("function() {} → VARCHAR - serialization error",),
    ),
    # String types
    TypeMapping(
        source=("string",),
        target=("varchar(1)", "char(1)"),
        level=CompatibilityLevel.WARNING,
        description="String to single character - truncation risk",
        examples=('"Hello" → CHAR(1) - truncation warning',),
    ),
    TypeMapping(
        source=("string", "text"),
        target=("varchar", "nvarchar", "char", "nchar", "text", "longtext", "clob", "uuid", "uniqueidentifier"),
        level=CompatibilityLevel.COMPATIBLE,
        description="String to text types - direct mapping",
        examples=('"John Doe" → VARCHAR(255)', '"Long text content" → TEXT'),
    ),
    TypeMapping(
        source=("string",),
        target=("date", "datetime", "timestamp", "time"),
        level=CompatibilityLevel.WARNING,
        description="String to date - requires format validation",
        examples=('"2024-01-01" → DATE - format validation needed',),
    ),
    TypeMapping(
        source=("string",),
        target=("int", "decimal", "numeric", "float", "double", "real"),
        level=CompatibilityLevel.WARNING,
        description="String to number - requires numeric parsing",
        examples=('"42" → INT - parse before insert', '"abc" → INT - conversion failure'),
    ),
    # Number types
    TypeMapping(
        source=("number",),
        target=("tinyint",),
        level=CompatibilityLevel.WARNING,
        description="Number to tinyint - overflow risk (0-255 unsigned, -128-127 signed)",
        examples=("300 → TINYINT - overflow warning (max 255)",),
    ),
    TypeMapping(
        source=("number", "integer", "int"),
        target=("int", "integer", "bigint", "smallint", "tinyint"),
        level=CompatibilityLevel.COMPATIBLE,
        description="Number to integer types - direct mapping",
        examples=("42 → INT", "999999999 → BIGINT"),
    ),
    TypeMapping(
        source=("number", "integer", "int", "float", "double", "decimal"),
        target=("decimal", "numeric", "float", "double", "real", "money"),
        level=CompatibilityLevel.COMPATIBLE,
        description="Number to decimal/float types - direct mapping",
        examples=("3.14 → DECIMAL(10,2)", "1.23e10 → DOUBLE"),
    ),
    # Boolean types
    TypeMapping(
        source=("boolean", "bool"),
        target=("bit", "boolean", "bool", "tinyint(1)"),
        level=CompatibilityLevel.COMPATIBLE,
        description="Boolean to bit/boolean types - direct mapping",
        examples=("true → BIT(1)", "false → BOOLEAN"),
    ),
    # Date/Time types
    TypeMapping(
        source=("date", "datetime", "timestamp"),
        target=("date", "datetime", "timestamp", "datetime2", "time"),
        level=CompatibilityLevel.COMPATIBLE,
        description="Date to date/time types - direct mapping",
        examples=('"2024-01-01" → DATE', '"2024-01-01T10:30:00Z" → DATETIME'),
    ),
    TypeMapping(
        source=("date", "datetime", "timestamp"),
        target=("varchar", "nvarchar", "char", "text"),
        level=CompatibilityLevel.WARNING,
        description="Date stored as string - consider a proper date type",
        examples=('"2024-01-01" → VARCHAR(10) - loses date semantics',),
    ),
    # JSON/Object types
    TypeMapping(
        source=("object", "json", "array"),
        target=("json", "jsonb", "text", "varchar(max)"),
        level=CompatibilityLevel.COMPATIBLE,
        description="Object/array to JSON types - direct mapping",
        examples=('{"name": "John"} → JSON', '["item1", "item2"] → JSONB'),
    ),
    # Binary types
    TypeMapping(
        source=("buffer", "binary", "blob"),
        target=("blob", "varbinary", "binary", "image", "bytea"),
        level=CompatibilityLevel.COMPATIBLE,
        description="Binary to binary types - direct mapping",
        examples=("Buffer data → BLOB", "Binary data → VARBINARY(MAX)"),
    ),
)


def _normalize(type_name: Any) -> str:
    if type_name is None:
        return ""
    return str(type_name).strip().lower()


def find_type_mapping(source_type: Any, target_type: Any) -> Optional[TypeMapping]:
    """Return the first table entry matching both types, or None."""
    source = _normalize(source_type)
    target = _normalize(target_type)

    for mapping in TYPE_MAPPINGS:
        if mapping.matches_source(source) and mapping.matches_target(target):
            return mapping
    return None


def check_compatibility(source_type: Any, target_type: Any) -> CompatibilityLevel:
    """Return only the compatibility level for a pairing."""
    mapping = find_type_mapping(source_type, target_type)
    if mapping is None:
        return CompatibilityLevel.ERROR
    return mapping.level


def get_suggestions(source_type: Any, target_type: Any) -> List[str]:
    """Return conversion suggestions: table examples plus category advice."""
    source = _normalize(source_type)
    target = _normalize(target_type)
    suggestions: List[str] = []

    mapping = find_type_mapping(source, target)
    if mapping:
        suggestions.extend(mapping.examples)

    if "string" in source and "varchar" in target:
        suggestions.append("Consider VARCHAR length based on expected data size")
        suggestions.append("Use VARCHAR(255) for names, VARCHAR(500) for descriptions")

    if "number" in source and "decimal" in target:
        suggestions.append("Specify precision and scale: DECIMAL(10,2) for currency")
        suggestions.append("Consider rounding for decimal conversions")

    if ("date" in source or "string" in source) and any(t in target for t in ("date", "time")):
        suggestions.append("Validate date format before conversion")
        suggestions.append("Consider timezone handling for datetime")

    if ("object" in source or "array" in source) and "json" in target:
        suggestions.append("Use JSON type for structured data")
        suggestions.append("Consider JSONB for better performance (PostgreSQL)")

    if "email" in source:
        suggestions.append("Validate email format before storage")
        suggestions.append("Consider UNIQUE constraint for email fields")

    if "phone" in source:
        suggestions.append("Standardize phone number format")
        suggestions.append("Use VARCHAR(20) for international numbers")

    return suggestions


def resolve_compatibility(source_type: Any, target_type: Any) -> TypeCompatibilityResult:
    """
    Classify a source → target type pairing.

    Never raises: unknown or empty types degrade to an ERROR verdict with a
    "no known conversion" message.

    Args:
        source_type: Inferred JSON type of the API field (e.g. "string")
        target_type: SQL type of the database column (e.g. "varchar(255)")

    Returns:
        TypeCompatibilityResult with level, message and suggestions
    """
    source_label = "" if source_type is None else str(source_type)
    target_label = "" if target_type is None else str(target_type)

    mapping = find_type_mapping(source_label, target_label)
    suggestions = get_suggestions(source_label, target_label)

    if mapping is None:
        logger.debug(f"No conversion known for {source_label!r} → {target_label!r}")
        return TypeCompatibilityResult(
            level=CompatibilityLevel.ERROR,
            message=f"Incompatible types: {source_label} → {target_label} (no known conversion)",
            suggestions=suggestions,
        )

    if mapping.level == CompatibilityLevel.COMPATIBLE:
        message = f"Direct mapping from {source_label} to {target_label}"
    elif mapping.level == CompatibilityLevel.WARNING:
        message = f"Compatible with warnings: {source_label} → {target_label} ({mapping.description})"
    else:
        message = f"Incompatible types: {source_label} → {target_label} ({mapping.description})"

    return TypeCompatibilityResult(level=mapping.level, message=message, suggestions=suggestions)


def get_compatible_target_types(source_type: Any) -> List[str]:
    """Return every target alias reachable from *source_type* (any level)."""
    source = _normalize(source_type)
    targets: List[str] = []
    for mapping in TYPE_MAPPINGS:
        if mapping.matches_source(source):
            for alias in mapping.target:
                if alias not in targets:
                    targets.append(alias)
    return targets


def get_compatible_source_types(target_type: Any) -> List[str]:
    """Return every source alias that can reach *target_type* (any level)."""
    target = _normalize(target_type)
    sources: List[str] = []
    for mapping in TYPE_MAPPINGS:
        if mapping.matches_target(target):
            for alias in mapping.source:
                if alias not in sources:
                    sources.append(alias)
    return sources


def get_type_mapping_info(source_type: Any, target_type: Any) -> Dict[str, Any]:
    """
    Return the matched table entry together with conversion warnings.

    Returns:
        {"mapping": TypeMapping | None, "compatibility": CompatibilityLevel,
         "suggestions": [...], "warnings": [...]}
    """
    source = _normalize(source_type)
    target = _normalize(target_type)
    mapping = find_type_mapping(source, target)

    warnings: List[str] = []
    if "string" in source and "char(1)" in target:
        warnings.append("Data truncation may occur for strings longer than 1 character")
    if "number" in source and "tinyint" in target:
        warnings.append("Number overflow may occur for values greater than 255")
    if "date" in source and "varchar" in target:
        warnings.append("Date stored as string - consider using proper date type")
    if any(t in source for t in NON_SERIALIZABLE_TYPES):
        warnings.append(f"{source} values are not serializable and cannot be stored")

    return {
        "mapping": mapping,
        "compatibility": mapping.level if mapping else CompatibilityLevel.ERROR,
        "suggestions": get_suggestions(source, target),
        "warnings": warnings,
    }
