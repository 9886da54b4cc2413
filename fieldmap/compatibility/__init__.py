"""
Type Compatibility Module

Classifies API type → SQL column type conversions as compatible,
risky (warning) or invalid (error), with conversion suggestions.
"""

from .type_compatibility import (
    CompatibilityLevel,
    TypeCompatibilityResult,
    TypeMapping,
    TYPE_MAPPINGS,
    check_compatibility,
    find_type_mapping,
    get_compatible_source_types,
    get_compatible_target_types,
    get_suggestions,
    get_type_mapping_info,
    resolve_compatibility,
)

__all__ = [
    "CompatibilityLevel",
    "TypeCompatibilityResult",
    "TypeMapping",
    "TYPE_MAPPINGS",
    "check_compatibility",
    "find_type_mapping",
    "get_compatible_source_types",
    "get_compatible_target_types",
    "get_suggestions",
    "get_type_mapping_info",
    "resolve_compatibility",
]
