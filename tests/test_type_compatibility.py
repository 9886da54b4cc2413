"""
Unit tests for the type compatibility resolver.

Tests:
- Required classifications of the conversion table
- Table order: narrow entries win over broad ones
- Totality for empty, None and unknown inputs
- Helper lookups (compatible types, mapping info)
"""

import pytest

from fieldmap.compatibility.type_compatibility import (
    CompatibilityLevel,
    TYPE_MAPPINGS,
    check_compatibility,
    find_type_mapping,
    get_compatible_source_types,
    get_compatible_target_types,
    get_suggestions,
    get_type_mapping_info,
    resolve_compatibility,
)


COMPATIBLE = CompatibilityLevel.COMPATIBLE
WARNING = CompatibilityLevel.WARNING
ERROR = CompatibilityLevel.ERROR


# ============================================================================
# CLASSIFICATION TESTS
# ============================================================================


class TestClassification:
    """Test the verdicts of the conversion table."""

    @pytest.mark.parametrize(
        "source, target, expected",
        [
            ("string", "varchar(255)", COMPATIBLE),
            ("string", "TEXT", COMPATIBLE),
            ("string", "nvarchar(100)", COMPATIBLE),
            ("string", "uuid", COMPATIBLE),
            ("string", "char(1)", WARNING),
            ("string", "varchar(1)", WARNING),
            ("string", "date", WARNING),
            ("string", "timestamp", WARNING),
            ("string", "int", WARNING),
            ("number", "int", COMPATIBLE),
            ("number", "bigint", COMPATIBLE),
            ("integer", "smallint", COMPATIBLE),
            ("number", "tinyint", WARNING),
            ("number", "decimal(10,2)", COMPATIBLE),
            ("number", "double", COMPATIBLE),
            ("boolean", "bit", COMPATIBLE),
            ("boolean", "tinyint(1)", COMPATIBLE),
            ("date", "datetime2", COMPATIBLE),
            ("datetime", "timestamp", COMPATIBLE),
            ("date", "varchar(10)", WARNING),
            ("object", "json", COMPATIBLE),
            ("array", "jsonb", COMPATIBLE),
            ("buffer", "varbinary(max)", COMPATIBLE),
            ("binary", "blob", COMPATIBLE),
            ("function", "varchar(255)", ERROR),
            ("undefined", "text", ERROR),
            ("boolean", "date", ERROR),
        ],
    )
    def test_levels(self, source, target, expected):
        """Test verdicts of common pairings."""
        assert resolve_compatibility(source, target).level == expected

    def test_case_insensitive(self):
        """Test that inputs are lower-cased before matching."""
        assert resolve_compatibility("STRING", "VARCHAR(255)").level == COMPATIBLE
        assert check_compatibility("Number", "TinyInt") == WARNING

    def test_non_serializable_message(self):
        """Test that non-serializable sources are reported as such."""
        result = resolve_compatibility("function", "varchar(255)")

        assert result.level == ERROR
        assert "non-serializable" in result.message.lower()
        assert "function" in result.message
        assert "varchar(255)" in result.message

    def test_messages_name_both_types(self):
        """Test that every message names the source and target literally."""
        for source, target in [("string", "varchar(50)"), ("number", "tinyint"), ("boolean", "date")]:
            message = resolve_compatibility(source, target).message
            assert source in message
            assert target in message

    def test_compatible_message(self):
        """Test compatible message wording."""
        result = resolve_compatibility("string", "varchar(255)")
        assert result.message == "Direct mapping from string to varchar(255)"


# ============================================================================
# TABLE ORDER TESTS
# ============================================================================


class TestTableOrder:
    """Test first-match-wins ordering."""

    def test_single_char_target_before_varchar(self):
        """Test that string → char(1) is not shadowed by string → varchar family."""
        entry = find_type_mapping("string", "char(1)")

        assert entry is not None
        assert entry.level == WARNING
        assert "truncation" in entry.description.lower()

    def test_tinyint_before_integer_family(self):
        """Test that number → tinyint is not shadowed by number → int family."""
        entry = find_type_mapping("number", "tinyint")

        assert entry.level == WARNING
        assert "overflow" in entry.description.lower()

    def test_first_match_is_returned(self):
        """Test that find_type_mapping returns the earliest matching entry."""
        entry = find_type_mapping("string", "varchar(255)")
        matching = [m for m in TYPE_MAPPINGS if m.matches_source("string") and m.matches_target("varchar(255)")]

        assert entry is matching[0]

    def test_deterministic(self):
        """Test that repeated calls give the same verdict."""
        first = resolve_compatibility("number", "tinyint")
        second = resolve_compatibility("number", "tinyint")

        assert first.to_dict() == second.to_dict()


# ============================================================================
# TOTALITY TESTS
# ============================================================================


class TestTotality:
    """Test that the resolver never raises."""

    @pytest.mark.parametrize(
        "source, target",
        [("", ""), (None, None), ("string", None), (None, "varchar(255)"), ("widget", "hologram"), (42, 3.5)],
    )
    def test_unknown_inputs_are_errors(self, source, target):
        """Test that unknown pairings degrade to an error verdict."""
        result = resolve_compatibility(source, target)

        assert result.level == ERROR
        assert "no known conversion" in result.message

    def test_result_to_dict(self):
        """Test JSON-safe dict output."""
        data = resolve_compatibility("number", "tinyint").to_dict()

        assert data["level"] == "warning"
        assert isinstance(data["suggestions"], list)


# ============================================================================
# SUGGESTION AND HELPER TESTS
# ============================================================================


class TestHelpers:
    """Test suggestions and lookup helpers."""

    def test_suggestions_include_examples_and_advice(self):
        """Test string → varchar suggestions."""
        suggestions = get_suggestions("string", "varchar(255)")

        assert '"John Doe" → VARCHAR(255)' in suggestions
        assert "Consider VARCHAR length based on expected data size" in suggestions

    def test_decimal_advice(self):
        """Test number → decimal advice."""
        suggestions = get_suggestions("number", "decimal(10,2)")
        assert "Specify precision and scale: DECIMAL(10,2) for currency" in suggestions

    def test_date_advice(self):
        """Test date format advice for string → date."""
        suggestions = get_suggestions("string", "datetime")
        assert "Validate date format before conversion" in suggestions

    def test_json_advice(self):
        """Test JSONB advice for object → json."""
        suggestions = get_suggestions("object", "json")
        assert "Consider JSONB for better performance (PostgreSQL)" in suggestions

    def test_compatible_target_types(self):
        """Test target alias listing for a source."""
        targets = get_compatible_target_types("boolean")

        assert "bit" in targets
        assert "tinyint(1)" in targets
        assert "json" not in targets

    def test_compatible_source_types(self):
        """Test source alias listing for a target."""
        sources = get_compatible_source_types("jsonb")

        assert "object" in sources
        assert "array" in sources

    def test_mapping_info_warnings(self):
        """Test conversion warnings of get_type_mapping_info."""
        info = get_type_mapping_info("number", "tinyint")

        assert info["compatibility"] == WARNING
        assert info["mapping"] is not None
        assert any("overflow" in w.lower() for w in info["warnings"])

    def test_mapping_info_unknown(self):
        """Test mapping info without a table entry."""
        info = get_type_mapping_info("boolean", "date")

        assert info["mapping"] is None
        assert info["compatibility"] == ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
