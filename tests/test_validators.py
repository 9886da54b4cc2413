"""Tests for format and size validators."""
import pytest

from config import SizeLimits
from fieldmap.validator.format_validator import FORMAT_RULES, validate_format, validate_size


class TestValidateFormat:
    """Test named format validation."""

    @pytest.mark.parametrize(
        "format_name, value",
        [
            ("email", "john@example.com"),
            ("phone", "+5511999998888"),
            ("phone", "4155550100"),
            ("url", "https://example.com/path"),
            ("url", "http://localhost"),
            ("uuid", "123e4567-e89b-12d3-a456-426614174000"),
            ("uuid", "123E4567-E89B-12D3-A456-426614174000"),
            ("ip", "192.168.0.1"),
            ("ip", "255.255.255.255"),
        ],
    )
    def test_valid_values(self, format_name, value):
        """Test values matching their format."""
        assert validate_format(format_name, value).is_valid

    @pytest.mark.parametrize(
        "format_name, value",
        [
            ("email", "john.example.com"),
            ("email", "john @example.com"),
            ("phone", "0123"),
            ("phone", "555-0100"),
            ("url", "ftp://example.com"),
            ("uuid", "not-a-uuid"),
            ("ip", "256.1.1.1"),
            ("ip", "10.0.0"),
        ],
    )
    def test_invalid_values(self, format_name, value):
        """Test values violating their format."""
        result = validate_format(format_name, value)

        assert not result.is_valid
        assert result.message == FORMAT_RULES[format_name].message
        assert result.suggestions

    def test_unknown_format_is_noop(self):
        """Test that unknown or empty format names always pass."""
        assert validate_format("zipcode", "anything").is_valid
        assert validate_format("", "anything").is_valid
        assert validate_format(None, "anything").is_valid

    def test_none_value_is_invalid(self):
        """Test that a missing value does not match a known format."""
        assert not validate_format("email", None).is_valid


class TestValidateSize:
    """Test size and precision validation."""

    def test_varchar_within_limits(self):
        """Test short string in varchar."""
        result = validate_size("varchar(255)", "hello")

        assert result.is_valid
        assert result.suggestions == []

    def test_declared_length_enforced(self):
        """Test string longer than varchar(n)."""
        result = validate_size("varchar(5)", "too long")

        assert not result.is_valid
        assert "8 > 5" in result.message

    def test_varchar_max_length(self):
        """Test string longer than the varchar maximum."""
        result = validate_size("varchar", "x" * 65536)

        assert not result.is_valid
        assert result.suggestions == ["Consider using TEXT or LONGTEXT for longer content"]

    def test_varchar_threshold_suggestion(self):
        """Test that passing the threshold only suggests."""
        result = validate_size("varchar", "x" * 300)

        assert result.is_valid
        assert result.suggestions

    def test_text_threshold(self):
        """Test text threshold of 1000 characters."""
        assert validate_size("text", "x" * 900).suggestions == []
        assert validate_size("text", "x" * 1001).suggestions

    def test_int_range(self):
        """Test 32-bit int range."""
        assert validate_size("int", 2147483647).is_valid
        assert validate_size("int", -2147483648).is_valid

        result = validate_size("int", 2147483648)
        assert not result.is_valid
        assert result.suggestions == ["Consider using BIGINT for larger numbers"]

    def test_bigint_range(self):
        """Test that bigint is checked before int."""
        assert validate_size("bigint", 2147483648).is_valid

        result = validate_size("bigint", 9223372036854775808)
        assert not result.is_valid
        assert result.suggestions == ["Consider using DECIMAL or NUMERIC for larger numbers"]

    def test_numeric_strings(self):
        """Test numeric strings and non-numeric values."""
        assert validate_size("int", "42").is_valid
        assert not validate_size("int", "3000000000").is_valid

        result = validate_size("int", "forty-two")
        assert result.is_valid
        assert result.suggestions == ["Parse and validate numeric values before insert"]

    @pytest.mark.parametrize("value", ["nan", "inf", "-Infinity", float("nan")])
    def test_non_finite_numbers_rejected(self, value):
        """Test that NaN and infinity never pass a range check."""
        result = validate_size("int", value)

        assert not result.is_valid
        assert "not a finite number" in result.message

    @pytest.mark.parametrize("sql_type", ["interval", "point", "multipoint", "timestamp with time zone"])
    def test_types_containing_int_are_not_integers(self, sql_type):
        """Test that only integer types get a range check."""
        result = validate_size(sql_type, "1 day")

        assert result.is_valid
        assert result.suggestions == []

    @pytest.mark.parametrize("sql_type", ["tinyint", "smallint", "integer", "int(11)", "int4", "unsigned int"])
    def test_integer_type_spellings(self, sql_type):
        """Test integer type names that get a range check."""
        assert not validate_size(sql_type, 2147483648).is_valid

    def test_numeric_sample_in_short_varchar(self):
        """Test that numeric samples are measured by their text length."""
        result = validate_size("varchar(3)", 1234567)

        assert not result.is_valid
        assert "7 > 3" in result.message
        assert validate_size("varchar(5)", 12345).is_valid
        assert validate_size("varchar(3)", 1.5).is_valid

    def test_decimal_is_informational(self):
        """Test that decimal checks never invalidate."""
        result = validate_size("decimal(70,40)", 1.5)

        assert result.is_valid
        assert result.message == "DECIMAL precision and scale limits"
        assert result.suggestions

    def test_other_types_are_noop(self):
        """Test unrelated types."""
        result = validate_size("boolean", True)

        assert result.is_valid
        assert result.message == ""

    def test_custom_limits(self):
        """Test limits passed explicitly."""
        limits = SizeLimits(varchar_max_length=10)
        assert not validate_size("varchar", "x" * 11, limits).is_valid


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
