"""Tests for configuration loading."""
import pytest

from config import AppConfig, SizeLimits, ValidationConfig


class TestConfig:
    """Test config defaults and environment loading."""

    def test_defaults(self):
        """Test default values."""
        config = AppConfig()

        assert config.log_level == "WARNING"
        assert config.validation.debounce_seconds == 0.5
        assert config.validation.promote_conversion_risks is True
        assert config.validation.size_limits == SizeLimits()

    def test_from_env(self, monkeypatch):
        """Test FIELDMAP_* environment variables."""
        monkeypatch.setenv("FIELDMAP_DEBOUNCE_MS", "250")
        monkeypatch.setenv("FIELDMAP_PROMOTE_RISKS", "false")
        monkeypatch.setenv("FIELDMAP_MIN_VARCHAR_LENGTH", "20")
        monkeypatch.setenv("FIELDMAP_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("FIELDMAP_OUTPUT_DIR", "/tmp/reports")

        config = AppConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.output_dir == "/tmp/reports"
        assert config.validation.debounce_seconds == 0.25
        assert config.validation.promote_conversion_risks is False
        assert config.validation.size_limits.min_varchar_length == 20

    def test_from_env_defaults(self, monkeypatch):
        """Test that unset variables keep the defaults."""
        for name in ("FIELDMAP_DEBOUNCE_MS", "FIELDMAP_PROMOTE_RISKS", "FIELDMAP_MIN_VARCHAR_LENGTH"):
            monkeypatch.delenv(name, raising=False)

        assert ValidationConfig.from_env() == ValidationConfig()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
