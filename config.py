"""Application configuration."""
import os
from dataclasses import dataclass, field
from typing import Tuple


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SizeLimits:
    """Size and precision limits used by the size validator and size rules."""

    varchar_max_length: int = 65535
    varchar_warning_threshold: int = 255
    text_max_length: int = 65535
    text_warning_threshold: int = 1000
    decimal_max_precision: int = 65
    decimal_max_scale: int = 30
    int_range: Tuple[int, int] = (-2147483648, 2147483647)
    bigint_range: Tuple[int, int] = (-9223372036854775808, 9223372036854775807)

    # Recommended minimums checked by the varchar_length / decimal_precision rules
    min_varchar_length: int = 50
    min_decimal_precision: int = 10
    min_decimal_scale: int = 2


@dataclass
class ValidationConfig:
    """Configuration for the mapping validation engine."""

    debounce_seconds: float = 0.5
    promote_conversion_risks: bool = True
    size_limits: SizeLimits = field(default_factory=SizeLimits)

    @classmethod
    def from_env(cls) -> "ValidationConfig":
        """Load config from environment variables."""
        limits = SizeLimits(
            min_varchar_length=int(os.getenv("FIELDMAP_MIN_VARCHAR_LENGTH", "50")),
        )
        return cls(
            debounce_seconds=int(os.getenv("FIELDMAP_DEBOUNCE_MS", "500")) / 1000.0,
            promote_conversion_risks=_env_bool("FIELDMAP_PROMOTE_RISKS", True),
            size_limits=limits,
        )


@dataclass
class AppConfig:
    """Application configuration."""

    output_dir: str = "./output"
    log_level: str = "WARNING"
    validation: ValidationConfig = None

    def __post_init__(self):
        """Initialize default values."""
        if self.validation is None:
            self.validation = ValidationConfig()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            output_dir=os.getenv("FIELDMAP_OUTPUT_DIR", "./output"),
            log_level=os.getenv("FIELDMAP_LOG_LEVEL", "WARNING"),
            validation=ValidationConfig.from_env(),
        )
