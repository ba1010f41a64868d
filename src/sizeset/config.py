"""Configuration system for sizeset.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (SIZESET_*) -> .env file -> field defaults.

Per-image overrides are applied via resolve_config() which creates a new
config instance without mutating the defaults. Infrastructure fields are
protected from per-image override.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sizeset.exceptions import ConfigValidationError

DEFAULT_BREAKPOINTS: dict[str, int] = {
    "xs": 320,
    "sm": 640,
    "md": 768,
    "lg": 1024,
    "xl": 1280,
    "2xl": 1536,
}

# Fields that can be overridden per image. Provider wiring, the breakpoint
# table and the allow-lists are host-wide and cannot change per image.
_PER_IMAGE_FIELDS: frozenset[str] = frozenset(
    {
        "formats",
        "quality",
        "placeholder_width",
        "placeholder_height",
        "placeholder_quality",
        "log_level",
        "diagnostic_mode",
    }
)

_LOG_LEVELS: frozenset[str] = frozenset({"none", "summary", "full"})

# All known config field names (populated after class definition).
_ALL_FIELDS: frozenset[str] = frozenset()


class SizesetConfig(BaseSettings):
    """Configuration for sizeset.

    Resolution order: init kwargs -> env vars (SIZESET_*) -> .env file -> defaults.

    Fields are divided into two groups:
    - **Infrastructure**: provider, path prefix, breakpoints, domains,
      presets, vector formats. NOT overridable per image.
    - **Per-image**: formats, quality, placeholder defaults, logging.
      Overridable via ``resolve_config()``.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIZESET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Infrastructure (NOT per-image overridable) ---

    provider: str = Field(
        default="ipx",
        description="Registered image provider name ('ipx', 'none', or a plugin)",
    )
    provider_prefix: str = Field(
        default="_ipx",
        description="Fixed path prefix under which the provider serves transformed images",
    )
    breakpoints: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_BREAKPOINTS),
        description="Named breakpoint keys mapped to max-width thresholds in px",
    )
    domains: list[str] = Field(
        default_factory=list,
        description="Hosts whose absolute sources may be transformed",
    )
    presets: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Named directive bundles (width, height, format, quality, crop)",
    )
    vector_formats: list[str] = Field(
        default_factory=lambda: ["svg"],
        description="Source extensions that bypass transformation",
    )

    # --- Format selection (per-image overridable) ---

    formats: list[str] = Field(
        default_factory=lambda: ["webp"],
        description="Alternate output formats offered by picture resolution",
    )
    quality: int | None = Field(
        default=None,
        description="Default quality directive (0-100, None omits it)",
    )

    # --- Placeholder (per-image overridable) ---

    placeholder_width: int = Field(
        default=10,
        description="Placeholder width in px",
    )
    placeholder_height: int = Field(
        default=10,
        description="Placeholder height in px",
    )
    placeholder_quality: int = Field(
        default=50,
        description="Placeholder quality (0-100)",
    )

    # --- Logging (per-image overridable) ---

    log_level: str = Field(
        default="summary",
        description="Logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all resolution records in memory for analysis",
    )

    @field_validator("breakpoints")
    @classmethod
    def _check_breakpoints(cls, value: dict[str, int]) -> dict[str, int]:
        previous = 0
        for key, threshold in value.items():
            if threshold <= 0:
                raise ValueError(f"breakpoint {key!r} must be a positive integer, got {threshold}")
            if threshold <= previous:
                raise ValueError(
                    f"breakpoints must be strictly increasing: {key!r}={threshold} "
                    f"follows {previous}"
                )
            previous = threshold
        return value

    @field_validator("quality", "placeholder_quality")
    @classmethod
    def _check_quality(cls, value: int | None) -> int | None:
        if value is not None and not 0 <= value <= 100:
            raise ValueError(f"quality must be within 0-100, got {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        if value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return value


# Populate _ALL_FIELDS now that the class is defined.
_ALL_FIELDS = frozenset(SizesetConfig.model_fields.keys())


def validate_overrides(overrides: dict[str, Any]) -> None:
    """Validate per-image override keys without creating a config.

    Args:
        overrides: Field name to value mapping.

    Raises:
        ConfigValidationError: If any key is unknown or non-overridable.
    """
    for key in overrides:
        if key not in _ALL_FIELDS:
            raise ConfigValidationError(f"Unknown config field: '{key}'")
        if key not in _PER_IMAGE_FIELDS:
            raise ConfigValidationError(
                f"Field '{key}' is an infrastructure field and cannot be overridden per image"
            )


def resolve_config(
    defaults: SizesetConfig,
    overrides: dict[str, Any] | None,
) -> SizesetConfig:
    """Create a new config instance merging defaults with per-image overrides.

    Args:
        defaults: The base configuration loaded from environment.
        overrides: Per-image field overrides.

    Returns:
        ``defaults`` itself when there is nothing to override, otherwise a
        new SizesetConfig with overrides applied.

    Raises:
        ConfigValidationError: If any key is unknown, non-overridable, or
            its value fails validation.
    """
    if not overrides:
        return defaults

    validate_overrides(overrides)

    # model_copy(update=...) skips validation; model_validate coerces and
    # runs the field validators on the merged values.
    merged = defaults.model_dump()
    merged.update(overrides)
    try:
        return SizesetConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid override value: {exc}") from exc
