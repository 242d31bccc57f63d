"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from .errors import ConfigError


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

DEFAULT_QUALITY_RANKS: dict[str, int] = {"A+": 3, "A": 2, "B": 1, "C": 0}


class EmotionConfig(BaseModel):
    min_tag_length: int = 2  # Shorter fragments are delimiter noise
    acronyms: list[str] = Field(default_factory=lambda: ["FOMO"])


class SetupQualityConfig(BaseModel):
    # Higher rank sorts first; grades missing from the table rank 0
    ranks: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_QUALITY_RANKS)
    )


class ReportConfig(BaseModel):
    decimal_places: int = 2
    max_cached_reports: int = 32


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

# Parsed config file for the load_settings call in progress
_file_values: ContextVar[dict[str, Any] | None] = ContextVar("_file_values", default=None)


class _ConfigFileSource(PydanticBaseSettingsSource):
    """Settings source serving the TOML file read by :func:`load_settings`."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return (_file_values.get() or {}).get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(_file_values.get() or {})


class AnalyticsSettings(BaseSettings):
    """Top-level analytics settings.

    Precedence, highest first: explicit overrides, environment variables,
    the TOML config file, field defaults.
    """

    emotions: EmotionConfig = Field(default_factory=EmotionConfig)
    setup_quality: SetupQualityConfig = Field(default_factory=SetupQualityConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "TRADE_JOURNAL_", "env_nested_delimiter": "__"}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            _ConfigFileSource(settings_cls),
            file_secret_settings,
        )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AnalyticsSettings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).  A missing
            file falls back to defaults.
        overrides: Values applied on top of both the file and the
            environment.  Nested sections are merged key by key.

    Raises:
        ConfigError: The file is not valid TOML or fails validation.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    token = _file_values.set(data)
    try:
        return AnalyticsSettings(**(overrides or {}))
    except ValidationError as exc:
        raise ConfigError(f"Invalid analytics settings: {exc}") from exc
    finally:
        _file_values.reset(token)
