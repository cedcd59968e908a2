# src/catsa_janga/core/config.py
"""
Configuration schema and loading for catsa-janga.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import codecs
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class CheckpointSettings(BaseModel):
    """Where and how a checkpoint is written.

    Example YAML:
        checkpoint:
          path: ./progress.json
          indent: 2
          autosave_interval_seconds: 30
    """

    model_config = {"frozen": True, "extra": "forbid"}

    path: Path = Field(description="Checkpoint file path")
    indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="JSON indentation used when writing the checkpoint",
    )
    encoding: str = Field(default="utf-8", description="Text encoding of the checkpoint file")
    handle_shutdown: bool = Field(
        default=True,
        description="Save on SIGINT/SIGTERM and on uncaught errors before exiting",
    )
    autosave_interval_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Save every N seconds while autosave() runs",
    )

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Reject encodings Python does not know about."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown text encoding: {v!r}") from e
        return v


class LoggingSettings(BaseModel):
    """Log output configuration for entry points."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.upper()
        return v


class CatsaSettings(BaseModel):
    """Top-level settings document."""

    model_config = {"frozen": True, "extra": "forbid"}

    checkpoint: CheckpointSettings
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value


def load_settings(config_path: Path) -> CatsaSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence, highest first:
    1. Environment variables (CATSA_*), e.g. CATSA_LOGGING__LEVEL=DEBUG
    2. Config file
    3. Defaults from the Pydantic schema

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated CatsaSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="CATSA",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf upper-cases top-level keys (and nested keys that arrive via
    # environment variables) and mixes in its own bookkeeping
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return CatsaSettings(**raw_config)
