"""Configuration loading for result tracking tools."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from worktrace.domain.exceptions import ConfigurationError
from worktrace.domain.models import RenderOptions


class RenderSettings(BaseModel):
    """Default verbosity for rendered result trees."""

    include_detail: bool = False
    include_timings: bool = False
    failures_only: bool = False

    def to_options(self) -> RenderOptions:
        return RenderOptions(
            include_detail=self.include_detail,
            include_timings=self.include_timings,
            failures_only=self.failures_only,
        )


class TrackingConfig(BaseModel):
    """Top-level configuration, usually read from worktrace.json."""

    render: RenderSettings = Field(default_factory=RenderSettings)
    show_timer: bool = Field(
        default=False, description="Prefix task status lines with elapsed time"
    )
    results_dir: Path = Field(
        default=Path(".worktrace"), description="Root of the filesystem result store"
    )
    log_level: str = "INFO"
    log_file: Path | None = None

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level '{value}'")
        return level


def load_config(path: Path) -> TrackingConfig:
    """
    Load tracking configuration from a JSON file.

    Args:
        path: Path to the configuration file

    Returns:
        Validated TrackingConfig

    Raises:
        ConfigurationError: If the file is missing, not JSON, or invalid
    """
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected dict in {path}, got {type(data).__name__}")

    try:
        return TrackingConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e
