"""Configuration settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from memofix.errors import ConfigValidationError, ErrorContext

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class MemofixConfig(BaseSettings):
    """Configuration for running memofix groups."""

    model_config = SettingsConfigDict(
        env_prefix="MEMOFIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    fail_fast: bool = False
    log_level: str = "WARNING"
    trace_fixtures: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        level = str(v).strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                message=f"Invalid log level: {v}. Valid: {', '.join(VALID_LOG_LEVELS)}",
                field="log_level",
                value=v,
                context=ErrorContext(extra={"valid_levels": list(VALID_LOG_LEVELS)}),
            )
        return level


def load_config(config_path: str | Path | None = None) -> MemofixConfig:
    """Load configuration from file and environment.

    Priority: env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ConfigValidationError(
                    message=f"Config file must contain a mapping: {config_path}",
                    context=ErrorContext(extra={"path": str(config_path)}),
                )
            config_data = loaded

    config_data.update(_get_env_overrides())

    return MemofixConfig(**config_data)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "MEMOFIX_FAIL_FAST": ("fail_fast", _parse_bool),
        "MEMOFIX_LOG_LEVEL": "log_level",
        "MEMOFIX_TRACE_FIXTURES": ("trace_fixtures", _parse_bool),
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                overrides[key] = converter(value)
            else:
                overrides[config_key] = value

    return overrides


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")
