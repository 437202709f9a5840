"""Shift engine configuration loaded from environment variables."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ShiftEnv(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class Settings(BaseSettings):
    """Application settings loaded from environment variables with SHIFT_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="SHIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    env: ShiftEnv = ShiftEnv.DEV
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    structured_logging: bool = False

    # Planner
    report_extras: bool = False

    # DDL generation
    default_schema: str = "dbo"
    foreign_keys_with_nocheck: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{v}'.")
        return level

    @field_validator("default_schema")
    @classmethod
    def validate_schema_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("default_schema must not be empty.")
        return v.strip()


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info("Loaded settings for environment: %s", settings.env.value)

    return settings
