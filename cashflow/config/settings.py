"""
Configuration Management for Cashflow

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Every tunable threshold (budget warning, goal deadline window) and the
choice of storage backend live in one place and are validated on load.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CASHFLOW_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["memory", "file", "unavailable"] = Field(
        default="memory",
        description="Which key-value backend to use"
    )
    data_dir: Path = Field(
        default=Path(".cashflow"),
        description="Directory holding one file per key (file backend only)"
    )
    quota_bytes: Optional[int] = Field(
        default=None,
        ge=1,
        description="Optional size quota for the memory backend"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CASHFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_version: str = Field(
        default="0.2.0",
        description="Version written into full backups when none is stored"
    )

    # Thresholds
    budget_warning_percent: float = Field(
        default=80.0,
        ge=0.0,
        le=100.0,
        description="Usage percentage above which a budget shows a warning"
    )
    goal_near_deadline_days: int = Field(
        default=30,
        ge=0,
        description="Days before the deadline a goal counts as near deadline"
    )

    seed_default_goals: bool = Field(
        default=True,
        description="Show the two example goals on a fresh install"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False for console output)"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept any case, store upper case."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()

