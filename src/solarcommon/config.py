"""Configuration for solarcommon using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Library defaults, loaded from ``SOLARCOMMON_*`` environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="SOLARCOMMON_",
        env_file=str(_PACKAGE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = "INFO"
    log_json: bool = False

    # ------------------------------------------------------------------
    # JSON object mapper
    # ------------------------------------------------------------------
    json_serialization_inclusion: Literal["always", "non_null"] = "non_null"
    json_indent: int | None = None

    # ------------------------------------------------------------------
    # Dynamic service tracker
    # ------------------------------------------------------------------
    tracker_sticky: bool = False
    tracker_ignore_empty_property_filter_values: bool = True

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("json_indent")
    @classmethod
    def _check_indent(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError("SOLARCOMMON_JSON_INDENT must not be negative")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the cached Settings singleton."""
    return Settings()
