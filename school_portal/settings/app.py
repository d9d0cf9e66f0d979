"""Application settings powered by Pydantic BaseSettings."""

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from school_portal.ranker.constants import AveragePolicy


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    access_policy_path: Path | None = Field(
        default=None, validation_alias="ACCESS_POLICY_PATH"
    )
    ranking_config_path: Path | None = Field(
        default=None, validation_alias="RANKING_CONFIG_PATH"
    )
    average_policy: AveragePolicy = Field(
        default=AveragePolicy.FIXED, validation_alias="AVERAGE_POLICY"
    )
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def logging_level(self) -> int:
        """Return the numeric logging level, defaulting to INFO."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
