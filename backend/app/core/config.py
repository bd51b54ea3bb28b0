# backend/app/core/config.py
"""
Application settings.

Values come from environment variables (or a local ``.env`` file). All
wall-clock scheduling logic runs in ``pickup_timezone``; storage is UTC.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development", description="Deployment environment name")
    database_url: str = Field(
        default="sqlite:///./pickups.db",
        description="SQLAlchemy database URL",
    )
    pickup_timezone: str = Field(
        default="Europe/Stockholm",
        description="IANA zone used for all opening hours and day boundaries",
    )
    default_slot_duration_minutes: int = Field(default=15, ge=1, le=240)
    log_level: str = Field(default="INFO")
    is_testing: bool = Field(default=False)

    @field_validator("pickup_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
