"""Configuration loading for caltime.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from caltime.core.julian import CALENDAR_STARTS
from caltime.core.models import Weekday


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv. Variables carry the
    CALTIME_ prefix, e.g. CALTIME_DEFAULT_WKST=SU.
    """

    model_config = SettingsConfigDict(
        env_prefix="CALTIME_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Calendar configuration
    calendar_start: Literal["italy", "england", "gregorian", "julian"] = Field(
        default="italy",
        description="Gregorian reform cutover used to interpret dates",
    )
    default_wkst: str = Field(
        default="MO",
        description="RFC 5545 weekday code weeks start on (SU, MO, ... SA)",
    )

    # Timezone configuration
    default_tzid: str = Field(
        default="UTC",
        description="TZID attached to timestamps that do not name one",
    )
    timezone_aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Mapping of non-IANA TZIDs to IANA timezone keys (JSON)",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    @field_validator("default_wkst")
    @classmethod
    def validate_default_wkst(cls, v: str) -> str:
        """Ensure the week start is a known weekday code."""
        return Weekday.parse(v).name

    @property
    def calendar_start_jd(self) -> float:
        """Julian day number of the configured reform cutover."""
        return CALENDAR_STARTS[self.calendar_start]

    @property
    def wkst(self) -> Weekday:
        return Weekday.parse(self.default_wkst)


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
