"""
Settings for the trigger engine.
"""

import zoneinfo
from datetime import timezone, tzinfo
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TriggerSettings(BaseSettings):
    """
    Engine-wide defaults, overridable through ``FLASH_TRIGGER_*`` environment
    variables or a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASH_TRIGGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    # --- Scheduling ---
    # Zone used for wall-clock fields when a scheduled config has no tz
    DEFAULT_TIMEZONE: str = "UTC"
    # Upper bound on the months walked by the monthly trigger
    MAX_MONTHLY_LOOKAHEAD: int = 24

    # --- Dataflow defaults ---
    DEFAULT_EXPIRE_UNIT: Literal["ms", "s", "min", "hour", "day"] = "hour"
    DEFAULT_EXPIRE_AMOUNT: int = 1
    DEFAULT_MAX_USE_TIMES: int = 3

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    @field_validator("DEFAULT_TIMEZONE")
    @classmethod
    def validate_timezone_name(cls, v: str) -> str:
        if v.upper() == "UTC":
            return v
        try:
            zoneinfo.ZoneInfo(v)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("MAX_MONTHLY_LOOKAHEAD")
    @classmethod
    def validate_lookahead(cls, v: int) -> int:
        """A skipped month must always leave room for the following one."""
        if v < 2:
            raise ValueError("MAX_MONTHLY_LOOKAHEAD must be at least 2.")
        return v

    @field_validator("DEFAULT_EXPIRE_AMOUNT", "DEFAULT_MAX_USE_TIMES")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    def default_timezone(self) -> tzinfo:
        if self.DEFAULT_TIMEZONE.upper() == "UTC":
            return timezone.utc
        return zoneinfo.ZoneInfo(self.DEFAULT_TIMEZONE)


# Singleton instance for engine use
trigger_settings = TriggerSettings()
