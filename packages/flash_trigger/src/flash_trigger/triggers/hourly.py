"""HourlyTrigger - Fires at a fixed minute of every n-th hour."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from flash_trigger.config import trigger_settings

from .base import Trigger, ensure_aware

if TYPE_CHECKING:
    from flash_trigger.schemas import HourlyScheduledConfig


class HourlyTrigger(Trigger):
    """
    Trigger that fires at ``minute_of_hour`` on hours divisible by
    ``hourly_interval`` (counted from midnight, like cron's ``*/n``).

    Examples:
        >>> # 00:15, 06:15, 12:15, 18:15
        >>> config = HourlyScheduledConfig(hourly_interval=6, minute_of_hour=15)
        >>> trigger = HourlyTrigger(config)

    Args:
        config: HourlyScheduledConfig
    """

    def __init__(self, config: HourlyScheduledConfig):
        if not 1 <= config.hourly_interval <= 24:
            msg = "hourly_interval must be between 1 and 24"
            raise ValueError(msg)
        if not 0 <= config.minute_of_hour <= 59:
            msg = "minute_of_hour must be between 0 and 59"
            raise ValueError(msg)
        self.hourly_interval = config.hourly_interval
        self.minute_of_hour = config.minute_of_hour
        self.tz = config.tz or trigger_settings.default_timezone()

    def next_fire_time(self, now: datetime) -> datetime:
        local_now = ensure_aware(now).astimezone(self.tz)

        candidate = local_now.replace(
            minute=self.minute_of_hour,
            second=0,
            microsecond=0,
        )
        if candidate <= local_now:
            candidate += timedelta(hours=1)

        # Walk forward to an aligned hour; bounded by one day
        while candidate.hour % self.hourly_interval:
            candidate += timedelta(hours=1)

        return candidate.astimezone(timezone.utc)
