"""WeeklyTrigger - Fires once a week on a fixed weekday."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from flash_trigger.config import trigger_settings

from .base import Trigger, ensure_aware

if TYPE_CHECKING:
    from flash_trigger.schemas import WeeklyScheduledConfig


class WeeklyTrigger(Trigger):
    """
    Trigger that fires on ISO weekday ``day_of_week`` at ``time``.

    Examples:
        >>> # Fridays at 17:30
        >>> config = WeeklyScheduledConfig(time="17:30", day_of_week=5)
        >>> trigger = WeeklyTrigger(config)
    """

    def __init__(self, config: WeeklyScheduledConfig):
        if not 1 <= config.day_of_week <= 7:
            msg = "day_of_week must be between 1 (Monday) and 7 (Sunday)"
            raise ValueError(msg)
        self.hour, self.minute = config.time_of_day()
        self.day_of_week = config.day_of_week
        self.tz = config.tz or trigger_settings.default_timezone()

    def next_fire_time(self, now: datetime) -> datetime:
        local_now = ensure_aware(now).astimezone(self.tz)

        candidate = local_now.replace(
            hour=self.hour,
            minute=self.minute,
            second=0,
            microsecond=0,
        )
        offset = (self.day_of_week - local_now.isoweekday()) % 7
        if offset == 0 and candidate <= local_now:
            offset = 7

        return (candidate + timedelta(days=offset)).astimezone(timezone.utc)
