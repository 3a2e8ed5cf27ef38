"""DailyTrigger - Fires once a day, optionally on selected weekdays only."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from flash_trigger.config import trigger_settings

from .base import Trigger, ensure_aware

if TYPE_CHECKING:
    from flash_trigger.schemas import DailyScheduledConfig


class DailyTrigger(Trigger):
    """
    Trigger that fires every day at ``time``.

    Examples:
        >>> # Weekends at 09:00
        >>> config = DailyScheduledConfig(time="09:00", days_of_week=[6, 7])
        >>> trigger = DailyTrigger(config)

    Args:
        config: DailyScheduledConfig. ``days_of_week`` uses ISO numbering
            (1=Monday ... 7=Sunday); empty or all seven means every day.
    """

    def __init__(self, config: DailyScheduledConfig):
        if any(not 1 <= day <= 7 for day in config.days_of_week):
            msg = "days_of_week must be between 1 (Monday) and 7 (Sunday)"
            raise ValueError(msg)
        self.hour, self.minute = config.time_of_day()
        self.days_of_week = config.weekday_filter()
        self.tz = config.tz or trigger_settings.default_timezone()

    def next_fire_time(self, now: datetime) -> datetime:
        local_now = ensure_aware(now).astimezone(self.tz)

        candidate = local_now.replace(
            hour=self.hour,
            minute=self.minute,
            second=0,
            microsecond=0,
        )
        if candidate <= local_now:
            candidate += timedelta(days=1)

        if self.days_of_week:
            while candidate.isoweekday() not in self.days_of_week:
                candidate += timedelta(days=1)

        return candidate.astimezone(timezone.utc)
