"""IntervalTrigger - Fires a fixed amount of time after the reference instant."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from .base import Trigger, ensure_aware

if TYPE_CHECKING:
    from flash_trigger.schemas import IntervalTimerConfig


class IntervalTrigger(Trigger):
    """
    Trigger that fires every ``amount`` ``unit``.

    Examples:
        >>> # Every 5 minutes
        >>> config = IntervalTimerConfig(amount=5, unit="minute")
        >>> trigger = IntervalTrigger(config)
        >>> trigger.next_fire_time(datetime(2024, 1, 1, tzinfo=timezone.utc))
        datetime.datetime(2024, 1, 1, 0, 5, tzinfo=datetime.timezone.utc)

    Args:
        config: IntervalTimerConfig
    """

    def __init__(self, config: IntervalTimerConfig):
        interval = config.to_timedelta()
        if interval <= timedelta(0):
            msg = "interval must be positive"
            raise ValueError(msg)
        self.interval = interval

    def next_fire_time(self, now: datetime) -> datetime:
        return ensure_aware(now).astimezone(timezone.utc) + self.interval
