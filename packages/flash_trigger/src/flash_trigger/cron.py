"""
Five-field cron rendering of timer configurations.

The mapping is lossy in two places, both kept for compatibility with the
runtime that consumes these expressions:

- second intervals are rounded up to whole minutes;
- ``dayOfMonth = "last"`` renders as the non-standard ``L`` token.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from pydantic import BaseModel

from .schemas import (
    DailyScheduledConfig,
    HourlyScheduledConfig,
    IntervalTimerConfig,
    MonthlyScheduledConfig,
    TimerUnit,
    WeeklyScheduledConfig,
)

logger = logging.getLogger(__name__)


def to_cron(config: BaseModel) -> str:
    """
    Render a timer configuration as ``minute hour day-of-month month day-of-week``.

    Examples:
        >>> to_cron(IntervalTimerConfig(amount=15, unit="minute"))
        '*/15 * * * *'
        >>> to_cron(DailyScheduledConfig(time="09:00", days_of_week=[6, 7]))
        '0 9 * * 6,0'
        >>> to_cron(MonthlyScheduledConfig(time="08:05", day_of_month="last"))
        '5 8 L * *'
    """
    if isinstance(config, IntervalTimerConfig):
        return _interval_to_cron(config)
    if isinstance(config, HourlyScheduledConfig):
        if config.hourly_interval == 1:
            return f"{config.minute_of_hour} * * * *"
        return f"{config.minute_of_hour} */{config.hourly_interval} * * *"
    if isinstance(config, DailyScheduledConfig):
        hour, minute = config.time_of_day()
        days = config.days_of_week if config.weekday_filter() else []
        return f"{minute} {hour} * * {_cron_weekdays(days)}"
    if isinstance(config, WeeklyScheduledConfig):
        hour, minute = config.time_of_day()
        return f"{minute} {hour} * * {_cron_weekdays([config.day_of_week])}"
    if isinstance(config, MonthlyScheduledConfig):
        hour, minute = config.time_of_day()
        return f"{minute} {hour} {_cron_day_of_month(config.day_of_month)} * *"

    msg = f"Unsupported timer config: {type(config).__name__}"
    raise TypeError(msg)


def _interval_to_cron(config: IntervalTimerConfig) -> str:
    amount = config.amount
    if config.unit == TimerUnit.SECOND:
        minutes = max(1, math.ceil(amount / 60))
        logger.debug("Rounding %ds interval up to %d minute(s)", amount, minutes)
        return f"*/{minutes} * * * *"
    if config.unit == TimerUnit.MINUTE:
        return "* * * * *" if amount == 1 else f"*/{amount} * * * *"
    if config.unit == TimerUnit.HOUR:
        return f"0 */{amount} * * *"
    return f"0 0 */{amount} * *"


def _cron_weekdays(days: Iterable[int]) -> str:
    """ISO weekdays (7=Sunday) to a cron day-of-week field (0=Sunday)."""
    fields: list[str] = []
    for day in days:
        field = str(day % 7)
        if field not in fields:
            fields.append(field)
    return ",".join(fields) or "*"


def _cron_day_of_month(day_of_month: int | str) -> str:
    if day_of_month == "first":
        return "1"
    if day_of_month == "last":
        logger.debug("Rendering last day of month as non-standard 'L'")
        return "L"
    return str(day_of_month)
