"""Starting values the editor fills in for new trigger configurations."""

from __future__ import annotations

from typing import Dict

from .config import trigger_settings
from .matrix import allowed_error_kinds
from .schemas import (
    DailyScheduledConfig,
    DataflowErrorKind,
    ErrorPolicy,
    ExpireDuration,
    ExpireUnit,
    HourlyScheduledConfig,
    MonthlyScheduledConfig,
    RepeatMode,
    ScheduledTimerConfig,
    SkipPolicy,
    UsePreviousValuePolicy,
    ValueType,
    WeeklyScheduledConfig,
)

DEFAULT_TIME = "09:30"


def default_scheduled_config(repeat_mode: RepeatMode) -> ScheduledTimerConfig:
    """
    Examples:
        >>> default_scheduled_config(RepeatMode.WEEKLY).day_of_week
        1
    """
    repeat_mode = RepeatMode(repeat_mode)
    if repeat_mode == RepeatMode.HOURLY:
        return HourlyScheduledConfig(hourly_interval=1, minute_of_hour=0)
    if repeat_mode == RepeatMode.DAILY:
        return DailyScheduledConfig(time=DEFAULT_TIME, days_of_week=list(range(1, 8)))
    if repeat_mode == RepeatMode.WEEKLY:
        return WeeklyScheduledConfig(time=DEFAULT_TIME, day_of_week=1)
    return MonthlyScheduledConfig(time=DEFAULT_TIME, day_of_month=1)


def default_expire_duration() -> ExpireDuration:
    return ExpireDuration(
        unit=ExpireUnit(trigger_settings.DEFAULT_EXPIRE_UNIT),
        amount=trigger_settings.DEFAULT_EXPIRE_AMOUNT,
    )


def default_error_policies(value_type: ValueType) -> Dict[DataflowErrorKind, ErrorPolicy]:
    """A silent skip for every error kind ``value_type`` can surface."""
    return {kind: SkipPolicy() for kind in allowed_error_kinds(value_type)}


def default_use_previous_policy() -> UsePreviousValuePolicy:
    return UsePreviousValuePolicy(max_use_times=trigger_settings.DEFAULT_MAX_USE_TIMES)
